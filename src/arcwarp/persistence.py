"""Plain records of curved text objects and their reconstruction."""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

from arcwarp.common import (
    DEFAULT_FILL,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_TEXT,
    OriginX,
    OriginY,
    clamp_intensity,
)
from arcwarp.curved_text import AwCurvedText
from arcwarp.errors import InvalidRecordError
from arcwarp.glyph_source import AwGlyphSource
from arcwarp.measure import AwTextMeasurer
from arcwarp.vector import AwVectorExporter

logger = logging.getLogger(__name__)

RECORD_TYPE = "CurvedText"
CURRENT_VERSION = 1

T = TypeVar("T")


def serialize(obj: AwCurvedText, exporter: Optional[AwVectorExporter] = None) -> Dict[str, Any]:
    """
    Record with every content, style, curve and transform field of _obj_.

    "pathData" holds the vector outline (any intensity) when outlines are available,
    else the path data the object was restored with (if still valid), else None.
    """
    exporter = exporter if exporter is not None else AwVectorExporter()
    path_data = exporter.outline_path_data(obj)
    if path_data is None:
        path_data = obj.persisted_path_data()
    return {
        "type": RECORD_TYPE,
        "version": CURRENT_VERSION,
        "text": obj.text,
        "fontFamily": obj.font_family,
        "fontReference": obj.font_reference,
        "fontSize": obj.font_size,
        "fontWeight": obj.font_weight,
        "fontStyle": obj.font_style,
        "fill": obj.fill,
        "stroke": obj.stroke,
        "strokeWidth": obj.stroke_width,
        "charSpacing": obj.char_spacing,
        "curveIntensity": obj.curve_intensity,
        "left": obj.left,
        "top": obj.top,
        "width": obj.width,
        "height": obj.height,
        "originX": obj.origin_x.value,
        "originY": obj.origin_y.value,
        "angle": obj.angle,
        "scaleX": obj.scale_x,
        "scaleY": obj.scale_y,
        "opacity": obj.opacity,
        "pathData": path_data,
    }


###############################################################################
# Field readers
###############################################################################


def _field(record: Mapping[str, Any], key: str, default: T, convert: Callable[[Any], T]) -> T:
    if key not in record or record[key] is None:
        return default
    try:
        return convert(record[key])
    except (TypeError, ValueError, OverflowError) as e:
        logger.debug("Invalid %s=%r in record, using %r: %s", key, record[key], default, e)
        return default


def _finite(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("not finite")
    return number


def _positive(value: Any) -> float:
    number = _finite(value)
    if number <= 0:
        raise ValueError("not positive")
    return number


def _non_negative(value: Any) -> float:
    number = _finite(value)
    if number < 0:
        raise ValueError("negative")
    return number


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _weight(value: Any):
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    raise TypeError(f"expected a string or number, got {type(value).__name__}")


def _intensity(value: Any) -> int:
    return clamp_intensity(_finite(value))


def _version(value: Any) -> int:
    return int(_finite(value))


###############################################################################
# Deserialization
###############################################################################


def deserialize(
    record: Any,
    glyph_source: Optional[AwGlyphSource] = None,
    measurer: Optional[AwTextMeasurer] = None,
) -> AwCurvedText:
    """
    Curved text object restored from a record.

    Missing or invalid fields get safe defaults. A record that is no mapping at all
    gives the default placeholder object. Persisted width/height are kept until the
    object's next change.
    """
    if not isinstance(record, Mapping):
        logger.debug("Record is not a mapping (%s), using placeholder", type(record).__name__)
        return AwCurvedText(glyph_source=glyph_source, measurer=measurer)

    if record.get("type", RECORD_TYPE) != RECORD_TYPE:
        logger.debug("Unexpected record type %r, reading it as %s", record.get("type"), RECORD_TYPE)
    version = _field(record, "version", CURRENT_VERSION, _version)
    if version > CURRENT_VERSION:
        logger.debug("Record version %d is newer than %d", version, CURRENT_VERSION)

    width = _field(record, "width", None, _non_negative)
    height = _field(record, "height", None, _non_negative)
    return AwCurvedText(
        text=_field(record, "text", DEFAULT_TEXT, _string),
        font_family=_field(record, "fontFamily", DEFAULT_FONT_FAMILY, _string) or DEFAULT_FONT_FAMILY,
        font_reference=_field(record, "fontReference", None, _string) or None,
        font_size=_field(record, "fontSize", DEFAULT_FONT_SIZE, _positive),
        font_weight=_field(record, "fontWeight", "normal", _weight),
        font_style=_field(record, "fontStyle", "normal", _string),
        fill=_field(record, "fill", DEFAULT_FILL, _string),
        stroke=_field(record, "stroke", "", _string),
        stroke_width=_field(record, "strokeWidth", 0.0, _non_negative),
        char_spacing=_field(record, "charSpacing", 0.0, _finite),
        curve_intensity=_field(record, "curveIntensity", 0, _intensity),
        left=_field(record, "left", 0.0, _finite),
        top=_field(record, "top", 0.0, _finite),
        width=width,
        height=height,
        origin_x=_field(record, "originX", OriginX.CENTER, OriginX),
        origin_y=_field(record, "originY", OriginY.CENTER, OriginY),
        angle=_field(record, "angle", 0.0, _finite),
        scale_x=_field(record, "scaleX", 1.0, _finite),
        scale_y=_field(record, "scaleY", 1.0, _finite),
        opacity=min(1.0, _field(record, "opacity", 1.0, _non_negative)),
        glyph_source=glyph_source,
        measurer=measurer,
        from_persisted_state=True,
        path_data=_field(record, "pathData", None, _string),
    )


def deserialize_strict(
    record: Any,
    glyph_source: Optional[AwGlyphSource] = None,
    measurer: Optional[AwTextMeasurer] = None,
    index: Optional[int] = None,
) -> AwCurvedText:
    """
    Like deserialize(), but rejects records that are no curved text records.

    Raises:
        InvalidRecordError: if the record is no mapping, has another type or lacks text.
    """
    if not isinstance(record, Mapping):
        raise InvalidRecordError(f"expected a mapping, got {type(record).__name__}", index)
    if record.get("type") != RECORD_TYPE:
        raise InvalidRecordError(f"expected type {RECORD_TYPE!r}, got {record.get('type')!r}", index)
    if not isinstance(record.get("text"), str):
        raise InvalidRecordError("missing text", index)
    return deserialize(record, glyph_source, measurer)


def serialize_design(
    objects: Iterable[AwCurvedText], exporter: Optional[AwVectorExporter] = None
) -> List[Dict[str, Any]]:
    """Records of several objects."""
    exporter = exporter if exporter is not None else AwVectorExporter()
    return [serialize(obj, exporter) for obj in objects]


def deserialize_design(
    records: Any,
    glyph_source: Optional[AwGlyphSource] = None,
    measurer: Optional[AwTextMeasurer] = None,
) -> List[AwCurvedText]:
    """
    Objects of a list of records. A corrupt record becomes a placeholder object,
    it never aborts loading the others.
    """
    if not isinstance(records, (list, tuple)):
        logger.debug("Design is not a list (%s), nothing to load", type(records).__name__)
        return []
    return [deserialize(record, glyph_source, measurer) for record in records]


def main():
    """Main"""
    logging.basicConfig(level=logging.DEBUG)
    text = AwCurvedText("HELLO", curve_intensity=70)
    record = serialize(text)
    print(record)
    restored = deserialize(record)
    print(restored, restored.width, restored.height, restored.bounds.tier)
    print(deserialize_design([record, "garbage", {"curveIntensity": "x"}]))


if __name__ == "__main__":
    main()

"""The curved text object: text, style and curve state with lazily derived bounds."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Protocol, Tuple, Union

from arcwarp.arc import AwArcParameters, solve_arc
from arcwarp.bounds import AwBounds, compute_bounds
from arcwarp.common import (
    DEFAULT_FILL,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_TEXT,
    AwPaint,
    BoundsTier,
    OriginX,
    OriginY,
    clamp_intensity,
    line_height,
)
from arcwarp.font import AwFont
from arcwarp.geom import AwBox, GeomMath
from arcwarp.glyph_source import NOT_RESOLVED, AwGlyphSource, OutlineAvailable, OutlineState
from arcwarp.measure import AwPilTextMeasurer, AwTextMeasurer
from arcwarp.path import AwPath
from arcwarp.warp import AwPlacedCharacter, AwWarpedText, layout_outline_text, measure_run, place_fallback_characters

if TYPE_CHECKING:
    from arcwarp.canvas import AwCanvasHost

logger = logging.getLogger(__name__)

FontWeight = Union[str, int, float]

ORIGIN_X_FACTORS = {OriginX.LEFT: 0.5, OriginX.CENTER: 0.0, OriginX.RIGHT: -0.5}
ORIGIN_Y_FACTORS = {OriginY.TOP: 0.5, OriginY.CENTER: 0.0, OriginY.BOTTOM: -0.5}


def anchor_to_center(
    left: float,
    top: float,
    width: float,
    height: float,
    origin_x: OriginX,
    origin_y: OriginY,
    angle: float,
    scale_x: float,
    scale_y: float,
) -> Tuple[float, float]:
    """Host coordinates of an object's center, given its anchor point (left, top) and origin."""
    offset_x = ORIGIN_X_FACTORS[origin_x] * width * scale_x
    offset_y = ORIGIN_Y_FACTORS[origin_y] * height * scale_y
    return GeomMath.transform_point(GeomMath.rotate_scale_trafo(angle, 1.0, 1.0, left, top), (offset_x, offset_y))


###############################################################################
# Plain text objects
###############################################################################


class AwTextObject(Protocol):
    """Plain (straight) text object of the host canvas that can be converted to curved text."""

    text: str
    font_family: str
    font_size: float
    font_weight: FontWeight
    font_style: str
    fill: str
    stroke: str
    stroke_width: float
    char_spacing: float
    angle: float
    scale_x: float
    scale_y: float
    opacity: float

    def get_center_point(self) -> Tuple[float, float]:
        """Center of the object in host coordinates."""
        ...  # pylint: disable=unnecessary-ellipsis


@dataclass
class AwPlainText:
    """Minimal straight text object, e.g. as handed over by a host canvas."""

    text: str = DEFAULT_TEXT
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = DEFAULT_FONT_SIZE
    font_weight: FontWeight = "normal"
    font_style: str = "normal"
    fill: str = DEFAULT_FILL
    stroke: str = ""
    stroke_width: float = 0.0
    char_spacing: float = 0.0
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0
    origin_x: OriginX = OriginX.LEFT
    origin_y: OriginY = OriginY.TOP
    angle: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    opacity: float = 1.0

    def get_center_point(self) -> Tuple[float, float]:
        """Center of the text in host coordinates."""
        return anchor_to_center(
            self.left,
            self.top,
            self.width,
            self.height,
            self.origin_x,
            self.origin_y,
            self.angle,
            self.scale_x,
            self.scale_y,
        )


###############################################################################
# AwCurvedText
###############################################################################


class AwCurvedText:
    """
    Text bent along a circular arc, as one object of a host canvas.

    Content and style are changed through the set_* methods only. Every change
    invalidates the memoized width/height (recomputed lazily on the next read)
    and asks the host to redraw. An object restored from persisted state keeps
    the persisted width/height until its next change.
    """

    def __init__(
        self,
        text: str = DEFAULT_TEXT,
        font_family: str = DEFAULT_FONT_FAMILY,
        font_reference: Optional[str] = None,
        font_size: float = DEFAULT_FONT_SIZE,
        font_weight: FontWeight = "normal",
        font_style: str = "normal",
        fill: str = DEFAULT_FILL,
        stroke: str = "",
        stroke_width: float = 0.0,
        char_spacing: float = 0.0,
        curve_intensity: float = 0,
        left: float = 0.0,
        top: float = 0.0,
        width: Optional[float] = None,
        height: Optional[float] = None,
        origin_x: OriginX = OriginX.CENTER,
        origin_y: OriginY = OriginY.CENTER,
        angle: float = 0.0,
        scale_x: float = 1.0,
        scale_y: float = 1.0,
        opacity: float = 1.0,
        glyph_source: Optional[AwGlyphSource] = None,
        measurer: Optional[AwTextMeasurer] = None,
        from_persisted_state: bool = False,
        path_data: Optional[str] = None,
    ) -> None:
        self.text = text
        self.font_family = font_family
        self.font_reference = font_reference
        self.font_size = float(font_size)
        self.font_weight = font_weight
        self.font_style = font_style
        self.fill = fill
        self.stroke = stroke
        self.stroke_width = float(stroke_width)
        self.char_spacing = float(char_spacing)
        self.curve_intensity = clamp_intensity(curve_intensity)

        self.left = float(left)
        self.top = float(top)
        self.origin_x = origin_x
        self.origin_y = origin_y
        self.angle = float(angle)
        self.scale_x = float(scale_x)
        self.scale_y = float(scale_y)
        self.opacity = float(opacity)

        self.host: Optional[AwCanvasHost] = None
        self.dirty = True
        self._glyph_source = glyph_source
        self._measurer = measurer
        self._outline: OutlineState = NOT_RESOLVED
        self._destroyed = False
        self._editing = False

        # size given at construction, used when nothing can be measured
        self._initial_width = width
        self._persisted_size: Optional[Tuple[float, float]] = None
        self._persisted_path_data: Optional[str] = None
        self._persisted_path: Optional[AwPath] = None
        if from_persisted_state and width is not None and height is not None:
            self._persisted_size = (float(width), float(height))
            if path_data:
                self._restore_path(path_data)

        self._bounds_key: Optional[tuple] = None
        self._bounds: Optional[AwBounds] = None
        self._layout_key: Optional[tuple] = None
        self._layout: Optional[AwWarpedText] = None

        self._sync_outline()

    ###########################################################################
    # Font and outline state
    ###########################################################################

    @property
    def font_key(self) -> str:
        """Key the font is resolved by: the explicit reference if present, else the family."""
        return AwGlyphSource.font_key(self.font_family, self.font_reference)

    @property
    def glyph_source(self) -> Optional[AwGlyphSource]:
        """Glyph source used by load_outline()."""
        return self._glyph_source

    @property
    def outline(self) -> OutlineState:
        """Current outline state of the font."""
        return self._outline

    @property
    def measurer(self) -> AwTextMeasurer:
        """Generic text measurement used without outlines."""
        if self._measurer is None:
            self._measurer = AwPilTextMeasurer(self.font_family)
        return self._measurer

    def _sync_outline(self) -> None:
        """Take the outline state from the glyph source's cache (no resolution is started)."""
        if self._glyph_source is None:
            return
        self._outline = self._glyph_source.outline_state(self.font_key, self.font_weight)

    def _font(self) -> Optional[AwFont]:
        if isinstance(self._outline, OutlineAvailable):
            return self._outline.font
        return None

    async def load_outline(self, glyph_source: Optional[AwGlyphSource] = None) -> OutlineState:
        """
        Resolve the font outlines and redraw once they are known.

        On completion the object is marked dirty and exactly one redraw is requested.
        If the object was destroyed, or its font changed while resolving, the result is not applied.
        """
        if glyph_source is not None:
            self._glyph_source = glyph_source
        if self._glyph_source is None:
            raise ValueError("No glyph source to load outlines from")

        font_key = self.font_key
        font_weight = self.font_weight
        state = await self._glyph_source.resolve_outline(font_key, font_weight)
        if self._destroyed:
            logger.debug("Outline for %r resolved after destroy, ignored", font_key)
            return state
        if font_key != self.font_key or font_weight != self.font_weight:
            logger.debug("Font changed while resolving %r, ignored", font_key)
            return state

        self._outline = state
        self.dirty = True
        self._request_render()
        return state

    ###########################################################################
    # Derived state
    ###########################################################################

    def _state_key(self) -> tuple:
        font = self._font()
        return (
            self.text,
            id(font) if font is not None else self.font_key,
            self.font_size,
            self.font_weight,
            self.font_style,
            self.char_spacing,
            self.curve_intensity,
            font is not None,
        )

    @property
    def bounds(self) -> AwBounds:
        """Width, height and the computation they come from."""
        if self._persisted_size is not None:
            return AwBounds(self._persisted_size[0], self._persisted_size[1], BoundsTier.PERSISTED)
        key = self._state_key()
        if self._bounds is None or key != self._bounds_key:
            self._bounds = compute_bounds(
                self.text,
                self.font_size,
                self.char_spacing,
                self.curve_intensity,
                self._outline,
                self.measurer,
                self._initial_width,
            )
            self._bounds_key = key
        return self._bounds

    @property
    def width(self) -> float:
        """Width in local (pre-scale, pre-rotation) units."""
        return self.bounds.width

    @property
    def height(self) -> float:
        """Height in local (pre-scale, pre-rotation) units."""
        return self.bounds.height

    @property
    def is_from_persisted_state(self) -> bool:
        """True until the first change after restoring from a record."""
        return self._persisted_size is not None

    def persisted_path_data(self) -> Optional[str]:
        """Path data of the record this object was restored from, while unchanged."""
        return self._persisted_path_data

    def persisted_path(self) -> Optional[AwPath]:
        """Outline parsed from the persisted path data, while unchanged."""
        return self._persisted_path

    def _restore_path(self, path_data: str) -> None:
        try:
            self._persisted_path = AwPath.from_svg_path_string(path_data)
        except (ValueError, IndexError) as e:
            logger.warning("Ignoring unusable path data of %r: %s", self.text, e)
            return
        self._persisted_path_data = path_data

    def flat_width(self) -> float:
        """Width of the text laid out straight."""
        font = self._font()
        if font is not None:
            return font.measure_text(self.text, self.font_size, self.char_spacing)
        return measure_run(self.text, self.measurer, self.font_size, self.char_spacing)

    def is_straight(self) -> bool:
        """True if the text is drawn flat (zero intensity, degenerate sweep or empty text)."""
        if self.curve_intensity == 0:
            return True
        return not isinstance(solve_arc(self.flat_width(), self.curve_intensity), AwArcParameters)

    def outline_layout(self) -> Optional[AwWarpedText]:
        """Warped (or flat) glyph outlines in local coordinates, None without outlines."""
        font = self._font()
        if font is None:
            return None
        key = self._state_key()
        if self._layout is None or key != self._layout_key:
            self._layout = layout_outline_text(
                self.text, font, self.font_size, self.char_spacing, self.curve_intensity
            )
            self._layout_key = key
        return self._layout

    def fallback_characters(self) -> list[AwPlacedCharacter]:
        """Characters placed as whole units on the arc (used without outlines)."""
        return place_fallback_characters(
            self.text, self.measurer, self.font_size, self.char_spacing, self.curve_intensity
        )

    @property
    def paint(self) -> AwPaint:
        """Fill, stroke and opacity."""
        return AwPaint(self.fill, self.stroke, self.stroke_width, self.opacity)

    @property
    def scale_factor(self) -> float:
        """Uniform scale equivalent to (scale_x, scale_y)."""
        return math.sqrt(abs(self.scale_x * self.scale_y))

    ###########################################################################
    # Host object model
    ###########################################################################

    def get_center_point(self) -> Tuple[float, float]:
        """Center of the object in host coordinates."""
        return anchor_to_center(
            self.left,
            self.top,
            self.width,
            self.height,
            self.origin_x,
            self.origin_y,
            self.angle,
            self.scale_x,
            self.scale_y,
        )

    def host_trafo(self) -> Tuple[float, float, float, float, float, float]:
        """Affine transformation from local coordinates (origin at the center) to host coordinates."""
        center_x, center_y = self.get_center_point()
        return GeomMath.rotate_scale_trafo(self.angle, self.scale_x, self.scale_y, center_x, center_y)

    def get_bounding_rect(self) -> AwBox:
        """
        Axis-aligned rectangle in host coordinates after scale and rotation.
        Uses the measured local box where known, else a box centered on the origin.
        """
        bounds = self.bounds
        box = bounds.box
        if box is None:
            box = AwBox(-bounds.width / 2, -bounds.height / 2, bounds.width / 2, bounds.height / 2)
        return box.transform_affine(self.host_trafo())

    @property
    def is_destroyed(self) -> bool:
        """True once the object was removed from its host."""
        return self._destroyed

    def destroy(self) -> None:
        """Tear down the object; pending outline resolutions are ignored afterwards."""
        self._destroyed = True
        self._editing = False
        self.host = None

    def _request_render(self) -> None:
        if self.host is not None and not self._destroyed:
            self.host.request_render_all()

    def _changed(self, geometry: bool = True) -> None:
        if geometry:
            self._persisted_size = None
            self._persisted_path_data = None
            self._persisted_path = None
            self._bounds = None
            self._layout = None
        self.dirty = True
        self._request_render()

    ###########################################################################
    # Setters
    ###########################################################################

    def set_text(self, text: str) -> None:
        """Replace the text."""
        self.text = text
        self._changed()

    def set_curve(self, intensity: float) -> None:
        """Set the curve intensity (clamped to [-100, 100])."""
        self.curve_intensity = clamp_intensity(intensity)
        self._changed()

    def set_font(self, font_family: str, font_reference: Optional[str] = None) -> None:
        """Change the font; outlines of the new font are taken from the cache if already resolved."""
        self.font_family = font_family
        self.font_reference = font_reference
        if isinstance(self._measurer, AwPilTextMeasurer):
            self._measurer = None
        self._outline = NOT_RESOLVED
        self._sync_outline()
        self._changed()

    def set_font_size(self, font_size: float) -> None:
        """Set the font size (pixels)."""
        if not font_size > 0:
            raise ValueError(f"font_size must be positive, got {font_size}")
        self.font_size = float(font_size)
        self._changed()

    def set_font_weight(self, font_weight: FontWeight) -> None:
        """Set the font weight ("normal", "bold" or a number)."""
        self.font_weight = font_weight
        self._sync_outline()
        self._changed()

    def set_font_style(self, font_style: str) -> None:
        """Set the font style ("normal", "italic")."""
        self.font_style = font_style
        self._changed()

    def set_char_spacing(self, char_spacing: float) -> None:
        """Set the letter spacing in 1/1000 em."""
        self.char_spacing = float(char_spacing)
        self._changed()

    def set_fill(self, fill: str) -> None:
        """Set the fill color (the bounds stay valid)."""
        self.fill = fill
        self._changed(geometry=False)

    def set_stroke(self, stroke: str, stroke_width: Optional[float] = None) -> None:
        """Set the stroke color and optionally its width."""
        self.stroke = stroke
        if stroke_width is not None:
            if stroke_width < 0:
                raise ValueError(f"stroke_width must not be negative, got {stroke_width}")
            self.stroke_width = float(stroke_width)
        self._changed(geometry=False)

    def update_bounds(self) -> None:
        """Recompute the bounds, dropping persisted dimensions."""
        self._changed()

    ###########################################################################
    # Editing
    ###########################################################################

    @property
    def is_editing(self) -> bool:
        """True while the host shows a text-entry overlay for this object."""
        return self._editing

    def enter_editing(self) -> bool:
        """Start editing. Returns False if already editing or destroyed."""
        if self._editing or self._destroyed:
            return False
        self._editing = True
        self._changed(geometry=False)
        return True

    def exit_editing(self, final_text: Optional[str] = None) -> None:
        """Stop editing and apply the final text of the overlay (None keeps the text)."""
        if not self._editing:
            return
        self._editing = False
        if final_text is not None and final_text != self.text:
            self.set_text(final_text)
        else:
            self._changed(geometry=False)

    def editing_rect(self, zoom: float = 1.0, viewport: Tuple[float, ...] = (1, 0, 0, 1, 0, 0)) -> AwBox:
        """Screen rectangle for a text-entry overlay under the host's zoom and viewport translation."""
        center_x, center_y = self.get_center_point()
        screen_x = center_x * zoom + viewport[4]
        screen_y = center_y * zoom + viewport[5]
        half_width, half_height = self.width * zoom / 2, self.height * zoom / 2
        return AwBox(screen_x - half_width, screen_y - half_height, screen_x + half_width, screen_y + half_height)

    ###########################################################################
    # Construction
    ###########################################################################

    @classmethod
    def from_text_object(
        cls,
        source: AwTextObject,
        curve_intensity: float = 0,
        glyph_source: Optional[AwGlyphSource] = None,
        measurer: Optional[AwTextMeasurer] = None,
    ) -> AwCurvedText:
        """Curved text replacing a plain text object, centered on the source's center point."""
        center_x, center_y = source.get_center_point()
        return cls(
            text=source.text or DEFAULT_TEXT,
            font_family=source.font_family or DEFAULT_FONT_FAMILY,
            font_size=source.font_size or DEFAULT_FONT_SIZE,
            font_weight=source.font_weight or "normal",
            font_style=source.font_style or "normal",
            fill=source.fill or DEFAULT_FILL,
            stroke=source.stroke or "",
            stroke_width=source.stroke_width or 0.0,
            char_spacing=source.char_spacing or 0.0,
            curve_intensity=curve_intensity,
            left=center_x,
            top=center_y,
            origin_x=OriginX.CENTER,
            origin_y=OriginY.CENTER,
            angle=source.angle or 0.0,
            scale_x=source.scale_x or 1.0,
            scale_y=source.scale_y or 1.0,
            opacity=1.0 if source.opacity is None else source.opacity,
            glyph_source=glyph_source,
            measurer=measurer,
        )

    def __repr__(self) -> str:
        return (
            f"AwCurvedText({self.text!r}, font={self.font_key!r}, size={self.font_size:g}, "
            f"curve={self.curve_intensity})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Record of the object (see arcwarp.persistence)."""
        # pylint: disable=import-outside-toplevel
        from arcwarp.persistence import serialize

        return serialize(self)


def main():
    """Main"""
    logging.basicConfig(level=logging.DEBUG)
    text = AwCurvedText("HELLO", curve_intensity=50, left=200, top=100)
    print(text, text.bounds)
    text.set_curve(-50)
    print(text, text.bounds, line_height(text.font_size))


if __name__ == "__main__":
    main()

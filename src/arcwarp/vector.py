"""Vector (SVG) export of curved text objects with svgwrite."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional, Sequence

import svgwrite
import svgwrite.container
import svgwrite.text

from arcwarp.common import PATH_DECIMALS, AwPaint, spacing_to_units
from arcwarp.geom import AwBox
from arcwarp.svgpath import AwSvgPath
from arcwarp.warp import AwPlacedCharacter

if TYPE_CHECKING:
    from arcwarp.curved_text import AwCurvedText

logger = logging.getLogger(__name__)


class AwVectorExporter:
    """
    Serializes curved text objects into SVG group fragments.

    The group carries the object's transform and opacity; inside it the warped
    outline is written as one path (coordinates with at most `decimals` decimal
    places), or as text markup where no outline can be written.
    """

    def __init__(self, decimals: int = PATH_DECIMALS, text_as_path: bool = False) -> None:
        """
        Args:
            decimals: maximum number of decimal places of path coordinates
            text_as_path: write straight text as outline path too (if outlines are available)
        """
        self.decimals = decimals
        self.text_as_path = text_as_path
        # element factory only, nothing is written to this drawing
        self._factory = svgwrite.Drawing(profile="full")

    def fmt(self, value: float) -> str:
        """Format a number for attributes and transforms."""
        return AwSvgPath.format_number(value, self.decimals)

    def group_transform(self, obj: AwCurvedText) -> str:
        """Transform attribute mapping object-local coordinates to host coordinates."""
        center_x, center_y = obj.get_center_point()
        return (
            f"translate({self.fmt(center_x)} {self.fmt(center_y)}) "
            f"rotate({self.fmt(obj.angle)}) "
            f"scale({self.fmt(obj.scale_x)} {self.fmt(obj.scale_y)})"
        )

    def _paint_attributes(self, paint: AwPaint) -> Dict[str, str]:
        attributes = {"fill": paint.fill if paint.has_fill else "none"}
        if paint.has_stroke:
            attributes["stroke"] = paint.stroke
            attributes["stroke_width"] = self.fmt(paint.stroke_width)
        return attributes

    def _font_attributes(self, obj: AwCurvedText) -> Dict[str, str]:
        attributes = {
            "font_family": obj.font_family,
            "font_size": self.fmt(obj.font_size),
            "font_weight": str(obj.font_weight),
            "font_style": obj.font_style,
            "text_anchor": "middle",
            "dominant_baseline": "central",
        }
        return attributes

    def path_data(self, obj: AwCurvedText) -> Optional[str]:
        """
        Path data of the object's outline in object-local coordinates.

        Straight text yields path data only with text_as_path.
        Returns None if no outline is available.
        """
        layout = obj.outline_layout()
        if layout is None:
            return obj.persisted_path_data()
        if layout.is_straight and not self.text_as_path:
            return None
        return layout.path.svg_path_string(self.decimals)

    def outline_path_data(self, obj: AwCurvedText) -> Optional[str]:
        """Path data of the outline for any intensity (used for persisting), or None."""
        layout = obj.outline_layout()
        if layout is None:
            return None
        return layout.path.svg_path_string(self.decimals)

    def _flat_text(self, obj: AwCurvedText) -> svgwrite.text.Text:
        attributes = self._font_attributes(obj)
        spacing = spacing_to_units(obj.char_spacing, obj.font_size)
        if spacing:
            attributes["letter_spacing"] = self.fmt(spacing)
        return self._factory.text(obj.text, insert=(0, 0), **attributes)

    def _placed_text(self, obj: AwCurvedText, placed: Sequence[AwPlacedCharacter]) -> svgwrite.container.Group:
        group = self._factory.g(**self._font_attributes(obj))
        for character in placed:
            transform = (
                f"translate({self.fmt(character.x)} {self.fmt(character.y)}) rotate({self.fmt(character.rotation_deg)})"
            )
            group.add(self._factory.text(character.character, insert=(0, 0), transform=transform))
        return group

    def export_fragment(self, obj: AwCurvedText) -> svgwrite.container.Group:
        """
        SVG group fragment of one object.

        Contains a path with the (warped) outline, or text markup for straight text
        and for objects without outlines.
        """
        group = self._factory.g(transform=self.group_transform(obj), opacity=self.fmt(obj.opacity))
        paint_attributes = self._paint_attributes(obj.paint)

        data = self.path_data(obj)
        if data is not None:
            group.add(self._factory.path(d=data, fill_rule="evenodd", **paint_attributes))
            return group

        if obj.is_straight():
            text = self._flat_text(obj)
            text.update(paint_attributes)
            group.add(text)
            return group

        logger.debug("No outlines for %r, exporting placed characters", obj.text)
        placed = self._placed_text(obj, obj.fallback_characters())
        placed.update(paint_attributes)
        group.add(placed)
        return group

    def to_svg(self, obj: AwCurvedText) -> str:
        """Markup of the object's fragment."""
        return self.export_fragment(obj).tostring()

    def path_bounding_box(self, obj: AwCurvedText) -> Optional[AwBox]:
        """
        Bounding box (host coordinates) of the exported path, as a consumer of the markup computes it.
        Returns None if the object is exported as text.
        """
        data = self.path_data(obj)
        if data is None:
            return None
        return AwSvgPath.bounding_box(data).transform_affine(obj.host_trafo())


def main():
    """Main"""
    exporter = AwVectorExporter()
    print(exporter.fmt(3.14159265), exporter.fmt(-0.00001))


if __name__ == "__main__":
    main()

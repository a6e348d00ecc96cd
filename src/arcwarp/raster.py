"""Raster rendering of curved text onto an RGBA surface with Pillow."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, List, Sequence, Tuple, Union

import numpy as np
import PIL.Image
import PIL.ImageColor
import PIL.ImageDraw
from numpy.typing import NDArray

from arcwarp.common import POLYGONIZE_STEPS, AwPaint
from arcwarp.geom import GeomMath
from arcwarp.image import AwImage, Rgba
from arcwarp.measure import PilFont, load_image_font
from arcwarp.path import AwPath
from arcwarp.warp import AwPlacedCharacter

if TYPE_CHECKING:
    from arcwarp.curved_text import AwCurvedText

logger = logging.getLogger(__name__)

AffineTrafo = Sequence[Union[int, float]]


def parse_color(color: str, opacity: float = 1.0) -> Rgba:
    """RGBA tuple of a CSS color with the opacity applied to its alpha."""
    rgba = PIL.ImageColor.getcolor(color, "RGBA")
    alpha = int(round(rgba[3] * max(0.0, min(1.0, opacity))))
    return rgba[0], rgba[1], rgba[2], alpha


def _transform_polyline(trafo: AffineTrafo, polyline: NDArray[np.float64]) -> List[Tuple[float, float]]:
    xs = trafo[0] * polyline[:, 0] + trafo[1] * polyline[:, 1] + trafo[4]
    ys = trafo[2] * polyline[:, 0] + trafo[3] * polyline[:, 1] + trafo[5]
    return list(zip(xs.tolist(), ys.tolist()))


def _composite_at(layer: PIL.Image.Image, sprite: PIL.Image.Image, left: int, top: int) -> None:
    """Alpha-composite _sprite_ onto _layer_ at (left, top); parts outside the layer are dropped."""
    crop_left, crop_top = max(0, -left), max(0, -top)
    crop_right = min(sprite.width, layer.width - left)
    crop_bottom = min(sprite.height, layer.height - top)
    if crop_right <= crop_left or crop_bottom <= crop_top:
        return
    visible = sprite.crop((crop_left, crop_top, crop_right, crop_bottom))
    layer.alpha_composite(visible, dest=(left + crop_left, top + crop_top))


class AwRasterRenderer:
    """
    Paints warped glyph outlines (or fallback characters) onto an AwImage.

    Outlines are polygonized and filled with the even-odd rule, so counters
    of letters like "O" stay open independent of the contour direction.
    """

    def __init__(self, polygonize_steps: int = POLYGONIZE_STEPS) -> None:
        self.polygonize_steps = polygonize_steps

    def fill_path(self, image: AwImage, path: AwPath, trafo: AffineTrafo, paint: AwPaint) -> None:
        """
        Fill and stroke _path_ (object-local coordinates) mapped by _trafo_ into the image.

        Args:
            image: target surface
            path: outline in object-local coordinates
            trafo: affine transformation [a00, a01, a10, a11, b0, b1] from local to image pixels
            paint: fill, stroke and opacity
        """
        contours = [
            _transform_polyline(trafo, contour)
            for contour in path.polygonize_contours(self.polygonize_steps)
            if len(contour) >= 2
        ]
        if not contours:
            return
        size = (image.width_px, image.height_px)
        layer = PIL.Image.new("RGBA", size, (0, 0, 0, 0))

        if paint.has_fill:
            mask = np.zeros((image.height_px, image.width_px), dtype=bool)
            for contour in contours:
                if len(contour) < 3:
                    continue
                contour_img = PIL.Image.new("L", size, 0)
                PIL.ImageDraw.Draw(contour_img).polygon(contour, fill=255)
                mask ^= np.asarray(contour_img) > 0
            fill_data = np.zeros((image.height_px, image.width_px, 4), dtype=np.uint8)
            fill_data[mask] = parse_color(paint.fill, paint.opacity)
            layer = PIL.Image.fromarray(fill_data)

        if paint.has_stroke:
            scale = math.sqrt(abs(trafo[0] * trafo[3] - trafo[1] * trafo[2]))
            width = max(1, int(round(paint.stroke_width * scale)))
            stroke_layer = PIL.Image.new("RGBA", size, (0, 0, 0, 0))
            draw = PIL.ImageDraw.Draw(stroke_layer)
            color = parse_color(paint.stroke, paint.opacity)
            for contour in contours:
                draw.line(contour + [contour[0]], fill=color, width=width, joint="curve")
            layer = PIL.Image.alpha_composite(layer, stroke_layer)

        image.composite(layer)

    def draw_characters(
        self,
        image: AwImage,
        placed: Sequence[AwPlacedCharacter],
        trafo: AffineTrafo,
        angle_deg: float,
        font_size: float,
        image_font: PilFont,
        paint: AwPaint,
    ) -> None:
        """
        Draw every character as a whole, rotated about its placed center.

        Args:
            image: target surface
            placed: characters placed on the arc (object-local coordinates)
            trafo: affine transformation from local to image pixels
            angle_deg: rotation of the whole object
            font_size: font size in image pixels
            image_font: Pillow font of that size
            paint: fill, stroke and opacity
        """
        if not placed:
            return
        layer = PIL.Image.new("RGBA", (image.width_px, image.height_px), (0, 0, 0, 0))
        fill = parse_color(paint.fill, paint.opacity) if paint.has_fill else None
        stroke = parse_color(paint.stroke, paint.opacity) if paint.has_stroke else None
        stroke_width = int(round(paint.stroke_width)) if stroke is not None else 0
        cell = int(math.ceil(font_size * 2)) + 2 * stroke_width + 4

        for character in placed:
            if character.character.isspace():
                continue
            sprite = PIL.Image.new("RGBA", (cell, cell), (0, 0, 0, 0))
            PIL.ImageDraw.Draw(sprite).text(
                (cell / 2, cell / 2),
                character.character,
                font=image_font,
                fill=fill if fill is not None else (0, 0, 0, 0),
                anchor="mm",
                stroke_width=stroke_width,
                stroke_fill=stroke,
            )
            # Pillow rotates counterclockwise, positive angles here turn clockwise on screen
            rotated = sprite.rotate(-(character.rotation_deg + angle_deg), resample=PIL.Image.BICUBIC, expand=True)
            center_x, center_y = GeomMath.transform_point(trafo, (character.x, character.y))
            left = int(round(center_x - rotated.width / 2))
            top = int(round(center_y - rotated.height / 2))
            _composite_at(layer, rotated, left, top)

        image.composite(layer)

    def render(self, image: AwImage, obj: AwCurvedText) -> None:
        """
        Paint a curved text object at its host position.

        Without a live outline layout, persisted path data is filled instead;
        characters placed on the arc are the last resort.
        """
        trafo = obj.host_trafo()
        layout = obj.outline_layout()
        if layout is not None:
            self.fill_path(image, layout.path, trafo, obj.paint)
            return
        persisted = obj.persisted_path()
        if persisted is not None:
            self.fill_path(image, persisted, trafo, obj.paint)
            return
        logger.debug("No outlines for %r, drawing placed characters", obj.text)
        scaled_size = obj.font_size * obj.scale_factor
        self.draw_characters(
            image,
            obj.fallback_characters(),
            trafo,
            obj.angle,
            scaled_size,
            load_image_font(obj.font_family, scaled_size),
            obj.paint,
        )


def main():
    """Main"""
    square = AwPath([(-20, -20), (20, -20), (20, 20), (-20, 20)], ["M", "L", "L", "L", "Z"])
    image = AwImage.blank(100, 100)
    AwRasterRenderer().fill_path(image, square, (1, 0, 0, 1, 50, 50), AwPaint(fill="#ff0000"))
    print(image.painted_extent())


if __name__ == "__main__":
    main()

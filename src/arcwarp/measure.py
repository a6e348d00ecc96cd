"""Generic text measurement used when no outlines are available."""

from __future__ import annotations

import functools
import logging
from typing import List, Optional, Protocol, Union

from PIL import ImageFont

from arcwarp.common import DEFAULT_FONT_FAMILY
from arcwarp.font import AwFont

logger = logging.getLogger(__name__)

PilFont = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


def _font_file_candidates(font_family: str) -> List[str]:
    family = font_family.strip()
    return [
        family + ".ttf",
        family.replace(" ", "") + ".ttf",
        family.lower().replace(" ", "") + ".ttf",
        family.replace(" ", "-") + "-Regular.ttf",
        "DejaVuSans.ttf",
    ]


@functools.lru_cache(maxsize=64)
def load_image_font(font_family: str, font_size: float, font_path: Optional[str] = None) -> PilFont:
    """
    Pillow font for drawing and measuring text of the given family.

    Tries the explicit font file first, then files named after the family on the
    system font path, and finally Pillow's built-in scalable default font.
    """
    size = max(1, int(round(font_size)))
    candidates = ([font_path] if font_path else []) + _font_file_candidates(font_family or DEFAULT_FONT_FAMILY)
    for name in candidates:
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    logger.debug("No font file for %r, using Pillow's default font", font_family)
    return ImageFont.load_default(size=size)


###############################################################################
# Measurers
###############################################################################


class AwTextMeasurer(Protocol):
    """Measures the advance of a text run in pixels."""

    def measure(self, text: str, font_size: float) -> float:
        """Width of _text_ drawn at _font_size_."""
        ...  # pylint: disable=unnecessary-ellipsis


class AwPilTextMeasurer:
    """Measures text with Pillow, like a drawing surface's measureText."""

    def __init__(self, font_family: str = DEFAULT_FONT_FAMILY, font_path: Optional[str] = None) -> None:
        self.font_family = font_family
        self.font_path = font_path

    def image_font(self, font_size: float) -> PilFont:
        """Pillow font used for measuring and drawing."""
        return load_image_font(self.font_family, font_size, self.font_path)

    def measure(self, text: str, font_size: float) -> float:
        if not text:
            return 0.0
        font = self.image_font(font_size)
        width = float(font.getlength(text))
        # Pillow rounds the size to whole pixels
        used_size = float(getattr(font, "size", font_size)) or font_size
        return width * font_size / used_size


class AwFontMeasurer:
    """Measures text by the advance widths of an outline font."""

    def __init__(self, font: AwFont) -> None:
        self.font = font

    def measure(self, text: str, font_size: float) -> float:
        return self.font.measure_text(text, font_size)


def main():
    """Main"""
    logging.basicConfig(level=logging.DEBUG)
    measurer = AwPilTextMeasurer("Arial")
    for text in ("H", "HELLO", "Curved text"):
        print(f"{text!r}: {measurer.measure(text, 40.0):.2f}")


if __name__ == "__main__":
    main()

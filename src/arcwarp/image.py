"""Raster surface storing RGBA pixels as a NumPy array."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import PIL.Image

from arcwarp.geom import AwBox

Rgba = Tuple[int, int, int, int]

TRANSPARENT: Rgba = (0, 0, 0, 0)


@dataclass
class AwImage:
    """An image representation storing RGBA data as NumPy array.

    The data has shape (height, width, 4) and type uint8, matching Pillow's mode RGBA.

    Pixel Coordinate System:
        - Origin (0, 0) is at the top-left corner
        - X increases from left to right
        - Y increases from top to bottom
        - Pixel (x, y) covers the square [x, x+1) x [y, y+1)
    """

    _image: np.ndarray

    def __init__(self, image: np.ndarray):
        """Initialize with an RGBA image as NumPy array.

        Args:
            image: NumPy array of type uint8 and shape (height, width, 4)
        """
        if not isinstance(image, np.ndarray):
            raise TypeError("Image must be a NumPy array")

        if image.dtype != np.uint8:
            raise ValueError("Image array must be of type uint8")

        if image.ndim != 3 or image.shape[2] != 4:
            raise ValueError(f"Image must have shape (height, width, 4), got {image.shape}")

        if image.shape[0] == 0 or image.shape[1] == 0:
            raise ValueError("Image cannot have zero width or height")

        self._image = image

    @classmethod
    def blank(cls, width_px: int, height_px: int, background: Rgba = TRANSPARENT) -> AwImage:
        """New image filled with the background color."""
        data = np.empty((int(height_px), int(width_px), 4), dtype=np.uint8)
        data[:, :] = background
        return cls(data)

    @property
    def image(self) -> np.ndarray:
        """NumPy array of shape (height, width, 4) with uint8 values."""
        return self._image

    @property
    def width_px(self) -> int:
        """Width of the image in pixels."""
        return self._image.shape[1]

    @property
    def height_px(self) -> int:
        """Height of the image in pixels."""
        return self._image.shape[0]

    @property
    def alpha(self) -> np.ndarray:
        """Alpha channel as (height, width) view."""
        return self._image[:, :, 3]

    def painted_extent(self, alpha_threshold: int = 0) -> Optional[AwBox]:
        """
        Box (pixel edges) around all pixels with alpha above the threshold.
        Returns None if nothing is painted.
        """
        mask = self.alpha > alpha_threshold
        if not mask.any():
            return None
        rows = np.flatnonzero(mask.any(axis=1))
        cols = np.flatnonzero(mask.any(axis=0))
        return AwBox(cols[0], rows[0], cols[-1] + 1, rows[-1] + 1)

    def composite(self, layer: PIL.Image.Image) -> None:
        """Alpha-composite a same-sized RGBA layer over this image (in place)."""
        base = PIL.Image.fromarray(self._image)
        self._image = np.array(PIL.Image.alpha_composite(base, layer.convert("RGBA")), dtype=np.uint8)


def main():
    """Main"""
    img = AwImage.blank(20, 10)
    img.image[2:5, 3:8] = (255, 0, 0, 255)
    print(img.painted_extent())


if __name__ == "__main__":
    main()

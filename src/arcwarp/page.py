"""SVG document assembly from per-object fragments."""

from __future__ import annotations

import copy
import gzip
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import svgwrite
import svgwrite.base
import svgwrite.container
import svgwrite.elementfactory
from svgwrite.extensions import Inkscape


@dataclass
class AwSvgPage:
    """A page (canvas) described by SVG in host pixel coordinates (left-to-right, top-to-bottom).

    Contains groups/layers:
        - root       -- (group) holding the layers
            - main   -- editable->locked=False  --  hidden->display="block"
            - debug  -- editable->locked=False  --  hidden->display="none"
    """

    _inkscape: Inkscape  # extension to support layers

    drawing: svgwrite.Drawing
    root_group: svgwrite.container.Group
    main_layer: svgwrite.container.Group
    debug_layer: svgwrite.container.Group

    def __init__(self, width_px: float, height_px: float, background: Optional[str] = None):
        """
        Initialize the SVG page.

        Args:
            width_px (float): The width of the page in pixels.
            height_px (float): The height of the page in pixels.
            background (Optional[str]): Fill color of a background rectangle. Defaults to None.
        """
        # profile="full" to support numbers with more than 4 decimal digits
        self.drawing = svgwrite.Drawing(
            size=(f"{width_px}px", f"{height_px}px"),
            viewBox=f"0 0 {width_px} {height_px}",
            profile="full",
        )
        self.root_group = self.drawing.g(id="root")

        # Initialize Inkscape extension for layer support
        self._inkscape = Inkscape(self.drawing)

        self.main_layer = self._inkscape.layer(label="main", locked=False)
        self.debug_layer = self._inkscape.layer(label="debug", locked=False, display="none")

        if background:
            self.main_layer.add(self.drawing.rect(insert=(0, 0), size=(width_px, height_px), fill=background))

    def add(
        self,
        element: Union[svgwrite.base.BaseElement, svgwrite.elementfactory.ElementBuilder],
        add_to_debug_layer: bool = False,
    ) -> Union[svgwrite.base.BaseElement, svgwrite.elementfactory.ElementBuilder]:
        """Append an object fragment (or any element) to the main layer, or to the debug layer."""
        layer = self.debug_layer if add_to_debug_layer else self.main_layer
        return layer.add(element)

    def _assembled(self, include_debug_layer: bool) -> svgwrite.Drawing:
        # the page stays editable: the tree is assembled on copies
        drawing = copy.deepcopy(self.drawing)
        root_group = copy.deepcopy(self.root_group)
        if include_debug_layer:
            root_group.add(copy.deepcopy(self.debug_layer))
        root_group.add(copy.deepcopy(self.main_layer))
        drawing.add(root_group)
        return drawing

    def tostring(self, include_debug_layer: bool = False, pretty: bool = False, indent: int = 2) -> str:
        """The whole document as SVG markup, starting with the XML declaration."""
        buffer = io.StringIO()
        self._assembled(include_debug_layer).write(buffer, pretty=pretty, indent=indent)
        return buffer.getvalue()

    def save_as(
        self,
        filename: Union[str, Path],
        include_debug_layer: bool = False,
        pretty: bool = False,
        compressed: bool = False,
    ) -> None:
        """Write the document to _filename_, gzip compressed (svgz) if _compressed_."""
        data = self.tostring(include_debug_layer, pretty).encode("utf-8")
        if compressed:
            data = gzip.compress(data)
        Path(filename).write_bytes(data)


def main():
    """Main"""
    page = AwSvgPage(200, 100, background="white")
    page.add(page.drawing.path(d="M 10 10 L 190 10 L 190 90 Z", fill="none", stroke="black"))
    page.add(page.drawing.circle(center=(10, 10), r=3, fill="red"), add_to_debug_layer=True)
    print(page.tostring(include_debug_layer=True, pretty=True))


if __name__ == "__main__":
    main()

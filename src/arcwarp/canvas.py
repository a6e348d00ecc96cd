"""In-memory host canvas holding curved text objects."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol

from arcwarp.curved_text import AwCurvedText
from arcwarp.glyph_source import AwGlyphSource, OutlineState
from arcwarp.image import TRANSPARENT, AwImage, Rgba
from arcwarp.page import AwSvgPage
from arcwarp.raster import AwRasterRenderer
from arcwarp.vector import AwVectorExporter

logger = logging.getLogger(__name__)


class AwCanvasHost(Protocol):
    """What a curved text object needs from the canvas it lives on."""

    def request_render_all(self) -> None:
        """Schedule a redraw of the whole canvas."""
        ...  # pylint: disable=unnecessary-ellipsis


class AwCanvas:
    """
    Canvas of curved text objects rendering to an AwImage and to one SVG document.

    Redraw requests are only counted; the owner decides when to call render_all().
    """

    def __init__(
        self,
        width_px: int,
        height_px: int,
        glyph_source: Optional[AwGlyphSource] = None,
        renderer: Optional[AwRasterRenderer] = None,
        exporter: Optional[AwVectorExporter] = None,
    ) -> None:
        self.width_px = width_px
        self.height_px = height_px
        self.glyph_source = glyph_source if glyph_source is not None else AwGlyphSource()
        self.renderer = renderer if renderer is not None else AwRasterRenderer()
        self.exporter = exporter if exporter is not None else AwVectorExporter()
        self.render_requests = 0
        self._objects: List[AwCurvedText] = []

    @property
    def objects(self) -> List[AwCurvedText]:
        """Objects in drawing order (copy)."""
        return list(self._objects)

    def add(self, obj: AwCurvedText) -> AwCurvedText:
        """Add an object on top of the others."""
        if obj.is_destroyed:
            raise ValueError("Cannot add a destroyed object")
        obj.host = self
        self._objects.append(obj)
        self.request_render_all()
        return obj

    def remove(self, obj: AwCurvedText) -> None:
        """Remove and destroy an object."""
        self._objects.remove(obj)
        obj.destroy()
        self.request_render_all()

    def request_render_all(self) -> None:
        self.render_requests += 1

    async def load_outlines(self) -> List[OutlineState]:
        """Resolve the fonts of all objects (one fetch per distinct font key)."""
        return list(await asyncio.gather(*(obj.load_outline(self.glyph_source) for obj in self._objects)))

    def render_all(self, background: Rgba = TRANSPARENT) -> AwImage:
        """All objects painted onto a new raster surface."""
        image = AwImage.blank(self.width_px, self.height_px, background)
        for obj in self._objects:
            self.renderer.render(image, obj)
            obj.dirty = False
        return image

    def to_page(self, background: Optional[str] = None) -> AwSvgPage:
        """SVG page with one fragment per object."""
        page = AwSvgPage(self.width_px, self.height_px, background)
        for obj in self._objects:
            page.add(self.exporter.export_fragment(obj))
        return page

    def to_svg(self, background: Optional[str] = None, pretty: bool = False) -> str:
        """SVG document markup of all objects."""
        return self.to_page(background).tostring(pretty=pretty)


def main():
    """Main"""
    logging.basicConfig(level=logging.INFO)
    canvas = AwCanvas(400, 300)
    canvas.add(AwCurvedText("HELLO WORLD", curve_intensity=40, left=200, top=150))
    asyncio.run(canvas.load_outlines())
    image = canvas.render_all((255, 255, 255, 255))
    print(image.painted_extent())
    print(canvas.to_svg(pretty=True))


if __name__ == "__main__":
    main()

"""Asynchronous resolution of font keys into outline fonts, with a shared coalescing cache."""

from __future__ import annotations

import asyncio
import io
import logging
import struct
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Union

from fontTools.ttLib import TTFont, TTLibError

from arcwarp.common import DEFAULT_FONT_FAMILY, SYSTEM_FONT_URLS
from arcwarp.errors import FontResolutionError
from arcwarp.font import AwFont

logger = logging.getLogger(__name__)

FETCH_TIMEOUT: float = 15.0
FETCH_MAX_SIZE: int = 20 * 1024 * 1024
USER_AGENT: str = "arcwarp/0.1.0"

FontLoader = Callable[[str], Awaitable[AwFont]]

# Raised by fontTools for corrupt font data, or for WOFF2 without a brotli module
FONT_PARSE_ERRORS = (
    TTLibError,
    KeyError,
    ValueError,
    AssertionError,
    ImportError,
    struct.error,
    EOFError,
    IndexError,
)


###############################################################################
# Outline availability
###############################################################################


@dataclass(frozen=True)
class OutlineAvailable:
    """Outlines of the font can be drawn and warped."""

    font: AwFont


@dataclass(frozen=True)
class OutlineUnavailable:
    """No outlines (yet): renderers and bounds use the per-character fallback."""

    reason: str = "not resolved"


OutlineState = Union[OutlineAvailable, OutlineUnavailable]

NOT_RESOLVED = OutlineUnavailable()


###############################################################################
# Fetching
###############################################################################


def font_source_for(font_key: str) -> str:
    """
    Location to load a font key from.

    URLs and local paths are used as they are. Family names map to the
    substitute font of the system-font table; unknown families use the Arial substitute.
    """
    if font_key.startswith(("http://", "https://", "file://")):
        return font_key
    if font_key in SYSTEM_FONT_URLS:
        return SYSTEM_FONT_URLS[font_key]
    if Path(font_key).suffix.lower() in (".ttf", ".otf", ".woff", ".woff2"):
        return font_key
    return SYSTEM_FONT_URLS[DEFAULT_FONT_FAMILY]


def _read_font_source(source: str, timeout: float) -> bytes:
    """Blocking read of the font bytes from a URL or a local file."""
    if not source.startswith(("http://", "https://", "file://")):
        return Path(source).read_bytes()

    request = urllib.request.Request(source, headers={"User-Agent": USER_AGENT, "Accept": "*/*"})
    with urllib.request.urlopen(request, timeout=timeout) as response:
        content_length = response.headers.get("Content-Length")
        if content_length and int(content_length) > FETCH_MAX_SIZE:
            raise ValueError(f"font file too large: {content_length} bytes")
        content = response.read(FETCH_MAX_SIZE + 1)
    if len(content) > FETCH_MAX_SIZE:
        raise ValueError(f"font file too large: >{FETCH_MAX_SIZE} bytes")
    return content


async def fetch_font_bytes(source: str, timeout: float = FETCH_TIMEOUT) -> bytes:
    """Read the font bytes in a worker thread so the event loop never blocks."""
    return await asyncio.to_thread(_read_font_source, source, timeout)


def parse_font_bytes(data: bytes) -> AwFont:
    """Parse font file contents into an AwFont."""
    return AwFont.from_ttfont(TTFont(io.BytesIO(data)))


async def load_font(font_key: str) -> AwFont:
    """
    Default loader: fetch and parse the font for _font_key_.

    Raises:
        FontResolutionError: if fetching or parsing fails.
    """
    source = font_source_for(font_key)
    try:
        data = await fetch_font_bytes(source)
    except (OSError, ValueError) as e:
        # urllib.error.URLError is an OSError
        raise FontResolutionError(font_key, str(e), source) from e
    try:
        return parse_font_bytes(data)
    except FONT_PARSE_ERRORS as e:
        raise FontResolutionError(font_key, f"cannot parse font: {e}", source) from e


###############################################################################
# AwFontCache
###############################################################################


@dataclass
class AwFontCache:
    """
    Shared cache of resolved fonts plus the map of resolutions in flight.

    Entries are written once per key on the first successful resolution and never evicted here;
    the owner of the cache decides about its lifetime.
    """

    resolved: Dict[str, AwFont] = field(default_factory=dict)
    in_flight: Dict[str, "asyncio.Future[AwFont]"] = field(default_factory=dict)

    def get(self, font_key: str) -> Optional[AwFont]:
        """Resolved font for the key, or None."""
        return self.resolved.get(font_key)

    def put(self, font_key: str, font: AwFont) -> None:
        """Store a resolved font."""
        self.resolved[font_key] = font

    def __contains__(self, font_key: str) -> bool:
        return font_key in self.resolved

    def __len__(self) -> int:
        return len(self.resolved)

    def clear(self) -> None:
        """Drop all resolved fonts (fonts in flight are kept)."""
        self.resolved.clear()


###############################################################################
# AwGlyphSource
###############################################################################


class AwGlyphSource:
    """
    Resolves font keys (explicit font reference, else family name) to outline fonts.

    Concurrent resolutions of the same unresolved key share one fetch.
    A failed resolution caches nothing, so a later call tries again.
    """

    def __init__(self, cache: Optional[AwFontCache] = None, loader: Optional[FontLoader] = None) -> None:
        self._cache = cache if cache is not None else AwFontCache()
        self._loader: FontLoader = loader if loader is not None else load_font

    @property
    def cache(self) -> AwFontCache:
        """The (possibly shared) font cache."""
        return self._cache

    @staticmethod
    def font_key(font_family: str, font_reference: Optional[str] = None) -> str:
        """Cache key of a font: the explicit reference if present, else the family name."""
        if font_reference:
            return font_reference
        return font_family or DEFAULT_FONT_FAMILY

    def peek(self, font_key: str) -> Optional[AwFont]:
        """Already resolved font for the key without suspending, or None."""
        return self._cache.get(font_key)

    def register(self, font_key: str, font: AwFont) -> None:
        """Make a font available under the given key (e.g. an uploaded custom font)."""
        self._cache.put(font_key, font)

    async def _fetch(self, font_key: str) -> AwFont:
        try:
            font = await self._loader(font_key)
        except FontResolutionError:
            raise
        except (OSError, *FONT_PARSE_ERRORS) as e:
            raise FontResolutionError(font_key, str(e)) from e
        finally:
            self._cache.in_flight.pop(font_key, None)
        self._cache.put(font_key, font)
        logger.debug("Resolved font %r", font_key)
        return font

    async def resolve(self, font_key: str) -> AwFont:
        """
        Resolve a font key into an outline font.

        Raises:
            FontResolutionError: if the font cannot be fetched or parsed.
        """
        font = self._cache.get(font_key)
        if font is not None:
            return font

        pending = self._cache.in_flight.get(font_key)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(font_key))
            self._cache.in_flight[font_key] = pending
        return await pending

    async def resolve_outline(self, font_key: str, font_weight: Union[str, int, float, None] = None) -> OutlineState:
        """
        Resolve a font key into the tagged outline state.
        Failures are logged and reported as OutlineUnavailable, never raised.
        """
        try:
            font = await self.resolve(font_key)
        except FontResolutionError as e:
            logger.warning("Font outlines unavailable, using fallback rendering: %s", e)
            return OutlineUnavailable(str(e))
        return OutlineAvailable(self._instanced(font, font_weight))

    def outline_state(self, font_key: str, font_weight: Union[str, int, float, None] = None) -> OutlineState:
        """Outline state from the cache only (no resolution is started)."""
        font = self._cache.get(font_key)
        if font is None:
            return NOT_RESOLVED
        return OutlineAvailable(self._instanced(font, font_weight))

    @staticmethod
    def _instanced(font: AwFont, font_weight: Union[str, int, float, None]) -> AwFont:
        try:
            return font.instanced(font_weight)
        except FONT_PARSE_ERRORS as e:
            logger.warning("Cannot instance font at weight %r, using default instance: %s", font_weight, e)
            return font


def main():
    """Main"""
    logging.basicConfig(level=logging.DEBUG)
    source = AwGlyphSource()
    state = asyncio.run(source.resolve_outline("Arial"))
    print(state)


if __name__ == "__main__":
    main()

"""Exceptions raised by arcwarp."""

from __future__ import annotations

from typing import Optional


class ArcwarpError(Exception):
    """Base class of all arcwarp errors."""


class FontResolutionError(ArcwarpError):
    """A font key could not be fetched or parsed into an outline font."""

    def __init__(self, font_key: str, reason: str, source: Optional[str] = None) -> None:
        self.font_key = font_key
        self.reason = reason
        self.source = source
        where = f" from {source}" if source else ""
        super().__init__(f"Cannot resolve font {font_key!r}{where}: {reason}")


class InvalidRecordError(ArcwarpError):
    """A persisted record is not usable (raised by strict helpers only)."""

    def __init__(self, reason: str, index: Optional[int] = None) -> None:
        self.reason = reason
        self.index = index
        prefix = f"record {index}: " if index is not None else ""
        super().__init__(f"{prefix}{reason}")


def main():
    """Main"""
    print(FontResolutionError("Arial", "timeout", "https://example.invalid/arial.ttf"))
    print(InvalidRecordError("not a mapping", 3))


if __name__ == "__main__":
    main()

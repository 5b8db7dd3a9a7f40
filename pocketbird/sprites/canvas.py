"""
Render targets for the bird sprite.

The compositor only needs four things from a surface: its size, clearing a
rectangle and filling a rectangle with a color. ``PixelCanvas`` provides them
on an RGBA numpy buffer, which can be exported as a Pillow image or dumped to
the terminal.

Block character reference:
  Full:    █ (U+2588)
  Halves:  ▀ (upper) ▄ (lower)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
from PIL import Image

RGBA = tuple[int, int, int, int]


@runtime_checkable
class RenderTarget(Protocol):
    """Surface the frame compositor paints onto."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def clear_rect(self, x: int, y: int, w: int, h: int) -> None: ...

    def fill_rect(self, x: int, y: int, w: int, h: int, color: RGBA) -> None: ...


class PixelCanvas:
    """RGBA pixel buffer with clipped rectangle writes."""

    def __init__(self, width: int, height: int):
        self._width = width
        self._height = height
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def _clip(self, x: int, y: int, w: int, h: int) -> tuple[int, int, int, int] | None:
        x1, y1 = max(0, x), max(0, y)
        x2, y2 = min(self._width, x + w), min(self._height, y + h)
        if x1 >= x2 or y1 >= y2:
            return None
        return x1, y1, x2, y2

    def clear(self) -> None:
        self.pixels.fill(0)

    def clear_rect(self, x: int, y: int, w: int, h: int) -> None:
        box = self._clip(x, y, w, h)
        if box is not None:
            x1, y1, x2, y2 = box
            self.pixels[y1:y2, x1:x2] = 0

    def fill_rect(self, x: int, y: int, w: int, h: int, color: RGBA) -> None:
        box = self._clip(x, y, w, h)
        if box is not None:
            x1, y1, x2, y2 = box
            self.pixels[y1:y2, x1:x2] = color

    def pixel(self, x: int, y: int) -> RGBA:
        r, g, b, a = self.pixels[y, x].tolist()
        return (r, g, b, a)

    def is_blank(self) -> bool:
        return not np.any(self.pixels[..., 3])

    def to_image(self) -> Image.Image:
        """Copy of the buffer as a Pillow RGBA image."""
        return Image.fromarray(self.pixels.copy())

    def render_ascii(self, ansi: bool = False) -> str:
        """Text dump of the buffer: one character per pixel, blank where transparent.

        With *ansi*, painted pixels carry a 24-bit foreground color escape.
        """
        lines = []
        for row in self.pixels:
            chars = []
            for r, g, b, a in row.tolist():
                if a == 0:
                    chars.append(" ")
                elif ansi:
                    chars.append(f"\033[38;2;{r};{g};{b}m█\033[0m")
                else:
                    chars.append("█")
            lines.append("".join(chars).rstrip())
        return "\n".join(lines)

"""Small geometry value types shared by the sprite and movement code."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Direction(IntEnum):
    """Facing direction. Sprites are authored facing left."""

    LEFT = -1
    RIGHT = 1


@dataclass(frozen=True)
class Size:
    """Viewport size in host pixels."""

    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Host layout rectangle in screen coordinates (top-left origin, y down)."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def same_size(self, other: "Rect") -> bool:
        return self.width == other.width and self.height == other.height


@dataclass(frozen=True)
class Bounds:
    """Horizontal span the bird may stand on, plus the surface top edge."""

    left: float
    right: float
    top: float

    def contains_x(self, x: float) -> bool:
        return self.left <= x <= self.right

    @property
    def width(self) -> float:
        return self.right - self.left

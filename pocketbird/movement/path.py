"""Arced flight paths between two points (quadratic Bezier)."""

from __future__ import annotations

import math
from dataclasses import dataclass


def parabolic_lerp(
    start_x: float,
    start_y: float,
    end_x: float,
    end_y: float,
    amount: float,
    intensity: float = 1.2,
) -> tuple[float, float]:
    """Point at *amount* (0..1) along an arc from start to end.

    The control point sits halfway along the straight line, raised by
    ``distance / 4 * intensity`` (y grows upwards).
    """
    dx = end_x - start_x
    dy = end_y - start_y
    distance = math.hypot(dx, dy)
    angle = math.atan2(dy, dx)
    mid_x = start_x + math.cos(angle) * distance / 2
    mid_y = start_y + math.sin(angle) * distance / 2 + distance / 4 * intensity
    t = amount
    x = (1 - t) ** 2 * start_x + 2 * (1 - t) * t * mid_x + t ** 2 * end_x
    y = (1 - t) ** 2 * start_y + 2 * (1 - t) * t * mid_y + t ** 2 * end_y
    return x, y


@dataclass(frozen=True)
class ParabolicPath:
    """A timed arc from (start_x, start_y) to (end_x, end_y)."""
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    intensity: float = 2.5

    @property
    def distance(self) -> float:
        return math.hypot(self.end_x - self.start_x, self.end_y - self.start_y)

    def progress(self, elapsed: float, speed: float) -> float:
        """Fraction of the path covered after *elapsed* ms at *speed* px/ms."""
        distance = self.distance
        if distance == 0 or speed <= 0:
            return 1.0
        return max(0.0, min(1.0, elapsed / (distance / speed)))

    def position(self, elapsed: float, speed: float) -> tuple[float, float]:
        return parabolic_lerp(
            self.start_x, self.start_y, self.end_x, self.end_y,
            self.progress(elapsed, speed), self.intensity,
        )

    @staticmethod
    def arrived(x: float, y: float, end_x: float, end_y: float) -> bool:
        return abs(x - end_x) < 1 and abs(y - end_y) < 1

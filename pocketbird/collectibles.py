"""Collectibles: falling feathers that unlock species, and hats left on the page."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from .core.geometry import Rect, Size
from .sprites.hats import WEARABLE_HATS

logger = logging.getLogger(__name__)

SWAY_PERIOD_TICKS = 120
SWAY_AMPLITUDE = 25


def choose_locked(
    ids: Sequence[str],
    unlocked: Sequence[str],
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """Uniform pick among *ids* not unlocked yet, or None when there are none."""
    locked = [i for i in ids if i not in unlocked]
    if not locked:
        return None
    return (rng or random).choice(locked)


def choose_species_to_unlock(
    all_species: Sequence[str],
    unlocked: Sequence[str],
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    return choose_locked(all_species, unlocked, rng)


def choose_hat_to_unlock(
    unlocked: Sequence[str],
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """Pick a locked hat. The invisible hat is never handed out."""
    return choose_locked(WEARABLE_HATS, unlocked, rng)


@dataclass
class FeatherDrop:
    """A feather drifting down the viewport (screen coordinates, y down).

    ``x`` is the spawn column; ``sway`` is the current sideways offset.
    """
    species_id: str
    x: float
    top: float
    size: float
    sway: float = 0.0

    @classmethod
    def spawn(
        cls,
        species_id: str,
        viewport: Size,
        size: float,
        rng: Optional[random.Random] = None,
    ) -> "FeatherDrop":
        """New feather just above the top edge, away from the sides."""
        rng = rng or random.Random()
        x = size * 2 + rng.random() * (viewport.width - size * 4)
        logger.info("A %s feather is falling", species_id)
        return cls(species_id=species_id, x=x, top=-size, size=size)

    @property
    def left(self) -> float:
        return self.x + self.sway

    def landed(self, viewport: Size) -> bool:
        return self.top >= viewport.height - self.size

    def fall(self, viewport: Size, ticks: int, speed: float = 1) -> None:
        """Advance one logic tick: drop, and sway while still in the air."""
        floor = viewport.height - self.size
        y = self.top + speed
        self.top = min(y, floor)
        if y < floor:
            self.sway = math.sin(2 * math.pi * (ticks / SWAY_PERIOD_TICKS)) * SWAY_AMPLITUDE


@dataclass
class HatDrop:
    """A hat sitting on top of a page element.

    ``left``/``top`` are page coordinates (y down, scroll included) so the
    hat stays on its element while the page scrolls.
    """
    hat_id: str
    left: float
    top: float
    size: float

    @classmethod
    def place(cls, hat_id: str, rect: Rect, size: float, scroll_y: float = 0.0) -> "HatDrop":
        """Center the hat on the top edge of *rect*."""
        left = rect.left + rect.width / 2 - size / 2
        top = rect.top - size + scroll_y
        logger.info("A %s is waiting on the page", hat_id)
        return cls(hat_id=hat_id, left=left, top=top, size=size)

"""
Hats: wearable layers cut from the hat sheet, and the collectible hat item.

The hat sheet (``assets/hats.png``) packs 12x12 hats side by side in
``HATS`` order, skipping "none" which has no pixels. A worn hat is padded
out to the bird's 32x32 canvas so it sits on the head, and tagged with its
id so only the selected hat shows up in a composition. The head-down pose
wears its hats one row lower.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from ..core.palette import Region
from ..core.tags import Tag
from .animation import Animation
from .frame import Frame
from .layer import Layer
from .sheet import slice_layer

HAT_WIDTH = 12
ITEM_SIZE = HAT_WIDTH + 2

NO_HAT = "none"

# Where a worn hat sits on the 32x32 bird canvas
WORN_LEFT = 6
WORN_RIGHT = 14
WORN_TOP = 5
WORN_BOTTOM = 15

# Neighbors (dx, dy) that get a border next to a painted pixel
OUTLINE_OFFSETS = ((-1, 0), (1, 0), (0, -1), (-1, -1), (1, -1))
BOTTOM_OUTLINE_OFFSETS = ((0, 1), (-1, 1), (1, 1))


@dataclass(frozen=True)
class HatInfo:
    id: str
    name: str
    description: str


HATS: dict[str, HatInfo] = {
    info.id: info
    for info in (
        HatInfo(NO_HAT, "Invisible Hat", "It's like you're wearing nothing at all!"),
        HatInfo("top-hat", "Top Hat", "The mark of a true gentlebird."),
        HatInfo(
            "viking-helmet",
            "Viking Helmet",
            "Sure, vikings never actually wore this style of helmet, "
            "but why let facts get in the way of good fashion?",
        ),
        HatInfo(
            "cowboy-hat",
            "Cowboy Hat",
            "You can't jam with the console cowboys without the appropriate attire.",
        ),
        HatInfo("bowler-hat", "Bowler Hat", "For that authentic, Victorian look!"),
        HatInfo("fez", "Fez", "It's a fez. Fezzes are cool."),
        HatInfo(
            "wizard-hat",
            "Wizard Hat",
            "Grants the bearer terrifying mystical power, but luckily birds "
            "only use it to summon old ladies with bread crumbs.",
        ),
        HatInfo("baseball-cap", "Baseball Cap", "Birds unfortunately only ever hit 'fowl' balls..."),
        HatInfo(
            "flower-hat",
            "Flower Hat",
            "To be fair, this is less of a hat and more of a dirt clod "
            "that your pet happened to pick up.",
        ),
    )
}

HAT_IDS: tuple[str, ...] = tuple(HATS)
WEARABLE_HATS: tuple[str, ...] = tuple(h for h in HAT_IDS if h != NO_HAT)


def hat_index(hat_id: str) -> int:
    """Slice index of *hat_id* on the hat sheet.

    Raises:
        ValueError: for "none" (it has no pixels) or an unknown hat
    """
    if hat_id not in WEARABLE_HATS:
        raise ValueError(f"No sheet slice for hat {hat_id!r}")
    return WEARABLE_HATS.index(hat_id)


def hat_tag(hat_id: str) -> Tag:
    return Tag(hat_id)


def pad(pixels: np.ndarray, top: int, bottom: int, left: int, right: int) -> np.ndarray:
    """Surround *pixels* with transparent rows and columns."""
    return np.pad(
        np.asarray(pixels, dtype=np.uint8),
        ((top, bottom), (left, right)),
        constant_values=Region.TRANSPARENT,
    )


def draw_outline(pixels: np.ndarray, outline_bottom: bool = False) -> np.ndarray:
    """Border every transparent cell next to a painted one.

    Painted means neither transparent nor already border, so the new border
    never grows a second ring. Cells below a painted pixel are only bordered
    with *outline_bottom*, which lets a worn hat sit flush on the head.
    """
    grid = np.array(pixels, dtype=np.uint8)
    painted = (grid != Region.TRANSPARENT) & (grid != Region.BORDER)
    h, w = grid.shape
    halo = np.zeros_like(painted)
    offsets = OUTLINE_OFFSETS + (BOTTOM_OUTLINE_OFFSETS if outline_bottom else ())
    for dx, dy in offsets:
        halo[max(dy, 0):h + min(dy, 0), max(dx, 0):w + min(dx, 0)] |= (
            painted[max(-dy, 0):h - max(dy, 0), max(-dx, 0):w - max(dx, 0)]
        )
    grid[halo & (grid == Region.TRANSPARENT)] = Region.BORDER
    return grid


def push_to_bottom(pixels: np.ndarray) -> np.ndarray:
    """Move empty bottom rows to the top so the drawing rests on the last row.

    At least one row is always kept.
    """
    grid = np.asarray(pixels, dtype=np.uint8)
    empty_rows = ~np.any(grid != Region.TRANSPARENT, axis=1)
    trim = 0
    while trim < grid.shape[0] - 1 and empty_rows[grid.shape[0] - 1 - trim]:
        trim += 1
    if not trim:
        return grid.copy()
    return pad(grid[:grid.shape[0] - trim], trim, 0, 0, 0)


def build_hat_layer(sheet: np.ndarray, hat_id: str, y_offset: int = 0) -> Layer:
    """Worn hat for one pose, tagged with the hat id."""
    pixels = slice_layer(sheet, hat_index(hat_id), HAT_WIDTH).pixels
    pixels = pad(
        pixels,
        WORN_TOP + y_offset,
        max(0, WORN_BOTTOM - y_offset),
        WORN_LEFT,
        WORN_RIGHT,
    )
    return Layer(draw_outline(pixels), hat_tag(hat_id))


class HatLayers(NamedTuple):
    base: tuple[Layer, ...]
    down: tuple[Layer, ...]


def build_hat_layers(sheet: np.ndarray) -> HatLayers:
    """Every wearable hat for the upright and head-down poses."""
    return HatLayers(
        base=tuple(build_hat_layer(sheet, hat_id) for hat_id in WEARABLE_HATS),
        down=tuple(build_hat_layer(sheet, hat_id, y_offset=1) for hat_id in WEARABLE_HATS),
    )


def build_hat_item_layer(sheet: np.ndarray, hat_id: str) -> Layer:
    if hat_id == NO_HAT:
        return Layer([])
    pixels = slice_layer(sheet, hat_index(hat_id), HAT_WIDTH).pixels
    pixels = draw_outline(pad(pixels, 1, 1, 1, 1), outline_bottom=True)
    return Layer(push_to_bottom(pixels))


def build_hat_item_animation(sheet: np.ndarray, hat_id: str) -> Animation:
    """Single-frame looping animation for a hat lying on the page."""
    return Animation([Frame([build_hat_item_layer(sheet, hat_id)])], [1000])

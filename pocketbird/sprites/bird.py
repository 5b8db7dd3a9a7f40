"""
The bird sprite set: layers cut from the sheet, frames, and named animations.

Slice indices match the packed sheet (``assets/birb.png``)::

    0 base        5 tuft base (tuft)
    1 head down   6 tuft down (tuft)
    2 heart one   7 wings up
    3 heart two   8 wings down
    4 heart three 9 happy eye

When a hat sheet is given every pose also carries the hat layers from
``sprites.hats``; which one shows is picked per draw.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import numpy as np

from ..core.clock import now_ms
from ..core.geometry import Direction
from ..core.palette import Variant
from ..core.tags import TUFT, Tag, TagLike
from .animation import Animation
from .canvas import PixelCanvas
from .frame import Frame
from .hats import HatLayers, build_hat_layers
from .layer import Layer
from .sheet import DEFAULT_SLICE_WIDTH, slice_layer

logger = logging.getLogger(__name__)

# name -> (sheet index, tag)
LAYER_SLICES: dict[str, tuple[int, Optional[Tag]]] = {
    "base": (0, None),
    "down": (1, None),
    "heart_one": (2, None),
    "heart_two": (3, None),
    "heart_three": (4, None),
    "tuft_base": (5, TUFT),
    "tuft_down": (6, TUFT),
    "wings_up": (7, None),
    "wings_down": (8, None),
    "happy_eye": (9, None),
}


class Animations(str, Enum):
    STILL = "STILL"
    BOB = "BOB"
    FLYING = "FLYING"
    HEART = "HEART"


def build_layers(sheet: np.ndarray, width: int = DEFAULT_SLICE_WIDTH) -> dict[str, Layer]:
    return {
        name: slice_layer(sheet, index, width, tag)
        for name, (index, tag) in LAYER_SLICES.items()
    }


def build_frames(layers: dict[str, Layer], hats: Optional[HatLayers] = None) -> dict[str, Frame]:
    """Frames for every pose. Upright poses wear ``hats.base``, head-down
    poses ``hats.down``; the heart glow is drawn over the hat."""
    base, tuft_base, happy = layers["base"], layers["tuft_base"], layers["happy_eye"]
    down, tuft_down = layers["down"], layers["tuft_down"]
    up_hats = list(hats.base) if hats is not None else []
    down_hats = list(hats.down) if hats is not None else []
    return {
        "base": Frame([base, tuft_base, *up_hats]),
        "head_down": Frame([down, tuft_down, *down_hats]),
        "wings_down": Frame([base, tuft_base, layers["wings_down"], *up_hats]),
        "wings_up": Frame([down, tuft_down, layers["wings_up"], *down_hats]),
        "heart_one": Frame([base, tuft_base, happy, *up_hats, layers["heart_one"]]),
        "heart_two": Frame([base, tuft_base, happy, *up_hats, layers["heart_two"]]),
        "heart_three": Frame([base, tuft_base, happy, *up_hats, layers["heart_three"]]),
        # the fourth heart frame reuses the second glow
        "heart_four": Frame([base, tuft_base, happy, *up_hats, layers["heart_two"]]),
    }


def build_animations(frames: dict[str, Frame]) -> dict[Animations, Animation]:
    f = frames
    return {
        Animations.STILL: Animation([f["base"]], [1000]),
        Animations.BOB: Animation([f["base"], f["head_down"]], [420, 420]),
        Animations.FLYING: Animation(
            [f["base"], f["wings_up"], f["head_down"], f["wings_down"]],
            [30, 80, 30, 60],
        ),
        Animations.HEART: Animation(
            [
                f["heart_one"], f["heart_two"], f["heart_three"], f["heart_four"],
                f["heart_three"], f["heart_four"], f["heart_three"], f["heart_four"],
            ],
            [60, 80, 250, 250, 250, 250, 250, 250],
            loop=False,
        ),
    }


def build_feather_animation(sheet: np.ndarray, width: int = DEFAULT_SLICE_WIDTH) -> Animation:
    """Single-frame looping animation for the collectible feather."""
    return Animation([Frame([slice_layer(sheet, 0, width)])], [1000])


class BirdSprite:
    """Current animation, facing and the canvas the bird is drawn into."""

    def __init__(
        self,
        sheet: np.ndarray,
        sprite_width: int = DEFAULT_SLICE_WIDTH,
        sprite_height: int = DEFAULT_SLICE_WIDTH,
        canvas_pixel_size: int = 1,
        now: Optional[float] = None,
        hat_sheet: Optional[np.ndarray] = None,
    ):
        self.layers = build_layers(sheet, sprite_width)
        self.hat_layers = build_hat_layers(hat_sheet) if hat_sheet is not None else None
        self.frames = build_frames(self.layers, self.hat_layers)
        self.animations = build_animations(self.frames)
        self.canvas_pixel_size = canvas_pixel_size
        self.canvas = PixelCanvas(
            self.frames["base"].width * canvas_pixel_size,
            sprite_height * canvas_pixel_size,
        )
        self.direction = Direction.RIGHT
        self.current_animation = Animations.STILL
        self.anim_start = now_ms() if now is None else now

    def set_animation(self, name: Animations, now: Optional[float] = None) -> None:
        """Switch animation and restart its timer."""
        self.current_animation = Animations(name)
        self.anim_start = now_ms() if now is None else now
        logger.debug("Animation -> %s", self.current_animation.value)

    @property
    def animation(self) -> Animation:
        return self.animations[self.current_animation]

    def invalidate(self) -> None:
        """Force the next draw to repaint (palette changed)."""
        for animation in self.animations.values():
            animation.invalidate()

    def draw(
        self,
        variant: Optional[Variant] = None,
        now: Optional[float] = None,
        hat: TagLike = None,
    ) -> bool:
        """Draw the current animation into the sprite canvas, wearing *hat*.

        Returns:
            True when a non-looping animation has finished.
        """
        return self.animation.draw(
            self.canvas,
            self.direction,
            self.anim_start,
            self.canvas_pixel_size,
            variant,
            now=now,
            hat=hat,
        )

"""Sprite sheets, layer compositing and frame animation."""

from .animation import Animation
from .bird import Animations, BirdSprite
from .canvas import PixelCanvas, RenderTarget
from .frame import Frame, build_frame
from .hats import HATS, NO_HAT, build_hat_item_animation
from .layer import Layer
from .sheet import load_sheet, slice_layer

__all__ = [
    "Animation",
    "Animations",
    "BirdSprite",
    "Frame",
    "HATS",
    "Layer",
    "NO_HAT",
    "PixelCanvas",
    "RenderTarget",
    "build_frame",
    "build_hat_item_animation",
    "load_sheet",
    "slice_layer",
]

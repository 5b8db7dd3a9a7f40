"""Core value types, configuration, persistence and scheduling."""

from .config import BirbConfig, DisplayConfig, MovementConfig, TimingConfig
from .errors import (
    AnimationConstructionError,
    FrameConstructionError,
    PocketBirdError,
    SpeciesError,
    SpriteSheetError,
)
from .geometry import Bounds, Direction, Rect, Size
from .palette import Region, Variant, resolve_color
from .tags import Tag

__all__ = [
    "AnimationConstructionError",
    "BirbConfig",
    "Bounds",
    "Direction",
    "DisplayConfig",
    "FrameConstructionError",
    "MovementConfig",
    "PocketBirdError",
    "Rect",
    "Region",
    "Size",
    "SpeciesError",
    "SpriteSheetError",
    "Tag",
    "TimingConfig",
    "Variant",
    "resolve_color",
]

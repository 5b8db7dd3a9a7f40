"""Exceptions raised while building the bird.

Everything here is a construction-time failure: the bird refuses to appear
rather than render half-initialized. Per-tick code never raises these.
"""


class PocketBirdError(Exception):
    """Base class for all Pocket Bird errors."""


class SpriteSheetError(PocketBirdError):
    """Source sheet is missing, unreadable, or too small for a requested slice."""


class FrameConstructionError(PocketBirdError, ValueError):
    """Frame layers are malformed (empty, or first layer not tagged base)."""


class AnimationConstructionError(PocketBirdError, ValueError):
    """Animation frames and durations don't line up."""


class SpeciesError(PocketBirdError):
    """Species definitions can't be loaded or the requested species is unknown."""

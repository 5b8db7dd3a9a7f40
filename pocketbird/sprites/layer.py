"""A single read-only grid of palette regions plus its feature tag."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from ..core.palette import Region
from ..core.tags import Tag, TagLike


class Layer:
    """Immutable pixel grid (rows of ``Region`` values) with a tag.

    Accepts a 2D numpy array or nested sequences; the data is copied and the
    copy made read-only so frames can cache compositions safely.
    """

    __slots__ = ("pixels", "tag")

    def __init__(self, pixels: Union[np.ndarray, Sequence[Sequence[int]]], tag: TagLike = None):
        grid = np.array(pixels, dtype=np.uint8)
        if grid.size == 0:
            grid = grid.reshape(0, 0)
        if grid.ndim != 2:
            raise ValueError(f"Layer pixels must be 2D, got shape {grid.shape}")
        grid.setflags(write=False)
        self.pixels = grid
        self.tag = Tag.parse(tag)

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    def is_empty(self) -> bool:
        return not np.any(self.pixels != Region.TRANSPARENT)

    def __repr__(self) -> str:
        return f"Layer({self.width}x{self.height}, tag={self.tag})"

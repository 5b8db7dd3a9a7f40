"""
Frame compositing.

A frame stacks layers bottom-aligned and, for every tag among its layers,
caches the merged grid that variants carrying that tag will see. Later
layers overwrite earlier ones wherever they are not transparent. A bird
wearing a hat asks for two tags at once (its feature and the hat); those
combinations are composed on first use and cached too.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Union

import numpy as np

from ..core.errors import FrameConstructionError
from ..core.geometry import Direction
from ..core.palette import Region, Variant, hex_to_rgba, resolve_color
from ..core.tags import Tag, TagLike
from .canvas import RenderTarget
from .layer import Layer


def compose(layers: Sequence[Layer], tags: Union[Tag, Iterable[Tag]]) -> np.ndarray:
    """Merge *layers* for *tags*: base layers plus layers tagged with any of them.

    Shorter layers are padded at the top so every layer shares the bottom row.
    """
    requested = (tags,) if isinstance(tags, Tag) else tuple(tags)
    height = max(layer.height for layer in layers)
    width = max(layer.width for layer in layers)
    grid = np.zeros((height, width), dtype=np.uint8)

    for layer in layers:
        if not (layer.tag.is_base or any(layer.tag.applies_to(tag) for tag in requested)):
            continue
        top = height - layer.height
        region = grid[top:height, 0:layer.width]
        np.copyto(region, layer.pixels, where=layer.pixels != Region.TRANSPARENT)

    grid.setflags(write=False)
    return grid


class Frame:
    """A still image made from one or more layers.

    Raises:
        FrameConstructionError: for an empty layer list or when the first
            layer isn't tagged base
    """

    def __init__(self, layers: Sequence[Layer]):
        layers = list(layers)
        if not layers:
            raise FrameConstructionError("A frame needs at least one layer")
        if not layers[0].tag.is_base:
            raise FrameConstructionError(
                f"First layer must be tagged '{Tag.BASE}', got '{layers[0].tag}'"
            )
        self.layers = tuple(layers)
        self._pixels_by_tag: dict[Tag, np.ndarray] = {}
        for tag in {Tag.BASE, *(layer.tag for layer in layers)}:
            self._pixels_by_tag[tag] = compose(self.layers, tag)
        self._combined: dict[frozenset[Tag], np.ndarray] = {}

    @property
    def tags(self) -> frozenset[Tag]:
        return frozenset(self._pixels_by_tag)

    @property
    def height(self) -> int:
        return self._pixels_by_tag[Tag.BASE].shape[0]

    @property
    def width(self) -> int:
        return self._pixels_by_tag[Tag.BASE].shape[1]

    def get_pixels(self, *tags: TagLike) -> np.ndarray:
        """Composed grid for *tags*.

        Tags no layer carries are ignored, so an unknown tag gives the base
        composition. Several known tags combine all of their layers.
        """
        known = frozenset(
            tag for tag in map(Tag.parse, tags)
            if not tag.is_base and tag in self._pixels_by_tag
        )
        if not known:
            return self._pixels_by_tag[Tag.BASE]
        if len(known) == 1:
            return self._pixels_by_tag[next(iter(known))]
        grid = self._combined.get(known)
        if grid is None:
            grid = self._combined[known] = compose(self.layers, known)
        return grid

    def draw(
        self,
        target: RenderTarget,
        direction: Direction,
        pixel_size: int,
        variant: Optional[Variant] = None,
        hat: TagLike = None,
    ) -> None:
        """Paint the frame at the target origin, one block per cell.

        Sprites are authored facing left; RIGHT mirrors each row. Transparent
        cells leave the target untouched.
        """
        tags = variant.tags if variant is not None else ()
        pixels = self.get_pixels(*tags, hat)
        if direction == Direction.RIGHT:
            pixels = pixels[:, ::-1]

        colors: dict[int, Optional[tuple[int, int, int, int]]] = {}
        ys, xs = np.nonzero(pixels)
        for y, x in zip(ys.tolist(), xs.tolist()):
            cell = int(pixels[y, x])
            if cell not in colors:
                color = resolve_color(variant, cell)
                colors[cell] = hex_to_rgba(color) if color is not None else None
            rgba = colors[cell]
            if rgba is None:
                continue
            target.fill_rect(x * pixel_size, y * pixel_size, pixel_size, pixel_size, rgba)


def build_frame(layers: Sequence[Layer]) -> Frame:
    """Build a frame, raising FrameConstructionError for malformed layers."""
    return Frame(layers)

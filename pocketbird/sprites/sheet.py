"""
Sprite sheet loading.

Sheets are PNGs painted with the palette bucket colors. Loading turns the
RGBA image into a grid of ``Region`` values (uint8), which is what layers
store and what gets recolored per species at draw time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.errors import SpriteSheetError
from ..core.palette import SHEET_COLOR_MAP, Region, hex_to_rgba, literal_region
from ..core.tags import Tag, TagLike
from .layer import Layer

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).parent.parent / "assets"
BIRD_SHEET = ASSETS_DIR / "birb.png"
FEATHER_SHEET = ASSETS_DIR / "feather.png"
HATS_SHEET = ASSETS_DIR / "hats.png"

DEFAULT_SLICE_WIDTH = 32


def _pack(rgb: np.ndarray) -> np.ndarray:
    """Pack an (..., 3) uint8 array into 24-bit ints for lookups."""
    rgb = rgb.astype(np.uint32)
    return (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]


_BUCKETS: dict[int, Region] = {}
for _color, _region in SHEET_COLOR_MAP.items():
    _r, _g, _b, _ = hex_to_rgba(_color)
    _BUCKETS[(_r << 16) | (_g << 8) | _b] = _region


def decode_image(image: Image.Image, literal_colors: bool = False) -> np.ndarray:
    """Map an image's pixels to palette regions.

    Fully transparent pixels become TRANSPARENT. Colors outside the bucket
    table are kept as literal color codes when *literal_colors* is set;
    otherwise they are logged once per color and become TRANSPARENT.
    """
    rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    packed = _pack(rgba[..., :3])
    grid = np.zeros(packed.shape, dtype=np.uint8)
    opaque = rgba[..., 3] > 0

    for value in np.unique(packed[opaque]):
        region = _BUCKETS.get(int(value))
        if region is None:
            if not literal_colors:
                logger.warning("Unknown sheet color #%06x, treating as transparent", int(value))
                continue
            region = literal_region(f"#{int(value):06x}")
        grid[opaque & (packed == value)] = region
    return grid


def load_sheet(path: Union[str, Path], literal_colors: bool = False) -> np.ndarray:
    """Load a PNG sprite sheet into a region grid.

    Raises:
        SpriteSheetError: if the file is missing or isn't a readable image
    """
    path = Path(path)
    try:
        with Image.open(path) as image:
            grid = decode_image(image, literal_colors)
    except FileNotFoundError as e:
        raise SpriteSheetError(f"Sprite sheet not found: {path}") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise SpriteSheetError(f"Cannot read sprite sheet {path}: {e}") from e
    logger.info("Loaded sprite sheet %s (%dx%d)", path.name, grid.shape[1], grid.shape[0])
    return grid


def slice_count(sheet: np.ndarray, width: int = DEFAULT_SLICE_WIDTH) -> int:
    return sheet.shape[1] // width


def slice_layer(
    sheet: np.ndarray,
    index: int,
    width: int = DEFAULT_SLICE_WIDTH,
    tag: TagLike = None,
) -> Layer:
    """Cut square slice *index* (columns ``[i*w, (i+1)*w)``, rows ``[0, w)``).

    Raises:
        SpriteSheetError: if the slice lies outside the sheet
    """
    if index < 0 or (index + 1) * width > sheet.shape[1] or width > sheet.shape[0]:
        raise SpriteSheetError(
            f"Slice {index} (width {width}) outside sheet of size "
            f"{sheet.shape[1]}x{sheet.shape[0]}"
        )
    pixels = sheet[0:width, index * width:(index + 1) * width]
    return Layer(pixels, Tag.parse(tag))

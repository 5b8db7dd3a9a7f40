"""Palette regions and species variants.

Sprite sheets are authored with a fixed set of "paint bucket" colors. On load
each bucket color is replaced by a symbolic ``Region`` so the same pixels can
be recolored per species at draw time.

Color resolution order for a region:
  1. the variant's explicit color
  2. the default table (outline black, border white, hearts red, ...)
  3. hood/nose fall back to face; theme-highlight to hood, then face
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from .tags import Tag, TagLike

logger = logging.getLogger(__name__)


class Region(IntEnum):
    """Symbolic color slot stored in pixel grids. TRANSPARENT paints nothing."""

    TRANSPARENT = 0
    THEME_HIGHLIGHT = 1
    OUTLINE = 2
    BORDER = 3
    FOOT = 4
    BEAK = 5
    EYE = 6
    FACE = 7
    HOOD = 8
    NOSE = 9
    BELLY = 10
    UNDERBELLY = 11
    WING = 12
    WING_EDGE = 13
    HEART = 14
    HEART_BORDER = 15
    HEART_SHINE = 16
    FEATHER_SPINE = 17

    @property
    def slot(self) -> str:
        """Slot name as used in species files ("wing-edge")."""
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_slot(cls, slot: Union[str, "Region"]) -> "Region":
        if isinstance(slot, Region):
            return slot
        try:
            return cls[str(slot).strip().upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown palette slot: {slot!r}") from None


# =============================================================================
# Sheet bucket colors
# =============================================================================

# Color each region is painted with in the source sheets
SHEET_COLOR_MAP: dict[str, Region] = {
    "#fff000": Region.THEME_HIGHLIGHT,
    "#ffffff": Region.BORDER,
    "#000000": Region.OUTLINE,
    "#010a19": Region.BEAK,
    "#190301": Region.EYE,
    "#af8e75": Region.FOOT,
    "#639bff": Region.FACE,
    "#99e550": Region.HOOD,
    "#d95763": Region.NOSE,
    "#f8b143": Region.BELLY,
    "#ec8637": Region.UNDERBELLY,
    "#578ae6": Region.WING,
    "#326ed9": Region.WING_EDGE,
    "#c82e2e": Region.HEART,
    "#501a1a": Region.HEART_BORDER,
    "#ff6b6b": Region.HEART_SHINE,
    "#373737": Region.FEATHER_SPINE,
}

# Reverse map: used when drawing without a variant (sheet preview)
TEMPLATE_COLORS: dict[Region, str] = {region: color for color, region in SHEET_COLOR_MAP.items()}


# =============================================================================
# Literal colors
# =============================================================================

# Hand-painted sheets (hats) also use colors outside the bucket table. Each
# such color gets a code above the Region range and is painted as-is for
# every variant.
LITERAL_BASE = 64
MAX_CODE = 255

_literal_colors: dict[int, str] = {}
_literal_codes: dict[str, int] = {}


def literal_region(color: str) -> int:
    """Pixel code that paints *color* verbatim, allocated on first use.

    Raises:
        ValueError: if the color is malformed or the code space is used up
    """
    value = normalize_hex(color)
    code = _literal_codes.get(value)
    if code is None:
        code = LITERAL_BASE + len(_literal_codes)
        if code > MAX_CODE:
            raise ValueError(f"No pixel code left for literal color {value}")
        _literal_codes[value] = code
        _literal_colors[code] = value
    return code


def literal_color(code: int) -> Optional[str]:
    return _literal_colors.get(int(code))


# =============================================================================
# Default colors
# =============================================================================

DEFAULT_COLORS: dict[Region, str] = {
    Region.OUTLINE: "#000000",
    Region.BORDER: "#ffffff",
    Region.BEAK: "#000000",
    Region.EYE: "#000000",
    Region.HEART: "#c82e2e",
    Region.HEART_BORDER: "#501a1a",
    Region.HEART_SHINE: "#ff6b6b",
    Region.FEATHER_SPINE: "#373737",
}

# Regions that borrow another region's color when a species doesn't set them
FALLBACK_REGIONS: dict[Region, Region] = {
    Region.HOOD: Region.FACE,
    Region.NOSE: Region.FACE,
}


def normalize_hex(color: str) -> str:
    """Lowercase a #rrggbb / #rrggbbaa color, dropping a fully opaque alpha."""
    value = color.strip().lower()
    if not value.startswith("#") or len(value) not in (7, 9):
        raise ValueError(f"Invalid color: {color!r}")
    int(value[1:], 16)  # validates hex digits
    if len(value) == 9 and value.endswith("ff"):
        value = value[:7]
    return value


@lru_cache(maxsize=512)
def hex_to_rgba(color: str) -> tuple[int, int, int, int]:
    """Convert '#rrggbb' or '#rrggbbaa' to an (r, g, b, a) byte tuple."""
    value = normalize_hex(color)
    r, g, b = (int(value[i:i + 2], 16) for i in (1, 3, 5))
    a = int(value[7:9], 16) if len(value) == 9 else 255
    return (r, g, b, a)


# =============================================================================
# Variants
# =============================================================================

@dataclass(frozen=True)
class Variant:
    """A named bird skin: colors per region plus feature tags.

    Use ``Variant.create`` to build one from partial colors; it fills in the
    defaults so ``colors`` always covers every paintable region the species
    defines plus the default table. The mapping is a read-only view.
    """

    id: str
    name: str
    description: str
    colors: Mapping[Region, str] = field(hash=False)
    tags: tuple[Tag, ...] = ()

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        description: str,
        colors: Mapping[Union[str, Region], str],
        tags: Iterable[TagLike] = (),
    ) -> "Variant":
        explicit = {Region.from_slot(slot): normalize_hex(color) for slot, color in colors.items()}
        explicit.pop(Region.TRANSPARENT, None)

        resolved: dict[Region, str] = dict(DEFAULT_COLORS)
        face = explicit.get(Region.FACE)
        if face is not None:
            for region, source in FALLBACK_REGIONS.items():
                if source == Region.FACE:
                    resolved[region] = face
        resolved.update(explicit)

        highlight = explicit.get(Region.THEME_HIGHLIGHT) or explicit.get(Region.HOOD) or face
        if highlight is not None:
            resolved[Region.THEME_HIGHLIGHT] = highlight

        return cls(
            id=id,
            name=name,
            description=description,
            colors=MappingProxyType(resolved),
            tags=tuple(Tag.parse(t) for t in tags),
        )

    @property
    def feature_tag(self) -> Tag:
        """Tag that selects this variant's feature layers (BASE if none)."""
        for tag in self.tags:
            if not tag.is_base:
                return tag
        return Tag.BASE

    @property
    def theme_highlight(self) -> Optional[str]:
        """Accent color for host UI chrome."""
        return self.colors.get(Region.THEME_HIGHLIGHT)


_warned_regions: set[int] = set()


def resolve_color(variant: Optional[Variant], region: int) -> Optional[str]:
    """Concrete color for *region*, or None when nothing should be painted.

    Unknown region values (corrupt sheet data) resolve to None and are
    logged once; this never raises so a bad pixel can't stop rendering.
    """
    value = int(region)
    if value >= LITERAL_BASE:
        literal = _literal_colors.get(value)
        if literal is not None:
            return literal
    try:
        slot = Region(value)
    except ValueError:
        if value not in _warned_regions:
            _warned_regions.add(value)
            logger.warning("Unknown palette region %r, drawing as transparent", value)
        return None

    if slot == Region.TRANSPARENT:
        return None
    if variant is None:
        return TEMPLATE_COLORS.get(slot)
    return variant.colors.get(slot, DEFAULT_COLORS.get(slot))

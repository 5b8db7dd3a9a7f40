"""Layer/variant feature tags.

A tag is either ``Tag.BASE`` (applies to every variant) or a named feature
such as ``Tag.feature("tuft")`` that only applies to variants carrying it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

BASE_NAME = "base"

# Names that older sheets/configs used for the base tag
_BASE_ALIASES = frozenset({BASE_NAME, "default", ""})


@dataclass(frozen=True)
class Tag:
    """Base tag (``feature is None``) or a named feature tag."""

    feature: Optional[str] = None

    BASE: ClassVar["Tag"]

    @classmethod
    def feature_tag(cls, name: str) -> "Tag":
        if name in _BASE_ALIASES:
            return cls.BASE
        return cls(name)

    @classmethod
    def parse(cls, value: "TagLike") -> "Tag":
        """Coerce a tag, a feature name, or None (base) into a Tag."""
        if value is None:
            return cls.BASE
        if isinstance(value, Tag):
            return value
        return cls.feature_tag(str(value).strip().lower())

    @property
    def is_base(self) -> bool:
        return self.feature is None

    def applies_to(self, requested: "Tag") -> bool:
        """Whether a layer with this tag takes part in *requested*'s composition."""
        return self.is_base or self == requested

    def __str__(self) -> str:
        return BASE_NAME if self.feature is None else self.feature


Tag.BASE = Tag()
TUFT = Tag("tuft")

TagLike = Union[Tag, str, None]

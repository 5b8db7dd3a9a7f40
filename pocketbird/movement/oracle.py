"""
Layout oracle: the planner's only view of the host surface.

The planner asks for the viewport size, the scroll offset, the elements it
may land on, their rectangles and their computed visibility. Anything that
can answer those questions (a browser bridge, a note-taking app, a test
fixture) can host the bird.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from ..core.geometry import Rect, Size


@dataclass(frozen=True)
class ElementStyle:
    """The computed-style properties that decide whether an element counts as visible."""
    display: str = "block"
    visibility: str = "visible"
    opacity: float = 1.0

    def is_visible(self, min_opacity: float) -> bool:
        return (
            self.display != "none"
            and self.visibility != "hidden"
            and self.opacity >= min_opacity
        )


@runtime_checkable
class LayoutOracle(Protocol):
    def viewport(self) -> Size: ...

    def scroll_y(self) -> float: ...

    def candidates(self) -> Sequence[object]: ...

    def bounding_rect(self, element: object) -> Optional[Rect]:
        """Current rectangle of *element*, or None once it's gone."""
        ...

    def computed_style(self, element: object) -> ElementStyle: ...


@dataclass(eq=False)
class LayoutElement:
    """A landable element of a static layout. Compared by identity."""
    name: str
    rect: Rect
    kind: str = "div"
    style: ElementStyle = field(default_factory=ElementStyle)

    def __repr__(self) -> str:
        return f"<{self.kind} {self.name!r} at {self.rect}>"


class StaticLayout:
    """In-memory layout used by the demo runner and tests.

    Elements can be moved or removed between ticks to exercise tracking.
    When *selectors* is given only elements of those kinds are offered as
    candidates.
    """

    def __init__(
        self,
        viewport: Size,
        elements: Iterable[LayoutElement] = (),
        scroll: float = 0.0,
        selectors: Optional[Sequence[str]] = None,
    ):
        self._viewport = viewport
        self._elements: list[LayoutElement] = list(elements)
        self._scroll = scroll
        self._selectors = set(selectors) if selectors is not None else None

    def viewport(self) -> Size:
        return self._viewport

    def scroll_y(self) -> float:
        return self._scroll

    def candidates(self) -> list[LayoutElement]:
        if self._selectors is None:
            return list(self._elements)
        return [e for e in self._elements if e.kind in self._selectors]

    def bounding_rect(self, element: object) -> Optional[Rect]:
        if isinstance(element, LayoutElement) and any(e is element for e in self._elements):
            return element.rect
        return None

    def computed_style(self, element: object) -> ElementStyle:
        if isinstance(element, LayoutElement):
            return element.style
        return ElementStyle()

    # -- mutation helpers ------------------------------------------------

    def add(self, element: LayoutElement) -> LayoutElement:
        self._elements.append(element)
        return element

    def remove(self, element: LayoutElement) -> None:
        self._elements = [e for e in self._elements if e is not element]

    def move(self, element: LayoutElement, rect: Rect) -> None:
        element.rect = rect

    def resize_viewport(self, viewport: Size) -> None:
        self._viewport = viewport

    def scroll_to(self, y: float) -> None:
        """Scroll the page: element rects shift up by the scrolled distance."""
        delta = y - self._scroll
        self._scroll = y
        for e in self._elements:
            e.rect = Rect(e.rect.left, e.rect.top - delta, e.rect.width, e.rect.height)

"""
Host adapters: what the surrounding application tells the bird about itself.

A host answers which elements the bird may land on, how much of the top of
the viewport is reserved (toolbars, headers), the current page path, and
whether it's a touch device. Layout queries go through a ``LayoutOracle``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

DEFAULT_FOCUSABLE_SELECTORS = ("img", "video", "p", "h1", "h2", "h3", "pre", "blockquote")


class HostAdapter(ABC):
    """Contract every host integration implements."""

    @abstractmethod
    def get_focusable_selectors(self) -> Sequence[str]:
        """Element kinds the bird may perch on."""

    @abstractmethod
    def get_focus_top_margin(self) -> float:
        """Elements whose top is above this line are never chosen."""

    @abstractmethod
    def get_path(self) -> str:
        """Current page path; a query string is ignored for change detection."""

    def is_path_applicable(self, path: str) -> bool:
        """Whether page-bound content saved for *path* shows on the current page."""
        return normalize_path(path) == normalize_path(self.get_path())

    @abstractmethod
    def get_active_page(self) -> Optional[object]:
        """Host object for the current page, if the host has one."""

    def is_touch_device(self) -> bool:
        return False

    def are_sticky_notes_enabled(self) -> bool:
        return True


def normalize_path(path: str) -> str:
    return path.split("?", 1)[0]


class StaticHost(HostAdapter):
    """Fixed answers, for the headless runner and tests."""

    def __init__(
        self,
        selectors: Sequence[str] = DEFAULT_FOCUSABLE_SELECTORS,
        top_margin: float = 0.0,
        path: str = "/",
        touch: bool = False,
        page: Optional[object] = None,
    ):
        self.selectors = tuple(selectors)
        self.top_margin = top_margin
        self.path = path
        self.touch = touch
        self.page = page

    def get_focusable_selectors(self) -> Sequence[str]:
        return self.selectors

    def get_focus_top_margin(self) -> float:
        return self.top_margin

    def get_path(self) -> str:
        return self.path

    def get_active_page(self) -> Optional[object]:
        return self.page

    def is_touch_device(self) -> bool:
        return self.touch

    def navigate(self, path: str) -> None:
        self.path = path

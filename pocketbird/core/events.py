"""Input events pushed by the host and drained once per logic tick.

Host callbacks never touch creature state directly; they enqueue one of the
event records below and the controller applies them in order on the next
logic tick.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterator, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserActivity:
    """Mouse movement, scroll or key press anywhere on the host."""
    now: float


@dataclass(frozen=True)
class PointerOver:
    """Pointer entered the bird sprite."""
    now: float


@dataclass(frozen=True)
class PointerClick:
    """Bird sprite clicked or tapped."""
    now: float


@dataclass(frozen=True)
class TouchMove:
    """Finger dragged across the bird sprite."""
    now: float


@dataclass(frozen=True)
class MenuClosed:
    now: float


@dataclass(frozen=True)
class SetVisible:
    visible: bool


@dataclass(frozen=True)
class ToggleFreeze:
    pass


@dataclass(frozen=True)
class FeatherClicked:
    now: float


@dataclass(frozen=True)
class HatClicked:
    now: float


InputEvent = Union[
    UserActivity, PointerOver, PointerClick, TouchMove,
    MenuClosed, SetVisible, ToggleFreeze, FeatherClicked, HatClicked,
]


class InputQueue:
    """FIFO of pending input events with a single consumer.

    Back-to-back ``UserActivity`` events collapse into the newest one, since
    only the latest activity time matters. A full queue drops its oldest
    event; ``dropped`` counts those since the last drain.
    """

    def __init__(self, maxlen: int = 256):
        self._events: deque[InputEvent] = deque(maxlen=maxlen)
        self.dropped = 0

    def push(self, event: InputEvent) -> None:
        events = self._events
        if isinstance(event, UserActivity) and events and isinstance(events[-1], UserActivity):
            events[-1] = event
            return
        if len(events) == events.maxlen:
            if not self.dropped:
                logger.warning("Input queue full (%d events), dropping the oldest", events.maxlen)
            self.dropped += 1
        events.append(event)

    def drain(self) -> Iterator[InputEvent]:
        """Yield and remove queued events, oldest first."""
        self.dropped = 0
        while self._events:
            yield self._events.popleft()

    def __len__(self) -> int:
        return len(self._events)

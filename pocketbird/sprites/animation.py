"""Frame sequencing with per-frame durations and redraw memoization."""

from __future__ import annotations

import itertools
from typing import Optional, Sequence

from ..core.clock import now_ms
from ..core.errors import AnimationConstructionError
from ..core.geometry import Direction
from ..core.palette import Variant
from ..core.tags import Tag, TagLike
from .canvas import RenderTarget
from .frame import Frame


class Animation:
    """Frames shown for a duration each (milliseconds), optionally looping.

    ``draw`` only repaints when the visible frame, facing or hat changes
    since the previous call for the same start time.
    """

    def __init__(self, frames: Sequence[Frame], durations: Sequence[int], loop: bool = True):
        frames = list(frames)
        durations = list(durations)
        if not frames:
            raise AnimationConstructionError("An animation needs at least one frame")
        if len(frames) != len(durations):
            raise AnimationConstructionError(
                f"{len(frames)} frames but {len(durations)} durations"
            )
        for d in durations:
            if isinstance(d, bool) or not isinstance(d, int) or d <= 0:
                raise AnimationConstructionError(f"Frame durations must be positive integers, got {d!r}")

        self.frames = tuple(frames)
        self.durations = tuple(durations)
        self.loop = loop
        self._cumulative = tuple(itertools.accumulate(self.durations))

        self._last_time_start: Optional[float] = None
        self._last_frame_index = -1
        self._last_direction: Optional[Direction] = None
        self._last_hat: Optional[Tag] = None

    @property
    def duration(self) -> int:
        return self._cumulative[-1]

    @property
    def width(self) -> int:
        return max(frame.width for frame in self.frames)

    @property
    def height(self) -> int:
        return max(frame.height for frame in self.frames)

    def current_frame_index(self, elapsed: float) -> int:
        """First frame whose cumulative duration exceeds *elapsed*, else the last frame."""
        for i, total in enumerate(self._cumulative):
            if elapsed < total:
                return i
        return len(self.frames) - 1

    def frame_index_at(self, elapsed: float) -> int:
        """Frame shown *elapsed* ms after the start, wrapping when looping."""
        if self.loop:
            elapsed %= self.duration
        return self.current_frame_index(elapsed)

    def invalidate(self) -> None:
        """Forget what was drawn last so the next draw repaints."""
        self._last_frame_index = -1
        self._last_direction = None
        self._last_hat = None

    def draw(
        self,
        target: RenderTarget,
        direction: Direction,
        time_start: float,
        pixel_size: int,
        variant: Optional[Variant] = None,
        now: Optional[float] = None,
        clear: bool = True,
        hat: TagLike = None,
    ) -> bool:
        """Draw the frame visible at *now*.

        Returns:
            True once a non-looping animation has run its full duration.
        """
        if self._last_time_start != time_start:
            self.invalidate()
            self._last_time_start = time_start

        if now is None:
            now = now_ms()
        elapsed = now - time_start
        index = self.frame_index_at(elapsed)
        hat = Tag.parse(hat)
        if (
            index != self._last_frame_index
            or direction != self._last_direction
            or hat != self._last_hat
        ):
            frame = self.frames[index]
            if clear:
                target.clear_rect(0, 0, self.width * pixel_size, self.height * pixel_size)
            frame.draw(target, direction, pixel_size, variant, hat)
            self._last_frame_index = index
            self._last_direction = direction
            self._last_hat = hat

        return not self.loop and elapsed >= self.duration

"""
Autonomous movement state machine.

The bird idles, hops along whatever it is standing on, and flies between
points of interest it picks from the host layout. Two entry points are
driven by the tick driver:

- ``logic_tick`` (fixed rate): idle decisions and hop progress
- ``paint_tick`` (display rate): focus tracking and flight progress

Positions are in creature space: x from the viewport's left edge, y upwards
from its bottom edge. Host rectangles (y down) are converted with
``y = viewport.height - rect.top``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..core.clock import now_ms
from ..core.config import BirbConfig
from ..core.geometry import Bounds, Direction, Rect
from .oracle import LayoutOracle
from .path import ParabolicPath

logger = logging.getLogger(__name__)


class State(str, Enum):
    IDLE = "idle"
    HOP = "hop"
    FLYING = "flying"


@dataclass
class MovementState:
    """Where the bird is, where it is going and what it is standing on."""
    mode: State = State.IDLE
    state_start: float = 0.0
    x: float = 40.0
    y: float = 0.0
    start_x: float = 0.0
    start_y: float = 0.0
    target_x: float = 0.0
    target_y: float = 0.0
    direction: Direction = Direction.RIGHT
    focus: Optional[object] = None
    bounds: Bounds = field(default_factory=lambda: Bounds(0, 0, 0))


StateListener = Callable[[State, float], None]


class MovementPlanner:
    """Decides where the bird goes next and moves it there.

    Usage::

        planner = MovementPlanner(layout, config, rng=random.Random(7))
        planner.focus_on_element(now, teleport=True)
        ...
        planner.logic_tick(now)      # every update interval
        planner.paint_tick(now)      # every frame
    """

    def __init__(
        self,
        oracle: LayoutOracle,
        config: Optional[BirbConfig] = None,
        rng: Optional[random.Random] = None,
        focus_top_margin: float = 0.0,
        touch: bool = False,
        on_state_change: Optional[StateListener] = None,
        now: Optional[float] = None,
    ):
        self.oracle = oracle
        self.config = config or BirbConfig()
        self.rng = rng or random.Random()
        self.focus_top_margin = focus_top_margin
        self.fly_speed = self.config.movement.effective_fly_speed(touch)
        self.on_state_change = on_state_change

        start = now_ms() if now is None else now
        self.state = MovementState(state_start=start)
        self.last_action = start
        self.frozen = False
        self._focus_rect: Optional[Rect] = None
        self.state.bounds = self._ground_bounds()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def mode(self) -> State:
        return self.state.mode

    @property
    def focus(self) -> Optional[object]:
        return self.state.focus

    @property
    def is_absolute(self) -> bool:
        """Anchored to page content (True) or fixed to the viewport."""
        return self.state.focus is not None and self.state.mode in (State.IDLE, State.HOP)

    def focused_y(self) -> float:
        return self.oracle.viewport().height - self.state.bounds.top

    def is_within_horizontal_bounds(self) -> bool:
        return self.state.bounds.contains_x(self.state.x)

    def note_activity(self, now: float) -> None:
        """Record user activity; the AFK timer restarts from *now*."""
        self.last_action = now

    # ------------------------------------------------------------------
    # Freeze
    # ------------------------------------------------------------------

    def freeze(self) -> None:
        self.frozen = True

    def unfreeze(self) -> None:
        self.frozen = False

    def toggle_freeze(self) -> bool:
        self.frozen = not self.frozen
        logger.info("Movement %s", "frozen" if self.frozen else "unfrozen")
        return self.frozen

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def logic_tick(self, now: float, busy: bool = False, happy: bool = False) -> bool:
        """Fixed-rate update.

        Args:
            now: Current time in ms.
            busy: The menu is open; the bird stays put.
            happy: A pet reaction is playing; no hopping.

        Returns:
            True when the bird went looking for a new perch because the user
            was away (the AFK timer has been restarted).
        """
        state = self.state
        movement = self.config.movement
        if state.mode == State.IDLE and not self.frozen and not busy:
            if (
                now - state.state_start > self.config.timing.hop_delay
                and self.rng.random() < movement.hop_chance
                and not happy
            ):
                self.hop(now)
            elif now - self.last_action > self.config.afk_time:
                if state.focus is None or self.rng.random() < movement.focus_switch_chance:
                    self.focus_on_element(now)
                    self.last_action = now
                    return True
        elif state.mode == State.HOP:
            if self._advance(now, movement.hop_speed, movement.hop_curvature):
                self._set_state(State.IDLE, now)
        return False

    def paint_tick(self, now: float) -> None:
        """Display-rate update: track the perch, fly, follow the target."""
        state = self.state
        self.update_focus_bounds(now)

        if state.mode == State.IDLE:
            if state.focus is not None and not self.is_within_horizontal_bounds():
                self.fly_somewhere(now)
            if state.mode == State.IDLE:
                state.y = self.focused_y()
        elif state.mode == State.FLYING:
            movement = self.config.movement
            if self._advance(now, self.fly_speed, movement.fly_curvature):
                self._set_state(State.IDLE, now)

        old_target_y = state.target_y
        state.target_y = self.focused_y()
        state.start_y += state.target_y - old_target_y
        viewport = self.oracle.viewport()
        if state.target_y < 0 or state.target_y > viewport.height:
            # perch scrolled out of view
            self.fly_somewhere(now)

        max_y = viewport.height * self.config.movement.max_height_factor
        state.start_y = min(state.start_y, max_y)
        state.y = min(state.y, max_y)
        state.target_y = min(state.target_y, max_y)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def hop(self, now: float) -> None:
        """Short arc left or right along the current perch."""
        if self.frozen or self.state.mode != State.IDLE:
            return
        state = self.state
        distance = self.config.movement.hop_distance
        bounds = state.bounds
        left_ok = state.x - distance >= bounds.left
        right_ok = state.x + distance <= bounds.right

        if left_ok and right_ok:
            go_left = self.rng.random() < 0.5
        elif left_ok or right_ok:
            go_left = left_ok
        else:
            go_left = state.x - bounds.left > bounds.right - state.x

        if go_left:
            target_x = max(bounds.left, state.x - distance)
        else:
            target_x = min(bounds.right, state.x + distance)

        self._set_state(State.HOP, now)
        state.target_x = target_x
        state.target_y = self.focused_y()
        logger.debug("Hop %s to x=%.1f", "left" if go_left else "right", target_x)

    def settle(self, now: float) -> None:
        """End a hop on the spot. Other states are left alone."""
        if self.state.mode == State.HOP:
            logger.debug("Hop cut short at x=%.1f", self.state.x)
            self._set_state(State.IDLE, now)

    def fly_to(self, x: float, y: float, now: float) -> None:
        self.state.target_x = x
        self.state.target_y = y
        self._set_state(State.FLYING, now)

    def teleport_to(self, x: float, y: float, now: float) -> None:
        self.state.x = x
        self.state.y = y
        self._set_state(State.IDLE, now)

    def fly_somewhere(self, now: float) -> None:
        """Fly to a random element if there is one, else to the ground."""
        if self.frozen:
            return
        if not self.focus_on_element(now):
            self.focus_on_ground(now)

    def focus_on_ground(self, now: float) -> None:
        self._set_focus(None)
        self.update_focus_bounds(now)
        self.fly_to(self.rng.random() * self.oracle.viewport().width, 0, now)

    def focus_on_element(self, now: float, teleport: bool = False) -> bool:
        """Pick a new perch and go there.

        With no landable element the bird heads for a random spot on the
        ground instead.

        Returns:
            True if an element was found.
        """
        if self.frozen:
            return False
        self._set_focus(self.pick_focus_candidate())
        self.update_focus_bounds(now)
        bounds = self.state.bounds
        x = self.rng.random() * (bounds.right - bounds.left) + bounds.left
        y = self.focused_y()
        if teleport:
            self.teleport_to(x, y, now)
        else:
            self.fly_to(x, y, now)
        return self.state.focus is not None

    def pick_focus_candidate(self) -> Optional[object]:
        """Random landable element, or None when nothing qualifies."""
        viewport = self.oracle.viewport()
        movement = self.config.movement
        eligible = []
        for element in self.oracle.candidates():
            if element is self.state.focus:
                continue
            rect = self.oracle.bounding_rect(element)
            if rect is None:
                continue
            if not (
                rect.left >= 0
                and rect.top >= self.focus_top_margin
                and rect.right <= viewport.width
                and rect.top <= viewport.height
            ):
                continue
            if rect.width < movement.min_focus_element_width:
                continue
            if not self.oracle.computed_style(element).is_visible(movement.min_focus_opacity):
                continue
            eligible.append(element)
        if not eligible:
            return None
        return self.rng.choice(eligible)

    # ------------------------------------------------------------------
    # Focus tracking
    # ------------------------------------------------------------------

    def update_focus_bounds(self, now: float) -> None:
        """Refresh the perch rectangle, following it if it moved.

        A perch that moved without changing size carries the bird with it.
        A perch that disappeared sends the bird somewhere else.
        """
        state = self.state
        if state.focus is None:
            state.bounds = self._ground_bounds()
            return

        rect = self.oracle.bounding_rect(state.focus)
        if rect is None:
            logger.info("Focused element vanished, finding a new perch")
            self._set_focus(None)
            state.bounds = self._ground_bounds()
            self.fly_somewhere(now)
            return

        previous = self._focus_rect
        if previous is not None and rect.left != previous.left and rect.same_size(previous):
            dx = rect.left - previous.left
            if state.mode == State.IDLE:
                state.x += dx
            else:
                state.start_x += dx
                state.target_x += dx
        self._focus_rect = rect
        state.bounds = Bounds(rect.left, rect.right, rect.top)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ground_bounds(self) -> Bounds:
        viewport = self.oracle.viewport()
        return Bounds(0, viewport.width, viewport.height)

    def _set_focus(self, element: Optional[object]) -> None:
        if element is not self.state.focus:
            logger.info("Focusing on %s", element if element is not None else "the ground")
        self.state.focus = element
        self._focus_rect = None

    def _set_state(self, mode: State, now: float) -> None:
        state = self.state
        state.state_start = now
        state.start_x = state.x
        state.start_y = state.y
        state.mode = mode
        if self.on_state_change is not None:
            self.on_state_change(mode, now)

    def _advance(self, now: float, speed: float, intensity: float) -> bool:
        """Move along the current arc. Returns True on arrival."""
        state = self.state
        path = ParabolicPath(state.start_x, state.start_y, state.target_x, state.target_y, intensity)
        viewport = self.oracle.viewport()
        if path.distance > max(viewport.width, viewport.height) / 2:
            speed *= self.config.movement.long_distance_boost
        state.x, state.y = path.position(now - state.state_start, speed)
        if ParabolicPath.arrived(state.x, state.y, state.target_x, state.target_y):
            state.x = state.target_x
            state.y = state.target_y
            return True
        state.direction = Direction.RIGHT if state.target_x > state.x else Direction.LEFT
        return False

"""Runs a controller's ticks on the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .controller import CreatureController, Placement
from .core.clock import now_ms
from .core.scheduler import Scheduler

logger = logging.getLogger(__name__)

PlacementCallback = Callable[[Placement], None]


class TickDriver:
    """Drives the logic tick at a fixed rate and the paint tick at display rate.

    Placements from the paint tick go to *on_placement*. While the bird is
    hidden the scheduler drops to idle mode and paints less often.
    """

    def __init__(
        self,
        controller: CreatureController,
        loop: asyncio.AbstractEventLoop,
        on_placement: Optional[PlacementCallback] = None,
        clock: Callable[[], float] = now_ms,
    ):
        self.controller = controller
        self.on_placement = on_placement
        self.clock = clock
        self.last_placement: Optional[Placement] = None
        self.scheduler = Scheduler(loop)

        display = controller.config.display
        timing = controller.config.timing
        self.scheduler.register("logic", self.logic, interval=display.update_interval_ms / 1000)
        self.scheduler.register(
            "paint",
            self.paint,
            interval=display.paint_interval_ms / 1000,
            idle_interval=display.hidden_paint_interval_ms / 1000,
        )
        self.scheduler.register("path", controller.check_path, interval=timing.path_check_interval_ms / 1000)

    def logic(self) -> None:
        self.controller.logic_tick(self.clock())
        self.scheduler.set_mode("active" if self.controller.visible else "idle")

    def paint(self) -> None:
        placement = self.controller.paint_tick(self.clock())
        if placement is None:
            return
        self.last_placement = placement
        if self.on_placement is not None:
            self.on_placement(placement)

    def start(self) -> None:
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    async def run_for(self, seconds: float) -> Optional[Placement]:
        """Run the ticks for *seconds*, then stop. Returns the last placement."""
        logger.info("Running ticks for %.1fs", seconds)
        self.start()
        try:
            await asyncio.sleep(seconds)
        finally:
            self.stop()
        return self.last_placement

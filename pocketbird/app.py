"""Headless runner: a bird on a static page, printed to the terminal."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from .controller import CreatureController, Placement, build_controller
from .core.config import CONFIG_PATH, BirbConfig
from .core.errors import PocketBirdError
from .core.geometry import Rect, Size
from .core.save_data import JsonSaveStore, MemorySaveStore, SaveStore
from .driver import TickDriver
from .host import StaticHost
from .movement.oracle import LayoutElement, StaticLayout

logger = logging.getLogger(__name__)

DEMO_VIEWPORT = Size(800, 600)


def demo_layout(host: StaticHost) -> StaticLayout:
    """A small page: a banner image, two paragraphs and a code block."""
    return StaticLayout(
        DEMO_VIEWPORT,
        [
            LayoutElement("banner", Rect(40, 80, 720, 120), kind="img"),
            LayoutElement("intro", Rect(60, 240, 400, 60), kind="p"),
            LayoutElement("body", Rect(60, 330, 520, 90), kind="p"),
            LayoutElement("snippet", Rect(300, 460, 300, 70), kind="pre"),
        ],
        selectors=host.get_focusable_selectors(),
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pocketbird", description="Run the pocket bird headless.")
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help="config JSON file")
    parser.add_argument("--save", type=Path, default=None, help="save file (default: in memory)")
    parser.add_argument("--seconds", type=float, default=3.0, help="how long to run")
    parser.add_argument("--species", default=None, help="species to show")
    parser.add_argument("--debug", action="store_true", help="restless bird, debug logging")
    parser.add_argument("--ascii", action="store_true", help="plain characters instead of colors")
    return parser.parse_args(argv)


def _on_placement(placement: Placement) -> None:
    logger.debug(
        "Placement left=%.1f bottom=%.1f %s facing %s",
        placement.left,
        placement.bottom,
        "absolute" if placement.absolute else "fixed",
        placement.direction.name,
    )


def build_demo(args: argparse.Namespace) -> CreatureController:
    config = BirbConfig.load(args.config)
    if args.debug:
        config.debug = True
    if args.species:
        config.default_species = args.species

    store: SaveStore = JsonSaveStore(args.save) if args.save else MemorySaveStore()
    host = StaticHost()
    return build_controller(host, demo_layout(host), config, save_store=store)


async def run(controller: CreatureController, seconds: float) -> Optional[Placement]:
    driver = TickDriver(controller, asyncio.get_running_loop(), on_placement=_on_placement)
    return await driver.run_for(seconds)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for ``python -m pocketbird``."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        stream=sys.stderr,
        format="%(name)s %(levelname)s: %(message)s",
    )

    try:
        controller = build_demo(args)
    except PocketBirdError:
        logger.exception("Could not start the bird")
        return 1

    placement = asyncio.run(run(controller, args.seconds))
    state = controller.planner.state
    print(f"{controller.variant.name} ({controller.planner.mode.value}) at x={state.x:.1f} y={state.y:.1f}")
    if placement is not None:
        print(f"canvas left={placement.left:.1f} bottom={placement.bottom:.1f}")
    print(controller.sprite.canvas.render_ascii(ansi=not args.ascii))
    return 0

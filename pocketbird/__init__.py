"""Pocket Bird - a small pixel-art bird that lives on your screen."""

from .controller import CreatureController, Placement, build_controller
from .driver import TickDriver

__all__ = ["CreatureController", "Placement", "TickDriver", "build_controller"]

"""Autonomous movement: target selection, arcs and the state machine."""

from .oracle import ElementStyle, LayoutElement, LayoutOracle, StaticLayout
from .path import ParabolicPath, parabolic_lerp
from .planner import MovementPlanner, MovementState, State

__all__ = [
    "ElementStyle",
    "LayoutElement",
    "LayoutOracle",
    "MovementPlanner",
    "MovementState",
    "ParabolicPath",
    "State",
    "StaticLayout",
    "parabolic_lerp",
]

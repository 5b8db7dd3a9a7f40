"""Bird configuration: display, movement and timing sections."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".pocketbird" / "config.json"

SECOND = 1000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE


@dataclass
class DisplayConfig:
    """How big the bird is drawn and how often it is painted."""
    sprite_width: int = 32
    sprite_height: int = 32
    feather_width: int = 32
    canvas_pixel_size: int = 1
    css_scale: float = 1
    update_interval_ms: float = 1000 / 60
    paint_interval_ms: float = 1000 / 60
    hidden_paint_interval_ms: float = 250
    # floor for the host's reserved top strip (headers, toolbars)
    focus_top_margin: float = 0

    @property
    def window_pixel_size(self) -> float:
        """Size of one sprite pixel on the host surface."""
        return self.canvas_pixel_size * self.css_scale


@dataclass
class MovementConfig:
    """Speeds and odds for the autonomous movement state machine."""
    hop_speed: float = 0.07
    fly_speed: float = 0.25
    touch_fly_speed: float = 0.175
    hop_distance: float = 35
    hop_chance: float = 1 / 150
    focus_switch_chance: float = 1 / 1200
    min_focus_element_width: float = 100
    min_focus_opacity: float = 0.25
    long_distance_boost: float = 1.3
    hop_curvature: float = 2.0
    fly_curvature: float = 2.5
    max_height_factor: float = 1.5

    def effective_fly_speed(self, touch: bool) -> float:
        """Flight speed for the host; touch screens get the slower one."""
        return self.touch_fly_speed if touch else self.fly_speed


@dataclass
class TimingConfig:
    """Delays, cooldowns and collectible odds (all in milliseconds)."""
    hop_delay: float = 500
    afk_time: float = 5 * SECOND
    super_afk_time: float = HOUR
    pet_menu_cooldown: float = SECOND
    pet_boost_duration: float = 5 * MINUTE
    pet_hover_window: float = SECOND
    pet_hover_count: int = 3
    pet_stack_size: int = 10
    feather_chance: float = 1 / (60 * 60 * 60 * 2)
    feather_boost: float = 2.0
    hat_chance: float = 1 / (60 * 60 * 10)
    pet_hat_boost: float = 1.5
    feather_fall_speed: float = 1
    path_check_interval_ms: float = 150


def _section(cls, d):
    if not isinstance(d, dict):
        return cls()
    known = {f.name for f in cls.__dataclass_fields__.values()}
    return cls(**{k: v for k, v in d.items() if k in known})


@dataclass
class BirbConfig:
    """Main configuration combining all sections."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    movement: MovementConfig = field(default_factory=MovementConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    debug: bool = False
    default_species: Optional[str] = None

    @property
    def afk_time(self) -> float:
        """AFK delay in effect; debug mode makes the bird restless."""
        return 0 if self.debug else self.timing.afk_time

    def to_dict(self) -> dict:
        d = {
            "display": asdict(self.display),
            "movement": asdict(self.movement),
            "timing": asdict(self.timing),
            "debug": self.debug,
        }
        if self.default_species:
            d["default_species"] = self.default_species
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "BirbConfig":
        if not isinstance(d, dict):
            return cls()
        return cls(
            display=_section(DisplayConfig, d.get("display", {})),
            movement=_section(MovementConfig, d.get("movement", {})),
            timing=_section(TimingConfig, d.get("timing", {})),
            debug=bool(d.get("debug", False)),
            default_species=d.get("default_species"),
        )

    def save(self, path: Path = CONFIG_PATH):
        path.parent.mkdir(parents=True, exist_ok=True)
        temp = path.with_suffix(".tmp")
        temp.write_text(json.dumps(self.to_dict(), indent=2))
        temp.replace(path)

    @classmethod
    def load(cls, path: Path = CONFIG_PATH) -> "BirbConfig":
        try:
            if path.exists():
                return cls.from_dict(json.loads(path.read_text()))
        except (json.JSONDecodeError, OSError, TypeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
        return cls()

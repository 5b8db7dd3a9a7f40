"""Persisted player state: unlocked species and hats, what is worn, and settings."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

SAVE_PATH = Path.home() / ".pocketbird" / "save.json"
DEFAULT_SPECIES = "bluebird"
DEFAULT_HAT = "none"


@dataclass
class UserSettings:
    """Player-facing toggles."""
    birb_mode: bool = False
    sound_enabled: bool = True

    @classmethod
    def from_dict(cls, d: Any) -> "UserSettings":
        if not isinstance(d, dict):
            return cls()
        return cls(
            birb_mode=bool(d.get("birbMode", False)),
            sound_enabled=bool(d.get("soundEnabled", True)),
        )

    def to_dict(self) -> dict:
        return {"birbMode": self.birb_mode, "soundEnabled": self.sound_enabled}


@dataclass
class SaveData:
    """Everything written to storage between sessions.

    ``sticky_notes`` is carried through untouched; this package never
    interprets it.
    """
    unlocked_species: list[str] = field(default_factory=lambda: [DEFAULT_SPECIES])
    current_species: str = DEFAULT_SPECIES
    settings: UserSettings = field(default_factory=UserSettings)
    sticky_notes: Optional[Any] = None
    unlocked_hats: list[str] = field(default_factory=lambda: [DEFAULT_HAT])
    current_hat: str = DEFAULT_HAT

    def unlock(self, species_id: str) -> bool:
        """Add *species_id* to the unlocked list. Returns False if already there."""
        if species_id in self.unlocked_species:
            return False
        self.unlocked_species.append(species_id)
        return True

    def unlock_hat(self, hat_id: str) -> bool:
        if hat_id in self.unlocked_hats:
            return False
        self.unlocked_hats.append(hat_id)
        return True

    def to_dict(self) -> dict:
        d = {
            "unlockedSpecies": list(self.unlocked_species),
            "currentSpecies": self.current_species,
            "settings": self.settings.to_dict(),
            "unlockedHats": list(self.unlocked_hats),
            "currentHat": self.current_hat,
        }
        if self.sticky_notes is not None:
            d["stickyNotes"] = self.sticky_notes
        return d

    @classmethod
    def from_dict(cls, d: Any) -> "SaveData":
        if not isinstance(d, dict):
            return cls()
        unlocked = d.get("unlockedSpecies")
        if not isinstance(unlocked, list) or not unlocked:
            unlocked = [DEFAULT_SPECIES]
        current = d.get("currentSpecies", DEFAULT_SPECIES)
        if current not in unlocked:
            current = unlocked[0]
        hats = d.get("unlockedHats")
        if not isinstance(hats, list) or not hats:
            hats = [DEFAULT_HAT]
        hat = d.get("currentHat", DEFAULT_HAT)
        if hat not in hats:
            hat = DEFAULT_HAT
        return cls(
            unlocked_species=[str(s) for s in unlocked],
            current_species=str(current),
            settings=UserSettings.from_dict(d.get("settings")),
            sticky_notes=d.get("stickyNotes"),
            unlocked_hats=[str(h) for h in hats],
            current_hat=str(hat),
        )


class SaveStore(ABC):
    """Where save data lives. Implementations never raise on a missing save."""

    @abstractmethod
    def load(self) -> SaveData:
        ...

    @abstractmethod
    def save(self, data: SaveData) -> None:
        ...

    @abstractmethod
    def reset(self) -> None:
        """Forget everything that was saved."""
        ...


class MemorySaveStore(SaveStore):
    """Keeps the last saved state in memory (tests, demo runs)."""

    def __init__(self, initial: Optional[SaveData] = None):
        self._raw: Optional[dict] = initial.to_dict() if initial is not None else None
        self.save_count = 0

    def load(self) -> SaveData:
        if self._raw is None:
            return SaveData()
        return SaveData.from_dict(json.loads(json.dumps(self._raw)))

    def save(self, data: SaveData) -> None:
        self._raw = data.to_dict()
        self.save_count += 1

    def reset(self) -> None:
        self._raw = None


class JsonSaveStore(SaveStore):
    """Save data in a JSON file, replaced atomically on every write."""

    def __init__(self, path: Path = SAVE_PATH):
        self.path = Path(path)

    def load(self) -> SaveData:
        try:
            if self.path.exists():
                return SaveData.from_dict(json.loads(self.path.read_text()))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable save file %s: %s", self.path, e)
        return SaveData()

    def save(self, data: SaveData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp = self.path.with_suffix(".tmp")
        temp.write_text(json.dumps(data.to_dict(), indent=2))
        temp.replace(self.path)
        logger.debug("Saved %s", self.path)

    def reset(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Removed save file %s", self.path)

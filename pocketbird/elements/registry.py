"""
Species registry - loads and caches bird species definitions from YAML.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..core.errors import SpeciesError
from ..core.palette import Variant

logger = logging.getLogger(__name__)

SPECIES_FILE = Path(__file__).parent / "species.yaml"


class SpeciesRegistry:
    """
    Registry of every species the bird can be drawn as.

    A missing or unparseable species file is fatal; a single malformed
    species entry is logged and skipped so the rest stay available.

    Usage:
        registry = SpeciesRegistry()
        registry.load_all()

        bluebird = registry.get('bluebird')
        for species_id in registry.ids():
            ...
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize registry with the species file path.

        Args:
            path: YAML file with a top-level ``species`` mapping.
                  Defaults to the species file shipped with the package.
        """
        self.path = Path(path) if path is not None else SPECIES_FILE
        self._species: dict[str, Variant] = {}
        self._default_id: Optional[str] = None
        self._lock = threading.RLock()

    def load_all(self) -> None:
        """Load (or reload) every species from the file."""
        data = self._read()
        entries = data.get("species")
        if not isinstance(entries, dict) or not entries:
            raise SpeciesError(f"No species defined in {self.path}")

        loaded: dict[str, Variant] = {}
        for species_id, entry in entries.items():
            variant = self._parse_entry(str(species_id), entry)
            if variant is not None:
                loaded[variant.id] = variant
        if not loaded:
            raise SpeciesError(f"Every species in {self.path} is malformed")

        default_id = data.get("default") or next(iter(loaded))
        if default_id not in loaded:
            raise SpeciesError(f"Default species '{default_id}' is not defined")

        with self._lock:
            self._species = loaded
            self._default_id = default_id
        logger.info("Loaded %d species from %s", len(loaded), self.path.name)

    def _read(self) -> dict:
        try:
            with open(self.path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise SpeciesError(f"Cannot read species file {self.path}: {e}") from e
        except yaml.YAMLError as e:
            raise SpeciesError(f"Cannot parse species file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise SpeciesError(f"Species file {self.path} must contain a mapping")
        return data

    def _parse_entry(self, species_id: str, entry: Any) -> Optional[Variant]:
        """Build a Variant from one YAML entry, or None if it's malformed."""
        if not isinstance(entry, dict):
            logger.warning("Skipping species '%s': expected a mapping", species_id)
            return None
        colors = entry.get("colors") or {}
        tags = entry.get("tags") or []
        if not isinstance(colors, dict) or not isinstance(tags, list):
            logger.warning("Skipping species '%s': colors must be a mapping and tags a list", species_id)
            return None
        try:
            return Variant.create(
                id=species_id,
                name=str(entry.get("name", species_id)),
                description=str(entry.get("description", "")),
                colors=colors,
                tags=tags,
            )
        except ValueError as e:
            logger.warning("Skipping species '%s': %s", species_id, e)
            return None

    def get(self, species_id: str) -> Variant:
        """
        Retrieve a species by id.

        Raises:
            SpeciesError: if the id is unknown
        """
        with self._lock:
            try:
                return self._species[species_id]
            except KeyError:
                raise SpeciesError(f"Unknown species: {species_id}") from None

    def ids(self) -> list[str]:
        """All species ids in file order."""
        with self._lock:
            return list(self._species.keys())

    @property
    def default_id(self) -> str:
        with self._lock:
            if self._default_id is None:
                raise SpeciesError("Species registry has not been loaded")
            return self._default_id

    def __contains__(self, species_id: str) -> bool:
        with self._lock:
            return species_id in self._species

    def __len__(self) -> int:
        with self._lock:
            return len(self._species)

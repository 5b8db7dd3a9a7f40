"""
Data-driven species definitions.

Each species is a palette (colors per sprite region) plus feature tags,
loaded from YAML.
"""

from .registry import SpeciesRegistry

__all__ = ["SpeciesRegistry"]

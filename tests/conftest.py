"""Shared test fixtures."""

import pytest

from pocketbird.core.config import BirbConfig
from pocketbird.core.geometry import Rect, Size
from pocketbird.core.palette import Variant
from pocketbird.core.save_data import MemorySaveStore
from pocketbird.elements.registry import SpeciesRegistry
from pocketbird.host import StaticHost
from pocketbird.movement.oracle import LayoutElement, StaticLayout
from pocketbird.movement.planner import MovementPlanner


class ScriptedRandom:
    """Stands in for random.Random: random() replays scripted values, then a
    default; choice() takes the first item."""

    def __init__(self, values=(), default=0.99):
        self.values = list(values)
        self.default = default

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.default

    def choice(self, seq):
        return seq[0]


class RecordingTarget:
    """Render target that records every call instead of drawing."""

    def __init__(self, width=64, height=64):
        self.width = width
        self.height = height
        self.fills = []
        self.clears = []

    def clear_rect(self, x, y, w, h):
        self.clears.append((x, y, w, h))

    def fill_rect(self, x, y, w, h, color):
        self.fills.append((x, y, w, h, color))

    def reset(self):
        self.fills.clear()
        self.clears.clear()


@pytest.fixture
def variant():
    """A plain species with a couple of colors."""
    return Variant.create(
        "testbird",
        "Test Bird",
        "Only exists in tests.",
        {"face": "#112233", "wing": "#445566", "belly": "#778899"},
    )


@pytest.fixture
def tufted_variant():
    return Variant.create("tufty", "Tufty", "", {"face": "#aabbcc"}, tags=["tuft"])


@pytest.fixture
def registry():
    reg = SpeciesRegistry()
    reg.load_all()
    return reg


@pytest.fixture
def viewport():
    return Size(500, 400)


@pytest.fixture
def banner():
    return LayoutElement("banner", Rect(100, 150, 200, 40), kind="img")


@pytest.fixture
def layout(viewport, banner):
    """Viewport with one landable element."""
    return StaticLayout(viewport, [banner])


@pytest.fixture
def empty_layout(viewport):
    return StaticLayout(viewport, [])


@pytest.fixture
def config():
    return BirbConfig()


@pytest.fixture
def make_planner(config):
    """Factory for planners starting at t=0 with scripted randomness."""

    def _make(layout, values=(), default=0.99, **kwargs):
        rng = ScriptedRandom(values, default)
        return MovementPlanner(layout, config, rng=rng, now=0, **kwargs)

    return _make


@pytest.fixture
def host():
    return StaticHost(path="/home")


@pytest.fixture
def save_store():
    return MemorySaveStore()


@pytest.fixture
def scripted():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def target():
    return RecordingTarget()

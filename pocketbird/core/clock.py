"""Millisecond clock used by ticks that don't get an explicit ``now``."""

import time


def now_ms() -> float:
    """Monotonic time in milliseconds."""
    return time.monotonic() * 1000.0

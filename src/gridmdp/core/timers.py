from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from .log import get_logger


class Timer:
    """Wall-clock stopwatch started on construction."""

    def __init__(self) -> None:
        self.started = time.perf_counter()

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.started


@contextmanager
def timed(label: str) -> Iterator[Timer]:
    """Log how long the block took under the `gridmdp.timer` logger."""
    t = Timer()
    try:
        yield t
    finally:
        get_logger("gridmdp.timer").info("%s took %.3fs", label, t.elapsed)

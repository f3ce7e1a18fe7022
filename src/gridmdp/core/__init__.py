# Shared utilities for all modules. Explicit re-exports for a clean public API.

from .io import (
    ensure_dir as ensure_dir,
    load_json as load_json,
    load_yaml as load_yaml,
    read_lines as read_lines,
    save_json as save_json,
    save_yaml as save_yaml,
)
from .log import get_logger as get_logger
from .seeding import make_rng as make_rng
from .timers import Timer as Timer, timed as timed

__all__ = [
    "make_rng",
    "ensure_dir",
    "load_json",
    "load_yaml",
    "read_lines",
    "save_json",
    "save_yaml",
    "get_logger",
    "Timer",
    "timed",
]

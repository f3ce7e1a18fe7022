from __future__ import annotations

import logging
from typing import Optional

_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_logger(name: str = "gridmdp", level: Optional[str] = None) -> logging.Logger:
    """
    Named logger under the "gridmdp" hierarchy.

    Handlers are attached only to the root "gridmdp" logger, and only once, so
    repeated calls (tests, CLI re-entry) do not duplicate output.
    """
    root = logging.getLogger("gridmdp")
    if not root.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(ch)
        root.setLevel(logging.WARNING)
    if level:
        lvl = getattr(logging, level.upper(), logging.INFO)
        root.setLevel(lvl)
    return logging.getLogger(name)

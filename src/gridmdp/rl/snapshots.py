from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .gridworld import Cell, Direction

NO_ACTION = -1  # policy entry for terminal and obstacle cells


def freeze(a: np.ndarray) -> np.ndarray:
    """Copy `a` and mark the copy read-only."""
    out = np.array(a, copy=True)
    out.flags.writeable = False
    return out


@dataclass(frozen=True)
class ValueSnapshot:
    """
    State values after one value-iteration sweep.

    values: [height, width]; terminals hold their reward, obstacles hold 0 and are meaningless
    policy: [height, width] Direction index chosen by the sweep's max-search, NO_ACTION where none
    """

    index: int
    values: np.ndarray
    policy: np.ndarray

    def value(self, cell: Cell) -> float:
        return float(self.values[cell])

    def action(self, cell: Cell) -> Optional[Direction]:
        a = int(self.policy[cell])
        return None if a == NO_ACTION else Direction(a)


@dataclass(frozen=True)
class QSnapshot:
    """
    Q-table after one Q-learning episode.

    q: [height, width, 4] indexed by Direction; a terminal cell holds its reward
    in every slot, obstacles hold 0 and are never entered.
    """

    index: int
    q: np.ndarray

    def value(self, cell: Cell) -> float:
        return float(np.max(self.q[cell]))

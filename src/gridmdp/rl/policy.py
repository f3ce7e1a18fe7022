from __future__ import annotations

import numpy as np

from .gridworld import Cell, Direction


def tied_best(action_values: np.ndarray) -> np.ndarray:
    """Indices of every entry equal (exactly) to the maximum."""
    return np.flatnonzero(action_values == np.max(action_values))


def best_action(q: np.ndarray, cell: Cell, rng: np.random.Generator) -> Direction:
    """
    Greedy action at `cell` of a [height, width, 4] Q table, ties broken
    uniformly at random. No tolerance: values must compare equal.
    """
    ties = tied_best(q[cell])
    return Direction(int(ties[rng.integers(len(ties))]))

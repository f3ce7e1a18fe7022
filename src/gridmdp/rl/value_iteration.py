from __future__ import annotations

from typing import Iterator, List, Tuple

import numpy as np

from .gridworld import DIRECTIONS, Cell, Direction, GridModel
from .snapshots import NO_ACTION, ValueSnapshot, freeze
from .transitions import TransitionModel


def initial_values(grid: GridModel) -> np.ndarray:
    """All-zero table read by the first sweep (terminals are pinned on write)."""
    return np.zeros(grid.shape, dtype=np.float64)


def action_value(
    cell: Cell,
    direction: Direction,
    values: np.ndarray,
    model: TransitionModel,
    discount: float,
) -> float:
    """
    Expected one-step return of `direction` at `cell` under `values`:
    sum_p p * (step_cost + discount * V(outcome)).
    """
    step = model.grid.step_cost
    return sum(p * (step + discount * values[nxt]) for nxt, p in model.outcomes(cell, direction))


def best_backup(
    cell: Cell,
    values: np.ndarray,
    model: TransitionModel,
    discount: float,
) -> Tuple[Direction, float]:
    """
    Max over directions in declaration order; the first direction reaching the
    max wins (strict > comparison), so ties resolve deterministically.
    """
    best_dir, best_val = Direction.NORTH, -np.inf
    for d in DIRECTIONS:
        v = action_value(cell, d, values, model, discount)
        if v > best_val:
            best_dir, best_val = d, v
    return best_dir, best_val


def sweep(values: np.ndarray, model: TransitionModel, discount: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    One synchronous Bellman backup. Reads `values`, never writes it.
    Returns (new_values, policy).
    """
    grid = model.grid
    new = np.zeros(grid.shape, dtype=np.float64)
    policy = np.full(grid.shape, NO_ACTION, dtype=np.int64)
    for cell, rew in grid.terminals.items():
        new[cell] = rew
    for cell in grid.free_cells():
        d, v = best_backup(cell, values, model, discount)
        new[cell] = v
        policy[cell] = int(d)
    return new, policy


def value_iteration(
    model: TransitionModel,
    k: int,
    discount: float = 0.9,
) -> Iterator[ValueSnapshot]:
    """
    Run `k` sweeps, yielding a read-only snapshot after each (index = sweep, 0-based).
    """
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}")
    values = initial_values(model.grid)
    for i in range(k):
        values, policy = sweep(values, model, discount)
        snap = ValueSnapshot(index=i, values=freeze(values), policy=freeze(policy))
        values = snap.values
        yield snap


def solve_values(model: TransitionModel, k: int, discount: float = 0.9) -> List[ValueSnapshot]:
    return list(value_iteration(model, k, discount))

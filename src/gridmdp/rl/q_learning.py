from __future__ import annotations

from typing import Iterator, List, Optional

import numpy as np

from gridmdp.core.log import get_logger

from .gridworld import DIRECTIONS, Cell, Direction, GridModel
from .policy import best_action
from .snapshots import QSnapshot, freeze
from .transitions import TransitionModel

EPSILON = 0.2

log = get_logger("gridmdp.rl.q_learning")


def initial_q(grid: GridModel) -> np.ndarray:
    """
    Zero Q table [height, width, 4]; terminal cells carry their reward in
    every direction slot.
    """
    q = np.zeros(grid.shape + (len(DIRECTIONS),), dtype=np.float64)
    for cell, rew in grid.terminals.items():
        q[cell] = rew
    return q


def state_value(q: np.ndarray, grid: GridModel, cell: Cell) -> float:
    """Bootstrap value of `cell`: its reward if terminal, else max_a Q(cell, a)."""
    if grid.is_terminal(cell):
        return grid.reward(cell)
    return float(np.max(q[cell]))


def epsilon_greedy(
    q: np.ndarray,
    cell: Cell,
    rng: np.random.Generator,
    epsilon: float = EPSILON,
) -> Direction:
    if rng.random() < epsilon:
        return DIRECTIONS[int(rng.integers(len(DIRECTIONS)))]
    return best_action(q, cell, rng)


def run_episode(
    q_in: np.ndarray,
    model: TransitionModel,
    alpha: float,
    discount: float,
    rng: np.random.Generator,
    epsilon: float = EPSILON,
    max_steps: Optional[int] = None,
) -> np.ndarray:
    """
    One episode from grid.start until a terminal is entered. Works on a private
    copy of `q_in` and returns it.

    Unbounded by default: if no terminal is reachable this never returns.
    `max_steps` caps the walk and ends the episode early.
    """
    grid = model.grid
    q = np.array(q_in, copy=True)
    s = grid.start
    steps = 0
    while not grid.is_terminal(s):
        if max_steps is not None and steps >= max_steps:
            log.warning("episode stopped at step cap (%d) before reaching a terminal", max_steps)
            break
        a = epsilon_greedy(q, s, rng, epsilon)
        ns = model.sample(s, a, rng)
        td_target = grid.step_cost + discount * state_value(q, grid, ns)
        q[s + (int(a),)] = (1.0 - alpha) * q[s + (int(a),)] + alpha * td_target
        s = ns
        steps += 1
    return q


def q_learning(
    model: TransitionModel,
    episodes: int,
    alpha: float = 0.5,
    discount: float = 0.9,
    rng: Optional[np.random.Generator] = None,
    epsilon: float = EPSILON,
    max_steps: Optional[int] = None,
) -> Iterator[QSnapshot]:
    """
    Tabular Q-learning with epsilon-greedy exploration and noisy transitions.
    Yields a read-only snapshot after each episode (index = episode, 0-based).
    """
    if episodes < 0:
        raise ValueError(f"episodes must be >= 0, got {episodes}")
    rng = rng if rng is not None else np.random.default_rng()
    q = initial_q(model.grid)
    for ep in range(episodes):
        q = freeze(run_episode(q, model, alpha, discount, rng, epsilon, max_steps))
        yield QSnapshot(index=ep, q=q)


def solve_q(
    model: TransitionModel,
    episodes: int,
    alpha: float = 0.5,
    discount: float = 0.9,
    rng: Optional[np.random.Generator] = None,
    max_steps: Optional[int] = None,
) -> List[QSnapshot]:
    return list(q_learning(model, episodes, alpha, discount, rng, max_steps=max_steps))

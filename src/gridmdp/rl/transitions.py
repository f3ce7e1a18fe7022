from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .gridworld import Cell, Direction, GridModel

Outcome = Tuple[Cell, float]


@dataclass(frozen=True)
class TransitionModel:
    """
    Noisy movement: the intended direction succeeds with probability 1 - noise,
    otherwise the agent slips to one of the two perpendicular directions
    (noise / 2 each). A slip or move off the grid or into an obstacle leaves
    the agent where it was.
    """

    grid: GridModel
    noise: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.noise <= 1.0:
            raise ValueError(f"noise must be in [0, 1], got {self.noise}")

    def move(self, cell: Cell, direction: Direction) -> Cell:
        """Deterministic one-step move with self-loop on blocked targets."""
        dr, dc = direction.delta
        target = (cell[0] + dr, cell[1] + dc)
        return target if self.grid.is_open(target) else cell

    def outcomes(self, cell: Cell, direction: Direction) -> List[Outcome]:
        """
        Returns [(forward, p), (right, p), (left, p)] for an intended direction.
        Cells may repeat (e.g. all three collapse onto `cell` when boxed in).
        """
        side = self.noise / 2.0
        return [
            (self.move(cell, direction), 1.0 - self.noise),
            (self.move(cell, direction.right), side),
            (self.move(cell, direction.left), side),
        ]

    def sample(self, cell: Cell, direction: Direction, rng: np.random.Generator) -> Cell:
        """
        Draw one outcome: a single uniform u in [0, 1); the first outcome whose
        cumulative probability exceeds u is taken (forward, right, left).
        """
        u = rng.random()
        acc = 0.0
        outs = self.outcomes(cell, direction)
        for nxt, p in outs:
            acc += p
            if u < acc:
                return nxt
        # float round-off on the last bucket
        return outs[-1][0]

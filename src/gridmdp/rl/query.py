from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .gridworld import Cell


class Method(str, Enum):
    MDP = "MDP"
    RL = "RL"


class QueryKind(str, Enum):
    STATE_VALUE = "stateValue"
    BEST_POLICY = "bestPolicy"
    BEST_Q_VALUE = "bestQValue"


@dataclass(frozen=True)
class Query:
    """A point-in-time question about one cell, in internal (row, col) coordinates."""

    row: int
    col: int
    index: int
    method: Method
    kind: QueryKind

    @property
    def cell(self) -> Cell:
        return (self.row, self.col)

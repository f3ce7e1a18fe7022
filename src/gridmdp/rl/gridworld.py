from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, FrozenSet, Iterable, Iterator, Tuple

Cell = Tuple[int, int]


class Direction(IntEnum):
    """
    Movement directions. The integer value is the axis index into a Q table,
    and the declaration order is the order every max-search walks them.
    """

    NORTH = 0
    EAST = 1
    WEST = 2
    SOUTH = 3

    @property
    def delta(self) -> Cell:
        return _DELTA[self]

    @property
    def right(self) -> "Direction":
        """Clockwise neighbour."""
        return _RIGHT[self]

    @property
    def left(self) -> "Direction":
        """Counter-clockwise neighbour."""
        return _LEFT[self]


DIRECTIONS: Tuple[Direction, ...] = tuple(Direction)

_DELTA = {
    Direction.NORTH: (-1, 0),
    Direction.EAST: (0, 1),
    Direction.WEST: (0, -1),
    Direction.SOUTH: (1, 0),
}
_RIGHT = {
    Direction.NORTH: Direction.EAST,
    Direction.EAST: Direction.SOUTH,
    Direction.SOUTH: Direction.WEST,
    Direction.WEST: Direction.NORTH,
}
_LEFT = {r: d for d, r in _RIGHT.items()}


@dataclass(frozen=True)
class GridModel:
    """
    Static geometry of a rectangular grid world.

    - Coordinates: (row, col), row=0..height-1 (top to bottom), col=0..width-1 (left to right)
    - Obstacles: impassable cells; moving into an obstacle or off the grid -> stay
    - Terminals: dict[(row, col)] = reward; no outgoing transitions, ends an episode
    - step_cost: reward earned on every transition, including the one entering a terminal

    Read-only once built; both solvers share one instance.
    """

    width: int
    height: int
    terminals: Dict[Cell, float] = field(default_factory=dict)
    obstacles: FrozenSet[Cell] = frozenset()
    step_cost: float = 0.0
    start: Cell = (0, 0)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid must be non-empty, got {self.height}x{self.width}")
        # normalise containers so callers may pass lists/tuples
        object.__setattr__(self, "obstacles", frozenset(tuple(c) for c in self.obstacles))
        object.__setattr__(
            self, "terminals", {tuple(c): float(r) for c, r in self.terminals.items()}
        )
        object.__setattr__(self, "start", tuple(self.start))

        for c in list(self.terminals) + list(self.obstacles) + [self.start]:
            if not self.in_bounds(c):
                raise ValueError(f"cell {c} is outside the {self.height}x{self.width} grid")
        overlap = self.obstacles.intersection(self.terminals)
        if overlap:
            raise ValueError(f"cells cannot be both terminal and obstacle: {sorted(overlap)}")
        if self.start in self.obstacles:
            raise ValueError("start cannot be an obstacle")

    def __hash__(self) -> int:
        # terminals is a dict: hash its items
        return hash(
            (self.width, self.height, frozenset(self.terminals.items()), self.obstacles, self.step_cost, self.start)
        )

    # ---------- basic properties ----------

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def in_bounds(self, cell: Cell) -> bool:
        r, c = cell
        return 0 <= r < self.height and 0 <= c < self.width

    def is_terminal(self, cell: Cell) -> bool:
        return cell in self.terminals

    def is_obstacle(self, cell: Cell) -> bool:
        return cell in self.obstacles

    def is_open(self, cell: Cell) -> bool:
        """In bounds and not an obstacle, i.e. a cell a move may land on."""
        return self.in_bounds(cell) and cell not in self.obstacles

    def reward(self, cell: Cell) -> float:
        return self.terminals[cell]

    # ---------- iteration ----------

    def cells(self) -> Iterator[Cell]:
        for r in range(self.height):
            for c in range(self.width):
                yield (r, c)

    def free_cells(self) -> Iterable[Cell]:
        """Cells that carry updatable values: neither terminal nor obstacle."""
        return (p for p in self.cells() if p not in self.terminals and p not in self.obstacles)

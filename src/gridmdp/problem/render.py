from __future__ import annotations

from typing import List

from gridmdp.rl.gridworld import DIRECTIONS, Direction, GridModel
from gridmdp.rl.query import Query
from gridmdp.rl.snapshots import QSnapshot, ValueSnapshot

from .config import unflip_coordinate

VALUE_WIDTH = 15
Q_WIDTH = 42


def value_cell(snap: ValueSnapshot, grid: GridModel, cell) -> str:
    if grid.is_obstacle(cell):
        return "B"
    if grid.is_terminal(cell):
        return f"T: {snap.value(cell):.2f}"
    return f"{snap.value(cell):.2f}"


def q_cell(snap: QSnapshot, grid: GridModel, cell) -> str:
    if grid.is_obstacle(cell):
        return "B"
    if grid.is_terminal(cell):
        return f"T: {grid.reward(cell)}"
    q = {d: snap.q[cell + (int(d),)] for d in DIRECTIONS}
    return (
        f"| N: {q[Direction.NORTH]:.2f} E: {q[Direction.EAST]:.2f} "
        f"S: {q[Direction.SOUTH]:.2f} W: {q[Direction.WEST]:.2f} |"
    )


def format_table(snap: ValueSnapshot | QSnapshot, grid: GridModel) -> str:
    """Right-aligned grid, top row first."""
    if isinstance(snap, QSnapshot):
        fmt, width = q_cell, Q_WIDTH
    else:
        fmt, width = value_cell, VALUE_WIDTH
    rows: List[str] = []
    for r in range(grid.height):
        rows.append("".join(fmt(snap, grid, (r, c)).rjust(width) for c in range(grid.width)))
    return "\n".join(rows)


def format_query(q: Query, height: int) -> str:
    x, y = unflip_coordinate(q.cell, height)
    return f"{x}, {y}, {q.index}, {q.method.value}, {q.kind.value}"


def format_answer_value(value) -> str:
    if value is None:
        return "None"
    if isinstance(value, Direction):
        return value.name
    return f"{value}"


def format_answer_block(q: Query, snap: ValueSnapshot | QSnapshot, grid: GridModel, value) -> str:
    header = f"BOARD AT STEP {q.index}\n" + "-" * 30
    return "\n".join(
        [header, "", format_table(snap, grid), "", f"{format_query(q, grid.height)} : {format_answer_value(value)}"]
    )

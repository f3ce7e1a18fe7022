from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from gridmdp.core.log import get_logger
from gridmdp.core.timers import timed
from gridmdp.rl.cache import QuerySnapshotCache, Snapshot
from gridmdp.rl.gridworld import Direction, GridModel
from gridmdp.rl.policy import best_action
from gridmdp.rl.q_learning import q_learning
from gridmdp.rl.query import Method, Query, QueryKind
from gridmdp.rl.snapshots import QSnapshot, ValueSnapshot
from gridmdp.rl.transitions import TransitionModel
from gridmdp.rl.value_iteration import best_backup, value_iteration

from .config import ProblemConfig, unflip_coordinate

log = get_logger("gridmdp.problem.runner")


@dataclass
class Answer:
    query: Query
    snapshot: Snapshot
    value: float | Direction | None

    def to_dict(self, height: int) -> Dict[str, Any]:
        x, y = unflip_coordinate(self.query.cell, height)
        v = self.value.name if isinstance(self.value, Direction) else self.value
        return {
            "x": x,
            "y": y,
            "index": self.query.index,
            "method": self.query.method.value,
            "kind": self.query.kind.value,
            "answer": v,
        }


@dataclass
class SolveResult:
    grid: GridModel
    model: TransitionModel
    discount: float
    cache: QuerySnapshotCache
    final_values: Optional[ValueSnapshot]
    final_q: Optional[QSnapshot]


def solve(
    problem: ProblemConfig,
    queries: Sequence[Query],
    rng: np.random.Generator,
    max_steps: Optional[int] = None,
) -> SolveResult:
    """
    Value iteration for `problem.k` sweeps, then Q-learning for
    `problem.episodes` episodes, caching the snapshots the queries need.
    """
    model = problem.transition_model()
    cache = QuerySnapshotCache(queries)

    final_values = None
    with timed("value iteration"):
        for snap in value_iteration(model, problem.k, problem.discount):
            cache.offer(Method.MDP, snap.index, snap)
            final_values = snap
    log.info("value iteration: %d sweeps", problem.k)

    final_q = None
    with timed("q-learning"):
        for snap in q_learning(
            model, problem.episodes, problem.alpha, problem.discount, rng, max_steps=max_steps
        ):
            cache.offer(Method.RL, snap.index, snap)
            final_q = snap
    log.info("q-learning: %d episodes", problem.episodes)

    missing = cache.unanswered()
    if missing:
        log.debug("%d queries reference indices never reached", len(missing))
    return SolveResult(
        grid=model.grid,
        model=model,
        discount=problem.discount,
        cache=cache,
        final_values=final_values,
        final_q=final_q,
    )


def answer(
    query: Query,
    snapshot: Snapshot,
    model: TransitionModel,
    discount: float,
    rng: np.random.Generator,
) -> float | Direction | None:
    """
    Value queries return a float; bestPolicy returns a Direction, or None for
    terminal and obstacle cells which have no action.

    MDP policies are greedy against the snapshot's own values (one-step
    lookahead, first direction wins ties); RL policies break ties at random.
    """
    grid = model.grid
    cell = query.cell
    if query.kind is QueryKind.BEST_POLICY:
        if grid.is_terminal(cell) or grid.is_obstacle(cell):
            return None
        if isinstance(snapshot, ValueSnapshot):
            return best_backup(cell, snapshot.values, model, discount)[0]
        return best_action(snapshot.q, cell, rng)
    return snapshot.value(cell)


def answer_all(
    cache: QuerySnapshotCache,
    model: TransitionModel,
    discount: float,
    rng: np.random.Generator,
) -> List[Answer]:
    """MDP answers first, then RL, each in the order the snapshots were cached."""
    out = []
    for method in (Method.MDP, Method.RL):
        for q, snap in cache.entries(method):
            out.append(Answer(query=q, snapshot=snap, value=answer(q, snap, model, discount, rng)))
    return out

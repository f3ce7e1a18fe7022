from __future__ import annotations

from typing import Dict, List, Sequence, Tuple, Union

from .query import Method, Query
from .snapshots import QSnapshot, ValueSnapshot

Snapshot = Union[ValueSnapshot, QSnapshot]


class QuerySnapshotCache:
    """
    Keeps only the snapshots some query asked for.

    Solvers call `offer` after every sweep/episode; a query whose index is never
    offered simply stays unanswered (no fallback to the last snapshot).
    """

    def __init__(self, queries: Sequence[Query]):
        self.queries: List[Query] = list(queries)
        self._wanted: Dict[Tuple[Method, int], List[Query]] = {}
        for q in self.queries:
            self._wanted.setdefault((q.method, q.index), []).append(q)
        # insertion order = (index ascending, then query order) per method
        self._entries: Dict[Method, List[Tuple[Query, Snapshot]]] = {m: [] for m in Method}

    def wants(self, method: Method, index: int) -> bool:
        return (method, index) in self._wanted

    def offer(self, method: Method, index: int, snapshot: Snapshot) -> int:
        """Store `snapshot` for every matching query. Returns how many matched."""
        matched = self._wanted.get((method, index), [])
        for q in matched:
            self._entries[method].append((q, snapshot))
        return len(matched)

    def get(self, query: Query) -> Snapshot | None:
        for q, snap in self._entries[query.method]:
            if q == query:
                return snap
        return None

    def entries(self, method: Method) -> List[Tuple[Query, Snapshot]]:
        return list(self._entries[method])

    def unanswered(self) -> List[Query]:
        seen = {id(q) for m in Method for q, _ in self._entries[m]}
        return [q for q in self.queries if id(q) not in seen]

    def __len__(self) -> int:
        return sum(len(v) for v in self._entries.values())

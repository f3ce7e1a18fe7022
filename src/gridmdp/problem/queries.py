from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from gridmdp.core.io import read_lines
from gridmdp.rl.query import Method, Query, QueryKind

from .config import ConfigError, flip_coordinate


def parse_query_line(line: str, height: int) -> Query | None:
    """
    `x,y,index,method,kind` in file coordinates -> Query in internal
    coordinates. Lines without exactly five fields are not queries (None).
    """
    parts = [p.strip() for p in line.split(",")]
    if len(parts) != 5:
        return None
    try:
        x, y, index = int(parts[0]), int(parts[1]), int(parts[2])
    except ValueError as e:
        raise ConfigError(f"query {line!r}: x, y and index must be integers") from e
    try:
        method = Method(parts[3])
        kind = QueryKind(parts[4])
    except ValueError as e:
        raise ConfigError(f"query {line!r}: {e}") from e
    row, col = flip_coordinate(x, y, height)
    return Query(row=row, col=col, index=index, method=method, kind=kind)


def parse_queries(lines: Iterable[str], height: int) -> List[Query]:
    out = []
    for ln in lines:
        q = parse_query_line(ln, height)
        if q is not None:
            out.append(q)
    return out


def load_queries(path: Path | str, height: int) -> List[Query]:
    try:
        lines = read_lines(path)
    except OSError as e:
        raise ConfigError(f"cannot read query file {path}: {e}") from e
    return parse_queries(lines, height)

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import yaml

from gridmdp.core.io import load_yaml, read_lines
from gridmdp.core.log import get_logger
from gridmdp.rl.gridworld import Cell, GridModel
from gridmdp.rl.transitions import TransitionModel

log = get_logger("gridmdp.problem.config")

_NUM = r"-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?"
_TRIPLE = re.compile(rf"\{{\s*({_NUM})\s*,\s*({_NUM})\s*,\s*({_NUM})\s*\}}")
_PAIR = re.compile(rf"\{{\s*({_NUM})\s*,\s*({_NUM})\s*\}}")

# text-format key (lower-cased) -> ProblemConfig field
_TEXT_KEYS = {
    "horizontal": "width",
    "vertical": "height",
    "terminal": "terminals",
    "boulder": "obstacles",
    "robotstartstate": "start",
    "k": "k",
    "episodes": "episodes",
    "discount": "discount",
    "alpha": "alpha",
    "noise": "noise",
    "transitioncost": "step_cost",
}
_REQUIRED = ("width", "height", "start", "k", "episodes", "discount", "alpha", "noise", "step_cost")


class ConfigError(ValueError):
    """Malformed or missing problem/query configuration. Raised before solving."""


def flip_coordinate(x: int, y: int, height: int) -> Cell:
    """File (x=column, y=row from bottom) -> internal (row from top, col)."""
    return height - 1 - y, x


def unflip_coordinate(cell: Cell, height: int) -> Tuple[int, int]:
    """Internal (row, col) -> file (x, y)."""
    r, c = cell
    return c, height - 1 - r


@dataclass
class ProblemConfig:
    """
    Everything the solvers need, with cells already in internal (row, col)
    top-left coordinates.
    """

    width: int
    height: int
    start: Cell
    k: int
    episodes: int
    discount: float
    alpha: float
    noise: float
    step_cost: float
    terminals: List[Tuple[int, int, float]] = field(default_factory=list)
    obstacles: List[Cell] = field(default_factory=list)

    def validate(self) -> "ProblemConfig":
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"grid size must be positive, got {self.width}x{self.height}")
        if self.k < 0 or self.episodes < 0:
            raise ConfigError("k and episodes must be >= 0")
        for name in ("discount", "alpha", "noise"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ConfigError(f"{name} must be in [0, 1], got {v}")
        try:
            self.to_grid()
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return self

    def to_grid(self) -> GridModel:
        return GridModel(
            width=self.width,
            height=self.height,
            terminals={(r, c): rew for r, c, rew in self.terminals},
            obstacles=frozenset(self.obstacles),
            step_cost=self.step_cost,
            start=self.start,
        )

    def transition_model(self) -> TransitionModel:
        return TransitionModel(self.to_grid(), self.noise)

    def to_file_dict(self) -> Dict[str, Any]:
        """Inverse of the YAML loader (file coordinates, snake_case keys)."""
        h = self.height
        return {
            "width": self.width,
            "height": self.height,
            "terminals": [[*unflip_coordinate((r, c), h), rew] for r, c, rew in self.terminals],
            "obstacles": [list(unflip_coordinate(p, h)) for p in self.obstacles],
            "start": list(unflip_coordinate(self.start, h)),
            "k": self.k,
            "episodes": self.episodes,
            "discount": self.discount,
            "alpha": self.alpha,
            "noise": self.noise,
            "step_cost": self.step_cost,
        }


# -------------------------------
# Loading
# -------------------------------


def _as_int(v: Any, name: str) -> int:
    try:
        f = float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name}: expected an integer, got {v!r}") from e
    if not f.is_integer():
        raise ConfigError(f"{name}: expected an integer, got {v!r}")
    return int(f)


def _as_float(v: Any, name: str) -> float:
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name}: expected a number, got {v!r}") from e


def _is_tuple(v: Any, n: int) -> bool:
    return isinstance(v, Sequence) and not isinstance(v, (str, bytes)) and len(v) == n


def from_raw(raw: Dict[str, Any]) -> ProblemConfig:
    """
    Build a ProblemConfig from file-convention values:
    terminals [(x, y, reward)], obstacles [(x, y)], start (x, y).
    """
    missing = [k for k in _REQUIRED if raw.get(k) is None]
    if missing:
        raise ConfigError(f"missing required field(s): {', '.join(missing)}")

    height = _as_int(raw["height"], "height")
    start = raw["start"]
    if not _is_tuple(start, 2):
        raise ConfigError(f"start: expected [x, y], got {start!r}")

    terminals = []
    for t in raw.get("terminals") or []:
        if not _is_tuple(t, 3):
            raise ConfigError(f"terminals: expected [x, y, reward], got {t!r}")
        r, c = flip_coordinate(_as_int(t[0], "terminal x"), _as_int(t[1], "terminal y"), height)
        terminals.append((r, c, _as_float(t[2], "terminal reward")))

    obstacles = []
    for b in raw.get("obstacles") or []:
        if not _is_tuple(b, 2):
            raise ConfigError(f"obstacles: expected [x, y], got {b!r}")
        obstacles.append(flip_coordinate(_as_int(b[0], "obstacle x"), _as_int(b[1], "obstacle y"), height))

    cfg = ProblemConfig(
        width=_as_int(raw["width"], "width"),
        height=height,
        start=flip_coordinate(_as_int(start[0], "start x"), _as_int(start[1], "start y"), height),
        k=_as_int(raw["k"], "k"),
        episodes=_as_int(raw["episodes"], "episodes"),
        discount=_as_float(raw["discount"], "discount"),
        alpha=_as_float(raw["alpha"], "alpha"),
        noise=_as_float(raw["noise"], "noise"),
        step_cost=_as_float(raw["step_cost"], "step_cost"),
        terminals=terminals,
        obstacles=obstacles,
    )
    return cfg.validate()


def parse_problem_text(lines: Sequence[str]) -> ProblemConfig:
    """
    Parse the `Key=value` grid format, e.g.

        Horizontal=4
        Vertical=3
        Terminal={0={3,2,1},1={3,1,-1}}
        Boulder={0={1,1}}
        RobotStartState={0,0}
        K=10
        Episodes=1000
        Discount=0.9
        Alpha=0.2
        Noise=0.2
        TransitionCost=-0.04
    """
    raw: Dict[str, Any] = {}
    for n, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise ConfigError(f"line {n}: expected Key=value, got {line!r}")
        key = key.strip().lower()
        name = _TEXT_KEYS.get(key)
        if name is None:
            log.warning("line %d: ignoring unknown key %r", n, key)
            continue
        value = value.strip()
        if name == "terminals":
            raw[name] = [m.groups() for m in _TRIPLE.finditer(value)]
        elif name == "obstacles":
            raw[name] = [m.groups() for m in _PAIR.finditer(value)]
        elif name == "start":
            nums = re.findall(_NUM, value)
            if len(nums) != 2:
                raise ConfigError(f"line {n}: start needs two coordinates, got {value!r}")
            raw[name] = nums
        else:
            raw[name] = value
    return from_raw(raw)


def load_problem(path: Path | str) -> ProblemConfig:
    """Load a problem from the text format or from YAML (.yaml/.yml)."""
    p = Path(path)
    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            raw = load_yaml(p)
            if not isinstance(raw, dict):
                raise ConfigError(f"{p}: expected a mapping at top level")
            cfg = from_raw(raw)
        else:
            cfg = parse_problem_text(read_lines(p))
    except OSError as e:
        raise ConfigError(f"cannot read problem file {p}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"{p}: invalid YAML: {e}") from e
    log.info("loaded %dx%d problem from %s", cfg.height, cfg.width, p)
    return cfg

import numpy as np
import pytest

from gridmdp.rl.gridworld import Direction, GridModel
from gridmdp.rl.snapshots import NO_ACTION
from gridmdp.rl.transitions import TransitionModel
from gridmdp.rl.value_iteration import best_backup, initial_values, solve_values


def corridor(noise=0.0, **kw):
    g = GridModel(width=3, height=1, terminals={(0, 2): 1.0}, step_cost=-0.04, start=(0, 0), **kw)
    return TransitionModel(g, noise=noise)


def classic(noise=0.2):
    g = GridModel(
        width=4,
        height=3,
        terminals={(0, 3): 1.0, (1, 3): -1.0},
        obstacles=[(1, 1)],
        step_cost=-0.04,
        start=(2, 0),
    )
    return TransitionModel(g, noise=noise)


def test_corridor_two_sweeps_by_hand():
    snaps = solve_values(corridor(), k=2, discount=1.0)
    assert [s.index for s in snaps] == [0, 1]

    # first sweep reads an all-zero table
    assert snaps[0].value((0, 1)) == pytest.approx(-0.04)
    # second sweep: step cost + value of the goal
    assert snaps[1].value((0, 1)) == pytest.approx(0.96)
    assert snaps[1].action((0, 1)) is Direction.EAST
    assert snaps[1].value((0, 0)) == pytest.approx(-0.08)


def test_terminals_hold_reward_every_sweep():
    m = classic()
    for s in solve_values(m, k=15, discount=0.9):
        assert s.value((0, 3)) == 1.0
        assert s.value((1, 3)) == -1.0
        assert s.action((0, 3)) is None
        assert s.policy[1, 1] == NO_ACTION


def test_obstacle_is_never_written_or_used():
    m = corridor(obstacles=[(0, 1)])
    snaps = solve_values(m, k=3, discount=0.5)
    for s in snaps:
        assert s.values[0, 1] == 0.0
    # (0, 0) is boxed in: V_n = c * (1 + 0.5 + ... + 0.5^n)
    assert snaps[0].value((0, 0)) == pytest.approx(-0.04)
    assert snaps[1].value((0, 0)) == pytest.approx(-0.06)
    assert snaps[2].value((0, 0)) == pytest.approx(-0.07)


def test_ties_resolve_to_first_direction_in_order():
    m = corridor()
    d, v = best_backup((0, 0), initial_values(m.grid), m, discount=1.0)
    assert d is Direction.NORTH
    assert v == pytest.approx(-0.04)


def test_rerun_is_bit_identical():
    a = solve_values(classic(), k=25, discount=0.9)
    b = solve_values(classic(), k=25, discount=0.9)
    for x, y in zip(a, b):
        assert np.array_equal(x.values, y.values)
        assert np.array_equal(x.policy, y.policy)


def test_snapshots_are_read_only_and_independent():
    snaps = solve_values(classic(), k=3, discount=0.9)
    with pytest.raises(ValueError):
        snaps[0].values[2, 0] = 42.0
    assert not np.shares_memory(snaps[0].values, snaps[1].values)


def test_classic_world_points_towards_goal():
    snaps = solve_values(classic(), k=100, discount=0.9)
    last = snaps[-1]
    assert last.action((0, 2)) is Direction.EAST
    assert last.value((0, 2)) > last.value((0, 1)) > last.value((0, 0))
    assert last.value((2, 0)) > 0.0


def test_zero_sweeps_yields_nothing():
    assert solve_values(classic(), k=0) == []

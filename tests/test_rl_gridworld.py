import pytest

from gridmdp.rl.gridworld import DIRECTIONS, Direction, GridModel
from gridmdp.rl.transitions import TransitionModel


def test_direction_order_and_rotation():
    assert DIRECTIONS == (Direction.NORTH, Direction.EAST, Direction.WEST, Direction.SOUTH)
    assert Direction.NORTH.right is Direction.EAST
    assert Direction.NORTH.left is Direction.WEST
    assert Direction.SOUTH.right is Direction.WEST
    assert Direction.EAST.left is Direction.NORTH
    for d in DIRECTIONS:
        assert d.right.left is d


def test_grid_classifies_cells():
    g = GridModel(
        width=4,
        height=3,
        terminals={(0, 3): 1, (1, 3): -1},
        obstacles=[(1, 1)],
        step_cost=-0.04,
        start=(2, 0),
    )
    assert g.shape == (3, 4)
    assert g.is_terminal((0, 3)) and g.reward((1, 3)) == -1.0
    assert g.is_obstacle((1, 1)) and not g.is_open((1, 1))
    assert not g.is_open((-1, 0)) and not g.is_open((0, 4))
    free = list(g.free_cells())
    assert len(free) == 12 - 3
    assert (1, 1) not in free and (0, 3) not in free


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(width=0, height=3),
        dict(width=2, height=2, terminals={(2, 0): 1.0}),
        dict(width=2, height=2, obstacles=[(0, 1)], terminals={(0, 1): 1.0}),
        dict(width=2, height=2, obstacles=[(0, 0)], start=(0, 0)),
    ],
)
def test_grid_rejects_bad_geometry(kwargs):
    with pytest.raises(ValueError):
        GridModel(**kwargs)


def test_equal_grids_hash_alike_and_key_dicts():
    a = GridModel(width=3, height=1, terminals={(0, 2): 1.0}, obstacles=[(0, 1)], step_cost=-0.04)
    b = GridModel(width=3, height=1, terminals={(0, 2): 1}, obstacles=((0, 1),), step_cost=-0.04)
    assert a == b and hash(a) == hash(b)
    models = {TransitionModel(a, 0.2): "a"}
    assert models[TransitionModel(b, 0.2)] == "a"

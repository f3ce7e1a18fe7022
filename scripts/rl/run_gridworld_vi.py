#!/usr/bin/env python
from gridmdp.problem.render import format_table
from gridmdp.rl.gridworld import GridModel
from gridmdp.rl.transitions import TransitionModel
from gridmdp.rl.value_iteration import solve_values


def main():
    # classic 4x3 world: goal top-right, pit below it, one boulder
    grid = GridModel(
        width=4,
        height=3,
        terminals={(0, 3): 1.0, (1, 3): -1.0},
        obstacles=frozenset({(1, 1)}),
        step_cost=-0.04,
        start=(2, 0),
    )
    snaps = solve_values(TransitionModel(grid, noise=0.2), k=50, discount=0.9)
    last = snaps[-1]

    print("Value Iteration:")
    print(f" - sweeps: {len(snaps)}")
    print(f" - start value: {last.value(grid.start):.3f}")
    print(format_table(last, grid))
    print(" - policy:")
    arrows = {"NORTH": "↑", "EAST": "→", "SOUTH": "↓", "WEST": "←"}
    for r in range(grid.height):
        row = []
        for c in range(grid.width):
            if grid.is_obstacle((r, c)):
                row.append("■")
            elif grid.is_terminal((r, c)):
                row.append("G" if grid.reward((r, c)) > 0 else "X")
            else:
                row.append(arrows[last.action((r, c)).name])
        print(" ".join(row))


if __name__ == "__main__":
    main()

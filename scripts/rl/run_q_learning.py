#!/usr/bin/env python
import typer

from gridmdp.core.seeding import make_rng
from gridmdp.problem.render import format_table
from gridmdp.rl.gridworld import GridModel
from gridmdp.rl.policy import best_action
from gridmdp.rl.q_learning import solve_q
from gridmdp.rl.transitions import TransitionModel

app = typer.Typer(add_completion=False)


@app.command()
def main(episodes: int = 2000, alpha: float = 0.2, noise: float = 0.2, seed: int = 0):
    grid = GridModel(
        width=4,
        height=3,
        terminals={(0, 3): 1.0, (1, 3): -1.0},
        obstacles=frozenset({(1, 1)}),
        step_cost=-0.04,
        start=(2, 0),
    )
    rng = make_rng(seed)
    snaps = solve_q(TransitionModel(grid, noise), episodes, alpha=alpha, discount=0.9, rng=rng)
    last = snaps[-1]
    typer.echo("Q-learning:")
    typer.echo(format_table(last, grid))
    a = best_action(last.q, grid.start, rng)
    typer.echo(f" - start value={last.value(grid.start):.3f}, greedy action={a.name}")


if __name__ == "__main__":
    app()

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml

from gridmdp.core.io import save_json, save_yaml
from gridmdp.core.log import get_logger
from gridmdp.core.seeding import make_rng
from gridmdp.problem.config import ConfigError, load_problem
from gridmdp.problem.queries import load_queries
from gridmdp.problem.render import format_answer_block, format_table
from gridmdp.problem.runner import answer_all, solve

app = typer.Typer(add_completion=False, help="Value iteration and Q-learning on grid worlds.")


def _fail(e: ConfigError) -> None:
    typer.echo(f"config error: {e}", err=True)
    raise typer.Exit(code=2)


@app.command("solve")
def solve_cmd(
    problem: Path = typer.Argument(..., help="Grid description (Key=value text or YAML)"),
    queries: Path = typer.Argument(..., help="Query file, one x,y,index,method,kind per line"),
    seed: Optional[int] = typer.Option(None, help="Seed for exploration, transitions and tie-breaks"),
    max_steps: Optional[int] = typer.Option(None, help="Cap on steps per Q-learning episode"),
    log_level: str = typer.Option("WARNING", help="DEBUG, INFO, WARNING, ..."),
    json_out: Optional[Path] = typer.Option(None, "--json", help="Also write answers to this JSON file"),
):
    get_logger("gridmdp", log_level)
    try:
        cfg = load_problem(problem)
        qs = load_queries(queries, cfg.height)
    except ConfigError as e:
        _fail(e)

    rng = make_rng(seed)
    res = solve(cfg, qs, rng, max_steps=max_steps)

    if res.final_values is not None:
        typer.echo("\n-----  MDP SOLUTION  -----\n")
        typer.echo(format_table(res.final_values, res.grid))
    if res.final_q is not None:
        typer.echo("\n-----  Q-LEARNING SOLUTION  -----\n")
        typer.echo(format_table(res.final_q, res.grid))

    answers = answer_all(res.cache, res.model, res.discount, rng)
    typer.echo("\n\n\nPRINTING QUERY RESULTS\n" + "-" * 39)
    for a in answers:
        typer.echo("\n" + format_answer_block(a.query, a.snapshot, res.grid, a.value))

    if json_out is not None:
        save_json(json_out, [a.to_dict(cfg.height) for a in answers])
        typer.echo(f"\nwrote {len(answers)} answers -> {json_out}")


@app.command("show")
def show_cmd(problem: Path = typer.Argument(..., help="Grid description to parse and echo")):
    """Print the parsed problem in YAML (file coordinates)."""
    try:
        cfg = load_problem(problem)
    except ConfigError as e:
        _fail(e)
    typer.echo(yaml.safe_dump(cfg.to_file_dict(), sort_keys=False).rstrip())


@app.command("convert")
def convert_cmd(
    problem: Path = typer.Argument(..., help="Grid description in either format"),
    out: Path = typer.Argument(..., help="Destination .yaml file"),
):
    """Rewrite a problem file as YAML."""
    try:
        cfg = load_problem(problem)
    except ConfigError as e:
        _fail(e)
    save_yaml(out, cfg.to_file_dict())
    typer.echo(f"wrote {out}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()

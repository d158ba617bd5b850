"""
Main CLI application for keen.

This module provides the command-line interface for running the bundled
problems and managing configuration files.

Commands:
- run: Evolve a solution to one of the bundled problems
- problems: List the bundled problems
- config: Print or save the default configuration
- version: Show version information
"""

from __future__ import annotations

import json
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

app = typer.Typer(
    name="keen",
    help="""
keen: genetic algorithms with pluggable operators

Evolves candidate solutions through selection, crossover and mutation until a
stopping criterion is met.

Quick start:
  keen run one-max
  keen run tsp --seed 7 --generations 300

For help with any command: keen COMMAND --help
""",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(safe_box=True)


@app.command()
def run(
    problem: str = typer.Argument(..., help="Problem to solve (see `keen problems`)"),
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="YAML configuration file (defaults to the problem's preset)",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed", "-s",
        help="Seed for the random source, for reproducible runs",
    ),
    generations: Optional[int] = typer.Option(
        None,
        "--generations", "-g",
        help="Maximum number of generations",
    ),
    population: Optional[int] = typer.Option(
        None,
        "--population", "-p",
        help="Population size",
    ),
    verbosity: Optional[str] = typer.Option(
        None,
        "--verbosity", "-v",
        help="silent, minimal, normal, verbose or debug",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Save the result as JSON",
    ),
):
    """
    Evolve a solution to one of the bundled problems.

    Examples:
        # Preset configuration
        keen run word

        # Reproducible run with more generations
        keen run sphere --seed 42 --generations 500

        # Custom configuration, verbose progress
        keen run tsp --config my_tsp.yaml --verbosity verbose
    """
    from keen.config import Config, OutputConfig
    from keen.domain import domain
    from keen.evolution.loop import EvolutionLoop, limits_from_config
    from keen.exceptions import KeenException
    from keen.problems import get_problem
    from keen.utils.logging import print_header, print_summary, set_verbosity

    try:
        selected = get_problem(problem)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        console.print("[dim]List the available problems with: keen problems[/dim]")
        raise typer.Exit(1)

    try:
        cfg = Config.from_yaml(config) if config else selected.config
        if seed is not None:
            cfg.seed = seed
        if generations is not None:
            cfg.limits.max_generations = generations
        if population is not None:
            cfg.evolution.population_size = population
        if verbosity is not None:
            cfg.output = OutputConfig(verbosity=verbosity)
    except FileNotFoundError as e:
        console.print(f"[red]File not found: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    set_verbosity(cfg.output.verbosity)
    if cfg.seed is not None:
        domain.seed(cfg.seed)

    try:
        print_header(f"keen: {selected.description}")
        loop = EvolutionLoop(
            selected.fitness,
            selected.genotype_factory,
            cfg.evolution,
            limits=limits_from_config(cfg.limits),
        )
        result = loop.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)
    except KeenException as e:
        console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except (ValueError, TypeError) as e:
        # unknown strategy names or options in the configuration
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    rendered = selected.render(result.best.genotype)
    print_summary(
        rendered,
        result.best.fitness,
        result.history,
        generations=result.generations,
        stop=result.stop_reason,
    )

    if output:
        output_data = {
            "problem": selected.name,
            "best": rendered,
            "fitness": result.best.fitness,
            "generations": result.generations,
            "stop_reason": result.stop_reason,
            "seed": cfg.seed,
            "history": result.history,
        }
        with open(output, "w", encoding="utf-8") as f:
            json.dump(output_data, f, indent=2)
        console.print(f"[dim]Results saved to {output}[/dim]")


@app.command()
def problems():
    """List the bundled problems."""
    from keen.problems import PROBLEMS

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Ranker", style="yellow")
    table.add_column("Population", style="green")
    table.add_column("Description")

    for name, build in PROBLEMS.items():
        problem = build()
        table.add_row(
            name,
            problem.config.evolution.ranker,
            str(problem.config.evolution.population_size),
            problem.description,
        )

    console.print(table)


@app.command("config")
def show_config(
    path: Optional[Path] = typer.Argument(
        None, help="Write the default configuration here instead of printing it"
    ),
):
    """Print or save the default configuration as YAML."""
    from keen.config import get_default_config

    cfg = get_default_config()
    if path is None:
        console.print(
            yaml.dump(cfg.to_dict(), default_flow_style=False, sort_keys=False),
            markup=False,
            highlight=False,
        )
        return
    cfg.to_yaml(path)
    console.print(f"[dim]Configuration saved to {path}[/dim]")


@app.command()
def version():
    """Show version and dependency information."""
    from keen import __version__

    console.print(f"\n[bold]keen[/bold] v{__version__}\n")

    for dependency in ("pydantic", "pyyaml", "rich", "typer"):
        try:
            console.print(f"  {dependency}: {package_version(dependency)}")
        except PackageNotFoundError:
            console.print(f"  {dependency}: [red]not installed[/red]")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

"""
Logging utilities for keen.

Everything an evolution run reports goes through one rich console and one
``keen`` logger whose level follows the global verbosity:

- SILENT prints nothing, MINIMAL only the run header and summary
- NORMAL adds one line per generation and the stop reason
- VERBOSE adds the run setup, DEBUG every operator application
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Mapping, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

_console = Console(safe_box=True)

# Rows of the fitness history shown in the run summary.
SUMMARY_ROWS = 5


class LogLevel(IntEnum):
    """Log verbosity levels."""
    SILENT = 0
    MINIMAL = 1
    NORMAL = 2
    VERBOSE = 3
    DEBUG = 4


_LOGGING_LEVELS = {
    LogLevel.SILENT: logging.CRITICAL + 1,
    LogLevel.MINIMAL: logging.WARNING,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
}

_verbosity = LogLevel.NORMAL
_logger: logging.Logger | None = None


def set_verbosity(level: LogLevel | str | int) -> None:
    """Set the global verbosity level by member, name or number."""
    global _verbosity

    if isinstance(level, str):
        level = LogLevel[level.upper()]
    else:
        level = LogLevel(level)

    _verbosity = level
    if _logger:
        _logger.setLevel(_LOGGING_LEVELS[level])


def get_verbosity() -> LogLevel:
    """Get the current verbosity level."""
    return _verbosity


def get_logger(name: str = "keen") -> logging.Logger:
    """Get the rich-backed logger, creating it on first use."""
    global _logger

    if _logger is None:
        _logger = logging.getLogger(name)
        _logger.handlers.clear()
        _logger.propagate = False

        handler = RichHandler(
            console=_console,
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        _logger.addHandler(handler)
        _logger.setLevel(_LOGGING_LEVELS[_verbosity])

    return _logger


def log_event(
    event: str,
    level: LogLevel = LogLevel.NORMAL,
    **kwargs: Any,
) -> None:
    """Log ``[event] key=value | ...`` when the verbosity reaches ``level``."""
    if _verbosity < level:
        return

    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    message = f"[{event}] {details}" if details else f"[{event}]"

    logger = get_logger()
    if level <= LogLevel.MINIMAL:
        logger.warning(message)
    elif level == LogLevel.NORMAL:
        logger.info(message)
    else:
        logger.debug(message)


def log_operator(kind: str, operator: object, generation: int, **counts: int) -> None:
    """Log one application of a selector, mutator or crossover (debug level)."""
    log_event(
        kind,
        level=LogLevel.DEBUG,
        operator=type(operator).__name__,
        generation=generation,
        **counts,
    )


def log_generation(
    gen: int,
    size: int,
    best_fitness: float,
    mean_fitness: float,
    **extra: Any,
) -> None:
    """Log the fitness of one finished generation."""
    log_event(
        f"GEN {gen:03d}",
        level=LogLevel.NORMAL,
        size=size,
        best=f"{best_fitness:.4f}",
        mean=f"{mean_fitness:.4f}",
        **extra,
    )


def log_stop(reason: str, generation: int) -> None:
    log_event("STOP", level=LogLevel.NORMAL, reason=reason, generation=generation)


def print_header(title: str) -> None:
    """Print a styled header."""
    if _verbosity >= LogLevel.MINIMAL:
        _console.print()
        _console.print(f"[bold blue]{'-' * 60}[/bold blue]")
        _console.print(f"[bold blue]  {title}[/bold blue]")
        _console.print(f"[bold blue]{'-' * 60}[/bold blue]")
        _console.print()


def history_table(history: Sequence[Mapping[str, Any]], rows: int = SUMMARY_ROWS) -> Table:
    """Tabulate the last ``rows`` generations of a run's fitness history."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Generation", justify="right", style="cyan")
    table.add_column("Best", justify="right", style="green")
    table.add_column("Mean", justify="right")
    table.add_column("Size", justify="right", style="dim")
    for entry in list(history)[-rows:]:
        table.add_row(
            str(entry["generation"]),
            f"{entry['best_fitness']:.4f}",
            f"{entry['mean_fitness']:.4f}",
            str(entry["size"]),
        )
    return table


def print_summary(
    best: str,
    fitness: float,
    history: Sequence[Mapping[str, Any]] = (),
    **stats: Any,
) -> None:
    """Print the best individual of a run, its fitness and the recent history."""
    if _verbosity < LogLevel.MINIMAL:
        return
    _console.print()
    _console.print("[bold green]Result[/bold green]")
    _console.print(f"[dim]{'-' * 60}[/dim]")
    _console.print(best, markup=False)
    _console.print(f"[dim]{'-' * 60}[/dim]")

    stat_str = " | ".join([f"fitness: {fitness:.4f}"] + [f"{k}: {v}" for k, v in stats.items()])
    _console.print(f"[dim]{stat_str}[/dim]")
    if history:
        _console.print(history_table(history))
    _console.print()

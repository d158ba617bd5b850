"""
Configuration schema for keen.

This module defines every configuration class using Pydantic for validation
and type safety. It has two parts:

- Operator settings: small models that validate the parameters of a single
  mutator, crossover or selector. Operators build them in ``__init__`` through
  ``validate_parameters`` so an invalid operator can never be constructed.
- Run configuration: the ``Config`` tree that describes a whole evolution run
  and can be loaded from (and saved to) YAML.

Key configuration areas:
- EvolutionConfig: Population size, survival rate, selectors and alterers
- LimitsConfig: When the evolution loop stops
- OutputConfig: Logging verbosity
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Type, TypeVar

import yaml
from pydantic import BaseModel, Field, ValidationError

from keen.exceptions import CompositeException, ConfigurationError

S = TypeVar("S", bound=BaseModel)

RATE = "must be in 0.0..1.0"


# --------------------------------------------------------------------------- #
# Operator settings
# --------------------------------------------------------------------------- #


class MutatorSettings(BaseModel):
    """Parameters shared by every mutator."""

    individual_rate: float = Field(default=0.5, ge=0, le=1, description=RATE)
    chromosome_rate: float = Field(default=0.5, ge=0, le=1, description=RATE)

    class Config:
        extra = "forbid"


class GeneMutatorSettings(MutatorSettings):
    """Mutators that decide gene by gene (random, bit flip)."""

    gene_rate: float = Field(default=0.5, ge=0, le=1, description=RATE)


class InversionSettings(MutatorSettings):
    inversion_boundary_probability: float = Field(default=0.5, ge=0, le=1, description=RATE)


class PartialShuffleSettings(MutatorSettings):
    individual_rate: float = Field(default=1.0, ge=0, le=1, description=RATE)
    chromosome_rate: float = Field(default=1.0, ge=0, le=1, description=RATE)
    shuffle_boundary_probability: float = Field(default=0.5, ge=0, le=1, description=RATE)


class SwapSettings(MutatorSettings):
    swap_rate: float = Field(default=0.5, ge=0, le=1, description=RATE)


class DisplacementSettings(MutatorSettings):
    displacement: int = Field(
        default=1, ge=0, strict=True, description="must be a non-negative integer"
    )


class CrossoverSettings(BaseModel):
    """Parameters shared by every crossover."""

    chromosome_rate: float = Field(default=1.0, ge=0, le=1, description=RATE)
    exclusivity: bool = False

    class Config:
        extra = "forbid"


class CombineCrossoverSettings(CrossoverSettings):
    gene_rate: float = Field(default=1.0, ge=0, le=1, description=RATE)
    num_parents: int = Field(
        default=2, ge=2, strict=True, description="must be at least 2"
    )


class TournamentSettings(BaseModel):
    tournament_size: int = Field(
        default=3, gt=0, strict=True, description="must be greater than 0"
    )

    class Config:
        extra = "forbid"


def validate_parameters(
    settings_cls: Type[S],
    exception_cls: Type[ConfigurationError],
    **values: Any,
) -> S:
    """
    Validate operator parameters against a settings model.

    Every violated field becomes one ``exception_cls`` with a message such as
    ``"The individual rate (1.5) must be in 0.0..1.0"``; all of them are raised
    together inside a single CompositeException.

    Args:
        settings_cls: Pydantic model describing the parameters.
        exception_cls: Configuration error type reported for each violation.
        **values: The parameters as passed to the operator.

    Returns:
        The validated settings instance.

    Raises:
        CompositeException: If at least one parameter is invalid.
    """
    try:
        return settings_cls(**values)
    except ValidationError as e:
        infringements = []
        for error in e.errors():
            name = str(error["loc"][0]) if error["loc"] else ""
            field = settings_cls.model_fields.get(name)
            reason = field.description if field and field.description else error["msg"]
            label = name.replace("_", " ")
            infringements.append(
                exception_cls(f"The {label} ({values.get(name)}) {reason}")
            )
        raise CompositeException(infringements) from e


# --------------------------------------------------------------------------- #
# Run configuration
# --------------------------------------------------------------------------- #


class AltererConfig(BaseModel):
    """
    One alterer in the evolution pipeline.

    ``strategy`` names a mutator (random, bit_flip, inversion, displacement,
    partial_shuffle, swap) or a crossover (ordered, partially_mapped,
    position_based, average, single_point) depending on ``kind``.
    ``options`` are passed to the operator unchanged.
    """

    kind: Literal["mutation", "crossover"] = "mutation"
    strategy: str = "random"
    options: dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "forbid"


class SelectionConfig(BaseModel):
    """
    Configuration for a selection strategy.

    Selection decides which individuals become parents and which survive
    unchanged to the next generation.
    """

    strategy: Literal["tournament", "random", "roulette"] = "tournament"
    options: dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "forbid"


class LimitsConfig(BaseModel):
    """
    When to stop evolving.

    The loop stops as soon as any configured limit is reached.
    """

    max_generations: int | None = Field(default=100, ge=1)
    target_fitness: float | None = None
    steady_generations: int | None = Field(default=None, ge=1)

    class Config:
        extra = "forbid"


class EvolutionConfig(BaseModel):
    """
    Configuration for the evolutionary process.

    Key Parameters:

    **Population Settings**:
    - population_size: Number of individuals per generation
    - survival_rate: Fraction of each generation carried over unchanged;
      the rest is bred from selected parents
    - ranker: "max" to maximise fitness, "min" to minimise it

    **Algorithm Components**:
    - parent_selection: How parents for the alterers are chosen
    - survivor_selection: How survivors are chosen
    - alterers: Mutators and crossovers applied to the parents, in order
    """

    population_size: int = Field(default=50, ge=1)
    survival_rate: float = Field(default=0.4, ge=0, le=1)
    ranker: Literal["max", "min"] = "max"
    parent_selection: SelectionConfig = Field(default_factory=SelectionConfig)
    survivor_selection: SelectionConfig = Field(default_factory=SelectionConfig)
    alterers: list[AltererConfig] = Field(
        default_factory=lambda: [
            AltererConfig(kind="crossover", strategy="single_point"),
            AltererConfig(kind="mutation", strategy="random", options={"individual_rate": 0.2}),
        ]
    )

    class Config:
        extra = "forbid"


class OutputConfig(BaseModel):
    """Configuration for output settings."""
    verbosity: Literal["silent", "minimal", "normal", "verbose", "debug"] = "normal"

    class Config:
        extra = "forbid"


class Config(BaseModel):
    """
    Main configuration for a keen evolution run.

    Configuration Sections:
    - **evolution**: Population, selection and alteration
    - **limits**: Stopping criteria
    - **output**: Logging verbosity
    - **seed**: Seed for the shared random source (None = unseeded)

    Usage Patterns:

    **Default Configuration**:
    >>> config = Config()

    **Programmatic Customization**:
    >>> config = Config()
    >>> config.evolution.population_size = 200
    >>> config.limits.max_generations = 500

    **YAML Configuration**:
    >>> config = Config.from_yaml("my_config.yaml")
    >>> config.to_yaml("updated_config.yaml")
    """

    evolution: EvolutionConfig = Field(default_factory=EvolutionConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    seed: int | None = None

    class Config:
        extra = "forbid"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Load configuration from a dictionary."""
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return self.model_dump()


def get_default_config() -> Config:
    """Get a default configuration with sensible defaults for testing."""
    return Config(
        evolution=EvolutionConfig(population_size=20, survival_rate=0.4),
        limits=LimitsConfig(max_generations=50),
        seed=42,
    )


__all__ = [
    "MutatorSettings",
    "GeneMutatorSettings",
    "InversionSettings",
    "PartialShuffleSettings",
    "SwapSettings",
    "DisplacementSettings",
    "CrossoverSettings",
    "CombineCrossoverSettings",
    "TournamentSettings",
    "validate_parameters",
    "AltererConfig",
    "SelectionConfig",
    "LimitsConfig",
    "EvolutionConfig",
    "OutputConfig",
    "Config",
    "get_default_config",
]

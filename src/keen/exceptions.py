"""
Exception hierarchy for keen.

Two families of errors exist:

- Configuration errors: raised eagerly when an operator, factory or engine is
  built with invalid parameters. Every violated constraint is collected and
  reported together inside a single CompositeException.
- Precondition errors: raised when a low-level helper receives arguments that
  indicate a programming error in the caller (bad index ranges, wrong number of
  parents, an empty population). They are never caught inside the core.

"No-op" outcomes (an empty chromosome, a degenerate boundary) are not errors;
operators return their input unchanged instead.
"""

from __future__ import annotations

from typing import Iterable, Type


class KeenException(Exception):
    """Base class for every error raised by keen."""


# --------------------------------------------------------------------------- #
# Configuration errors
# --------------------------------------------------------------------------- #


class ConfigurationError(KeenException):
    """A component was constructed with an invalid parameter."""


class MutatorConfigException(ConfigurationError):
    """Invalid mutator parameter."""


class CrossoverConfigException(ConfigurationError):
    """Invalid crossover parameter."""


class SelectorConfigException(ConfigurationError):
    """Invalid selector parameter."""


class ChromosomeConfigException(ConfigurationError):
    """Invalid chromosome factory parameter."""


class EngineConfigException(ConfigurationError):
    """Invalid evolution loop, state or limit parameter."""


class CompositeException(KeenException):
    """
    Aggregate of configuration errors.

    Raised when one or more constraints are violated at construction time so
    the caller sees every problem at once instead of fixing them one by one.

    Attributes:
        infringements: The individual errors, in the order they were found.
    """

    def __init__(self, infringements: Iterable[KeenException]):
        self.infringements: list[KeenException] = list(infringements)
        details = "; ".join(
            f"{type(e).__name__}: {e}" for e in self.infringements
        )
        super().__init__(
            f"{len(self.infringements)} constraint(s) violated: {details}"
        )

    def has_infringement(
        self,
        exception_type: Type[KeenException],
        fragment: str = "",
    ) -> bool:
        """Whether an infringement of the given type contains `fragment`."""
        return any(
            isinstance(e, exception_type) and fragment in str(e)
            for e in self.infringements
        )


# --------------------------------------------------------------------------- #
# Precondition errors
# --------------------------------------------------------------------------- #


class PreconditionError(KeenException):
    """A helper was called with arguments that violate its contract."""


class IndexConstraintError(PreconditionError, IndexError):
    """An index or index range is out of bounds."""


class MutatorException(PreconditionError):
    """A mutator was applied to an incompatible state."""


class CrossoverException(PreconditionError):
    """A crossover was applied to incompatible parents."""


class SelectionException(PreconditionError):
    """A selector was applied to an incompatible population."""


__all__ = [
    "KeenException",
    "ConfigurationError",
    "MutatorConfigException",
    "CrossoverConfigException",
    "SelectorConfigException",
    "ChromosomeConfigException",
    "EngineConfigException",
    "CompositeException",
    "PreconditionError",
    "IndexConstraintError",
    "MutatorException",
    "CrossoverException",
    "SelectionException",
]

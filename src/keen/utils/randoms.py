"""
Sampling helpers built on top of the shared random source.

Each helper takes an optional ``rng``; when omitted it uses ``domain.random``.
Draw order is fixed and documented per function because operators rely on it
for reproducibility.
"""

from __future__ import annotations

import math
import random
import sys
from typing import Callable, List, Sequence, Tuple, TypeVar

from keen.domain import domain
from keen.exceptions import IndexConstraintError, PreconditionError

T = TypeVar("T")


def indices(
    pick_probability: float,
    end: int,
    start: int = 0,
    rng: random.Random | None = None,
) -> List[int]:
    """
    Pick each index in ``[start, end)`` independently with the given probability.

    Makes exactly one ``rng.random()`` draw per index, in ascending order. An
    index is picked when its draw is strictly below ``pick_probability``.
    """
    if not 0.0 <= pick_probability <= 1.0:
        raise PreconditionError(
            f"The pick probability ({pick_probability}) must be in the range 0.0..1.0"
        )
    if start < 0 or end < 0:
        raise IndexConstraintError(
            f"The indices must be non-negative (start={start}, end={end})"
        )
    rng = rng or domain.random
    return [i for i in range(start, end) if rng.random() < pick_probability]


def sample_indices(
    size: int,
    end: int,
    start: int = 0,
    rng: random.Random | None = None,
) -> List[int]:
    """
    Pick ``size`` distinct indices from ``[start, end)`` and return them sorted.

    Makes one ``rng.randrange`` draw per picked index.
    """
    if size < 0:
        raise PreconditionError(f"The size ({size}) must be non-negative")
    if start < 0 or end < start:
        raise IndexConstraintError(
            f"Invalid index range (start={start}, end={end})"
        )
    if size > end - start:
        raise PreconditionError(
            f"The size ({size}) must be at most the size of the range ({end - start})"
        )
    rng = rng or domain.random
    remaining = list(range(start, end))
    picked = [remaining.pop(rng.randrange(len(remaining))) for _ in range(size)]
    return sorted(picked)


def subsets(
    elements: Sequence[T],
    size: int,
    exclusive: bool,
    limit: int = sys.maxsize,
    rng: random.Random | None = None,
) -> List[List[T]]:
    """
    Group elements into subsets of ``size``.

    The elements are shuffled first. When ``exclusive`` every element appears in
    exactly one subset (the element count must then be a multiple of ``size``).
    Otherwise each subset starts with the next unused element and is filled
    with random picks from all elements, so every element still leads at least
    one subset but may appear in several.
    """
    if not elements:
        raise PreconditionError("The input list must not be empty")
    if size < 1:
        raise PreconditionError(f"The subset size ({size}) must be at least 1")
    if limit < 1:
        raise PreconditionError(f"The limit ({limit}) must be at least 1")
    if exclusive:
        if size > len(elements):
            raise PreconditionError(
                f"The subset size ({size}) must be at most the size of the input "
                f"list ({len(elements)})"
            )
        if len(elements) % size != 0:
            raise PreconditionError(
                f"Subset count ({len(elements)}) must be a multiple of size ({size}) "
                "for exclusivity"
            )

    rng = rng or domain.random
    remaining = list(elements)
    rng.shuffle(remaining)

    result: List[List[T]] = []
    while remaining and len(result) < limit:
        if exclusive:
            result.append(remaining[:size])
            del remaining[:size]
        else:
            subset = [remaining.pop(0)]
            for _ in range(size - 1):
                pick = rng.choice(elements)
                if pick in remaining:
                    remaining.remove(pick)
                subset.append(pick)
            result.append(subset)
    return result


def next_double(
    low: float,
    high: float,
    rng: random.Random | None = None,
) -> float:
    """
    Draw a float uniformly from ``[low, high]`` with a single ``rng.random()`` draw.

    Spans wider than the largest float (such as the full double range) are
    scaled by halves so the result stays finite.
    """
    if low > high:
        raise PreconditionError(
            f"Cannot generate a double within an empty range ({low}, {high})"
        )
    rng = rng or domain.random
    draw = rng.random()
    if math.isfinite(high - low):
        return low + (high - low) * draw
    return low + 2 * draw * (high / 2 - low / 2)


def next_char(
    char_range: Tuple[str, str],
    predicate: Callable[[str], bool] = lambda _: True,
    rng: random.Random | None = None,
) -> str:
    """Draw characters from the closed range until one satisfies the predicate."""
    low, high = ord(char_range[0]), ord(char_range[1])
    if low > high:
        raise PreconditionError(
            f"Cannot generate a character within an empty range {char_range}"
        )
    rng = rng or domain.random
    while True:
        candidate = chr(rng.randint(low, high))
        if predicate(candidate):
            return candidate


__all__ = ["indices", "sample_indices", "subsets", "next_double", "next_char"]

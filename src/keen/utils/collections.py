"""Small list helpers shared by the operators."""

from __future__ import annotations

from typing import List, Sequence, TypeVar

from keen.exceptions import IndexConstraintError, PreconditionError

E = TypeVar("E")


def transpose(rows: Sequence[Sequence[E]]) -> List[List[E]]:
    """
    Transpose a rectangular list of lists.

    An empty input transposes to an empty list.

    Raises:
        PreconditionError: If the rows have different lengths.
    """
    if not rows:
        return []
    if len({len(row) for row in rows}) > 1:
        raise PreconditionError("All lists must have the same size")
    return [[row[i] for row in rows] for i in range(len(rows[0]))]


def swap(items: List[E], i: int, j: int) -> None:
    """Swap two positions of a list in place."""
    if not items:
        raise IndexConstraintError("The list must not be empty")
    for index in (i, j):
        if not 0 <= index < len(items):
            raise IndexConstraintError(
                f"The index ({index}) must be in range 0..{len(items) - 1}"
            )
    if i != j:
        items[i], items[j] = items[j], items[i]


def rotate(items: Sequence[E], distance: int, right: bool = True) -> List[E]:
    """
    Circularly shift a sequence.

    A right shift by ``d`` moves the last ``d mod n`` items to the front; a left
    shift moves the first ``d mod n`` items to the back.
    """
    items = list(items)
    if not items:
        return items
    d = distance % len(items)
    if d == 0:
        return items
    if right:
        return items[-d:] + items[:-d]
    return items[d:] + items[:d]


__all__ = ["transpose", "swap", "rotate"]

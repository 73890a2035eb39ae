"""Unmark selectors: which marks an unmark request targets."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .state import Record


@dataclass(frozen=True)
class Marks:
    """An explicit list of marks."""

    marks: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "marks", tuple(self.marks))


@dataclass(frozen=True)
class Marklist:
    """Every mark of the pinned tier."""


@dataclass(frozen=True)
class Buflist:
    """Every mark of the recency tier."""


@dataclass(frozen=True)
class All:
    """Every mark currently in use."""


Selector = Marks | Marklist | Buflist | All


def resolve_marks(
    selector: Selector,
    marklist: Sequence[str],
    buflist: Sequence[str],
    records: Sequence[Record],
) -> tuple[str, ...]:
    if isinstance(selector, Marks):
        return selector.marks
    if isinstance(selector, Marklist):
        return tuple(marklist)
    if isinstance(selector, Buflist):
        return tuple(buflist)
    if isinstance(selector, All):
        return tuple(record.mark for record in records)
    raise TypeError(f"unknown unmark selector: {selector!r}")

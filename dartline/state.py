"""Tracked-file records and the ordered store that owns them.

A record binds one single-character mark to one absolute filename. The store
keeps marks and filenames unique and keeps the list sorted by mark rank after
every structural change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

LOGGER = logging.getLogger(__name__)

UNRANKED = 999


@dataclass
class Record:
    """One tracked file slot."""

    mark: str
    filename: str

    def copy(self) -> Record:
        return replace(self)


def is_mark_key(key: object) -> bool:
    """Return whether key is a valid single-character mark."""
    return isinstance(key, str) and len(key) == 1 and key.isprintable() and not key.isspace()


class StateStore:
    """Ordered record list with mark/filename uniqueness.

    ``ranks`` supplies the sort rank of each mark; it is called on every
    resort so the store never caches a stale ordering.
    """

    def __init__(self, ranks: Callable[[], dict[str, int]]) -> None:
        self._ranks = ranks
        self.records: list[Record] = []

    def __len__(self) -> int:
        return len(self.records)

    def get_by_mark(self, mark: str) -> Record | None:
        for record in self.records:
            if record.mark == mark:
                return record
        return None

    def get_by_filename(self, filename: str) -> Record | None:
        for record in self.records:
            if record.filename == filename:
                return record
        return None

    def index_of(self, filename: str) -> int:
        for idx, record in enumerate(self.records):
            if record.filename == filename:
                return idx
        return -1

    def delete(self, filename: str) -> bool:
        """Remove the record tracking ``filename``; return whether one existed."""
        idx = self.index_of(filename)
        if idx < 0:
            return False
        del self.records[idx]
        return True

    def insert(self, record: Record) -> Record:
        """Add ``record``, folding duplicates into the existing record.

        A mark already held elsewhere rebinds that record to the new filename.
        A filename already tracked elsewhere has its mark reassigned. Either
        way, exactly one record ends up holding both values.
        """
        holder = self.get_by_mark(record.mark)
        if holder is not None:
            self.assign_filename(holder, record.filename)
            return holder
        existing = self.get_by_filename(record.filename)
        if existing is not None:
            self.assign_mark(existing, record.mark)
            return existing
        self.records.append(record)
        self.resort()
        return record

    def assign_mark(self, record: Record, mark: str) -> None:
        """Move ``record`` to ``mark``, evicting any other holder of that mark."""
        holder = self.get_by_mark(mark)
        if holder is not None and holder is not record:
            LOGGER.debug("mark %r evicts %s", mark, holder.filename)
            self.records.remove(holder)
        record.mark = mark
        self.resort()

    def assign_filename(self, record: Record, filename: str) -> None:
        """Rebind ``record`` to ``filename``, evicting any other record for it."""
        existing = self.get_by_filename(filename)
        if existing is not None and existing is not record:
            self.records.remove(existing)
        record.filename = filename

    def replace(self, records: Iterable[Record]) -> None:
        """Swap in a whole record list verbatim (session loads)."""
        self.records = [record.copy() for record in records]

    def resort(self) -> None:
        ranks = self._ranks()
        self.records.sort(key=lambda record: ranks.get(record.mark, UNRANKED))

    def all(self) -> list[Record]:
        """Return a snapshot copy of the ordered records."""
        return [record.copy() for record in self.records]


class MarkAllocator:
    """Pick the first free mark from ``marklist``, else ``overflow``."""

    def __init__(self, store: StateStore, marklist: Iterable[str], overflow: str) -> None:
        self.store = store
        self.marklist = tuple(marklist)
        self.overflow = overflow

    def next_unused(self) -> str:
        for mark in self.marklist:
            if self.store.get_by_mark(mark) is None:
                return mark
        LOGGER.debug("marklist exhausted, using overflow mark %r", self.overflow)
        return self.overflow

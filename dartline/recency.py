"""Fixed-capacity most-recently-shown window over the ``buflist`` marks."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .state import Record, StateStore

LOGGER = logging.getLogger(__name__)


class RecencyShifter:
    """Track the last ``len(buflist)`` shown files that are not pinned.

    Slot 0 (``buflist[0]``) is the most recent. Showing a new file shifts every
    occupant one slot to the right; the occupant of the last slot is evicted.
    """

    def __init__(
        self,
        store: StateStore,
        buflist: Sequence[str],
        is_showable: Callable[[str], bool],
    ) -> None:
        self.store = store
        self.buflist = tuple(buflist)
        self._is_showable = is_showable

    @property
    def capacity(self) -> int:
        return len(self.buflist)

    def occupants(self) -> list[Record]:
        """Return recency-tier records from most to least recent."""
        items: list[Record] = []
        for mark in self.buflist:
            record = self.store.get_by_mark(mark)
            if record is not None:
                items.append(record)
        return items

    def shift(self, filename: str) -> bool:
        """Push ``filename`` into slot 0; return whether the state changed."""
        if not self.buflist:
            return False
        if self.store.get_by_filename(filename) is not None:
            return False
        if not self._is_showable(filename):
            LOGGER.debug("not tracking %r: not showable", filename)
            return False

        items = self.occupants()
        for idx in range(len(items) - 1, -1, -1):
            occupant = items[idx]
            if idx + 1 < self.capacity:
                self.store.assign_mark(occupant, self.buflist[idx + 1])
            else:
                LOGGER.debug("evicting %s from recent files", occupant.filename)
                self.store.delete(occupant.filename)

        self.store.insert(Record(mark=self.buflist[0], filename=filename))
        return True

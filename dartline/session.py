"""Tracked-file session: mark state machine, host events, and rendering.

A :class:`Session` owns one record store and everything derived from it.
Mutations run synchronously inside host event handlers or API calls; each
successful one invalidates the render cache and notifies subscribers.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from . import persist
from .config import DartConfig
from .host import NO_BUFFER, Host, is_showable
from .icons import icon_provider
from .picker import mark_from_picker_line, picker_entries
from .recency import RecencyShifter
from .selectors import Selector, resolve_marks
from .state import MarkAllocator, Record, StateStore, is_mark_key
from .tabline import RenderCache, any_modified, render_tabline

LOGGER = logging.getLogger(__name__)

SHOW_ALWAYS = 2
SHOW_WITH_TABS = 1


class Session:
    def __init__(self, host: Host, config: DartConfig | None = None) -> None:
        self.host = host
        self.config = config if config is not None else DartConfig()
        self.store = StateStore(self.config.ranks)
        self.allocator = MarkAllocator(self.store, self.config.marklist, self.config.overflow_mark)
        self.recency = RecencyShifter(self.store, self.config.buflist, self.is_showable)
        self.cache = RenderCache()
        self.get_icon = icon_provider(self.config.tabline.icons)
        self._subscribers: list[Callable[[], None]] = []

    # -- notifications -------------------------------------------------

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call ``callback`` after every mutation; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit_change(self) -> None:
        self.cache.invalidate()
        for callback in list(self._subscribers):
            callback()

    # -- queries -------------------------------------------------------

    def is_showable(self, filename: str | None) -> bool:
        return is_showable(self.host, filename)

    def lookup_by_mark(self, mark: str) -> Record | None:
        record = self.store.get_by_mark(mark)
        return record.copy() if record is not None else None

    def lookup_by_filename(self, filename: str) -> Record | None:
        record = self.store.get_by_filename(filename)
        return record.copy() if record is not None else None

    def list_all(self) -> list[Record]:
        return self.store.all()

    def is_modified(self) -> bool:
        return any_modified(self.store, self.host)

    def tabline_mode(self) -> int:
        """Return 2 when the tabline should always show, else 1."""
        if len(self.store) > 0 or self.config.tabline.always_show:
            return SHOW_ALWAYS
        return SHOW_WITH_TABS

    def _handle_for(self, filename: str) -> int:
        return self.host.buffer_for(filename)

    def _current_filename(self) -> str:
        return self.host.buffer_name(self.host.current_buffer())

    # -- mutations -----------------------------------------------------

    def mark(self, handle: int | None = None, mark: str | None = None) -> None:
        """Pin a buffer, rebind a mark, or toggle a pinned buffer back to recent.

        With an explicit ``mark`` already in use, that record is rebound to the
        buffer. A recent buffer is promoted to ``mark`` (or the next free pinned
        mark); an already pinned buffer is unpinned and re-enters the recent
        files at the most recent slot.
        An invalid ``mark`` leaves the state untouched.
        """
        if mark is not None and not is_mark_key(mark):
            LOGGER.debug("not marking: invalid mark %r", mark)
            return
        if handle is None:
            handle = self.host.current_buffer()
        filename = self.host.buffer_name(handle)
        if not self.is_showable(filename):
            LOGGER.debug("not marking buffer %s: not showable", handle)
            return

        holder = self.store.get_by_mark(mark) if mark is not None else None
        if holder is not None:
            self.store.assign_filename(holder, filename)
            self.emit_change()
            return

        existing = self.store.get_by_filename(filename)
        if existing is None:
            self.store.insert(Record(mark=mark or self.allocator.next_unused(), filename=filename))
        elif existing.mark in self.config.buflist:
            self.store.assign_mark(existing, mark or self.allocator.next_unused())
        else:
            self.store.delete(filename)
            self.recency.shift(filename)

        self.store.resort()
        self.emit_change()

    def unmark(self, selector: Selector) -> None:
        marks = resolve_marks(selector, self.config.marklist, self.config.buflist, self.store.records)
        for mark in marks:
            record = self.store.get_by_mark(mark)
            if record is None:
                LOGGER.debug("unmark: no record for mark %r", mark)
                continue
            self.store.delete(record.filename)

        # keep the active buffer visible
        current = self._current_filename()
        if self.store.get_by_filename(current) is None:
            self.recency.shift(current)

        self.emit_change()

    def jump(self, mark: str) -> bool:
        record = self.store.get_by_mark(mark)
        if record is None:
            LOGGER.debug("jump: no record for mark %r", mark)
            return False
        handle = self._handle_for(record.filename)
        if handle == NO_BUFFER:
            return False
        self.host.set_current_buffer(handle)
        self.emit_change()
        return True

    def cycle(self, direction: int) -> bool:
        """Switch to the neighbouring tracked buffer (``direction`` is -1 or 1)."""
        records = self.store.records
        count = len(records)
        current = self.host.current_buffer()
        if current == NO_BUFFER:
            return False
        for position, record in enumerate(records, start=1):
            if self._handle_for(record.filename) != current:
                continue
            target = position + direction
            if not self.config.tabline.cycle_wraps_around and not 1 <= target <= count:
                return False
            following = records[(target - 1) % count]
            handle = self._handle_for(following.filename)
            if handle == NO_BUFFER:
                LOGGER.debug("cycle: no buffer for %s", following.filename)
                return False
            self.host.set_current_buffer(handle)
            self.emit_change()
            return True
        return False

    def cycle_next(self) -> bool:
        return self.cycle(1)

    def cycle_prev(self) -> bool:
        return self.cycle(-1)

    def delete_by_filename(self, filename: str) -> bool:
        if not self.store.delete(filename):
            return False
        self.emit_change()
        return True

    # -- host events ---------------------------------------------------

    def file_shown(self, handle: int) -> bool:
        if self.recency.shift(self.host.buffer_name(handle)):
            self.emit_change()
            return True
        return False

    def file_closed(self, handle: int) -> bool:
        return self.delete_by_filename(self.host.buffer_name(handle))

    def startup(self) -> None:
        """Seed the recent files from buffers that were open before setup."""
        if not self.config.buflist:
            return
        changed = False
        for handle in self.host.list_buffers():
            changed = self.recency.shift(self.host.buffer_name(handle)) or changed
        if changed:
            self.emit_change()

    # -- rendering -----------------------------------------------------

    def render(self) -> str:
        return render_tabline(self.store, self.host, self.config, self.cache, self.get_icon)

    def pick_entries(self, cwd: str | None = None) -> list[str]:
        return picker_entries(self.store.records, self.config.picker.path_format, cwd)

    def pick(self, line: str) -> bool:
        mark = mark_from_picker_line(line)
        if mark is None:
            return False
        return self.jump(mark)

    # -- persistence ---------------------------------------------------

    def session_path(self, name: str) -> str:
        return os.fspath(persist.session_path(self.config.persist.path, name))

    def read_session(self, name: str) -> bool:
        """Replace the state with a saved snapshot; leave it untouched on failure."""
        records = persist.read_session(self.config.persist.path, name)
        if not records:
            return False
        self.store.replace(records)
        self.emit_change()
        return True

    def write_session(self, name: str) -> bool:
        return persist.write_session(self.config.persist.path, name, self.store.records)

"""Editor-host boundary: buffer queries, display metrics, and an in-memory host.

The embedding editor subclasses :class:`Host`. :class:`MemoryHost` is a
complete implementation backed by plain dictionaries; the CLI previews and the
tests run against it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

NO_BUFFER = -1


@dataclass(frozen=True)
class DisplayMetrics:
    """Host-reported values that affect the rendered tabline."""

    columns: int
    tabpage: int = 1
    tabpage_count: int = 1


class Host:
    """Buffer and display queries the session needs from the editor."""

    def buffer_for(self, filename: str) -> int:
        """Return the handle of the buffer named ``filename`` or ``NO_BUFFER``."""
        raise NotImplementedError

    def buffer_name(self, handle: int) -> str:
        raise NotImplementedError

    def is_valid(self, handle: int) -> bool:
        """Return whether ``handle`` names an existing, loaded buffer."""
        raise NotImplementedError

    def is_listed(self, handle: int) -> bool:
        raise NotImplementedError

    def buffer_kind(self, handle: int) -> str:
        """Return ``""`` for ordinary file buffers, else a kind name."""
        raise NotImplementedError

    def is_modified(self, handle: int) -> bool:
        raise NotImplementedError

    def is_directory(self, filename: str) -> bool:
        raise NotImplementedError

    def current_buffer(self) -> int:
        raise NotImplementedError

    def set_current_buffer(self, handle: int) -> None:
        raise NotImplementedError

    def list_buffers(self) -> list[int]:
        raise NotImplementedError

    def metrics(self) -> DisplayMetrics:
        raise NotImplementedError


def is_showable(host: Host, filename: str | None) -> bool:
    """Return whether ``filename`` may be tracked and displayed.

    Directories, unknown or unloaded buffers, unlisted buffers, special buffer
    kinds (prompts, pickers, terminals) and unnamed buffers are excluded.
    """
    if not filename:
        return False
    if host.is_directory(filename):
        return False
    handle = host.buffer_for(filename)
    if handle == NO_BUFFER or not host.is_valid(handle):
        return False
    return host.is_listed(handle) and host.buffer_kind(handle) == "" and host.buffer_name(handle) != ""


@dataclass
class MemoryBuffer:
    name: str
    listed: bool = True
    kind: str = ""
    modified: bool = False
    loaded: bool = True


@dataclass
class MemoryHost(Host):
    """Dictionary-backed host with editor-like buffer bookkeeping."""

    columns: int = 80
    tabpage: int = 1
    tabpage_count: int = 1
    buffers: dict[int, MemoryBuffer] = field(default_factory=dict)
    directories: set[str] = field(default_factory=set)
    current: int = NO_BUFFER
    next_handle: int = 1

    def open(
        self,
        filename: str,
        *,
        listed: bool = True,
        kind: str = "",
        modified: bool = False,
        focus: bool = True,
    ) -> int:
        """Create (or reuse) a buffer for ``filename`` and optionally focus it."""
        name = os.path.abspath(filename) if filename else ""
        handle = self.buffer_for(name) if name else NO_BUFFER
        if handle == NO_BUFFER:
            handle = self.next_handle
            self.next_handle += 1
            self.buffers[handle] = MemoryBuffer(name=name, listed=listed, kind=kind, modified=modified)
        if focus:
            self.current = handle
        return handle

    def close(self, handle: int) -> None:
        self.buffers.pop(handle, None)
        if self.current == handle:
            self.current = next(iter(self.buffers), NO_BUFFER)

    def add_directory(self, path: str) -> None:
        self.directories.add(os.path.abspath(path))

    def set_modified(self, handle: int, modified: bool = True) -> None:
        self.buffers[handle].modified = modified

    def buffer_for(self, filename: str) -> int:
        for handle, buf in self.buffers.items():
            if buf.name == filename:
                return handle
        return NO_BUFFER

    def buffer_name(self, handle: int) -> str:
        buf = self.buffers.get(handle)
        return buf.name if buf is not None else ""

    def is_valid(self, handle: int) -> bool:
        buf = self.buffers.get(handle)
        return buf is not None and buf.loaded

    def is_listed(self, handle: int) -> bool:
        buf = self.buffers.get(handle)
        return buf is not None and buf.listed

    def buffer_kind(self, handle: int) -> str:
        buf = self.buffers.get(handle)
        return buf.kind if buf is not None else ""

    def is_modified(self, handle: int) -> bool:
        buf = self.buffers.get(handle)
        return buf is not None and buf.modified

    def is_directory(self, filename: str) -> bool:
        return filename in self.directories

    def current_buffer(self) -> int:
        return self.current

    def set_current_buffer(self, handle: int) -> None:
        if handle in self.buffers:
            self.current = handle

    def list_buffers(self) -> list[int]:
        return list(self.buffers)

    def metrics(self) -> DisplayMetrics:
        return DisplayMetrics(columns=self.columns, tabpage=self.tabpage, tabpage_count=self.tabpage_count)

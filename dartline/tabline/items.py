"""Tabline items and their highlight classification."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from ..state import Record

FALLBACK_CONTENT = "*"


class HighlightClass(str, Enum):
    """Item highlight group, by pinned/current/modified status."""

    VISIBLE = "DartVisible"
    VISIBLE_MODIFIED = "DartVisibleModified"
    CURRENT = "DartCurrent"
    CURRENT_MODIFIED = "DartCurrentModified"
    MARKED = "DartMarked"
    MARKED_MODIFIED = "DartMarkedModified"
    MARKED_CURRENT = "DartMarkedCurrent"
    MARKED_CURRENT_MODIFIED = "DartMarkedCurrentModified"

    @classmethod
    def select(cls, *, marked: bool, current: bool, modified: bool) -> HighlightClass:
        base = "DartMarked" if marked else "Dart"
        if current:
            base += "Current"
        elif not marked:
            base += "Visible"
        return cls(base + ("Modified" if modified else ""))

    @property
    def label_group(self) -> str:
        """Group used for the item's mark label, e.g. ``DartMarkedLabelModified``."""
        name = self.value
        suffix = ""
        if name.endswith("Modified"):
            name, suffix = name[: -len("Modified")], "Modified"
        return f"{name}Label{suffix}"


@dataclass
class Item:
    """One formatted tabline entry, rebuilt on every uncached render."""

    record: Record
    handle: int
    label: str
    content: str
    hl_class: HighlightClass
    icon: str | None = None

    @property
    def hl(self) -> str:
        return self.hl_class.value

    @property
    def hl_label(self) -> str:
        return self.hl_class.label_group

    @property
    def click(self) -> str:
        return f"%{self.handle}@SwitchBuffer@"


def build_item(
    record: Record,
    handle: int,
    *,
    current: bool,
    modified: bool,
    marklist: Sequence[str],
    get_icon: Callable[[str], str | None],
) -> Item:
    name = os.path.basename(record.filename)
    return Item(
        record=record,
        handle=handle,
        label=f"{record.mark} " if record.mark else "",
        content=name or FALLBACK_CONTENT,
        hl_class=HighlightClass.select(marked=record.mark in marklist, current=current, modified=modified),
        icon=get_icon(name),
    )

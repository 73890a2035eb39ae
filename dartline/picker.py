"""Jump-picker listing: one ``mark → path`` line per tracked file."""

from __future__ import annotations

import os
import re
from collections.abc import Sequence

from .state import Record

PICKER_TITLE = "Jump to buffer:"
ARROW = "→"
_PICKER_LINE_RE = re.compile(rf"^\s*(.*?)\s*{ARROW}")


def display_path(filename: str, path_format: str, cwd: str | None = None) -> str:
    if path_format == "absolute":
        return filename
    if path_format == "relative":
        base = cwd if cwd is not None else os.getcwd()
        try:
            relative = os.path.relpath(filename, base)
        except ValueError:
            return filename
        return filename if relative.startswith(os.pardir) else relative
    return os.path.basename(filename)


def picker_entries(records: Sequence[Record], path_format: str = "name", cwd: str | None = None) -> list[str]:
    lines = [PICKER_TITLE]
    for record in records:
        lines.append(f"  {record.mark} {ARROW} {display_path(record.filename, path_format, cwd)}")
    return lines


def mark_from_picker_line(line: str) -> str | None:
    match = _PICKER_LINE_RE.match(line)
    if match is None or not match.group(1):
        return None
    return match.group(1)

"""Named session snapshots on disk.

A snapshot is a JSON array of ``{"mark": ..., "filename": ...}`` objects.
Reads are all-or-nothing: anything missing, unreadable, malformed, or
violating mark/filename uniqueness yields ``None``. Failed writes are skipped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from .state import Record, is_mark_key

LOGGER = logging.getLogger(__name__)

SESSION_SUFFIX = ".json"


def session_path(directory: Path, session: str) -> Path:
    return Path(directory) / f"{session}{SESSION_SUFFIX}"


def decode_records(data: object) -> list[Record] | None:
    """Validate decoded JSON and convert it to records, or ``None``."""
    if not isinstance(data, list):
        return None
    records: list[Record] = []
    marks: set[str] = set()
    filenames: set[str] = set()
    for entry in data:
        if not isinstance(entry, dict):
            return None
        mark = entry.get("mark")
        filename = entry.get("filename")
        if not is_mark_key(mark) or not isinstance(filename, str) or not filename:
            return None
        if mark in marks or filename in filenames:
            return None
        marks.add(mark)
        filenames.add(filename)
        records.append(Record(mark=mark, filename=filename))
    return records


def encode_records(records: Sequence[Record]) -> list[dict[str, str]]:
    return [{"mark": record.mark, "filename": record.filename} for record in records]


def read_session(directory: Path, session: str) -> list[Record] | None:
    path = session_path(directory, session)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        LOGGER.debug("no session file at %s", path)
        return None
    except Exception as exc:
        LOGGER.warning("could not read session %r from %s: %s", session, path, exc)
        return None

    records = decode_records(data)
    if records is None:
        LOGGER.warning("ignoring malformed session file %s", path)
    return records


def write_session(directory: Path, session: str, records: Sequence[Record]) -> bool:
    path = session_path(directory, session)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(encode_records(records)), encoding="utf-8")
    except Exception as exc:
        LOGGER.warning("could not write session %r to %s: %s", session, path, exc)
        return False
    return True

"""Public package surface for dartline.

Exports the session API and ``main`` for programmatic CLI invocation.
"""

from __future__ import annotations

from .config import DartConfig, ItemFormat, MarkOrder, config_from_mapping
from .host import DisplayMetrics, Host, MemoryHost, is_showable
from .selectors import All, Buflist, Marklist, Marks
from .session import Session
from .state import Record


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "All",
    "Buflist",
    "DartConfig",
    "DisplayMetrics",
    "Host",
    "ItemFormat",
    "MarkOrder",
    "Marklist",
    "Marks",
    "MemoryHost",
    "Record",
    "Session",
    "config_from_mapping",
    "is_showable",
    "main",
]

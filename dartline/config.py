"""Configuration values, ordering/formatting strategies, and the JSON config file.

``DartConfig`` is built once and shared read-only by every component. The
config file is optional; malformed or missing data falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

from platformdirs import user_config_dir, user_data_dir

from .state import is_mark_key

if TYPE_CHECKING:
    from .tabline.items import Item

LOGGER = logging.getLogger(__name__)

APP_NAME = "dartline"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_PERSIST_PATH = Path(user_data_dir(APP_NAME, appauthor=False))

PATH_FORMATS = ("name", "relative", "absolute")


class MarkOrder:
    """Sort-rank strategy for marks on the tabline.

    The default places recent-file marks first, then pinned marks, both in
    their configured order. Subclass and override :meth:`ranks` to change it.
    """

    def ranks(self, marklist: Sequence[str], buflist: Sequence[str]) -> dict[str, int]:
        order: dict[str, int] = {}
        for idx, mark in enumerate([*buflist, *marklist], start=1):
            order.setdefault(mark, idx)
        return order


class ItemFormat:
    """Statusline formatting strategy for one tabline item.

    The default renders `` <icon>  <label><content> `` with the item's
    highlight groups and a click target that switches to its buffer.
    """

    def format(self, item: Item) -> str:
        icon = f"{item.icon}  " if item.icon is not None else ""
        return f"%#{item.hl}#{item.click} {icon}%#{item.hl_label}#{item.label}%#{item.hl}#{item.content} %X"


@dataclass(frozen=True)
class TablineConfig:
    always_show: bool = True
    cycle_wraps_around: bool = True
    label_fg: str = "orange"
    label_marked_fg: str = "orange"
    icons: bool = True
    max_item_len: int = 50
    order: MarkOrder = field(default_factory=MarkOrder)
    format_item: ItemFormat = field(default_factory=ItemFormat)


@dataclass(frozen=True)
class PickerConfig:
    path_format: str = "name"


@dataclass(frozen=True)
class PersistConfig:
    path: Path = DEFAULT_PERSIST_PATH


@dataclass(frozen=True)
class DartConfig:
    """Complete session configuration."""

    marklist: tuple[str, ...] = ("a", "s", "d", "f", "q", "w", "e", "r")
    buflist: tuple[str, ...] = ("z", "x", "c")
    overflow_mark: str = "+"
    tabline: TablineConfig = field(default_factory=TablineConfig)
    picker: PickerConfig = field(default_factory=PickerConfig)
    persist: PersistConfig = field(default_factory=PersistConfig)

    def ranks(self) -> dict[str, int]:
        return self.tabline.order.ranks(self.marklist, self.buflist)


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON, ignoring write failures."""
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        LOGGER.debug("could not write config %s: %s", config_path, exc)


def _coerce_marks(key: str, value: object, fallback: tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        LOGGER.debug("ignoring config key %r: expected a list of marks", key)
        return fallback
    marks: list[str] = []
    for mark in value:
        if is_mark_key(mark) and mark not in marks:
            marks.append(mark)
        else:
            LOGGER.debug("dropping invalid or repeated mark %r from %r", mark, key)
    return tuple(marks)


def _typed(table: Mapping[str, object], key: str, kind: type, fallback):
    if key not in table:
        return fallback
    value = table[key]
    # bool is an int subclass; keep them apart.
    if isinstance(value, bool) and kind is not bool:
        value = None
    if not isinstance(value, kind):
        LOGGER.debug("ignoring config key %r: expected %s", key, kind.__name__)
        return fallback
    return value


def _table(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    return value if isinstance(value, Mapping) else {}


def config_from_mapping(data: Mapping[str, object], base: DartConfig | None = None) -> DartConfig:
    """Deep-merge ``data`` over ``base`` (defaults when omitted).

    Unknown keys are ignored and wrongly typed values keep the base value.
    """
    base = base if base is not None else DartConfig()

    marklist = _coerce_marks("marklist", data["marklist"], base.marklist) if "marklist" in data else base.marklist
    buflist = _coerce_marks("buflist", data["buflist"], base.buflist) if "buflist" in data else base.buflist
    overflow = data.get("overflow_mark", base.overflow_mark)
    if not is_mark_key(overflow):
        overflow = base.overflow_mark

    tabline_data = _table(data, "tabline")
    tabline = replace(
        base.tabline,
        always_show=_typed(tabline_data, "always_show", bool, base.tabline.always_show),
        cycle_wraps_around=_typed(tabline_data, "cycle_wraps_around", bool, base.tabline.cycle_wraps_around),
        label_fg=_typed(tabline_data, "label_fg", str, base.tabline.label_fg),
        label_marked_fg=_typed(tabline_data, "label_marked_fg", str, base.tabline.label_marked_fg),
        icons=_typed(tabline_data, "icons", bool, base.tabline.icons),
        max_item_len=max(2, _typed(tabline_data, "max_item_len", int, base.tabline.max_item_len)),
    )

    path_format = _typed(_table(data, "picker"), "path_format", str, base.picker.path_format)
    if path_format not in PATH_FORMATS:
        LOGGER.debug("ignoring picker path_format %r", path_format)
        path_format = base.picker.path_format

    persist_path = _typed(_table(data, "persist"), "path", str, None)

    return replace(
        base,
        marklist=marklist,
        buflist=buflist,
        overflow_mark=overflow,
        tabline=tabline,
        picker=PickerConfig(path_format=path_format),
        persist=PersistConfig(path=Path(persist_path).expanduser()) if persist_path else base.persist,
    )

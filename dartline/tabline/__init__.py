"""Tabline rendering pipeline.

Records are turned into items, disambiguated, length-capped, and packed
around the current buffer's item. The result is memoized per display state.
"""

from __future__ import annotations

from collections.abc import Callable

from ..config import DartConfig
from ..host import NO_BUFFER, DisplayMetrics, Host, is_showable
from ..state import StateStore
from .cache import Fingerprint, RenderCache
from .items import HighlightClass, Item, build_item
from .layout import LayoutEngine
from .measure import statusline_width
from .paths import disambiguate, truncate_contents

FILL = "%X%#DartFill#"


def tabpage_segment(metrics: DisplayMetrics) -> str:
    if metrics.tabpage_count <= 1:
        return ""
    return f"%= Tab {metrics.tabpage}/{metrics.tabpage_count} "


def any_modified(store: StateStore, host: Host) -> bool:
    for record in store.records:
        handle = host.buffer_for(record.filename)
        if handle != NO_BUFFER and host.is_modified(handle):
            return True
    return False


def fingerprint(store: StateStore, host: Host) -> Fingerprint:
    metrics = host.metrics()
    return Fingerprint(
        tabpage=metrics.tabpage,
        tabpage_count=metrics.tabpage_count,
        columns=metrics.columns,
        current_buffer=host.current_buffer(),
        modified=any_modified(store, host),
    )


def build_items(
    store: StateStore,
    host: Host,
    config: DartConfig,
    get_icon: Callable[[str], str | None],
) -> tuple[list[Item], int]:
    """Build items for showable records; drop records that no longer qualify.

    Returns the items and the index of the current buffer's item (0 when the
    current buffer is not tracked).
    """
    current = host.current_buffer()
    items: list[Item] = []
    anchor = 0
    for record in list(store.records):
        if not is_showable(host, record.filename):
            store.delete(record.filename)
            continue
        handle = host.buffer_for(record.filename)
        if handle == current:
            anchor = len(items)
        items.append(
            build_item(
                record.copy(),
                handle,
                current=handle == current,
                modified=host.is_modified(handle),
                marklist=config.marklist,
                get_icon=get_icon,
            )
        )
    return items, anchor


def render_tabline(
    store: StateStore,
    host: Host,
    config: DartConfig,
    cache: RenderCache,
    get_icon: Callable[[str], str | None],
) -> str:
    cached = cache.lookup(fingerprint(store, host))
    if cached is not None:
        return cached

    metrics = host.metrics()
    tabpage = tabpage_segment(metrics)
    available_width = metrics.columns - statusline_width(tabpage)
    if available_width <= 0:
        line = FILL + tabpage
    else:
        items, anchor = build_items(store, host, config, get_icon)
        disambiguate(items)
        truncate_contents(items, config.tabline.max_item_len)
        engine = LayoutEngine(config.tabline.format_item)
        line = engine.render(items, anchor, available_width) + FILL + tabpage

    cache.store(fingerprint(store, host), line)
    return line


__all__ = [
    "Fingerprint",
    "HighlightClass",
    "Item",
    "LayoutEngine",
    "RenderCache",
    "any_modified",
    "build_items",
    "render_tabline",
    "tabpage_segment",
]

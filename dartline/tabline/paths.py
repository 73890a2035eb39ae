"""Make duplicate item names distinct by prefixing parent directories."""

from __future__ import annotations

import os
from collections import Counter
from collections.abc import Sequence

from .items import Item
from .measure import ELLIPSIS, escape, tail_fit, text_width, unescape


def path_segments(filename: str, sep: str = os.sep) -> list[str]:
    return [segment for segment in filename.split(sep) if segment]


def disambiguate(items: Sequence[Item], sep: str = os.sep) -> Sequence[Item]:
    """Expand colliding ``content`` values until every name is distinct.

    Each pass prefixes one more parent directory onto every item whose
    content collides with another's. Items that already show their full path
    stop growing, so the loop ends after at most the deepest path's segment
    count. Finally ``%`` is escaped for the statusline.
    """
    segments = [path_segments(item.record.filename, sep) for item in items]
    depth = [1] * len(items)
    max_depth = max((len(parts) for parts in segments), default=0)

    for _ in range(max_depth):
        counts = Counter(item.content for item in items)
        changed = False
        for idx, item in enumerate(items):
            if counts[item.content] < 2 or depth[idx] >= len(segments[idx]):
                continue
            depth[idx] += 1
            expanded = sep.join(segments[idx][-depth[idx] :])
            if expanded != item.content:
                item.content = expanded
                changed = True
        if not changed:
            break

    for item in items:
        item.content = escape(item.content)
    return items


def truncate_contents(items: Sequence[Item], max_len: int) -> Sequence[Item]:
    """Cap each (escaped) content at ``max_len`` columns, keeping the tail."""
    for item in items:
        plain = unescape(item.content)
        if text_width(plain) > max_len:
            item.content = ELLIPSIS + escape(tail_fit(plain, max_len - text_width(ELLIPSIS)))
    return items

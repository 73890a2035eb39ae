"""Pack tabline items into one width-bounded line around the current item.

Items are added alternately left and right of the anchor (the current
buffer's item). When the next item on a side does not fit, it is shortened
from the left to ``…tail`` and a ``<``/``>`` indicator is shown on that side.
The anchor is never truncated or dropped, even when it alone overflows.
A side shows its indicator as soon as any of its items is shortened or
dropped, including when the anchor alone fills the width; the indicators
then add up to six columns beyond the available width.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from ..config import ItemFormat
from .items import Item
from .measure import statusline_width, truncate_left

LEFT = -1
RIGHT = 1

INDICATOR_WIDTH = 3
LEFT_INDICATOR = "%#DartVisibleLabel# < "
RIGHT_INDICATOR = "%#DartVisibleLabel# > "
RIGHT_FILL_GROUP = "%#DartVisible#"


@dataclass
class LayoutResult:
    """Packed items plus truncation flags; ``width`` includes reserved indicators."""

    items: list[Item]
    width: int
    truncated_left: bool
    truncated_right: bool


class LayoutEngine:
    def __init__(self, formatter: ItemFormat) -> None:
        self.formatter = formatter

    def item_width(self, item: Item | None) -> int:
        if item is None:
            return 0
        return statusline_width(self.formatter.format(item))

    def fit_content(self, item: Item, target: int) -> str | None:
        """Return ``item.content`` shortened so the formatted item spans ``target``.

        ``None`` means no non-empty truncation fits.
        """
        formatted = self.item_width(item)
        if target >= formatted:
            return item.content
        chrome = formatted - statusline_width(item.content)
        if target - chrome < 2:
            return None
        return truncate_left(item.content, target - chrome)

    def pack(self, items: Sequence[Item], anchor: int, available_width: int) -> LayoutResult:
        items = [replace(item) for item in items]
        result = [items[anchor]]
        width = self.item_width(items[anchor])
        cursor = {LEFT: anchor - 1, RIGHT: anchor + 1}
        truncated = {LEFT: False, RIGHT: False}

        def item_at(index: int) -> Item | None:
            return items[index] if 0 <= index < len(items) else None

        def try_add(side: int) -> bool:
            nonlocal width
            item = item_at(cursor[side])
            if item is None:
                return False

            item_width = self.item_width(item)
            if width + item_width > available_width:
                if not truncated[side]:
                    width += INDICATOR_WIDTH
                truncated[side] = True

                content = self.fit_content(item, available_width - width)
                # The opposite side's pending item would need its own indicator
                # once this item is placed; keep room for it now.
                pending = item_at(cursor[-side])
                if pending is not None:
                    room = available_width - width - item_width
                    if self.fit_content(pending, room) != pending.content:
                        content = self.fit_content(item, available_width - width - INDICATOR_WIDTH)
                if content is None:
                    return False
                item.content = content

            if side == LEFT:
                result.insert(0, item)
            else:
                result.append(item)
            cursor[side] += side
            width += self.item_width(item)
            return True

        while (cursor[LEFT] >= 0 or cursor[RIGHT] < len(items)) and width <= available_width:
            added_left = try_add(LEFT)
            added_right = try_add(RIGHT)
            if not (added_left or added_right):
                break

        return LayoutResult(
            items=result,
            width=width,
            truncated_left=truncated[LEFT],
            truncated_right=truncated[RIGHT],
        )

    def render(self, items: Sequence[Item], anchor: int, available_width: int) -> str:
        """Return the packed, formatted line (without the tab-page segment)."""
        if not items:
            return ""
        packed = self.pack(items, anchor, available_width)
        line = "".join(self.formatter.format(item) for item in packed.items)
        if packed.truncated_left:
            line = LEFT_INDICATOR + line
        if packed.truncated_right:
            fill = " " * max(0, available_width - packed.width)
            line = line + RIGHT_FILL_GROUP + fill + RIGHT_INDICATOR
        return line

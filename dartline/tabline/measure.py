"""Display-width measurement for statusline strings.

Statusline directives (``%#Group#``, ``%3@Func@``, ``%X``, ``%=``) occupy no
columns and ``%%`` renders as a single ``%``. Widths are terminal columns, so
wide glyphs count twice and combining marks not at all.
"""

from __future__ import annotations

import re
import unicodedata

DIRECTIVE_RE = re.compile(r"%%|%#[^#]*#|%\d+@[^@]*@|%X|%=")
ELLIPSIS = "…"


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns, and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def text_width(text: str) -> int:
    """Width of plain text (no directives, no escaping)."""
    return sum(char_display_width(ch) for ch in text)


def visible_text(text: str) -> str:
    """Return what a statusline string displays, without highlights or clicks."""
    return DIRECTIVE_RE.sub(lambda match: "%" if match.group(0) == "%%" else "", text)


def escape(text: str) -> str:
    return text.replace("%", "%%")


def unescape(text: str) -> str:
    return text.replace("%%", "%")


def statusline_width(text: str) -> int:
    """Visible width of a statusline string."""
    return text_width(visible_text(text))


def tail_fit(text: str, max_cols: int) -> str:
    """Return the longest trailing substring of plain ``text`` within ``max_cols``."""
    if max_cols <= 0:
        return ""
    col = 0
    start = len(text)
    while start > 0:
        w = char_display_width(text[start - 1])
        if col + w > max_cols:
            break
        col += w
        start -= 1
    return text[start:]


def truncate_left(content: str, max_cols: int) -> str | None:
    """Shorten escaped ``content`` to ``…`` plus its tail within ``max_cols``.

    Content that already fits is returned unchanged. ``None`` means not even
    the ellipsis and one character fit.
    """
    plain = unescape(content)
    if text_width(plain) <= max_cols:
        return content
    tail = tail_fit(plain, max_cols - text_width(ELLIPSIS))
    if not tail:
        return None
    return ELLIPSIS + escape(tail)

"""Filetype icons for tabline items.

Pygments' filename patterns identify the language; known languages map to
Nerd Font glyphs and everything else gets a generic file glyph.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache

DEFAULT_ICON = "\uf15b"

LANGUAGE_ICONS: dict[str, str] = {
    "Bash": "\ue795",
    "C": "\ue61e",
    "C++": "\ue61d",
    "CSS": "\ue749",
    "Go": "\ue627",
    "HTML": "\ue736",
    "Java": "\ue738",
    "JavaScript": "\ue74e",
    "JSON": "\ue60b",
    "Lua": "\ue620",
    "Markdown": "\ue609",
    "Python": "\ue606",
    "Ruby": "\ue739",
    "Rust": "\ue7a8",
    "TOML": "\ue615",
    "TypeScript": "\ue628",
    "VimL": "\ue62b",
    "YAML": "\ue615",
}


@lru_cache(maxsize=512)
def language_for_filename(filename: str) -> str | None:
    """Return the Pygments lexer name for ``filename``, or ``None``."""
    from pygments.lexers import get_lexer_for_filename
    from pygments.util import ClassNotFound

    try:
        return get_lexer_for_filename(filename).name
    except ClassNotFound:
        return None


def icon_for_filename(filename: str) -> str:
    language = language_for_filename(filename)
    if language is None:
        return DEFAULT_ICON
    return LANGUAGE_ICONS.get(language, DEFAULT_ICON)


def _no_icon(_filename: str) -> None:
    return None


def icon_provider(enabled: bool) -> Callable[[str], str | None]:
    """Return the filename-to-glyph lookup for the tabline."""
    if not enabled:
        return _no_icon
    return icon_for_filename

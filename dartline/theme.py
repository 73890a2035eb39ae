"""Terminal themes for previewing tablines outside the editor.

A theme maps tabline highlight groups to ANSI SGR sequences. Statusline
directives are converted to those sequences (or dropped for plain output).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from .tabline.measure import statusline_width

RESET = "\033[0m"

_STATUSLINE_TOKEN_RE = re.compile(r"%%|%#([^#]*)#|%\d+@[^@]*@|%X|%=")

COLOR_CODES: dict[str, int] = {
    "black": 16,
    "red": 160,
    "green": 70,
    "yellow": 220,
    "orange": 214,
    "blue": 33,
    "magenta": 170,
    "cyan": 44,
    "white": 255,
    "gray": 245,
}


@dataclass(frozen=True)
class TablineTheme:
    """Highlight group to SGR palette."""

    name: str
    groups: dict[str, str] = field(default_factory=dict)
    reset: str = RESET

    def sgr(self, group: str) -> str:
        return self.groups.get(group, "")


def _palette(visible: str, current: str, modified: str, fill: str) -> dict[str, str]:
    groups: dict[str, str] = {}
    for prefix, base in (
        ("DartVisible", visible),
        ("DartCurrent", current),
        ("DartMarked", visible),
        ("DartMarkedCurrent", current),
    ):
        groups[prefix] = base
        groups[f"{prefix}Modified"] = base + modified
        groups[f"{prefix}Label"] = base + "\033[1m"
        groups[f"{prefix}LabelModified"] = base + modified + "\033[1m"
    groups["DartFill"] = fill
    groups["DartPickLabel"] = "\033[1m"
    return groups


DEFAULT_THEME = TablineTheme(
    name="default",
    groups=_palette(
        visible="\033[0;38;5;250;48;5;236m",
        current="\033[0;38;5;255;48;5;24m",
        modified="\033[3m",
        fill="\033[0;48;5;234m",
    ),
)

OCEAN_THEME = TablineTheme(
    name="ocean",
    groups=_palette(
        visible="\033[0;38;5;153;48;5;17m",
        current="\033[0;38;5;231;48;5;31m",
        modified="\033[3m",
        fill="\033[0;48;5;16m",
    ),
)

PLAIN_THEME = TablineTheme(name="plain", reset="")

_THEMES: dict[str, TablineTheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def resolve_theme(name: str | None, *, no_color: bool = False) -> TablineTheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    candidate = str(name or "").strip().lower()
    return _THEMES.get(candidate, DEFAULT_THEME)


def with_label_colors(theme: TablineTheme, label_fg: str, label_marked_fg: str) -> TablineTheme:
    """Override label foregrounds with named colors (unknown names are ignored)."""
    if theme is PLAIN_THEME:
        return theme
    groups = dict(theme.groups)
    for color_name, prefixes in (
        (label_fg, ("DartVisible", "DartCurrent", "DartPick")),
        (label_marked_fg, ("DartMarked", "DartMarkedCurrent")),
    ):
        code = COLOR_CODES.get(color_name.strip().lower())
        if code is None:
            continue
        for prefix in prefixes:
            for group in (f"{prefix}Label", f"{prefix}LabelModified"):
                if group in groups:
                    groups[group] = groups[group] + f"\033[38;5;{code}m"
    return replace(theme, groups=groups)


def statusline_to_ansi(line: str, theme: TablineTheme, columns: int | None = None) -> str:
    """Convert a statusline string to terminal output.

    ``%=`` expands to the padding needed to right-align what follows within
    ``columns`` (ignored when ``columns`` is ``None``).
    """
    padding = ""
    if columns is not None and "%=" in line:
        padding = " " * max(0, columns - statusline_width(line))

    def convert(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "%%":
            return "%"
        if token == "%=":
            return padding
        if match.group(1) is not None:
            return theme.sgr(match.group(1))
        return ""

    out = _STATUSLINE_TOKEN_RE.sub(convert, line)
    if theme.reset and "\033[" in out:
        out += theme.reset
    return out

"""Command-line preview for dartline tablines.

Simulates an editor session over real files, then prints the rendered tabline
(and optionally the jump picker) to the terminal.
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
from pathlib import Path

from .config import CONFIG_PATH, config_from_mapping, load_config
from .host import MemoryHost
from .session import Session
from .theme import available_theme_names, resolve_theme, statusline_to_ansi, with_label_colors

LOGGER = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _tab_pages(value: str) -> tuple[int, int]:
    """argparse type for ``I/N`` tab-page positions."""
    current, sep, total = value.partition("/")
    try:
        position = (int(current), int(total))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected I/N, got {value!r}") from exc
    if not sep or position[1] < 1 or not 1 <= position[0] <= position[1]:
        raise argparse.ArgumentTypeError(f"expected 1 <= I <= N, got {value!r}")
    return position


def _default_render_width() -> int:
    """Resolve default render width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dartline",
        description="Preview the tracked-files tabline for a sequence of opened files.",
    )
    parser.add_argument("files", nargs="*", help="Files to open, in order.")
    parser.add_argument("--current", metavar="FILE", help="File to focus after opening (default: last opened).")
    parser.add_argument("--pin", metavar="FILE", action="append", default=[], help="Pin FILE to the next free mark.")
    parser.add_argument("--load-session", metavar="NAME", help="Replace the state with saved session NAME.")
    parser.add_argument("--save-session", metavar="NAME", help="Save the resulting state as session NAME.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Tabline width (default: terminal width).",
    )
    parser.add_argument("--tabs", type=_tab_pages, default=(1, 1), metavar="I/N", help="Simulated tab pages.")
    parser.add_argument("--theme", default=None, help=f"UI theme name ({', '.join(available_theme_names())}).")
    parser.add_argument("--no-color", action="store_true", help="Print plain text without ANSI colors.")
    parser.add_argument("--pick", action="store_true", help="Also print the jump picker listing.")
    parser.add_argument("--config", metavar="PATH", type=Path, default=None, help=f"Config file (default: {CONFIG_PATH}).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr.")
    return parser


def build_session(args: argparse.Namespace) -> Session:
    config = config_from_mapping(load_config(args.config))
    host = MemoryHost(columns=args.max_cols or _default_render_width())
    host.tabpage, host.tabpage_count = args.tabs
    session = Session(host, config)

    for name in [*args.files, *args.pin]:
        path = Path(name)
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")
        if path.is_dir():
            host.add_directory(str(path))
        handle = host.open(str(path))
        session.file_shown(handle)

    for name in args.pin:
        session.mark(host.open(str(name)))

    if args.current is not None:
        handle = host.buffer_for(os.path.abspath(args.current))
        if handle < 0:
            raise SystemExit(f"--current must be one of the opened files: {args.current}")
        host.set_current_buffer(handle)
    elif args.files:
        host.set_current_buffer(host.buffer_for(os.path.abspath(args.files[-1])))

    if args.load_session is not None and not session.read_session(args.load_session):
        LOGGER.info("session %r not loaded", args.load_session)
    return session


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose or os.environ.get("DARTLINE_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(name)s: %(message)s")

    session = build_session(args)
    config = session.config
    theme = with_label_colors(
        resolve_theme(args.theme, no_color=args.no_color),
        config.tabline.label_fg,
        config.tabline.label_marked_fg,
    )

    line = statusline_to_ansi(session.render(), theme, session.host.metrics().columns)
    sys.stdout.write(line + "\n")
    if args.pick:
        for entry in session.pick_entries():
            sys.stdout.write(entry + "\n")

    if args.save_session is not None:
        if not session.write_session(args.save_session):
            raise SystemExit(f"Could not save session {args.save_session!r}")
        LOGGER.info("saved session to %s", session.session_path(args.save_session))
    return 0

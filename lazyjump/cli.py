"""Command-line front door for lazyjump.

Parses CLI options, loads the source file, and either prints a labeled
snapshot (``--render-labels``) or starts the interactive terminal session.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from dataclasses import replace
from pathlib import Path

from .config import load_jump_settings, load_theme_name
from .highlight import DEFAULT_STYLE, read_text, sanitize_terminal_text
from .host.view import TextView
from .runtime import JumpApp, run_main_loop
from .session.commands import TypeChar
from .targets.types import JumpMode, Position
from .ui_theme import available_theme_names, resolve_theme

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _jump_mode(value: str) -> JumpMode:
    try:
        return JumpMode.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _configure_logging(log_file: str | None) -> None:
    """Log to ``log_file`` only; the terminal belongs to the UI."""
    if log_file is None:
        return
    logging.basicConfig(filename=log_file, level=logging.DEBUG, format=LOG_FORMAT)


def render_labels(
    path: Path,
    pattern: str,
    mode: JumpMode,
    line: int,
    *,
    max_cols: int,
    height: int,
    theme_name: str | None = None,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> str:
    """Type ``pattern`` into a fresh session and return the labeled viewport.

    Auto-jump is disabled and the minimum pattern length pinned to the whole
    pattern so every character extends the search before labels go live.
    """
    view = TextView(
        sanitize_terminal_text(read_text(path)),
        view_id=str(path),
        height=height,
        supports_tokens=True,
    )
    view.move_cursor(Position(max(0, line - 1), 0), True)

    def settings_for_mode(jump_mode: JumpMode):
        settings = load_jump_settings(jump_mode)
        return replace(
            settings,
            auto_jump_single_match=False,
            min_pattern_length=max(1, len(pattern)),
        )

    app = JumpApp(
        view,
        path,
        theme=resolve_theme(theme_name, no_color=no_color),
        style=style,
        no_color=no_color,
        settings_for_mode=settings_for_mode,
    )
    app.manager.start_jump(mode)
    for char in pattern:
        app.manager.dispatch(TypeChar(char))
        app.answer_token_requests()

    rows = app.frame(max_cols, height + 1)
    return "".join(f"{row}\n" for row in rows)


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch lazyjump on a file.

    ``default_path`` is primarily for tests and is used when no positional
    path is given.
    """
    parser = argparse.ArgumentParser(description="Jump to any visible spot in a file with short key labels.")
    parser.add_argument("path", nargs="?", default=None, help="File to open.")
    parser.add_argument(
        "--mode",
        type=_jump_mode,
        default=JumpMode.LITERAL.value,
        help="Jump mode for --render-labels (literal, hybrid, semantic).",
    )
    parser.add_argument("--line", type=_positive_int, default=1, help="Start with the cursor on this line.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for idle highlighting.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", default=None, help="Write debug logs to this file.")
    parser.add_argument("--render-labels", metavar="PATTERN", help="Print the labeled viewport for PATTERN and exit.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --render-labels output (default: terminal width).",
    )
    parser.add_argument(
        "--height",
        type=_positive_int,
        default=None,
        help="Viewport rows for --render-labels output (default: terminal height).",
    )
    args = parser.parse_args()
    _configure_logging(args.log_file)

    if args.path is None and default_path is None:
        raise SystemExit("A file path is required.")
    path = Path(args.path) if args.path is not None else Path(default_path)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")

    theme_name = args.theme if args.theme is not None else load_theme_name()
    term = shutil.get_terminal_size((80, 24))

    if args.render_labels is not None:
        if not args.render_labels:
            raise SystemExit("--render-labels needs a non-empty pattern.")
        sys.stdout.write(
            render_labels(
                path,
                args.render_labels,
                args.mode,
                args.line,
                max_cols=args.max_cols if args.max_cols is not None else max(1, term.columns),
                height=args.height if args.height is not None else max(1, term.lines - 1),
                theme_name=theme_name,
                style=args.style,
                no_color=args.no_color,
            )
        )
        return

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("Interactive mode needs a terminal; use --render-labels PATTERN instead.")

    view = TextView(
        sanitize_terminal_text(read_text(path)),
        view_id=str(path),
        height=max(1, term.lines - 1),
        supports_tokens=True,
    )
    view.move_cursor(Position(args.line - 1, 0), True)
    app = JumpApp(
        view,
        path,
        theme=resolve_theme(theme_name, no_color=args.no_color),
        style=args.style,
        no_color=args.no_color,
    )
    run_main_loop(app, sys.stdin.fileno(), sys.stdout.fileno())


if __name__ == "__main__":
    main()

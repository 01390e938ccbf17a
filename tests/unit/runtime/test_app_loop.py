"""Tests for the terminal host: idle keys, token answering, and the event loop."""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import mock

from lazyjump.config import default_settings
from lazyjump.host.view import TextView
from lazyjump.runtime.loop import IDLE_HINT, JumpApp, run_main_loop
from lazyjump.session.state import JumpPhase
from lazyjump.targets.types import Position
from lazyjump.terminal import ENTER_SEQUENCE, EXIT_SEQUENCE
from lazyjump.ui_theme import DEFAULT_THEME, PLAIN_THEME

SOURCE = "def greet(name):\n    return name\n"


def _make_app() -> JumpApp:
    view = TextView(SOURCE, view_id="example.py", height=10, supports_tokens=True)
    return JumpApp(view, Path("example.py"), no_color=True, settings_for_mode=default_settings)


def _press(app: JumpApp, *keys: str) -> None:
    for key in keys:
        app.handle_key(key)


class JumpAppTests(unittest.TestCase):
    def test_idle_keys_move_cursor_and_quit(self) -> None:
        app = _make_app()

        _press(app, "j")
        self.assertEqual(app.view.cursor, Position(1, 0))
        _press(app, "k", "UP")
        self.assertEqual(app.view.cursor, Position(0, 0))
        _press(app, "q")
        self.assertFalse(app.running)

    def test_literal_jump_through_keys(self) -> None:
        app = _make_app()

        _press(app, "/", "n", "a")
        session = app.manager.session_for("example.py")
        self.assertIs(session.phase, JumpPhase.TARGET_SELECTION)
        self.assertEqual(app.status_text(), 'Jump: "na" → 2 matches - Press jump character')

        _press(app, "j")

        self.assertEqual(app.view.cursor, Position(1, 11))
        self.assertFalse(app.key_capture.installed)

    def test_semantic_jump_answers_token_requests(self) -> None:
        app = _make_app()

        _press(app, "t", "n")
        session = app.manager.session_for("example.py")
        self.assertIs(session.phase, JumpPhase.TARGET_SELECTION)
        self.assertEqual([item.candidate.kind for item in session.labeled], ["variable", "variable"])
        self.assertEqual(app.view.token_requests, [])

        _press(app, "j")

        self.assertEqual(app.view.cursor, Position(1, 11))

    def test_token_source_failure_cancels_with_notice(self) -> None:
        app = _make_app()

        with mock.patch("lazyjump.runtime.loop.encode_source_tokens", side_effect=RuntimeError("lexer broke")):
            _press(app, "t", "n")

        self.assertIsNone(app.manager.session_for("example.py"))
        self.assertEqual(app.view.notices, ["semantic tokens unavailable: lexer broke"])
        self.assertEqual(app.status_text(), "semantic tokens unavailable: lexer broke")

    def test_focus_out_cancels_live_session(self) -> None:
        app = _make_app()
        _press(app, "/", "n")

        _press(app, "FOCUS_OUT")

        self.assertIsNone(app.manager.current)
        self.assertFalse(app.key_capture.installed)

    def test_idle_status_shows_position_and_hint(self) -> None:
        app = _make_app()

        self.assertEqual(app.status_text(), f"example.py 1/2 | {IDLE_HINT}")

    def test_no_color_renders_with_plain_theme(self) -> None:
        view = TextView(SOURCE, view_id="example.py", height=10)

        app = JumpApp(view, Path("example.py"), theme=DEFAULT_THEME, no_color=True, settings_for_mode=default_settings)

        self.assertIs(app.theme, PLAIN_THEME)
        self.assertNotIn("\x1b", "".join(app.frame(40, 4)))

    def test_frame_fills_requested_height(self) -> None:
        app = _make_app()

        rows = app.frame(40, 4)

        self.assertEqual(rows[:2], ["1 def greet(name):", "2     return name"])
        self.assertEqual(len(rows), 4)


class RunMainLoopTests(unittest.TestCase):
    def test_loop_brackets_raw_mode_and_stops_on_quit(self) -> None:
        app = _make_app()
        writes: list[bytes] = []
        keys = iter(["", "j", "q"])

        with mock.patch("lazyjump.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "lazyjump.terminal.tty.setraw"
        ), mock.patch("lazyjump.terminal.termios.tcsetattr") as tcsetattr, mock.patch(
            "lazyjump.terminal.os.write",
            side_effect=lambda _fd, data: writes.append(data) or len(data),
        ), mock.patch(
            "lazyjump.runtime.loop.shutil.get_terminal_size",
            return_value=mock.Mock(columns=60, lines=6),
        ), mock.patch(
            "lazyjump.runtime.loop.read_key",
            side_effect=lambda *_args, **_kwargs: next(keys),
        ):
            run_main_loop(app, stdin_fd=0, stdout_fd=1)

        self.assertEqual(writes[0], ENTER_SEQUENCE)
        self.assertEqual(writes[-1], EXIT_SEQUENCE)
        self.assertEqual(len(writes), 5)
        tcsetattr.assert_called_once()
        self.assertEqual(app.view.cursor, Position(1, 0))

    def test_loop_restores_terminal_when_handler_raises(self) -> None:
        app = _make_app()
        writes: list[bytes] = []

        with mock.patch("lazyjump.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "lazyjump.terminal.tty.setraw"
        ), mock.patch("lazyjump.terminal.termios.tcsetattr"), mock.patch(
            "lazyjump.terminal.os.write",
            side_effect=lambda _fd, data: writes.append(data) or len(data),
        ), mock.patch(
            "lazyjump.runtime.loop.shutil.get_terminal_size",
            return_value=mock.Mock(columns=60, lines=6),
        ), mock.patch(
            "lazyjump.runtime.loop.read_key",
            return_value="/",
        ), mock.patch.object(app.manager, "start_jump", side_effect=RuntimeError("boom")):
            with self.assertRaises(RuntimeError):
                run_main_loop(app, stdin_fd=0, stdout_fd=1)

        self.assertEqual(writes[-1], EXIT_SEQUENCE)


if __name__ == "__main__":
    unittest.main()

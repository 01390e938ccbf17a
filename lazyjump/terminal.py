"""Terminal control helpers for the interactive jump session.

Owns raw-mode lifecycle, alternate-screen switching, and focus reporting.
Focus-out reports let the runtime cancel a live jump when the window loses
focus.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

ENTER_SEQUENCE = b"\x1b[?1049h\x1b[?25l\x1b[?1004h"
EXIT_SEQUENCE = b"\x1b[?1004l\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Manage terminal mode transitions and frame output."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with focus reporting enabled."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_SEQUENCE)

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state."""
        os.write(self.stdout_fd, EXIT_SEQUENCE)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def write_frame(self, rows: list[str]) -> None:
        """Repaint the screen from the top-left with ``rows``."""
        payload = "\x1b[H" + "".join(f"{row}\x1b[K\r\n" for row in rows[:-1])
        if rows:
            payload += f"{rows[-1]}\x1b[K"
        payload += "\x1b[J"
        os.write(self.stdout_fd, payload.encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

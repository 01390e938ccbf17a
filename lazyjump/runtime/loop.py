"""Interactive terminal host for the jump engine.

``JumpApp`` wires one ``TextView`` to a session manager, answers semantic
token requests from a Pygments token source, and maps idle keys to cursor
motion and jump commands. ``run_main_loop`` is the thin raw-mode event loop
around it.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from pathlib import Path

from ..config import JumpSettings, load_jump_settings
from ..highlight import DEFAULT_STYLE, highlight_lines
from ..host.key_capture import KeyCaptureRegistry
from ..host.view import TextView
from ..input import read_key
from ..render.viewport import render_view_rows
from ..session.manager import JumpSessionManager
from ..targets.pygments_tokens import encode_source_tokens
from ..targets.semantic import TokenLegend, TokenResponse
from ..targets.types import JumpMode
from ..terminal import TerminalController
from ..ui_theme import DEFAULT_THEME, PLAIN_THEME, JumpTheme

logger = logging.getLogger(__name__)

KEY_POLL_MS = 250
IDLE_HINT = "/ jump | s hybrid | t semantic | j/k move | q quit"


class JumpApp:
    """One file, one view, one session manager."""

    def __init__(
        self,
        view: TextView,
        path: Path,
        *,
        theme: JumpTheme = DEFAULT_THEME,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
        settings_for_mode: Callable[[JumpMode], JumpSettings] = load_jump_settings,
    ) -> None:
        self.view = view
        self.path = path
        self.theme = PLAIN_THEME if no_color else theme
        self.style = style
        self.no_color = no_color
        self.running = True
        self.key_capture = KeyCaptureRegistry()
        self.manager = JumpSessionManager(self.key_capture, settings_for_mode)
        self.view.on_selection_changed = self.manager.on_selection_changed
        self.manager.on_active_view_changed(view.hooks())
        self._highlighted: list[str] | None = None
        self._encoded: tuple[tuple[int, ...], TokenLegend] | None = None
        self._notices_seen = 0
        self.idle_keys: dict[str, Callable[[], object]] = {
            "/": lambda: self.manager.start_jump(JumpMode.LITERAL),
            "s": lambda: self.manager.start_jump(JumpMode.HYBRID),
            "t": lambda: self.manager.start_jump(JumpMode.SEMANTIC),
            "j": lambda: self.view.move_lines(1),
            "DOWN": lambda: self.view.move_lines(1),
            "k": lambda: self.view.move_lines(-1),
            "UP": lambda: self.view.move_lines(-1),
            "q": self.quit,
            "CTRL_C": self.quit,
        }

    def quit(self) -> None:
        self.manager.cancel_all()
        self.running = False

    def handle_key(self, key: str) -> None:
        """Route one key token: focus reports, the live session, or idle bindings."""
        if not key or key == "FOCUS_IN":
            return
        self._notices_seen = len(self.view.notices)
        if key == "FOCUS_OUT":
            self.manager.on_focus_lost()
            return
        self.key_capture.dispatch(key, default=self._handle_idle_key)
        self.answer_token_requests()

    def _handle_idle_key(self, key: str) -> bool:
        action = self.idle_keys.get(key)
        if action is None:
            return False
        action()
        return True

    def _encode_tokens(self) -> tuple[tuple[int, ...], TokenLegend]:
        if self._encoded is None:
            data, legend = encode_source_tokens("\n".join(self.view.lines), self.path)
            self._encoded = (tuple(data), legend)
        return self._encoded

    def answer_token_requests(self) -> None:
        """Reply to queued token requests after the keystroke that issued them."""
        while self.view.token_requests:
            request = self.view.token_requests.pop(0)
            try:
                data, legend = self._encode_tokens()
            except Exception as exc:
                logger.exception("token source failed for %s", self.path)
                response = TokenResponse(view_id=request.view_id, version=request.version, error=str(exc))
            else:
                response = TokenResponse(
                    view_id=request.view_id,
                    version=request.version,
                    data=data,
                    legend=legend,
                )
            self.manager.receive_tokens(response)

    def status_text(self) -> str:
        if self.view.status:
            return self.view.status
        if len(self.view.notices) > self._notices_seen:
            return self.view.notices[-1]
        return f"{self.path.name} {self.view.cursor.line + 1}/{len(self.view.lines)} | {IDLE_HINT}"

    def frame(self, width: int, height: int) -> list[str]:
        self.view.height = max(1, height - 1)
        if self._highlighted is None and not self.no_color:
            self._highlighted = highlight_lines(self.view.lines, self.path, self.style)
        return render_view_rows(
            self.view,
            self.theme,
            width,
            height,
            highlighted=self._highlighted,
            status=self.status_text(),
        )


def run_main_loop(app: JumpApp, stdin_fd: int, stdout_fd: int) -> None:
    """Paint, read one key, dispatch; until the app stops running."""
    terminal = TerminalController(stdin_fd, stdout_fd)
    with terminal.raw_mode():
        try:
            while app.running:
                size = shutil.get_terminal_size((80, 24))
                terminal.write_frame(app.frame(size.columns, size.lines))
                key = read_key(stdin_fd, timeout_ms=KEY_POLL_MS)
                if key:
                    app.handle_key(key)
        finally:
            app.manager.cancel_all()

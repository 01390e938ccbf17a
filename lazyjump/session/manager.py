"""Host-facing entry points and session lifecycle.

At most one session exists per view, looked up by view id, and starting a
session tears down every other one first. Each session acquires the global
key capture and its overlay handles into an ``ExitStack`` that is closed on
every terminal path: jump, cancel, or error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..config import JumpSettings, load_jump_settings
from ..host.key_capture import KeyCaptureRegistry
from ..host.view import ViewHooks
from ..render.overlay import JumpOverlay
from ..targets.semantic import TokenResponse
from ..targets.types import JumpMode, Position
from .commands import (
    Backspace,
    Cancel,
    Enter,
    JumpCommand,
    NextMatch,
    PreviousMatch,
    StartJump,
    TypeChar,
    command_for_key,
)
from .controller import MODE_TITLES, ControllerDeps, JumpController, TargetDiscoveryError
from .state import JumpInstruction, JumpPhase, SearchSession

logger = logging.getLogger(__name__)


@dataclass
class ActiveSession:
    view: ViewHooks
    session: SearchSession
    controller: JumpController
    overlay: JumpOverlay


class JumpSessionManager:
    """Owns live sessions and routes host events into them."""

    def __init__(
        self,
        key_capture: KeyCaptureRegistry,
        settings_for_mode: Callable[[JumpMode], JumpSettings] = load_jump_settings,
    ) -> None:
        self.key_capture = key_capture
        self.settings_for_mode = settings_for_mode
        self.active_view: ViewHooks | None = None
        self._sessions: dict[str, ActiveSession] = {}
        self._applying_jump = False

    # Queries ------------------------------------------------------------

    def session_for(self, view_id: str) -> SearchSession | None:
        active = self._sessions.get(view_id)
        return None if active is None else active.session

    @property
    def current(self) -> ActiveSession | None:
        if self.active_view is None:
            return None
        return self._sessions.get(self.active_view.view_id)

    # Lifecycle ----------------------------------------------------------

    def start_jump(self, mode: JumpMode = JumpMode.LITERAL) -> bool:
        """Begin a session on the active view; returns whether one started."""
        view = self.active_view
        if view is None:
            logger.info("start_jump ignored: no active view")
            return False
        self.cancel_all()
        if mode is JumpMode.SEMANTIC and view.request_tokens is None:
            view.show_status(f"{MODE_TITLES[mode]}: no semantic tokens for this view")
            return False

        session = SearchSession(view_id=view.view_id, mode=mode, settings=self.settings_for_mode(mode))
        with session.resources as resources:
            capture = self.key_capture.install(lambda key: self.handle_key(key, view.view_id), view.view_id)
            resources.callback(capture.release)
            overlay = JumpOverlay(view.overlay)
            resources.callback(overlay.dispose)
            controller = JumpController(
                session,
                ControllerDeps(
                    visible_ranges=view.visible_ranges,
                    line_text=view.line_text,
                    cursor=view.cursor,
                    render=lambda s: self._render(overlay, s),
                    show_status=view.show_status,
                    request_tokens=view.request_tokens,
                ),
            )
            controller.start()
            self._sessions[view.view_id] = ActiveSession(view, session, controller, overlay)
            # Resources stay owned by the session until a terminal transition.
            session.resources = resources.pop_all()
        logger.info("started %s jump on %s", mode.value, view.view_id)
        return True

    def _finish(self, view_id: str, phase: JumpPhase) -> ActiveSession | None:
        active = self._sessions.pop(view_id, None)
        if active is None:
            return None
        session = active.session
        if not session.phase.terminal:
            session.phase = phase
        try:
            session.resources.close()
        finally:
            active.view.show_status("")
            logger.debug("session on %s ended: %s", view_id, session.phase.value)
        return active

    def cancel(self, view_id: str | None = None) -> None:
        """Cancel the session on ``view_id`` (default: active view); no-op if none."""
        if view_id is None:
            if self.active_view is None:
                return
            view_id = self.active_view.view_id
        self._finish(view_id, JumpPhase.CANCELLED)

    def cancel_all(self) -> None:
        for view_id in list(self._sessions):
            self._finish(view_id, JumpPhase.CANCELLED)

    def _render(self, overlay: JumpOverlay, session: SearchSession) -> None:
        labels_live = session.phase in (JumpPhase.TARGET_SELECTION, JumpPhase.AWAITING_SECOND_CHAR)
        overlay.show(
            session.labeled,
            current_index=session.match_index,
            show_labels=labels_live,
            refinement_char=session.first_char if session.phase is JumpPhase.AWAITING_SECOND_CHAR else "",
        )

    def _apply_jump(self, active: ActiveSession, instruction: JumpInstruction) -> None:
        self._finish(instruction.view_id, JumpPhase.JUMPED)
        self._applying_jump = True
        try:
            active.view.move_cursor(instruction.position, instruction.reveal_center)
        finally:
            self._applying_jump = False

    def _run(self, view_id: str | None, action: Callable[[JumpController], JumpInstruction | bool | None]) -> bool:
        """Run ``action`` on a live session, tearing it down on any terminal outcome."""
        if view_id is None:
            view_id = self.active_view.view_id if self.active_view is not None else None
        active = self._sessions.get(view_id) if view_id is not None else None
        if active is None:
            return False
        try:
            outcome = action(active.controller)
        except TargetDiscoveryError as exc:
            active.view.notify(str(exc))
            self._finish(view_id, JumpPhase.CANCELLED)
            return True
        except BaseException:
            self._finish(view_id, JumpPhase.CANCELLED)
            raise
        if isinstance(outcome, JumpInstruction):
            self._apply_jump(active, outcome)
        elif outcome is False or active.session.phase.terminal:
            self._finish(view_id, JumpPhase.CANCELLED)
        return True

    # Entry points -------------------------------------------------------

    def type_char(self, char: str, view_id: str | None = None) -> bool:
        return self._run(view_id, lambda controller: controller.type_char(char))

    def backspace(self, view_id: str | None = None) -> bool:
        return self._run(view_id, lambda controller: controller.backspace())

    def enter(self, view_id: str | None = None) -> bool:
        return self._run(view_id, lambda controller: controller.enter())

    def next_match(self, view_id: str | None = None) -> bool:
        return self._run(view_id, lambda controller: controller.next_match())

    def previous_match(self, view_id: str | None = None) -> bool:
        return self._run(view_id, lambda controller: controller.previous_match())

    def receive_tokens(self, response: TokenResponse) -> bool:
        if response.view_id not in self._sessions:
            logger.debug("dropping token response v%d: no session on %s", response.version, response.view_id)
            return False
        return self._run(response.view_id, lambda controller: controller.receive_tokens(response))

    def dispatch(self, command: JumpCommand, view_id: str | None = None) -> bool:
        """Apply one tagged command; returns whether it reached a session."""
        if isinstance(command, StartJump):
            return self.start_jump(command.mode)
        if isinstance(command, Cancel):
            had_session = self.current is not None if view_id is None else view_id in self._sessions
            self.cancel(view_id)
            return had_session
        if isinstance(command, TypeChar):
            return self.type_char(command.char, view_id)
        if isinstance(command, Backspace):
            return self.backspace(view_id)
        if isinstance(command, Enter):
            return self.enter(view_id)
        if isinstance(command, NextMatch):
            return self.next_match(view_id)
        if isinstance(command, PreviousMatch):
            return self.previous_match(view_id)
        raise TypeError(f"unsupported command: {command!r}")

    def handle_key(self, key: str, view_id: str) -> bool:
        """Key-capture handler: every key is consumed while a session is live."""
        command = command_for_key(key)
        if command is not None:
            self.dispatch(command, view_id)
        return True

    # Cancellation triggers ----------------------------------------------

    def on_selection_changed(self, view_id: str, position: Position | None = None) -> None:
        if self._applying_jump:
            return
        if view_id in self._sessions:
            logger.debug("selection moved on %s; cancelling jump", view_id)
            self.cancel(view_id)

    def on_active_view_changed(self, view: ViewHooks | None) -> None:
        previous = self.active_view
        self.active_view = view
        if previous is not None and (view is None or view.view_id != previous.view_id):
            self.cancel(previous.view_id)

    def on_focus_lost(self) -> None:
        self.cancel_all()

"""The single global keystroke intercept.

While a jump session is live every keystroke goes to its handler instead of
normal typing. A leaked intercept would swallow all later input, so an
installation is a scoped resource: ``install`` hands back a ``KeyCapture``
whose ``release`` is idempotent and which also works as a context manager.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

KeyHandler = Callable[[str], bool]


class KeyCapture:
    """Handle for one installation of the intercept."""

    def __init__(self, registry: KeyCaptureRegistry, owner: str) -> None:
        self._registry = registry
        self.owner = owner
        self.released = False

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        self._registry._release(self)

    def __enter__(self) -> KeyCapture:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class KeyCaptureRegistry:
    """Owns at most one installed key handler."""

    def __init__(self) -> None:
        self._handler: KeyHandler | None = None
        self._capture: KeyCapture | None = None

    @property
    def installed(self) -> bool:
        return self._capture is not None

    @property
    def owner(self) -> str | None:
        return None if self._capture is None else self._capture.owner

    def install(self, handler: KeyHandler, owner: str) -> KeyCapture:
        """Route keystrokes to ``handler`` until the returned capture is released.

        Raises ``RuntimeError`` when another capture is still installed.
        """
        if self._capture is not None:
            raise RuntimeError(f"key capture already installed by {self._capture.owner!r}")
        capture = KeyCapture(self, owner)
        self._handler = handler
        self._capture = capture
        logger.debug("key capture installed for %s", owner)
        return capture

    def _release(self, capture: KeyCapture) -> None:
        if self._capture is not capture:
            return
        self._handler = None
        self._capture = None
        logger.debug("key capture released for %s", capture.owner)

    def dispatch(self, key: str, default: Callable[[str], bool] | None = None) -> bool:
        """Send ``key`` to the installed handler, else fall through to ``default``."""
        if self._handler is not None:
            return self._handler(key)
        if default is not None:
            return default(key)
        return False

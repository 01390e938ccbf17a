"""Host-side collaborators: views and the global key intercept."""

from .key_capture import KeyCapture, KeyCaptureRegistry
from .view import TextView, ViewHooks

__all__ = ["KeyCapture", "KeyCaptureRegistry", "TextView", "ViewHooks"]

"""Jump sessions: commands, the input state machine, and lifecycle."""

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
    parse_command,
)
from .controller import ControllerDeps, JumpController, TargetDiscoveryError
from .manager import JumpSessionManager
from .state import JumpInstruction, JumpPhase, SearchSession

__all__ = [
    "Backspace",
    "Cancel",
    "ControllerDeps",
    "Enter",
    "JumpCommand",
    "JumpController",
    "JumpInstruction",
    "JumpPhase",
    "JumpSessionManager",
    "NextMatch",
    "PreviousMatch",
    "SearchSession",
    "StartJump",
    "TargetDiscoveryError",
    "TypeChar",
    "command_for_key",
    "parse_command",
]

"""Tagged command variants accepted by the session manager.

Command payloads from outside (keybinding args, scripted input) are parsed
once at the boundary; anything malformed raises ``ValueError`` there instead
of travelling into the state machine.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

from ..targets.types import JumpMode


@dataclass(frozen=True)
class StartJump:
    mode: JumpMode = JumpMode.LITERAL


@dataclass(frozen=True)
class TypeChar:
    char: str

    def __post_init__(self) -> None:
        if not isinstance(self.char, str) or len(self.char) != 1:
            raise ValueError(f"TypeChar needs exactly one character, got {self.char!r}")


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class Enter:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class NextMatch:
    pass


@dataclass(frozen=True)
class PreviousMatch:
    pass


JumpCommand = Union[StartJump, TypeChar, Backspace, Enter, Cancel, NextMatch, PreviousMatch]

_NO_ARG_COMMANDS = {
    "backspace": Backspace,
    "enter": Enter,
    "cancel": Cancel,
    "next_match": NextMatch,
    "previous_match": PreviousMatch,
}


def parse_command(payload: Mapping[str, object]) -> JumpCommand:
    """Build a command from ``{"command": name, ...}``.

    ``start_jump`` takes an optional ``mode`` (default literal); ``type``
    requires a one-character ``char``. Unknown names, unknown modes, wrong
    field types, and unexpected extra fields all raise ``ValueError``.
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"command payload must be a mapping, got {type(payload).__name__}")
    name = payload.get("command")
    if not isinstance(name, str):
        raise ValueError("command payload is missing a string 'command' field")
    extra = set(payload) - {"command"}

    if name == "start_jump":
        if extra - {"mode"}:
            raise ValueError(f"unexpected fields for start_jump: {sorted(extra - {'mode'})}")
        mode = payload.get("mode", JumpMode.LITERAL.value)
        if not isinstance(mode, str):
            raise ValueError("start_jump 'mode' must be a string")
        return StartJump(mode=JumpMode.parse(mode))

    if name == "type":
        if extra != {"char"}:
            raise ValueError("type command takes exactly one 'char' field")
        char = payload["char"]
        if not isinstance(char, str):
            raise ValueError("type 'char' must be a string")
        return TypeChar(char=char)

    factory = _NO_ARG_COMMANDS.get(name)
    if factory is None:
        raise ValueError(f"unknown command: {name!r}")
    if extra:
        raise ValueError(f"{name} takes no arguments, got {sorted(extra)}")
    return factory()


# Terminal key tokens handled while a session holds the key capture.
SESSION_KEY_COMMANDS: dict[str, JumpCommand] = {
    "ESC": Cancel(),
    "BACKSPACE": Backspace(),
    "ENTER_CR": Enter(),
    "ENTER_LF": Enter(),
    "TAB": NextMatch(),
    "CTRL_N": NextMatch(),
    "DOWN": NextMatch(),
    "CTRL_P": PreviousMatch(),
    "UP": PreviousMatch(),
}


def command_for_key(key: str) -> JumpCommand | None:
    """Translate a key token into a session command; ``None`` for unbound keys."""
    command = SESSION_KEY_COMMANDS.get(key)
    if command is not None:
        return command
    if len(key) == 1 and key.isprintable():
        return TypeChar(key)
    return None

from __future__ import annotations

import unittest

from lazyjump.session.commands import (
    Backspace,
    Cancel,
    Enter,
    NextMatch,
    PreviousMatch,
    StartJump,
    TypeChar,
    command_for_key,
    parse_command,
)
from lazyjump.targets.types import JumpMode


class ParseCommandTests(unittest.TestCase):
    def test_start_jump_defaults_to_literal(self) -> None:
        self.assertEqual(parse_command({"command": "start_jump"}), StartJump(JumpMode.LITERAL))
        self.assertEqual(parse_command({"command": "start_jump", "mode": "Hybrid"}), StartJump(JumpMode.HYBRID))

    def test_type_requires_exactly_one_character(self) -> None:
        self.assertEqual(parse_command({"command": "type", "char": "x"}), TypeChar("x"))
        for payload in (
            {"command": "type"},
            {"command": "type", "char": "xy"},
            {"command": "type", "char": ""},
            {"command": "type", "char": 3},
            {"command": "type", "char": "x", "extra": 1},
        ):
            with self.subTest(payload=payload), self.assertRaises(ValueError):
                parse_command(payload)

    def test_argument_free_commands(self) -> None:
        self.assertEqual(parse_command({"command": "backspace"}), Backspace())
        self.assertEqual(parse_command({"command": "enter"}), Enter())
        self.assertEqual(parse_command({"command": "cancel"}), Cancel())
        self.assertEqual(parse_command({"command": "next_match"}), NextMatch())
        self.assertEqual(parse_command({"command": "previous_match"}), PreviousMatch())

    def test_malformed_payloads_are_rejected(self) -> None:
        for payload in (
            {},
            {"command": 1},
            {"command": "teleport"},
            {"command": "enter", "now": True},
            {"command": "start_jump", "mode": "fuzzy"},
            {"command": "start_jump", "mode": 2},
            ["start_jump"],
        ):
            with self.subTest(payload=payload), self.assertRaises(ValueError):
                parse_command(payload)


class CommandForKeyTests(unittest.TestCase):
    def test_bound_keys_map_to_navigation_commands(self) -> None:
        self.assertEqual(command_for_key("ESC"), Cancel())
        self.assertEqual(command_for_key("BACKSPACE"), Backspace())
        self.assertEqual(command_for_key("ENTER_CR"), Enter())
        self.assertEqual(command_for_key("TAB"), NextMatch())
        self.assertEqual(command_for_key("CTRL_P"), PreviousMatch())

    def test_printable_characters_become_type_commands(self) -> None:
        self.assertEqual(command_for_key("a"), TypeChar("a"))
        self.assertEqual(command_for_key(" "), TypeChar(" "))

    def test_unbound_keys_are_ignored(self) -> None:
        self.assertIsNone(command_for_key("LEFT"))
        self.assertIsNone(command_for_key("\x01"))


if __name__ == "__main__":
    unittest.main()

"""End-to-end jump sessions driven through the key capture.

Each test wires a ``TextView`` to a session manager the way the terminal
host does and feeds key tokens, then checks cursor placement, overlays, and
that every session resource is released afterwards.
"""

from __future__ import annotations

import unittest
from dataclasses import replace

from lazyjump.config import DensityThresholds, default_settings
from lazyjump.host.key_capture import KeyCaptureRegistry
from lazyjump.host.view import TextView
from lazyjump.render.overlay import StyleCategory
from lazyjump.session.manager import JumpSessionManager
from lazyjump.session.state import JumpPhase
from lazyjump.targets.semantic import TokenLegend, TokenResponse
from lazyjump.targets.types import JumpMode, Position

SEMANTIC_DATA = (0, 4, 3, 0, 1, 0, 4, 3, 1, 0, 1, 11, 3, 1, 0)


class _Harness:
    def __init__(self, text: str, *, supports_tokens: bool = False, **overrides) -> None:
        self.view = TextView(text, view_id="buffer", supports_tokens=supports_tokens)
        self.registry = KeyCaptureRegistry()
        self.manager = JumpSessionManager(
            self.registry,
            settings_for_mode=lambda mode: replace(default_settings(mode), **overrides),
        )
        self.view.on_selection_changed = self.manager.on_selection_changed
        self.manager.on_active_view_changed(self.view.hooks())

    def keys(self, *keys: str) -> None:
        for key in keys:
            self.registry.dispatch(key)

    def type(self, text: str) -> None:
        self.keys(*text)

    @property
    def session(self):
        return self.manager.session_for("buffer")

    def labels(self) -> list[str]:
        return [fragment.text for fragment in self.view.fragments(StyleCategory.LABEL)]

    def released(self) -> bool:
        return (
            not self.registry.installed
            and self.view.style_count == 0
            and self.view.fragments() == []
            and self.session is None
        )


class LiteralScenarioTests(unittest.TestCase):
    def test_single_match_jumps_without_label(self) -> None:
        harness = _Harness("alpha foo beta\n")
        harness.manager.start_jump()

        harness.type("fo")

        self.assertEqual(harness.view.cursor, Position(0, 6))
        self.assertTrue(harness.released())

    def test_single_match_waits_for_minimum_pattern_length(self) -> None:
        harness = _Harness("alpha foo beta\n", min_pattern_length=3)
        harness.manager.start_jump()

        harness.type("fo")
        self.assertIs(harness.session.phase, JumpPhase.PATTERN_BUILDING)
        self.assertEqual(harness.labels(), [])

        harness.type("o")

        self.assertEqual(harness.view.cursor, Position(0, 6))

    def test_dense_view_goes_through_second_character(self) -> None:
        harness = _Harness("foo bar\nfoo baz\nqux foo\n", density=DensityThresholds(low=0, high=0))
        harness.manager.start_jump()

        harness.type("fo")
        self.assertEqual(sorted(harness.labels()), ["fd", "ff", "fj"])

        harness.type("f")
        self.assertIs(harness.session.phase, JumpPhase.AWAITING_SECOND_CHAR)
        self.assertEqual(harness.labels(), ["f", "j", "d"])

        harness.type("j")

        self.assertEqual(harness.view.cursor, Position(1, 0))
        self.assertTrue(harness.released())

    def test_backspace_unwinds_to_cancel(self) -> None:
        harness = _Harness("foo bar\nfoo baz\n")
        harness.manager.start_jump()
        harness.type("fo")

        harness.keys("BACKSPACE", "BACKSPACE", "BACKSPACE")
        self.assertEqual(harness.session.pattern, "")
        harness.keys("BACKSPACE")

        self.assertEqual(harness.view.cursor, Position(0, 0))
        self.assertTrue(harness.released())

    def test_identical_sessions_show_identical_labels(self) -> None:
        text = "".join(f"value_{index} = {index}\n" for index in range(20))
        first = _Harness(text)
        second = _Harness(text)
        for harness in (first, second):
            harness.manager.start_jump()
            harness.type("va")

        self.assertEqual(first.labels(), second.labels())
        self.assertEqual(len(set(first.labels())), 20)


class HybridScenarioTests(unittest.TestCase):
    TEXT = "return result\nretry = 1\nreticulate\n\n"

    def _harness(self) -> _Harness:
        harness = _Harness(self.TEXT)
        harness.view.cursor = Position(3, 0)
        harness.manager.start_jump(JumpMode.HYBRID)
        return harness

    def test_labels_skip_continuation_characters(self) -> None:
        harness = self._harness()

        harness.type("ret")

        self.assertIs(harness.session.phase, JumpPhase.TARGET_SELECTION)
        labeled = {(item.candidate.line, item.label) for item in harness.session.labeled}
        self.assertEqual(labeled, {(2, "f"), (1, "j"), (0, "d")})
        self.assertEqual(harness.session.continuation_chars, frozenset({"u", "r", "i"}))

    def test_continuation_character_extends_pattern(self) -> None:
        harness = self._harness()
        harness.type("ret")

        harness.type("u")

        self.assertEqual(harness.view.cursor, Position(0, 0))
        self.assertTrue(harness.released())

    def test_label_still_selects_in_hybrid_mode(self) -> None:
        harness = self._harness()
        harness.type("ret")

        harness.type("j")

        self.assertEqual(harness.view.cursor, Position(1, 0))

    def test_too_few_safe_labels_keeps_building(self) -> None:
        harness = _Harness("".join(f"abc{ch}\n" for ch in "fjdkslaghr"))
        harness.manager.start_jump(JumpMode.HYBRID)

        harness.type("abc")

        self.assertIs(harness.session.phase, JumpPhase.PATTERN_BUILDING)
        self.assertEqual(harness.session.candidate_count, 10)
        self.assertEqual(harness.labels(), [])


class SemanticScenarioTests(unittest.TestCase):
    TEXT = "def foo(bar):\n    return bar\n"

    def _response(self, version: int, **kwargs) -> TokenResponse:
        legend = TokenLegend(token_types=("function", "parameter"), token_modifiers=("declaration",))
        return TokenResponse(view_id="buffer", version=version, legend=legend, **kwargs)

    def test_stale_token_response_is_ignored(self) -> None:
        harness = _Harness(self.TEXT, supports_tokens=True)
        harness.manager.start_jump(JumpMode.SEMANTIC)
        harness.type("ba")
        self.assertEqual([request.version for request in harness.view.token_requests], [1, 2])

        harness.manager.receive_tokens(self._response(1, data=(0, 0, 3, 0, 0)))
        self.assertIs(harness.session.phase, JumpPhase.PATTERN_BUILDING)
        self.assertEqual(harness.session.labeled, [])

        harness.manager.receive_tokens(self._response(2, data=SEMANTIC_DATA))
        self.assertIs(harness.session.phase, JumpPhase.TARGET_SELECTION)
        self.assertEqual(
            [(item.label, item.candidate.line, item.candidate.column) for item in harness.session.labeled],
            [("f", 0, 8), ("j", 1, 11)],
        )

        harness.type("j")

        self.assertEqual(harness.view.cursor, Position(1, 11))
        self.assertTrue(harness.released())

    def test_malformed_token_stream_cancels_with_notice(self) -> None:
        harness = _Harness(self.TEXT, supports_tokens=True)
        harness.manager.start_jump(JumpMode.SEMANTIC)
        harness.type("b")

        harness.manager.receive_tokens(self._response(1, data=(0, 4, 3)))

        self.assertTrue(harness.released())
        self.assertEqual(len(harness.view.notices), 1)
        self.assertTrue(harness.view.notices[0].startswith("malformed semantic tokens"))

    def test_view_without_tokens_refuses_semantic_mode(self) -> None:
        harness = _Harness(self.TEXT)

        self.assertFalse(harness.manager.start_jump(JumpMode.SEMANTIC))
        self.assertTrue(harness.released())


class CancellationScenarioTests(unittest.TestCase):
    def _live(self) -> _Harness:
        harness = _Harness("foo bar\nfoo baz\n")
        harness.manager.start_jump()
        harness.type("fo")
        self.assertTrue(harness.labels())
        return harness

    def test_view_switch_releases_everything(self) -> None:
        harness = self._live()

        harness.manager.on_active_view_changed(TextView("elsewhere\n", view_id="other").hooks())

        self.assertTrue(harness.released())
        self.assertEqual(harness.view.status, "")

    def test_cursor_move_elsewhere_cancels(self) -> None:
        harness = self._live()

        harness.view.move_cursor(Position(1, 3))

        self.assertTrue(harness.released())

    def test_focus_loss_cancels(self) -> None:
        harness = self._live()

        harness.manager.on_focus_lost()

        self.assertTrue(harness.released())
        self.assertEqual(harness.view.cursor, Position(0, 0))

    def test_keys_after_cancel_fall_through(self) -> None:
        harness = self._live()
        harness.keys("ESC")

        self.assertFalse(harness.registry.dispatch("f"))
        self.assertTrue(harness.released())


if __name__ == "__main__":
    unittest.main()

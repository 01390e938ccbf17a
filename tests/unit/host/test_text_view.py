from __future__ import annotations

import unittest
from unittest import mock

from lazyjump.host.view import TextView
from lazyjump.render.overlay import OverlayFragment, StyleCategory
from lazyjump.targets.types import Position, TextRange


def _view(lines: int = 30, height: int = 10) -> TextView:
    return TextView("\n".join(f"line {index}" for index in range(lines)), height=height)


class ViewportTests(unittest.TestCase):
    def test_visible_range_covers_viewport_lines(self) -> None:
        view = _view()
        view.top = 5

        self.assertEqual(view.visible_ranges(), [TextRange(Position(5, 0), Position(14, 7))])

    def test_reveal_center_centers_off_screen_target(self) -> None:
        view = _view()

        view.move_cursor(Position(20, 2), reveal_center=True)

        self.assertEqual(view.top, 15)
        self.assertEqual(view.cursor, Position(20, 2))

    def test_plain_move_scrolls_minimum(self) -> None:
        view = _view()

        view.move_cursor(Position(12, 0))

        self.assertEqual(view.top, 3)

    def test_visible_target_does_not_scroll(self) -> None:
        view = _view()
        view.top = 4

        view.move_cursor(Position(8, 0), reveal_center=True)

        self.assertEqual(view.top, 4)

    def test_cursor_is_clamped_to_buffer(self) -> None:
        view = _view(lines=3)

        view.move_cursor(Position(99, 99))

        self.assertEqual(view.cursor, Position(2, 6))

    def test_selection_listener_fires_only_on_change(self) -> None:
        view = _view()
        listener = mock.Mock()
        view.on_selection_changed = listener

        view.move_cursor(Position(0, 0))
        view.move_lines(1)

        listener.assert_called_once_with("view", Position(1, 0))


class OverlayHandleTests(unittest.TestCase):
    def test_fragments_are_replaced_and_disposed_per_handle(self) -> None:
        view = _view()
        label = view.create_style(StyleCategory.LABEL)
        primary = view.create_style(StyleCategory.PRIMARY)
        fragment = OverlayFragment(Position(0, 1), text="f", anchor="after")

        view.set_fragments(label, (fragment,))
        view.set_fragments(label, (fragment, fragment))
        view.set_fragments(primary, (OverlayFragment(Position(0, 0), length=1),))

        self.assertEqual(len(view.fragments(StyleCategory.LABEL)), 2)
        self.assertEqual(len(view.fragments()), 3)

        view.dispose_style(label)
        self.assertEqual(view.style_count, 1)
        with self.assertRaises(KeyError):
            view.set_fragments(label, ())

    def test_hooks_expose_token_requests_only_when_supported(self) -> None:
        self.assertIsNone(_view().hooks().request_tokens)
        view = TextView("x", supports_tokens=True)
        self.assertIsNotNone(view.hooks().request_tokens)


if __name__ == "__main__":
    unittest.main()

"""Tests for per-mode settings resolution and config sanitization.

Malformed values must fall back to built-in defaults instead of breaking a
jump session.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyjump import config
from lazyjump.config import (
    DEFAULT_JUMP_CHARACTERS,
    MIXED_CASE_JUMP_CHARACTERS,
    DensityThresholds,
    settings_from_mapping,
)
from lazyjump.targets.types import JumpMode


class ModeDefaultsTests(unittest.TestCase):
    def test_each_mode_has_its_own_defaults(self) -> None:
        literal = settings_from_mapping({}, JumpMode.LITERAL)
        hybrid = settings_from_mapping({}, JumpMode.HYBRID)
        semantic = settings_from_mapping({}, JumpMode.SEMANTIC)

        self.assertEqual((literal.min_pattern_length, literal.auto_jump_ceiling), (2, 20))
        self.assertEqual((hybrid.min_pattern_length, hybrid.auto_jump_ceiling), (3, 30))
        self.assertEqual((semantic.min_pattern_length, semantic.auto_jump_ceiling), (1, 40))
        self.assertEqual(literal.jump_characters, DEFAULT_JUMP_CHARACTERS)
        self.assertEqual(hybrid.jump_characters, MIXED_CASE_JUMP_CHARACTERS)
        self.assertTrue(semantic.clustering_enabled)
        self.assertFalse(literal.clustering_enabled)
        self.assertEqual(literal.density, DensityThresholds(15, 40))


class SettingsFromMappingTests(unittest.TestCase):
    def test_mode_section_overrides_shared_keys(self) -> None:
        data = {"min_pattern_length": 4, "hybrid": {"min_pattern_length": 5}}

        self.assertEqual(settings_from_mapping(data, JumpMode.LITERAL).min_pattern_length, 4)
        self.assertEqual(settings_from_mapping(data, JumpMode.HYBRID).min_pattern_length, 5)

    def test_invalid_numbers_fall_back(self) -> None:
        data = {
            "min_pattern_length": 0,
            "auto_jump_ceiling": True,
            "max_candidates": "many",
            "density_thresholds": {"low": 50, "high": 10},
        }

        settings = settings_from_mapping(data, JumpMode.LITERAL)

        self.assertEqual(settings.min_pattern_length, 2)
        self.assertEqual(settings.auto_jump_ceiling, 20)
        self.assertEqual(settings.max_candidates, 100)
        self.assertEqual(settings.density, DensityThresholds(15, 40))

    def test_low_density_threshold_never_falls_below_home_size(self) -> None:
        data = {"density_thresholds": {"low": 3, "high": 5}}

        self.assertEqual(settings_from_mapping(data, JumpMode.LITERAL).density, DensityThresholds(8, 8))
        self.assertEqual(
            settings_from_mapping({**data, "home_size": 4}, JumpMode.LITERAL).density,
            DensityThresholds(4, 5),
        )
        self.assertEqual(settings_from_mapping({"home_size": 20}, JumpMode.LITERAL).density, DensityThresholds(20, 40))

    def test_alphabet_is_deduplicated_and_blank_is_ignored(self) -> None:
        self.assertEqual(settings_from_mapping({"jump_characters": "ff jj d"}, JumpMode.LITERAL).jump_characters, "fjd")
        self.assertEqual(
            settings_from_mapping({"jump_characters": "  "}, JumpMode.LITERAL).jump_characters,
            DEFAULT_JUMP_CHARACTERS,
        )

    def test_token_priorities_merge_over_defaults(self) -> None:
        settings = settings_from_mapping(
            {"token_priorities": {"variable": 99, "bogus": "high", "custom": 12.7}},
            JumpMode.SEMANTIC,
        )

        self.assertEqual(settings.token_priorities["variable"], 99)
        self.assertEqual(settings.token_priorities["custom"], 12)
        self.assertEqual(settings.token_priorities["function"], 100)
        self.assertNotIn("bogus", settings.token_priorities)

    def test_token_type_filter_can_be_widened(self) -> None:
        self.assertIsNone(settings_from_mapping({"included_token_types": "*"}, JumpMode.SEMANTIC).included_token_types)
        self.assertIsNone(
            settings_from_mapping({"include_all_token_types": True}, JumpMode.SEMANTIC).included_token_types
        )
        self.assertEqual(
            settings_from_mapping({"included_token_types": ["function", 3]}, JumpMode.SEMANTIC).included_token_types,
            ("function",),
        )


class LoadConfigTests(unittest.TestCase):
    def test_missing_malformed_and_non_object_files_load_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("lazyjump.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_load_jump_settings_reads_persisted_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                '{"theme": " Ocean ", "semantic": {"cluster_max_gap": 2}}\n',
                encoding="utf-8",
            )
            with mock.patch("lazyjump.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_jump_settings(JumpMode.SEMANTIC).cluster_max_gap, 2)
                self.assertEqual(config.load_theme_name(), "Ocean")


if __name__ == "__main__":
    unittest.main()

"""Persistent JSON config and per-mode jump settings.

Top-level keys are shared defaults; ``literal``, ``hybrid`` and ``semantic``
sections override them for one mode. All access is defensive: malformed or
missing config falls back to built-in defaults.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from platformdirs import user_config_dir

from .scoring.score import DEFAULT_TYPE_PRIORITIES
from .targets.semantic import DEFAULT_INCLUDED_TOKEN_TYPES
from .targets.types import JumpMode

logger = logging.getLogger(__name__)

APP_NAME = "lazyjump"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_JUMP_CHARACTERS = "fjdkslaghrueiwoncmv"
MIXED_CASE_JUMP_CHARACTERS = "fjdkslaghrueiwoncmvFJDKSLAGHRUEIWONCMV"


@dataclass(frozen=True)
class DensityThresholds:
    """Candidate-count boundaries between single, mixed, and sequence labels."""

    low: int = 15
    high: int = 40


@dataclass(frozen=True)
class JumpSettings:
    """Resolved settings for one jump mode."""

    mode: JumpMode = JumpMode.LITERAL
    jump_characters: str = DEFAULT_JUMP_CHARACTERS
    case_sensitive: bool = False
    min_pattern_length: int = 2
    max_candidates: int = 100
    min_match_length: int = 0
    auto_jump_ceiling: int = 20
    density: DensityThresholds = field(default_factory=DensityThresholds)
    token_priorities: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_TYPE_PRIORITIES))
    auto_jump_single_match: bool = True
    clustering_enabled: bool = False
    cluster_max_gap: int = 5
    home_size: int = 8
    included_token_types: tuple[str, ...] | None = DEFAULT_INCLUDED_TOKEN_TYPES


_MODE_DEFAULTS: dict[JumpMode, JumpSettings] = {
    JumpMode.LITERAL: JumpSettings(mode=JumpMode.LITERAL),
    JumpMode.HYBRID: JumpSettings(
        mode=JumpMode.HYBRID,
        jump_characters=MIXED_CASE_JUMP_CHARACTERS,
        min_pattern_length=3,
        auto_jump_ceiling=30,
    ),
    JumpMode.SEMANTIC: JumpSettings(
        mode=JumpMode.SEMANTIC,
        min_pattern_length=1,
        auto_jump_ceiling=40,
        clustering_enabled=True,
    ),
}


def default_settings(mode: JumpMode) -> JumpSettings:
    return _MODE_DEFAULTS[mode]


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception:
        logger.warning("ignoring unreadable config at %s", CONFIG_PATH, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def dedupe_characters(value: str) -> str:
    """Drop repeated characters and whitespace while keeping first occurrences."""
    seen: set[str] = set()
    out: list[str] = []
    for ch in value:
        if ch.isspace() or ch in seen:
            continue
        seen.add(ch)
        out.append(ch)
    return "".join(out)


def _coerce_int(value: object, fallback: int, minimum: int = 0) -> int:
    """Accept only real integers (not booleans) at or above ``minimum``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return fallback
    return value if value >= minimum else fallback


def _coerce_bool(value: object, fallback: bool) -> bool:
    return value if isinstance(value, bool) else fallback


def _coerce_alphabet(value: object, fallback: str) -> str:
    if not isinstance(value, str):
        return fallback
    alphabet = dedupe_characters(value)
    return alphabet if alphabet else fallback


def _coerce_density(value: object, fallback: DensityThresholds, home_size: int) -> DensityThresholds:
    density = fallback
    if isinstance(value, dict):
        low = _coerce_int(value.get("low"), fallback.low)
        high = _coerce_int(value.get("high"), fallback.high)
        if low <= high:
            density = DensityThresholds(low=low, high=high)
    # The mixed tier labels its first ``home_size`` candidates with single characters.
    low = max(density.low, home_size)
    return DensityThresholds(low=low, high=max(density.high, low))


def _coerce_priorities(value: object, fallback: Mapping[str, int]) -> Mapping[str, int]:
    if not isinstance(value, dict):
        return fallback
    merged = dict(fallback)
    for kind, priority in value.items():
        if isinstance(kind, str) and isinstance(priority, (int, float)) and not isinstance(priority, bool):
            merged[kind] = int(priority)
    return merged


def _coerce_token_types(value: object, fallback: tuple[str, ...] | None) -> tuple[str, ...] | None:
    if value == "*":
        return None
    if not isinstance(value, list):
        return fallback
    names = tuple(item for item in value if isinstance(item, str) and item)
    if "*" in names:
        return None
    return names if names else fallback


_MODE_SECTIONS = frozenset(mode.value for mode in JumpMode)


def _merged_section(data: Mapping[str, object], mode: JumpMode) -> dict[str, object]:
    merged = {key: value for key, value in data.items() if key not in _MODE_SECTIONS}
    section = data.get(mode.value)
    if isinstance(section, dict):
        merged.update(section)
    return merged


def settings_from_mapping(data: Mapping[str, object], mode: JumpMode) -> JumpSettings:
    """Resolve ``JumpSettings`` for ``mode`` from a raw config mapping."""
    base = default_settings(mode)
    raw = _merged_section(data, mode)
    include_all = _coerce_bool(raw.get("include_all_token_types"), False)
    home_size = _coerce_int(raw.get("home_size"), base.home_size, minimum=1)
    included = _coerce_token_types(raw.get("included_token_types"), base.included_token_types)
    return replace(
        base,
        jump_characters=_coerce_alphabet(raw.get("jump_characters"), base.jump_characters),
        case_sensitive=_coerce_bool(raw.get("case_sensitive"), base.case_sensitive),
        min_pattern_length=_coerce_int(raw.get("min_pattern_length"), base.min_pattern_length, minimum=1),
        max_candidates=_coerce_int(raw.get("max_candidates"), base.max_candidates),
        min_match_length=_coerce_int(raw.get("min_match_length"), base.min_match_length),
        auto_jump_ceiling=_coerce_int(raw.get("auto_jump_ceiling"), base.auto_jump_ceiling, minimum=1),
        density=_coerce_density(raw.get("density_thresholds"), base.density, home_size),
        token_priorities=_coerce_priorities(raw.get("token_priorities"), base.token_priorities),
        auto_jump_single_match=_coerce_bool(raw.get("auto_jump_single_match"), base.auto_jump_single_match),
        clustering_enabled=_coerce_bool(raw.get("clustering_enabled"), base.clustering_enabled),
        cluster_max_gap=_coerce_int(raw.get("cluster_max_gap"), base.cluster_max_gap),
        home_size=home_size,
        included_token_types=None if include_all else included,
    )


def load_jump_settings(mode: JumpMode) -> JumpSettings:
    """Load settings for ``mode`` from the persisted config file."""
    return settings_from_mapping(load_config(), mode)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None

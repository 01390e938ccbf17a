"""Pytest bootstrap for local source imports and config isolation.

Puts the repository root on ``sys.path`` so ``import lazyjump`` resolves to
the local package, and points the config file at an empty temp location so
a developer's own ``config.json`` never changes test outcomes.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    from lazyjump import config

    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "lazyjump-config.json")
    yield

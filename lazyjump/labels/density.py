"""Label-strategy selection from candidate density."""

from __future__ import annotations

from ..config import DensityThresholds
from ..targets.types import DensityLevel


def density_level(count: int, thresholds: DensityThresholds) -> DensityLevel:
    """Return ``LOW`` up to ``thresholds.low``, ``MEDIUM`` up to ``high``, else ``HIGH``."""
    if count <= thresholds.low:
        return DensityLevel.LOW
    if count <= thresholds.high:
        return DensityLevel.MEDIUM
    return DensityLevel.HIGH

"""Adaptive label assignment."""

from .assigner import assign_labels, label_alphabet, label_capacity, second_phase_labels
from .density import density_level

__all__ = [
    "assign_labels",
    "density_level",
    "label_alphabet",
    "label_capacity",
    "second_phase_labels",
]

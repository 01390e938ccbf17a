"""Candidate clustering and ranking."""

from .cluster import CHAINABLE_KINDS, build_clusters, cluster_representatives
from .score import DEFAULT_TYPE_PRIORITIES, score_candidate, score_candidates, type_priority

__all__ = [
    "CHAINABLE_KINDS",
    "DEFAULT_TYPE_PRIORITIES",
    "build_clusters",
    "cluster_representatives",
    "score_candidate",
    "score_candidates",
    "type_priority",
]

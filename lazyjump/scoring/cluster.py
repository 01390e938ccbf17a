"""Collapse runs of adjacent chainable tokens into single targets.

``foo.bar.baz`` produces three semantic tokens one character apart; labeling
each of them wastes short labels, so the run is represented by whichever
member carries the highest type priority.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..targets.types import Candidate, Cluster
from .score import type_priority

CHAINABLE_KINDS = frozenset({"variable", "property", "method", "namespace"})
DEFAULT_MAX_GAP = 5


def _representative(
    members: list[Candidate],
    priorities: Mapping[str, int] | None,
) -> Candidate:
    best = members[0]
    best_priority = type_priority(best.kind, priorities)
    for member in members[1:]:
        priority = type_priority(member.kind, priorities)
        if priority > best_priority:
            best = member
            best_priority = priority
    return best


def build_clusters(
    candidates: Iterable[Candidate],
    *,
    max_gap: int = DEFAULT_MAX_GAP,
    priorities: Mapping[str, int] | None = None,
) -> list[Cluster]:
    """Group candidates in document order.

    A candidate joins the running cluster when it is on the same line, starts
    no earlier than the furthest end seen in the run and at most ``max_gap``
    columns after it, and both it and the previous member have chainable kinds.
    """
    ordered = sorted(candidates, key=lambda c: (c.line, c.column, c.length))
    clusters: list[Cluster] = []
    run: list[Candidate] = []
    run_end = 0

    def close_run() -> None:
        if run:
            clusters.append(Cluster(members=tuple(run), representative=_representative(run, priorities)))

    for candidate in ordered:
        if run:
            previous = run[-1]
            if (
                previous.line == candidate.line
                and 0 <= candidate.column - run_end <= max_gap
                and previous.kind in CHAINABLE_KINDS
                and candidate.kind in CHAINABLE_KINDS
            ):
                run.append(candidate)
                run_end = max(run_end, candidate.end_column)
                continue
        close_run()
        run = [candidate]
        run_end = candidate.end_column
    close_run()
    return clusters


def cluster_representatives(
    candidates: Iterable[Candidate],
    *,
    max_gap: int = DEFAULT_MAX_GAP,
    priorities: Mapping[str, int] | None = None,
) -> tuple[list[Candidate], dict[Candidate, int]]:
    """Return one candidate per cluster plus a cluster-id lookup.

    Only multi-member clusters receive an id; singletons pass through with no
    entry in the lookup. Output keeps the input order of the representatives
    so distance sorting from discovery survives.
    """
    source = list(candidates)
    clusters = build_clusters(source, max_gap=max_gap, priorities=priorities)
    kept: set[Candidate] = set()
    ids: dict[Candidate, int] = {}
    for index, cluster in enumerate(clusters):
        kept.add(cluster.representative)
        if cluster.size > 1:
            ids[cluster.representative] = index
    return [candidate for candidate in source if candidate in kept], ids

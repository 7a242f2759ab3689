"""Temporal correlation of observation streams.

Usage:
    frames = log.of_kind(ObservationKind.LONG_FRAME)
    mutations = log.of_kind(ObservationKind.MUTATION)
    for corr in correlate(frames, mutations):
        print(corr.primary.timestamp, corr.dominant_subtree_id)

Streams are only ordered within themselves. The contributor stream is sorted
by (timestamp, seq) once per call, and every window query is a binary search
over that order: O(log n + k) per primary.
"""

from __future__ import annotations

import heapq
from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Sequence

from vitalscope.core.correlation.models import Correlation, Matcher
from vitalscope.core.observation import LayoutShift, Observation, ObservationKind
from vitalscope.core.types import Milliseconds


def _order_key(observation: Observation) -> tuple[float, int]:
    return (observation.timestamp, observation.seq)


def merge_streams(*streams: Iterable[Observation]) -> list[Observation]:
    """Merge individually time-ordered streams into one time-ordered list.

    Each input must already be non-decreasing in timestamp (the per-stream
    delivery guarantee). Equal timestamps fall back to arrival order.
    """
    return list(heapq.merge(*streams, key=_order_key))


def window_for(
    primary: Observation, epsilon: Milliseconds = 0.0
) -> tuple[Milliseconds, Milliseconds]:
    """Time window covered by a primary observation.

    Interval primaries cover [t, t + duration]. Instantaneous primaries cover
    [t - epsilon, t + epsilon]; with the default epsilon of 0 only
    contributors at exactly the same instant match.
    """
    if primary.duration > 0:
        return primary.timestamp, primary.end
    return primary.timestamp - epsilon, primary.timestamp + epsilon


def dominant_subtree(contributors: Sequence[Observation]) -> tuple[str | None, dict[str, int]]:
    """Pick the subtree with the most contributors.

    Contributors must be in time order. Ties go to the subtree seen first.
    Contributors without a subtree id count toward nothing.

    Returns:
        (dominant subtree id or None, per-subtree counts in first-seen order)
    """
    counts: dict[str, int] = {}
    for contributor in contributors:
        if contributor.subtree_id is None:
            continue
        counts[contributor.subtree_id] = counts.get(contributor.subtree_id, 0) + 1

    dominant: str | None = None
    best = 0
    for subtree_id, count in counts.items():
        if count > best:
            dominant, best = subtree_id, count
    return dominant, counts


def correlate(
    primary: Iterable[Observation],
    contributors: Iterable[Observation],
    matcher: Matcher | None = None,
    epsilon: Milliseconds = 0.0,
) -> list[Correlation]:
    """Attribute contributor observations to primary time windows.

    Args:
        primary: Observations defining windows (any order).
        contributors: Candidate contributors (any order; sorted internally).
        matcher: Optional (primary, contributor) filter applied inside the window.
        epsilon: Half-width of the window for zero-duration primaries.

    Returns:
        One Correlation per primary, ordered by primary time. Correlations
        with no contributors are included so callers can see unattributed
        primaries.
    """
    if epsilon < 0:
        raise ValueError(f"epsilon must be non-negative, got {epsilon}")

    ordered = sorted(contributors, key=_order_key)
    timestamps = [obs.timestamp for obs in ordered]

    results: list[Correlation] = []
    for anchor in sorted(primary, key=_order_key):
        start, end = window_for(anchor, epsilon)
        lo = bisect_left(timestamps, start)
        hi = bisect_right(timestamps, end)
        inside = [
            obs
            for obs in ordered[lo:hi]
            if obs is not anchor and (matcher is None or matcher(anchor, obs))
        ]
        dominant, counts = dominant_subtree(inside)
        results.append(
            Correlation(
                window_start=start,
                window_end=end,
                primary=anchor,
                contributors=tuple(inside),
                dominant_subtree_id=dominant,
                subtree_counts=counts,
            )
        )
    return results


# --- Matchers ---


def same_subtree(primary: Observation, contributor: Observation) -> bool:
    """Contributor originates from the primary's subtree."""
    return primary.subtree_id is not None and contributor.subtree_id == primary.subtree_id


def shift_source_matches_contributor(primary: Observation, contributor: Observation) -> bool:
    """Contributor's subtree is one of the layout shift's resolved sources."""
    if not isinstance(primary.payload, LayoutShift):
        return False
    return contributor.subtree_id in primary.payload.source_ids()


def shift_source_matches_element(primary: Observation, contributor: Observation) -> bool:
    """Layout shift contributor moved the element whose visibility changed."""
    if not isinstance(contributor.payload, LayoutShift):
        return False
    return primary.subtree_id is not None and primary.subtree_id in contributor.payload.source_ids()


# --- Presets ---


def _of_kind(observations: Iterable[Observation], kind: ObservationKind) -> list[Observation]:
    return [obs for obs in observations if obs.kind is kind]


def attribute_long_frames(observations: Sequence[Observation]) -> list[Correlation]:
    """Which subtrees were mutating while each long frame blocked the page."""
    return correlate(
        _of_kind(observations, ObservationKind.LONG_FRAME),
        _of_kind(observations, ObservationKind.MUTATION),
    )


def attribute_layout_shifts(
    observations: Sequence[Observation], epsilon: float = 0.0
) -> list[Correlation]:
    """Whether each layout shift's sources were also being mutated around it.

    Shifts without resolved sources are skipped: they still count toward CLS
    but cannot be attributed.
    """
    shifts = [
        obs
        for obs in _of_kind(observations, ObservationKind.LAYOUT_SHIFT)
        if isinstance(obs.payload, LayoutShift) and obs.payload.attributable
    ]
    return correlate(
        shifts,
        _of_kind(observations, ObservationKind.MUTATION),
        matcher=shift_source_matches_contributor,
        epsilon=epsilon,
    )


def attribute_visibility_changes(
    observations: Sequence[Observation], epsilon: float = 0.0
) -> list[Correlation]:
    """Layout shifts that moved an element at the moment its visibility changed."""
    return correlate(
        _of_kind(observations, ObservationKind.VISIBILITY_CHANGE),
        _of_kind(observations, ObservationKind.LAYOUT_SHIFT),
        matcher=shift_source_matches_element,
        epsilon=epsilon,
    )

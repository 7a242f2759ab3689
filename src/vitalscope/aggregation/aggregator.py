"""Aggregation of a frozen observation log into a MetricSnapshot.

Usage:
    aggregator = Aggregator(EngineSettings())
    snapshot = aggregator.aggregate(
        log.freeze(),
        harvest_time=12_000.0,
        capabilities=session.capabilities,
        tracked=["#hero", "#cta"],
    )

The aggregator is pure over its inputs: the same log, harvest time and
settings always produce an equal snapshot.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import cast

from vitalscope.aggregation.models import (
    METRIC_UNITS,
    DwellRecord,
    InteractionBreakdown,
    Metric,
    MetricSnapshot,
    ShiftOffender,
    SubtreeChurn,
)
from vitalscope.aggregation.visibility import VisibilityTracker
from vitalscope.config import EngineSettings
from vitalscope.core.contrast import (
    ColorSample,
    ConformanceLevel,
    ContrastFinding,
    evaluate,
    non_responsive_elements,
)
from vitalscope.core.correlation import (
    Correlation,
    attribute_layout_shifts,
    attribute_long_frames,
)
from vitalscope.core.identity import FALLBACK_LABEL
from vitalscope.core.observation import (
    ConsoleEntry,
    InteractionTiming,
    LayoutShift,
    LongFrame,
    Mutation,
    Observation,
    ObservationKind,
    PaintCandidate,
)

logger = logging.getLogger(__name__)


# --- Pure metric functions ---


def cumulative_layout_shift(
    observations: Iterable[Observation], exclude_recent_input: bool = True
) -> float:
    """Flat sum of layout shift values, no session windowing.

    Uses an exact summation, so the result does not depend on arrival order.
    """
    return math.fsum(
        obs.payload.value
        for obs in observations
        if isinstance(obs.payload, LayoutShift)
        and not (exclude_recent_input and obs.payload.had_recent_input)
    )


def percentile(values: Iterable[float], q: float) -> float | None:
    """Nearest-rank percentile: sorted[ceil(q * n) - 1], clamped to the sample.

    Returns None for an empty sample.
    """
    ordered = sorted(values)
    if not ordered:
        return None
    # Guard against q * n landing a hair above an integer (0.98 * 50).
    index = math.ceil(q * len(ordered) - 1e-9) - 1
    return ordered[min(max(index, 0), len(ordered) - 1)]


def breakdown(observation: Observation) -> InteractionBreakdown:
    timing = cast(InteractionTiming, observation.payload)
    return InteractionBreakdown(
        name=timing.name,
        interaction_id=timing.interaction_id,
        start_time=timing.start_time,
        duration=timing.duration,
        input_delay=timing.input_delay,
        processing_time=timing.processing_time,
        presentation_delay=timing.presentation_delay,
        subtree_id=observation.subtree_id,
    )


def mutation_churn(
    observations: Iterable[Observation], session_duration_ms: float
) -> list[SubtreeChurn]:
    """Per-subtree mutation totals, ranked by count (ties: first seen)."""
    groups: dict[str, list[int]] = {}
    for obs in observations:
        if not isinstance(obs.payload, Mutation):
            continue
        counters = groups.setdefault(obs.subtree_id or FALLBACK_LABEL, [0, 0, 0, 0])
        counters[0] += 1
        counters[1] += obs.payload.added
        counters[2] += obs.payload.removed
        counters[3] += int(obs.payload.attribute_changed)

    seconds = session_duration_ms / 1000
    ranked = sorted(groups.items(), key=lambda item: -item[1][0])
    return [
        SubtreeChurn(
            subtree_id=subtree_id,
            count=count,
            added=added,
            removed=removed,
            attribute_changes=attributes,
            rate=count / seconds if seconds > 0 else None,
        )
        for subtree_id, (count, added, removed, attributes) in ranked
    ]


def shift_offenders(
    observations: Iterable[Observation], exclude_recent_input: bool = True
) -> list[ShiftOffender]:
    """Subtrees ranked by the total value of the shifts they took part in."""
    totals: dict[str, list[float]] = {}
    for obs in observations:
        payload = obs.payload
        if not isinstance(payload, LayoutShift):
            continue
        if exclude_recent_input and payload.had_recent_input:
            continue
        for subtree_id in payload.source_ids():
            entry = totals.setdefault(subtree_id, [0.0, 0])
            entry[0] += payload.value
            entry[1] += 1
    ranked = sorted(totals.items(), key=lambda item: -item[1][0])
    return [
        ShiftOffender(subtree_id=subtree_id, total_value=value, shift_count=int(count))
        for subtree_id, (value, count) in ranked
    ]


def largest_paint_time(observations: Iterable[Observation]) -> float | None:
    """Render time of the final paint candidate (load time, then entry time as fallback)."""
    last: tuple[float, int, PaintCandidate] | None = None
    for obs in observations:
        if isinstance(obs.payload, PaintCandidate):
            if last is None or (obs.timestamp, obs.seq) >= last[:2]:
                last = (obs.timestamp, obs.seq, obs.payload)
    if last is None:
        return None
    timestamp, _, candidate = last
    return candidate.render_time or candidate.load_time or timestamp


def total_blocking_time(observations: Iterable[Observation], threshold_ms: float = 50.0) -> float:
    return math.fsum(
        max(0.0, obs.payload.duration - threshold_ms)
        for obs in observations
        if isinstance(obs.payload, LongFrame)
    )


# --- Aggregator ---


class Aggregator:
    """Reduces one session's observations into a MetricSnapshot.

    Args:
        settings: Engine settings (percentile, floors, detail list lengths).
    """

    def __init__(self, settings: EngineSettings | None = None):
        self._settings = settings or EngineSettings()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def aggregate(
        self,
        observations: Sequence[Observation],
        *,
        harvest_time: float,
        capabilities: Iterable[ObservationKind] | None = None,
        tracked: Iterable[str] = (),
        color_samples: Iterable[ColorSample] = (),
    ) -> MetricSnapshot:
        """Compute every metric for one harvest.

        Args:
            observations: The session log (any order).
            harvest_time: Platform time of the harvest; closes open
                visibility sessions and defines the session duration.
            capabilities: Streams that were being observed. None means
                "whatever appears in the log".
            tracked: Elements registered for visibility tracking.
            color_samples: Computed colors for contrast evaluation.
        """
        settings = self._settings
        by_kind: dict[ObservationKind, list[Observation]] = {}
        for obs in observations:
            by_kind.setdefault(obs.kind, []).append(obs)
        observed = frozenset(by_kind) if capabilities is None else frozenset(capabilities)

        def measured(kind: ObservationKind) -> bool:
            return kind in observed or kind in by_kind

        def stream(kind: ObservationKind) -> list[Observation]:
            return by_kind.get(kind, [])

        top = settings.top_offenders
        values: dict[str, float | None] = dict.fromkeys(METRIC_UNITS)

        # Layout stability
        shifts = stream(ObservationKind.LAYOUT_SHIFT)
        if measured(ObservationKind.LAYOUT_SHIFT):
            values["cls"] = cumulative_layout_shift(shifts, settings.exclude_recent_input)
        offenders = shift_offenders(shifts, settings.exclude_recent_input)[:top]

        # Responsiveness
        interactions = [
            obs
            for obs in stream(ObservationKind.INTERACTION_TIMING)
            if isinstance(obs.payload, InteractionTiming) and obs.payload.interaction_id != 0
        ]
        values["inp"] = percentile(
            (obs.duration for obs in interactions), settings.interaction_percentile
        )
        slowest = sorted(interactions, key=lambda obs: (-obs.duration, obs.timestamp, obs.seq))
        breakdowns = tuple(breakdown(obs) for obs in slowest[:top])

        # Loading
        values["lcp"] = largest_paint_time(stream(ObservationKind.PAINT_CANDIDATE))

        # Main-thread blocking
        frames = stream(ObservationKind.LONG_FRAME)
        if measured(ObservationKind.LONG_FRAME):
            values["total_blocking_time"] = total_blocking_time(
                frames, settings.blocking_threshold_ms
            )
            values["long_frame_count"] = float(len(frames))

        # DOM churn
        mutations = stream(ObservationKind.MUTATION)
        churn = mutation_churn(mutations, harvest_time)
        if measured(ObservationKind.MUTATION) and harvest_time > 0:
            values["churn_rate"] = len(mutations) / (harvest_time / 1000)

        # Correlation
        frame_attributions = self._ranked_attributions(attribute_long_frames(observations))
        shift_attributions = tuple(
            corr
            for corr in attribute_layout_shifts(observations, settings.correlation_epsilon_ms)
            if corr.contributors
        )

        # Visibility
        tracker = VisibilityTracker(tracked)
        tracker.feed(stream(ObservationKind.VISIBILITY_CHANGE))
        tracker.close(harvest_time)
        records = tracker.records()
        never_seen = tuple(r.element_id for r in records if r.never_seen)
        under_threshold = tuple(
            r.element_id
            for r in records
            if not r.never_seen and r.total_dwell_ms < settings.dwell_floor_ms
        )
        if records or measured(ObservationKind.VISIBILITY_CHANGE):
            values["never_seen"] = float(len(never_seen))
        dwell = tuple(sorted(records, key=_dwell_rank))

        # Contrast
        samples = list(color_samples)
        findings = tuple(sorted((evaluate(s) for s in samples), key=_contrast_rank))
        if samples:
            values["contrast_failures"] = float(
                sum(1 for f in findings if f.level is ConformanceLevel.FAIL)
            )

        # Console
        if measured(ObservationKind.CONSOLE_ENTRY):
            values["console_errors"] = float(
                sum(
                    1
                    for obs in stream(ObservationKind.CONSOLE_ENTRY)
                    if isinstance(obs.payload, ConsoleEntry) and obs.payload.level == "error"
                )
            )

        metrics = {
            name: Metric(name=name, value=values[name], unit=unit)
            for name, unit in METRIC_UNITS.items()
        }
        missing = [name for name, metric in metrics.items() if not metric.available]
        if missing:
            logger.debug("Metrics unavailable for this harvest: %s", ", ".join(missing))

        return MetricSnapshot(
            session_duration_ms=harvest_time,
            metrics=metrics,
            interactions=breakdowns,
            churn=tuple(churn[:top]),
            shift_offenders=tuple(offenders),
            frame_attributions=frame_attributions,
            shift_attributions=shift_attributions,
            dwell=dwell,
            never_seen=never_seen,
            under_threshold=under_threshold,
            contrast=findings,
            non_responsive=tuple(non_responsive_elements(samples)),
        )

    def _ranked_attributions(self, correlations: list[Correlation]) -> tuple[Correlation, ...]:
        """Attributed long frames, longest first."""
        attributed = [corr for corr in correlations if corr.contributors]
        attributed.sort(key=lambda corr: -corr.primary.duration)
        return tuple(attributed[: self._settings.top_offenders])


def _dwell_rank(record: DwellRecord) -> float:
    return -record.total_dwell_ms


def _contrast_rank(finding: ContrastFinding) -> float:
    return finding.ratio

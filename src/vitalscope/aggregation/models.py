"""Aggregated metric models.

These models are immutable and storage-agnostic; ``to_dict`` output is
JSON-serializable for the reporting layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from vitalscope.core.contrast import ContrastFinding
from vitalscope.core.correlation import Correlation

METRIC_UNITS: dict[str, str] = {
    "cls": "",
    "inp": "ms",
    "lcp": "ms",
    "total_blocking_time": "ms",
    "long_frame_count": "count",
    "churn_rate": "mutations/s",
    "contrast_failures": "count",
    "never_seen": "count",
    "console_errors": "count",
}
"""Every scalar metric a snapshot reports, in report order."""


@dataclass(frozen=True, slots=True)
class Metric:
    """One scalar metric.

    ``value is None`` means the metric was not measured (capability absent or
    no qualifying samples), which is different from a measured zero.
    """

    name: str
    value: float | None
    unit: str = ""

    @property
    def available(self) -> bool:
        return self.value is not None

    @classmethod
    def unavailable(cls, name: str, unit: str = "") -> Metric:
        return cls(name=name, value=None, unit=unit)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value, "unit": self.unit}


@dataclass(frozen=True, slots=True)
class InteractionBreakdown:
    """Latency decomposition of one interaction entry."""

    name: str
    interaction_id: int
    start_time: float
    duration: float
    input_delay: float
    processing_time: float
    presentation_delay: float
    subtree_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "interaction_id": self.interaction_id,
            "start_time": self.start_time,
            "duration": self.duration,
            "input_delay": self.input_delay,
            "processing_time": self.processing_time,
            "presentation_delay": self.presentation_delay,
            "subtree_id": self.subtree_id,
        }


@dataclass(frozen=True, slots=True)
class SubtreeChurn:
    """Mutation activity of one subtree."""

    subtree_id: str
    count: int
    added: int
    removed: int
    attribute_changes: int
    rate: float | None = None
    """Mutations per second of session time; None for a zero-length session."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtree_id": self.subtree_id,
            "count": self.count,
            "added": self.added,
            "removed": self.removed,
            "attribute_changes": self.attribute_changes,
            "rate": self.rate,
        }


@dataclass(frozen=True, slots=True)
class ShiftOffender:
    """Layout shift value attributed to one moving subtree."""

    subtree_id: str
    total_value: float
    shift_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtree_id": self.subtree_id,
            "total_value": self.total_value,
            "shift_count": self.shift_count,
        }


@dataclass(frozen=True, slots=True)
class VisibilitySession:
    """One contiguous interval with a non-zero intersection ratio.

    Attributes:
        element_id: Tracked element.
        entered_at: Time the ratio went above zero.
        exited_at: Time it returned to zero (None while still open).
        max_ratio: Largest ratio observed during the interval.
    """

    element_id: str
    entered_at: float
    exited_at: float | None = None
    max_ratio: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.exited_at is None

    @property
    def duration(self) -> float:
        if self.exited_at is None:
            return 0.0
        return max(0.0, self.exited_at - self.entered_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "entered_at": self.entered_at,
            "exited_at": self.exited_at,
            "max_ratio": self.max_ratio,
        }


@dataclass(frozen=True, slots=True)
class DwellRecord:
    """Exposure summary of one tracked element."""

    element_id: str
    total_dwell_ms: float
    max_ratio: float
    sessions: tuple[VisibilitySession, ...] = ()

    @property
    def never_seen(self) -> bool:
        return not self.sessions

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "total_dwell_ms": self.total_dwell_ms,
            "max_ratio": self.max_ratio,
            "sessions": [s.to_dict() for s in self.sessions],
        }


@dataclass(frozen=True, slots=True)
class MetricSnapshot:
    """Aggregated, immutable result of one harvest.

    Attributes:
        session_duration_ms: Harvest time relative to the session timeline origin.
        metrics: Scalar metrics by name, in a fixed order.
        interactions: Slowest interactions first.
        churn: Subtrees ranked by mutation count.
        shift_offenders: Subtrees ranked by attributed layout shift value.
        frame_attributions: Long frames with the mutations inside them.
        shift_attributions: Layout shifts with mutations of their sources.
        dwell: Per-element exposure, ranked by dwell time.
        never_seen: Tracked elements that never intersected the viewport.
        under_threshold: Seen elements whose dwell stayed below the floor.
        contrast: Contrast findings, failures first.
        non_responsive: Elements whose colors ignore the color scheme.
    """

    session_duration_ms: float
    metrics: dict[str, Metric] = field(default_factory=dict)
    interactions: tuple[InteractionBreakdown, ...] = ()
    churn: tuple[SubtreeChurn, ...] = ()
    shift_offenders: tuple[ShiftOffender, ...] = ()
    frame_attributions: tuple[Correlation, ...] = ()
    shift_attributions: tuple[Correlation, ...] = ()
    dwell: tuple[DwellRecord, ...] = ()
    never_seen: tuple[str, ...] = ()
    under_threshold: tuple[str, ...] = ()
    contrast: tuple[ContrastFinding, ...] = ()
    non_responsive: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> MetricSnapshot:
        """Result for a session that never collected anything."""
        return cls(
            session_duration_ms=0.0,
            metrics={name: Metric.unavailable(name, unit) for name, unit in METRIC_UNITS.items()},
        )

    def metric(self, name: str) -> Metric:
        """Metric by name; unknown names read as unavailable."""
        return self.metrics.get(name) or Metric.unavailable(name)

    def value(self, name: str) -> float | None:
        return self.metric(name).value

    def dwell_for(self, element_id: str) -> DwellRecord | None:
        for record in self.dwell:
            if record.element_id == element_id:
                return record
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "session_duration_ms": self.session_duration_ms,
            "metrics": {name: metric.to_dict() for name, metric in self.metrics.items()},
            "interactions": [i.to_dict() for i in self.interactions],
            "churn": [c.to_dict() for c in self.churn],
            "shift_offenders": [s.to_dict() for s in self.shift_offenders],
            "frame_attributions": [c.to_dict() for c in self.frame_attributions],
            "shift_attributions": [c.to_dict() for c in self.shift_attributions],
            "dwell": [d.to_dict() for d in self.dwell],
            "never_seen": list(self.never_seen),
            "under_threshold": list(self.under_threshold),
            "contrast": [f.to_dict() for f in self.contrast],
            "non_responsive": list(self.non_responsive),
        }

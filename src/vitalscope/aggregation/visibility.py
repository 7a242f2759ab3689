"""Visibility dwell tracking.

VisibilityTracker is a per-element state machine:

    HIDDEN --ratio > 0--> VISIBLE (session opened, max_ratio updated)
    VISIBLE --ratio == 0--> HIDDEN (session closed)
    VISIBLE --close(t)--> HIDDEN (session closed at harvest time)

At most one session per element is open at any time, and closed sessions of
one element never overlap.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from vitalscope.aggregation.models import DwellRecord, VisibilitySession
from vitalscope.core.observation import Observation, VisibilityChange


class VisibilityTracker:
    """Accumulates visibility sessions for tracked elements.

    Args:
        tracked: Elements registered up front. Elements that show up in
            observations are tracked implicitly.
    """

    def __init__(self, tracked: Iterable[str] = ()):
        self._elements: dict[str, None] = {}
        self._open: dict[str, VisibilitySession] = {}
        self._closed: dict[str, list[VisibilitySession]] = {}
        self._closed_at: float | None = None
        for element_id in tracked:
            self.track(element_id)

    @property
    def closed(self) -> bool:
        return self._closed_at is not None

    def track(self, element_id: str) -> None:
        if element_id not in self._elements:
            self._elements[element_id] = None
            self._closed[element_id] = []

    def observe(self, element_id: str, ratio: float, at: float) -> None:
        """Apply one intersection-ratio transition.

        Raises:
            RuntimeError: If the tracker has already been closed.
        """
        if self._closed_at is not None:
            raise RuntimeError("VisibilityTracker is closed")
        self.track(element_id)
        current = self._open.get(element_id)
        if ratio > 0:
            if current is None:
                self._open[element_id] = VisibilitySession(
                    element_id=element_id, entered_at=at, max_ratio=ratio
                )
            elif ratio > current.max_ratio:
                self._open[element_id] = replace(current, max_ratio=ratio)
        elif current is not None:
            self._closed[element_id].append(replace(current, exited_at=max(at, current.entered_at)))
            del self._open[element_id]

    def feed(self, observations: Iterable[Observation]) -> None:
        """Apply VisibilityChange observations in (timestamp, arrival) order."""
        changes = sorted(
            (
                (obs.timestamp, obs.seq, obs.payload)
                for obs in observations
                if isinstance(obs.payload, VisibilityChange)
            ),
            key=lambda item: item[:2],
        )
        for timestamp, _, change in changes:
            self.observe(change.element_id, change.ratio, timestamp)

    def close(self, at: float) -> None:
        """Close every open session at ``at``. Only the first call has an effect."""
        if self._closed_at is not None:
            return
        for element_id, current in self._open.items():
            self._closed[element_id].append(replace(current, exited_at=max(at, current.entered_at)))
        self._open.clear()
        self._closed_at = at

    def open_session(self, element_id: str) -> VisibilitySession | None:
        return self._open.get(element_id)

    def sessions(self, element_id: str) -> tuple[VisibilitySession, ...]:
        """Closed sessions of one element, oldest first."""
        return tuple(self._closed.get(element_id, ()))

    def records(self) -> list[DwellRecord]:
        """Per-element dwell totals, in tracking order."""
        result: list[DwellRecord] = []
        for element_id in self._elements:
            sessions = self.sessions(element_id)
            result.append(
                DwellRecord(
                    element_id=element_id,
                    total_dwell_ms=sum(s.duration for s in sessions),
                    max_ratio=max((s.max_ratio for s in sessions), default=0.0),
                    sessions=sessions,
                )
            )
        return result

"""In-memory observation log.

Append-only while a session collects, immutable once frozen at harvest.

Usage:
    log = ObservationLog()
    log.append(Observation.of(LayoutShift(value=0.02), timestamp=100.0))
    log.freeze()
    shifts = log.of_kind(ObservationKind.LAYOUT_SHIFT)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace

from vitalscope.core.observation import Observation, ObservationKind


class FrozenLogError(Exception):
    """Raised when appending to a log that has been frozen by a harvest."""


class ObservationLog:
    """Arrival-ordered observation storage with a per-kind index.

    Structure:
        _entries[seq] = observation
        _by_kind[kind] = [observation, ...]   (arrival order)

    Each appended observation is stamped with its arrival index (``seq``),
    which later serves as the deterministic tie-breaker between equal
    timestamps from different streams.
    """

    def __init__(self) -> None:
        self._entries: list[Observation] = []
        self._by_kind: dict[ObservationKind, list[Observation]] = {}
        self._frozen: tuple[Observation, ...] | None = None

    @property
    def frozen(self) -> bool:
        return self._frozen is not None

    def append(self, observation: Observation) -> Observation:
        """Stamp and store an observation.

        Returns:
            The stored observation (a copy carrying its arrival ``seq``).

        Raises:
            FrozenLogError: If the log has been frozen.
        """
        if self._frozen is not None:
            raise FrozenLogError("Observation log is frozen; start a new session to collect")
        stored = replace(observation, seq=len(self._entries))
        self._entries.append(stored)
        self._by_kind.setdefault(stored.kind, []).append(stored)
        return stored

    def freeze(self) -> tuple[Observation, ...]:
        """Make the log read-only and return its contents. Idempotent."""
        if self._frozen is None:
            self._frozen = tuple(self._entries)
        return self._frozen

    def snapshot(self) -> tuple[Observation, ...]:
        """Current contents as an immutable tuple."""
        if self._frozen is not None:
            return self._frozen
        return tuple(self._entries)

    def of_kind(self, kind: ObservationKind) -> list[Observation]:
        """Observations of one kind, in arrival order."""
        return list(self._by_kind.get(kind, ()))

    def kinds(self) -> frozenset[ObservationKind]:
        """Kinds with at least one observation."""
        return frozenset(self._by_kind)

    def latest_timestamp(self) -> float:
        """Largest observation end time, 0.0 when empty."""
        return max((obs.end for obs in self._entries), default=0.0)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self.snapshot())

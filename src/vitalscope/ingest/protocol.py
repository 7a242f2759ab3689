"""Protocols for the ingestion boundary.

Adapters translate raw platform callback payloads into observations and hand
them to a sink (the owning Session). The engine never calls adapters itself;
the driver forwards each callback as it arrives.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from vitalscope.core.observation import Observation, ObservationKind
    from vitalscope.session.resolver import SubtreeResolver


RawEntries = Mapping[str, Any] | Iterable[Mapping[str, Any]]
"""One raw entry or a batch of them, as delivered by one callback."""


class ObservationSink(Protocol):
    """What an adapter needs from the session it is bound to."""

    @property
    def resolver(self) -> SubtreeResolver:
        """Session-scoped subtree resolver."""
        ...

    def record(self, observation: Observation) -> Observation | None:
        """Append to the session log. Returns the stored copy, None if dropped."""
        ...


@runtime_checkable
class ObservationAdapter(Protocol):
    """Translator for exactly one platform observation stream.

    Usage:
        adapter = LayoutShiftAdapter()
        adapter.bind(session)
        adapter.handle(entries)  # called from the driver's callback bridge
    """

    @property
    def kind(self) -> ObservationKind:
        """Stream this adapter translates."""
        ...

    def bind(self, sink: ObservationSink) -> None:
        """Attach to a session; subsequent entries are recorded there."""
        ...

    def unbind(self) -> None:
        """Detach; subsequent entries are ignored."""
        ...

    def handle(self, entries: RawEntries) -> list[Observation]:
        """Translate and record one callback's worth of entries.

        Returns:
            Observations actually recorded, in arrival order.
        """
        ...

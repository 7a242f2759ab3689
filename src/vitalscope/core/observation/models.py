"""Observation models: one normalized event per platform callback entry.

Usage:
    shift = Observation.of(LayoutShift(value=0.05), timestamp=1200.0)
    assert shift.kind is ObservationKind.LAYOUT_SHIFT

The payload type determines the kind. Payloads are frozen dataclasses so
observations can be shared freely once the session log is frozen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ObservationKind(Enum):
    """Discriminator for the observation payload."""

    LAYOUT_SHIFT = "layout-shift"
    PAINT_CANDIDATE = "paint-candidate"
    INTERACTION_TIMING = "interaction-timing"
    MUTATION = "mutation"
    LONG_FRAME = "long-frame"
    VISIBILITY_CHANGE = "visibility-change"
    CONSOLE_ENTRY = "console-entry"


@dataclass(frozen=True, slots=True)
class Rect:
    """Bounding box in CSS pixels."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class ShiftSource:
    """One element that moved during a layout shift.

    Attributes:
        subtree_id: Resolved identifier of the moved node (None if unresolved).
        previous_rect: Box before the shift.
        current_rect: Box after the shift.
    """

    subtree_id: str | None
    previous_rect: Rect | None = None
    current_rect: Rect | None = None


@dataclass(frozen=True, slots=True)
class LayoutShift:
    value: float
    had_recent_input: bool = False
    sources: tuple[ShiftSource, ...] = ()

    @property
    def attributable(self) -> bool:
        """True if at least one source resolved to a subtree."""
        return any(source.subtree_id is not None for source in self.sources)

    def source_ids(self) -> tuple[str, ...]:
        """Resolved source subtree ids, in reported order, without duplicates."""
        seen: dict[str, None] = {}
        for source in self.sources:
            if source.subtree_id is not None:
                seen.setdefault(source.subtree_id, None)
        return tuple(seen)


@dataclass(frozen=True, slots=True)
class PaintCandidate:
    """A largest-contentful-paint candidate."""

    size: float = 0.0
    render_time: float = 0.0
    load_time: float = 0.0
    element_id: str | None = None
    url: str = ""


@dataclass(frozen=True, slots=True)
class InteractionTiming:
    """Event timing entry for one input event.

    Attributes:
        name: Event type (click, keydown, pointerup, ...).
        start_time: When the input happened.
        processing_start: When the first handler started.
        processing_end: When the last handler finished.
        duration: Input to next paint, as reported by the platform.
        interaction_id: Platform interaction grouping id (0 = not an interaction).
    """

    name: str
    start_time: float
    processing_start: float
    processing_end: float
    duration: float
    interaction_id: int = 0

    @property
    def input_delay(self) -> float:
        return self.processing_start - self.start_time

    @property
    def processing_time(self) -> float:
        return self.processing_end - self.processing_start

    @property
    def presentation_delay(self) -> float:
        return (self.start_time + self.duration) - self.processing_end


@dataclass(frozen=True, slots=True)
class Mutation:
    added: int = 0
    removed: int = 0
    attribute_changed: bool = False
    attribute_name: str | None = None


@dataclass(frozen=True, slots=True)
class ScriptAttribution:
    """Script that ran during a long frame."""

    source_url: str = ""
    invoker: str = ""
    duration: float = 0.0


@dataclass(frozen=True, slots=True)
class LongFrame:
    duration: float
    blocking_duration: float = 0.0
    scripts: tuple[ScriptAttribution, ...] = ()


@dataclass(frozen=True, slots=True)
class VisibilityChange:
    element_id: str
    ratio: float


@dataclass(frozen=True, slots=True)
class ConsoleEntry:
    level: str
    text: str = ""


Payload = (
    LayoutShift
    | PaintCandidate
    | InteractionTiming
    | Mutation
    | LongFrame
    | VisibilityChange
    | ConsoleEntry
)

PAYLOAD_KINDS: dict[type, ObservationKind] = {
    LayoutShift: ObservationKind.LAYOUT_SHIFT,
    PaintCandidate: ObservationKind.PAINT_CANDIDATE,
    InteractionTiming: ObservationKind.INTERACTION_TIMING,
    Mutation: ObservationKind.MUTATION,
    LongFrame: ObservationKind.LONG_FRAME,
    VisibilityChange: ObservationKind.VISIBILITY_CHANGE,
    ConsoleEntry: ObservationKind.CONSOLE_ENTRY,
}


@dataclass(frozen=True, slots=True)
class Observation:
    """One normalized event.

    Attributes:
        kind: Which stream this came from; must agree with the payload type.
        timestamp: Platform timestamp in milliseconds, unmodified.
        payload: Kind-specific fields.
        subtree_id: Resolved subtree of origin, if any.
        seq: Arrival index within the owning session log.
    """

    kind: ObservationKind
    timestamp: float
    payload: Payload
    subtree_id: str | None = None
    seq: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        expected = PAYLOAD_KINDS.get(type(self.payload))
        if expected is not self.kind:
            raise TypeError(
                f"{type(self.payload).__name__} payload cannot back a {self.kind.value} observation"
            )

    @classmethod
    def of(cls, payload: Payload, timestamp: float, subtree_id: str | None = None) -> Observation:
        """Build an observation, deriving the kind from the payload type."""
        try:
            kind = PAYLOAD_KINDS[type(payload)]
        except KeyError:
            raise TypeError(f"Unknown payload type: {type(payload).__name__}") from None
        return cls(kind=kind, timestamp=timestamp, payload=payload, subtree_id=subtree_id)

    @property
    def duration(self) -> float:
        """Interval length; zero for instantaneous kinds."""
        if isinstance(self.payload, LongFrame | InteractionTiming):
            return max(0.0, self.payload.duration)
        return 0.0

    @property
    def end(self) -> float:
        return self.timestamp + self.duration

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable summary (payload fields flattened)."""
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "timestamp": self.timestamp,
            "seq": self.seq,
        }
        if self.subtree_id is not None:
            result["subtree_id"] = self.subtree_id
        if self.duration:
            result["duration"] = self.duration
        return result

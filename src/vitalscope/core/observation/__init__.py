"""Normalized observation records."""

from vitalscope.core.observation.models import (
    PAYLOAD_KINDS,
    ConsoleEntry,
    InteractionTiming,
    LayoutShift,
    LongFrame,
    Mutation,
    Observation,
    ObservationKind,
    PaintCandidate,
    Payload,
    Rect,
    ScriptAttribution,
    ShiftSource,
    VisibilityChange,
)

__all__ = [
    "PAYLOAD_KINDS",
    "Observation",
    "ObservationKind",
    "Payload",
    "LayoutShift",
    "ShiftSource",
    "Rect",
    "PaintCandidate",
    "InteractionTiming",
    "Mutation",
    "LongFrame",
    "ScriptAttribution",
    "VisibilityChange",
    "ConsoleEntry",
]

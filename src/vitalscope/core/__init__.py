"""Core functionalities: stateless models and pure operations.

Architecture Note:
    core/ contains pure, stateless building blocks: observation records,
    identity labelling, temporal correlation and contrast math.
    For stateful services, see session/ and aggregation/.
"""

from vitalscope.core.contrast import (
    Color,
    ColorSample,
    ConformanceLevel,
    ContrastFinding,
    contrast_ratio,
    parse_color,
)
from vitalscope.core.correlation import Correlation, correlate, merge_streams
from vitalscope.core.identity import NodeDescriptor, subtree_path
from vitalscope.core.observation import (
    ConsoleEntry,
    InteractionTiming,
    LayoutShift,
    LongFrame,
    Mutation,
    Observation,
    ObservationKind,
    PaintCandidate,
    Rect,
    ScriptAttribution,
    ShiftSource,
    VisibilityChange,
)
from vitalscope.core.types import Milliseconds

__all__ = [
    # Types
    "Milliseconds",
    # Observation
    "Observation",
    "ObservationKind",
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
    # Identity
    "NodeDescriptor",
    "subtree_path",
    # Correlation
    "Correlation",
    "correlate",
    "merge_streams",
    # Contrast
    "Color",
    "ColorSample",
    "ConformanceLevel",
    "ContrastFinding",
    "contrast_ratio",
    "parse_color",
]

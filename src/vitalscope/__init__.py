"""vitalscope: telemetry correlation and scoring engine for live web pages.

Usage:
    from vitalscope import DEFAULT_RUBRIC, ObservationKind, Session, score

    session = Session()
    session.track("#hero")
    session.start()

    # Forward raw platform entries from the automation driver
    session.feed(ObservationKind.LAYOUT_SHIFT, [{"startTime": 812.4, "value": 0.05}])
    session.feed(ObservationKind.LONG_FRAME, [{"startTime": 900.0, "duration": 120.0}])

    snapshot = session.harvest()
    card = score(snapshot, DEFAULT_RUBRIC)
    print(card.grade, snapshot.value("cls"))
"""

import logging

__version__ = "0.1.0"

# Aggregation
from vitalscope.aggregation import (
    Aggregator,
    DwellRecord,
    InteractionBreakdown,
    Metric,
    MetricSnapshot,
    SubtreeChurn,
    VisibilitySession,
    VisibilityTracker,
)

# Configuration
from vitalscope.config import EngineSettings

# Core primitives
from vitalscope.core import (
    Color,
    ColorSample,
    ConformanceLevel,
    ContrastFinding,
    Correlation,
    NodeDescriptor,
    Observation,
    ObservationKind,
    contrast_ratio,
    correlate,
    merge_streams,
    parse_color,
)

# Ingestion
from vitalscope.ingest import ObservationAdapter, default_adapters

# Scoring
from vitalscope.scoring import (
    DEFAULT_RUBRIC,
    Band,
    Category,
    Rubric,
    ScoreCard,
    Scorer,
    grade_for,
    score,
)

# Session
from vitalscope.session import FrozenLogError, Session, SessionState, SubtreeResolver

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Core
    "Observation",
    "ObservationKind",
    "NodeDescriptor",
    "Correlation",
    "correlate",
    "merge_streams",
    "Color",
    "ColorSample",
    "ConformanceLevel",
    "ContrastFinding",
    "contrast_ratio",
    "parse_color",
    # Config
    "EngineSettings",
    # Ingestion
    "ObservationAdapter",
    "default_adapters",
    # Session
    "Session",
    "SessionState",
    "SubtreeResolver",
    "FrozenLogError",
    # Aggregation
    "Aggregator",
    "Metric",
    "MetricSnapshot",
    "InteractionBreakdown",
    "SubtreeChurn",
    "VisibilitySession",
    "VisibilityTracker",
    "DwellRecord",
    # Scoring
    "Band",
    "Category",
    "Rubric",
    "ScoreCard",
    "Scorer",
    "DEFAULT_RUBRIC",
    "grade_for",
    "score",
]

"""Aggregation: observation log in, MetricSnapshot out.

Architecture Note:
    The Aggregator itself is pure. The only stateful piece is the
    VisibilityTracker state machine, which is rebuilt from the log on every
    harvest so repeated harvests never double-count dwell time.
"""

from vitalscope.aggregation.aggregator import (
    Aggregator,
    breakdown,
    cumulative_layout_shift,
    largest_paint_time,
    mutation_churn,
    percentile,
    shift_offenders,
    total_blocking_time,
)
from vitalscope.aggregation.models import (
    METRIC_UNITS,
    DwellRecord,
    InteractionBreakdown,
    Metric,
    MetricSnapshot,
    ShiftOffender,
    SubtreeChurn,
    VisibilitySession,
)
from vitalscope.aggregation.visibility import VisibilityTracker

__all__ = [
    # Models
    "METRIC_UNITS",
    "Metric",
    "MetricSnapshot",
    "InteractionBreakdown",
    "SubtreeChurn",
    "ShiftOffender",
    "VisibilitySession",
    "DwellRecord",
    # Services
    "Aggregator",
    "VisibilityTracker",
    # Operations
    "cumulative_layout_shift",
    "percentile",
    "breakdown",
    "mutation_churn",
    "shift_offenders",
    "largest_paint_time",
    "total_blocking_time",
]

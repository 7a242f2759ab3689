"""Correlation functionality: window matching and dominant-subtree attribution."""

from vitalscope.core.correlation.models import Correlation, Matcher
from vitalscope.core.correlation.operations import (
    attribute_layout_shifts,
    attribute_long_frames,
    attribute_visibility_changes,
    correlate,
    dominant_subtree,
    merge_streams,
    same_subtree,
    shift_source_matches_contributor,
    shift_source_matches_element,
    window_for,
)

__all__ = [
    # Models
    "Correlation",
    "Matcher",
    # Operations
    "correlate",
    "merge_streams",
    "window_for",
    "dominant_subtree",
    # Matchers
    "same_subtree",
    "shift_source_matches_contributor",
    "shift_source_matches_element",
    # Presets
    "attribute_long_frames",
    "attribute_layout_shifts",
    "attribute_visibility_changes",
]

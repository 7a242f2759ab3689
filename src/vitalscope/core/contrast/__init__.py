"""Contrast functionality: color parsing, luminance and WCAG classification."""

from vitalscope.core.contrast.models import (
    Color,
    ColorSample,
    ConformanceLevel,
    ContrastFinding,
)
from vitalscope.core.contrast.operations import (
    AA_LARGE,
    AA_NORMAL,
    AAA_LARGE,
    AAA_NORMAL,
    classify,
    contrast_ratio,
    evaluate,
    non_responsive_elements,
    parse_color,
    relative_luminance,
)

__all__ = [
    # Models
    "Color",
    "ColorSample",
    "ConformanceLevel",
    "ContrastFinding",
    # Thresholds
    "AA_NORMAL",
    "AA_LARGE",
    "AAA_NORMAL",
    "AAA_LARGE",
    # Operations
    "parse_color",
    "relative_luminance",
    "contrast_ratio",
    "classify",
    "evaluate",
    "non_responsive_elements",
]

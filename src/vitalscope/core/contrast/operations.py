"""WCAG contrast evaluation.

Usage:
    ratio = contrast_ratio(parse_color("rgb(153,153,153)"), parse_color("#fff"))
    classify(ratio, large_text=False)  # ConformanceLevel.FAIL (~2.85:1)
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from vitalscope.core.contrast.models import (
    WHITE,
    Color,
    ColorSample,
    ConformanceLevel,
    ContrastFinding,
)

AA_NORMAL = 4.5
AA_LARGE = 3.0
AAA_NORMAL = 7.0
AAA_LARGE = 4.5

_FUNCTIONAL = re.compile(r"^rgba?\(\s*([^)]*)\)$", re.IGNORECASE)
_HEX = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)


def parse_color(value: str) -> Color:
    """Parse ``rgb()``, ``rgba()``, ``#rgb[a]``, ``#rrggbb[aa]`` or ``transparent``.

    Raises:
        ValueError: If the value is not a recognized color.
    """
    text = value.strip()
    if text.lower() == "transparent":
        return Color(0, 0, 0, 0.0)

    hex_match = _HEX.match(text)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
        alpha = channels[3] / 255 if len(channels) == 4 else 1.0
        return Color(channels[0], channels[1], channels[2], alpha)

    func_match = _FUNCTIONAL.match(text)
    if func_match:
        parts = [p for p in re.split(r"[\s,/]+", func_match.group(1).strip()) if p]
        if len(parts) in (3, 4):
            try:
                r, g, b = (_channel(p) for p in parts[:3])
                alpha = _alpha(parts[3]) if len(parts) == 4 else 1.0
            except ValueError:
                pass
            else:
                return Color(r, g, b, alpha)

    raise ValueError(f"Unrecognized color: {value!r}")


def _channel(part: str) -> int:
    if part.endswith("%"):
        return round(min(100.0, max(0.0, float(part[:-1]))) * 2.55)
    return round(min(255.0, max(0.0, float(part))))


def _alpha(part: str) -> float:
    if part.endswith("%"):
        return min(1.0, max(0.0, float(part[:-1]) / 100))
    return min(1.0, max(0.0, float(part)))


def _linear(channel: int) -> float:
    c = channel / 255
    if c <= 0.04045:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: Color) -> float:
    """WCAG relative luminance of an opaque color."""
    return 0.2126 * _linear(color.r) + 0.7152 * _linear(color.g) + 0.0722 * _linear(color.b)


def contrast_ratio(foreground: Color, background: Color) -> float:
    """Contrast ratio (L1 + 0.05) / (L2 + 0.05) with L1 the lighter luminance.

    Translucent backgrounds are composited over white, translucent text over
    the resulting background.
    """
    backdrop = background.over(WHITE)
    text = foreground.over(backdrop)
    lighter, darker = sorted(
        (relative_luminance(text), relative_luminance(backdrop)), reverse=True
    )
    return (lighter + 0.05) / (darker + 0.05)


def classify(ratio: float, large_text: bool = False) -> ConformanceLevel:
    aaa, aa = (AAA_LARGE, AA_LARGE) if large_text else (AAA_NORMAL, AA_NORMAL)
    if ratio >= aaa:
        return ConformanceLevel.AAA
    if ratio >= aa:
        return ConformanceLevel.AA
    return ConformanceLevel.FAIL


def evaluate(sample: ColorSample) -> ContrastFinding:
    ratio = contrast_ratio(sample.foreground, sample.background)
    return ContrastFinding(
        element_id=sample.element_id,
        scheme=sample.scheme,
        ratio=ratio,
        level=classify(ratio, sample.large_text),
        large_text=sample.large_text,
    )


def non_responsive_elements(samples: Iterable[ColorSample]) -> list[str]:
    """Elements sampled in two or more schemes whose colors never changed.

    Returned in first-sampled order.
    """
    schemes: dict[str, set[str]] = {}
    pairs: dict[str, set[tuple[Color, Color]]] = {}
    for sample in samples:
        schemes.setdefault(sample.element_id, set()).add(sample.scheme)
        pairs.setdefault(sample.element_id, set()).add((sample.foreground, sample.background))
    return [
        element_id
        for element_id, seen in schemes.items()
        if len(seen) >= 2 and len(pairs[element_id]) == 1
    ]

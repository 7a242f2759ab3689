"""Color and contrast models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

LARGE_TEXT_PX = 24.0
LARGE_BOLD_TEXT_PX = 18.66
BOLD_WEIGHT = 700


class ConformanceLevel(Enum):
    """Highest WCAG contrast level a sample reaches."""

    AAA = "AAA"
    AA = "AA"
    FAIL = "FAIL"


@dataclass(frozen=True, slots=True)
class Color:
    """sRGB color with 0-255 channels and 0-1 alpha."""

    r: int
    g: int
    b: int
    a: float = 1.0

    def over(self, backdrop: Color) -> Color:
        """Composite this color over an opaque backdrop."""
        if self.a >= 1.0:
            return Color(self.r, self.g, self.b)
        alpha = max(0.0, self.a)
        return Color(
            round(self.r * alpha + backdrop.r * (1 - alpha)),
            round(self.g * alpha + backdrop.g * (1 - alpha)),
            round(self.b * alpha + backdrop.b * (1 - alpha)),
        )

    def css(self) -> str:
        if self.a >= 1.0:
            return f"rgb({self.r}, {self.g}, {self.b})"
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a:g})"


WHITE = Color(255, 255, 255)


@dataclass(frozen=True, slots=True)
class ColorSample:
    """Computed text colors of one element in one color-scheme state.

    Attributes:
        element_id: Resolved identifier of the text element.
        scheme: Color-scheme state the sample was taken in ("light", "dark").
        foreground: Computed ``color``.
        background: Effective background color behind the text.
        font_size_px: Computed font size in CSS pixels.
        font_weight: Numeric computed font weight.
    """

    element_id: str
    scheme: str
    foreground: Color
    background: Color
    font_size_px: float = 16.0
    font_weight: int = 400

    @property
    def large_text(self) -> bool:
        if self.font_size_px >= LARGE_TEXT_PX:
            return True
        return self.font_weight >= BOLD_WEIGHT and self.font_size_px >= LARGE_BOLD_TEXT_PX


@dataclass(frozen=True, slots=True)
class ContrastFinding:
    element_id: str
    scheme: str
    ratio: float
    level: ConformanceLevel
    large_text: bool = False

    @property
    def passes_aa(self) -> bool:
        return self.level is not ConformanceLevel.FAIL

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "scheme": self.scheme,
            "ratio": round(self.ratio, 2),
            "level": self.level.value,
            "large_text": self.large_text,
        }

"""Scoring models and rubric configuration.

A Rubric maps snapshot metrics to category scores through ordered bands.
Rubrics are plain frozen data so they can be declared in code or loaded from
parsed YAML/JSON via ``Rubric.from_dict``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Band:
    """One (threshold, score) step of a category.

    For lower-is-better categories a band matches values strictly below its
    threshold, so a value equal to a threshold falls into the next band.
    """

    threshold: float
    """Upper bound (exclusive) or, for higher-is-better, lower bound (inclusive)."""

    score: float
    """Score awarded when this band is the first match."""

    label: str = ""
    """Human-readable rating, e.g. "good" or "needs-improvement"."""

    def matches(self, value: float, higher_is_better: bool = False) -> bool:
        if higher_is_better:
            return value >= self.threshold
        return value < self.threshold


@dataclass(frozen=True, slots=True)
class Category:
    """A scored category backed by one snapshot metric."""

    name: str
    """Category name as shown on the score card."""

    metric: str
    """Snapshot metric name this category reads."""

    bands: tuple[Band, ...]
    """Evaluated in the order supplied; first match wins."""

    weight: float = 1.0
    """Relative weight in the composite."""

    higher_is_better: bool = False
    """Flip band matching for metrics where bigger values are better."""

    def __post_init__(self) -> None:
        if not self.bands:
            raise ValueError(f"Category {self.name!r} needs at least one band")
        if self.weight < 0 or math.isnan(self.weight):
            raise ValueError(f"Category {self.name!r} has invalid weight {self.weight}")

    @property
    def max_score(self) -> float:
        return max(band.score for band in self.bands)

    def band_for(self, value: float) -> Band | None:
        for band in self.bands:
            if band.matches(value, self.higher_is_better):
                return band
        return None


@dataclass(frozen=True, slots=True)
class Rubric:
    """Named set of categories.

    Usage:
        rubric = Rubric.from_dict({
            "name": "vitals",
            "categories": [
                {"name": "Layout stability", "metric": "cls", "weight": 2,
                 "bands": [[0.1, 10, "good"], [0.25, 5, "needs-improvement"],
                           [float("inf"), 0, "poor"]]},
            ],
        })
    """

    name: str
    categories: tuple[Category, ...]

    def __post_init__(self) -> None:
        if not self.categories:
            raise ValueError(f"Rubric {self.name!r} needs at least one category")
        names = [c.name for c in self.categories]
        if len(set(names)) != len(names):
            raise ValueError(f"Rubric {self.name!r} has duplicate category names")

    @property
    def max_score(self) -> float:
        """Highest band score across categories (the composite's 100%)."""
        return max(category.max_score for category in self.categories)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Rubric:
        """Create from plain mappings (for rubrics kept in config files).

        Bands may be mappings with ``threshold``/``score``/``label`` keys or
        ``[threshold, score]`` / ``[threshold, score, label]`` sequences.
        """
        categories = []
        for raw in data["categories"]:
            bands = []
            for raw_band in raw["bands"]:
                if isinstance(raw_band, Mapping):
                    bands.append(
                        Band(
                            threshold=float(raw_band["threshold"]),
                            score=float(raw_band["score"]),
                            label=str(raw_band.get("label", "")),
                        )
                    )
                else:
                    threshold, score, *rest = raw_band
                    bands.append(
                        Band(float(threshold), float(score), str(rest[0]) if rest else "")
                    )
            categories.append(
                Category(
                    name=raw["name"],
                    metric=raw.get("metric", raw["name"]),
                    bands=tuple(bands),
                    weight=float(raw.get("weight", 1.0)),
                    higher_is_better=bool(raw.get("higher_is_better", False)),
                )
            )
        return cls(name=data.get("name", "custom"), categories=tuple(categories))


@dataclass(frozen=True, slots=True)
class CategoryScore:
    """Score of one category.

    ``score`` and ``value`` are None when the backing metric is unavailable;
    such categories are left out of the composite.
    """

    name: str
    metric: str
    value: float | None
    score: float | None
    max_score: float
    weight: float
    label: str | None = None

    @property
    def available(self) -> bool:
        return self.score is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "metric": self.metric,
            "value": self.value,
            "score": self.score,
            "max_score": self.max_score,
            "weight": self.weight,
            "label": self.label,
        }


@dataclass(frozen=True, slots=True)
class ScoreCard:
    """Snapshot mapped through a rubric.

    Attributes:
        rubric: Name of the rubric used.
        categories: Per-category scores in rubric order.
        composite: Weighted score rescaled to 0-100 (None if nothing was scorable).
        grade: Letter grade for the composite (None if nothing was scorable).
    """

    rubric: str
    categories: tuple[CategoryScore, ...]
    composite: float | None
    grade: str | None

    def category(self, name: str) -> CategoryScore | None:
        for category in self.categories:
            if category.name == name:
                return category
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "rubric": self.rubric,
            "categories": [c.to_dict() for c in self.categories],
            "composite": self.composite,
            "grade": self.grade,
        }

"""Snapshot scoring.

Usage:
    card = score(snapshot, DEFAULT_RUBRIC)
    print(card.composite, card.grade)

Scoring is pure: the same snapshot and rubric always give an equal card.
"""

from __future__ import annotations

import math

from vitalscope.aggregation import MetricSnapshot
from vitalscope.scoring.models import Category, CategoryScore, Rubric, ScoreCard
from vitalscope.scoring.rubrics import DEFAULT_RUBRIC

GRADE_BANDS: tuple[tuple[float, str], ...] = (
    (90.0, "A"),
    (75.0, "B"),
    (50.0, "C"),
    (25.0, "D"),
)
"""(minimum composite, grade), highest first; anything lower is F."""


def grade_for(composite: float) -> str:
    """Letter grade for a 0-100 composite."""
    for minimum, grade in GRADE_BANDS:
        if composite >= minimum:
            return grade
    return "F"


def score_category(category: Category, snapshot: MetricSnapshot) -> CategoryScore:
    value = snapshot.value(category.metric)
    if value is None or math.isnan(value):
        return CategoryScore(
            name=category.name,
            metric=category.metric,
            value=None,
            score=None,
            max_score=category.max_score,
            weight=category.weight,
        )
    band = category.band_for(value)
    return CategoryScore(
        name=category.name,
        metric=category.metric,
        value=value,
        score=band.score if band is not None else 0.0,
        max_score=category.max_score,
        weight=category.weight,
        label=band.label if band is not None else None,
    )


def score(snapshot: MetricSnapshot, rubric: Rubric = DEFAULT_RUBRIC) -> ScoreCard:
    """Map a snapshot through a rubric.

    Composite = sum(score * weight) / sum(weight) over categories whose
    metric is available, rescaled to 0-100 by the rubric's top band score.
    """
    categories = tuple(score_category(category, snapshot) for category in rubric.categories)
    scored = [c for c in categories if c.score is not None]
    total_weight = math.fsum(c.weight for c in scored)

    composite: float | None = None
    grade: str | None = None
    ceiling = rubric.max_score
    if scored and total_weight > 0 and ceiling > 0:
        weighted = math.fsum(c.score * c.weight for c in scored if c.score is not None)
        composite = round(weighted / total_weight / ceiling * 100, 6)
        grade = grade_for(composite)

    return ScoreCard(rubric=rubric.name, categories=categories, composite=composite, grade=grade)


class Scorer:
    """Scorer bound to a default rubric.

    Args:
        rubric: Rubric used when ``score`` is called without one.
    """

    def __init__(self, rubric: Rubric = DEFAULT_RUBRIC):
        self._rubric = rubric

    @property
    def rubric(self) -> Rubric:
        return self._rubric

    def score(self, snapshot: MetricSnapshot, rubric: Rubric | None = None) -> ScoreCard:
        return score(snapshot, rubric or self._rubric)

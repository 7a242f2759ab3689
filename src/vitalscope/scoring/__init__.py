"""Scoring: MetricSnapshot through a Rubric into a ScoreCard."""

from vitalscope.scoring.models import Band, Category, CategoryScore, Rubric, ScoreCard
from vitalscope.scoring.rubrics import DEFAULT_RUBRIC, three_step
from vitalscope.scoring.scorer import GRADE_BANDS, Scorer, grade_for, score, score_category

__all__ = [
    # Models
    "Band",
    "Category",
    "Rubric",
    "CategoryScore",
    "ScoreCard",
    # Rubrics
    "DEFAULT_RUBRIC",
    "three_step",
    # Operations
    "GRADE_BANDS",
    "grade_for",
    "score",
    "score_category",
    "Scorer",
]

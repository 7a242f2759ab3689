"""Built-in rubrics.

Thresholds for the vitals follow the web-vitals good / needs-improvement /
poor boundaries; each category scores 10, 5 or 0.
"""

from __future__ import annotations

from vitalscope.scoring.models import Band, Category, Rubric

INF = float("inf")


def three_step(good: float, poor: float) -> tuple[Band, ...]:
    """Bands for a lower-is-better metric: good < ``good`` <= NI < ``poor`` <= poor."""
    return (
        Band(good, 10.0, "good"),
        Band(poor, 5.0, "needs-improvement"),
        Band(INF, 0.0, "poor"),
    )


DEFAULT_RUBRIC = Rubric(
    name="default",
    categories=(
        Category("Layout stability", "cls", three_step(0.1, 0.25), weight=2.0),
        Category("Responsiveness", "inp", three_step(200.0, 500.0), weight=2.0),
        Category("Loading", "lcp", three_step(2500.0, 4000.0), weight=2.0),
        Category("Main-thread blocking", "total_blocking_time", three_step(200.0, 600.0)),
        Category("DOM churn", "churn_rate", three_step(5.0, 20.0)),
        Category("Contrast", "contrast_failures", three_step(1.0, 4.0)),
        Category("Exposure", "never_seen", three_step(1.0, 3.0), weight=0.5),
        Category("Console health", "console_errors", three_step(1.0, 5.0), weight=0.5),
    ),
)

"""Correlation models.

A Correlation links one primary observation (a long frame, a layout shift,
a visibility transition) to the contributor observations whose timestamps
fall inside the primary's time window.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from vitalscope.core.observation import Observation

Matcher = Callable[[Observation, Observation], bool]
"""Signature: (primary, contributor) -> keep contributor"""


@dataclass(frozen=True, slots=True)
class Correlation:
    """Derived linkage between a primary observation and a time window.

    Attributes:
        window_start: Inclusive window start (ms).
        window_end: Inclusive window end (ms).
        primary: Observation that defines the window.
        contributors: Observations inside the window, in time order.
        dominant_subtree_id: Contributor subtree with the highest count.
        subtree_counts: Contributor count per subtree, in first-seen order.
    """

    window_start: float
    window_end: float
    primary: Observation
    contributors: tuple[Observation, ...] = ()
    dominant_subtree_id: str | None = None
    subtree_counts: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.contributors

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "window_start": self.window_start,
            "window_end": self.window_end,
            "primary": self.primary.to_dict(),
            "contributor_count": len(self.contributors),
            "dominant_subtree_id": self.dominant_subtree_id,
            "subtree_counts": dict(self.subtree_counts),
        }

"""Pydantic schemas for raw platform entries.

Field names follow the browser APIs (camelCase), so drivers can forward what
``PerformanceObserver``, ``MutationObserver`` and ``IntersectionObserver``
callbacks hand them without renaming. Unknown fields are ignored; optional
fields default so that partially populated entries still validate.

Node references (``node``, ``target``, ``element``) are kept as opaque values
and resolved by the session's SubtreeResolver.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RawEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class RawRect(RawEntry):
    x: float = Field(default=0.0, validation_alias=AliasChoices("x", "left"))
    y: float = Field(default=0.0, validation_alias=AliasChoices("y", "top"))
    width: float = 0.0
    height: float = 0.0


class RawShiftSource(RawEntry):
    node: Any = None
    previous_rect: RawRect | None = Field(default=None, alias="previousRect")
    current_rect: RawRect | None = Field(default=None, alias="currentRect")


class RawLayoutShift(RawEntry):
    """``layout-shift`` performance entry."""

    start_time: float = Field(alias="startTime")
    value: float
    had_recent_input: bool = Field(default=False, alias="hadRecentInput")
    sources: list[RawShiftSource] | None = None


class RawPaintCandidate(RawEntry):
    """``largest-contentful-paint`` performance entry."""

    start_time: float = Field(alias="startTime")
    size: float = 0.0
    render_time: float = Field(default=0.0, alias="renderTime")
    load_time: float = Field(default=0.0, alias="loadTime")
    element: Any = None
    id: str = ""
    url: str = ""


class RawEventTiming(RawEntry):
    """``event`` performance entry (Event Timing API)."""

    name: str = ""
    start_time: float = Field(alias="startTime")
    processing_start: float = Field(alias="processingStart")
    processing_end: float = Field(alias="processingEnd")
    duration: float
    interaction_id: int = Field(default=0, alias="interactionId")
    target: Any = None


class RawMutationRecord(RawEntry):
    """MutationRecord plus the time it was delivered."""

    timestamp: float = Field(validation_alias=AliasChoices("timestamp", "time"))
    type: str = "childList"
    target: Any = None
    added_nodes: list[Any] | int = Field(default=0, alias="addedNodes")
    removed_nodes: list[Any] | int = Field(default=0, alias="removedNodes")
    attribute_name: str | None = Field(default=None, alias="attributeName")

    @property
    def added_count(self) -> int:
        return self.added_nodes if isinstance(self.added_nodes, int) else len(self.added_nodes)

    @property
    def removed_count(self) -> int:
        if isinstance(self.removed_nodes, int):
            return self.removed_nodes
        return len(self.removed_nodes)


class RawScript(RawEntry):
    source_url: str = Field(
        default="", validation_alias=AliasChoices("sourceURL", "sourceUrl", "source_url")
    )
    invoker: str = ""
    duration: float = 0.0


class RawLongFrame(RawEntry):
    """``long-animation-frame`` (or ``longtask``) performance entry."""

    start_time: float = Field(alias="startTime")
    duration: float
    blocking_duration: float = Field(default=0.0, alias="blockingDuration")
    scripts: list[RawScript] = Field(default_factory=list)


class RawIntersection(RawEntry):
    """IntersectionObserverEntry for a tracked element."""

    time: float = Field(validation_alias=AliasChoices("time", "timestamp"))
    target: Any = None
    element_id: str | None = Field(default=None, alias="elementId")
    intersection_ratio: float = Field(default=0.0, alias="intersectionRatio")
    is_intersecting: bool | None = Field(default=None, alias="isIntersecting")

    @property
    def ratio(self) -> float:
        if self.is_intersecting is False:
            return 0.0
        return min(1.0, max(0.0, self.intersection_ratio))


class RawConsoleMessage(RawEntry):
    timestamp: float = Field(validation_alias=AliasChoices("timestamp", "time"))
    level: str = Field(default="log", validation_alias=AliasChoices("level", "type"))
    text: str = ""

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.lower()
        return "warning" if level == "warn" else level


class RawColorSample(RawEntry):
    """Computed text/background colors of one element in one scheme state."""

    element: Any = None
    element_id: str | None = Field(default=None, alias="elementId")
    scheme: str = "light"
    color: str
    background_color: str = Field(alias="backgroundColor")
    font_size: float = Field(default=16.0, alias="fontSize")
    font_weight: int = Field(default=400, alias="fontWeight")

    @field_validator("font_size", mode="before")
    @classmethod
    def _parse_px(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().endswith("px"):
            return value.strip()[:-2]
        return value

    @field_validator("font_weight", mode="before")
    @classmethod
    def _parse_weight(cls, value: Any) -> Any:
        if isinstance(value, str):
            keyword = value.strip().lower()
            if keyword == "bold":
                return 700
            if keyword == "normal":
                return 400
        return value

"""Event ingestion adapters, one per platform observation stream.

Usage:
    session = Session(adapters=default_adapters())
    session.start()
    session.feed(ObservationKind.LAYOUT_SHIFT, entries)  # forwards to the adapter

Adapters validate each raw entry, resolve node references through the
session's resolver and record the resulting observations in arrival order.
Timestamps are passed through exactly as the platform reported them.
Entries that fail validation are dropped with a warning; the rest of the
batch is still recorded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ValidationError

from vitalscope.core.observation import (
    ConsoleEntry,
    InteractionTiming,
    LayoutShift,
    LongFrame,
    Mutation,
    Observation,
    ObservationKind,
    PaintCandidate,
    Rect,
    ScriptAttribution,
    ShiftSource,
    VisibilityChange,
)
from vitalscope.ingest.protocol import ObservationSink, RawEntries
from vitalscope.ingest.schemas import (
    RawConsoleMessage,
    RawEventTiming,
    RawIntersection,
    RawLayoutShift,
    RawLongFrame,
    RawMutationRecord,
    RawPaintCandidate,
    RawRect,
)

if TYPE_CHECKING:
    from vitalscope.session.resolver import SubtreeResolver

logger = logging.getLogger(__name__)


def _rect(raw: RawRect | None) -> Rect | None:
    if raw is None:
        return None
    return Rect(x=raw.x, y=raw.y, width=raw.width, height=raw.height)


def _batch(entries: RawEntries) -> list[Any]:
    if isinstance(entries, Mapping):
        return [entries]
    return list(entries)


class BaseAdapter:
    """Shared validate-translate-record loop.

    Subclasses declare the stream ``kind``, the pydantic ``schema`` for one
    raw entry and implement ``translate``.
    """

    kind: ClassVar[ObservationKind]
    schema: ClassVar[type[BaseModel]]

    def __init__(self) -> None:
        self._sink: ObservationSink | None = None
        self._dropped = 0

    @property
    def bound(self) -> bool:
        return self._sink is not None

    @property
    def dropped(self) -> int:
        """Entries rejected as malformed since construction."""
        return self._dropped

    def bind(self, sink: ObservationSink) -> None:
        self._sink = sink

    def unbind(self) -> None:
        self._sink = None

    def handle(self, entries: RawEntries) -> list[Observation]:
        sink = self._sink
        if sink is None:
            logger.debug("%s adapter is not bound; ignoring entries", self.kind.value)
            return []

        recorded: list[Observation] = []
        for raw in _batch(entries):
            try:
                entry = self.schema.model_validate(raw)
            except ValidationError as e:
                self._dropped += 1
                logger.warning(
                    "Dropping malformed %s entry (%d validation errors)",
                    self.kind.value,
                    e.error_count(),
                )
                continue
            for observation in self.translate(entry, sink.resolver):
                stored = sink.record(observation)
                if stored is not None:
                    recorded.append(stored)
        return recorded

    def translate(self, entry: Any, resolver: SubtreeResolver) -> Iterable[Observation]:
        """Build observations from one validated entry."""
        raise NotImplementedError


class LayoutShiftAdapter(BaseAdapter):
    kind = ObservationKind.LAYOUT_SHIFT
    schema = RawLayoutShift

    def translate(self, entry: RawLayoutShift, resolver: SubtreeResolver) -> Iterable[Observation]:
        sources = tuple(
            ShiftSource(
                subtree_id=resolver.resolve(source.node) if source.node is not None else None,
                previous_rect=_rect(source.previous_rect),
                current_rect=_rect(source.current_rect),
            )
            for source in entry.sources or ()
        )
        payload = LayoutShift(
            value=entry.value,
            had_recent_input=entry.had_recent_input,
            sources=sources,
        )
        ids = payload.source_ids()
        yield Observation.of(payload, entry.start_time, subtree_id=ids[0] if ids else None)


class PaintCandidateAdapter(BaseAdapter):
    kind = ObservationKind.PAINT_CANDIDATE
    schema = RawPaintCandidate

    def translate(
        self, entry: RawPaintCandidate, resolver: SubtreeResolver
    ) -> Iterable[Observation]:
        element_id: str | None = None
        if entry.element is not None:
            element_id = resolver.resolve(entry.element)
        elif entry.id:
            element_id = f"#{entry.id}"
        payload = PaintCandidate(
            size=entry.size,
            render_time=entry.render_time,
            load_time=entry.load_time,
            element_id=element_id,
            url=entry.url,
        )
        yield Observation.of(payload, entry.start_time)


class InteractionTimingAdapter(BaseAdapter):
    kind = ObservationKind.INTERACTION_TIMING
    schema = RawEventTiming

    def translate(self, entry: RawEventTiming, resolver: SubtreeResolver) -> Iterable[Observation]:
        payload = InteractionTiming(
            name=entry.name,
            start_time=entry.start_time,
            processing_start=entry.processing_start,
            processing_end=entry.processing_end,
            duration=entry.duration,
            interaction_id=entry.interaction_id,
        )
        subtree_id = resolver.resolve(entry.target) if entry.target is not None else None
        yield Observation.of(payload, entry.start_time, subtree_id=subtree_id)


class MutationAdapter(BaseAdapter):
    """Translates MutationRecords and tells the resolver about removed nodes."""

    kind = ObservationKind.MUTATION
    schema = RawMutationRecord

    def translate(
        self, entry: RawMutationRecord, resolver: SubtreeResolver
    ) -> Iterable[Observation]:
        if isinstance(entry.removed_nodes, list):
            for node in entry.removed_nodes:
                resolver.forget(node)
        is_attribute = entry.type == "attributes"
        payload = Mutation(
            added=entry.added_count,
            removed=entry.removed_count,
            attribute_changed=is_attribute,
            attribute_name=entry.attribute_name if is_attribute else None,
        )
        subtree_id = resolver.resolve(entry.target) if entry.target is not None else None
        yield Observation.of(payload, entry.timestamp, subtree_id=subtree_id)


class LongFrameAdapter(BaseAdapter):
    kind = ObservationKind.LONG_FRAME
    schema = RawLongFrame

    def translate(self, entry: RawLongFrame, resolver: SubtreeResolver) -> Iterable[Observation]:
        payload = LongFrame(
            duration=entry.duration,
            blocking_duration=entry.blocking_duration,
            scripts=tuple(
                ScriptAttribution(
                    source_url=script.source_url,
                    invoker=script.invoker,
                    duration=script.duration,
                )
                for script in entry.scripts
            ),
        )
        yield Observation.of(payload, entry.start_time)


class VisibilityAdapter(BaseAdapter):
    """Translates intersection entries for tracked elements.

    The element id is the explicit ``elementId`` when given, otherwise the
    resolved path of the entry's target.
    """

    kind = ObservationKind.VISIBILITY_CHANGE
    schema = RawIntersection

    def translate(self, entry: RawIntersection, resolver: SubtreeResolver) -> Iterable[Observation]:
        element_id = entry.element_id or resolver.resolve(entry.target)
        payload = VisibilityChange(element_id=element_id, ratio=entry.ratio)
        yield Observation.of(payload, entry.time, subtree_id=element_id)


class ConsoleAdapter(BaseAdapter):
    kind = ObservationKind.CONSOLE_ENTRY
    schema = RawConsoleMessage

    def translate(
        self, entry: RawConsoleMessage, resolver: SubtreeResolver
    ) -> Iterable[Observation]:
        yield Observation.of(ConsoleEntry(level=entry.level, text=entry.text), entry.timestamp)


ADAPTER_TYPES: tuple[type[BaseAdapter], ...] = (
    LayoutShiftAdapter,
    PaintCandidateAdapter,
    InteractionTimingAdapter,
    MutationAdapter,
    LongFrameAdapter,
    VisibilityAdapter,
    ConsoleAdapter,
)


def default_adapters(exclude: Iterable[ObservationKind] = ()) -> list[BaseAdapter]:
    """One adapter per supported stream.

    Args:
        exclude: Streams the page cannot observe (e.g. no long-animation-frame
            support); their adapters are left out so the capability shows as
            absent rather than empty.
    """
    skipped = set(exclude)
    return [adapter_type() for adapter_type in ADAPTER_TYPES if adapter_type.kind not in skipped]

"""Session: lifecycle owner for one page's telemetry collection.

Usage:
    session = Session()                     # all default adapters
    session.track("#hero", "#signup")
    session.start()

    # Driver callback bridge
    session.feed(ObservationKind.LAYOUT_SHIFT, shift_entries)
    session.feed("mutation", mutation_records)

    snapshot = session.harvest()            # freezes the log
    card = score(snapshot, DEFAULT_RUBRIC)

States: IDLE -> COLLECTING -> HARVESTED; ``reset()`` returns to IDLE from
anywhere. The engine never blocks and owns no background resources, so an
abandoned session needs no cleanup.
"""

from __future__ import annotations

import logging
import time
import warnings
from collections.abc import Callable, Iterable, Mapping
from enum import Enum, auto

from pydantic import ValidationError

from vitalscope.aggregation import Aggregator, MetricSnapshot
from vitalscope.config import EngineSettings
from vitalscope.core.contrast import ColorSample, parse_color
from vitalscope.core.correlation import Correlation, Matcher, correlate
from vitalscope.core.observation import Observation, ObservationKind
from vitalscope.core.types import Milliseconds
from vitalscope.ingest import ObservationAdapter, RawColorSample, RawEntries, default_adapters
from vitalscope.session.log import ObservationLog
from vitalscope.session.resolver import SubtreeResolver

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = auto()
    COLLECTING = auto()
    HARVESTED = auto()


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


def _stream(kind: ObservationKind | str) -> ObservationKind | None:
    try:
        return ObservationKind(kind)
    except ValueError:
        logger.debug("Unknown stream %r", kind)
        return None


class Session:
    """Owns the observation log, resolver cache and tracked-element set.

    Args:
        adapters: Adapters for the streams the page supports. Defaults to one
            adapter per stream; leave a stream's adapter out to mark the
            capability absent.
        settings: Engine settings; loaded from the environment if omitted.
        clock: Millisecond clock used when ``harvest`` is not given a time.
    """

    def __init__(
        self,
        adapters: Iterable[ObservationAdapter] | None = None,
        settings: EngineSettings | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self._settings = settings or EngineSettings()
        self._clock = clock or _monotonic_ms
        self._resolver = SubtreeResolver(
            test_attribute=self._settings.test_attribute,
            max_depth=self._settings.resolver_max_depth,
        )
        self._aggregator = Aggregator(self._settings)
        self._adapters: dict[ObservationKind, ObservationAdapter] = {}
        self._state = SessionState.IDLE
        for adapter in default_adapters() if adapters is None else adapters:
            self.add_adapter(adapter)

        self._log = ObservationLog()
        self._tracked: dict[str, None] = {}
        self._color_samples: list[ColorSample] = []
        self._capabilities: frozenset[ObservationKind] = frozenset()
        self._started_at: float | None = None
        self._harvest_time: float | None = None

    # --- Accessors ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @property
    def resolver(self) -> SubtreeResolver:
        return self._resolver

    @property
    def capabilities(self) -> frozenset[ObservationKind]:
        """Streams with a registered adapter for the current collection."""
        return self._capabilities

    @property
    def observations(self) -> tuple[Observation, ...]:
        """Arrival-ordered log contents (immutable once harvested)."""
        return self._log.snapshot()

    @property
    def tracked(self) -> tuple[str, ...]:
        return tuple(self._tracked)

    @property
    def color_samples(self) -> tuple[ColorSample, ...]:
        return tuple(self._color_samples)

    @property
    def harvest_time(self) -> float | None:
        return self._harvest_time

    def adapter(self, kind: ObservationKind | str) -> ObservationAdapter | None:
        stream = _stream(kind)
        return None if stream is None else self._adapters.get(stream)

    # --- Adapter registration ---

    def add_adapter(self, adapter: ObservationAdapter) -> None:
        """Register the adapter for one stream.

        Raises:
            ValueError: If an adapter for the same stream is already registered.
        """
        if adapter.kind in self._adapters:
            raise ValueError(f"An adapter for {adapter.kind.value} is already registered")
        self._adapters[adapter.kind] = adapter
        if self._state is SessionState.COLLECTING:
            adapter.bind(self)
            self._capabilities = frozenset(self._adapters)

    # --- Lifecycle ---

    def start(self) -> None:
        """Begin a fresh collection: new log, cleared resolver cache, adapters bound.

        Elements tracked while idle carry into the collection; restarting a
        collecting or harvested session discards everything.
        """
        if self._state is SessionState.COLLECTING:
            warnings.warn(
                "start() called on a collecting session; discarding collected observations",
                stacklevel=2,
            )
        if self._state is not SessionState.IDLE:
            self._tracked.clear()

        self._log = ObservationLog()
        self._color_samples = []
        self._resolver.reset()
        for adapter in self._adapters.values():
            adapter.bind(self)
        self._capabilities = frozenset(self._adapters)
        self._started_at = self._clock()
        self._harvest_time = None
        self._state = SessionState.COLLECTING
        logger.debug(
            "Session started with capabilities: %s",
            ", ".join(sorted(kind.value for kind in self._capabilities)) or "none",
        )

    def reset(self) -> None:
        """Discard everything and return to IDLE."""
        for adapter in self._adapters.values():
            adapter.unbind()
        self._log = ObservationLog()
        self._color_samples = []
        self._tracked.clear()
        self._resolver.reset()
        self._capabilities = frozenset()
        self._started_at = None
        self._harvest_time = None
        self._state = SessionState.IDLE
        logger.debug("Session reset")

    def elapsed(self) -> Milliseconds:
        """Milliseconds since ``start()`` by the session clock (0 when idle)."""
        if self._started_at is None:
            return 0.0
        return self._clock() - self._started_at

    def harvest(self, at: Milliseconds | None = None) -> MetricSnapshot:
        """Freeze the log and aggregate it.

        Args:
            at: Platform time of the harvest. Defaults to the session clock's
                elapsed time; never earlier than the last observation.

        Returns:
            The MetricSnapshot. Repeated calls recompute from the same frozen
            log and harvest time, giving an equal snapshot. Harvesting a
            session that was never started returns ``MetricSnapshot.empty()``.
        """
        if self._state is SessionState.IDLE:
            warnings.warn(
                "harvest() called before start(); returning an empty snapshot",
                stacklevel=2,
            )
            return MetricSnapshot.empty()

        if self._state is SessionState.COLLECTING:
            requested = self.elapsed() if at is None else at
            self._harvest_time = max(requested, self._log.latest_timestamp())
            self._log.freeze()
            self._state = SessionState.HARVESTED
            logger.debug(
                "Session harvested at %.1f ms with %d observations",
                self._harvest_time,
                len(self._log),
            )
        elif at is not None and at != self._harvest_time:
            logger.debug("Session already harvested; ignoring harvest time %.1f", at)

        harvest_time = self._harvest_time
        if harvest_time is None:
            harvest_time = self._log.latest_timestamp()
        return self._aggregator.aggregate(
            self._log.snapshot(),
            harvest_time=harvest_time,
            capabilities=self._capabilities,
            tracked=self._tracked,
            color_samples=self._color_samples,
        )

    # --- Collection ---

    def feed(self, kind: ObservationKind | str, entries: RawEntries) -> list[Observation]:
        """Forward one platform callback's entries to the stream's adapter."""
        stream = _stream(kind)
        if stream is None:
            return []
        adapter = self._adapters.get(stream)
        if adapter is None:
            logger.debug("No adapter registered for %s; entries ignored", stream.value)
            return []
        if self._state is not SessionState.COLLECTING:
            logger.debug("Session is %s; %s entries ignored", self._state.name, stream.value)
            return []
        return adapter.handle(entries)

    def record(self, observation: Observation) -> Observation | None:
        """Append one observation. Returns the stored copy, or None when not collecting."""
        if self._state is not SessionState.COLLECTING:
            logger.debug("Session is %s; observation dropped", self._state.name)
            return None
        return self._log.append(observation)

    def track(self, *element_ids: str) -> None:
        """Register elements for visibility tracking (reported as never seen if they never show)."""
        if self._state is SessionState.HARVESTED:
            warnings.warn("track() called on a harvested session; ignored", stacklevel=2)
            return
        for element_id in element_ids:
            self._tracked.setdefault(element_id, None)

    def sample_colors(self, entries: RawEntries) -> list[ColorSample]:
        """Record computed text/background colors for contrast evaluation.

        Each entry carries ``color``, ``backgroundColor``, ``scheme`` and
        optionally ``fontSize``/``fontWeight`` plus either ``elementId`` or an
        ``element`` node. Unparseable entries are dropped with a warning.
        """
        if self._state is not SessionState.COLLECTING:
            logger.debug("Session is %s; color samples ignored", self._state.name)
            return []
        batch = [entries] if isinstance(entries, Mapping) else list(entries)
        recorded: list[ColorSample] = []
        for raw in batch:
            try:
                entry = RawColorSample.model_validate(raw)
                sample = ColorSample(
                    element_id=entry.element_id or self._resolver.resolve(entry.element),
                    scheme=entry.scheme,
                    foreground=parse_color(entry.color),
                    background=parse_color(entry.background_color),
                    font_size_px=entry.font_size,
                    font_weight=entry.font_weight,
                )
            except (ValidationError, ValueError) as e:
                logger.warning("Dropping malformed color sample: %s", e)
                continue
            self._color_samples.append(sample)
            recorded.append(sample)
        return recorded

    # --- Read accessors ---

    def correlate(
        self,
        primary: ObservationKind | str,
        contributors: ObservationKind | str,
        matcher: Matcher | None = None,
        epsilon: float | None = None,
    ) -> list[Correlation]:
        """Correlate two streams of the current log. Unknown stream names yield no correlations."""
        primary_kind = _stream(primary)
        contributor_kind = _stream(contributors)
        if primary_kind is None or contributor_kind is None:
            return []
        return correlate(
            self._log.of_kind(primary_kind),
            self._log.of_kind(contributor_kind),
            matcher=matcher,
            epsilon=self._settings.correlation_epsilon_ms if epsilon is None else epsilon,
        )

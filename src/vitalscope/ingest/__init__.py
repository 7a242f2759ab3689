"""Event ingestion: raw platform entries in, observations out.

Architecture Note:
    Adapters are pure translators bound to an explicitly owned Session.
    No page-global collector state exists; the driver forwards callbacks to
    ``Session.feed`` (or to an adapter's ``handle``) and the adapter appends
    to the session log.
"""

from vitalscope.ingest.adapters import (
    ADAPTER_TYPES,
    BaseAdapter,
    ConsoleAdapter,
    InteractionTimingAdapter,
    LayoutShiftAdapter,
    LongFrameAdapter,
    MutationAdapter,
    PaintCandidateAdapter,
    VisibilityAdapter,
    default_adapters,
)
from vitalscope.ingest.protocol import ObservationAdapter, ObservationSink, RawEntries
from vitalscope.ingest.schemas import RawColorSample

__all__ = [
    # Protocols
    "ObservationAdapter",
    "ObservationSink",
    "RawEntries",
    # Adapters
    "BaseAdapter",
    "LayoutShiftAdapter",
    "PaintCandidateAdapter",
    "InteractionTimingAdapter",
    "MutationAdapter",
    "LongFrameAdapter",
    "VisibilityAdapter",
    "ConsoleAdapter",
    "ADAPTER_TYPES",
    "default_adapters",
    # Schemas
    "RawColorSample",
]

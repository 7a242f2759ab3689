"""Session lifecycle and per-session state.

Architecture Note:
    session/ is the stateful service layer. A Session owns its observation
    log, resolver cache and tracked-element set; nothing is global, so two
    sessions never share observations.
"""

from vitalscope.session.log import FrozenLogError, ObservationLog
from vitalscope.session.resolver import SubtreeResolver
from vitalscope.session.session import Session, SessionState

__all__ = [
    "Session",
    "SessionState",
    "ObservationLog",
    "FrozenLogError",
    "SubtreeResolver",
]

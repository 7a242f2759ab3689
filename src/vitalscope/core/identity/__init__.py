"""Node identity functionality: descriptors and subtree labelling heuristics."""

from vitalscope.core.identity.labels import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_TEST_ATTRIBUTE,
    FALLBACK_LABEL,
    identity_key,
    node_label,
    stable_label,
    subtree_path,
)
from vitalscope.core.identity.models import NodeDescriptor, as_node

__all__ = [
    "NodeDescriptor",
    "as_node",
    "node_label",
    "stable_label",
    "identity_key",
    "subtree_path",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_TEST_ATTRIBUTE",
    "FALLBACK_LABEL",
]

"""Subtree identifier resolution service.

SubtreeResolver is a stateful service that memoizes node -> path labels for
the lifetime of one session.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from vitalscope.core.identity import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_TEST_ATTRIBUTE,
    FALLBACK_LABEL,
    NodeDescriptor,
    as_node,
    identity_key,
    subtree_path,
)

logger = logging.getLogger(__name__)


class SubtreeResolver:
    """Resolves DOM nodes to stable, human-readable subtree paths.

    Caches by node reference and, when the driver supplies one, by node
    handle. A node reported removed (``forget``) stays cached until a
    different node claims the same identity (same id or test attribute); the
    newcomer is then resolved afresh and replaces the stale entry.

    Args:
        test_attribute: Attribute treated as a stable test identifier.
        max_depth: Maximum number of segments in a path.
    """

    def __init__(
        self,
        test_attribute: str = DEFAULT_TEST_ATTRIBUTE,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self._test_attribute = test_attribute
        self._max_depth = max_depth
        self._by_node: dict[NodeDescriptor, str] = {}
        self._by_handle: dict[int, str] = {}
        self._owners: dict[str, NodeDescriptor] = {}
        self._removed: set[NodeDescriptor] = set()

    def resolve(self, node: Any) -> str:
        """Resolve a node (descriptor or mapping) to its subtree path.

        Never raises: malformed input degrades to the node's tag name, or
        ``"unknown"`` when not even a tag is available. Mappings without a
        ``nodeId`` convert to a fresh descriptor on every call, so their
        paths are computed each time rather than cached.
        """
        try:
            descriptor = as_node(node)
            if descriptor is None:
                return FALLBACK_LABEL
            cache = node is descriptor or descriptor.node_id is not None
            return self._resolve(descriptor, cache=cache)
        except Exception:  # noqa: BLE001
            logger.debug("Falling back to tag label for unresolvable node", exc_info=True)
            return _tag_label(node)

    def _resolve(self, node: NodeDescriptor, cache: bool = True) -> str:
        cached = self._by_node.get(node)
        if cached is not None:
            return cached
        if node.node_id is not None and node.node_id in self._by_handle:
            return self._by_handle[node.node_id]

        key = identity_key(node, self._test_attribute)
        if key is not None:
            previous = self._owners.get(key)
            if previous is not None and previous is not node and previous in self._removed:
                logger.debug("Node %s was replaced; re-resolving", key)
                self._evict(previous)
            self._owners[key] = node

        path = subtree_path(node, self._test_attribute, self._max_depth)
        if cache:
            self._by_node[node] = path
        if node.node_id is not None:
            self._by_handle[node.node_id] = path
        return path

    def _evict(self, node: NodeDescriptor) -> None:
        self._by_node.pop(node, None)
        self._removed.discard(node)
        if node.node_id is not None:
            self._by_handle.pop(node.node_id, None)

    def forget(self, node: Any) -> None:
        """Mark a node as removed from the document.

        Unknown nodes are ignored.
        """
        try:
            descriptor = as_node(node)
        except Exception:  # noqa: BLE001
            logger.debug("Ignoring removal of unreadable node", exc_info=True)
            return
        if descriptor is None:
            return
        if descriptor not in self._by_node:
            # A mapping converts to a fresh descriptor; find the cached original.
            known = self._known(descriptor)
            if known is None:
                return
            descriptor = known
        self._removed.add(descriptor)

    def _known(self, node: NodeDescriptor) -> NodeDescriptor | None:
        if node.node_id is not None:
            for known in self._by_node:
                if known.node_id == node.node_id:
                    return known
        key = identity_key(node, self._test_attribute)
        if key is not None:
            return self._owners.get(key)
        return None

    def is_removed(self, node: NodeDescriptor) -> bool:
        return node in self._removed

    def reset(self) -> None:
        """Drop every cached resolution."""
        self._by_node.clear()
        self._by_handle.clear()
        self._owners.clear()
        self._removed.clear()

    def __len__(self) -> int:
        return len(self._by_node)


def _tag_label(node: Any) -> str:
    if isinstance(node, NodeDescriptor):
        return node.tag or FALLBACK_LABEL
    if isinstance(node, Mapping):
        tag = node.get("tag") or node.get("tagName")
        if isinstance(tag, str) and tag:
            return tag.lower()
    return FALLBACK_LABEL

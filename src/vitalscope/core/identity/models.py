"""DOM node descriptors.

Usage:
    feed = NodeDescriptor(tag="section", element_id="feed")
    card = NodeDescriptor(tag="article", classes=("card",), parent=feed)

The driver either hands over descriptors directly or plain mappings
(as returned from ``page.evaluate``), which ``from_mapping`` converts.
Descriptors compare by reference: two distinct nodes with the same
attributes are still two nodes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False, slots=True)
class NodeDescriptor:
    """Lightweight stand-in for a DOM node.

    Attributes:
        tag: Lower-case tag name.
        element_id: Value of the ``id`` attribute, if any.
        classes: Class tokens in document order.
        attributes: Other attributes of interest (test attributes, roles).
        parent: Parent node, None at the root or when unknown.
        node_id: Driver-side node handle, stable across callbacks when supplied.
    """

    tag: str = ""
    element_id: str | None = None
    classes: tuple[str, ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)
    parent: NodeDescriptor | None = None
    node_id: int | None = None

    def ancestors(self) -> list[NodeDescriptor]:
        """Parents from nearest to farthest."""
        chain: list[NodeDescriptor] = []
        current = self.parent
        while current is not None and current not in chain:
            chain.append(current)
            current = current.parent
        return chain

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> NodeDescriptor:
        """Create from a driver-supplied mapping.

        Accepted keys: ``tag``/``tagName``, ``id``, ``classes``/``className``,
        ``attributes``, ``parent``, ``nodeId``. Values of the wrong shape
        (non-list classes, non-mapping attributes, non-integer handles) are
        ignored.
        """
        tag = str(data.get("tag") or data.get("tagName") or "").lower()
        raw_classes = data.get("classes", data.get("className", ()))
        classes: tuple[str, ...]
        if isinstance(raw_classes, str):
            classes = tuple(raw_classes.split())
        elif isinstance(raw_classes, list | tuple):
            classes = tuple(str(c) for c in raw_classes)
        else:
            classes = ()
        raw_attributes = data.get("attributes")
        attributes = (
            {str(k): str(v) for k, v in raw_attributes.items()}
            if isinstance(raw_attributes, Mapping)
            else {}
        )
        raw_parent = data.get("parent")
        parent: NodeDescriptor | None
        if isinstance(raw_parent, NodeDescriptor):
            parent = raw_parent
        elif isinstance(raw_parent, Mapping):
            parent = cls.from_mapping(raw_parent)
        else:
            parent = None
        node_id = data.get("nodeId", data.get("node_id"))
        element_id = data.get("id")
        return cls(
            tag=tag,
            element_id=str(element_id) if element_id else None,
            classes=classes,
            attributes=attributes,
            parent=parent,
            node_id=_handle(node_id),
        )


def _handle(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def as_node(value: Any) -> NodeDescriptor | None:
    """Coerce a descriptor or mapping into a NodeDescriptor; anything else is None."""
    if isinstance(value, NodeDescriptor):
        return value
    if isinstance(value, Mapping):
        return NodeDescriptor.from_mapping(value)
    return None

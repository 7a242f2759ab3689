"""Pure labelling heuristics for DOM nodes.

A label is the best single-node name; a path joins labels from an anchor
ancestor down to the node:

    #feed                      (node carries an id)
    [data-testid="cart"]       (node carries the test attribute)
    #feed > article.card > p   (walked up to the nearest stable ancestor)
"""

from __future__ import annotations

from vitalscope.core.identity.models import NodeDescriptor

DEFAULT_TEST_ATTRIBUTE = "data-testid"
DEFAULT_MAX_DEPTH = 5
FALLBACK_LABEL = "unknown"


def stable_label(node: NodeDescriptor, test_attribute: str = DEFAULT_TEST_ATTRIBUTE) -> str | None:
    """Label from an explicit id or test attribute, None if the node has neither."""
    if node.element_id:
        return f"#{node.element_id}"
    value = node.attributes.get(test_attribute)
    if value:
        return f'[{test_attribute}="{value}"]'
    return None


def node_label(node: NodeDescriptor, test_attribute: str = DEFAULT_TEST_ATTRIBUTE) -> str:
    """Best label for a single node: id, test attribute, tag.class, tag."""
    stable = stable_label(node, test_attribute)
    if stable is not None:
        return stable
    tag = node.tag or FALLBACK_LABEL
    if node.classes:
        return f"{tag}.{node.classes[0]}"
    return tag


def identity_key(node: NodeDescriptor, test_attribute: str = DEFAULT_TEST_ATTRIBUTE) -> str | None:
    """Identity used to detect a replaced node (same id or test attribute)."""
    return stable_label(node, test_attribute)


def subtree_path(
    node: NodeDescriptor,
    test_attribute: str = DEFAULT_TEST_ATTRIBUTE,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """Join labels upward until a stable ancestor is included or depth runs out."""
    segments = [node_label(node, test_attribute)]
    if stable_label(node, test_attribute) is not None:
        return segments[0]
    for ancestor in node.ancestors():
        if len(segments) >= max_depth:
            break
        segments.append(node_label(ancestor, test_attribute))
        if stable_label(ancestor, test_attribute) is not None:
            break
    return " > ".join(reversed(segments))

"""Tests for raw entry translation.

Why these tests exist:
- Drivers forward browser entries untouched, so camelCase fields must map
- A malformed entry must not take the rest of its batch down with it
- Removed nodes must reach the resolver so replacements re-resolve
"""

import pytest

from vitalscope.core.observation import (
    ConsoleEntry,
    InteractionTiming,
    LayoutShift,
    LongFrame,
    Mutation,
    ObservationKind,
    PaintCandidate,
    Rect,
    VisibilityChange,
)
from vitalscope.ingest import (
    ADAPTER_TYPES,
    LayoutShiftAdapter,
    ObservationAdapter,
    default_adapters,
)

CARD = {
    "tag": "article",
    "className": "card",
    "parent": {"tag": "section", "id": "feed"},
}


@pytest.fixture
def collecting(session):
    session.start()
    return session


def test_layout_shift_entry_translated(collecting) -> None:
    [obs] = collecting.feed(
        ObservationKind.LAYOUT_SHIFT,
        [
            {
                "entryType": "layout-shift",
                "startTime": 812.4,
                "value": 0.05,
                "hadRecentInput": False,
                "sources": [
                    {
                        "node": CARD,
                        "previousRect": {"x": 0, "y": 100, "width": 300, "height": 50},
                        "currentRect": {"left": 0, "top": 180, "width": 300, "height": 50},
                    },
                    {"node": None},
                ],
            }
        ],
    )

    assert isinstance(obs.payload, LayoutShift)
    assert obs.timestamp == 812.4
    assert obs.subtree_id == "#feed > article.card"
    assert obs.payload.sources[0].current_rect == Rect(0, 180, 300, 50)
    assert obs.payload.sources[1].subtree_id is None


def test_shift_without_sources_still_recorded(collecting) -> None:
    [obs] = collecting.feed("layout-shift", {"startTime": 5.0, "value": 0.2})
    assert obs.payload.sources == ()
    assert obs.subtree_id is None


def test_malformed_entries_dropped_and_counted(collecting) -> None:
    recorded = collecting.feed(
        "layout-shift",
        [
            {"startTime": 1.0, "value": 0.1},
            {"startTime": 2.0},
            {"value": "lots"},
            {"startTime": 3.0, "value": 0.2},
        ],
    )

    assert [obs.payload.value for obs in recorded] == [0.1, 0.2]
    assert collecting.adapter("layout-shift").dropped == 2


def test_event_timing_entry(collecting) -> None:
    [obs] = collecting.feed(
        "interaction-timing",
        {
            "name": "pointerup",
            "startTime": 1000.0,
            "processingStart": 1040.0,
            "processingEnd": 1180.0,
            "duration": 232.0,
            "interactionId": 17,
            "target": {"tag": "button", "attributes": {"data-testid": "buy"}},
        },
    )

    payload = obs.payload
    assert isinstance(payload, InteractionTiming)
    assert payload.interaction_id == 17
    assert payload.input_delay == 40.0
    assert obs.subtree_id == '[data-testid="buy"]'
    assert obs.end == 1232.0


def test_paint_candidate_entry(collecting) -> None:
    [with_element, with_id] = collecting.feed(
        "paint-candidate",
        [
            {"startTime": 900.0, "size": 5000, "renderTime": 900.0, "element": CARD},
            {"startTime": 1500.0, "size": 9000, "loadTime": 1450.0, "id": "hero", "url": "/h.jpg"},
        ],
    )

    assert isinstance(with_element.payload, PaintCandidate)
    assert with_element.payload.element_id == "#feed > article.card"
    assert with_id.payload.element_id == "#hero"
    assert with_id.payload.url == "/h.jpg"


def test_mutation_record_counts(collecting) -> None:
    [child_list, attributes] = collecting.feed(
        "mutation",
        [
            {
                "time": 20.0,
                "type": "childList",
                "target": CARD,
                "addedNodes": [{"tag": "p"}, {"tag": "p"}],
                "removedNodes": 1,
            },
            {"timestamp": 30.0, "type": "attributes", "target": CARD, "attributeName": "class"},
        ],
    )

    assert child_list.payload == Mutation(added=2, removed=1)
    assert attributes.payload == Mutation(attribute_changed=True, attribute_name="class")
    assert child_list.subtree_id == "#feed > article.card"


def test_removed_nodes_reach_resolver(collecting) -> None:
    promo = {"tag": "aside", "id": "promo", "nodeId": 11}
    collecting.feed("mutation", {"timestamp": 1.0, "target": promo, "addedNodes": 1})
    collecting.feed(
        "mutation",
        {"timestamp": 2.0, "target": {"tag": "body"}, "removedNodes": [promo]},
    )

    assert len(collecting.resolver) == 1
    replacement = {"tag": "div", "id": "promo", "nodeId": 12}
    [obs] = collecting.feed("mutation", {"timestamp": 3.0, "target": replacement, "addedNodes": 1})
    assert obs.subtree_id == "#promo"
    assert len(collecting.resolver) == 1


def test_long_frame_entry(collecting) -> None:
    [obs] = collecting.feed(
        "long-frame",
        {
            "startTime": 2000.0,
            "duration": 180.0,
            "blockingDuration": 130.0,
            "scripts": [{"sourceURL": "https://cdn.example/app.js", "invoker": "click", "duration": 150}],
        },
    )

    assert isinstance(obs.payload, LongFrame)
    assert obs.duration == 180.0
    assert obs.payload.scripts[0].source_url == "https://cdn.example/app.js"


@pytest.mark.parametrize(
    ("entry", "ratio"),
    [
        ({"time": 1.0, "elementId": "#hero", "intersectionRatio": 0.4}, 0.4),
        ({"time": 1.0, "elementId": "#hero", "intersectionRatio": 1.7}, 1.0),
        ({"time": 1.0, "elementId": "#hero", "intersectionRatio": 0.4, "isIntersecting": False}, 0.0),
    ],
)
def test_visibility_ratio_normalized(collecting, entry, ratio) -> None:
    [obs] = collecting.feed("visibility-change", entry)
    assert obs.payload == VisibilityChange("#hero", ratio)
    assert obs.subtree_id == "#hero"


def test_visibility_target_resolved(collecting) -> None:
    [obs] = collecting.feed(
        "visibility-change", {"timestamp": 4.0, "target": CARD, "intersectionRatio": 0.5}
    )
    assert obs.payload.element_id == "#feed > article.card"


def test_console_levels_normalized(collecting) -> None:
    recorded = collecting.feed(
        "console-entry",
        [{"time": 1.0, "type": "error", "text": "boom"}, {"timestamp": 2.0, "level": "WARN"}],
    )
    assert [obs.payload for obs in recorded] == [
        ConsoleEntry("error", "boom"),
        ConsoleEntry("warning", ""),
    ]


def test_unbound_adapter_ignores_entries() -> None:
    adapter = LayoutShiftAdapter()
    assert not adapter.bound
    assert adapter.handle([{"startTime": 1.0, "value": 0.1}]) == []


def test_default_adapters_satisfy_protocol() -> None:
    adapters = default_adapters()
    assert len(adapters) == len(ADAPTER_TYPES) == len(ObservationKind)
    assert all(isinstance(adapter, ObservationAdapter) for adapter in adapters)
    assert {adapter.kind for adapter in default_adapters(exclude=[ObservationKind.MUTATION])} == (
        set(ObservationKind) - {ObservationKind.MUTATION}
    )

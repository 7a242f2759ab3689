"""Tests for the Session lifecycle.

Critical Invariants:
- Harvest freezes the log; repeated harvests give identical snapshots
- Entries arriving outside COLLECTING are dropped, never recorded
- A stream without an adapter reports its metrics as unavailable
"""

import json

import pytest

from vitalscope import Session, SessionState
from vitalscope.core.observation import LayoutShift, Observation, ObservationKind
from vitalscope.ingest import LayoutShiftAdapter, default_adapters
from vitalscope.session import FrozenLogError, ObservationLog

FEED = {"tag": "section", "id": "feed"}
SIDEBAR = {"tag": "aside", "id": "sidebar"}


def dumps(snapshot) -> str:
    return json.dumps(snapshot.to_dict(), sort_keys=True)


def test_lifecycle_transitions(session, clock) -> None:
    assert session.state is SessionState.IDLE

    session.start()
    assert session.state is SessionState.COLLECTING
    assert ObservationKind.LAYOUT_SHIFT in session.capabilities

    session.feed(ObservationKind.LAYOUT_SHIFT, [{"startTime": 100.0, "value": 0.05}])
    clock.advance(2500.0)
    snapshot = session.harvest()

    assert session.state is SessionState.HARVESTED
    assert session.harvest_time == 2500.0
    assert snapshot.session_duration_ms == 2500.0
    assert snapshot.value("cls") == pytest.approx(0.05)


def test_harvest_is_idempotent(session, clock) -> None:
    session.track("#hero")
    session.start()
    session.feed("layout-shift", {"startTime": 10.0, "value": 0.1})
    session.feed(
        "visibility-change", [{"time": 50.0, "elementId": "#hero", "intersectionRatio": 1.0}]
    )
    clock.advance(1000.0)

    first = session.harvest()
    clock.advance(5000.0)
    second = session.harvest()
    third = session.harvest(at=99_999.0)

    assert dumps(first) == dumps(second) == dumps(third)
    assert first.dwell_for("#hero").total_dwell_ms == 950.0


def test_harvest_time_never_precedes_last_observation(session) -> None:
    session.start()
    session.feed("long-frame", {"startTime": 4000.0, "duration": 200.0})
    snapshot = session.harvest(at=1000.0)
    assert snapshot.session_duration_ms == 4200.0


def test_harvest_before_start_warns_and_returns_empty(session) -> None:
    with pytest.warns(UserWarning, match="before start"):
        snapshot = session.harvest()

    assert snapshot.session_duration_ms == 0.0
    assert all(not metric.available for metric in snapshot.metrics.values())
    assert session.state is SessionState.IDLE


def test_entries_after_harvest_are_dropped(session) -> None:
    session.start()
    session.feed("layout-shift", {"startTime": 1.0, "value": 0.1})
    before = dumps(session.harvest(at=100.0))

    recorded = session.feed("layout-shift", {"startTime": 50.0, "value": 0.7})
    stored = session.record(Observation.of(LayoutShift(value=0.7), timestamp=60.0))

    assert recorded == []
    assert stored is None
    assert len(session.observations) == 1
    assert dumps(session.harvest()) == before


def test_entries_before_start_are_dropped(session) -> None:
    assert session.feed("layout-shift", {"startTime": 1.0, "value": 0.1}) == []
    session.start()
    assert session.observations == ()


def test_restart_discards_previous_collection(session) -> None:
    session.track("#hero")
    session.start()
    session.feed("layout-shift", {"startTime": 1.0, "value": 0.1})
    session.harvest(at=10.0)

    session.start()

    assert session.state is SessionState.COLLECTING
    assert session.observations == ()
    assert session.tracked == ()
    assert session.harvest_time is None


def test_start_while_collecting_warns(session) -> None:
    session.start()
    with pytest.warns(UserWarning, match="collecting"):
        session.start()


def test_tracking_before_start_carries_over(session) -> None:
    session.track("#hero", "#cta", "#hero")
    session.start()
    assert session.tracked == ("#hero", "#cta")

    snapshot = session.harvest(at=3000.0)
    assert snapshot.never_seen == ("#hero", "#cta")


def test_track_after_harvest_warns(session) -> None:
    session.start()
    session.harvest(at=1.0)
    with pytest.warns(UserWarning):
        session.track("#late")
    assert session.tracked == ()


def test_reset_returns_to_idle(session) -> None:
    session.track("#hero")
    session.start()
    session.feed("layout-shift", {"startTime": 1.0, "value": 0.1})

    session.reset()

    assert session.state is SessionState.IDLE
    assert session.observations == ()
    assert session.tracked == ()
    assert session.capabilities == frozenset()
    assert not session.adapter("layout-shift").bound


def test_missing_adapter_marks_capability_absent(settings, clock) -> None:
    session = Session(
        adapters=default_adapters(exclude=[ObservationKind.LONG_FRAME]),
        settings=settings,
        clock=clock,
    )
    session.start()
    session.feed("long-frame", {"startTime": 1.0, "duration": 300.0})
    snapshot = session.harvest(at=1000.0)

    assert ObservationKind.LONG_FRAME not in session.capabilities
    assert snapshot.value("total_blocking_time") is None
    assert snapshot.value("cls") == 0.0


def test_duplicate_adapter_rejected(session) -> None:
    with pytest.raises(ValueError):
        session.add_adapter(LayoutShiftAdapter())


def test_adapter_added_while_collecting_is_bound(settings, clock) -> None:
    session = Session(adapters=[], settings=settings, clock=clock)
    session.start()
    session.add_adapter(LayoutShiftAdapter())

    session.feed("layout-shift", {"startTime": 1.0, "value": 0.2})
    assert ObservationKind.LAYOUT_SHIFT in session.capabilities
    assert len(session.observations) == 1


def test_unknown_stream_names_are_ignored(session) -> None:
    session.start()

    assert session.feed("longtask", {"startTime": 1.0, "duration": 300.0}) == []
    assert session.adapter("event") is None
    assert session.correlate("longtask", "mutation") == []
    assert len(session.observations) == 0


def test_mutation_with_malformed_target_is_recorded(session) -> None:
    session.start()

    target = {"tag": "div", "nodeId": "n-1"}
    [obs] = session.feed("mutation", [{"timestamp": 1.0, "target": target}])

    assert obs.subtree_id == "div"
    assert len(session.observations) == 1


def test_observations_stamped_in_arrival_order(session) -> None:
    session.start()
    session.feed("mutation", [{"timestamp": 5.0, "target": FEED, "addedNodes": 1}])
    session.feed("layout-shift", {"startTime": 1.0, "value": 0.1})
    assert [obs.seq for obs in session.observations] == [0, 1]
    assert [obs.timestamp for obs in session.observations] == [5.0, 1.0]


def test_session_correlate(session) -> None:
    session.start()
    session.feed("long-frame", {"startTime": 1000.0, "duration": 120.0})
    session.feed(
        "mutation",
        [{"timestamp": 1000.0 + i * 20, "target": FEED, "addedNodes": 1} for i in range(5)]
        + [{"timestamp": 1050.0, "target": SIDEBAR, "type": "attributes", "attributeName": "class"}],
    )

    [corr] = session.correlate("long-frame", "mutation")

    assert corr.dominant_subtree_id == "#feed"
    assert len(corr.contributors) == 6


def test_sample_colors(session) -> None:
    session.start()
    recorded = session.sample_colors(
        [
            {"elementId": "#caption", "color": "rgb(153, 153, 153)", "backgroundColor": "#fff"},
            {
                "element": {"tag": "h1", "id": "title"},
                "scheme": "dark",
                "color": "#eee",
                "backgroundColor": "rgb(17, 17, 17)",
                "fontSize": "32px",
                "fontWeight": "bold",
            },
            {"elementId": "#broken", "color": "chartreuse-ish", "backgroundColor": "#fff"},
            {"elementId": "#missing-background", "color": "#000"},
        ]
    )

    assert [s.element_id for s in recorded] == ["#caption", "#title"]
    assert recorded[1].large_text

    snapshot = session.harvest(at=10.0)
    assert snapshot.value("contrast_failures") == 1.0


def test_frozen_log_rejects_appends() -> None:
    log = ObservationLog()
    log.append(Observation.of(LayoutShift(value=0.1), timestamp=1.0))
    frozen = log.freeze()

    assert log.freeze() is frozen
    with pytest.raises(FrozenLogError):
        log.append(Observation.of(LayoutShift(value=0.1), timestamp=2.0))
    assert log.kinds() == frozenset({ObservationKind.LAYOUT_SHIFT})

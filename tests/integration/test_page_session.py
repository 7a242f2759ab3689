"""End-to-end workflow: raw entries in, score card out."""

import json
import sys

import pytest

sys.path.insert(0, "src")

from vitalscope import DEFAULT_RUBRIC, ObservationKind, Session, score

FEED = {"tag": "section", "id": "feed"}
SIDEBAR = {"tag": "aside", "id": "sidebar"}
CARD = {"tag": "article", "className": "card", "parent": FEED}


def drive_page(session: Session) -> None:
    """Replay one page visit the way a browser driver would forward it."""
    session.track("#footer-cta")
    session.start()

    session.feed(
        ObservationKind.LAYOUT_SHIFT,
        [
            {"startTime": 100.0, "value": 0.02, "sources": [{"node": CARD}]},
            {"startTime": 400.0, "value": 0.05},
            {"startTime": 900.0, "value": 0.03},
        ],
    )
    session.feed(
        ObservationKind.PAINT_CANDIDATE,
        {"startTime": 1800.0, "size": 40_000, "renderTime": 1800.0, "element": CARD},
    )
    session.feed(ObservationKind.LONG_FRAME, {"startTime": 1000.0, "duration": 120.0})
    session.feed(
        ObservationKind.MUTATION,
        [{"timestamp": 1000.0 + i * 20, "target": FEED, "addedNodes": 1} for i in range(5)]
        + [
            {"timestamp": 1010.0, "target": SIDEBAR, "type": "attributes", "attributeName": "style"},
            {"timestamp": 1110.0, "target": SIDEBAR, "type": "attributes", "attributeName": "style"},
        ],
    )
    session.feed(
        ObservationKind.INTERACTION_TIMING,
        [
            {
                "name": "click",
                "startTime": 2000.0 + i * 1000,
                "processingStart": 2010.0 + i * 1000,
                "processingEnd": 2050.0 + i * 1000,
                "duration": duration,
                "interactionId": i + 1,
            }
            for i, duration in enumerate([80.0, 120.0, 240.0])
        ],
    )


def test_page_visit_scored(session, clock) -> None:
    drive_page(session)
    clock.advance(10_000.0)

    snapshot = session.harvest()

    assert snapshot.session_duration_ms == 10_000.0
    assert snapshot.value("cls") == pytest.approx(0.1)
    assert snapshot.value("inp") == 240.0
    assert snapshot.value("lcp") == 1800.0
    assert snapshot.value("total_blocking_time") == pytest.approx(70.0)
    assert snapshot.value("churn_rate") == pytest.approx(0.7)
    assert snapshot.value("console_errors") == 0.0
    assert snapshot.value("contrast_failures") is None
    assert snapshot.never_seen == ("#footer-cta",)

    [frame] = snapshot.frame_attributions
    assert frame.dominant_subtree_id == "#feed"
    assert len(frame.contributors) == 7
    assert snapshot.churn[0].subtree_id == "#feed"
    assert snapshot.shift_offenders[0].subtree_id == "#feed > article.card"

    card = score(snapshot, DEFAULT_RUBRIC)

    assert card.category("Contrast").score is None
    assert card.category("Layout stability").label == "needs-improvement"
    assert card.category("Loading").label == "good"
    assert card.composite == pytest.approx(75.0)
    assert card.grade == "B"


def test_report_is_json_serializable_and_stable(session, clock) -> None:
    drive_page(session)
    clock.advance(10_000.0)

    first = session.harvest()
    second = session.harvest()

    payload = json.dumps(
        {"snapshot": first.to_dict(), "score": score(first).to_dict()}, sort_keys=True
    )
    assert json.loads(payload)["score"]["grade"] == "B"
    assert json.dumps(first.to_dict(), sort_keys=True) == json.dumps(
        second.to_dict(), sort_keys=True
    )


def test_sessions_are_isolated(settings, clock) -> None:
    first = Session(settings=settings, clock=clock)
    second = Session(settings=settings, clock=clock)
    first.start()
    second.start()

    first.feed("layout-shift", {"startTime": 1.0, "value": 0.3})

    assert second.harvest(at=10.0).value("cls") == 0.0
    assert first.harvest(at=10.0).value("cls") == pytest.approx(0.3)

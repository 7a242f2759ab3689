"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from vitalscope import EngineSettings, NodeDescriptor, Session


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return EngineSettings(_env_file=None)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(settings, clock):
    """Fresh Session with every default adapter and a hand-driven clock."""
    return Session(settings=settings, clock=clock)


@pytest.fixture
def page_tree():
    """Small DOM: body > main#content > section#feed > article.card > p."""
    body = NodeDescriptor(tag="body")
    main = NodeDescriptor(tag="main", element_id="content", parent=body)
    feed = NodeDescriptor(tag="section", element_id="feed", parent=main)
    card = NodeDescriptor(tag="article", classes=("card", "card--wide"), parent=feed)
    text = NodeDescriptor(tag="p", parent=card)
    return {"body": body, "main": main, "feed": feed, "card": card, "text": text}

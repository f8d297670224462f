"""Pytest configuration for the pair ratio monitor test suite."""

from datetime import datetime, timedelta

import pytest

from core import QuoteSnapshot


BASE_TS = datetime(2019, 2, 11, 22, 6, 30)


def make_quote(stock, ask, bid, ts=BASE_TS, offset=0.0):
    """Build a QuoteSnapshot; offset shifts the timestamp in seconds."""
    return QuoteSnapshot(
        stock=stock,
        top_ask={"price": ask, "size": 10},
        top_bid={"price": bid, "size": 10},
        timestamp=ts + timedelta(seconds=offset),
    )


def make_pair(ask_a, bid_a, ask_b, bid_b, offset=0.0):
    return [
        make_quote("ABC", ask_a, bid_a, offset=offset),
        make_quote("DEF", ask_b, bid_b, offset=offset),
    ]


@pytest.fixture
def quote_factory():
    return make_quote


@pytest.fixture
def pair_factory():
    return make_pair


@pytest.fixture
def fresh_feed(monkeypatch):
    """Replace the module-level feed singleton for one test."""
    import services.ratio_feed as ratio_feed

    monkeypatch.setattr(ratio_feed, "_feed", None)
    yield ratio_feed.get_ratio_feed()
    monkeypatch.setattr(ratio_feed, "_feed", None)

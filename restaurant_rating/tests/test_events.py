from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from restaurant_rating.ledger.config import LedgerConfig
from restaurant_rating.ledger.errors import RestaurantInactive
from restaurant_rating.ledger.events import InMemoryEventLog
from restaurant_rating.ledger.store import RatingLedger


def _ledger(sink) -> RatingLedger:
    return RatingLedger(LedgerConfig(admin="root", snapshot_path=None), sink=sink)


def test_restaurant_registered_event():
    log = InMemoryEventLog()
    ledger = _ledger(log)
    ledger.register_restaurant("Test Restaurant", "Test Location", "alice")

    (event,) = log.get_events()
    assert event["type"] == "RestaurantRegistered"
    assert event["restaurant_id"] == 1
    assert event["name"] == "Test Restaurant"
    assert event["owner"] == "alice"
    assert "timestamp" in event


def test_review_submitted_event():
    log = InMemoryEventLog()
    ledger = _ledger(log)
    ledger.register_restaurant("Restaurant", "Location", "alice")
    ledger.submit_review(1, 8, 9, 7, 8, 8, "Great!", "carol")

    (event,) = log.get_events("ReviewSubmitted")
    assert event["review_id"] == 1
    assert event["restaurant_id"] == 1
    assert event["reviewer"] == "carol"


def test_review_verified_event():
    log = InMemoryEventLog()
    ledger = _ledger(log)
    ledger.register_restaurant("Restaurant", "Location", "alice")
    ledger.submit_review(1, 8, 9, 7, 8, 8, "Great!", "carol")
    ledger.verify_review(1, "alice")

    (event,) = log.get_events("ReviewVerified")
    assert event["review_id"] == 1
    assert event["restaurant_id"] == 1


def test_toggle_and_failures_emit_nothing():
    log = InMemoryEventLog()
    ledger = _ledger(log)
    ledger.register_restaurant("Restaurant", "Location", "alice")
    log.clear()

    ledger.toggle_restaurant_status(1, "alice")
    with pytest.raises(RestaurantInactive):
        ledger.submit_review(1, 8, 9, 7, 8, 8, "closed", "carol")

    assert log.get_events() == []


def test_failing_sink_does_not_affect_ledger():
    sink = MagicMock()
    sink.publish.side_effect = RuntimeError("sink down")
    ledger = _ledger(sink)

    assert ledger.register_restaurant("Restaurant", "Location", "alice") == 1
    assert ledger.submit_review(1, 8, 9, 7, 8, 8, "Great!", "carol") == 1
    assert ledger.verify_review(1, "alice") is True
    assert ledger.get_total_counts() == (1, 1)
    assert sink.publish.call_count == 3

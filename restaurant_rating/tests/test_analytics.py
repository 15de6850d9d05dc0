from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient

from restaurant_rating.analytics.aggregator import compute_analytics
from restaurant_rating.app import app
from restaurant_rating.auth.users import clear_users
from restaurant_rating.ledger.config import DEFAULT_LEDGER_CONFIG, LedgerConfig
from restaurant_rating.ledger.store import RatingLedger, reset_ledger


def _ledger() -> RatingLedger:
    return RatingLedger(LedgerConfig(admin="root", snapshot_path=None))


def test_analytics_empty_ledger():
    body = compute_analytics(_ledger())
    assert body["total_restaurants"] == 0
    assert body["total_reviews"] == 0
    assert body["avg_reviews_per_restaurant"] == 0.0
    assert body["verification_rate"] == 0.0
    assert body["restaurants"] == []
    assert body["top_rated"] == []


def test_analytics_restaurants_without_reviews():
    ledger = _ledger()
    ledger.register_restaurant("R1", "L1", "alice")
    ledger.register_restaurant("R2", "L2", "alice")
    ledger.toggle_restaurant_status(2, "alice")

    body = compute_analytics(ledger)
    assert body["total_restaurants"] == 2
    assert body["active_restaurants"] == 1
    assert body["total_reviews"] == 0
    assert body["restaurants"] == []


def test_analytics_averages_and_verification():
    ledger = _ledger()
    ledger.register_restaurant("Golden Fork", "L1", "alice")
    ledger.register_restaurant("Sakura", "L2", "bob")
    ledger.submit_review(1, 8, 9, 7, 8, 8, "", "carol")
    ledger.submit_review(1, 6, 7, 9, 6, 7, "", "dave")
    ledger.submit_review(2, 10, 10, 10, 10, 10, "", "carol")
    ledger.verify_review(3, "bob")

    body = compute_analytics(ledger)
    assert body["total_reviews"] == 3
    assert body["avg_reviews_per_restaurant"] == 1.5
    assert body["verified_reviews"] == 1
    assert body["verification_rate"] == 33.3

    by_id = {r["restaurant_id"]: r for r in body["restaurants"]}
    assert by_id[1]["name"] == "Golden Fork"
    assert by_id[1]["review_count"] == 2
    assert by_id[1]["averages"]["food_quality"] == 7.0
    assert by_id[1]["averages"]["overall_rating"] == 7.5
    assert by_id[2]["averages"]["service"] == 10.0

    assert [r["restaurant_id"] for r in body["top_rated"]] == [2, 1]


def test_analytics_endpoint_for_admin():
    clear_users()
    reset_ledger(replace(DEFAULT_LEDGER_CONFIG, snapshot_path=None))
    c = TestClient(app)
    c.post("/auth/login", json={"username": DEFAULT_LEDGER_CONFIG.admin, "password": "admin123"})
    c.post("/restaurants", json={"name": "Admin Diner", "location": "HQ"})

    resp = c.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_restaurants"] == 1
    assert body["active_restaurants"] == 1

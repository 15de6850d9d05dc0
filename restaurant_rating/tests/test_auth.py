from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from restaurant_rating.app import app
from restaurant_rating.auth.users import authenticate, clear_users, register_user
from restaurant_rating.ledger.config import DEFAULT_LEDGER_CONFIG
from restaurant_rating.ledger.store import reset_ledger

ADMIN = DEFAULT_LEDGER_CONFIG.admin


@pytest.fixture(autouse=True)
def _fresh_state():
    clear_users()
    reset_ledger(replace(DEFAULT_LEDGER_CONFIG, snapshot_path=None))


def _login_admin(c):
    c.post("/auth/login", json={"username": ADMIN, "password": "admin123"})


# ── Accounts ─────────────────────────────────────────────────────────────


def test_register_user_and_authenticate():
    assert register_user("alice", "secret123") == {"username": "alice", "role": "user"}
    assert authenticate("alice", "secret123") == {"username": "alice", "role": "user"}
    assert authenticate("alice", "wrong") is None


def test_register_user_rejects_taken_name():
    register_user("alice", "secret123")
    assert register_user("alice", "another1") is None
    assert register_user(ADMIN, "another1") is None


def test_admin_is_seeded():
    assert authenticate(ADMIN, "admin123") == {"username": ADMIN, "role": "admin"}


def test_register_endpoint():
    c = TestClient(app)
    resp = c.post("/auth/register", json={"username": "alice", "password": "secret123"})
    assert resp.status_code == 201
    assert resp.json()["user"] == {"username": "alice", "role": "user"}

    resp = c.post("/auth/register", json={"username": "alice", "password": "secret123"})
    assert resp.status_code == 409


def test_register_endpoint_validates_password_length():
    resp = TestClient(app).post("/auth/register", json={"username": "alice", "password": "123"})
    assert resp.status_code == 422


# ── Login / Logout ───────────────────────────────────────────────────────


def test_login_success_admin():
    resp = TestClient(app).post("/auth/login", json={"username": ADMIN, "password": "admin123"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"


def test_login_wrong_password():
    resp = TestClient(app).post("/auth/login", json={"username": ADMIN, "password": "wrong"})
    assert resp.status_code == 401


def test_login_unknown_user():
    resp = TestClient(app).post("/auth/login", json={"username": "nobody", "password": "x"})
    assert resp.status_code == 401


def test_auth_me_and_logout():
    c = TestClient(app)
    _login_admin(c)
    assert c.get("/auth/me").json()["username"] == ADMIN

    resp = c.post("/auth/logout")
    assert resp.json()["status"] == "logged_out"
    assert c.get("/auth/me").status_code == 401


# ── Route protection ─────────────────────────────────────────────────────


def test_events_requires_admin():
    c = TestClient(app)
    assert c.get("/events").status_code == 401
    c.post("/auth/register", json={"username": "alice", "password": "secret123"})
    c.post("/auth/login", json={"username": "alice", "password": "secret123"})
    assert c.get("/events").status_code == 403


def test_analytics_requires_admin():
    c = TestClient(app)
    c.post("/auth/register", json={"username": "alice", "password": "secret123"})
    c.post("/auth/login", json={"username": "alice", "password": "secret123"})
    assert c.get("/analytics").status_code == 403


def test_events_visible_to_admin():
    c = TestClient(app)
    c.post("/auth/register", json={"username": "alice", "password": "secret123"})
    c.post("/auth/login", json={"username": "alice", "password": "secret123"})
    c.post("/restaurants", json={"name": "Golden Fork", "location": "123 Main St"})

    _login_admin(c)
    resp = c.get("/events")
    assert resp.status_code == 200
    events = resp.json()
    assert [e["type"] for e in events] == ["RestaurantRegistered"]
    assert events[0]["owner"] == "alice"

    resp = c.get("/events", params={"event_type": "ReviewSubmitted"})
    assert resp.json() == []


def test_read_endpoints_are_public():
    c = TestClient(app)
    assert c.get("/health").status_code == 200
    assert c.get("/counts").status_code == 200
    assert c.get("/users/anyone/reviews").status_code == 200

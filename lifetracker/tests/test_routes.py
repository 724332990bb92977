"""
Tests for the points HTTP routes.

Tests cover:
1. Authentication
2. Recalculation, including stale fallback on database errors
3. Bonus application errors
4. Session and todo mutations
"""
import pytest
from datetime import date, datetime
from unittest.mock import patch
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from lifetracker import auth
from lifetracker.database import get_db
from lifetracker.main import app
from lifetracker.services.date_service import DateService
from lifetracker.services.day_service import DayService


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def headers():
    return {"X-API-Key": auth.get_api_key()}


@pytest.fixture
def scored_day(db_session, today, make_activity, make_goal, make_session):
    make_activity("meditation", goal_points=60)
    make_goal("meditation", 10)
    make_session("meditation", 600, today)


class TestAuth:
    """Tests for API key handling"""

    def test_health_check_is_public(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "active"

    def test_missing_key_is_rejected(self, client, today):
        response = client.get(f"/api/points/{today.isoformat()}")

        assert response.status_code == 401

    def test_wrong_key_is_rejected(self, client, today):
        response = client.get(f"/api/points/{today.isoformat()}", headers={"X-API-Key": "nope"})

        assert response.status_code == 401

    def test_rotated_key_applies_without_restart(self, client, headers, monkeypatch):
        monkeypatch.setenv("LIFETRACKER_API_KEY", "rotated-key")

        assert client.get("/api/streak", headers=headers).status_code == 401
        assert client.get("/api/streak", headers={"X-API-Key": "rotated-key"}).status_code == 200
        assert auth.is_default_api_key() is False


class TestPointsRoutes:
    """Tests for points endpoints"""

    def test_get_day_points(self, client, headers, today, scored_day):
        response = client.get(f"/api/points/{today.isoformat()}", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["earned_points"] == 60
        assert body["breakdown"][0]["source_id"] == "meditation"

    def test_recalculate(self, client, headers, today, scored_day):
        response = client.post(f"/api/points/{today.isoformat()}/recalculate", headers=headers)

        assert response.status_code == 200
        assert response.json()["total_points"] == 60
        assert response.json()["stale"] is False

    def test_recalculate_falls_back_to_last_known(self, client, headers, db_session, today,
                                                  make_daily_points):
        """Database failure during recalculation should serve stored points as stale"""
        make_daily_points(today, earned_points=42)

        with patch.object(DayService, "recalculate_day_points",
                          side_effect=OperationalError("UPDATE", {}, Exception("disk I/O error"))):
            response = client.post(f"/api/points/{today.isoformat()}/recalculate", headers=headers)

        assert response.status_code == 200
        assert response.json()["total_points"] == 42
        assert response.json()["stale"] is True

    def test_recalculate_without_last_known_is_unavailable(self, client, headers, today):
        with patch.object(DayService, "recalculate_day_points",
                          side_effect=OperationalError("UPDATE", {}, Exception("disk I/O error"))):
            response = client.post(f"/api/points/{today.isoformat()}/recalculate", headers=headers)

        assert response.status_code == 503

    def test_insufficient_bonus_returns_400(self, client, headers, today):
        response = client.post(
            f"/api/points/{today.isoformat()}/bonus", json={"amount": 999}, headers=headers
        )

        assert response.status_code == 400
        assert "You have 0 points" in response.json()["detail"]

    def test_range_rejects_reversed_dates(self, client, headers):
        response = client.get(
            "/api/points/range", params={"start": "2026-01-28", "end": "2026-01-20"},
            headers=headers
        )

        assert response.status_code == 400

    def test_summary(self, client, headers, today, scored_day):
        response = client.get(f"/api/points/{today.isoformat()}/summary", headers=headers)

        assert response.status_code == 200
        assert response.json()["bonus_needed_for_goal"] == 40

    def test_streak_and_bonus(self, client, headers):
        streak = client.get("/api/streak", headers=headers)
        bonus = client.get("/api/bonus/current", headers=headers)

        assert streak.json() == {"current_streak": 0, "longest_streak": 0, "last_update_date": None}
        assert bonus.json()["available_bonus"] == 0
        assert bonus.json()["week_start"] == DateService.get_week_start(DateService.today()).isoformat()


class TestMutationRoutes:
    """Tests for session and todo endpoints"""

    def test_record_session(self, client, headers, make_activity, make_goal):
        make_activity("workout", goal_points=120)
        make_goal("workout", 30)

        response = client.post("/api/sessions", json={
            "activity_id": "workout",
            "duration_seconds": 1800,
            "date": date.today().isoformat()
        }, headers=headers)

        assert response.status_code == 201
        assert response.json()["total_points"] == 120

    def test_complete_unknown_todo(self, client, headers):
        response = client.post("/api/todos/404/complete", headers=headers)

        assert response.status_code == 404

    def test_complete_todo(self, client, headers, make_todo):
        todo = make_todo("Taxes", points=30)

        response = client.post(
            f"/api/todos/{todo.id}/complete",
            params={"completed_at": "2026-01-27T18:30:00"},
            headers=headers
        )

        assert response.status_code == 200
        assert response.json()["date"] == "2026-01-27"
        assert response.json()["earned_points"] == 30

    def test_uncomplete_todo(self, client, headers, make_todo):
        todo = make_todo("Taxes", points=30, completed_at=datetime(2026, 1, 27, 18, 30))
        client.post("/api/points/2026-01-27/recalculate", headers=headers)

        response = client.post(f"/api/todos/{todo.id}/uncomplete", headers=headers)

        assert response.status_code == 200
        assert response.json()["date"] == "2026-01-27"
        assert response.json()["earned_points"] == 0

    def test_uncomplete_open_todo_returns_null(self, client, headers, make_todo):
        todo = make_todo("Taxes", points=30)

        response = client.post(f"/api/todos/{todo.id}/uncomplete", headers=headers)

        assert response.status_code == 200
        assert response.json() is None

    def test_uncomplete_unknown_todo(self, client, headers):
        response = client.post("/api/todos/404/uncomplete", headers=headers)

        assert response.status_code == 404

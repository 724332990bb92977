"""
Shared fixtures for the life tracker test suite.
"""
import os
import tempfile

# Keep importing lifetracker.main from touching real paths
os.environ.setdefault("LIFETRACKER_DATABASE_URL", "sqlite://")
os.environ.setdefault("LIFETRACKER_LOG_DIR", tempfile.mkdtemp(prefix="lifetracker-logs-"))
os.environ.setdefault("LIFETRACKER_SCHEDULER_ENABLED", "false")
os.environ.setdefault("LIFETRACKER_API_KEY", "test-key")

import pytest
from datetime import date, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lifetracker.database import Base
from lifetracker.models import Activity, ActivityGoal, TrackingSession, Todo, DailyPoints


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def today():
    """A fixed Wednesday; its week starts on Monday 2026-01-26"""
    return date(2026, 1, 28)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def make_activity(db_session):
    def _make(activity_id, name=None, is_negative=False, goal_points=10,
              negative_points_per_minute=0.5, color="#4CAF50"):
        activity = Activity(
            id=activity_id,
            name=name or activity_id.capitalize(),
            color=color,
            is_negative=is_negative,
            goal_points=goal_points,
            negative_points_per_minute=negative_points_per_minute
        )
        db_session.add(activity)
        db_session.commit()
        return activity
    return _make


@pytest.fixture
def make_goal(db_session):
    def _make(activity_id, minimum_minutes, enabled=True):
        goal = ActivityGoal(
            activity_id=activity_id,
            minimum_minutes=minimum_minutes,
            enabled=enabled
        )
        db_session.add(goal)
        db_session.commit()
        return goal
    return _make


@pytest.fixture
def make_session(db_session):
    def _make(activity_id, duration_seconds, on_date):
        session = TrackingSession(
            activity_id=activity_id,
            duration_seconds=duration_seconds,
            date=on_date
        )
        db_session.add(session)
        db_session.commit()
        return session
    return _make


@pytest.fixture
def make_todo(db_session):
    def _make(title, points, completed_at=None, completed=None):
        todo = Todo(
            title=title,
            points=points,
            completed=completed if completed is not None else completed_at is not None,
            completed_at=completed_at
        )
        db_session.add(todo)
        db_session.commit()
        return todo
    return _make


@pytest.fixture
def make_daily_points(db_session):
    def _make(on_date, earned_points=0, bonus_applied=0):
        total = earned_points + bonus_applied
        record = DailyPoints(
            date=on_date,
            earned_points=earned_points,
            bonus_applied=bonus_applied,
            total_points=total,
            reached_goal=total >= 100,
            breakdown="[]"
        )
        db_session.add(record)
        db_session.commit()
        return record
    return _make

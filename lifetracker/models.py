from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Date
from datetime import datetime

from lifetracker.constants import DEFAULT_GOAL_POINTS, DEFAULT_NEGATIVE_POINTS_PER_MINUTE
from lifetracker.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String, primary_key=True, index=True)  # UUID
    name = Column(String, nullable=False)
    color = Column(String, default="#4CAF50")
    icon = Column(String, nullable=True)
    order = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)

    # Procrastination-type activities subtract instead of add
    is_negative = Column(Boolean, default=False)
    goal_points = Column(Integer, default=DEFAULT_GOAL_POINTS)  # Awarded when daily goal is met
    negative_points_per_minute = Column(Float, default=DEFAULT_NEGATIVE_POINTS_PER_MINUTE)


class ActivityGoal(Base):
    __tablename__ = "activity_goals"

    id = Column(Integer, primary_key=True, index=True)
    activity_id = Column(String, nullable=False, unique=True, index=True)
    minimum_minutes = Column(Integer, nullable=False)
    enabled = Column(Boolean, default=True)


class TrackingSession(Base):
    __tablename__ = "tracking_sessions"

    id = Column(Integer, primary_key=True, index=True)
    activity_id = Column(String, nullable=False, index=True)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    duration_seconds = Column(Integer, default=0)
    date = Column(Date, nullable=False, index=True)  # Day the session counts towards
    created_at = Column(DateTime, default=datetime.now)


class Todo(Base):
    __tablename__ = "todos"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    completed = Column(Boolean, default=False)
    completed_at = Column(DateTime, nullable=True)
    points = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)


class DailyPoints(Base):
    __tablename__ = "daily_points"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, unique=True, index=True)

    earned_points = Column(Integer, default=0)  # Rounded sum of breakdown
    bonus_applied = Column(Integer, default=0)  # Manual top-up, kept across recalculation
    total_points = Column(Integer, default=0)  # earned_points + bonus_applied
    reached_goal = Column(Boolean, default=False)

    # Per-source breakdown (JSON list)
    breakdown = Column(String, nullable=True)

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class WeeklyBonus(Base):
    __tablename__ = "weekly_bonus"

    id = Column(Integer, primary_key=True, index=True)
    week_start = Column(Date, nullable=False, unique=True, index=True)  # Monday

    available_bonus = Column(Integer, default=0)  # Spendable pool, capped weekly
    used_bonus = Column(Integer, default=0)  # Cumulative spent

    # Per-day earned/used entries (JSON list)
    daily_breakdown = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.now)


class StreakData(Base):
    __tablename__ = "streak_data"

    id = Column(Integer, primary_key=True, index=True)
    current_streak = Column(Integer, default=0)
    longest_streak = Column(Integer, default=0)
    last_update_date = Column(Date, nullable=True)  # None until the first update

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

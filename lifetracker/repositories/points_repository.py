"""
Points repository - Data access layer for points engine records.
Handles daily points, weekly bonus ledgers and the streak record.
"""
import json
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from lifetracker.models import DailyPoints, WeeklyBonus, StreakData
from lifetracker.schemas import (
    DailyPointsData, PointBreakdownItem, WeeklyBonusData, DailyBonusEntry, StreakState
)


def _to_daily_points_data(record: DailyPoints) -> DailyPointsData:
    breakdown = json.loads(record.breakdown) if record.breakdown else []
    return DailyPointsData(
        date=record.date,
        earned_points=record.earned_points or 0,
        bonus_applied=record.bonus_applied or 0,
        total_points=record.total_points or 0,
        reached_goal=bool(record.reached_goal),
        breakdown=[PointBreakdownItem(**item) for item in breakdown]
    )


def _to_weekly_bonus_data(record: WeeklyBonus) -> WeeklyBonusData:
    entries = json.loads(record.daily_breakdown) if record.daily_breakdown else []
    return WeeklyBonusData(
        week_start=record.week_start,
        available_bonus=record.available_bonus or 0,
        used_bonus=record.used_bonus or 0,
        daily_breakdown=[DailyBonusEntry(**entry) for entry in entries]
    )


class DailyPointsRepository:
    """Repository for DailyPoints data access"""

    @staticmethod
    def get_by_date(db: Session, target_date: date) -> Optional[DailyPointsData]:
        """Get stored daily points for specific date"""
        record = db.query(DailyPoints).filter(DailyPoints.date == target_date).first()
        return _to_daily_points_data(record) if record else None

    @staticmethod
    def get_range(db: Session, start_date: date, end_date: date) -> List[DailyPointsData]:
        """Get stored daily points between two dates (inclusive), oldest first"""
        records = db.query(DailyPoints).filter(
            DailyPoints.date >= start_date,
            DailyPoints.date <= end_date
        ).order_by(DailyPoints.date).all()
        return [_to_daily_points_data(record) for record in records]

    @staticmethod
    def save(db: Session, daily_points: DailyPointsData) -> DailyPointsData:
        """Insert or overwrite the record for daily_points.date"""
        record = db.query(DailyPoints).filter(DailyPoints.date == daily_points.date).first()
        if not record:
            record = DailyPoints(date=daily_points.date)
            db.add(record)

        record.earned_points = daily_points.earned_points
        record.bonus_applied = daily_points.bonus_applied
        record.total_points = daily_points.total_points
        record.reached_goal = daily_points.reached_goal
        record.breakdown = json.dumps(
            [item.model_dump() for item in daily_points.breakdown]
        )

        db.commit()
        db.refresh(record)
        return _to_daily_points_data(record)


class WeeklyBonusRepository:
    """Repository for WeeklyBonus data access"""

    @staticmethod
    def get_or_create(db: Session, week_start: date) -> WeeklyBonusData:
        """
        Get ledger for a week (creates an empty one if not exists).

        Returns:
            Weekly bonus ledger
        """
        record = db.query(WeeklyBonus).filter(WeeklyBonus.week_start == week_start).first()
        if not record:
            record = WeeklyBonus(
                week_start=week_start,
                available_bonus=0,
                used_bonus=0,
                daily_breakdown=json.dumps([])
            )
            db.add(record)
            db.commit()
            db.refresh(record)
        return _to_weekly_bonus_data(record)

    @staticmethod
    def save(db: Session, weekly_bonus: WeeklyBonusData) -> WeeklyBonusData:
        """Insert or overwrite the ledger for weekly_bonus.week_start"""
        record = db.query(WeeklyBonus).filter(
            WeeklyBonus.week_start == weekly_bonus.week_start
        ).first()
        if not record:
            record = WeeklyBonus(week_start=weekly_bonus.week_start)
            db.add(record)

        record.available_bonus = weekly_bonus.available_bonus
        record.used_bonus = weekly_bonus.used_bonus
        record.daily_breakdown = json.dumps(
            [entry.model_dump(mode="json") for entry in weekly_bonus.daily_breakdown]
        )

        db.commit()
        db.refresh(record)
        return _to_weekly_bonus_data(record)


class StreakRepository:
    """Repository for the singleton StreakData record"""

    @staticmethod
    def get(db: Session) -> StreakState:
        """
        Get streak state (creates with zero values if not exists).

        Returns:
            Streak state
        """
        record = db.query(StreakData).first()
        if not record:
            record = StreakData(current_streak=0, longest_streak=0, last_update_date=None)
            db.add(record)
            db.commit()
            db.refresh(record)
        return StreakState(
            current_streak=record.current_streak or 0,
            longest_streak=record.longest_streak or 0,
            last_update_date=record.last_update_date
        )

    @staticmethod
    def save(db: Session, state: StreakState) -> StreakState:
        """Overwrite the streak record with state"""
        record = db.query(StreakData).first()
        if not record:
            record = StreakData()
            db.add(record)

        record.current_streak = state.current_streak
        record.longest_streak = state.longest_streak
        record.last_update_date = state.last_update_date

        db.commit()
        db.refresh(record)
        return state

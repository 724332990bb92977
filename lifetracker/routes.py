"""
Points HTTP routes.
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lifetracker.auth import verify_api_key
from lifetracker.database import get_db
from lifetracker.exceptions import InsufficientBonusException, TodoNotFoundException
from lifetracker.repositories.points_repository import DailyPointsRepository
from lifetracker.schemas import (
    ApplyBonusRequest,
    DailyPointsData,
    DailyPointsResponse,
    DayAchievement,
    PointsSummaryResponse,
    SessionCreate,
    StreakState,
    WeeklyBonusData,
)
from lifetracker.services.day_service import DayService
from lifetracker.services.stats_service import StatsService

logger = logging.getLogger("lifetracker.api")

router = APIRouter(prefix="/api", tags=["points"], dependencies=[Depends(verify_api_key)])


def _recalculate_or_stale(db: Session, target_date: date) -> DailyPointsResponse:
    """
    Recalculate a day, falling back to the last stored points on database errors.

    Raises:
        HTTPException: 503 when recalculation failed and nothing is stored
    """
    try:
        daily_points = DayService(db).recalculate_day_points(target_date)
        return DailyPointsResponse(**daily_points.model_dump())
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Recalculation failed for {target_date}: {e}")

    try:
        last_known = DailyPointsRepository.get_by_date(db, target_date)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not load last known points for {target_date}: {e}")
        last_known = None

    if last_known is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Points for {target_date} are temporarily unavailable"
        )
    return DailyPointsResponse(**last_known.model_dump(), stale=True)


@router.get("/points/range", response_model=List[DailyPointsData])
def get_daily_points_range(
    start: date = Query(...),
    end: date = Query(...),
    db: Session = Depends(get_db)
):
    """Get stored daily points between two dates."""
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    return DayService(db).get_daily_points_range(start, end)


@router.get("/points/{target_date}", response_model=DailyPointsData)
def get_day_points(target_date: date, db: Session = Depends(get_db)):
    """Get points for a day (calculated on first access)."""
    return DayService(db).get_day_points(target_date)


@router.get("/points/{target_date}/summary", response_model=PointsSummaryResponse)
def get_points_summary(target_date: date, db: Session = Depends(get_db)):
    """Get a day's points with the weekly bonus pool and streak."""
    return DayService(db).get_points_summary(target_date)


@router.post("/points/{target_date}/recalculate", response_model=DailyPointsResponse)
def recalculate_day(target_date: date, db: Session = Depends(get_db)):
    """Recalculate points, bonus and streak for a day."""
    return _recalculate_or_stale(db, target_date)


@router.post("/points/{target_date}/bonus", response_model=DailyPointsData)
def apply_bonus(target_date: date, request: ApplyBonusRequest, db: Session = Depends(get_db)):
    """Spend bonus from the current week's pool on a day."""
    try:
        return DayService(db).apply_bonus_to_day(target_date, request.amount)
    except InsufficientBonusException as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/bonus/current", response_model=WeeklyBonusData)
def get_current_weekly_bonus(db: Session = Depends(get_db)):
    """Get the current week's bonus ledger."""
    return DayService(db).get_current_weekly_bonus()


@router.get("/streak", response_model=StreakState)
def get_streak(db: Session = Depends(get_db)):
    """Get the streak record."""
    return DayService(db).get_streak()


@router.get("/stats/week", response_model=List[DayAchievement])
def get_week_achievements(
    start: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    """Get per-day achievements for a week (current week by default)."""
    return StatsService(db).get_week_achievements(start)


@router.get("/stats/streak")
def get_overall_streak(db: Session = Depends(get_db)):
    """Get consecutive excellent days ending today."""
    return {"streak": StatsService(db).get_overall_streak()}


@router.post("/sessions", response_model=DailyPointsResponse, status_code=status.HTTP_201_CREATED)
def record_session(session_data: SessionCreate, db: Session = Depends(get_db)):
    """Store a completed session and recalculate its day."""
    service = DayService(db)
    try:
        _, daily_points = service.record_session(session_data)
        return DailyPointsResponse(**daily_points.model_dump())
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Recording session for {session_data.date} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session could not be recorded"
        )


@router.post("/todos/{todo_id}/complete", response_model=DailyPointsResponse)
def complete_todo(
    todo_id: int,
    completed_at: Optional[datetime] = None,
    db: Session = Depends(get_db)
):
    """Complete a todo and recalculate the day it was completed on."""
    try:
        daily_points = DayService(db).complete_todo(todo_id, completed_at)
        return DailyPointsResponse(**daily_points.model_dump())
    except TodoNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/todos/{todo_id}/uncomplete", response_model=Optional[DailyPointsResponse])
def uncomplete_todo(todo_id: int, db: Session = Depends(get_db)):
    """Reopen a todo and recalculate the day it counted towards (null if none)."""
    try:
        daily_points = DayService(db).uncomplete_todo(todo_id)
    except TodoNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    if daily_points is None:
        return None
    return DailyPointsResponse(**daily_points.model_dump())

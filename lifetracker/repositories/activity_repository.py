"""
Activity repository - Data access layer for the engine's collaborators.
Handles activities, goals, tracking sessions and todos.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from lifetracker.models import Activity, ActivityGoal, TrackingSession, Todo
from lifetracker.schemas import ActivityGoalData, UserSettingsData


class ActivityRepository:
    """Repository for Activity data access"""

    @staticmethod
    def get_all(db: Session) -> List[Activity]:
        """Get all activities in display order"""
        return db.query(Activity).order_by(Activity.order).all()


class ActivityGoalRepository:
    """Repository for ActivityGoal data access"""

    @staticmethod
    def get_all(db: Session) -> List[ActivityGoal]:
        """Get all configured goals (enabled or not)"""
        return db.query(ActivityGoal).all()

    @staticmethod
    def get_user_settings(db: Session) -> UserSettingsData:
        """Get the goal settings the points engine reads"""
        goals = ActivityGoalRepository.get_all(db)
        return UserSettingsData(
            daily_goals=[ActivityGoalData.model_validate(goal) for goal in goals]
        )


class TrackingSessionRepository:
    """Repository for TrackingSession data access"""

    @staticmethod
    def get_by_date(db: Session, target_date: date) -> List[TrackingSession]:
        """Get all sessions counted towards a date"""
        return db.query(TrackingSession).filter(
            TrackingSession.date == target_date
        ).all()

    @staticmethod
    def get_between(db: Session, start_date: date, end_date: date) -> List[TrackingSession]:
        """Get sessions between two dates (inclusive)"""
        return db.query(TrackingSession).filter(
            TrackingSession.date >= start_date,
            TrackingSession.date <= end_date
        ).order_by(TrackingSession.date).all()

    @staticmethod
    def create(db: Session, session: TrackingSession) -> TrackingSession:
        """Create new tracking session"""
        db.add(session)
        db.commit()
        db.refresh(session)
        return session


class TodoRepository:
    """Repository for Todo data access"""

    @staticmethod
    def get_all(db: Session) -> List[Todo]:
        """Get all todos"""
        return db.query(Todo).all()

    @staticmethod
    def get_by_id(db: Session, todo_id: int) -> Optional[Todo]:
        """Get todo by ID"""
        return db.query(Todo).filter(Todo.id == todo_id).first()

    @staticmethod
    def update(db: Session, todo: Todo) -> Todo:
        """Update existing todo"""
        db.commit()
        db.refresh(todo)
        return todo

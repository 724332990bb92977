"""
Day orchestration service.
Sequences points calculation, weekly bonus banking and streak updates,
and owns every database write the points engine makes.
"""
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from lifetracker.constants import DAILY_POINTS_GOAL
from lifetracker.exceptions import TodoNotFoundException
from lifetracker.models import TrackingSession
from lifetracker.repositories.activity_repository import (
    ActivityRepository, ActivityGoalRepository, TrackingSessionRepository, TodoRepository
)
from lifetracker.repositories.points_repository import (
    DailyPointsRepository, WeeklyBonusRepository, StreakRepository
)
from lifetracker.schemas import (
    DailyPointsData, WeeklyBonusData, StreakState, PointsSummaryResponse, SessionCreate
)
from lifetracker.services.bonus_service import add_bonus_to_week, spend_bonus
from lifetracker.services.date_service import DateService
from lifetracker.services.points_service import PointsCalculator, calculate_bonus_earned
from lifetracker.services.streak_service import update_streak

logger = logging.getLogger("lifetracker.points")


class DayService:
    """Use-case entry point for the points engine"""

    def __init__(self, db: Session):
        self.db = db
        self.points_repo = DailyPointsRepository()
        self.bonus_repo = WeeklyBonusRepository()
        self.streak_repo = StreakRepository()
        self.activity_repo = ActivityRepository()
        self.goal_repo = ActivityGoalRepository()
        self.session_repo = TrackingSessionRepository()
        self.todo_repo = TodoRepository()
        self.date_service = DateService()

    def calculate_daily_points(self, target_date: date) -> DailyPointsData:
        """
        Calculate and store points for a date.

        Bonus already applied to the date is read from the stored record
        and carried into the new one.

        Returns:
            Stored daily points
        """
        activities = self.activity_repo.get_all(self.db)
        sessions = self.session_repo.get_by_date(self.db, target_date)
        todos = self.todo_repo.get_all(self.db)
        goals = self.goal_repo.get_user_settings(self.db).daily_goals

        existing = self.points_repo.get_by_date(self.db, target_date)
        bonus_applied = existing.bonus_applied if existing else 0

        daily_points = PointsCalculator.calculate_daily_points(
            target_date, activities, sessions, todos, goals, bonus_applied
        )
        return self.points_repo.save(self.db, daily_points)

    def recalculate_day_points(self, target_date: date, today: Optional[date] = None) -> DailyPointsData:
        """
        Recalculate a day after its sessions or todos changed.

        Order: daily points -> weekly bonus (surplus) -> streak. Each stage
        uses the previous stage's result directly. Writes are committed as
        they happen; a failure in a later stage leaves earlier ones stored.

        Args:
            target_date: Day to recalculate
            today: Current date (defaults to the local date), selects the weekly ledger

        Returns:
            Recalculated daily points
        """
        daily_points = self.calculate_daily_points(target_date)

        bonus_earned = calculate_bonus_earned(daily_points)
        if bonus_earned > 0:
            weekly_bonus = self.get_current_weekly_bonus(today)
            weekly_bonus = add_bonus_to_week(weekly_bonus, target_date, bonus_earned)
            self.bonus_repo.save(self.db, weekly_bonus)

        self._update_streak(target_date, daily_points)

        logger.info(
            f"Recalculated {target_date}: earned={daily_points.earned_points} "
            f"total={daily_points.total_points} reached={daily_points.reached_goal}"
        )
        return daily_points

    def apply_bonus_to_day(self, target_date: date, amount: int, today: Optional[date] = None) -> DailyPointsData:
        """
        Spend bonus from the current week's pool on a day.

        The pool is always the current week's, even when target_date lies
        in an earlier week. Nothing is written when the pool cannot cover
        the amount.

        Raises:
            InsufficientBonusException: amount <= 0 or above the available pool

        Returns:
            Updated daily points for target_date
        """
        weekly_bonus = self.get_current_weekly_bonus(today)
        weekly_bonus = spend_bonus(weekly_bonus, target_date, amount)

        daily_points = self.points_repo.get_by_date(self.db, target_date)
        if daily_points is None:
            daily_points = self.calculate_daily_points(target_date)

        daily_points.bonus_applied += amount
        daily_points.total_points = daily_points.earned_points + daily_points.bonus_applied
        daily_points.reached_goal = daily_points.total_points >= DAILY_POINTS_GOAL

        daily_points = self.points_repo.save(self.db, daily_points)
        self.bonus_repo.save(self.db, weekly_bonus)

        logger.info(
            f"Applied {amount} bonus to {target_date}: total={daily_points.total_points}, "
            f"week {weekly_bonus.week_start} available={weekly_bonus.available_bonus}"
        )

        self._update_streak(target_date, daily_points)
        return daily_points

    def _update_streak(self, target_date: date, daily_points: DailyPointsData) -> StreakState:
        state = self.streak_repo.get(self.db)
        new_state = update_streak(state, target_date, daily_points)
        return self.streak_repo.save(self.db, new_state)

    def get_day_points(self, target_date: date) -> DailyPointsData:
        """Get stored points for a date, calculating them on first access"""
        daily_points = self.points_repo.get_by_date(self.db, target_date)
        if daily_points is None:
            daily_points = self.calculate_daily_points(target_date)
        return daily_points

    def get_daily_points_range(self, start_date: date, end_date: date) -> List[DailyPointsData]:
        """Get stored daily points between two dates (inclusive)"""
        return self.points_repo.get_range(self.db, start_date, end_date)

    def get_current_weekly_bonus(self, today: Optional[date] = None) -> WeeklyBonusData:
        """Get (or create) the ledger of the current week"""
        today = today or self.date_service.today()
        week_start = self.date_service.get_week_start(today)
        return self.bonus_repo.get_or_create(self.db, week_start)

    def get_available_bonus(self, today: Optional[date] = None) -> int:
        """Get the spendable bonus of the current week"""
        return self.get_current_weekly_bonus(today).available_bonus

    def check_and_reset_weekly_bonus(self, today: Optional[date] = None) -> WeeklyBonusData:
        """
        Make sure the current week's ledger exists.

        Earlier weeks are left untouched as history; a new week starts
        with an empty pool.
        """
        return self.get_current_weekly_bonus(today)

    def get_streak(self) -> StreakState:
        """Get the streak state"""
        return self.streak_repo.get(self.db)

    def get_points_summary(self, target_date: date, today: Optional[date] = None) -> PointsSummaryResponse:
        """Get a day's points together with the bonus pool and streak"""
        daily_points = self.get_day_points(target_date)
        weekly_bonus = self.get_current_weekly_bonus(today)
        streak = self.get_streak()

        bonus_needed = max(0, DAILY_POINTS_GOAL - daily_points.total_points)
        return PointsSummaryResponse(
            daily_points=daily_points,
            weekly_bonus=weekly_bonus,
            streak=streak,
            available_bonus=weekly_bonus.available_bonus,
            bonus_needed_for_goal=bonus_needed,
            can_apply_bonus=weekly_bonus.available_bonus > 0 and bonus_needed > 0
        )

    def record_session(
        self,
        session_data: SessionCreate,
        today: Optional[date] = None
    ) -> Tuple[TrackingSession, DailyPointsData]:
        """Store a completed tracking session and recalculate its day"""
        session = TrackingSession(**session_data.model_dump())
        session = self.session_repo.create(self.db, session)
        daily_points = self.recalculate_day_points(session.date, today)
        return session, daily_points

    def complete_todo(
        self,
        todo_id: int,
        completed_at: Optional[datetime] = None,
        today: Optional[date] = None
    ) -> DailyPointsData:
        """
        Mark a todo completed and recalculate the day it was completed on.

        Completing an already completed todo moves it: the day it counted
        towards before is recalculated without it.

        Raises:
            TodoNotFoundException: Unknown todo_id
        """
        todo = self.todo_repo.get_by_id(self.db, todo_id)
        if not todo:
            raise TodoNotFoundException(todo_id)

        previous_date = self._counted_date(todo)

        todo.completed = True
        todo.completed_at = completed_at or datetime.now()
        todo = self.todo_repo.update(self.db, todo)
        completion_date = self.date_service.to_date(todo.completed_at)

        if previous_date is not None and previous_date != completion_date:
            logger.info(f"Todo {todo_id} moved from {previous_date} to {completion_date}")
            self.recalculate_day_points(previous_date, today)

        return self.recalculate_day_points(completion_date, today)

    def uncomplete_todo(self, todo_id: int, today: Optional[date] = None) -> Optional[DailyPointsData]:
        """
        Mark a todo as not completed and recalculate the day it counted towards.

        Raises:
            TodoNotFoundException: Unknown todo_id

        Returns:
            Recalculated daily points, or None if the todo was not counted anywhere
        """
        todo = self.todo_repo.get_by_id(self.db, todo_id)
        if not todo:
            raise TodoNotFoundException(todo_id)

        previous_date = self._counted_date(todo)

        todo.completed = False
        todo.completed_at = None
        self.todo_repo.update(self.db, todo)

        if previous_date is None:
            return None
        return self.recalculate_day_points(previous_date, today)

    def _counted_date(self, todo) -> Optional[date]:
        if todo.completed and todo.completed_at is not None:
            return self.date_service.to_date(todo.completed_at)
        return None

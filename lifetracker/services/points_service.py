"""
Points calculation service.
Turns a day's tracked sessions and completed todos into a daily score.
Pure: receives all data via parameters and never touches the database.
"""
import math
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Sequence

from lifetracker.models import Activity, TrackingSession, Todo
from lifetracker.schemas import ActivityGoalData, DailyPointsData, PointBreakdownItem
from lifetracker.services.goal_service import find_enabled_goal, goal_seconds, is_goal_met
from lifetracker.constants import (
    DAILY_POINTS_GOAL,
    DEFAULT_GOAL_POINTS,
    DEFAULT_NEGATIVE_POINTS_PER_MINUTE,
    SOURCE_ACTIVITY,
    SOURCE_TODO,
)


def round_points(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)"""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_bonus_earned(daily_points: DailyPointsData) -> int:
    """Surplus over the daily goal that can seed the weekly bonus pool"""
    return max(0, daily_points.total_points - DAILY_POINTS_GOAL)


class PointsCalculator:
    """Daily points calculation"""

    @staticmethod
    def calculate_daily_points(
        target_date: date,
        activities: Sequence[Activity],
        sessions: Sequence[TrackingSession],
        todos: Sequence[Todo],
        goals: Sequence[ActivityGoalData],
        bonus_applied: int = 0
    ) -> DailyPointsData:
        """
        Calculate daily points for a date.

        Activities with an enabled goal award goal_points only when the whole
        goal is reached. Negative activities deduct points per full minute.
        Completed todos add their points on the day they were completed.

        Args:
            target_date: Day being scored
            activities: All configured activities
            sessions: Sessions counted towards target_date
            todos: All todos (filtered here by completion day)
            goals: Configured activity goals
            bonus_applied: Bonus already applied to this day, carried over

        Returns:
            DailyPointsData for target_date
        """
        seconds_by_activity = PointsCalculator._sum_seconds_by_activity(sessions, target_date)

        breakdown: List[PointBreakdownItem] = []
        for activity in activities:
            total_seconds = seconds_by_activity.get(activity.id, 0)
            if total_seconds == 0:
                continue

            item = PointsCalculator._score_activity(activity, total_seconds, goals)
            if item is not None:
                breakdown.append(item)

        breakdown.extend(PointsCalculator._score_todos(todos, target_date))

        earned_points = round_points(sum(item.points for item in breakdown))
        total_points = earned_points + bonus_applied

        return DailyPointsData(
            date=target_date,
            earned_points=earned_points,
            bonus_applied=bonus_applied,
            total_points=total_points,
            reached_goal=total_points >= DAILY_POINTS_GOAL,
            breakdown=breakdown
        )

    @staticmethod
    def _sum_seconds_by_activity(
        sessions: Sequence[TrackingSession],
        target_date: date
    ) -> Dict[str, int]:
        """Total tracked seconds per activity id for target_date"""
        totals: Dict[str, int] = defaultdict(int)
        for session in sessions:
            if session.date != target_date:
                continue
            totals[session.activity_id] += session.duration_seconds or 0
        return totals

    @staticmethod
    def _score_activity(
        activity: Activity,
        total_seconds: int,
        goals: Sequence[ActivityGoalData]
    ):
        """
        Score one activity's tracked time.

        Returns:
            PointBreakdownItem, or None when the activity takes no part in scoring
        """
        if activity.is_negative:
            minutes = math.floor(total_seconds / 60)
            per_minute = activity.negative_points_per_minute
            if per_minute is None:
                per_minute = DEFAULT_NEGATIVE_POINTS_PER_MINUTE

            return PointBreakdownItem(
                source=SOURCE_ACTIVITY,
                source_id=str(activity.id),
                source_name=activity.name,
                points=-(minutes * per_minute),
                goal_met=False,
                time_spent=total_seconds
            )

        goal = find_enabled_goal(activity.id, goals)
        if goal is None:
            return None

        goal_met = is_goal_met(total_seconds, goal)
        goal_points = activity.goal_points
        if goal_points is None:
            goal_points = DEFAULT_GOAL_POINTS

        return PointBreakdownItem(
            source=SOURCE_ACTIVITY,
            source_id=str(activity.id),
            source_name=activity.name,
            points=goal_points if goal_met else 0,
            goal_met=goal_met,
            time_spent=total_seconds,
            goal_time=goal_seconds(goal)
        )

    @staticmethod
    def _score_todos(todos: Sequence[Todo], target_date: date) -> List[PointBreakdownItem]:
        """Breakdown rows for todos completed on target_date"""
        items = []
        for todo in todos:
            if not todo.completed or todo.completed_at is None:
                continue
            if todo.completed_at.date() != target_date:
                continue
            if not todo.points or todo.points <= 0:
                continue

            items.append(PointBreakdownItem(
                source=SOURCE_TODO,
                source_id=str(todo.id),
                source_name=todo.title,
                points=todo.points,
                goal_met=True
            ))
        return items

"""
Statistics service.
Per-day achievement summaries built from sessions, goals and stored points.
"""
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Mapping, Optional, Sequence
from sqlalchemy.orm import Session

from lifetracker.constants import (
    DAILY_POINTS_GOAL,
    GOOD_DAY_THRESHOLD,
    OVERALL_STREAK_WINDOW_DAYS,
    DAY_STATUS_EXCELLENT,
    DAY_STATUS_GOOD,
    DAY_STATUS_POOR,
)
from lifetracker.models import Activity, TrackingSession
from lifetracker.repositories.activity_repository import (
    ActivityRepository, ActivityGoalRepository, TrackingSessionRepository
)
from lifetracker.repositories.points_repository import DailyPointsRepository
from lifetracker.schemas import ActivityGoalData, ActivityStats, DailyPointsData, DayAchievement
from lifetracker.services.date_service import DateService


def group_sessions_by_date(sessions: Sequence[TrackingSession]) -> Dict[date, List[TrackingSession]]:
    """Group sessions by the day they count towards"""
    grouped: Dict[date, List[TrackingSession]] = defaultdict(list)
    for session in sessions:
        grouped[session.date].append(session)
    return dict(grouped)


def _day_status(total_points: int) -> str:
    if total_points >= DAILY_POINTS_GOAL:
        return DAY_STATUS_EXCELLENT
    if total_points >= GOOD_DAY_THRESHOLD:
        return DAY_STATUS_GOOD
    return DAY_STATUS_POOR


def calculate_day_achievement(
    target_date: date,
    sessions_by_date: Mapping[date, Sequence[TrackingSession]],
    goals: Sequence[ActivityGoalData],
    activities: Mapping[str, Activity],
    daily_points_map: Optional[Mapping[date, DailyPointsData]] = None
) -> DayAchievement:
    """
    Summarize a single day.

    Status follows the day's total points: excellent at the daily goal,
    good from GOOD_DAY_THRESHOLD, poor below. Days without stored points
    count as zero.

    Args:
        target_date: Day to summarize
        sessions_by_date: Sessions grouped by day
        goals: Configured activity goals
        activities: Activities by id
        daily_points_map: Stored daily points by day

    Returns:
        DayAchievement (streak left at 0)
    """
    sessions = sessions_by_date.get(target_date, [])
    enabled_goals = [goal for goal in goals if goal.enabled]

    seconds_by_activity: Dict[str, int] = defaultdict(int)
    count_by_activity: Dict[str, int] = defaultdict(int)
    for session in sessions:
        seconds_by_activity[session.activity_id] += session.duration_seconds or 0
        count_by_activity[session.activity_id] += 1

    total_seconds = sum(seconds_by_activity.values())

    activity_breakdown = []
    for activity_id, seconds in seconds_by_activity.items():
        activity = activities.get(activity_id)
        activity_breakdown.append(ActivityStats(
            activity_id=activity_id,
            activity_name=activity.name if activity else "Unknown",
            activity_color=(activity.color if activity and activity.color else "#666"),
            total_seconds=seconds,
            session_count=count_by_activity[activity_id],
            percentage=(seconds / total_seconds) * 100 if total_seconds > 0 else 0
        ))

    goals_completed = sum(
        1 for goal in enabled_goals
        if seconds_by_activity.get(goal.activity_id, 0) / 60 >= goal.minimum_minutes
    )

    daily_points = daily_points_map.get(target_date) if daily_points_map else None
    total_points = daily_points.total_points if daily_points else 0

    return DayAchievement(
        date=target_date,
        score=min(total_points, DAILY_POINTS_GOAL),
        points=daily_points,
        goals_completed=goals_completed,
        total_goals=len(enabled_goals),
        streak=0,
        status=_day_status(total_points),
        total_minutes_tracked=round(total_seconds / 60),
        activity_breakdown=activity_breakdown
    )


def calculate_week_achievements(
    start_date: date,
    sessions_by_date: Mapping[date, Sequence[TrackingSession]],
    goals: Sequence[ActivityGoalData],
    activities: Mapping[str, Activity],
    daily_points_map: Optional[Mapping[date, DailyPointsData]] = None
) -> List[DayAchievement]:
    """
    Summarize seven days starting at start_date.

    The trailing run of excellent days gets streak numbers counted back
    from the last day; every day before the first miss gets 0.
    """
    achievements = [
        calculate_day_achievement(
            start_date + timedelta(days=i), sessions_by_date, goals, activities, daily_points_map
        )
        for i in range(7)
    ]

    streak = 0
    for achievement in reversed(achievements):
        if achievement.status != DAY_STATUS_EXCELLENT:
            break
        streak += 1
        achievement.streak = streak

    return achievements


def calculate_overall_streak(
    today: date,
    daily_points_map: Mapping[date, DailyPointsData],
    window_days: int = OVERALL_STREAK_WINDOW_DAYS
) -> int:
    """Count consecutive excellent days ending today within the window"""
    streak = 0
    for day in reversed(DateService.get_last_n_days(window_days, today)):
        daily_points = daily_points_map.get(day)
        total_points = daily_points.total_points if daily_points else 0
        if _day_status(total_points) != DAY_STATUS_EXCELLENT:
            break
        streak += 1
    return streak


class StatsService:
    """Loads stored data for the statistics views"""

    def __init__(self, db: Session):
        self.db = db
        self.points_repo = DailyPointsRepository()
        self.activity_repo = ActivityRepository()
        self.goal_repo = ActivityGoalRepository()
        self.session_repo = TrackingSessionRepository()
        self.date_service = DateService()

    def get_week_achievements(self, start_date: Optional[date] = None) -> List[DayAchievement]:
        """Achievements for a week (defaults to the current Monday-Sunday week)"""
        if start_date is None:
            start_date, _ = self.date_service.get_week_range(self.date_service.today())
        end_date = start_date + timedelta(days=6)

        sessions = self.session_repo.get_between(self.db, start_date, end_date)
        daily_points = self.points_repo.get_range(self.db, start_date, end_date)
        activities = {activity.id: activity for activity in self.activity_repo.get_all(self.db)}
        goals = self.goal_repo.get_user_settings(self.db).daily_goals

        return calculate_week_achievements(
            start_date,
            group_sessions_by_date(sessions),
            goals,
            activities,
            {points.date: points for points in daily_points}
        )

    def get_overall_streak(self, today: Optional[date] = None) -> int:
        """Consecutive excellent days ending today, from stored points"""
        today = today or self.date_service.today()
        start_date = today - timedelta(days=OVERALL_STREAK_WINDOW_DAYS - 1)
        daily_points = self.points_repo.get_range(self.db, start_date, today)
        return calculate_overall_streak(today, {points.date: points for points in daily_points})

"""
Tests for the statistics service.

Tests cover:
1. Day achievement status, score and activity breakdown
2. Week achievements with trailing streak numbering
3. Overall streak from stored points
"""
from datetime import date, timedelta

from lifetracker.models import Activity, TrackingSession
from lifetracker.schemas import ActivityGoalData, DailyPointsData
from lifetracker.services.stats_service import (
    StatsService,
    calculate_day_achievement,
    calculate_overall_streak,
    calculate_week_achievements,
    group_sessions_by_date,
)

MONDAY = date(2026, 1, 26)


def points_map(totals):
    return {
        day: DailyPointsData(date=day, earned_points=total, total_points=total,
                             reached_goal=total >= 100)
        for day, total in totals.items()
    }


class TestDayAchievement:
    """Tests for calculate_day_achievement"""

    def test_status_thresholds(self):
        """Status should be excellent at 100, good from 80, poor below"""
        totals = {MONDAY: 140, MONDAY + timedelta(days=1): 80, MONDAY + timedelta(days=2): 79}
        results = [
            calculate_day_achievement(day, {}, [], {}, points_map(totals))
            for day in totals
        ]

        assert [r.status for r in results] == ["excellent", "good", "poor"]
        assert [r.score for r in results] == [100, 80, 79]

    def test_day_without_points_is_poor(self):
        result = calculate_day_achievement(MONDAY, {}, [], {})

        assert result.status == "poor"
        assert result.score == 0
        assert result.points is None

    def test_activity_breakdown_and_goals(self):
        """Breakdown should share time per activity and count met goals"""
        sessions = [
            TrackingSession(activity_id="meditation", duration_seconds=900, date=MONDAY),
            TrackingSession(activity_id="meditation", duration_seconds=900, date=MONDAY),
            TrackingSession(activity_id="reading", duration_seconds=600, date=MONDAY),
        ]
        activities = {
            "meditation": Activity(id="meditation", name="Meditation", color="#4CAF50"),
        }
        goals = [
            ActivityGoalData(activity_id="meditation", minimum_minutes=30),
            ActivityGoalData(activity_id="reading", minimum_minutes=20),
            ActivityGoalData(activity_id="workout", minimum_minutes=10, enabled=False),
        ]

        result = calculate_day_achievement(
            MONDAY, group_sessions_by_date(sessions), goals, activities
        )

        assert result.goals_completed == 1
        assert result.total_goals == 2
        assert result.total_minutes_tracked == 40

        by_id = {row.activity_id: row for row in result.activity_breakdown}
        assert by_id["meditation"].session_count == 2
        assert by_id["meditation"].total_seconds == 1800
        assert by_id["meditation"].percentage == 75
        assert by_id["reading"].activity_name == "Unknown"
        assert by_id["reading"].activity_color == "#666"


class TestWeekAchievements:
    """Tests for calculate_week_achievements"""

    def test_trailing_excellent_days_are_numbered(self):
        """Streak numbers count back from the last day until the first miss"""
        totals = {MONDAY + timedelta(days=i): total
                  for i, total in enumerate([100, 100, 20, 100, 100, 100, 120])}

        week = calculate_week_achievements(MONDAY, {}, [], {}, points_map(totals))

        assert len(week) == 7
        assert [day.streak for day in week] == [0, 0, 0, 4, 3, 2, 1]

    def test_last_day_missed_means_no_streak(self):
        totals = {MONDAY + timedelta(days=i): 100 for i in range(6)}

        week = calculate_week_achievements(MONDAY, {}, [], {}, points_map(totals))

        assert all(day.streak == 0 for day in week)


class TestOverallStreak:
    """Tests for calculate_overall_streak"""

    def test_counts_back_from_today(self):
        today = date(2026, 1, 28)
        totals = {today - timedelta(days=i): 100 for i in range(4)}
        totals[today - timedelta(days=4)] = 50
        totals[today - timedelta(days=5)] = 100

        assert calculate_overall_streak(today, points_map(totals)) == 4

    def test_today_missing_breaks(self):
        today = date(2026, 1, 28)
        totals = {today - timedelta(days=1): 100}

        assert calculate_overall_streak(today, points_map(totals)) == 0

    def test_stops_at_window(self):
        today = date(2026, 1, 28)
        totals = {today - timedelta(days=i): 100 for i in range(20)}

        assert calculate_overall_streak(today, points_map(totals), window_days=7) == 7


class TestStatsService:
    """Tests for StatsService loading stored data"""

    def test_week_achievements_from_database(self, db_session, make_activity, make_goal,
                                             make_session, make_daily_points):
        make_activity("meditation")
        make_goal("meditation", 10)
        make_session("meditation", 600, MONDAY)
        make_daily_points(MONDAY, earned_points=110)
        make_daily_points(MONDAY + timedelta(days=7), earned_points=110)

        week = StatsService(db_session).get_week_achievements(MONDAY)

        assert week[0].status == "excellent"
        assert week[0].goals_completed == 1
        assert week[0].activity_breakdown[0].activity_name == "Meditation"
        assert all(day.points is None for day in week[1:])

    def test_overall_streak_from_database(self, db_session, today, make_daily_points):
        make_daily_points(today, earned_points=100)
        make_daily_points(today - timedelta(days=1), earned_points=130)

        assert StatsService(db_session).get_overall_streak(today=today) == 2

"""
Goal evaluation service.
Decides whether an activity's tracked time meets its daily goal.
"""
from typing import Iterable, Optional

from lifetracker.schemas import ActivityGoalData


def find_enabled_goal(activity_id: str, goals: Iterable[ActivityGoalData]) -> Optional[ActivityGoalData]:
    """
    Find the enabled goal for an activity.

    Disabled goals are treated the same as missing ones: the activity
    does not take part in goal scoring that day.

    Returns:
        Goal or None
    """
    for goal in goals:
        if goal.activity_id == activity_id and goal.enabled:
            return goal
    return None


def goal_seconds(goal: ActivityGoalData) -> int:
    """Minimum tracked seconds required by a goal"""
    return goal.minimum_minutes * 60


def is_goal_met(tracked_seconds: int, goal: ActivityGoalData) -> bool:
    """Goal is met once tracked time reaches the minimum, never partially"""
    return tracked_seconds >= goal_seconds(goal)

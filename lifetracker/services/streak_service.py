"""
Streak tracking service.
Day-over-day count of consecutive days reaching the daily points goal.

The transition is split in two: classify_streak_transition picks exactly
one variant for (state, date, goal_reached), and update_streak applies it.
Entries dated before last_update_date are not reconciled: such an entry
falls into STARTED or UNCHANGED like any other gap.
"""
import enum
import logging
from datetime import date

from lifetracker.constants import DAILY_POINTS_GOAL
from lifetracker.schemas import DailyPointsData, StreakState
from lifetracker.services.date_service import DateService

logger = logging.getLogger("lifetracker.streak")


class StreakTransition(str, enum.Enum):
    CONTINUED = "continued"  # Goal reached, previous update was yesterday
    SAME_DAY = "same_day"  # Goal reached, already counted today
    STARTED = "started"  # Goal reached after a gap or on first run
    BROKEN = "broken"  # Goal missed right after a counted day
    UNCHANGED = "unchanged"  # Goal missed, nothing to break


def classify_streak_transition(state: StreakState, entry_date: date, goal_reached: bool) -> StreakTransition:
    """Pick the transition for an entry"""
    yesterday = DateService.get_previous_day(entry_date)

    if goal_reached:
        if state.last_update_date == yesterday:
            return StreakTransition.CONTINUED
        if state.last_update_date == entry_date:
            return StreakTransition.SAME_DAY
        return StreakTransition.STARTED

    if state.last_update_date == yesterday and state.current_streak > 0:
        return StreakTransition.BROKEN
    return StreakTransition.UNCHANGED


def apply_streak_transition(
    state: StreakState,
    entry_date: date,
    transition: StreakTransition
) -> StreakState:
    """Build the state that follows a transition"""
    if transition == StreakTransition.CONTINUED:
        current = state.current_streak + 1
    elif transition == StreakTransition.STARTED:
        current = 1
    elif transition == StreakTransition.BROKEN:
        return StreakState(
            current_streak=0,
            longest_streak=state.longest_streak,
            last_update_date=entry_date
        )
    else:
        return state.model_copy()

    return StreakState(
        current_streak=current,
        longest_streak=max(state.longest_streak, current),
        last_update_date=entry_date
    )


def update_streak(state: StreakState, entry_date: date, daily_points: DailyPointsData) -> StreakState:
    """
    Advance the streak with a day's result.

    Args:
        state: Current streak state
        entry_date: Day being recorded
        daily_points: That day's points (total includes applied bonus)

    Returns:
        New streak state
    """
    goal_reached = daily_points.total_points >= DAILY_POINTS_GOAL
    transition = classify_streak_transition(state, entry_date, goal_reached)
    new_state = apply_streak_transition(state, entry_date, transition)

    if transition in (StreakTransition.CONTINUED, StreakTransition.STARTED, StreakTransition.BROKEN):
        logger.info(
            f"Streak {transition.value} on {entry_date}: "
            f"{state.current_streak} -> {new_state.current_streak}"
        )
    return new_state

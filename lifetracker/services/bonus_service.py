"""
Weekly bonus ledger.
Banks daily surplus into a capped weekly pool and records spending.
Functions return updated copies; persistence is left to the caller.
"""
import logging
from datetime import date

from lifetracker.constants import WEEKLY_BONUS_CAP
from lifetracker.exceptions import InsufficientBonusException
from lifetracker.schemas import WeeklyBonusData, DailyBonusEntry

logger = logging.getLogger("lifetracker.bonus")


def _get_or_add_entry(weekly_bonus: WeeklyBonusData, target_date: date) -> DailyBonusEntry:
    for entry in weekly_bonus.daily_breakdown:
        if entry.date == target_date:
            return entry
    entry = DailyBonusEntry(date=target_date)
    weekly_bonus.daily_breakdown.append(entry)
    return entry


def add_bonus_to_week(
    weekly_bonus: WeeklyBonusData,
    target_date: date,
    bonus_earned: int
) -> WeeklyBonusData:
    """
    Bank surplus points earned on target_date.

    The pool is capped at WEEKLY_BONUS_CAP; anything above the cap is
    discarded and does not roll over to the next week. The day's
    breakdown entry records the full amount earned.

    Args:
        weekly_bonus: Ledger to add to
        target_date: Day the surplus was earned
        bonus_earned: Surplus points (no-op when <= 0)

    Returns:
        Updated ledger copy
    """
    if bonus_earned <= 0:
        return weekly_bonus

    updated = weekly_bonus.model_copy(deep=True)
    updated.available_bonus = min(updated.available_bonus + bonus_earned, WEEKLY_BONUS_CAP)

    entry = _get_or_add_entry(updated, target_date)
    entry.earned += bonus_earned

    logger.info(
        f"Banked {bonus_earned} bonus from {target_date} "
        f"(week {updated.week_start}, available {updated.available_bonus})"
    )
    return updated


def spend_bonus(weekly_bonus: WeeklyBonusData, target_date: date, amount: int) -> WeeklyBonusData:
    """
    Draw amount from the pool for target_date.

    Raises:
        InsufficientBonusException: amount <= 0 or above the available pool
    """
    if amount <= 0 or amount > weekly_bonus.available_bonus:
        raise InsufficientBonusException(amount, weekly_bonus.available_bonus)

    updated = weekly_bonus.model_copy(deep=True)
    updated.available_bonus -= amount
    updated.used_bonus += amount

    entry = _get_or_add_entry(updated, target_date)
    entry.used += amount
    return updated

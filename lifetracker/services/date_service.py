"""
Date calculation service.
Handles calendar-day arithmetic and Monday-based week boundaries.
"""
from datetime import datetime, timedelta, date
from typing import List, Optional


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def today() -> date:
        """Get the current local calendar date"""
        return datetime.now().date()

    @staticmethod
    def get_previous_day(target_date: date) -> date:
        """Get the calendar day before target_date"""
        return target_date - timedelta(days=1)

    @staticmethod
    def get_week_start(target_date: date) -> date:
        """
        Get the Monday of the week containing target_date.

        Weeks run Monday to Sunday, so a Sunday maps back six days.

        Args:
            target_date: Any date in the week

        Returns:
            Monday of that week
        """
        return target_date - timedelta(days=target_date.weekday())

    @staticmethod
    def get_week_range(target_date: date) -> tuple[date, date]:
        """Get (monday, sunday) for the week containing target_date"""
        start = DateService.get_week_start(target_date)
        return start, start + timedelta(days=6)

    @staticmethod
    def get_last_n_days(n: int, today: Optional[date] = None) -> List[date]:
        """Get the last n days ending with today, oldest first"""
        today = today or DateService.today()
        return [today - timedelta(days=i) for i in range(n - 1, -1, -1)]

    @staticmethod
    def to_date(value: datetime) -> date:
        """Get the calendar day of a timestamp"""
        return value.date()

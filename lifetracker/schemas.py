from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import List, Optional

from lifetracker.constants import SOURCE_ACTIVITY, SOURCE_TODO


# Collaborator schemas (read-only inputs to the points engine)
class ActivityGoalData(BaseModel):
    activity_id: str
    minimum_minutes: int = Field(..., ge=0)
    enabled: bool = True

    class Config:
        from_attributes = True


class UserSettingsData(BaseModel):
    daily_goals: List[ActivityGoalData] = []


class SessionCreate(BaseModel):
    activity_id: str = Field(..., min_length=1)
    duration_seconds: int = Field(..., ge=0)
    date: date
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


# Points engine value objects
class PointBreakdownItem(BaseModel):
    source: str = Field(..., pattern=f"^({SOURCE_ACTIVITY}|{SOURCE_TODO})$")
    source_id: str
    source_name: str
    points: float  # Signed; negative activities subtract
    goal_met: bool
    time_spent: Optional[int] = None  # Seconds tracked
    goal_time: Optional[int] = None  # Seconds required


class DailyPointsData(BaseModel):
    date: date
    earned_points: int = 0
    bonus_applied: int = 0
    total_points: int = 0
    reached_goal: bool = False
    breakdown: List[PointBreakdownItem] = []


class DailyPointsResponse(DailyPointsData):
    stale: bool = False  # True when served from storage after a failed recalculation


class DailyBonusEntry(BaseModel):
    date: date
    earned: int = 0
    used: int = 0


class WeeklyBonusData(BaseModel):
    week_start: date
    available_bonus: int = 0
    used_bonus: int = 0
    daily_breakdown: List[DailyBonusEntry] = []


class StreakState(BaseModel):
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_update_date: Optional[date] = None


class ApplyBonusRequest(BaseModel):
    amount: int


class PointsSummaryResponse(BaseModel):
    daily_points: DailyPointsData
    weekly_bonus: WeeklyBonusData
    streak: StreakState
    available_bonus: int
    bonus_needed_for_goal: int
    can_apply_bonus: bool


# Stats schemas
class ActivityStats(BaseModel):
    activity_id: str
    activity_name: str
    activity_color: str
    total_seconds: int
    session_count: int
    percentage: float  # Share of the day's tracked time


class DayAchievement(BaseModel):
    date: date
    score: int  # Total points, capped at the daily goal for display
    points: Optional[DailyPointsData] = None
    goals_completed: int = 0
    total_goals: int = 0
    streak: int = 0
    status: str
    total_minutes_tracked: int = 0
    activity_breakdown: List[ActivityStats] = []

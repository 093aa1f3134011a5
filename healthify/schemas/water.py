from datetime import date

from pydantic import BaseModel, Field, field_validator

from healthify.config import settings
from healthify.services.progress_utils import round_to_int


def validate_date_key(value: str) -> str:
    """Accept only real calendar dates written as YYYY-MM-DD."""
    try:
        parsed = date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError("Invalid date format. Use YYYY-MM-DD")
    if parsed.isoformat() != value:
        raise ValueError("Invalid date format. Use YYYY-MM-DD")
    return value


class WaterGoalUpdate(BaseModel):
    goal: float = Field(allow_inf_nan=False)

    @field_validator("goal")
    @classmethod
    def validate_goal(cls, value: float) -> int:
        if value < settings.WATER_GOAL_MIN or value > settings.WATER_GOAL_MAX:
            raise ValueError(
                f"Goal must be between {settings.WATER_GOAL_MIN} and {settings.WATER_GOAL_MAX} glasses"
            )
        return round_to_int(value)


class WaterCountUpdate(BaseModel):
    count: float = Field(allow_inf_nan=False)

    @field_validator("count")
    @classmethod
    def validate_count(cls, value: float) -> int:
        if value < 0:
            raise ValueError("Count must be 0 or greater")
        if value > settings.WATER_COUNT_MAX:
            raise ValueError(f"Count must be {settings.WATER_COUNT_MAX} or less")
        return round_to_int(value)


class WaterGoalResponse(BaseModel):
    waterGoal: int


class WaterProgressResponse(BaseModel):
    date: str
    count: int
    goal: int
    percentage: int
    remaining: int
    completed: bool


class WaterDateResponse(WaterProgressResponse):
    exists: bool


class WaterHistoryEntry(BaseModel):
    date: str
    count: int
    goal: int
    percentage: int
    completed: bool


class WaterHistorySummary(BaseModel):
    startDate: str
    endDate: str
    totalDays: int
    daysWithData: int
    completedDays: int
    completionRate: int
    totalGlasses: int
    averagePerDay: float


class WaterHistoryResponse(BaseModel):
    history: list[WaterHistoryEntry] = Field(default_factory=list)
    summary: WaterHistorySummary

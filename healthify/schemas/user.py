from pydantic import BaseModel

from healthify.models.user import User


class CurrentWater(BaseModel):
    date: str
    count: int


class ProfileResponse(BaseModel):
    id: int
    email: str
    name: str | None
    is_active: bool
    waterGoal: int
    currentWater: CurrentWater | None = None

    @classmethod
    def from_user(cls, user: User) -> "ProfileResponse":
        mirror = None
        if user.current_water_date is not None and user.current_water_count is not None:
            mirror = CurrentWater(date=user.current_water_date, count=user.current_water_count)
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            is_active=user.is_active,
            waterGoal=user.water_goal,
            currentWater=mirror,
        )

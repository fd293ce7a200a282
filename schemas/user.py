"""User collection schema."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from schemas.enums import ActivityLevel, FitnessGoal, Gender

EMAIL_PATTERN = r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$"


class UserProfile(BaseModel):
    """Body metrics and preferences used for goal recommendations."""
    age: Optional[int] = Field(None, ge=13, le=120, description="Age in years")
    gender: Optional[Gender] = Field(None, description="User gender")
    height: Optional[float] = Field(None, ge=50, le=300, description="Height in cm")
    weight: Optional[float] = Field(None, ge=20, le=500, description="Weight in kg")
    activity_level: Optional[ActivityLevel] = Field(None, description="Daily activity level")
    fitness_goal: Optional[FitnessGoal] = Field(None, description="Primary fitness goal")


class ProfileUpdate(UserProfile):
    """Partial profile update; only the fields sent are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=50, description="Display name")


class RegisterRequest(UserProfile):
    """Request body for registering a new user."""
    name: str = Field(..., min_length=1, max_length=50, description="Display name")
    email: str = Field(..., pattern=EMAIL_PATTERN, description="Login email")
    password: str = Field(..., min_length=6, description="Plain text password")
    activity_level: ActivityLevel = Field(default=ActivityLevel.MODERATELY_ACTIVE)
    fitness_goal: FitnessGoal = Field(default=FitnessGoal.MAINTAIN_WEIGHT)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class LoginRequest(BaseModel):
    """Request body for logging in."""
    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Plain text password")

"""Workout collection schema."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from schemas.enums import ExerciseCategory, WorkoutDifficulty, WorkoutType
from utils.helpers import UTCDatetime


class ExerciseSet(BaseModel):
    reps: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0, description="Weight in kg")
    duration: Optional[float] = Field(None, ge=0, description="Duration in seconds")
    distance: Optional[float] = Field(None, ge=0, description="Distance in meters")
    rest_time: Optional[float] = Field(None, ge=0, description="Rest in seconds")


class Exercise(BaseModel):
    """One exercise within a workout."""
    name: str = Field(..., min_length=1, description="Exercise name")
    category: ExerciseCategory = Field(default=ExerciseCategory.OTHER)
    sets: List[ExerciseSet] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=500)


class WorkoutBase(BaseModel):
    """Fields a client may set on a workout."""
    title: str = Field(..., min_length=1, max_length=100, description="Workout title")
    date: UTCDatetime = Field(default_factory=datetime.utcnow, description="Workout date")
    duration: Optional[float] = Field(None, ge=0, le=1440, description="Duration in minutes")
    exercises: List[Exercise] = Field(default_factory=list)
    total_calories_burned: float = Field(default=0, ge=0)
    workout_type: WorkoutType = Field(default=WorkoutType.MIXED)
    difficulty: WorkoutDifficulty = Field(default=WorkoutDifficulty.INTERMEDIATE)
    notes: Optional[str] = Field(None, max_length=1000)
    is_completed: bool = False


class WorkoutCreate(WorkoutBase):
    pass


class WorkoutUpdate(BaseModel):
    """Partial workout update."""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    date: Optional[UTCDatetime] = None
    duration: Optional[float] = Field(None, ge=0, le=1440)
    exercises: Optional[List[Exercise]] = None
    total_calories_burned: Optional[float] = Field(None, ge=0)
    workout_type: Optional[WorkoutType] = None
    difficulty: Optional[WorkoutDifficulty] = None
    notes: Optional[str] = Field(None, max_length=1000)
    is_completed: Optional[bool] = None


class Workout(WorkoutBase):
    """A logged workout."""
    id: Optional[str] = Field(None, alias="_id")
    user_id: Optional[str] = Field(None, description="Owning user id")

    model_config = {"populate_by_name": True}

    @computed_field
    @property
    def total_exercises(self) -> int:
        return len(self.exercises)

    @computed_field
    @property
    def total_sets(self) -> int:
        return sum(len(exercise.sets) for exercise in self.exercises)

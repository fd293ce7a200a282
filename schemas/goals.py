"""Goal schemas: stored goals, recommendations and progress reports."""

from typing import Optional

from pydantic import BaseModel, Field

from schemas.enums import FitnessGoal
from utils.helpers import UTCDatetime


class MacroGoals(BaseModel):
    """Daily macronutrient goals in grams."""
    protein: Optional[float] = Field(None, ge=0, le=500, description="Protein goal in grams")
    carbs: Optional[float] = Field(None, ge=0, le=1000, description="Carbs goal in grams")
    fat: Optional[float] = Field(None, ge=0, le=300, description="Fat goal in grams")


class Goals(BaseModel):
    """Goals stored on the user document.

    Every field is optional: ``None`` means the metric is not tracked, which is
    not the same thing as a goal of 0.
    """
    target_weight: Optional[float] = Field(None, ge=20, le=500, description="Target weight in kg")
    weekly_weight_goal: Optional[float] = Field(None, ge=-2, le=2, description="kg per week, negative to lose")
    daily_calorie_goal: Optional[float] = Field(None, ge=800, le=5000, description="Daily calorie goal")
    macro_goals: Optional[MacroGoals] = Field(None, description="Daily macro goals")
    daily_water_goal: Optional[float] = Field(None, ge=1000, le=5000, description="Daily water goal in ml")
    weekly_workout_goal: Optional[int] = Field(None, ge=0, le=14, description="Workouts per week")
    weekly_workout_duration: Optional[int] = Field(None, ge=0, le=2520, description="Workout minutes per week")
    daily_step_goal: Optional[int] = Field(None, ge=1000, le=50000, description="Daily step goal")
    goal_deadline: Optional[UTCDatetime] = Field(None, description="Deadline for the current goals")
    is_active: bool = Field(default=True, description="Whether the goals are active")


class GoalsUpdate(BaseModel):
    """Request body for updating goals."""
    goals: Optional[Goals] = Field(None, description="Goal fields to merge into the stored goals")
    fitness_goal: Optional[FitnessGoal] = Field(None, description="New fitness goal")


class RecommendedMacros(BaseModel):
    """Recommended macro split in whole grams."""
    protein: int
    carbs: int
    fat: int


class RecommendationExplanation(BaseModel):
    """How a recommendation was derived."""
    bmr: int = Field(..., description="Basal metabolic rate, rounded")
    tdee: int = Field(..., description="Total daily energy expenditure, rounded")
    approach: str = Field(..., description="Human readable approach for the fitness goal")


class GoalRecommendation(BaseModel):
    """Output of the recommendation engine."""
    daily_calorie_goal: int
    weekly_weight_goal: float
    target_weight: Optional[float] = None
    macro_goals: RecommendedMacros
    daily_water_goal: float = Field(..., description="ml; an explicit stored goal is passed through unchanged")
    weekly_workout_goal: int
    weekly_workout_duration: int
    daily_step_goal: int
    explanation: RecommendationExplanation
    insufficient_profile: bool = Field(
        default=False,
        description="True when weight, height, age or gender is missing and BMR is 0",
    )


class ProgressEntry(BaseModel):
    """Target vs. actual for one metric over a period."""
    target: float
    actual: float
    percentage: Optional[int] = Field(None, description="None when the target is 0")


class MacroProgress(BaseModel):
    protein: Optional[ProgressEntry] = None
    carbs: Optional[ProgressEntry] = None
    fat: Optional[ProgressEntry] = None


class NutritionProgress(BaseModel):
    daily_calories: Optional[ProgressEntry] = None
    daily_water: Optional[ProgressEntry] = None
    macros: MacroProgress = Field(default_factory=MacroProgress)


class FitnessProgress(BaseModel):
    weekly_workouts: Optional[ProgressEntry] = None
    weekly_duration: Optional[ProgressEntry] = None


class NutritionTotals(BaseModel):
    """Summed nutrition over a set of meals."""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    sugar: float = 0
    water: float = 0


class FitnessTotals(BaseModel):
    """Summed activity over a set of workouts."""
    total_workouts: int = 0
    total_duration: float = 0
    total_calories_burned: float = 0


class ProgressReport(BaseModel):
    """Output of the progress aggregator."""
    days_in_period: int
    weeks_in_period: float
    nutrition: NutritionProgress
    fitness: FitnessProgress
    nutrition_totals: NutritionTotals
    fitness_totals: FitnessTotals

"""Goal recommendation and progress aggregation.

Both entry points are pure: they take fully loaded profiles, goals and
activity records and return a value. Fetching and filtering by user and date
is the caller's job.
"""

import math
from datetime import datetime, timedelta
from typing import Optional, Sequence

from schemas.enums import ActivityLevel, FitnessGoal, Gender
from schemas.goals import (
    FitnessProgress,
    FitnessTotals,
    GoalRecommendation,
    Goals,
    MacroProgress,
    NutritionProgress,
    NutritionTotals,
    ProgressEntry,
    ProgressReport,
    RecommendationExplanation,
    RecommendedMacros,
)
from schemas.meal import Meal
from schemas.user import UserProfile
from schemas.workout import Workout
from utils.helpers import round_half_away_from_zero


class InvalidRangeError(ValueError):
    """Raised when a progress window starts after it ends."""


ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTREMELY_ACTIVE: 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.55

WATER_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.0,
    ActivityLevel.LIGHTLY_ACTIVE: 1.1,
    ActivityLevel.MODERATELY_ACTIVE: 1.2,
    ActivityLevel.VERY_ACTIVE: 1.3,
    ActivityLevel.EXTREMELY_ACTIVE: 1.4,
}
DEFAULT_WATER_MULTIPLIER = 1.0

# (calorie adjustment, kg per week)
CALORIE_ADJUSTMENTS = {
    FitnessGoal.LOSE_WEIGHT: (-500, -0.5),
    FitnessGoal.GAIN_WEIGHT: (500, 0.5),
    FitnessGoal.BUILD_MUSCLE: (300, 0.25),
}

APPROACHES = {
    FitnessGoal.LOSE_WEIGHT: "Creating a moderate calorie deficit to lose weight safely at ~0.5kg per week",
    FitnessGoal.GAIN_WEIGHT: "Creating a calorie surplus to gain weight at a healthy rate of ~0.5kg per week",
    FitnessGoal.BUILD_MUSCLE: "Moderate calorie surplus with higher protein intake to support muscle growth",
    FitnessGoal.MAINTAIN_WEIGHT: "Eating at maintenance calories to maintain current weight",
    FitnessGoal.IMPROVE_ENDURANCE: (
        "Balanced nutrition with focus on carbohydrates for energy and increased workout frequency"
    ),
}
DEFAULT_APPROACH = "Balanced approach for general fitness"

TARGET_HORIZON_WEEKS = 12
MIN_WATER_ML = 1500
MAX_WATER_ML = 4000
DEFAULT_BASE_WATER_ML = 2000
WATER_ML_PER_KG = 25

PROTEIN_KCAL_PER_GRAM = 4
CARBS_KCAL_PER_GRAM = 4
FAT_KCAL_PER_GRAM = 9


def calculate_bmr(profile: UserProfile) -> float:
    """Mifflin-St Jeor basal metabolic rate, or 0 when the profile is incomplete."""
    if not (profile.weight and profile.height and profile.age and profile.gender):
        return 0.0
    offset = 5 if profile.gender == Gender.MALE else -161
    return 10 * profile.weight + 6.25 * profile.height - 5 * profile.age + offset


def calculate_tdee(bmr: float, activity_level: Optional[ActivityLevel]) -> float:
    return bmr * ACTIVITY_MULTIPLIERS.get(activity_level, DEFAULT_ACTIVITY_MULTIPLIER)


def recommend_water(profile: UserProfile, current_goals: Optional[Goals] = None) -> float:
    """Daily water goal in ml.

    An explicit stored water goal always wins over the computed one.
    """
    if current_goals is not None and current_goals.daily_water_goal is not None:
        return current_goals.daily_water_goal

    base_water = DEFAULT_BASE_WATER_ML
    if profile.weight:
        base_water = round_half_away_from_zero(profile.weight * WATER_ML_PER_KG)

    multiplier = WATER_MULTIPLIERS.get(profile.activity_level, DEFAULT_WATER_MULTIPLIER)
    water = round_half_away_from_zero(base_water * multiplier)
    return max(MIN_WATER_ML, min(water, MAX_WATER_ML))


def recommend(profile: UserProfile, current_goals: Optional[Goals] = None) -> GoalRecommendation:
    """Recommend daily and weekly targets for a user profile.

    Missing profile fields never raise; they degrade to defaults. A profile
    without weight, height, age or gender yields a zero BMR and is flagged
    with ``insufficient_profile`` so callers can warn instead of showing the
    resulting calorie goal as meaningful.
    """
    bmr = calculate_bmr(profile)
    tdee = calculate_tdee(bmr, profile.activity_level)

    adjustment, weekly_weight_goal = CALORIE_ADJUSTMENTS.get(profile.fitness_goal, (0, 0.0))
    calorie_goal = tdee + adjustment

    protein_pct = 0.30 if profile.fitness_goal == FitnessGoal.BUILD_MUSCLE else 0.25
    fat_pct = 0.25
    carb_pct = 1 - protein_pct - fat_pct

    target_weight = None
    if profile.weight:
        target_weight = profile.weight + weekly_weight_goal * TARGET_HORIZON_WEEKS

    endurance = profile.fitness_goal == FitnessGoal.IMPROVE_ENDURANCE

    return GoalRecommendation(
        daily_calorie_goal=round_half_away_from_zero(calorie_goal),
        weekly_weight_goal=weekly_weight_goal,
        target_weight=target_weight,
        macro_goals=RecommendedMacros(
            protein=round_half_away_from_zero(calorie_goal * protein_pct / PROTEIN_KCAL_PER_GRAM),
            carbs=round_half_away_from_zero(calorie_goal * carb_pct / CARBS_KCAL_PER_GRAM),
            fat=round_half_away_from_zero(calorie_goal * fat_pct / FAT_KCAL_PER_GRAM),
        ),
        daily_water_goal=recommend_water(profile, current_goals),
        weekly_workout_goal=5 if endurance else 4,
        weekly_workout_duration=300 if endurance else 240,
        daily_step_goal=8000 if profile.activity_level == ActivityLevel.SEDENTARY else 10000,
        explanation=RecommendationExplanation(
            bmr=round_half_away_from_zero(bmr),
            tdee=round_half_away_from_zero(tdee),
            approach=APPROACHES.get(profile.fitness_goal, DEFAULT_APPROACH),
        ),
        insufficient_profile=bmr == 0,
    )


def period_length(start: datetime, end: datetime) -> tuple:
    """Inclusive (days, weeks) covered by [start, end]."""
    if start > end:
        raise InvalidRangeError(f"start {start.isoformat()} is after end {end.isoformat()}")
    days = math.ceil((end - start) / timedelta(days=1)) + 1
    return days, days / 7


def sum_nutrition(meals: Sequence[Meal]) -> NutritionTotals:
    return NutritionTotals(
        calories=math.fsum(meal.total_calories for meal in meals),
        protein=math.fsum(meal.total_macros.protein for meal in meals),
        carbs=math.fsum(meal.total_macros.carbs for meal in meals),
        fat=math.fsum(meal.total_macros.fat for meal in meals),
        fiber=math.fsum(meal.total_macros.fiber for meal in meals),
        sugar=math.fsum(meal.total_macros.sugar for meal in meals),
        water=math.fsum(meal.water_intake or 0 for meal in meals),
    )


def sum_fitness(workouts: Sequence[Workout]) -> FitnessTotals:
    return FitnessTotals(
        total_workouts=len(workouts),
        total_duration=math.fsum(workout.duration or 0 for workout in workouts),
        total_calories_burned=math.fsum(workout.total_calories_burned or 0 for workout in workouts),
    )


def progress_entry(goal: Optional[float], periods: float, actual: float) -> Optional[ProgressEntry]:
    """Progress for one metric; None when the goal is not tracked."""
    if goal is None:
        return None
    target = goal * periods
    percentage = None
    if target:
        percentage = round_half_away_from_zero(actual / target * 100)
    return ProgressEntry(target=target, actual=actual, percentage=percentage)


def aggregate_progress(
    goals: Goals,
    meals: Sequence[Meal],
    workouts: Sequence[Workout],
    start: datetime,
    end: datetime,
) -> ProgressReport:
    """Compare logged meals and workouts against goals over [start, end].

    ``meals`` and ``workouts`` must already be limited to the owner and the
    window. Raises InvalidRangeError if start is after end.
    """
    days, weeks = period_length(start, end)
    nutrition = sum_nutrition(meals)
    fitness = sum_fitness(workouts)
    macro_goals = goals.macro_goals

    return ProgressReport(
        days_in_period=days,
        weeks_in_period=weeks,
        nutrition=NutritionProgress(
            daily_calories=progress_entry(goals.daily_calorie_goal, days, nutrition.calories),
            daily_water=progress_entry(goals.daily_water_goal, days, nutrition.water),
            macros=MacroProgress(
                protein=progress_entry(macro_goals.protein if macro_goals else None, days, nutrition.protein),
                carbs=progress_entry(macro_goals.carbs if macro_goals else None, days, nutrition.carbs),
                fat=progress_entry(macro_goals.fat if macro_goals else None, days, nutrition.fat),
            ),
        ),
        fitness=FitnessProgress(
            weekly_workouts=progress_entry(goals.weekly_workout_goal, weeks, fitness.total_workouts),
            weekly_duration=progress_entry(goals.weekly_workout_duration, weeks, fitness.total_duration),
        ),
        nutrition_totals=nutrition,
        fitness_totals=fitness,
    )

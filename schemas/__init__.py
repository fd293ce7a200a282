"""Collection and request schemas organized by collection type."""

from schemas.enums import (
    ActivityLevel,
    ChallengeCategory,
    ChallengeDifficulty,
    ChallengeStatus,
    ChallengeType,
    ChallengeUnit,
    ExerciseCategory,
    FitnessGoal,
    FoodUnit,
    Gender,
    MealType,
    WorkoutDifficulty,
    WorkoutType,
)
from schemas.user import UserProfile, ProfileUpdate, RegisterRequest, LoginRequest
from schemas.goals import Goals, GoalsUpdate, GoalRecommendation, ProgressReport
from schemas.meal import FoodItem, Meal, MealCreate, MealUpdate
from schemas.workout import Exercise, ExerciseSet, Workout, WorkoutCreate, WorkoutUpdate
from schemas.challenge import Challenge, ChallengeCreate, Participant, ProgressUpdate

__all__ = [
    "ActivityLevel",
    "ChallengeCategory",
    "ChallengeDifficulty",
    "ChallengeStatus",
    "ChallengeType",
    "ChallengeUnit",
    "ExerciseCategory",
    "FitnessGoal",
    "FoodUnit",
    "Gender",
    "MealType",
    "WorkoutDifficulty",
    "WorkoutType",
    "UserProfile",
    "ProfileUpdate",
    "RegisterRequest",
    "LoginRequest",
    "Goals",
    "GoalsUpdate",
    "GoalRecommendation",
    "ProgressReport",
    "FoodItem",
    "Meal",
    "MealCreate",
    "MealUpdate",
    "Exercise",
    "ExerciseSet",
    "Workout",
    "WorkoutCreate",
    "WorkoutUpdate",
    "Challenge",
    "ChallengeCreate",
    "Participant",
    "ProgressUpdate",
]

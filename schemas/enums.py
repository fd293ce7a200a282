"""Enums for collection fields."""

from enum import Enum


class Gender(str, Enum):
    """User gender enum."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    """Self-reported daily activity level."""
    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTREMELY_ACTIVE = "extremely_active"


class FitnessGoal(str, Enum):
    """User fitness goal enum."""
    LOSE_WEIGHT = "lose_weight"
    MAINTAIN_WEIGHT = "maintain_weight"
    GAIN_WEIGHT = "gain_weight"
    BUILD_MUSCLE = "build_muscle"
    IMPROVE_ENDURANCE = "improve_endurance"


class MealType(str, Enum):
    """Meal type enum."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class FoodUnit(str, Enum):
    """Unit a food item quantity is measured in."""
    GRAMS = "grams"
    KG = "kg"
    ML = "ml"
    LITERS = "liters"
    CUPS = "cups"
    PIECES = "pieces"
    SLICES = "slices"
    TBSP = "tbsp"
    TSP = "tsp"


class WorkoutType(str, Enum):
    """Workout type enum."""
    STRENGTH = "strength"
    CARDIO = "cardio"
    MIXED = "mixed"
    FLEXIBILITY = "flexibility"
    SPORTS = "sports"


class ExerciseCategory(str, Enum):
    """Exercise category enum."""
    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"
    SPORTS = "sports"
    OTHER = "other"


class WorkoutDifficulty(str, Enum):
    """Workout difficulty enum."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ChallengeType(str, Enum):
    """What a challenge measures."""
    WORKOUT_COUNT = "workout_count"
    WORKOUT_DURATION = "workout_duration"
    CALORIES_BURNED = "calories_burned"
    WEIGHT_LOSS = "weight_loss"
    STEP_COUNT = "step_count"
    WATER_INTAKE = "water_intake"
    CUSTOM = "custom"


class ChallengeUnit(str, Enum):
    """Unit of a challenge target value."""
    WORKOUTS = "workouts"
    MINUTES = "minutes"
    HOURS = "hours"
    CALORIES = "calories"
    KG = "kg"
    STEPS = "steps"
    ML = "ml"
    LITERS = "liters"
    CUSTOM = "custom"


class ChallengeDifficulty(str, Enum):
    """Challenge difficulty enum."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ChallengeCategory(str, Enum):
    """Challenge category enum."""
    FITNESS = "fitness"
    NUTRITION = "nutrition"
    WELLNESS = "wellness"
    WEIGHT_MANAGEMENT = "weight_management"
    ENDURANCE = "endurance"


class ChallengeStatus(str, Enum):
    """Challenge lifecycle status."""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

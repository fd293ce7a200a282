from datetime import datetime, timedelta, timezone

import pytest

from schemas.goals import Goals, MacroGoals
from schemas.meal import FoodItem, FoodMacros, Meal
from schemas.user import UserProfile
from schemas.workout import Workout
from services.goal_engine import (
    InvalidRangeError,
    aggregate_progress,
    calculate_bmr,
    calculate_tdee,
    period_length,
    recommend,
    recommend_water,
)
from utils.helpers import round_half_away_from_zero

START = datetime(2024, 3, 1)


def make_meal(calories, protein=0, water=0, day=START):
    return Meal(
        meal_type="lunch",
        date=day,
        food_items=[FoodItem(name="bowl", quantity=1, calories=calories, macros=FoodMacros(protein=protein))],
        water_intake=water,
    )


def make_workout(duration=None, calories=0, day=START):
    return Workout(title="Session", date=day, duration=duration, total_calories_burned=calories)


def with_changes(profile, changes):
    return UserProfile(**{**profile.model_dump(), **changes})


@pytest.fixture
def male_profile():
    return UserProfile(
        weight=70,
        height=175,
        age=30,
        gender="male",
        activity_level="moderately_active",
        fitness_goal="lose_weight",
    )


# ---------------------------
# Recommendation engine
# ---------------------------

def test_bmr_and_tdee_follow_mifflin_st_jeor(male_profile):
    bmr = calculate_bmr(male_profile)
    assert bmr == pytest.approx(10 * 70 + 6.25 * 175 - 5 * 30 + 5)
    assert calculate_tdee(bmr, male_profile.activity_level) == pytest.approx(bmr * 1.55)


def test_female_offset():
    profile = UserProfile(weight=60, height=165, age=30, gender="female")
    assert calculate_bmr(profile) == pytest.approx(600 + 1031.25 - 150 - 161)


def test_missing_activity_level_uses_moderate_multiplier():
    assert calculate_tdee(1000, None) == pytest.approx(1550)


def test_lose_weight_recommendation(male_profile):
    rec = recommend(male_profile)
    tdee = (10 * 70 + 6.25 * 175 - 5 * 30 + 5) * 1.55

    assert rec.daily_calorie_goal == round_half_away_from_zero(tdee - 500)
    assert rec.weekly_weight_goal == -0.5
    assert rec.target_weight == pytest.approx(64)
    assert rec.explanation.tdee == round_half_away_from_zero(tdee)
    assert rec.explanation.approach.startswith("Creating a moderate calorie deficit")
    assert rec.daily_water_goal == 2100
    assert rec.weekly_workout_goal == 4
    assert rec.weekly_workout_duration == 240
    assert rec.daily_step_goal == 10000
    assert rec.insufficient_profile is False


def test_worked_lose_weight_scenario(male_profile):
    rec = recommend(male_profile)
    assert calculate_bmr(male_profile) == pytest.approx(1648.75)
    assert calculate_tdee(1648.75, "moderately_active") == pytest.approx(2555.5625)
    assert rec.daily_calorie_goal == 2056
    assert rec.explanation.bmr == 1649
    assert rec.explanation.tdee == 2556
    assert rec.weekly_weight_goal == -0.5


@pytest.mark.parametrize(
    "weight, fitness_goal",
    [
        (70, "lose_weight"),
        (70, "gain_weight"),
        (70, "build_muscle"),
        (70, "maintain_weight"),
        (62, "gain_weight"),
    ],
)
def test_macros_add_up_to_calorie_goal(male_profile, weight, fitness_goal):
    profile = with_changes(male_profile, {"weight": weight, "fitness_goal": fitness_goal})
    rec = recommend(profile)
    macros = rec.macro_goals
    kcal = macros.protein * 4 + macros.carbs * 4 + macros.fat * 9
    # grams are rounded one by one from the unrounded goal, so each can be
    # off by half a gram and the goal itself by half a kcal
    assert abs(kcal - rec.daily_calorie_goal) <= 0.5 * 4 + 0.5 * 4 + 0.5 * 9 + 0.5


def test_build_muscle_uses_higher_protein(male_profile):
    muscle = recommend(with_changes(male_profile, {"fitness_goal": "build_muscle"}))
    assert muscle.weekly_weight_goal == 0.25
    assert muscle.macro_goals.protein == round_half_away_from_zero(
        (calculate_tdee(calculate_bmr(male_profile), male_profile.activity_level) + 300) * 0.30 / 4
    )


def test_endurance_and_sedentary_targets(male_profile):
    rec = recommend(with_changes(male_profile, {
        "fitness_goal": "improve_endurance",
        "activity_level": "sedentary",
    }))
    assert rec.weekly_workout_goal == 5
    assert rec.weekly_workout_duration == 300
    assert rec.daily_step_goal == 8000
    assert rec.weekly_weight_goal == 0
    assert rec.explanation.approach.startswith("Balanced nutrition")


def test_empty_profile_is_flagged_not_raised():
    rec = recommend(UserProfile())
    assert rec.insufficient_profile is True
    assert rec.explanation.bmr == 0
    assert rec.daily_calorie_goal == 0
    assert rec.target_weight is None
    assert rec.daily_water_goal == 2000
    assert rec.explanation.approach == "Balanced approach for general fitness"


@pytest.mark.parametrize(
    "weight, activity_level, expected",
    [
        (200, "extremely_active", 4000),
        (40, "sedentary", 1500),
        (80, "very_active", 2600),
    ],
)
def test_water_is_clamped(weight, activity_level, expected):
    profile = UserProfile(weight=weight, activity_level=activity_level)
    assert recommend_water(profile) == expected


def test_explicit_water_goal_wins(male_profile):
    goals = Goals(daily_water_goal=4800)
    assert recommend_water(male_profile, goals) == 4800
    assert recommend(male_profile, goals).daily_water_goal == 4800


def test_unset_water_goal_does_not_override(male_profile):
    assert recommend_water(male_profile, Goals()) == 2100


# ---------------------------
# Progress aggregator
# ---------------------------

def test_two_day_window_calorie_progress():
    report = aggregate_progress(
        Goals(daily_calorie_goal=2000),
        [make_meal(500)],
        [],
        START,
        START + timedelta(days=1),
    )
    entry = report.nutrition.daily_calories
    assert report.days_in_period == 2
    assert entry.target == 4000
    assert entry.actual == 500
    assert entry.percentage == 13


def test_single_day_window():
    days, weeks = period_length(START, START)
    assert days == 1
    assert weeks == pytest.approx(1 / 7)


def test_partial_day_counts_as_a_day():
    days, _ = period_length(START, START + timedelta(hours=30))
    assert days == 3


def test_start_after_end_raises():
    with pytest.raises(InvalidRangeError):
        aggregate_progress(Goals(), [], [], START + timedelta(days=1), START)


def test_aware_and_naive_bounds_agree():
    aware = datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert period_length(aware, aware + timedelta(days=6)) == period_length(START, START + timedelta(days=6))


def test_untracked_goals_have_no_entry():
    report = aggregate_progress(Goals(), [make_meal(300)], [make_workout(30)], START, START)
    assert report.nutrition.daily_calories is None
    assert report.nutrition.macros.protein is None
    assert report.fitness.weekly_workouts is None
    assert report.nutrition_totals.calories == 300
    assert report.fitness_totals.total_duration == 30


def test_empty_logs_give_zero_percent():
    goals = Goals(
        daily_calorie_goal=2000,
        daily_water_goal=2500,
        weekly_workout_goal=3,
        weekly_workout_duration=150,
        macro_goals=MacroGoals(protein=120, carbs=200, fat=60),
    )
    report = aggregate_progress(goals, [], [], START, START + timedelta(days=6))

    assert report.days_in_period == 7
    assert report.weeks_in_period == pytest.approx(1)
    for entry in (
        report.nutrition.daily_calories,
        report.nutrition.daily_water,
        report.nutrition.macros.protein,
        report.fitness.weekly_workouts,
        report.fitness.weekly_duration,
    ):
        assert entry.actual == 0
        assert entry.percentage == 0


def test_zero_goal_has_no_percentage():
    report = aggregate_progress(Goals(weekly_workout_goal=0), [], [make_workout(45)], START, START)
    entry = report.fitness.weekly_workouts
    assert entry.target == 0
    assert entry.actual == 1
    assert entry.percentage is None


def test_weekly_goals_scale_by_weeks():
    goals = Goals(weekly_workout_goal=4, weekly_workout_duration=200)
    workouts = [make_workout(50, 300), make_workout(None, 200), make_workout(70, 0)]
    report = aggregate_progress(goals, [], workouts, START, START + timedelta(days=13))

    assert report.fitness.weekly_workouts.target == pytest.approx(8)
    assert report.fitness.weekly_workouts.percentage == 38
    assert report.fitness.weekly_duration.actual == 120
    assert report.fitness_totals.total_calories_burned == 500


def test_macro_and_water_progress():
    goals = Goals(daily_water_goal=2000, macro_goals=MacroGoals(protein=100))
    meals = [make_meal(400, protein=40, water=500), make_meal(600, protein=35, water=250)]
    report = aggregate_progress(goals, meals, [], START, START)

    assert report.nutrition.macros.protein.actual == 75
    assert report.nutrition.macros.protein.percentage == 75
    assert report.nutrition.macros.carbs is None
    assert report.nutrition.daily_water.percentage == 38


def test_meal_order_does_not_matter():
    goals = Goals(daily_calorie_goal=1800)
    meals = [make_meal(0.1), make_meal(250.7), make_meal(1e3), make_meal(33.3)]
    forward = aggregate_progress(goals, meals, [], START, START)
    backward = aggregate_progress(goals, list(reversed(meals)), [], START, START)
    assert forward == backward

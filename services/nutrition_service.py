"""Nutrition summaries over logged meals."""

import math
from typing import Any, Dict, List, Sequence

from schemas.enums import MealType
from schemas.meal import Meal
from services.goal_engine import sum_nutrition
from utils.logger import setup_logger

logger = setup_logger(__name__)


def _mean(values: List[float]) -> float:
    return math.fsum(values) / len(values) if values else 0


class NutritionService:
    """Daily and period nutrition statistics.

    Totals are always derived from each meal's food items, never read from
    stored aggregates.
    """

    def daily_nutrition(self, meals: Sequence[Meal]) -> Dict[str, Any]:
        """Totals for one day plus the meals grouped by meal type."""
        meals_by_type = {meal_type.value: [] for meal_type in MealType}
        for meal in sorted(meals, key=lambda m: m.date):
            meals_by_type[MealType(meal.meal_type).value].append(meal)

        logger.debug(f"Summarizing {len(meals)} meals for daily nutrition")
        return {
            "daily_totals": sum_nutrition(meals),
            "meals_by_type": meals_by_type,
            "total_meals": len(meals),
        }

    def nutrition_stats(self, meals: Sequence[Meal]) -> Dict[str, Any]:
        """Overall averages/totals and a per meal type breakdown."""
        overall = {
            "total_meals": len(meals),
            "avg_calories": _mean([meal.total_calories for meal in meals]),
            "total_calories": math.fsum(meal.total_calories for meal in meals),
            "avg_protein": _mean([meal.total_macros.protein for meal in meals]),
            "avg_carbs": _mean([meal.total_macros.carbs for meal in meals]),
            "avg_fat": _mean([meal.total_macros.fat for meal in meals]),
            "total_water": math.fsum(meal.water_intake for meal in meals),
        }

        grouped: Dict[str, List[Meal]] = {}
        for meal in meals:
            grouped.setdefault(MealType(meal.meal_type).value, []).append(meal)

        by_meal_type = [
            {
                "meal_type": meal_type,
                "count": len(group),
                "avg_calories": _mean([meal.total_calories for meal in group]),
                "total_calories": math.fsum(meal.total_calories for meal in group),
            }
            for meal_type, group in grouped.items()
        ]

        return {"overall": overall, "by_meal_type": by_meal_type}


nutrition_service = NutritionService()

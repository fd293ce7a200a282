"""Workout statistics over logged workouts."""

import math
from typing import Any, Dict, List, Sequence

from schemas.enums import WorkoutType
from schemas.workout import Workout


class WorkoutService:
    """Period statistics for workouts."""

    def workout_stats(self, workouts: Sequence[Workout]) -> Dict[str, Any]:
        """Overall totals/averages and a per workout type breakdown.

        Duration averages only count workouts that recorded a duration.
        """
        durations = [w.duration for w in workouts if w.duration is not None]
        calories = [w.total_calories_burned for w in workouts]

        overall = {
            "total_workouts": len(workouts),
            "total_duration": math.fsum(durations),
            "total_calories": math.fsum(calories),
            "avg_duration": math.fsum(durations) / len(durations) if durations else 0,
            "avg_calories": math.fsum(calories) / len(calories) if calories else 0,
        }

        grouped: Dict[str, List[Workout]] = {}
        for workout in workouts:
            grouped.setdefault(WorkoutType(workout.workout_type).value, []).append(workout)

        by_type = [
            {
                "workout_type": workout_type,
                "count": len(group),
                "total_duration": math.fsum(w.duration or 0 for w in group),
                "total_calories": math.fsum(w.total_calories_burned for w in group),
            }
            for workout_type, group in grouped.items()
        ]

        return {"overall": overall, "by_type": by_type}


workout_service = WorkoutService()

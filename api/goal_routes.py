"""Goal routes for goal management, progress and recommendations."""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from pymongo import ReturnDocument

from api.deps import get_current_user
from api.meal_routes import date_filter
from config.settings import settings
from models.database import get_meals_collection, get_users_collection, get_workouts_collection
from schemas.goals import Goals, GoalsUpdate
from schemas.meal import Meal
from schemas.user import UserProfile
from schemas.workout import Workout
from services.goal_engine import InvalidRangeError, aggregate_progress, recommend
from utils.helpers import format_response, serialize_document, to_naive_utc
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/goals", tags=["goals"])


def stored_goals(user: Dict[str, Any]) -> Goals:
    return Goals(**(user.get("goals") or {}))


@router.get("")
async def get_goals(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Get the user's goals and fitness goal."""
    return format_response({
        "goals": stored_goals(current_user).model_dump(),
        "fitness_goal": current_user.get("fitness_goal"),
    })


@router.put("")
async def update_goals(payload: GoalsUpdate, current_user: Dict[str, Any] = Depends(get_current_user)):
    """Merge the goal fields sent into the stored goals."""
    try:
        changes: Dict[str, Any] = {"updated_at": datetime.utcnow()}

        if payload.goals is not None:
            merged = {
                **stored_goals(current_user).model_dump(),
                **payload.goals.model_dump(include=payload.goals.model_fields_set),
            }
            changes["goals"] = Goals(**merged).model_dump()
            logger.info(f"Updating goals for user {current_user['_id']}: {sorted(payload.goals.model_fields_set)}")

        if payload.fitness_goal is not None:
            changes["fitness_goal"] = payload.fitness_goal.value

        user = await get_users_collection().find_one_and_update(
            {"_id": current_user["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return format_response(
            {"goals": stored_goals(user).model_dump(), "fitness_goal": user.get("fitness_goal")},
            message="Goals updated successfully",
        )

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Validation error: {e.errors()}")
    except Exception as e:
        logger.error(f"Error updating goals: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating goals: {str(e)}")


@router.get("/progress")
async def get_goal_progress(
    start_date: Optional[datetime] = Query(None, description="Defaults to the progress window before now"),
    end_date: Optional[datetime] = Query(None, description="Defaults to now"),
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """Compare logged meals and workouts against the user's goals."""
    if current_user.get("goals") is None:
        raise HTTPException(status_code=404, detail="No goals found for user")

    end = to_naive_utc(end_date) or datetime.utcnow()
    start = to_naive_utc(start_date) or datetime.utcnow() - timedelta(days=settings.default_progress_window_days)
    if start > end:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    try:
        user_id = str(current_user["_id"])
        query = {"user_id": user_id, **date_filter(start, end)}

        meal_docs = await get_meals_collection().find(query).to_list(length=None)
        workout_docs = await get_workouts_collection().find(query).to_list(length=None)

        goals = stored_goals(current_user)
        report = aggregate_progress(
            goals,
            [Meal(**serialize_document(doc)) for doc in meal_docs],
            [Workout(**serialize_document(doc)) for doc in workout_docs],
            start,
            end,
        )

        return format_response({
            "period": {
                "start_date": start,
                "end_date": end,
                "days_in_period": report.days_in_period,
                "weeks_in_period": round(report.weeks_in_period, 1),
            },
            "goals": goals.model_dump(),
            "progress": {
                "nutrition": report.nutrition.model_dump(),
                "fitness": report.fitness.model_dump(),
            },
            "summary": {
                "nutrition": report.nutrition_totals.model_dump(),
                "fitness": report.fitness_totals.model_dump(),
            },
        })

    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching goal progress: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching goal progress: {str(e)}")


@router.get("/recommendations")
async def get_goal_recommendations(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Recommend goals from the user's body metrics and fitness goal."""
    try:
        profile = UserProfile(**{
            field: current_user.get(field) for field in UserProfile.model_fields
        })
        current_goals = stored_goals(current_user)
        recommendations = recommend(profile, current_goals)

        if recommendations.insufficient_profile:
            logger.info(f"User {current_user['_id']} has an incomplete profile; recommendation is approximate")

        return format_response({
            "recommendations": recommendations.model_dump(),
            "current_goals": current_goals.model_dump(),
            "user_profile": profile.model_dump(),
        })

    except Exception as e:
        logger.error(f"Error calculating goal recommendations: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error calculating goal recommendations: {str(e)}"
        )

"""Meal logging routes."""

from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument

from api.deps import get_current_user
from models.database import get_meals_collection
from schemas.enums import MealType
from schemas.meal import Meal, MealCreate, MealUpdate
from services.nutrition_service import nutrition_service
from utils.helpers import (
    build_pagination,
    format_response,
    serialize_document,
    to_naive_utc,
    to_object_id,
)
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/meals", tags=["meals"])

# Optional fields a PUT may set back to null
CLEARABLE_FIELDS = {"title", "notes"}


# ---------------------------
# Helpers
# ---------------------------

def meal_from_document(document: Dict[str, Any]) -> Meal:
    return Meal(**serialize_document(document))


def date_filter(start_date: Optional[datetime], end_date: Optional[datetime]) -> Dict[str, Any]:
    """MongoDB range filter on ``date``; empty when neither bound is given."""
    bounds = {}
    if start_date:
        bounds["$gte"] = to_naive_utc(start_date)
    if end_date:
        bounds["$lte"] = to_naive_utc(end_date)
    return {"date": bounds} if bounds else {}


async def find_meals(query: Dict[str, Any]) -> List[Meal]:
    cursor = get_meals_collection().find(query).sort("date", -1)
    return [meal_from_document(doc) for doc in await cursor.to_list(length=None)]


async def get_owned_meal(meal_id: str, user_id: str) -> Dict[str, Any]:
    object_id = to_object_id(meal_id)
    meal = None
    if object_id is not None:
        meal = await get_meals_collection().find_one({"_id": object_id, "user_id": user_id})
    if not meal:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


# ---------------------------
# Routes
# ---------------------------

@router.post("", status_code=201)
async def create_meal(payload: MealCreate, current_user: Dict[str, Any] = Depends(get_current_user)):
    """Log a meal for the authenticated user."""
    try:
        now = datetime.utcnow()
        document = {
            **payload.model_dump(),
            "user_id": str(current_user["_id"]),
            "created_at": now,
            "updated_at": now,
        }
        result = await get_meals_collection().insert_one(document)
        document["_id"] = result.inserted_id

        logger.info(f"Logged meal {result.inserted_id} for user {document['user_id']}")
        return format_response(
            {"meal": meal_from_document(document).model_dump(by_alias=True)},
            message="Meal logged successfully",
        )

    except Exception as e:
        logger.error(f"Error creating meal: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating meal: {str(e)}")


@router.get("")
async def list_meals(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    meal_type: Optional[MealType] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """List the user's meals, newest first."""
    try:
        query: Dict[str, Any] = {"user_id": str(current_user["_id"])}
        if meal_type:
            query["meal_type"] = meal_type.value
        query.update(date_filter(start_date, end_date))

        meals_collection = get_meals_collection()
        cursor = meals_collection.find(query).sort("date", -1).skip((page - 1) * limit).limit(limit)
        documents = await cursor.to_list(length=None)
        total = await meals_collection.count_documents(query)

        return format_response({
            "meals": [meal_from_document(doc).model_dump(by_alias=True) for doc in documents],
            "pagination": build_pagination(page, limit, total),
        })

    except Exception as e:
        logger.error(f"Error fetching meals: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching meals: {str(e)}")


@router.get("/stats")
async def get_nutrition_stats(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """Averages and totals over the user's meals, optionally within a date range."""
    try:
        query = {"user_id": str(current_user["_id"]), **date_filter(start_date, end_date)}
        meals = await find_meals(query)
        return format_response(nutrition_service.nutrition_stats(meals))

    except Exception as e:
        logger.error(f"Error fetching nutrition stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching nutrition stats: {str(e)}")


@router.get("/daily/{day}")
async def get_daily_nutrition(day: date, current_user: Dict[str, Any] = Depends(get_current_user)):
    """Nutrition totals and meals grouped by type for one calendar day."""
    try:
        query = {
            "user_id": str(current_user["_id"]),
            **date_filter(datetime.combine(day, time.min), datetime.combine(day, time.max)),
        }
        meals = await find_meals(query)
        summary = nutrition_service.daily_nutrition(meals)

        return format_response({
            "date": day.isoformat(),
            "daily_totals": summary["daily_totals"].model_dump(),
            "meals_by_type": {
                meal_type: [meal.model_dump(by_alias=True) for meal in group]
                for meal_type, group in summary["meals_by_type"].items()
            },
            "total_meals": summary["total_meals"],
        })

    except Exception as e:
        logger.error(f"Error fetching daily nutrition for {day}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching daily nutrition: {str(e)}")


@router.get("/{meal_id}")
async def get_meal(meal_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    meal = await get_owned_meal(meal_id, str(current_user["_id"]))
    return format_response({"meal": meal_from_document(meal).model_dump(by_alias=True)})


@router.put("/{meal_id}")
async def update_meal(
    meal_id: str,
    payload: MealUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """Update the fields sent; totals follow the new food items.

    An explicit null clears the title or notes and is ignored elsewhere.
    """
    meal = await get_owned_meal(meal_id, str(current_user["_id"]))
    try:
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in CLEARABLE_FIELDS
        }
        changes["updated_at"] = datetime.utcnow()

        updated = await get_meals_collection().find_one_and_update(
            {"_id": meal["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return format_response(
            {"meal": meal_from_document(updated).model_dump(by_alias=True)},
            message="Meal updated successfully",
        )

    except Exception as e:
        logger.error(f"Error updating meal {meal_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating meal: {str(e)}")


@router.delete("/{meal_id}")
async def delete_meal(meal_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    meal = await get_owned_meal(meal_id, str(current_user["_id"]))
    try:
        await get_meals_collection().delete_one({"_id": meal["_id"]})
        return format_response(message="Meal deleted successfully")

    except Exception as e:
        logger.error(f"Error deleting meal {meal_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error deleting meal: {str(e)}")

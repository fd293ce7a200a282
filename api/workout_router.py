"""Workout logging routes."""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument

from api.deps import get_current_user
from api.meal_routes import date_filter
from models.database import get_workouts_collection
from schemas.enums import WorkoutType
from schemas.workout import Workout, WorkoutCreate, WorkoutUpdate
from services.workout_service import workout_service
from utils.helpers import build_pagination, format_response, serialize_document, to_object_id
from utils.logger import setup_logger

router = APIRouter(prefix="/api/v1/workouts", tags=["workouts"])

logger = setup_logger(__name__)

# Optional fields a PUT may set back to null
CLEARABLE_FIELDS = {"duration", "notes"}

# ---------------------------
# Helpers
# ---------------------------

def workout_serializer(workout: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize MongoDB workout document."""
    return Workout(**serialize_document(workout)).model_dump(by_alias=True)


async def get_owned_workout(workout_id: str, user_id: str) -> Dict[str, Any]:
    object_id = to_object_id(workout_id)
    workout = None
    if object_id is not None:
        workout = await get_workouts_collection().find_one({"_id": object_id, "user_id": user_id})
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout

# ---------------------------
# 1. Log a workout
# ---------------------------

@router.post("", status_code=201)
async def create_workout(payload: WorkoutCreate, current_user: Dict[str, Any] = Depends(get_current_user)):
    try:
        now = datetime.utcnow()
        document = {
            **payload.model_dump(),
            "user_id": str(current_user["_id"]),
            "created_at": now,
            "updated_at": now,
        }
        result = await get_workouts_collection().insert_one(document)
        document["_id"] = result.inserted_id

        logger.info(f"Created workout {result.inserted_id} for user {document['user_id']}")
        return format_response({"workout": workout_serializer(document)}, message="Workout created successfully")

    except Exception as e:
        logger.error(f"Error creating workout: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating workout: {str(e)}")

# ---------------------------
# 2. List workouts (paginated, newest first)
# ---------------------------

@router.get("")
async def list_workouts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    workout_type: Optional[WorkoutType] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    try:
        query: Dict[str, Any] = {"user_id": str(current_user["_id"])}
        if workout_type:
            query["workout_type"] = workout_type.value
        query.update(date_filter(start_date, end_date))

        workouts_collection = get_workouts_collection()
        cursor = workouts_collection.find(query).sort("date", -1).skip((page - 1) * limit).limit(limit)
        workouts = await cursor.to_list(length=None)
        total = await workouts_collection.count_documents(query)

        return format_response({
            "workouts": [workout_serializer(w) for w in workouts],
            "pagination": build_pagination(page, limit, total),
        })

    except Exception as e:
        logger.error(f"Error fetching workouts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching workouts: {str(e)}")

# ---------------------------
# 3. Workout statistics
# ---------------------------

@router.get("/stats")
async def get_workout_stats(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    try:
        query = {"user_id": str(current_user["_id"]), **date_filter(start_date, end_date)}
        documents = await get_workouts_collection().find(query).to_list(length=None)
        workouts = [Workout(**serialize_document(doc)) for doc in documents]
        return format_response(workout_service.workout_stats(workouts))

    except Exception as e:
        logger.error(f"Error fetching workout stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching workout stats: {str(e)}")

# ---------------------------
# 4. Single workout
# ---------------------------

@router.get("/{workout_id}")
async def get_workout(workout_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    workout = await get_owned_workout(workout_id, str(current_user["_id"]))
    return format_response({"workout": workout_serializer(workout)})


@router.put("/{workout_id}")
async def update_workout(
    workout_id: str,
    payload: WorkoutUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    workout = await get_owned_workout(workout_id, str(current_user["_id"]))
    try:
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in CLEARABLE_FIELDS
        }
        changes["updated_at"] = datetime.utcnow()

        updated = await get_workouts_collection().find_one_and_update(
            {"_id": workout["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return format_response({"workout": workout_serializer(updated)}, message="Workout updated successfully")

    except Exception as e:
        logger.error(f"Error updating workout {workout_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating workout: {str(e)}")


@router.delete("/{workout_id}")
async def delete_workout(workout_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    workout = await get_owned_workout(workout_id, str(current_user["_id"]))
    try:
        await get_workouts_collection().delete_one({"_id": workout["_id"]})
        return format_response(message="Workout deleted successfully")

    except Exception as e:
        logger.error(f"Error deleting workout {workout_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error deleting workout: {str(e)}")

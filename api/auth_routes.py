"""Account routes: registration, login, profile and account deletion."""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from api.deps import get_current_user
from models.database import (
    get_challenges_collection,
    get_meals_collection,
    get_users_collection,
    get_workouts_collection,
)
from schemas.goals import Goals
from schemas.user import LoginRequest, ProfileUpdate, RegisterRequest
from services.auth_service import create_access_token, hash_password, verify_password
from utils.helpers import format_response, serialize_document
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def user_serializer(user: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize a user document without its password hash."""
    data = serialize_document(user)
    data.pop("password", None)
    return data


@router.post("/register", status_code=201)
async def register(payload: RegisterRequest):
    """Register a new user and return it with an access token."""
    try:
        users_collection = get_users_collection()

        if await users_collection.find_one({"email": payload.email}):
            raise HTTPException(status_code=400, detail="User already exists with this email")

        now = datetime.utcnow()
        user = {
            **payload.model_dump(exclude={"password"}),
            "password": hash_password(payload.password),
            "goals": Goals().model_dump(),
            "created_at": now,
            "updated_at": now,
        }
        result = await users_collection.insert_one(user)
        user["_id"] = result.inserted_id

        logger.info(f"Registered user {result.inserted_id}")
        return format_response(
            {"user": user_serializer(user), "token": create_access_token(str(result.inserted_id))},
            message="User registered successfully",
        )

    except HTTPException:
        raise
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists with this email")
    except Exception as e:
        logger.error(f"Error registering user: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error registering user: {str(e)}")


@router.post("/login")
async def login(payload: LoginRequest):
    """Exchange email and password for an access token."""
    try:
        user = await get_users_collection().find_one({"email": payload.email.strip().lower()})
        if not user or not verify_password(payload.password, user["password"]):
            raise HTTPException(
                status_code=401,
                detail="Invalid credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return format_response(
            {"user": user_serializer(user), "token": create_access_token(str(user["_id"]))},
            message="Login successful",
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error logging in: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error logging in: {str(e)}")


@router.get("/profile")
async def get_profile(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Return the authenticated user."""
    return format_response({"user": user_serializer(current_user)})


@router.put("/profile")
async def update_profile(
    payload: ProfileUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """Update body metrics, activity level, fitness goal or name."""
    try:
        changes = payload.model_dump(exclude_unset=True)
        changes["updated_at"] = datetime.utcnow()

        user = await get_users_collection().find_one_and_update(
            {"_id": current_user["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return format_response({"user": user_serializer(user)}, message="Profile updated successfully")

    except Exception as e:
        logger.error(f"Error updating profile: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating profile: {str(e)}")


@router.delete("/account")
async def delete_account(current_user: Dict[str, Any] = Depends(get_current_user)):
    """Delete the user together with their meals, workouts and challenge memberships."""
    user_id = str(current_user["_id"])
    try:
        logger.info(f"Starting account deletion for user: {user_id}")

        workouts = await get_workouts_collection().delete_many({"user_id": user_id})
        logger.info(f"Deleted {workouts.deleted_count} workouts")

        meals = await get_meals_collection().delete_many({"user_id": user_id})
        logger.info(f"Deleted {meals.deleted_count} meals")

        challenges_collection = get_challenges_collection()
        pulled = await challenges_collection.update_many(
            {"participants.user_id": user_id},
            {"$pull": {"participants": {"user_id": user_id}}},
        )
        logger.info(f"Removed user from {pulled.modified_count} challenges")

        # Created challenges: delete the empty ones, hand the rest to the first remaining participant
        deleted_challenges = 0
        cursor = challenges_collection.find({"creator_id": user_id})
        for challenge in await cursor.to_list(length=None):
            remaining = [p for p in challenge.get("participants", []) if p["user_id"] != user_id]
            if not remaining:
                await challenges_collection.delete_one({"_id": challenge["_id"]})
                deleted_challenges += 1
            else:
                await challenges_collection.update_one(
                    {"_id": challenge["_id"]},
                    {"$set": {"creator_id": remaining[0]["user_id"]}},
                )
        logger.info(f"Deleted {deleted_challenges} empty challenges")

        await get_users_collection().delete_one({"_id": current_user["_id"]})
        logger.info(f"User account {user_id} deleted")

        return format_response(message="Account and all associated data deleted successfully")

    except Exception as e:
        logger.error(f"Error deleting account {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error deleting account: {str(e)}")

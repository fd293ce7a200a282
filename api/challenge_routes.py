"""Community challenge routes."""

import re
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_current_user
from models.database import get_challenges_collection
from schemas.challenge import Challenge, ChallengeCreate, ProgressUpdate
from schemas.enums import ChallengeCategory, ChallengeDifficulty, ChallengeStatus, ChallengeType
from services.challenge_service import (
    ChallengeError,
    add_participant,
    build_leaderboard,
    can_view,
    challenge_view,
    derive_status,
    find_participant,
    record_progress,
    remove_participant,
)
from utils.helpers import build_pagination, format_response, serialize_document, to_object_id
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/challenges", tags=["challenges"])


# ---------------------------
# Helpers
# ---------------------------

def challenge_from_document(document: Dict[str, Any]) -> Challenge:
    challenge = Challenge(**serialize_document(document))
    challenge.status = derive_status(challenge)
    return challenge


async def get_challenge(challenge_id: str) -> Challenge:
    object_id = to_object_id(challenge_id)
    document = None
    if object_id is not None:
        document = await get_challenges_collection().find_one({"_id": object_id})
    if not document:
        raise HTTPException(status_code=404, detail="Challenge not found")
    return challenge_from_document(document)


async def get_visible_challenge(challenge_id: str, user_id: str) -> Challenge:
    challenge = await get_challenge(challenge_id)
    if not can_view(challenge, user_id):
        raise HTTPException(status_code=403, detail="Access denied to this private challenge")
    return challenge


def status_filter(status: ChallengeStatus, now: Optional[datetime] = None) -> Dict[str, Any]:
    """MongoDB filter matching the status each challenge derives from its dates."""
    if status == ChallengeStatus.CANCELLED:
        return {"status": ChallengeStatus.CANCELLED.value}

    now = now or datetime.utcnow()
    query: Dict[str, Any] = {"status": {"$ne": ChallengeStatus.CANCELLED.value}}
    if status == ChallengeStatus.UPCOMING:
        query["duration.start_date"] = {"$gt": now}
    elif status == ChallengeStatus.ACTIVE:
        query["duration.start_date"] = {"$lte": now}
        query["duration.end_date"] = {"$gte": now}
    else:
        query["duration.end_date"] = {"$lt": now}
    return query


async def save_challenge(challenge: Challenge) -> None:
    """Persist the challenge with its status re-derived from the dates."""
    challenge.status = derive_status(challenge)
    await get_challenges_collection().replace_one(
        {"_id": to_object_id(challenge.id)},
        challenge.model_dump(exclude={"id"}),
    )


# ---------------------------
# Routes
# ---------------------------

@router.post("", status_code=201)
async def create_challenge(payload: ChallengeCreate, current_user: Dict[str, Any] = Depends(get_current_user)):
    """Create a challenge; the creator joins it straight away."""
    if payload.duration.end_date <= payload.duration.start_date:
        raise HTTPException(status_code=400, detail="End date must be after start date")

    try:
        user_id = str(current_user["_id"])
        challenge = Challenge(**payload.model_dump(), creator_id=user_id)
        add_participant(challenge, user_id)
        challenge.status = derive_status(challenge)

        result = await get_challenges_collection().insert_one(challenge.model_dump(exclude={"id"}))
        challenge.id = str(result.inserted_id)

        logger.info(f"User {user_id} created challenge {challenge.id}")
        return format_response({"challenge": challenge_view(challenge)}, message="Challenge created successfully")

    except ChallengeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating challenge: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating challenge: {str(e)}")


@router.get("")
async def list_challenges(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[ChallengeStatus] = Query(None),
    challenge_type: Optional[ChallengeType] = Query(None),
    difficulty: Optional[ChallengeDifficulty] = Query(None),
    category: Optional[ChallengeCategory] = Query(None),
    search: Optional[str] = Query(None, description="Matches title, description or tags"),
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """List public challenges, newest first."""
    try:
        query: Dict[str, Any] = {"is_public": True}
        if status:
            query.update(status_filter(status))
        if challenge_type:
            query["challenge_type"] = challenge_type.value
        if difficulty:
            query["difficulty"] = difficulty.value
        if category:
            query["category"] = category.value
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{"title": pattern}, {"description": pattern}, {"tags": pattern}]

        challenges_collection = get_challenges_collection()
        cursor = challenges_collection.find(query).sort("created_at", -1).skip((page - 1) * limit).limit(limit)
        documents = await cursor.to_list(length=None)
        total = await challenges_collection.count_documents(query)

        return format_response({
            "challenges": [challenge_view(challenge_from_document(doc)) for doc in documents],
            "pagination": build_pagination(page, limit, total),
        })

    except Exception as e:
        logger.error(f"Error fetching challenges: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching challenges: {str(e)}")


@router.get("/my-challenges")
async def list_my_challenges(
    status: Optional[ChallengeStatus] = Query(None),
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """Challenges the user created or joined, with the user's own progress."""
    try:
        user_id = str(current_user["_id"])
        query: Dict[str, Any] = {"$or": [{"creator_id": user_id}, {"participants.user_id": user_id}]}
        if status:
            query.update(status_filter(status))

        documents = await get_challenges_collection().find(query).sort("created_at", -1).to_list(length=None)

        challenges = []
        for document in documents:
            challenge = challenge_from_document(document)
            participant = find_participant(challenge, user_id)
            challenges.append({
                **challenge_view(challenge),
                "user_progress": participant.progress.current_value if participant else 0,
                "user_completed": participant.is_completed if participant else False,
                "is_creator": challenge.creator_id == user_id,
            })

        return format_response({"challenges": challenges})

    except Exception as e:
        logger.error(f"Error fetching user challenges: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching user challenges: {str(e)}")


@router.get("/{challenge_id}")
async def get_challenge_detail(challenge_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    challenge = await get_visible_challenge(challenge_id, str(current_user["_id"]))
    return format_response({"challenge": challenge_view(challenge)})


@router.post("/{challenge_id}/join")
async def join_challenge(challenge_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    user_id = str(current_user["_id"])
    challenge = await get_challenge(challenge_id)
    try:
        add_participant(challenge, user_id)
        await save_challenge(challenge)

        logger.info(f"User {user_id} joined challenge {challenge_id}")
        return format_response({"challenge": challenge_view(challenge)}, message="Successfully joined the challenge")

    except ChallengeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error joining challenge {challenge_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error joining challenge: {str(e)}")


@router.post("/{challenge_id}/leave")
async def leave_challenge(challenge_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    user_id = str(current_user["_id"])
    challenge = await get_challenge(challenge_id)
    try:
        remove_participant(challenge, user_id)
        await save_challenge(challenge)

        logger.info(f"User {user_id} left challenge {challenge_id}")
        return format_response(message="Successfully left the challenge")

    except ChallengeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error leaving challenge {challenge_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error leaving challenge: {str(e)}")


@router.put("/{challenge_id}/progress")
async def update_challenge_progress(
    challenge_id: str,
    payload: ProgressUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """Set the user's current value; reaching the target completes them."""
    user_id = str(current_user["_id"])
    challenge = await get_challenge(challenge_id)
    try:
        participant = record_progress(challenge, user_id, payload.progress)
        await save_challenge(challenge)

        return format_response(
            {"participant": participant.model_dump(), "target_value": challenge.target_value},
            message="Progress updated successfully",
        )

    except ChallengeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating progress on challenge {challenge_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating progress: {str(e)}")


@router.get("/{challenge_id}/leaderboard")
async def get_leaderboard(challenge_id: str, current_user: Dict[str, Any] = Depends(get_current_user)):
    challenge = await get_visible_challenge(challenge_id, str(current_user["_id"]))
    return format_response({
        "challenge": {
            "_id": challenge.id,
            "title": challenge.title,
            "target_value": challenge.target_value,
            "unit": challenge.unit,
            "status": challenge.status,
        },
        "leaderboard": build_leaderboard(challenge),
        "generated_at": datetime.utcnow(),
    })

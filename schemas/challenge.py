"""Challenge collection schema."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.enums import (
    ChallengeCategory,
    ChallengeDifficulty,
    ChallengeStatus,
    ChallengeType,
    ChallengeUnit,
)
from utils.helpers import UTCDatetime


class ChallengeDuration(BaseModel):
    start_date: UTCDatetime = Field(..., description="Challenge start")
    end_date: UTCDatetime = Field(..., description="Challenge end")


class ParticipantProgress(BaseModel):
    current_value: float = 0
    last_updated: datetime = Field(default_factory=datetime.utcnow)


class Participant(BaseModel):
    """A user taking part in a challenge."""
    user_id: str = Field(..., description="Participant user id")
    joined_at: datetime = Field(default_factory=datetime.utcnow)
    progress: ParticipantProgress = Field(default_factory=ParticipantProgress)
    is_completed: bool = False
    completed_at: Optional[datetime] = None


class Prize(BaseModel):
    position: int = Field(..., ge=1)
    description: str = Field(..., max_length=100)


class ChallengeBase(BaseModel):
    """Fields a client may set on a challenge."""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    challenge_type: ChallengeType
    target_value: float = Field(..., ge=0)
    unit: ChallengeUnit
    duration: ChallengeDuration
    difficulty: ChallengeDifficulty = ChallengeDifficulty.MEDIUM
    category: ChallengeCategory = ChallengeCategory.FITNESS
    is_public: bool = True
    max_participants: int = Field(default=50, ge=2, le=1000)
    rules: List[str] = Field(default_factory=list)
    prizes: List[Prize] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator("rules")
    @classmethod
    def check_rule_length(cls, rules: List[str]) -> List[str]:
        for rule in rules:
            if len(rule) > 200:
                raise ValueError("Rule cannot exceed 200 characters")
        return rules

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, tags: List[str]) -> List[str]:
        return [tag.strip().lower() for tag in tags if tag.strip()]


class ChallengeCreate(ChallengeBase):
    pass


class Challenge(ChallengeBase):
    """A stored challenge."""
    id: Optional[str] = Field(None, alias="_id")
    creator_id: str = Field(..., description="User id of the creator")
    participants: List[Participant] = Field(default_factory=list)
    status: ChallengeStatus = ChallengeStatus.UPCOMING
    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = {"populate_by_name": True}


class ProgressUpdate(BaseModel):
    """Request body for reporting challenge progress."""
    progress: float = Field(..., ge=0, description="Current value towards the target")

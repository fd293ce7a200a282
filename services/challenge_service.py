"""Challenge membership, status and leaderboard rules."""

import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from schemas.challenge import Challenge, Participant, ParticipantProgress
from schemas.enums import ChallengeStatus
from utils.helpers import round_half_away_from_zero


class ChallengeError(Exception):
    """A challenge rule rejected the requested change."""


JOINABLE_STATUSES = (ChallengeStatus.UPCOMING, ChallengeStatus.ACTIVE)


def derive_status(challenge: Challenge, now: Optional[datetime] = None) -> ChallengeStatus:
    """Status implied by the challenge dates; cancelled challenges stay cancelled."""
    if challenge.status == ChallengeStatus.CANCELLED:
        return ChallengeStatus.CANCELLED

    now = now or datetime.utcnow()
    if now < challenge.duration.start_date:
        return ChallengeStatus.UPCOMING
    if now <= challenge.duration.end_date:
        return ChallengeStatus.ACTIVE
    return ChallengeStatus.COMPLETED


def find_participant(challenge: Challenge, user_id: str) -> Optional[Participant]:
    for participant in challenge.participants:
        if participant.user_id == user_id:
            return participant
    return None


def can_user_join(challenge: Challenge, user_id: str) -> Tuple[bool, Optional[str]]:
    if challenge.status not in JOINABLE_STATUSES:
        return False, "Challenge is not available for joining"
    if find_participant(challenge, user_id) is not None:
        return False, "User is already participating in this challenge"
    if len(challenge.participants) >= challenge.max_participants:
        return False, "Challenge is full"
    return True, None


def add_participant(challenge: Challenge, user_id: str, now: Optional[datetime] = None) -> Participant:
    can_join, reason = can_user_join(challenge, user_id)
    if not can_join:
        raise ChallengeError(reason)

    now = now or datetime.utcnow()
    participant = Participant(
        user_id=user_id,
        joined_at=now,
        progress=ParticipantProgress(current_value=0, last_updated=now),
    )
    challenge.participants.append(participant)
    return participant


def remove_participant(challenge: Challenge, user_id: str) -> None:
    participant = find_participant(challenge, user_id)
    if participant is None:
        raise ChallengeError("You are not participating in this challenge")
    if challenge.creator_id == user_id:
        raise ChallengeError("Challenge creator cannot leave their own challenge")
    challenge.participants.remove(participant)


def record_progress(
    challenge: Challenge,
    user_id: str,
    value: float,
    now: Optional[datetime] = None,
) -> Participant:
    """Set a participant's current value, completing them once the target is reached."""
    if value < 0:
        raise ChallengeError("Progress must be a non-negative number")

    participant = find_participant(challenge, user_id)
    if participant is None:
        raise ChallengeError("You are not participating in this challenge")

    now = now or datetime.utcnow()
    participant.progress.current_value = value
    participant.progress.last_updated = now

    if value >= challenge.target_value and not participant.is_completed:
        participant.is_completed = True
        participant.completed_at = now

    return participant


def progress_percentage(current_value: float, target_value: float) -> Optional[int]:
    if not target_value:
        return None
    return round_half_away_from_zero(current_value / target_value * 100)


def build_leaderboard(challenge: Challenge) -> List[Dict[str, Any]]:
    """Completed participants first, then by current value, highest first."""
    ordered = sorted(
        challenge.participants,
        key=lambda p: (not p.is_completed, -p.progress.current_value),
    )
    return [
        {
            "rank": position,
            "user_id": participant.user_id,
            "progress": participant.progress.current_value,
            "is_completed": participant.is_completed,
            "completed_at": participant.completed_at,
            "progress_percentage": progress_percentage(
                participant.progress.current_value, challenge.target_value
            ),
        }
        for position, participant in enumerate(ordered, start=1)
    ]


def completion_rate(challenge: Challenge) -> int:
    if not challenge.participants:
        return 0
    completed = sum(1 for p in challenge.participants if p.is_completed)
    return round_half_away_from_zero(completed / len(challenge.participants) * 100)


def days_remaining(challenge: Challenge, now: Optional[datetime] = None) -> int:
    now = now or datetime.utcnow()
    days = math.ceil((challenge.duration.end_date - now) / timedelta(days=1))
    return max(days, 0)


def can_view(challenge: Challenge, user_id: str) -> bool:
    """Private challenges are visible to their creator and participants only."""
    if challenge.is_public or challenge.creator_id == user_id:
        return True
    return find_participant(challenge, user_id) is not None


def challenge_view(challenge: Challenge, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Serialized challenge including its derived counters."""
    data = challenge.model_dump(by_alias=True)
    data["participant_count"] = len(challenge.participants)
    data["days_remaining"] = days_remaining(challenge, now)
    data["completion_rate"] = completion_rate(challenge)
    return data

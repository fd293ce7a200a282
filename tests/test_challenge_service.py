from datetime import datetime, timedelta

import pytest

from schemas.challenge import Challenge
from schemas.enums import ChallengeStatus
from services.challenge_service import (
    ChallengeError,
    add_participant,
    build_leaderboard,
    can_user_join,
    can_view,
    challenge_view,
    completion_rate,
    days_remaining,
    derive_status,
    record_progress,
    remove_participant,
)

NOW = datetime(2024, 6, 15, 12, 0)


def make_challenge(start_offset=-1, length=10, target=100, **fields):
    start = NOW + timedelta(days=start_offset)
    data = {
        "title": "Step it up",
        "description": "Walk every day",
        "challenge_type": "step_count",
        "target_value": target,
        "unit": "steps",
        "duration": {"start_date": start, "end_date": start + timedelta(days=length)},
        "creator_id": "creator",
    }
    status = fields.pop("status", None)
    data.update(fields)
    challenge = Challenge(**data)
    add_participant(challenge, "creator", now=NOW)
    if status:
        challenge.status = ChallengeStatus(status)
    return challenge


@pytest.mark.parametrize(
    "start_offset, expected",
    [
        (2, ChallengeStatus.UPCOMING),
        (-1, ChallengeStatus.ACTIVE),
        (-20, ChallengeStatus.COMPLETED),
    ],
)
def test_status_follows_dates(start_offset, expected):
    assert derive_status(make_challenge(start_offset), now=NOW) == expected


def test_cancelled_stays_cancelled():
    challenge = make_challenge(status="cancelled")
    assert derive_status(challenge, now=NOW) == ChallengeStatus.CANCELLED


def test_join_rules():
    challenge = make_challenge(max_participants=2)
    assert can_user_join(challenge, "creator") == (False, "User is already participating in this challenge")

    add_participant(challenge, "alice", now=NOW)
    assert can_user_join(challenge, "bob") == (False, "Challenge is full")

    with pytest.raises(ChallengeError, match="full"):
        add_participant(challenge, "bob")


def test_cannot_join_finished_challenge():
    challenge = make_challenge(status="completed")
    ok, reason = can_user_join(challenge, "alice")
    assert not ok
    assert reason == "Challenge is not available for joining"


def test_leave_rules():
    challenge = make_challenge()
    add_participant(challenge, "alice", now=NOW)

    with pytest.raises(ChallengeError, match="creator cannot leave"):
        remove_participant(challenge, "creator")
    with pytest.raises(ChallengeError, match="not participating"):
        remove_participant(challenge, "bob")

    remove_participant(challenge, "alice")
    assert [p.user_id for p in challenge.participants] == ["creator"]


def test_reaching_target_completes_once():
    challenge = make_challenge(target=50)
    add_participant(challenge, "alice", now=NOW)

    participant = record_progress(challenge, "alice", 30, now=NOW)
    assert not participant.is_completed

    finished_at = NOW + timedelta(hours=1)
    record_progress(challenge, "alice", 55, now=finished_at)
    record_progress(challenge, "alice", 70, now=finished_at + timedelta(hours=1))
    assert participant.is_completed
    assert participant.completed_at == finished_at
    assert participant.progress.current_value == 70


def test_progress_requires_membership():
    with pytest.raises(ChallengeError):
        record_progress(make_challenge(), "stranger", 10)


def test_leaderboard_puts_completed_first():
    challenge = make_challenge(target=100)
    for user_id in ("alice", "bob", "carol"):
        add_participant(challenge, user_id, now=NOW)
    record_progress(challenge, "alice", 80, now=NOW)
    record_progress(challenge, "bob", 100, now=NOW)
    record_progress(challenge, "carol", 95, now=NOW)

    board = build_leaderboard(challenge)

    assert [row["user_id"] for row in board] == ["bob", "carol", "alice", "creator"]
    assert [row["rank"] for row in board] == [1, 2, 3, 4]
    assert board[0]["progress_percentage"] == 100
    assert board[3]["progress_percentage"] == 0


def test_leaderboard_with_zero_target():
    challenge = make_challenge(target=0)
    assert build_leaderboard(challenge)[0]["progress_percentage"] is None


def test_completion_rate_and_days_remaining():
    challenge = make_challenge(start_offset=-1, length=10, target=10)
    add_participant(challenge, "alice", now=NOW)
    add_participant(challenge, "bob", now=NOW)
    record_progress(challenge, "alice", 10, now=NOW)

    assert completion_rate(challenge) == 33
    assert days_remaining(challenge, now=NOW) == 9
    assert days_remaining(challenge, now=NOW + timedelta(days=30)) == 0


def test_private_challenge_visibility():
    challenge = make_challenge(is_public=False)
    add_participant(challenge, "alice", now=NOW)

    assert can_view(challenge, "creator")
    assert can_view(challenge, "alice")
    assert not can_view(challenge, "bob")


def test_challenge_view_includes_counters():
    view = challenge_view(make_challenge(tags=["  Walking ", "OUTDOOR", " "]), now=NOW)
    assert view["participant_count"] == 1
    assert view["completion_rate"] == 0
    assert view["tags"] == ["walking", "outdoor"]

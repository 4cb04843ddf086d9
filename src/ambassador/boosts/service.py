"""Boost (challenge) listing and completion for the waitlist portal."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.boosts.points_service import add_applicant_points
from ambassador.db.models import Applicant, Challenge, ChallengeCompletion
from ambassador.errors import DuplicateCompletionError, RecordNotFoundError, TransientIOError
from ambassador.events import BOOST_COMPLETED_CHANNEL, publish_event
from ambassador.scoring.ranks import compute_rank
from ambassador.scoring.waitlist import ScoringParams

logger = structlog.get_logger()


@dataclass(frozen=True)
class BoostResult:
    """Outcome of one challenge completion."""

    points: int
    waitlist_position: int
    points_earned: int
    previous_rank: str
    rank: str
    leveled_up: bool


async def get_applicant(db: AsyncSession, applicant_id: str) -> Applicant:
    """Load an applicant or raise RecordNotFoundError."""
    result = await db.execute(select(Applicant).where(Applicant.id == applicant_id))
    applicant = result.scalar_one_or_none()
    if applicant is None:
        raise RecordNotFoundError("Applicant", applicant_id)
    return applicant


async def list_boosts(db: AsyncSession, applicant_id: str) -> list[dict]:
    """Active challenges in display order, flagged with the applicant's completions."""
    await get_applicant(db, applicant_id)

    challenges = (
        await db.execute(
            select(Challenge)
            .where(Challenge.is_active.is_(True))
            .order_by(Challenge.sort_order, Challenge.created_at)
        )
    ).scalars().all()

    completions = (
        await db.execute(
            select(ChallengeCompletion).where(ChallengeCompletion.applicant_id == applicant_id)
        )
    ).scalars().all()
    completed_at: dict[str, datetime] = {c.challenge_id: c.completed_at for c in completions}

    return [
        {
            "challenge": ch,
            "completed": ch.id in completed_at,
            "completed_at": completed_at.get(ch.id),
        }
        for ch in challenges
    ]


async def complete_challenge(
    db: AsyncSession,
    redis: object,
    applicant_id: str,
    challenge_id: str,
    proof_url: str | None = None,
    params: ScoringParams | None = None,
) -> BoostResult:
    """Record a completion and apply its points exactly once.

    1. Insert the completion row; a unique violation means the
       boost was already applied and nothing else happens
    2. Increment points and recompute waitlist position
    3. Commit, then broadcast

    A store failure at any step rolls the whole completion back and raises
    TransientIOError.
    """
    applicant = await get_applicant(db, applicant_id)
    result = await db.execute(
        select(Challenge).where(Challenge.id == challenge_id, Challenge.is_active.is_(True))
    )
    challenge = result.scalar_one_or_none()
    if challenge is None:
        raise RecordNotFoundError("Challenge", challenge_id)

    previous_rank = compute_rank(applicant.points)["name"]

    db.add(ChallengeCompletion(
        applicant_id=applicant_id,
        challenge_id=challenge_id,
        proof_url=proof_url,
    ))
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("boost_already_completed", applicant_id=applicant_id, challenge_id=challenge_id)
        raise DuplicateCompletionError(applicant_id, challenge_id) from exc
    except DBAPIError as exc:
        await db.rollback()
        raise TransientIOError("complete_challenge", exc) from exc

    change = await add_applicant_points(db, applicant_id, challenge.points, params)
    try:
        await db.commit()
    except DBAPIError as exc:
        await db.rollback()
        raise TransientIOError("complete_challenge", exc) from exc

    rank = compute_rank(change.points)["name"]
    logger.info(
        "boost_completed",
        applicant_id=applicant_id,
        challenge_id=challenge_id,
        points_earned=challenge.points,
        points=change.points,
        waitlist_position=change.waitlist_position,
    )

    await publish_event(redis, BOOST_COMPLETED_CHANNEL, {
        "applicant_id": applicant_id,
        "challenge": challenge.title,
        "points_earned": challenge.points,
        "waitlist_position": change.waitlist_position,
    })

    return BoostResult(
        points=change.points,
        waitlist_position=change.waitlist_position,
        points_earned=challenge.points,
        previous_rank=previous_rank,
        rank=rank,
        leveled_up=rank != previous_rank,
    )

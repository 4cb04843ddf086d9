"""Applicant point ledger: apply deltas and recompute waitlist position.

Points are changed with a single ``points = points + :delta`` statement so
two boosts landing at once for the same applicant cannot overwrite each
other. The position write follows in the same transaction while the row
lock from the increment is still held.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.db.models import Applicant, Challenge, ChallengeCompletion
from ambassador.errors import RecordNotFoundError, TransientIOError
from ambassador.scoring.waitlist import ScoringParams, score_to_waitlist_position

logger = structlog.get_logger()


@dataclass(frozen=True)
class PointsUpdate:
    """Point total and waitlist position after a ledger write."""

    points: int
    waitlist_position: int


async def _write_position(
    db: AsyncSession,
    applicant_id: str,
    points: int,
    params: ScoringParams | None,
) -> PointsUpdate:
    position = score_to_waitlist_position(points, params)
    await db.execute(
        update(Applicant)
        .where(Applicant.id == applicant_id)
        .values(waitlist_position=position)
    )
    return PointsUpdate(points=points, waitlist_position=position)


async def add_applicant_points(
    db: AsyncSession,
    applicant_id: str,
    delta: int,
    params: ScoringParams | None = None,
) -> PointsUpdate:
    """Add ``delta`` points to an applicant and recompute their position.

    Not idempotent: call it exactly once per genuine completion. The caller
    owns the transaction and commits.

    Raises:
        ValueError: If delta is negative.
        RecordNotFoundError: If no applicant has this id. Nothing is written.
        TransientIOError: If the store fails. Nothing is written.
    """
    if delta < 0:
        msg = "Point delta must be non-negative"
        raise ValueError(msg)

    try:
        result = await db.execute(
            update(Applicant)
            .where(Applicant.id == applicant_id)
            .values(points=Applicant.points + delta)
            .returning(Applicant.points)
        )
        new_points = result.scalar_one_or_none()
        if new_points is None:
            raise RecordNotFoundError("Applicant", applicant_id)
        change = await _write_position(db, applicant_id, new_points, params)
    except IntegrityError:
        raise
    except DBAPIError as exc:
        await db.rollback()
        raise TransientIOError("add_applicant_points", exc) from exc

    logger.info(
        "applicant_points_added",
        applicant_id=applicant_id,
        delta=delta,
        points=change.points,
        waitlist_position=change.waitlist_position,
    )
    return change


async def set_applicant_points(
    db: AsyncSession,
    applicant_id: str,
    points: int,
    params: ScoringParams | None = None,
) -> PointsUpdate:
    """Set an absolute point total and recompute the position."""
    if points < 0:
        msg = "Points must be non-negative"
        raise ValueError(msg)

    try:
        result = await db.execute(
            update(Applicant)
            .where(Applicant.id == applicant_id)
            .values(points=points)
            .returning(Applicant.id)
        )
        if result.scalar_one_or_none() is None:
            raise RecordNotFoundError("Applicant", applicant_id)
        return await _write_position(db, applicant_id, points, params)
    except IntegrityError:
        raise
    except DBAPIError as exc:
        await db.rollback()
        raise TransientIOError("set_applicant_points", exc) from exc


async def resync_applicant_points(
    db: AsyncSession,
    applicant_id: str,
    params: ScoringParams | None = None,
) -> PointsUpdate:
    """Rebuild points from the intake score plus every recorded completion.

    Repairs totals that drifted from the completion table, e.g. after a
    completion was deleted by hand.
    """
    intake = await db.execute(
        select(Applicant.intake_score).where(Applicant.id == applicant_id)
    )
    intake_score = intake.scalar_one_or_none()
    if intake_score is None:
        raise RecordNotFoundError("Applicant", applicant_id)

    earned = await db.execute(
        select(func.coalesce(func.sum(Challenge.points), 0))
        .select_from(ChallengeCompletion)
        .join(Challenge, ChallengeCompletion.challenge_id == Challenge.id)
        .where(ChallengeCompletion.applicant_id == applicant_id)
    )
    total = intake_score + int(earned.scalar_one())
    change = await set_applicant_points(db, applicant_id, total, params)
    logger.info("applicant_points_resynced", applicant_id=applicant_id, points=total)
    return change

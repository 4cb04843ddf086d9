"""Intake submission: score, rank, assign a type and persist a new applicant."""

from __future__ import annotations

import random
import uuid
from collections.abc import Callable

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.db.models import AmbassadorType, Applicant, School
from ambassador.events import APPLICANT_JOINED_CHANNEL, publish_event
from ambassador.intake.ambassador_types import select_ambassador_type
from ambassador.intake.referral_codes import generate_unique_referral_code
from ambassador.intake.schemas import ApplicationCreate
from ambassador.scoring.waitlist import (
    ScoringParams,
    calculate_applicant_score,
    score_to_waitlist_position,
)

logger = structlog.get_logger()


async def list_active_ambassador_types(db: AsyncSession) -> list[AmbassadorType]:
    """Active ambassador types in a stable order for weighted selection."""
    result = await db.execute(
        select(AmbassadorType)
        .where(AmbassadorType.is_active.is_(True))
        .order_by(AmbassadorType.created_at, AmbassadorType.name)
    )
    return list(result.scalars().all())


async def list_active_schools(db: AsyncSession) -> list[School]:
    result = await db.execute(
        select(School).where(School.is_active.is_(True)).order_by(School.sort_order, School.name)
    )
    return list(result.scalars().all())


async def submit_application(
    db: AsyncSession,
    redis: object,
    data: ApplicationCreate,
    rand: Callable[[], float] = random.random,
    params: ScoringParams | None = None,
) -> tuple[Applicant, bool]:
    """Create an applicant from a completed intake form.

    Returns (applicant, created). Resubmitting with the same client id
    returns the stored row untouched with created=False.

    Raises:
        ValueError: If no ambassador types are active or the school is unknown.
    """
    client_id = str(data.id) if data.id is not None else None
    if client_id is not None:
        existing = await db.execute(select(Applicant).where(Applicant.id == client_id))
        applicant = existing.scalar_one_or_none()
        if applicant is not None:
            return applicant, False

    schools = await list_active_schools(db)
    if schools and data.school not in {s.name for s in schools}:
        msg = f"Unknown school: {data.school}"
        raise ValueError(msg)

    types = await list_active_ambassador_types(db)
    if not types:
        msg = "No active ambassador types configured"
        raise ValueError(msg)

    score = calculate_applicant_score(data.interests, data.household_size, data.content_uploaded, params)
    position = score_to_waitlist_position(score, params)
    referral_code = await generate_unique_referral_code(db)
    ambassador_type = select_ambassador_type(types, rand)

    applicant = Applicant(
        **data.model_dump(exclude={"id"}),
        id=client_id or str(uuid.uuid4()),
        ambassador_type=ambassador_type.name,
        intake_score=score,
        points=score,
        waitlist_position=position,
        referral_code=referral_code,
        status="new",
    )
    db.add(applicant)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if client_id is None:
            raise
        # A concurrent replay of the same submission won the insert
        existing = await db.execute(select(Applicant).where(Applicant.id == client_id))
        winner = existing.scalar_one_or_none()
        if winner is None:
            raise
        return winner, False

    logger.info(
        "applicant_created",
        applicant_id=applicant.id,
        school=applicant.school,
        ambassador_type=applicant.ambassador_type,
        score=score,
        waitlist_position=position,
    )
    await publish_event(redis, APPLICANT_JOINED_CHANNEL, {
        "school": applicant.school,
        "ambassador_type": applicant.ambassador_type,
        "first_name": applicant.first_name,
    })
    return applicant, True

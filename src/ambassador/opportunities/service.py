"""Opportunity applications and the spots_filled counter."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import case, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.db.models import (
    APPLICATION_STATUSES,
    Applicant,
    Opportunity,
    OpportunityApplication,
)
from ambassador.errors import DuplicateApplicationError, RecordNotFoundError

logger = structlog.get_logger()


def is_eligible(opportunity: Opportunity, school: str | None) -> bool:
    """An opportunity with no school list is open to every school."""
    if not school or not opportunity.schools:
        return True
    return school in opportunity.schools


def spots_left(opportunity: Opportunity) -> int | None:
    if opportunity.spots_total is None:
        return None
    return max(0, opportunity.spots_total - (opportunity.spots_filled or 0))


async def list_open_opportunities(db: AsyncSession, applicant: Applicant) -> list[dict]:
    """Active opportunities with eligibility and has-applied flags for one applicant."""
    opportunities = (
        await db.execute(
            select(Opportunity)
            .where(Opportunity.status == "active")
            .order_by(Opportunity.is_featured.desc(), Opportunity.created_at.desc())
        )
    ).scalars().all()

    applied = (
        await db.execute(
            select(OpportunityApplication.opportunity_id, OpportunityApplication.status)
            .where(OpportunityApplication.applicant_id == applicant.id)
        )
    ).all()
    applied_status = {row.opportunity_id: row.status for row in applied}

    return [
        {
            "opportunity": opp,
            "eligible": is_eligible(opp, applicant.school),
            "spots_left": spots_left(opp),
            "has_applied": opp.id in applied_status,
            "application_status": applied_status.get(opp.id),
        }
        for opp in opportunities
    ]


async def apply_to_opportunity(
    db: AsyncSession,
    applicant: Applicant,
    opportunity_id: str,
) -> OpportunityApplication:
    """Apply an accepted applicant to an active opportunity."""
    applicant_id = applicant.id
    if applicant.status != "accepted":
        msg = "Only accepted ambassadors can apply to opportunities"
        raise PermissionError(msg)

    result = await db.execute(select(Opportunity).where(Opportunity.id == opportunity_id))
    opportunity = result.scalar_one_or_none()
    if opportunity is None:
        raise RecordNotFoundError("Opportunity", opportunity_id)
    if opportunity.status != "active":
        msg = "This opportunity is not open for applications"
        raise ValueError(msg)
    if not is_eligible(opportunity, applicant.school):
        msg = "This opportunity is not available at your school"
        raise ValueError(msg)
    if spots_left(opportunity) == 0:
        msg = "This opportunity is full"
        raise ValueError(msg)

    application = OpportunityApplication(
        applicant_id=applicant_id,
        opportunity_id=opportunity_id,
        status="pending",
    )
    db.add(application)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateApplicationError(applicant_id, opportunity_id) from exc
    await db.commit()

    logger.info("opportunity_applied", applicant_id=applicant_id, opportunity_id=opportunity_id)
    return application


async def _adjust_spots_filled(db: AsyncSession, opportunity_id: str, delta: int) -> None:
    """Atomically move spots_filled by delta, floored at 0."""
    if delta == 0:
        return
    new_value = Opportunity.spots_filled + delta
    await db.execute(
        update(Opportunity)
        .where(Opportunity.id == opportunity_id)
        .values(spots_filled=case((new_value < 0, 0), else_=new_value))
        .execution_options(synchronize_session="fetch")
    )


def _validate_status(status: str) -> None:
    if status not in APPLICATION_STATUSES:
        msg = f"Invalid application status: {status}"
        raise ValueError(msg)


async def set_application_status(
    db: AsyncSession,
    application_id: str,
    status: str,
) -> OpportunityApplication:
    """Change one application's status and keep spots_filled in step.

    Moving into 'approved' takes a spot; moving out of it frees one.
    """
    _validate_status(status)
    result = await db.execute(
        select(OpportunityApplication).where(OpportunityApplication.id == application_id)
    )
    application = result.scalar_one_or_none()
    if application is None:
        raise RecordNotFoundError("OpportunityApplication", application_id)

    was_approved = application.status == "approved"
    is_approved = status == "approved"

    application.status = status
    if is_approved and not was_approved:
        application.approved_at = datetime.now(timezone.utc)
    elif not is_approved:
        application.approved_at = None

    await _adjust_spots_filled(db, application.opportunity_id, int(is_approved) - int(was_approved))
    await db.commit()

    logger.info("opportunity_application_status", application_id=application_id, status=status)
    return application


async def bulk_set_application_status(
    db: AsyncSession,
    opportunity_id: str,
    application_ids: list[str],
    status: str,
) -> int:
    """Set the status of several applications to one opportunity.

    spots_filled moves once by the net change in approved applications.
    Returns the number of applications updated.
    """
    _validate_status(status)
    rows = (
        await db.execute(
            select(OpportunityApplication).where(
                OpportunityApplication.opportunity_id == opportunity_id,
                OpportunityApplication.id.in_(application_ids),
            )
        )
    ).scalars().all()
    if not rows:
        return 0

    currently_approved = sum(1 for r in rows if r.status == "approved")
    will_be_approved = len(rows) if status == "approved" else 0
    now = datetime.now(timezone.utc)

    for row in rows:
        if status == "approved":
            if row.status != "approved":
                row.approved_at = now
        else:
            row.approved_at = None
        row.status = status

    await _adjust_spots_filled(db, opportunity_id, will_be_approved - currently_approved)
    await db.commit()

    logger.info(
        "opportunity_applications_bulk_status",
        opportunity_id=opportunity_id,
        count=len(rows),
        status=status,
    )
    return len(rows)


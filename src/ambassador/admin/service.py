"""Back-office operations on applicants, boosts, types, schools and opportunities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.db.models import (
    APPLICANT_STATUSES,
    OPPORTUNITY_STATUSES,
    AmbassadorType,
    Applicant,
    Challenge,
    ChallengeCompletion,
    Opportunity,
    OpportunityApplication,
    School,
)
from ambassador.errors import DuplicateRecordError, RecordNotFoundError

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Applicants
# ---------------------------------------------------------------------------


async def list_applicants(
    db: AsyncSession,
    status: str | None = None,
    school: str | None = None,
    search: str | None = None,
    page: int = 1,
    per_page: int = 25,
) -> tuple[list[Applicant], int]:
    """Newest applicants first, filtered and paginated. Returns (rows, total)."""
    conditions = []
    if status:
        conditions.append(Applicant.status == status)
    if school:
        conditions.append(Applicant.school == school)
    if search:
        pattern = f"%{search.lower()}%"
        conditions.append(or_(
            func.lower(Applicant.instagram_handle).like(pattern),
            func.lower(Applicant.email).like(pattern),
        ))

    total_result = await db.execute(
        select(func.count()).select_from(Applicant).where(*conditions)
    )
    total = total_result.scalar_one()

    offset = (page - 1) * per_page
    result = await db.execute(
        select(Applicant)
        .where(*conditions)
        .order_by(Applicant.created_at.desc())
        .offset(offset)
        .limit(per_page)
    )
    return list(result.scalars().all()), total


async def update_applicant_status(db: AsyncSession, ids: list[str], status: str) -> int:
    """Move applicants to one of the fixed status labels. No transition rules apply."""
    if status not in APPLICANT_STATUSES:
        msg = f"Invalid applicant status: {status}"
        raise ValueError(msg)
    if not ids:
        return 0

    values: dict[str, Any] = {"status": status}
    now = datetime.now(timezone.utc)
    if status == "accepted":
        values["approved_at"] = now
    elif status == "rejected":
        values["rejected_at"] = now

    result = await db.execute(
        update(Applicant)
        .where(Applicant.id.in_(ids))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.info("applicant_status_updated", count=result.rowcount, status=status)
    return result.rowcount


async def override_waitlist_position(db: AsyncSession, applicant_id: str, position: int) -> Applicant:
    """Set a waitlist position by hand. The next point change recomputes it."""
    if position < 1:
        msg = "Waitlist position must be at least 1"
        raise ValueError(msg)
    result = await db.execute(select(Applicant).where(Applicant.id == applicant_id))
    applicant = result.scalar_one_or_none()
    if applicant is None:
        raise RecordNotFoundError("Applicant", applicant_id)

    applicant.waitlist_position = position
    await db.commit()
    logger.info("waitlist_position_overridden", applicant_id=applicant_id, position=position)
    return applicant


async def delete_applicants(db: AsyncSession, ids: list[str]) -> int:
    """Delete applicants along with their completions and opportunity applications."""
    if not ids:
        return 0
    await db.execute(delete(ChallengeCompletion).where(ChallengeCompletion.applicant_id.in_(ids)))
    await db.execute(delete(OpportunityApplication).where(OpportunityApplication.applicant_id.in_(ids)))
    result = await db.execute(
        delete(Applicant)
        .where(Applicant.id.in_(ids))
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.info("applicants_deleted", count=result.rowcount)
    return result.rowcount


async def get_dashboard_stats(db: AsyncSession) -> dict:
    """Headline numbers for the admin dashboard."""
    total = (await db.execute(select(func.count()).select_from(Applicant))).scalar_one()

    by_status = {s: 0 for s in APPLICANT_STATUSES}
    rows = await db.execute(select(Applicant.status, func.count()).group_by(Applicant.status))
    for status, count in rows:
        by_status[status] = count

    type_rows = await db.execute(
        select(Applicant.ambassador_type, func.count()).group_by(Applicant.ambassador_type)
    )
    by_type = {name: count for name, count in type_rows}

    avg_points = (await db.execute(select(func.avg(Applicant.points)))).scalar_one()
    completions = (
        await db.execute(select(func.count()).select_from(ChallengeCompletion))
    ).scalar_one()

    return {
        "total_applicants": total,
        "by_status": by_status,
        "by_ambassador_type": by_type,
        "average_points": round(float(avg_points or 0), 1),
        "challenge_completions": completions,
    }


# ---------------------------------------------------------------------------
# Catalogue: challenges, ambassador types, schools, opportunities
# ---------------------------------------------------------------------------


async def _get_or_404(db: AsyncSession, model: type, record_id: str):
    result = await db.execute(select(model).where(model.id == record_id))
    row = result.scalar_one_or_none()
    if row is None:
        raise RecordNotFoundError(model.__name__, record_id)
    return row


async def _commit(db: AsyncSession, kind: str) -> None:
    """Commit a catalogue write. Required fields are checked by the request
    schemas, so an integrity failure here is a unique-name clash.
    """
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise DuplicateRecordError(kind) from exc


async def _create(db: AsyncSession, row):
    kind = type(row).__name__
    db.add(row)
    await _commit(db, kind)
    logger.info("catalogue_created", kind=kind, id=row.id)
    return row


async def _update(db: AsyncSession, model: type, record_id: str, changes: dict[str, Any]):
    row = await _get_or_404(db, model, record_id)
    for field, value in changes.items():
        setattr(row, field, value)
    await _commit(db, model.__name__)
    logger.info("catalogue_updated", kind=model.__name__, id=record_id, fields=sorted(changes))
    return row


async def _delete(db: AsyncSession, model: type, record_id: str, children: tuple = ()) -> None:
    """Delete one catalogue row after its dependent rows."""
    row = await _get_or_404(db, model, record_id)
    for child, column in children:
        await db.execute(delete(child).where(column == record_id))
    await db.delete(row)
    await db.commit()
    logger.info("catalogue_deleted", kind=model.__name__, id=record_id)


async def list_challenges(db: AsyncSession) -> list[Challenge]:
    """Every challenge, inactive ones included, in display order."""
    result = await db.execute(select(Challenge).order_by(Challenge.sort_order, Challenge.created_at))
    return list(result.scalars().all())


async def create_challenge(db: AsyncSession, data: dict[str, Any]) -> Challenge:
    return await _create(db, Challenge(**data))


async def update_challenge(db: AsyncSession, challenge_id: str, changes: dict[str, Any]) -> Challenge:
    return await _update(db, Challenge, challenge_id, changes)


async def delete_challenge(db: AsyncSession, challenge_id: str) -> None:
    """Remove a challenge and its completions. Points already earned stay until a resync."""
    await _delete(db, Challenge, challenge_id, ((ChallengeCompletion, ChallengeCompletion.challenge_id),))


async def list_ambassador_types(db: AsyncSession) -> list[AmbassadorType]:
    result = await db.execute(select(AmbassadorType).order_by(AmbassadorType.name))
    return list(result.scalars().all())


async def create_ambassador_type(db: AsyncSession, data: dict[str, Any]) -> AmbassadorType:
    return await _create(db, AmbassadorType(**data))


async def update_ambassador_type(db: AsyncSession, type_id: str, changes: dict[str, Any]) -> AmbassadorType:
    return await _update(db, AmbassadorType, type_id, changes)


async def delete_ambassador_type(db: AsyncSession, type_id: str) -> None:
    # Applicants keep the type name they were given
    await _delete(db, AmbassadorType, type_id)


async def list_schools(db: AsyncSession) -> list[School]:
    result = await db.execute(select(School).order_by(School.sort_order, School.name))
    return list(result.scalars().all())


async def create_school(db: AsyncSession, data: dict[str, Any]) -> School:
    data.setdefault("spots_remaining", data.get("spots_total", 0))
    return await _create(db, School(**data))


async def update_school(db: AsyncSession, school_id: str, changes: dict[str, Any]) -> School:
    return await _update(db, School, school_id, changes)


async def delete_school(db: AsyncSession, school_id: str) -> None:
    await _delete(db, School, school_id)


def _check_opportunity_status(status: str | None) -> None:
    if status is not None and status not in OPPORTUNITY_STATUSES:
        msg = f"Invalid opportunity status: {status}"
        raise ValueError(msg)


async def list_opportunities(db: AsyncSession, status: str | None = None) -> list[Opportunity]:
    """Every opportunity, newest first, optionally narrowed to one status."""
    query = select(Opportunity).order_by(Opportunity.created_at.desc())
    if status:
        query = query.where(Opportunity.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_opportunity(db: AsyncSession, data: dict[str, Any]) -> Opportunity:
    _check_opportunity_status(data.get("status"))
    return await _create(db, Opportunity(**data))


async def update_opportunity(db: AsyncSession, opportunity_id: str, changes: dict[str, Any]) -> Opportunity:
    """Edit an opportunity. spots_filled is owned by application approvals and never set here."""
    _check_opportunity_status(changes.get("status"))
    changes.pop("spots_filled", None)
    return await _update(db, Opportunity, opportunity_id, changes)


async def delete_opportunity(db: AsyncSession, opportunity_id: str) -> None:
    await _delete(
        db, Opportunity, opportunity_id,
        ((OpportunityApplication, OpportunityApplication.opportunity_id),),
    )


async def list_opportunity_applications(db: AsyncSession, opportunity_id: str) -> list[dict]:
    """Applications to one opportunity, oldest first, with who applied."""
    await _get_or_404(db, Opportunity, opportunity_id)
    rows = await db.execute(
        select(OpportunityApplication, Applicant)
        .join(Applicant, OpportunityApplication.applicant_id == Applicant.id)
        .where(OpportunityApplication.opportunity_id == opportunity_id)
        .order_by(OpportunityApplication.applied_at)
    )
    return [
        {
            "application": application,
            "instagram_handle": applicant.instagram_handle,
            "first_name": applicant.first_name,
            "last_name": applicant.last_name,
            "school": applicant.school,
            "points": applicant.points,
        }
        for application, applicant in rows
    ]

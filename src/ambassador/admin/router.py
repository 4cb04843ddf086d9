"""Admin back-office API endpoints.

Every route requires the X-Admin-Key header.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.admin.schemas import (
    AdminAmbassadorTypeResponse,
    AdminApplicantResponse,
    AdminApplicationEntry,
    AdminApplicationResponse,
    AdminChallengeResponse,
    AdminOpportunityResponse,
    AdminSchoolResponse,
    AmbassadorTypeCreate,
    AmbassadorTypeUpdate,
    ApplicantListResponse,
    ApplicationStatusRequest,
    BulkApplicationStatusRequest,
    BulkDeleteRequest,
    BulkStatusRequest,
    ChallengeCreate,
    ChallengeUpdate,
    CountResponse,
    DashboardStatsResponse,
    OpportunityCreate,
    OpportunityStatus,
    OpportunityUpdate,
    PointsResponse,
    PositionOverrideRequest,
    SchoolCreate,
    SchoolUpdate,
)
from ambassador.admin.service import (
    create_ambassador_type,
    create_challenge,
    create_opportunity,
    create_school,
    delete_ambassador_type,
    delete_applicants,
    delete_challenge,
    delete_opportunity,
    delete_school,
    get_dashboard_stats,
    list_ambassador_types,
    list_applicants,
    list_challenges,
    list_opportunities,
    list_opportunity_applications,
    list_schools,
    override_waitlist_position,
    update_ambassador_type,
    update_applicant_status,
    update_challenge,
    update_opportunity,
    update_school,
)
from ambassador.boosts.points_service import resync_applicant_points
from ambassador.database import get_session
from ambassador.dependencies import get_scoring_params, require_admin
from ambassador.errors import ConflictError, RecordNotFoundError, TransientIOError
from ambassador.opportunities.service import bulk_set_application_status, set_application_status
from ambassador.scoring.waitlist import ScoringParams

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=DashboardStatsResponse)
async def stats(db: AsyncSession = Depends(get_session)):
    """Dashboard headline numbers."""
    return DashboardStatsResponse(**await get_dashboard_stats(db))


# ── Applicants ──


@router.get("/applicants", response_model=ApplicantListResponse)
async def get_applicants(
    status: str | None = Query(None),
    school: str | None = Query(None),
    search: str | None = Query(None, max_length=64),
    page: int = Query(1, ge=1),
    per_page: int = Query(25, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
):
    """Applicants, newest first."""
    rows, total = await list_applicants(db, status, school, search, page, per_page)
    return ApplicantListResponse(
        applicants=[AdminApplicantResponse.model_validate(r) for r in rows],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.patch("/applicants/status", response_model=CountResponse)
async def set_applicants_status(body: BulkStatusRequest, db: AsyncSession = Depends(get_session)):
    """Bulk status change."""
    count = await update_applicant_status(db, body.ids, body.status)
    return CountResponse(count=count)


@router.post("/applicants/delete", response_model=CountResponse)
async def remove_applicants(body: BulkDeleteRequest, db: AsyncSession = Depends(get_session)):
    """Bulk delete."""
    return CountResponse(count=await delete_applicants(db, body.ids))


@router.patch("/applicants/{applicant_id}/waitlist-position", response_model=AdminApplicantResponse)
async def set_waitlist_position(
    applicant_id: str,
    body: PositionOverrideRequest,
    db: AsyncSession = Depends(get_session),
):
    """Override an applicant's waitlist position."""
    try:
        applicant = await override_waitlist_position(db, applicant_id, body.waitlist_position)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return AdminApplicantResponse.model_validate(applicant)


@router.post("/applicants/{applicant_id}/resync-points", response_model=PointsResponse)
async def resync_points(
    applicant_id: str,
    db: AsyncSession = Depends(get_session),
    params: ScoringParams = Depends(get_scoring_params),
):
    """Rebuild points from the intake score and completed boosts."""
    try:
        change = await resync_applicant_points(db, applicant_id, params)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except TransientIOError as e:
        raise HTTPException(status_code=503, detail="Please try again") from e
    await db.commit()
    return PointsResponse(points=change.points, waitlist_position=change.waitlist_position)


# ── Challenges ──


@router.get("/challenges", response_model=list[AdminChallengeResponse])
async def get_challenges(db: AsyncSession = Depends(get_session)):
    """All challenges, inactive included."""
    return [AdminChallengeResponse.model_validate(r) for r in await list_challenges(db)]


@router.post("/challenges", response_model=AdminChallengeResponse, status_code=201)
async def add_challenge(body: ChallengeCreate, db: AsyncSession = Depends(get_session)):
    try:
        row = await create_challenge(db, body.model_dump())
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return AdminChallengeResponse.model_validate(row)


@router.patch("/challenges/{challenge_id}", response_model=AdminChallengeResponse)
async def edit_challenge(challenge_id: str, body: ChallengeUpdate, db: AsyncSession = Depends(get_session)):
    try:
        row = await update_challenge(db, challenge_id, body.model_dump(exclude_unset=True))
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return AdminChallengeResponse.model_validate(row)


@router.delete("/challenges/{challenge_id}", status_code=204)
async def remove_challenge(challenge_id: str, db: AsyncSession = Depends(get_session)):
    try:
        await delete_challenge(db, challenge_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


# ── Ambassador types ──


@router.get("/ambassador-types", response_model=list[AdminAmbassadorTypeResponse])
async def get_ambassador_types(db: AsyncSession = Depends(get_session)):
    return [AdminAmbassadorTypeResponse.model_validate(r) for r in await list_ambassador_types(db)]


@router.post("/ambassador-types", response_model=AdminAmbassadorTypeResponse, status_code=201)
async def add_ambassador_type(body: AmbassadorTypeCreate, db: AsyncSession = Depends(get_session)):
    try:
        row = await create_ambassador_type(db, body.model_dump())
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return AdminAmbassadorTypeResponse.model_validate(row)


@router.patch("/ambassador-types/{type_id}", response_model=AdminAmbassadorTypeResponse)
async def edit_ambassador_type(type_id: str, body: AmbassadorTypeUpdate, db: AsyncSession = Depends(get_session)):
    try:
        row = await update_ambassador_type(db, type_id, body.model_dump(exclude_unset=True))
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return AdminAmbassadorTypeResponse.model_validate(row)


@router.delete("/ambassador-types/{type_id}", status_code=204)
async def remove_ambassador_type(type_id: str, db: AsyncSession = Depends(get_session)):
    try:
        await delete_ambassador_type(db, type_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


# ── Schools ──


@router.get("/schools", response_model=list[AdminSchoolResponse])
async def get_schools(db: AsyncSession = Depends(get_session)):
    """All schools, inactive included."""
    return [AdminSchoolResponse.model_validate(r) for r in await list_schools(db)]


@router.post("/schools", response_model=AdminSchoolResponse, status_code=201)
async def add_school(body: SchoolCreate, db: AsyncSession = Depends(get_session)):
    try:
        row = await create_school(db, body.model_dump(exclude_none=True))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return AdminSchoolResponse.model_validate(row)


@router.patch("/schools/{school_id}", response_model=AdminSchoolResponse)
async def edit_school(school_id: str, body: SchoolUpdate, db: AsyncSession = Depends(get_session)):
    try:
        row = await update_school(db, school_id, body.model_dump(exclude_unset=True))
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return AdminSchoolResponse.model_validate(row)


@router.delete("/schools/{school_id}", status_code=204)
async def remove_school(school_id: str, db: AsyncSession = Depends(get_session)):
    try:
        await delete_school(db, school_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


# ── Opportunities ──


@router.get("/opportunities", response_model=list[AdminOpportunityResponse])
async def get_opportunities(
    status: OpportunityStatus | None = Query(None),
    db: AsyncSession = Depends(get_session),
):
    """All opportunities, newest first."""
    return [AdminOpportunityResponse.model_validate(r) for r in await list_opportunities(db, status)]


@router.post("/opportunities", response_model=AdminOpportunityResponse, status_code=201)
async def add_opportunity(body: OpportunityCreate, db: AsyncSession = Depends(get_session)):
    try:
        row = await create_opportunity(db, body.model_dump())
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return AdminOpportunityResponse.model_validate(row)


@router.patch("/opportunities/{opportunity_id}", response_model=AdminOpportunityResponse)
async def edit_opportunity(opportunity_id: str, body: OpportunityUpdate, db: AsyncSession = Depends(get_session)):
    try:
        row = await update_opportunity(db, opportunity_id, body.model_dump(exclude_unset=True))
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return AdminOpportunityResponse.model_validate(row)


@router.delete("/opportunities/{opportunity_id}", status_code=204)
async def remove_opportunity(opportunity_id: str, db: AsyncSession = Depends(get_session)):
    """Delete an opportunity together with its applications."""
    try:
        await delete_opportunity(db, opportunity_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get("/opportunities/{opportunity_id}/applications", response_model=list[AdminApplicationEntry])
async def get_opportunity_applications(opportunity_id: str, db: AsyncSession = Depends(get_session)):
    """Who applied to one opportunity, oldest application first."""
    try:
        entries = await list_opportunity_applications(db, opportunity_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return [
        AdminApplicationEntry(
            **AdminApplicationResponse.model_validate(e["application"]).model_dump(),
            instagram_handle=e["instagram_handle"],
            first_name=e["first_name"],
            last_name=e["last_name"],
            school=e["school"],
            points=e["points"],
        )
        for e in entries
    ]


@router.patch("/opportunity-applications/{application_id}/status", response_model=AdminApplicationResponse)
async def set_opportunity_application_status(
    application_id: str,
    body: ApplicationStatusRequest,
    db: AsyncSession = Depends(get_session),
):
    """Approve, reject or reset one application; spots_filled follows."""
    try:
        application = await set_application_status(db, application_id, body.status)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return AdminApplicationResponse.model_validate(application)


@router.patch("/opportunities/{opportunity_id}/applications/status", response_model=CountResponse)
async def set_opportunity_applications_status(
    opportunity_id: str,
    body: BulkApplicationStatusRequest,
    db: AsyncSession = Depends(get_session),
):
    """Bulk status change for one opportunity's applications."""
    count = await bulk_set_application_status(db, opportunity_id, body.ids, body.status)
    return CountResponse(count=count)

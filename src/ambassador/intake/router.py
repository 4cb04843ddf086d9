"""Public intake API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.database import get_session
from ambassador.dependencies import get_redis_dep, get_scoring_params
from ambassador.intake.schemas import (
    AmbassadorTypeResponse,
    AmbassadorTypesResponse,
    ApplicationCreate,
    ApplicationResponse,
    SchoolResponse,
    SchoolsResponse,
)
from ambassador.intake.service import (
    list_active_ambassador_types,
    list_active_schools,
    submit_application,
)
from ambassador.scoring.waitlist import ScoringParams

router = APIRouter(prefix="/api/v1/intake", tags=["Intake"])


@router.get("/ambassador-types", response_model=AmbassadorTypesResponse)
async def get_ambassador_types(db: AsyncSession = Depends(get_session)):
    """List active ambassador types."""
    types = await list_active_ambassador_types(db)
    return AmbassadorTypesResponse(types=[AmbassadorTypeResponse.model_validate(t) for t in types])


@router.get("/schools", response_model=SchoolsResponse)
async def get_schools(db: AsyncSession = Depends(get_session)):
    """List schools open for applications."""
    schools = await list_active_schools(db)
    return SchoolsResponse(schools=[SchoolResponse.model_validate(s) for s in schools])


@router.post("/applications", response_model=ApplicationResponse, status_code=201)
async def create_application(
    body: ApplicationCreate,
    response: Response,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
    params: ScoringParams = Depends(get_scoring_params),
):
    """Submit the intake form. Replaying a submission with the same id returns 200."""
    try:
        applicant, created = await submit_application(db, redis, body, params=params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if not created:
        response.status_code = 200
    return ApplicationResponse.model_validate(applicant)

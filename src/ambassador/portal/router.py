"""Waitlist portal API endpoints: status, boosts, opportunities."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.boosts.service import complete_challenge, get_applicant, list_boosts
from ambassador.database import get_session
from ambassador.dependencies import get_redis_dep, get_scoring_params
from ambassador.errors import ConflictError, RecordNotFoundError, TransientIOError
from ambassador.opportunities.service import apply_to_opportunity, list_open_opportunities
from ambassador.portal.schemas import (
    BoostEntry,
    BoostsResponse,
    ChallengeResponse,
    CompleteBoostRequest,
    CompleteBoostResponse,
    OpportunitiesResponse,
    OpportunityApplicationResponse,
    OpportunityEntry,
    OpportunityResponse,
    RankResponse,
    WaitlistStatusResponse,
)
from ambassador.scoring.ranks import compute_rank
from ambassador.scoring.waitlist import ScoringParams

router = APIRouter(prefix="/api/v1/portal", tags=["Portal"])


async def _load_applicant(db: AsyncSession, applicant_id: str):
    try:
        return await get_applicant(db, applicant_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.get("/applicants/{applicant_id}", response_model=WaitlistStatusResponse)
async def get_waitlist_status(applicant_id: str, db: AsyncSession = Depends(get_session)):
    """Current points, waitlist position and rank."""
    applicant = await _load_applicant(db, applicant_id)
    return WaitlistStatusResponse(
        id=applicant.id,
        first_name=applicant.first_name,
        school=applicant.school,
        status=applicant.status,
        ambassador_type=applicant.ambassador_type,
        referral_code=applicant.referral_code,
        points=applicant.points,
        waitlist_position=applicant.waitlist_position,
        rank=RankResponse(**compute_rank(applicant.points)),
    )


# ── Boosts ──


@router.get("/applicants/{applicant_id}/boosts", response_model=BoostsResponse)
async def get_boosts(applicant_id: str, db: AsyncSession = Depends(get_session)):
    """Active boosts with the applicant's completion state."""
    try:
        entries = await list_boosts(db, applicant_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return BoostsResponse(
        boosts=[
            BoostEntry(
                challenge=ChallengeResponse.model_validate(e["challenge"]),
                completed=e["completed"],
                completed_at=e["completed_at"],
            )
            for e in entries
        ],
        total_available_points=sum(e["challenge"].points for e in entries if not e["completed"]),
        completed_count=sum(1 for e in entries if e["completed"]),
    )


@router.post(
    "/applicants/{applicant_id}/boosts/{challenge_id}/complete",
    response_model=CompleteBoostResponse,
)
async def complete_boost(
    applicant_id: str,
    challenge_id: str,
    body: CompleteBoostRequest | None = None,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
    params: ScoringParams = Depends(get_scoring_params),
):
    """Mark a boost complete and apply its points."""
    proof_url = body.proof_url if body else None
    try:
        result = await complete_challenge(db, redis, applicant_id, challenge_id, proof_url, params)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except TransientIOError as e:
        raise HTTPException(status_code=503, detail="Please try again") from e

    return CompleteBoostResponse(
        points=result.points,
        waitlist_position=result.waitlist_position,
        points_earned=result.points_earned,
        previous_rank=result.previous_rank,
        rank=result.rank,
        leveled_up=result.leveled_up,
    )


# ── Opportunities ──


@router.get("/applicants/{applicant_id}/opportunities", response_model=OpportunitiesResponse)
async def get_opportunities(applicant_id: str, db: AsyncSession = Depends(get_session)):
    """Active opportunities, flagged for eligibility and prior applications."""
    applicant = await _load_applicant(db, applicant_id)
    entries = await list_open_opportunities(db, applicant)
    return OpportunitiesResponse(
        opportunities=[
            OpportunityEntry(
                opportunity=OpportunityResponse.model_validate(e["opportunity"]),
                eligible=e["eligible"],
                spots_left=e["spots_left"],
                has_applied=e["has_applied"],
                application_status=e["application_status"],
            )
            for e in entries
        ],
        can_apply=applicant.status == "accepted",
    )


@router.post(
    "/applicants/{applicant_id}/opportunities/{opportunity_id}/apply",
    response_model=OpportunityApplicationResponse,
    status_code=201,
)
async def apply(
    applicant_id: str,
    opportunity_id: str,
    db: AsyncSession = Depends(get_session),
):
    """Apply to an opportunity (accepted ambassadors only)."""
    applicant = await _load_applicant(db, applicant_id)
    try:
        application = await apply_to_opportunity(db, applicant, opportunity_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return OpportunityApplicationResponse.model_validate(application)

"""Pydantic schemas for waitlist portal endpoints."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class RankResponse(BaseModel):
    name: str
    emoji: str
    min: int
    max: int | None = None
    next_name: str | None = None
    points_to_next: int | None = None


class WaitlistStatusResponse(BaseModel):
    id: str
    first_name: str | None = None
    school: str
    status: str
    ambassador_type: str
    referral_code: str
    points: int
    waitlist_position: int
    rank: RankResponse


# --- Boosts ---


class ChallengeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    points: int
    icon: str | None = None
    external_url: str | None = None
    verification_type: str


class BoostEntry(BaseModel):
    challenge: ChallengeResponse
    completed: bool
    completed_at: datetime | None = None


class BoostsResponse(BaseModel):
    boosts: list[BoostEntry]
    total_available_points: int
    completed_count: int


class CompleteBoostRequest(BaseModel):
    proof_url: str | None = Field(None, max_length=2048)


class CompleteBoostResponse(BaseModel):
    points: int
    waitlist_position: int
    points_earned: int
    previous_rank: str
    rank: str
    leveled_up: bool


# --- Opportunities ---


class OpportunityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    brand_name: str
    brand_logo_url: str | None = None
    opportunity_type: str
    short_description: str | None = None
    description: str | None = None
    compensation: str | None = None
    location: str | None = None
    requirements: list[str] = []
    spots_total: int | None = None
    spots_filled: int = 0
    is_featured: bool = False
    start_date: date | None = None
    end_date: date | None = None


class OpportunityEntry(BaseModel):
    opportunity: OpportunityResponse
    eligible: bool
    spots_left: int | None = None
    has_applied: bool
    application_status: str | None = None


class OpportunitiesResponse(BaseModel):
    opportunities: list[OpportunityEntry]
    can_apply: bool


class OpportunityApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    applicant_id: str
    opportunity_id: str
    status: str
    applied_at: datetime
    approved_at: datetime | None = None

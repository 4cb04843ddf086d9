"""Pydantic schemas for admin endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ApplicantStatus = Literal["new", "reviewed", "contacted", "accepted", "rejected"]
ApplicationStatus = Literal["pending", "approved", "rejected"]
OpportunityStatus = Literal["draft", "active", "completed", "cancelled"]


def _reject_null(v):
    """PATCH bodies may omit a field but not clear a required one."""
    if v is None:
        msg = "may not be null"
        raise ValueError(msg)
    return v


# --- Applicants ---


class AdminApplicantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    school: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    instagram_handle: str
    instagram_followers: int | None = None
    interests: list[str]
    household_size: int
    content_uploaded: bool
    ambassador_type: str
    intake_score: int
    points: int
    waitlist_position: int
    referral_code: str
    status: str
    created_at: datetime


class ApplicantListResponse(BaseModel):
    applicants: list[AdminApplicantResponse]
    total: int
    page: int
    per_page: int


class BulkStatusRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1)
    status: ApplicantStatus


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1)


class CountResponse(BaseModel):
    count: int


class PositionOverrideRequest(BaseModel):
    waitlist_position: int = Field(..., ge=1)


class PointsResponse(BaseModel):
    points: int
    waitlist_position: int


class DashboardStatsResponse(BaseModel):
    total_applicants: int
    by_status: dict[str, int]
    by_ambassador_type: dict[str, int]
    average_points: float
    challenge_completions: int


# --- Challenges ---


class ChallengeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=128)
    description: str | None = None
    points: int = Field(..., ge=0)
    icon: str | None = Field(None, max_length=16)
    external_url: str | None = None
    verification_type: str = "self"
    is_active: bool = True
    sort_order: int = 0


class ChallengeUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = None
    points: int | None = Field(None, ge=0)
    icon: str | None = Field(None, max_length=16)
    external_url: str | None = None
    verification_type: str | None = None
    is_active: bool | None = None
    sort_order: int | None = None

    @field_validator("title", "points", "verification_type", "is_active", "sort_order")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class AdminChallengeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    points: int
    icon: str | None = None
    external_url: str | None = None
    verification_type: str
    is_active: bool
    sort_order: int


# --- Ambassador types ---


class AmbassadorTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    description: str = ""
    assignment_weight: int = Field(1, ge=0)
    is_active: bool = True


class AmbassadorTypeUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=64)
    description: str | None = None
    assignment_weight: int | None = Field(None, ge=0)
    is_active: bool | None = None

    @field_validator("name", "description", "assignment_weight", "is_active")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class AdminAmbassadorTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    assignment_weight: int
    is_active: bool


# --- Schools ---


class SchoolCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    is_active: bool = True
    sort_order: int = 0
    spots_total: int = Field(0, ge=0)
    spots_remaining: int | None = Field(None, ge=0)


class SchoolUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    is_active: bool | None = None
    sort_order: int | None = None
    spots_total: int | None = Field(None, ge=0)
    spots_remaining: int | None = Field(None, ge=0)

    @field_validator("name", "is_active", "sort_order", "spots_total", "spots_remaining")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class AdminSchoolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    is_active: bool
    sort_order: int
    spots_total: int
    spots_remaining: int


# --- Opportunities ---


class OpportunityCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=128)
    brand_name: str = Field(..., min_length=1, max_length=128)
    brand_logo_url: str | None = None
    opportunity_type: str = "campaign"
    description: str | None = None
    short_description: str | None = Field(None, max_length=256)
    compensation: str | None = None
    location: str | None = None
    requirements: list[str] = []
    schools: list[str] = []
    spots_total: int | None = Field(None, ge=0)
    status: OpportunityStatus = "draft"
    is_featured: bool = False
    start_date: date | None = None
    end_date: date | None = None


class OpportunityUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=128)
    brand_name: str | None = Field(None, min_length=1, max_length=128)
    brand_logo_url: str | None = None
    opportunity_type: str | None = None
    description: str | None = None
    short_description: str | None = Field(None, max_length=256)
    compensation: str | None = None
    location: str | None = None
    requirements: list[str] | None = None
    schools: list[str] | None = None
    spots_total: int | None = Field(None, ge=0)
    status: OpportunityStatus | None = None
    is_featured: bool | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator(
        "title", "brand_name", "opportunity_type", "requirements", "schools", "status", "is_featured"
    )
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class AdminOpportunityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    brand_name: str
    brand_logo_url: str | None = None
    opportunity_type: str
    description: str | None = None
    short_description: str | None = None
    compensation: str | None = None
    location: str | None = None
    requirements: list[str]
    schools: list[str]
    spots_total: int | None = None
    spots_filled: int
    status: str
    is_featured: bool
    start_date: date | None = None
    end_date: date | None = None
    created_at: datetime


class ApplicationStatusRequest(BaseModel):
    status: ApplicationStatus


class BulkApplicationStatusRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1)
    status: ApplicationStatus


class AdminApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    applicant_id: str
    opportunity_id: str
    status: str
    notes: str | None = None
    applied_at: datetime
    approved_at: datetime | None = None


class AdminApplicationEntry(AdminApplicationResponse):
    """One row of an opportunity's applications, with who applied."""

    instagram_handle: str
    first_name: str | None = None
    last_name: str | None = None
    school: str
    points: int

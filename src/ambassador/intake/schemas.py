"""Pydantic schemas for intake endpoints."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AmbassadorTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    assignment_weight: int


class SchoolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    spots_total: int
    spots_remaining: int


class ApplicationCreate(BaseModel):
    """Everything the qualifier and profile-builder stages collect."""

    id: UUID | None = None  # client-generated, makes resubmission idempotent
    school: str = Field(..., min_length=1, max_length=128)
    is_19_plus: bool
    first_name: str | None = Field(None, max_length=64)
    last_name: str | None = Field(None, max_length=64)
    email: str | None = Field(None, max_length=320)
    instagram_handle: str = Field(..., min_length=1, max_length=64)
    instagram_profile_pic: str | None = None
    instagram_followers: int | None = Field(None, ge=0)
    instagram_verified: bool = False
    personality_traits: list[str] = []
    interests: list[str] = []
    household_size: int = Field(1, ge=1)
    scene_types: list[str] = []
    scene_custom: str | None = Field(None, max_length=256)
    content_uploaded: bool = False
    content_urls: list[str] = []
    pitch_url: str | None = None
    pitch_type: Literal["video", "audio"] | None = None


class ApplicationResponse(BaseModel):
    """The result card shown right after submission."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    ambassador_type: str
    waitlist_position: int
    referral_code: str
    points: int
    status: str


class AmbassadorTypesResponse(BaseModel):
    types: list[AmbassadorTypeResponse]


class SchoolsResponse(BaseModel):
    schools: list[SchoolResponse]

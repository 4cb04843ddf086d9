"""ORM models for the ambassador funnel.

Identifiers are UUID strings so the intake flow can generate them before
the row exists. List-valued columns use the generic JSON type.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ambassador.db.base import Base

APPLICANT_STATUSES = ("new", "reviewed", "contacted", "accepted", "rejected")
APPLICATION_STATUSES = ("pending", "approved", "rejected")
OPPORTUNITY_STATUSES = ("draft", "active", "completed", "cancelled")


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Applicants
# ---------------------------------------------------------------------------


class Applicant(Base):
    """One person who submitted the intake form."""

    __tablename__ = "applicants"
    __table_args__ = (
        CheckConstraint("points >= 0", name="applicants_points_non_negative"),
        CheckConstraint("waitlist_position >= 1", name="applicants_waitlist_position_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    school: Mapped[str] = mapped_column(String(128), nullable=False)
    is_19_plus: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    first_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)

    instagram_handle: Mapped[str] = mapped_column(String(64), nullable=False)
    instagram_profile_pic: Mapped[str | None] = mapped_column(Text, nullable=True)
    instagram_followers: Mapped[int | None] = mapped_column(Integer, nullable=True)
    instagram_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    personality_traits: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    interests: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    household_size: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    scene_types: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    scene_custom: Mapped[str | None] = mapped_column(String(256), nullable=True)

    content_uploaded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    content_urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    pitch_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    pitch_type: Mapped[str | None] = mapped_column(String(8), nullable=True)

    ambassador_type: Mapped[str] = mapped_column(String(64), nullable=False)
    intake_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    waitlist_position: Mapped[int] = mapped_column(Integer, nullable=False)
    referral_code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)

    status: Mapped[str] = mapped_column(String(16), nullable=False, default="new")
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)

    completions: Mapped[list[ChallengeCompletion]] = relationship(
        "ChallengeCompletion", back_populates="applicant", cascade="all, delete-orphan"
    )
    opportunity_applications: Mapped[list[OpportunityApplication]] = relationship(
        "OpportunityApplication", back_populates="applicant", cascade="all, delete-orphan"
    )


class AmbassadorType(Base):
    """Category assigned to new applicants by weighted random draw."""

    __tablename__ = "ambassador_types"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    assignment_weight: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


class School(Base):
    """School an applicant can pick at intake."""

    __tablename__ = "schools"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spots_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    spots_remaining: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


# ---------------------------------------------------------------------------
# Boosts
# ---------------------------------------------------------------------------


class Challenge(Base):
    """A completable boost worth a fixed number of points."""

    __tablename__ = "challenges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    icon: Mapped[str | None] = mapped_column(String(16), nullable=True)
    external_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_type: Mapped[str] = mapped_column(String(16), nullable=False, default="self")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)


class ChallengeCompletion(Base):
    """One applicant completing one challenge, at most once."""

    __tablename__ = "challenge_completions"
    __table_args__ = (
        UniqueConstraint("applicant_id", "challenge_id", name="challenge_completions_applicant_challenge_key"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    applicant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("applicants.id", ondelete="CASCADE"), nullable=False
    )
    challenge_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False
    )
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    proof_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    applicant: Mapped[Applicant] = relationship("Applicant", back_populates="completions")
    challenge: Mapped[Challenge] = relationship("Challenge")


# ---------------------------------------------------------------------------
# Opportunities
# ---------------------------------------------------------------------------


class Opportunity(Base):
    """Brand campaign that accepted applicants can apply to."""

    __tablename__ = "opportunities"
    __table_args__ = (CheckConstraint("spots_filled >= 0", name="opportunities_spots_filled_non_negative"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    brand_name: Mapped[str] = mapped_column(String(128), nullable=False)
    brand_logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    opportunity_type: Mapped[str] = mapped_column(String(32), nullable=False, default="campaign")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(String(256), nullable=True)
    compensation: Mapped[str | None] = mapped_column(String(128), nullable=True)
    location: Mapped[str | None] = mapped_column(String(128), nullable=True)
    requirements: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    schools: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    spots_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
    spots_filled: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="draft")
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now
    )

    applications: Mapped[list[OpportunityApplication]] = relationship(
        "OpportunityApplication", back_populates="opportunity", cascade="all, delete-orphan"
    )


class OpportunityApplication(Base):
    """An applicant's application to one opportunity."""

    __tablename__ = "opportunity_applications"
    __table_args__ = (
        UniqueConstraint("applicant_id", "opportunity_id", name="opportunity_applications_applicant_opportunity_key"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    applicant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("applicants.id", ondelete="CASCADE"), nullable=False
    )
    opportunity_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("opportunities.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    applicant: Mapped[Applicant] = relationship("Applicant", back_populates="opportunity_applications")
    opportunity: Mapped[Opportunity] = relationship("Opportunity", back_populates="applications")


"""Ambassador funnel tables.

Creates applicants, ambassador_types, schools, challenges,
challenge_completions, opportunities and opportunity_applications.

Revision ID: 001_ambassador_tables
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_ambassador_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "applicants",
        _id(),
        sa.Column("school", sa.String(128), nullable=False),
        sa.Column("is_19_plus", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("first_name", sa.String(64), nullable=True),
        sa.Column("last_name", sa.String(64), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("instagram_handle", sa.String(64), nullable=False),
        sa.Column("instagram_profile_pic", sa.Text(), nullable=True),
        sa.Column("instagram_followers", sa.Integer(), nullable=True),
        sa.Column("instagram_verified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("personality_traits", sa.JSON(), nullable=False),
        sa.Column("interests", sa.JSON(), nullable=False),
        sa.Column("household_size", sa.Integer(), server_default="1", nullable=False),
        sa.Column("scene_types", sa.JSON(), nullable=False),
        sa.Column("scene_custom", sa.String(256), nullable=True),
        sa.Column("content_uploaded", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("content_urls", sa.JSON(), nullable=False),
        sa.Column("pitch_url", sa.Text(), nullable=True),
        sa.Column("pitch_type", sa.String(8), nullable=True),
        sa.Column("ambassador_type", sa.String(64), nullable=False),
        sa.Column("intake_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("waitlist_position", sa.Integer(), nullable=False),
        sa.Column("referral_code", sa.String(16), nullable=False, unique=True),
        sa.Column("status", sa.String(16), server_default="new", nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.CheckConstraint("points >= 0", name="applicants_points_non_negative"),
        sa.CheckConstraint("waitlist_position >= 1", name="applicants_waitlist_position_positive"),
    )
    op.create_index("ix_applicants_status", "applicants", ["status"])
    op.create_index("ix_applicants_created_at", "applicants", ["created_at"])

    op.create_table(
        "ambassador_types",
        _id(),
        sa.Column("name", sa.String(64), nullable=False, unique=True),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("assignment_weight", sa.Integer(), server_default="1", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        _created_at(),
        sa.CheckConstraint("assignment_weight >= 0", name="ambassador_types_weight_non_negative"),
    )

    op.create_table(
        "schools",
        _id(),
        sa.Column("name", sa.String(128), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
        sa.Column("spots_total", sa.Integer(), server_default="0", nullable=False),
        sa.Column("spots_remaining", sa.Integer(), server_default="0", nullable=False),
        _created_at(),
    )

    op.create_table(
        "challenges",
        _id(),
        sa.Column("title", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        sa.Column("icon", sa.String(16), nullable=True),
        sa.Column("external_url", sa.Text(), nullable=True),
        sa.Column("verification_type", sa.String(16), server_default="self", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
        _created_at(),
        sa.CheckConstraint("points >= 0", name="challenges_points_non_negative"),
    )

    op.create_table(
        "challenge_completions",
        _id(),
        sa.Column("applicant_id", sa.String(36), sa.ForeignKey("applicants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("challenge_id", sa.String(36), sa.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("verified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("proof_url", sa.Text(), nullable=True),
        sa.UniqueConstraint("applicant_id", "challenge_id", name="challenge_completions_applicant_challenge_key"),
    )

    op.create_table(
        "opportunities",
        _id(),
        sa.Column("title", sa.String(128), nullable=False),
        sa.Column("brand_name", sa.String(128), nullable=False),
        sa.Column("brand_logo_url", sa.Text(), nullable=True),
        sa.Column("opportunity_type", sa.String(32), server_default="campaign", nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("short_description", sa.String(256), nullable=True),
        sa.Column("compensation", sa.String(128), nullable=True),
        sa.Column("location", sa.String(128), nullable=True),
        sa.Column("requirements", sa.JSON(), nullable=False),
        sa.Column("schools", sa.JSON(), nullable=False),
        sa.Column("spots_total", sa.Integer(), nullable=True),
        sa.Column("spots_filled", sa.Integer(), server_default="0", nullable=False),
        sa.Column("status", sa.String(16), server_default="draft", nullable=False),
        sa.Column("is_featured", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("spots_filled >= 0", name="opportunities_spots_filled_non_negative"),
    )
    op.create_index("ix_opportunities_status", "opportunities", ["status"])

    op.create_table(
        "opportunity_applications",
        _id(),
        sa.Column("applicant_id", sa.String(36), sa.ForeignKey("applicants.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "opportunity_id", sa.String(36), sa.ForeignKey("opportunities.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("status", sa.String(16), server_default="pending", nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("applied_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("applicant_id", "opportunity_id", name="opportunity_applications_applicant_opportunity_key"),
    )


def downgrade() -> None:
    op.drop_table("opportunity_applications")
    op.drop_index("ix_opportunities_status", table_name="opportunities")
    op.drop_table("opportunities")
    op.drop_table("challenge_completions")
    op.drop_table("challenges")
    op.drop_table("schools")
    op.drop_table("ambassador_types")
    op.drop_index("ix_applicants_created_at", table_name="applicants")
    op.drop_index("ix_applicants_status", table_name="applicants")
    op.drop_table("applicants")

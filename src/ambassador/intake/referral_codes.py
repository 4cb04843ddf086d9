"""Referral code generation for new applicants.

Codes are a fixed prefix plus 6 alphanumeric characters (A-Z, 0-9),
generated server-side with a cryptographic random source.
"""

from __future__ import annotations

import secrets
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ambassador.config import get_settings
from ambassador.db.models import Applicant

REFERRAL_CHARSET = string.ascii_uppercase + string.digits  # A-Z, 0-9
REFERRAL_SUFFIX_LENGTH = 6


def generate_referral_code(prefix: str | None = None) -> str:
    """Generate a random referral code such as SAUCE4K7Q2Z."""
    if prefix is None:
        prefix = get_settings().referral_code_prefix
    suffix = "".join(secrets.choice(REFERRAL_CHARSET) for _ in range(REFERRAL_SUFFIX_LENGTH))
    return f"{prefix.upper()}{suffix}"


async def generate_unique_referral_code(db: AsyncSession, prefix: str | None = None) -> str:
    """Generate a referral code that doesn't already exist in the database."""
    for _ in range(10):
        code = generate_referral_code(prefix)
        existing = await db.execute(
            select(Applicant.id).where(Applicant.referral_code == code)
        )
        if existing.scalar_one_or_none() is None:
            return code
    raise RuntimeError("Failed to generate unique referral code after 10 attempts")

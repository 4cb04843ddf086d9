"""Unit tests for referral code generation."""

import string

import pytest
from pydantic import ValidationError

from ambassador.config import Settings
from ambassador.intake import referral_codes
from ambassador.intake.referral_codes import (
    REFERRAL_CHARSET,
    REFERRAL_SUFFIX_LENGTH,
    generate_referral_code,
    generate_unique_referral_code,
)
from tests.factories import make_applicant


class TestReferralCodes:
    """Test referral code generation."""

    def test_default_prefix(self):
        assert generate_referral_code().startswith("SAUCE")

    def test_code_length(self):
        code = generate_referral_code()
        assert len(code) == len("SAUCE") + REFERRAL_SUFFIX_LENGTH == 11

    def test_suffix_is_uppercase_alphanumeric(self):
        code = generate_referral_code()
        assert all(c in string.ascii_uppercase + string.digits for c in code[5:])

    def test_charset(self):
        assert REFERRAL_CHARSET == string.ascii_uppercase + string.digits

    def test_custom_prefix_is_uppercased(self):
        assert generate_referral_code("hot").startswith("HOT")

    def test_codes_differ(self):
        codes = {generate_referral_code() for _ in range(200)}
        assert len(codes) == 200

    def test_prefix_must_fit_column(self):
        assert len(generate_referral_code(Settings(referral_code_prefix="A" * 10).referral_code_prefix)) == 16
        with pytest.raises(ValidationError):
            Settings(referral_code_prefix="A" * 11)
        with pytest.raises(ValidationError):
            Settings(referral_code_prefix="")


class TestUniqueReferralCode:
    """Test collision handling against stored codes."""

    @pytest.mark.asyncio
    async def test_skips_taken_code(self, db_session, monkeypatch):
        applicant = await make_applicant(db_session)
        candidates = iter([applicant.referral_code, "SAUCEFRESH1"])
        monkeypatch.setattr(referral_codes, "generate_referral_code", lambda prefix=None: next(candidates))

        assert await generate_unique_referral_code(db_session) == "SAUCEFRESH1"

    @pytest.mark.asyncio
    async def test_gives_up_after_repeated_collisions(self, db_session, monkeypatch):
        applicant = await make_applicant(db_session)
        monkeypatch.setattr(referral_codes, "generate_referral_code", lambda prefix=None: applicant.referral_code)

        with pytest.raises(RuntimeError):
            await generate_unique_referral_code(db_session)

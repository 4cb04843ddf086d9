"""Boost completion tests: exactly-once points and rank changes."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from ambassador.boosts.service import complete_challenge, list_boosts
from ambassador.db.models import Applicant, ChallengeCompletion
from ambassador.errors import DuplicateCompletionError, RecordNotFoundError, TransientIOError
from ambassador.events import BOOST_COMPLETED_CHANNEL
from tests.factories import make_applicant, make_challenge


def _connection_reset() -> OperationalError:
    return OperationalError("INSERT", {}, Exception("connection reset"))


async def _stored(db, applicant_id):
    row = await db.execute(
        select(Applicant.points, Applicant.waitlist_position).where(Applicant.id == applicant_id)
    )
    return tuple(row.one())


async def _completion_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(ChallengeCompletion))).scalar_one()


class TestCompleteChallenge:
    """Test complete_challenge."""

    @pytest.mark.asyncio
    async def test_awards_points_once(self, db_session):
        applicant = await make_applicant(db_session, points=40)
        challenge = await make_challenge(db_session, points=15)

        result = await complete_challenge(db_session, None, applicant.id, challenge.id)

        assert result.points == 55
        assert result.waitlist_position == 69
        assert result.points_earned == 15
        assert result.previous_rank == "Rookie"
        assert result.rank == "Rising Star"
        assert result.leveled_up is True

    @pytest.mark.asyncio
    async def test_duplicate_completion_changes_nothing(self, db_session):
        applicant = await make_applicant(db_session, points=40)
        challenge = await make_challenge(db_session, points=15)
        applicant_id, challenge_id = applicant.id, challenge.id
        await complete_challenge(db_session, None, applicant_id, challenge_id)

        # The rollback expires every loaded row, so only the saved ids are used below
        with pytest.raises(DuplicateCompletionError):
            await complete_challenge(db_session, None, applicant_id, challenge_id)

        assert await _stored(db_session, applicant_id) == (55, 69)
        assert await _completion_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_insert_failure_is_transient(self, db_session, monkeypatch):
        applicant = await make_applicant(db_session, points=40)
        challenge = await make_challenge(db_session, points=15)
        applicant_id, challenge_id = applicant.id, challenge.id
        monkeypatch.setattr(db_session, "flush", AsyncMock(side_effect=_connection_reset()))

        with pytest.raises(TransientIOError):
            await complete_challenge(db_session, None, applicant_id, challenge_id)

        monkeypatch.undo()
        assert await _stored(db_session, applicant_id) == (40, 77)
        assert await _completion_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_commit_failure_is_transient(self, db_session, monkeypatch):
        applicant = await make_applicant(db_session, points=40)
        challenge = await make_challenge(db_session, points=15)
        applicant_id, challenge_id = applicant.id, challenge.id
        monkeypatch.setattr(db_session, "commit", AsyncMock(side_effect=_connection_reset()))

        with pytest.raises(TransientIOError):
            await complete_challenge(db_session, None, applicant_id, challenge_id)

        monkeypatch.undo()
        assert await _stored(db_session, applicant_id) == (40, 77)
        assert await _completion_count(db_session) == 0

        # Nothing was recorded, so a retry succeeds
        result = await complete_challenge(db_session, None, applicant_id, challenge_id)
        assert result.points == 55

    @pytest.mark.asyncio
    async def test_no_level_up_within_tier(self, db_session):
        applicant = await make_applicant(db_session, points=10)
        challenge = await make_challenge(db_session, points=5)
        result = await complete_challenge(db_session, None, applicant.id, challenge.id)
        assert result.rank == result.previous_rank == "Rookie"
        assert result.leveled_up is False

    @pytest.mark.asyncio
    async def test_inactive_challenge_not_found(self, db_session):
        applicant = await make_applicant(db_session)
        challenge = await make_challenge(db_session, is_active=False)
        with pytest.raises(RecordNotFoundError):
            await complete_challenge(db_session, None, applicant.id, challenge.id)

    @pytest.mark.asyncio
    async def test_unknown_applicant(self, db_session):
        challenge = await make_challenge(db_session)
        with pytest.raises(RecordNotFoundError):
            await complete_challenge(db_session, None, "missing", challenge.id)

    @pytest.mark.asyncio
    async def test_broadcasts_completion(self, db_session):
        applicant = await make_applicant(db_session, points=40)
        challenge = await make_challenge(db_session, points=15, title="Post a story")
        redis = MagicMock()
        redis.publish = AsyncMock(return_value=1)

        await complete_challenge(db_session, redis, applicant.id, challenge.id)

        channel, _payload = redis.publish.await_args.args
        assert channel == BOOST_COMPLETED_CHANNEL

    @pytest.mark.asyncio
    async def test_broadcast_failure_does_not_fail_completion(self, db_session):
        applicant = await make_applicant(db_session, points=40)
        challenge = await make_challenge(db_session, points=15)
        redis = MagicMock()
        redis.publish = AsyncMock(side_effect=ConnectionError("down"))

        result = await complete_challenge(db_session, redis, applicant.id, challenge.id)
        assert result.points == 55


class TestListBoosts:
    """Test list_boosts."""

    @pytest.mark.asyncio
    async def test_flags_completed(self, db_session):
        applicant = await make_applicant(db_session)
        done = await make_challenge(db_session, title="Done")
        await make_challenge(db_session, title="Open")
        await make_challenge(db_session, title="Hidden", is_active=False)
        await complete_challenge(db_session, None, applicant.id, done.id)

        entries = await list_boosts(db_session, applicant.id)

        by_title = {e["challenge"].title: e for e in entries}
        assert set(by_title) == {"Done", "Open"}
        assert by_title["Done"]["completed"] is True
        assert by_title["Done"]["completed_at"] is not None
        assert by_title["Open"]["completed"] is False

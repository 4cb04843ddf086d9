"""Portal API: waitlist status, boosts and opportunities."""

import pytest
from httpx import AsyncClient

from tests.factories import make_applicant, make_challenge, make_opportunity


class TestWaitlistStatus:
    """GET /api/v1/portal/applicants/{id}."""

    @pytest.mark.asyncio
    async def test_status_with_rank(self, client: AsyncClient, db_session):
        applicant = await make_applicant(db_session, points=115)

        response = await client.get(f"/api/v1/portal/applicants/{applicant.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["points"] == 115
        assert data["waitlist_position"] == 35
        assert data["rank"]["name"] == "Sauce Squad"
        assert data["rank"]["next_name"] == "VIP"
        assert data["rank"]["points_to_next"] == 36

    @pytest.mark.asyncio
    async def test_unknown_applicant(self, client: AsyncClient):
        response = await client.get("/api/v1/portal/applicants/missing")
        assert response.status_code == 404
        assert response.json() == {"detail": "Applicant not found"}


class TestBoosts:
    """Boost listing and completion."""

    @pytest.mark.asyncio
    async def test_complete_boost_moves_up_the_waitlist(self, client: AsyncClient, db_session):
        applicant = await make_applicant(db_session, points=115)
        challenge = await make_challenge(db_session, points=40)

        response = await client.post(
            f"/api/v1/portal/applicants/{applicant.id}/boosts/{challenge.id}/complete",
            json={"proof_url": "https://instagram.com/p/abc"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["points"] == 155
        assert data["waitlist_position"] == 12
        assert data["points_earned"] == 40
        assert data["previous_rank"] == "Sauce Squad"
        assert data["rank"] == "VIP"
        assert data["leveled_up"] is True

    @pytest.mark.asyncio
    async def test_second_completion_conflicts(self, client: AsyncClient, db_session):
        applicant = await make_applicant(db_session, points=40)
        challenge = await make_challenge(db_session, points=15)
        url = f"/api/v1/portal/applicants/{applicant.id}/boosts/{challenge.id}/complete"

        assert (await client.post(url)).status_code == 200
        second = await client.post(url)
        assert second.status_code == 409
        assert second.json() == {"detail": "Already completed"}

        status = await client.get(f"/api/v1/portal/applicants/{applicant.id}")
        assert status.json()["points"] == 55

    @pytest.mark.asyncio
    async def test_unknown_challenge(self, client: AsyncClient, db_session):
        applicant = await make_applicant(db_session)
        response = await client.post(f"/api/v1/portal/applicants/{applicant.id}/boosts/missing/complete")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_boosts(self, client: AsyncClient, db_session):
        applicant = await make_applicant(db_session)
        done = await make_challenge(db_session, points=15, title="Follow")
        await make_challenge(db_session, points=25, title="Share")
        await client.post(f"/api/v1/portal/applicants/{applicant.id}/boosts/{done.id}/complete")

        response = await client.get(f"/api/v1/portal/applicants/{applicant.id}/boosts")

        assert response.status_code == 200
        data = response.json()
        assert data["completed_count"] == 1
        assert data["total_available_points"] == 25
        assert len(data["boosts"]) == 2


class TestOpportunities:
    """Opportunity listing and applications."""

    @pytest.mark.asyncio
    async def test_new_applicant_sees_but_cannot_apply(self, client: AsyncClient, db_session):
        applicant = await make_applicant(db_session, status="new")
        opp = await make_opportunity(db_session)

        listing = await client.get(f"/api/v1/portal/applicants/{applicant.id}/opportunities")
        assert listing.status_code == 200
        assert listing.json()["can_apply"] is False
        assert len(listing.json()["opportunities"]) == 1

        response = await client.post(f"/api/v1/portal/applicants/{applicant.id}/opportunities/{opp.id}/apply")
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_accepted_applicant_applies_once(self, client: AsyncClient, db_session):
        applicant = await make_applicant(db_session, status="accepted")
        opp = await make_opportunity(db_session, spots_total=5)
        url = f"/api/v1/portal/applicants/{applicant.id}/opportunities/{opp.id}/apply"

        first = await client.post(url)
        assert first.status_code == 201
        assert first.json()["status"] == "pending"

        second = await client.post(url)
        assert second.status_code == 409

        listing = await client.get(f"/api/v1/portal/applicants/{applicant.id}/opportunities")
        entry = listing.json()["opportunities"][0]
        assert entry["has_applied"] is True
        assert entry["spots_left"] == 5

    @pytest.mark.asyncio
    async def test_full_opportunity(self, client: AsyncClient, db_session):
        applicant = await make_applicant(db_session, status="accepted")
        opp = await make_opportunity(db_session, spots_total=1, spots_filled=1)
        response = await client.post(f"/api/v1/portal/applicants/{applicant.id}/opportunities/{opp.id}/apply")
        assert response.status_code == 400

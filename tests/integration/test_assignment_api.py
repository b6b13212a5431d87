"""
Integration Tests for mentor -> mentee assignment and roster views
"""
import uuid
import pytest
from httpx import AsyncClient


class TestAssignMentee:

    @pytest.mark.asyncio
    async def test_assign_by_email(self, client: AsyncClient, mentor_headers, unassigned_mentee):
        response = await client.post(
            "/api/mentor/mentees/assign",
            json={"email": unassigned_mentee.email.upper()},
            headers=mentor_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Mentee assigned successfully"
        assert body["data"]["id"] == unassigned_mentee.id

        roster = await client.get("/api/mentor/mentees", headers=mentor_headers)
        assert roster.json()["count"] == 1
        assert roster.json()["data"][0]["id"] == unassigned_mentee.id
        assert roster.json()["data"][0]["profileCompleted"] is False

    @pytest.mark.asyncio
    async def test_assign_twice_to_same_mentor(self, client: AsyncClient, mentor_headers, mentee):
        response = await client.post(
            "/api/mentor/mentees/assign", json={"email": mentee.email}, headers=mentor_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Mentee is already assigned to you"

    @pytest.mark.asyncio
    async def test_assign_mentee_of_another_mentor(
        self, client: AsyncClient, mentee, mentor_headers, other_mentor_headers
    ):
        response = await client.post(
            "/api/mentor/mentees/assign", json={"email": mentee.email}, headers=other_mentor_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Mentee is already assigned to a mentor"

        # Neither roster changed
        mine = await client.get("/api/mentor/mentees", headers=mentor_headers)
        theirs = await client.get("/api/mentor/mentees", headers=other_mentor_headers)
        assert [m["id"] for m in mine.json()["data"]] == [mentee.id]
        assert theirs.json()["data"] == []

    @pytest.mark.asyncio
    async def test_unknown_email(self, client: AsyncClient, mentor_headers):
        response = await client.post(
            "/api/mentor/mentees/assign", json={"email": "ghost@example.com"}, headers=mentor_headers
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Mentee not found with this email"

    @pytest.mark.asyncio
    async def test_mentor_email_is_not_a_mentee(self, client: AsyncClient, mentor_headers, other_mentor):
        response = await client.post(
            "/api/mentor/mentees/assign", json={"email": other_mentor.email}, headers=mentor_headers
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_email_required(self, client: AsyncClient, mentor_headers):
        response = await client.post("/api/mentor/mentees/assign", json={}, headers=mentor_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Mentee email is required"


class TestRosterViews:

    @pytest.mark.asyncio
    async def test_profile_placeholder_before_completion(self, client: AsyncClient, mentee, mentor_headers):
        response = await client.get(f"/api/mentor/mentees/{mentee.id}/profile", headers=mentor_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["profileCompleted"] is False
        assert body["data"]["email"] == mentee.email

    @pytest.mark.asyncio
    async def test_academics_placeholder(self, client: AsyncClient, mentee, mentor_headers):
        response = await client.get(f"/api/mentor/mentees/{mentee.id}/academics", headers=mentor_headers)

        assert response.status_code == 200
        assert response.json()["data"]["backlogs"] == 0
        assert response.json()["data"]["semesterGPA"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource,label", [
        ("profile", "profile"),
        ("academics", "academic records"),
        ("achievements", "achievements"),
    ])
    async def test_other_mentors_mentee_is_forbidden(
        self, client: AsyncClient, mentee, other_mentor_headers, resource, label
    ):
        response = await client.get(
            f"/api/mentor/mentees/{mentee.id}/{resource}", headers=other_mentor_headers
        )

        assert response.status_code == 403
        assert response.json()["error"] == f"Not authorized to access this mentee's {label}"

    @pytest.mark.asyncio
    async def test_unknown_mentee_is_forbidden(self, client: AsyncClient, mentor_headers):
        response = await client.get(
            f"/api/mentor/mentees/{uuid.uuid4()}/profile", headers=mentor_headers
        )

        assert response.status_code == 403

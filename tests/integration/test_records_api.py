"""
Integration Tests for mentee profile, academic records and achievements
"""
import pytest
from httpx import AsyncClient

PROFILE = {
    "name": "Asha Rao",
    "registrationNo": "21BCE1001",
    "branch": "CSE",
    "section": "A",
    "fatherDetails": {"name": "R. Rao", "occupation": "Professional", "mobileNo": "9000000001"},
    "motherDetails": {"name": "S. Rao", "occupation": "Home Maker"},
    "alumniFamily": {"status": False},
    "communicationAddress": {"address": "12 Lake Road", "pinCode": "600001"},
}


class TestProfile:

    @pytest.mark.asyncio
    async def test_create_and_read(self, client: AsyncClient, mentee_headers):
        created = await client.post("/api/mentee/profile", json=PROFILE, headers=mentee_headers)

        assert created.status_code == 201
        data = created.json()["data"]
        assert data["registrationNo"] == "21BCE1001"
        assert data["fatherDetails"]["mobileNo"] == "9000000001"
        assert data["communicationAddress"]["pinCode"] == "600001"

        fetched = await client.get("/api/mentee/profile", headers=mentee_headers)
        assert fetched.json()["data"] == data

        me = await client.get("/api/auth/me", headers=mentee_headers)
        assert me.json()["data"]["profileCompleted"] is True

    @pytest.mark.asyncio
    async def test_create_twice(self, client: AsyncClient, mentee_headers):
        await client.post("/api/mentee/profile", json=PROFILE, headers=mentee_headers)

        response = await client.post("/api/mentee/profile", json=PROFILE, headers=mentee_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Profile already exists"

    @pytest.mark.asyncio
    async def test_partial_update(self, client: AsyncClient, mentee_headers):
        await client.post("/api/mentee/profile", json=PROFILE, headers=mentee_headers)

        response = await client.put(
            "/api/mentee/profile", json={"roomNo": "B-204", "name": None}, headers=mentee_headers
        )

        data = response.json()["data"]
        assert data["roomNo"] == "B-204"
        assert data["name"] == "Asha Rao"
        assert data["branch"] == "CSE"

    @pytest.mark.asyncio
    async def test_missing_profile(self, client: AsyncClient, mentee_headers):
        fetched = await client.get("/api/mentee/profile", headers=mentee_headers)
        updated = await client.put("/api/mentee/profile", json={"roomNo": "1"}, headers=mentee_headers)

        assert fetched.status_code == updated.status_code == 404
        assert fetched.json()["error"] == "Profile not found"

    @pytest.mark.asyncio
    async def test_mentor_sees_completed_profile(self, client: AsyncClient, mentee, mentee_headers, mentor_headers):
        await client.post("/api/mentee/profile", json=PROFILE, headers=mentee_headers)

        response = await client.get(f"/api/mentor/mentees/{mentee.id}/profile", headers=mentor_headers)
        roster = await client.get("/api/mentor/mentees", headers=mentor_headers)

        assert response.json()["profileCompleted"] is True
        assert response.json()["data"]["registrationNo"] == "21BCE1001"
        assert roster.json()["data"][0]["registrationNo"] == "21BCE1001"
        assert roster.json()["data"][0]["branch"] == "CSE"


class TestAcademics:

    @pytest.mark.asyncio
    async def test_missing_record(self, client: AsyncClient, mentee_headers):
        response = await client.get("/api/mentee/academics", headers=mentee_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Academic record not found"

    @pytest.mark.asyncio
    async def test_upsert_is_partial(self, client: AsyncClient, mentee, mentee_headers, mentor_headers):
        first = await client.post(
            "/api/mentee/academics",
            json={
                "semesterGPA": [{"semester": 1, "gpa": 8.2}],
                "moocCourses": ["NPTEL DBMS"],
                "backlogs": 1,
            },
            headers=mentee_headers,
        )
        assert first.status_code == 200

        second = await client.post(
            "/api/mentee/academics",
            json={"certifications": ["AWS CCP"], "backlogs": "none"},
            headers=mentee_headers,
        )

        data = second.json()["data"]
        assert data["semesterGPA"] == [{"semester": 1, "gpa": 8.2}]
        assert data["moocCourses"] == ["NPTEL DBMS"]
        assert data["certifications"] == ["AWS CCP"]
        assert data["backlogs"] == 0

        seen_by_mentor = await client.get(f"/api/mentor/mentees/{mentee.id}/academics", headers=mentor_headers)
        assert seen_by_mentor.json()["data"] == data

    @pytest.mark.asyncio
    async def test_negative_backlogs(self, client: AsyncClient, mentee_headers):
        response = await client.post("/api/mentee/academics", json={"backlogs": -2}, headers=mentee_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("backlogs", ["inf", "-Infinity", "nan"])
    async def test_non_finite_backlogs_count_as_zero(self, client: AsyncClient, mentee_headers, backlogs):
        response = await client.post("/api/mentee/academics", json={"backlogs": backlogs}, headers=mentee_headers)

        assert response.status_code == 200
        assert response.json()["data"]["backlogs"] == 0


class TestAchievements:

    @pytest.mark.asyncio
    async def test_create_and_list_newest_first(self, client: AsyncClient, mentee, mentee_headers):
        for description, date in [("Chess", "2024-01-10T00:00:00"), ("Hackfest", "2024-03-05T00:00:00")]:
            response = await client.post(
                "/api/mentee/achievements",
                json={"type": "Sports", "position": "1st", "description": description, "dateOfAchievement": date},
                headers=mentee_headers,
            )
            assert response.status_code == 201

        listed = await client.get("/api/mentee/achievements", headers=mentee_headers)

        assert listed.json()["count"] == 2
        assert [a["description"] for a in listed.json()["data"]] == ["Hackfest", "Chess"]
        assert listed.json()["data"][0]["mentee"]["id"] == mentee.id

    @pytest.mark.asyncio
    async def test_unassigned_mentee_cannot_log(self, client: AsyncClient, unassigned_headers):
        response = await client.post(
            "/api/mentee/achievements",
            json={"type": "Award", "description": "Best paper"},
            headers=unassigned_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "No assigned mentor found"

    @pytest.mark.asyncio
    async def test_mentor_filters_and_sort(self, client: AsyncClient, mentee, mentee_headers, mentor_headers):
        await client.post(
            "/api/mentee/achievements",
            json={"type": "Hackathon", "position": "Winner", "description": "SIH",
                  "dateOfAchievement": "2024-02-01T00:00:00"},
            headers=mentee_headers,
        )
        await client.post(
            "/api/mentor/achievements",
            json={"menteeId": mentee.id, "type": "Internship", "position": "Completed",
                  "description": "Summer intern", "dateOfAchievement": "2023-06-01T00:00:00"},
            headers=mentor_headers,
        )

        everything = await client.get("/api/mentor/achievements?sort=dateOfAchievement", headers=mentor_headers)
        hackathons = await client.get("/api/mentor/achievements?type=Hackathon", headers=mentor_headers)
        bad_sort = await client.get("/api/mentor/achievements?sort=name", headers=mentor_headers)

        assert [a["description"] for a in everything.json()["data"]] == ["Summer intern", "SIH"]
        assert [a["description"] for a in hackathons.json()["data"]] == ["SIH"]
        assert bad_sort.status_code == 400

        per_mentee = await client.get(f"/api/mentor/mentees/{mentee.id}/achievements", headers=mentor_headers)
        assert per_mentee.json()["count"] == 2

    @pytest.mark.asyncio
    async def test_other_mentor_sees_nothing(self, client: AsyncClient, mentee_headers, other_mentor_headers):
        await client.post(
            "/api/mentee/achievements", json={"type": "Other", "description": "x"}, headers=mentee_headers
        )

        response = await client.get("/api/mentor/achievements", headers=other_mentor_headers)

        assert response.json()["data"] == []

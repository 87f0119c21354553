"""
TimeTracker Backend - Time Entry API Tests
===========================================

What:  End-to-end tests for /api/v{version}/time-entries.

What we test:
    ✅ Hour rate captured from the user at creation, unaffected by later changes
    ✅ 404 when the user or project does not exist
    ✅ Monthly listing: bounds, ordering, other users excluded
    ✅ Cascade from user delete
    ✅ Input validation (hours, description, ids)
"""

import pytest

API = "/api/v1"


def _entry(project_id, user_id=1, entry_date="2022-09-01", hours=5, description="Work"):
    return {
        "userId": user_id,
        "projectId": project_id,
        "entryDate": entry_date,
        "hours": hours,
        "description": description,
    }


class TestCreateTimeEntry:

    @pytest.mark.asyncio
    async def test_create_captures_user_hour_rate(self, test_client, sample_project):
        _, project_id = sample_project

        response = await test_client.post(f"{API}/time-entries", json=_entry(project_id, user_id=3))

        assert response.status_code == 201
        body = response.json()
        assert body["hourRate"] == 12
        assert body["userName"] == "Test user 2"
        assert body["projectName"] == "Website"
        assert body["clientName"] == "Acme"
        assert body["entryDate"] == "2022-09-01"
        assert response.headers["location"] == f"{API}/time-entries/{body['id']}"

    @pytest.mark.asyncio
    async def test_hour_rate_survives_user_rate_change(self, test_client, sample_project):
        _, project_id = sample_project
        created = (await test_client.post(f"{API}/time-entries", json=_entry(project_id))).json()

        await test_client.put(f"{API}/users/1", json={"name": "Test user 0", "hourRate": 99})

        fetched = await test_client.get(f"{API}/time-entries/{created['id']}")
        assert fetched.json()["hourRate"] == 10

        newer = await test_client.post(f"{API}/time-entries", json=_entry(project_id))
        assert newer.json()["hourRate"] == 99

    @pytest.mark.asyncio
    async def test_missing_user_returns_404(self, test_client, sample_project):
        _, project_id = sample_project

        response = await test_client.post(f"{API}/time-entries", json=_entry(project_id, user_id=999))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_project_returns_404(self, test_client, sample_project):
        response = await test_client.post(f"{API}/time-entries", json=_entry(999))

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"hours": 0}, "hours"),
            ({"hours": 25}, "hours"),
            ({"description": ""}, "description"),
            ({"description": "d" * 1001}, "description"),
            ({"entryDate": "not-a-date"}, "entryDate"),
            ({"userId": 0}, "userId"),
        ],
    )
    async def test_invalid_input_returns_400(self, test_client, sample_project, overrides, field):
        _, project_id = sample_project
        payload = {**_entry(project_id), **overrides}

        response = await test_client.post(f"{API}/time-entries", json=payload)

        assert response.status_code == 400
        assert field in response.json()["details"]["errors"]


class TestUpdateAndDeleteTimeEntry:

    @pytest.mark.asyncio
    async def test_update_keeps_captured_rate(self, test_client, sample_project):
        _, project_id = sample_project
        created = (await test_client.post(f"{API}/time-entries", json=_entry(project_id))).json()

        response = await test_client.put(
            f"{API}/time-entries/{created['id']}",
            json=_entry(project_id, user_id=2, hours=8, description="Revised"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["userId"] == 2
        assert body["hours"] == 8
        assert body["description"] == "Revised"
        assert body["hourRate"] == 10

    @pytest.mark.asyncio
    async def test_update_missing_entry_returns_404(self, test_client, sample_project):
        _, project_id = sample_project

        response = await test_client.put(f"{API}/time-entries/999", json=_entry(project_id))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_entry(self, test_client, sample_project):
        _, project_id = sample_project
        created = (await test_client.post(f"{API}/time-entries", json=_entry(project_id))).json()

        response = await test_client.delete(f"{API}/time-entries/{created['id']}")

        assert response.status_code == 200
        assert (await test_client.get(f"{API}/time-entries/{created['id']}")).status_code == 404
        assert (await test_client.delete(f"{API}/time-entries/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_deleting_user_removes_their_entries(self, test_client, sample_project):
        _, project_id = sample_project
        created = (await test_client.post(f"{API}/time-entries", json=_entry(project_id))).json()

        await test_client.delete(f"{API}/users/1")

        assert (await test_client.get(f"{API}/time-entries/{created['id']}")).status_code == 404


class TestMonthlyListing:

    @pytest.mark.asyncio
    async def test_returns_only_that_month_ordered_by_date(self, test_client, sample_project):
        _, project_id = sample_project
        for entry_date in ["2022-09-30", "2022-08-31", "2022-09-01", "2022-10-01", "2022-09-15"]:
            await test_client.post(
                f"{API}/time-entries", json=_entry(project_id, entry_date=entry_date)
            )
        await test_client.post(
            f"{API}/time-entries", json=_entry(project_id, user_id=2, entry_date="2022-09-10")
        )

        response = await test_client.get(f"{API}/time-entries/1/2022/9")

        assert response.status_code == 200
        assert [e["entryDate"] for e in response.json()] == [
            "2022-09-01",
            "2022-09-15",
            "2022-09-30",
        ]

    @pytest.mark.asyncio
    async def test_december_includes_the_31st(self, test_client, sample_project):
        _, project_id = sample_project
        await test_client.post(f"{API}/time-entries", json=_entry(project_id, entry_date="2022-12-31"))
        await test_client.post(f"{API}/time-entries", json=_entry(project_id, entry_date="2023-01-01"))

        response = await test_client.get(f"{API}/time-entries/1/2022/12")

        assert [e["entryDate"] for e in response.json()] == ["2022-12-31"]

    @pytest.mark.asyncio
    async def test_unknown_user_yields_empty_list(self, test_client):
        response = await test_client.get(f"{API}/time-entries/999/2022/9")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month", [0, 13])
    async def test_month_out_of_range_returns_400(self, test_client, month):
        response = await test_client.get(f"{API}/time-entries/1/2022/{month}")

        assert response.status_code == 400


class TestListTimeEntries:

    @pytest.mark.asyncio
    async def test_paged_list(self, test_client, sample_project):
        _, project_id = sample_project
        for hours in range(1, 8):
            await test_client.post(f"{API}/time-entries", json=_entry(project_id, hours=hours))

        response = await test_client.get(f"{API}/time-entries", params={"page": 2, "size": 5})

        body = response.json()
        assert body["totalCount"] == 7
        assert [e["hours"] for e in body["items"]] == [6, 7]

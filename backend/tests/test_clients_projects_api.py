"""
TimeTracker Backend - Client & Project API Tests
=================================================

What:  End-to-end tests for /api/v{version}/clients and /projects,
       including the client → project → time entry delete cascade.
"""

import pytest

API = "/api/v1"


async def _create_client(test_client, name="Acme"):
    response = await test_client.post(f"{API}/clients", json={"name": name})
    assert response.status_code == 201
    return response.json()


async def _create_project(test_client, client_id, name="Website"):
    response = await test_client.post(
        f"{API}/projects", json={"name": name, "clientId": client_id}
    )
    assert response.status_code == 201
    return response.json()


class TestClientsApi:

    @pytest.mark.asyncio
    async def test_create_and_get_client(self, test_client):
        created = await test_client.post(f"{API}/clients", json={"Name": "Acme"})

        assert created.status_code == 201
        body = created.json()
        assert body["name"] == "Acme"
        assert created.headers["location"] == f"{API}/clients/{body['id']}"

        fetched = await test_client.get(f"{API}/clients/{body['id']}")
        assert fetched.json() == body

    @pytest.mark.asyncio
    async def test_list_clients_is_paged(self, test_client):
        for i in range(7):
            await _create_client(test_client, f"Client {i}")

        response = await test_client.get(f"{API}/clients", params={"page": 2, "size": 5})

        body = response.json()
        assert body["totalCount"] == 7
        assert [item["name"] for item in body["items"]] == ["Client 5", "Client 6"]

    @pytest.mark.asyncio
    async def test_update_client(self, test_client):
        client = await _create_client(test_client)

        response = await test_client.put(f"{API}/clients/{client['id']}", json={"name": "Acme Ltd"})

        assert response.status_code == 200
        assert response.json()["name"] == "Acme Ltd"

    @pytest.mark.asyncio
    async def test_missing_client_returns_404(self, test_client):
        assert (await test_client.get(f"{API}/clients/999")).status_code == 404
        assert (await test_client.put(f"{API}/clients/999", json={"name": "X"})).status_code == 404
        assert (await test_client.delete(f"{API}/clients/999")).status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "c" * 101])
    async def test_invalid_client_name_returns_400(self, test_client, name):
        response = await test_client.post(f"{API}/clients", json={"name": name})

        assert response.status_code == 400
        assert "name" in response.json()["details"]["errors"]


class TestProjectsApi:

    @pytest.mark.asyncio
    async def test_create_project_includes_client_name(self, test_client):
        client = await _create_client(test_client)

        response = await test_client.post(
            f"{API}/projects", json={"Name": "Website", "ClientId": client["id"]}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["clientId"] == client["id"]
        assert body["clientName"] == "Acme"
        assert response.headers["location"] == f"{API}/projects/{body['id']}"

    @pytest.mark.asyncio
    async def test_create_project_for_missing_client_returns_404(self, test_client):
        response = await test_client.post(f"{API}/projects", json={"name": "Orphan", "clientId": 999})

        assert response.status_code == 404

        listing = await test_client.get(f"{API}/projects")
        assert listing.json()["totalCount"] == 0

    @pytest.mark.asyncio
    async def test_update_project_moves_it_to_another_client(self, test_client):
        first = await _create_client(test_client, "First")
        second = await _create_client(test_client, "Second")
        project = await _create_project(test_client, first["id"])

        response = await test_client.put(
            f"{API}/projects/{project['id']}",
            json={"name": "Website v2", "clientId": second["id"]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Website v2"
        assert body["clientName"] == "Second"

    @pytest.mark.asyncio
    async def test_update_project_with_missing_client_returns_404(self, test_client):
        client = await _create_client(test_client)
        project = await _create_project(test_client, client["id"])

        response = await test_client.put(
            f"{API}/projects/{project['id']}", json={"name": "X", "clientId": 999}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_missing_project_returns_404(self, test_client):
        client = await _create_client(test_client)

        response = await test_client.put(
            f"{API}/projects/999", json={"name": "X", "clientId": client["id"]}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_client_id_must_be_positive(self, test_client):
        response = await test_client.post(f"{API}/projects", json={"name": "X", "clientId": 0})

        assert response.status_code == 400
        assert "clientId" in response.json()["details"]["errors"]


class TestCascadeDelete:

    @pytest.mark.asyncio
    async def test_deleting_client_removes_projects_and_time_entries(self, test_client):
        client = await _create_client(test_client)
        project = await _create_project(test_client, client["id"])
        entry = await test_client.post(
            f"{API}/time-entries",
            json={
                "userId": 1,
                "projectId": project["id"],
                "entryDate": "2022-09-01",
                "hours": 4,
                "description": "Kick-off",
            },
        )
        assert entry.status_code == 201

        response = await test_client.delete(f"{API}/clients/{client['id']}")

        assert response.status_code == 200
        assert (await test_client.get(f"{API}/projects/{project['id']}")).status_code == 404
        assert (await test_client.get(f"{API}/time-entries/{entry.json()['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_deleting_project_keeps_client(self, test_client):
        client = await _create_client(test_client)
        project = await _create_project(test_client, client["id"])

        response = await test_client.delete(f"{API}/projects/{project['id']}")

        assert response.status_code == 200
        assert (await test_client.get(f"{API}/clients/{client['id']}")).status_code == 200

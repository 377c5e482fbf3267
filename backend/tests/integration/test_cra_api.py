"""End-to-end tests for the /api/v1/cras endpoints."""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient


def _payload(day: str = "2025-01-10", client: str = "Acme", **overrides) -> dict:
    payload = {
        "date": day,
        "client": client,
        "activities": [{"description": "Build API", "hours": 4, "category": "Dev"}],
    }
    payload.update(overrides)
    return payload


async def _create(api_client: AsyncClient, **kwargs) -> dict:
    response = await api_client.post("/api/v1/cras", json=_payload(**kwargs))
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_returns_envelope(api_client: AsyncClient):
    response = await api_client.post("/api/v1/cras", json=_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "CRA created successfully"
    data = body["data"]
    assert data["client"] == "Acme"
    assert data["status"] == "draft"
    assert data["total_hours"] == 4.0
    assert data["activities"][0]["cra_id"] == data["id"]
    assert "work_date" not in data["activities"][0]
    assert "pagination" not in body


@pytest.mark.asyncio
async def test_create_with_empty_activities_is_rejected(api_client: AsyncClient):
    response = await api_client.post("/api/v1/cras", json=_payload(activities=[]))

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Invalid input"


@pytest.mark.asyncio
@pytest.mark.parametrize("hours", [0, 25, 1.1])
async def test_create_with_bad_hours_is_rejected(api_client: AsyncClient, hours):
    activities = [{"description": "Build API", "hours": hours, "category": "Dev"}]
    response = await api_client.post("/api/v1/cras", json=_payload(activities=activities))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_with_future_date_is_rejected(api_client: AsyncClient):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    response = await api_client.post("/api/v1/cras", json=_payload(day=tomorrow))

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid input"


@pytest.mark.asyncio
async def test_create_with_duplicate_work_dates_is_rejected(api_client: AsyncClient):
    activities = [
        {"description": "Morning", "hours": 4, "category": "Dev", "work_date": "2025-01-10"},
        {"description": "Evening", "hours": 4, "category": "Dev", "work_date": "2025-01-10"},
    ]
    response = await api_client.post("/api/v1/cras", json=_payload(activities=activities))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_by_id(api_client: AsyncClient):
    created = await _create(api_client)

    response = await api_client.get(f"/api/v1/cras/{created['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == created["id"]


@pytest.mark.asyncio
async def test_get_missing_returns_404(api_client: AsyncClient):
    response = await api_client.get("/api/v1/cras/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert "does-not-exist" in body["message"]


@pytest.mark.asyncio
async def test_update_replaces_activities_and_total(api_client: AsyncClient):
    created = await _create(api_client)

    response = await api_client.put(
        f"/api/v1/cras/{created['id']}",
        json={
            "status": "submitted",
            "activities": [
                {"description": "Review", "hours": 2.5, "category": "QA"},
                {"description": "Deploy", "hours": 1, "category": "Ops"},
            ],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "CRA updated successfully"
    assert body["data"]["status"] == "submitted"
    assert body["data"]["total_hours"] == 3.5
    assert [a["description"] for a in body["data"]["activities"]] == ["Review", "Deploy"]


@pytest.mark.asyncio
async def test_update_with_empty_activities_is_rejected(api_client: AsyncClient):
    created = await _create(api_client)

    response = await api_client.put(f"/api/v1/cras/{created['id']}", json={"activities": []})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_missing_returns_404(api_client: AsyncClient):
    response = await api_client.put("/api/v1/cras/missing", json={"client": "Globex"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_then_delete_again(api_client: AsyncClient):
    created = await _create(api_client)

    first = await api_client.delete(f"/api/v1/cras/{created['id']}")
    second = await api_client.delete(f"/api/v1/cras/{created['id']}")

    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "CRA deleted successfully"}
    assert second.status_code == 404


@pytest.mark.asyncio
async def test_list_pagination_metadata(api_client: AsyncClient):
    for day in range(1, 6):
        await _create(api_client, day=f"2025-01-0{day}")

    response = await api_client.get("/api/v1/cras", params={"limit": 2, "offset": 0})
    body = response.json()

    assert response.status_code == 200
    assert [c["date"] for c in body["data"]] == ["2025-01-05", "2025-01-04"]
    assert body["pagination"] == {"total": 5, "limit": 2, "offset": 0, "hasMore": True}

    last = (await api_client.get("/api/v1/cras", params={"limit": 2, "offset": 4})).json()
    assert len(last["data"]) == 1
    assert last["pagination"]["hasMore"] is False


@pytest.mark.asyncio
async def test_list_clamps_oversized_limit(api_client: AsyncClient):
    response = await api_client.get("/api/v1/cras", params={"limit": 100000})

    assert response.status_code == 200
    assert response.json()["pagination"]["limit"] == 500


@pytest.mark.asyncio
async def test_list_filters(api_client: AsyncClient):
    await _create(api_client, day="2025-01-05", client="Acme Corp")
    await _create(api_client, day="2025-02-05", client="Acme Corp")
    await _create(api_client, day="2025-01-06", client="Globex", status="submitted")

    response = await api_client.get(
        "/api/v1/cras",
        params={"client": "acme", "startDate": "2025-01-01", "endDate": "2025-01-31"},
    )
    body = response.json()

    assert body["pagination"]["total"] == 1
    assert body["data"][0]["date"] == "2025-01-05"

    submitted = (await api_client.get("/api/v1/cras", params={"status": "submitted"})).json()
    assert [c["client"] for c in submitted["data"]] == ["Globex"]


@pytest.mark.asyncio
async def test_list_with_unknown_status_is_rejected(api_client: AsyncClient):
    response = await api_client.get("/api/v1/cras", params={"status": "archived"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_statistics(api_client: AsyncClient):
    await _create(api_client, client="Acme")
    await _create(api_client, client="Globex", status="approved")

    response = await api_client.get("/api/v1/cras/statistics")
    data = response.json()["data"]

    assert response.status_code == 200
    assert data["total_cras"] == 2
    assert data["total_hours"] == 8.0
    assert data["active_clients"] == 2
    assert data["by_status"]["approved"] == 1


@pytest.mark.asyncio
async def test_create_then_replace_activities_round_trip(api_client: AsyncClient):
    created = await _create(
        api_client,
        activities=[
            {"description": "Build API", "hours": 4, "category": "Dev"},
            {"description": "Standup", "hours": 0.5, "category": "Meeting"},
        ],
    )
    assert created["total_hours"] == 4.5
    assert created["status"] == "draft"
    original_ids = {a["id"] for a in created["activities"]}
    assert len(original_ids) == 2

    response = await api_client.put(
        f"/api/v1/cras/{created['id']}",
        json={"activities": [{"description": "Code review", "hours": 2, "category": "Dev"}]},
    )
    data = response.json()["data"]

    assert data["total_hours"] == 2.0
    assert len(data["activities"]) == 1
    assert data["activities"][0]["id"] not in original_ids

    fetched = (await api_client.get(f"/api/v1/cras/{created['id']}")).json()["data"]
    assert fetched == data


@pytest.mark.asyncio
async def test_total_matches_page_when_limit_exceeds_results(api_client: AsyncClient):
    await _create(api_client, client="Acme")
    await _create(api_client, client="Globex")

    body = (await api_client.get("/api/v1/cras", params={"limit": 10})).json()

    assert body["pagination"]["total"] == len(body["data"]) == 2
    assert body["pagination"]["hasMore"] is False

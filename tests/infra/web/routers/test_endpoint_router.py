from datetime import timedelta

import pytest
from fastapi import FastAPI

import infra.web.routers.endpoint_router as endpoint_router_module
from core.domain.check_status import CheckStatus
from tests.support.fakes import (
    BASE_TIME,
    FakeClock,
    FakeEndpointRepository,
    FakeResultStore,
    make_endpoint,
    make_result,
)


@pytest.fixture
def endpoint_store() -> FakeResultStore:
    repository = FakeEndpointRepository(
        initial_endpoints=[
            make_endpoint("ep-1", owner_id="owner-1", name="billing-api"),
            make_endpoint("ep-2", owner_id="owner-1", name="billing-web"),
        ]
    )

    return FakeResultStore(repository)


@pytest.fixture
def endpoint_app(monkeypatch: pytest.MonkeyPatch, endpoint_store: FakeResultStore) -> FastAPI:
    monkeypatch.setattr(endpoint_router_module, "get_endpoint_repository", lambda: endpoint_store.repository)
    monkeypatch.setattr(endpoint_router_module, "get_result_store", lambda: endpoint_store)
    monkeypatch.setattr(endpoint_router_module, "get_system_clock", lambda: FakeClock())

    app = FastAPI()
    app.include_router(endpoint_router_module.router)
    return app


@pytest.mark.asyncio
async def test_create_endpoint(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)

    response = await client.post(
        "/endpoint",
        json={
            "ownerId": "owner-2",
            "name": "search",
            "target": "search.internal:9200",
            "type": "tcp",
            "timeoutSeconds": 10,
            "retryCount": 1,
        },
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["id"]
    assert payload["type"] == "tcp"
    assert payload["timeoutSeconds"] == 10
    assert payload["successCodes"] == "200,201,204"
    assert payload["snapshot"] is None


@pytest.mark.asyncio
async def test_create_endpoint_over_free_limit_is_conflict(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)
    body = {"ownerId": "owner-1", "name": "third", "target": "https://third.example.com"}

    third = await client.post("/endpoint", json=body)
    fourth = await client.post("/endpoint", json={**body, "name": "fourth"})

    assert third.status_code == 201
    assert fourth.status_code == 409
    assert "limit of 3" in fourth.json()["detail"]


@pytest.mark.asyncio
async def test_create_endpoint_with_active_addons(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)
    body = {"ownerId": "owner-1", "name": "extra", "target": "https://extra.example.com"}

    for index in range(2):
        response = await client.post(
            "/endpoint",
            params={"subscriptionStatus": "active", "endpointAddons": 1},
            json={**body, "name": f"extra-{index}"},
        )
        assert response.status_code == 201


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "   "},
        {"timeoutSeconds": 2},
        {"checkFrequencyMinutes": 90},
        {"retryCount": 11},
    ],
)
async def test_create_endpoint_rejects_invalid_payload(
    endpoint_app: FastAPI,
    async_client_factory,
    overrides: dict,
) -> None:
    client = await async_client_factory(endpoint_app)
    body = {"ownerId": "owner-2", "name": "search", "target": "https://search.example.com"}

    response = await client.post("/endpoint", json={**body, **overrides})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_endpoints_by_owner(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)

    response = await client.get("/endpoint", params={"ownerId": "owner-1"})

    assert response.status_code == 200
    assert [item["name"] for item in response.json()] == ["billing-api", "billing-web"]


@pytest.mark.asyncio
async def test_get_endpoint_not_found(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)

    response = await client.get("/endpoint/missing")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_endpoint(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)

    response = await client.patch("/endpoint/ep-1", json={"enabled": False, "successCodes": "200"})

    assert response.status_code == 200
    assert response.json()["enabled"] is False
    assert response.json()["successCodes"] == "200"


@pytest.mark.asyncio
async def test_update_endpoint_requires_a_field(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)

    response = await client.patch("/endpoint/ep-1", json={})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_missing_endpoint_is_not_found(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)

    response = await client.patch("/endpoint/missing", json={"name": "renamed"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_endpoint(endpoint_app: FastAPI, async_client_factory, endpoint_store: FakeResultStore) -> None:
    client = await async_client_factory(endpoint_app)

    response = await client.delete("/endpoint/ep-2")

    assert response.status_code == 204
    assert "ep-2" not in endpoint_store.repository.endpoints


@pytest.mark.asyncio
async def test_get_endpoint_uptime(endpoint_app: FastAPI, async_client_factory, endpoint_store: FakeResultStore) -> None:
    statuses = [CheckStatus.HEALTHY] * 7 + [CheckStatus.DEGRADED] * 2 + [CheckStatus.DOWN]
    endpoint_store.results = [
        make_result("ep-1", status=status, checked_at=BASE_TIME - timedelta(hours=index + 1))
        for index, status in enumerate(statuses)
    ]
    client = await async_client_factory(endpoint_app)

    response = await client.get("/endpoint/ep-1/uptime", params={"windowDays": 7})

    assert response.status_code == 200
    payload = response.json()
    assert payload["uptime"] == 70.0
    assert payload["windowDays"] == 7
    assert payload["totalChecks"] == 10
    assert payload["incidentCount"] == 1
    assert payload["daily"][0]["worstStatus"] == "down"


@pytest.mark.asyncio
async def test_get_endpoint_uptime_without_results(endpoint_app: FastAPI, async_client_factory) -> None:
    client = await async_client_factory(endpoint_app)

    response = await client.get("/endpoint/ep-1/uptime")

    assert response.status_code == 200
    assert response.json()["uptime"] == 100.0
    assert response.json()["windowDays"] == 30


@pytest.mark.asyncio
async def test_get_endpoint_checks(endpoint_app: FastAPI, async_client_factory, endpoint_store: FakeResultStore) -> None:
    endpoint_store.results = [
        make_result("ep-1", checked_at=BASE_TIME - timedelta(hours=48)),
        make_result("ep-1", status=CheckStatus.DEGRADED, checked_at=BASE_TIME - timedelta(hours=1), status_code=503),
    ]
    client = await async_client_factory(endpoint_app)

    response = await client.get("/endpoint/ep-1/checks", params={"sinceHours": 24})

    assert response.status_code == 200
    payload = response.json()
    assert len(payload) == 1
    assert payload[0]["status"] == "degraded"
    assert payload[0]["statusCode"] == 503

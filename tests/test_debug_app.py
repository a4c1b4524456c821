"""Tests for the debug inspection app."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from endpoint_stubs.debug_app import create_debug_app


@pytest_asyncio.fixture
async def client(recording_session):
    """Client for a debug app over a session with one recorded stub."""
    service = recording_session.register_service("docs", "https://api.example.com")
    service.get("show", "documents/:id")
    recording_session.stub("docs", "show", {"id": 1})
    recording_session.subscribe("docs", "show", "get", lambda: None)

    transport = ASGITransport(app=create_debug_app(recording_session))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_health(client):
    """Health reports the number of services."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "services": 1}


@pytest.mark.asyncio
async def test_list_services(client):
    """Services are listed with their endpoints."""
    response = await client.get("/services")

    assert response.status_code == 200
    assert response.json() == [
        {
            "id": "docs",
            "uri": "https://api.example.com",
            "endpoints": [
                {"id": "show", "verb": "GET", "uri_template": "documents/:id", "route_params": ["id"]},
            ],
        }
    ]


@pytest.mark.asyncio
async def test_get_missing_service(client):
    """Unknown services are a 404 with suggestions."""
    response = await client.get("/services/doc")

    assert response.status_code == 404
    assert "Couldn't find a service with id=:doc" in response.json()["detail"]
    assert ":docs" in response.json()["detail"]


@pytest.mark.asyncio
async def test_list_requests(client):
    """Recorded stubs are listed per endpoint."""
    response = await client.get("/services/docs/endpoints/show/requests")

    assert response.status_code == 200
    records = response.json()
    assert len(records) == 1
    assert records[0]["uri"] == "https://api.example.com/documents/1"
    assert records[0]["verb"] == "GET"
    assert records[0]["responded_at"] is None


@pytest.mark.asyncio
async def test_list_requests_missing_endpoint(client):
    """Unknown endpoints are a 404."""
    response = await client.get("/services/docs/endpoints/sho/requests")

    assert response.status_code == 404
    assert "Couldn't find an endpoint with id=:sho" in response.json()["detail"]


@pytest.mark.asyncio
async def test_list_subscriptions(client):
    """Subscriptions are listed."""
    response = await client.get("/subscriptions")

    assert response.json() == [
        {"service_id": "docs", "endpoint_id": "show", "verb": "GET", "kind": "no_args"},
    ]

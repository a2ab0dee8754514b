"""Tests for the service directory, health endpoints and error handlers."""

import json

import pytest
from fastapi import Request
from httpx import ASGITransport, AsyncClient

from lightwaves.api.dependencies import Services, get_services
from lightwaves.config import Settings
from lightwaves.main import app, known_error_handler
from lightwaves.models.failure import InvalidRequestError, RevealServiceError
from lightwaves.services.classifier import HoldingsClassifier
from lightwaves.services.discovery import PullThenFilter
from lightwaves.services.membership import PatternMembership


@pytest.fixture
async def client(indexer_factory, base_id: str):
    """Provide an async test client with stub services."""
    settings = Settings(
        _env_file=None,
        ordinal_bot_api_key="test-key",
        collection_base_id=base_id,
        collection_max_index=3332,
        environment="test",
    )
    indexer = indexer_factory()
    membership = PatternMembership(base_id=base_id, max_index=3332)
    services = Services(
        settings=settings,
        membership=membership,
        classifier=HoldingsClassifier(indexer, membership, PullThenFilter(indexer)),
        order_relay=None,  # type: ignore[arg-type]
    )
    app.dependency_overrides[get_services] = lambda: services

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestHealth:
    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestDirectory:
    async def test_describes_service(self, client: AsyncClient, base_id: str) -> None:
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Light Waves Reveal API is running"
        assert data["environment"] == "test"
        assert data["version"]
        assert data["collection"] == {
            "name": "Light Wave",
            "strategy": "pattern",
            "baseId": base_id,
            "maxIndex": 3332,
            "discovery": "pull",
        }

    async def test_lists_endpoints(self, client: AsyncClient) -> None:
        response = await client.get("/")

        endpoints = response.json()["endpoints"]
        assert set(endpoints) == {
            "POST /api/check-wallet",
            "GET /api/fee-rates",
            "POST /api/create-reveal",
            "GET /api/order-status/:orderId",
        }


class TestCors:
    async def test_allows_configured_origin(self, client: AsyncClient) -> None:
        response = await client.options(
            "/health",
            headers={
                "Origin": "https://kanetix.io",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.headers["access-control-allow-origin"] == "https://kanetix.io"
        assert response.headers["access-control-allow-credentials"] == "true"

    async def test_other_origin_not_allowed(self, client: AsyncClient) -> None:
        response = await client.get("/health", headers={"Origin": "https://evil.example"})

        assert "access-control-allow-origin" not in response.headers


class TestKnownErrorHandler:
    async def test_uses_error_status_and_body(self) -> None:
        response = await known_error_handler(
            Request({"type": "http"}), InvalidRequestError("Wallet address required")
        )

        assert response.status_code == 400
        assert json.loads(response.body) == {"error": "Wallet address required"}

    async def test_includes_details(self) -> None:
        error = RevealServiceError("Failed to create reveal order", detail="insufficient balance")

        response = await known_error_handler(Request({"type": "http"}), error)

        assert response.status_code == 500
        assert json.loads(response.body) == {
            "error": "Failed to create reveal order",
            "details": "insufficient balance",
        }

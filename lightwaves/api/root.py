"""
Service directory and health check.
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from lightwaves.api.dependencies import Services, get_services

router = APIRouter(tags=["health"])

ENDPOINTS = {
    "POST /api/check-wallet": "Check wallet for Light Waves",
    "GET /api/fee-rates": "Get current fee rates",
    "POST /api/create-reveal": "Create reveal order",
    "GET /api/order-status/:orderId": "Check order status",
}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


class DirectoryResponse(BaseModel):
    """Service summary and endpoint directory."""

    status: str
    version: str
    environment: str
    collection: dict[str, Any]
    endpoints: dict[str, str]


def _app_version() -> str:
    try:
        return pkg_version("lightwaves")
    except PackageNotFoundError:
        return "unknown"


@router.get("/", response_model=DirectoryResponse)
async def directory(services: Annotated[Services, Depends(get_services)]) -> DirectoryResponse:
    """Service status, version, collection summary and available endpoints."""
    settings = services.settings
    collection: dict[str, Any] = {
        "name": settings.collection_name,
        **services.membership.describe(),
        "discovery": services.classifier.discovery.name,
    }
    return DirectoryResponse(
        status=f"{settings.app_name} is running",
        version=_app_version(),
        environment=settings.environment,
        collection=collection,
        endpoints=ENDPOINTS,
    )


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness check.

    Returns healthy if the service is running.
    Does not check upstream services.
    """
    return HealthResponse(status="healthy")

"""
Service wiring for request handlers.

Services are built once per process in the app lifespan and reached through
FastAPI dependencies, so tests can swap them with app.dependency_overrides.
"""

from dataclasses import dataclass
from typing import Annotated

import httpx
from fastapi import Depends, Request

from lightwaves.clients.fees import FeeSourceClient
from lightwaves.clients.indexer import IndexerClient
from lightwaves.clients.reveal import RevealServiceClient
from lightwaves.config import Settings
from lightwaves.services.classifier import HoldingsClassifier
from lightwaves.services.discovery import discovery_from_settings
from lightwaves.services.fee_rates import FeeRateService, fee_cache
from lightwaves.services.membership import CollectionMembership, membership_from_settings
from lightwaves.services.order_relay import OrderRelay


@dataclass
class Services:
    """Everything the request handlers need."""

    settings: Settings
    membership: CollectionMembership
    classifier: HoldingsClassifier
    order_relay: OrderRelay


def build_services(settings: Settings, http: httpx.AsyncClient) -> Services:
    """Wire clients and services from settings over a shared HTTP client."""
    indexer = IndexerClient(http, base_url=settings.indexer_url, api_key=settings.hiro_api_key)
    membership = membership_from_settings(settings)
    classifier = HoldingsClassifier(
        indexer=indexer,
        membership=membership,
        discovery=discovery_from_settings(settings, indexer, membership),
        concurrency=settings.fetch_concurrency,
        detail_policy=settings.detail_failure_policy,
        count_policy=settings.count_failure_policy,
        label_prefix=settings.collection_name,
    )
    fee_rates = FeeRateService(
        source=FeeSourceClient(http, url=settings.fee_source_url),
        cache=fee_cache(ttl=settings.fee_cache_ttl_seconds),
    )
    order_relay = OrderRelay(
        reveal_service=RevealServiceClient(
            http,
            api_key=settings.ordinal_bot_api_key,
            base_url=settings.reveal_service_url,
        ),
        fee_rates=fee_rates,
    )
    return Services(
        settings=settings,
        membership=membership,
        classifier=classifier,
        order_relay=order_relay,
    )


def get_services(request: Request) -> Services:
    """Dependency that provides the process-wide services."""
    services: Services | None = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialised; is the app lifespan running?")
    return services


def get_classifier(services: Annotated[Services, Depends(get_services)]) -> HoldingsClassifier:
    return services.classifier


def get_order_relay(services: Annotated[Services, Depends(get_services)]) -> OrderRelay:
    return services.order_relay

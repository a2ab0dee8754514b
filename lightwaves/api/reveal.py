"""
Reveal order endpoints.

Fee tiers, reveal order creation and order status, relayed to the fee
source and the inscription service.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from lightwaves.api.dependencies import get_order_relay
from lightwaves.models.failure import (
    InvalidFeeLevelError,
    RequestFailedError,
    UpstreamError,
)
from lightwaves.models.fees import DEFAULT_FEE_LEVEL
from lightwaves.services.order_relay import OrderRelay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reveal"])


class FeeRatesResponse(BaseModel):
    """Recommended fee tiers in sat/vB."""

    low: int | float
    medium: int | float
    high: int | float
    timestamp: int


class CreateRevealRequest(BaseModel):
    """Request model for creating a reveal order."""

    model_config = ConfigDict(populate_by_name=True)

    light_wave_ids: list[str] | None = Field(
        default=None,
        alias="lightWaveIds",
        description="Inscription ids to reveal",
    )
    receive_address: str | None = Field(
        default=None,
        alias="receiveAddress",
        description="Address that receives the reinscribed sats",
    )
    fee_level: str | None = Field(
        default=DEFAULT_FEE_LEVEL,
        alias="feeLevel",
        description="Fee tier: low, medium or high",
    )


class CreateRevealResponse(BaseModel):
    """Response model for a created reveal order."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "success"
    order_id: str | None = Field(alias="orderId")
    charge: dict[str, Any] | None = None
    inscription_count: int = Field(alias="inscriptionCount")
    fee_rate: int | float = Field(alias="feeRate")
    total_amount: int | float = Field(alias="totalAmount")
    payment_address: str | None = Field(default=None, alias="paymentAddress")
    lightning_invoice: str | None = Field(default=None, alias="lightningInvoice")


class OrderStatusResponse(BaseModel):
    """Upstream order object, passed through untouched."""

    status: str = "success"
    order: dict[str, Any]


@router.get("/fee-rates", response_model=FeeRatesResponse)
async def fee_rates(relay: Annotated[OrderRelay, Depends(get_order_relay)]) -> FeeRatesResponse:
    """Current recommended fee tiers, cached for a short interval."""
    try:
        snapshot = await relay.get_fee_rates()
    except UpstreamError as e:
        logger.error("Error fetching fee rates: %s", e.detail or e.message)
        raise RequestFailedError("Failed to fetch fee rates", e) from e
    return FeeRatesResponse(**snapshot.to_dict())


@router.post("/create-reveal", response_model=CreateRevealResponse)
async def create_reveal(
    request: CreateRevealRequest,
    relay: Annotated[OrderRelay, Depends(get_order_relay)],
) -> CreateRevealResponse:
    """
    Create a reveal (reinscription) order.

    Returns the order id and the payment charge to settle. Missing ids or
    receive address are a 400; an unknown fee tier or an upstream failure
    is a 500.
    """
    try:
        order = await relay.create_reveal(
            request.light_wave_ids,
            request.receive_address,
            request.fee_level,
        )
    except (UpstreamError, InvalidFeeLevelError) as e:
        logger.error("Error creating reveal order: %s", e.detail or e.message)
        raise RequestFailedError("Failed to create reveal order", e) from e

    return CreateRevealResponse(
        order_id=order.order_id,
        charge=order.charge,
        inscription_count=order.inscription_count,
        fee_rate=order.fee_rate,
        total_amount=order.total_amount,
        payment_address=order.payment_address,
        lightning_invoice=order.lightning_invoice,
    )


@router.get("/order-status/{order_id}", response_model=OrderStatusResponse)
async def order_status(
    order_id: str,
    relay: Annotated[OrderRelay, Depends(get_order_relay)],
) -> OrderStatusResponse:
    """Order status from the inscription service, passed through untouched."""
    try:
        order = await relay.get_order_status(order_id)
    except UpstreamError as e:
        logger.error("Error fetching order status %s: %s", order_id, e.detail or e.message)
        raise RequestFailedError("Failed to fetch order status", e) from e
    return OrderStatusResponse(order=order)

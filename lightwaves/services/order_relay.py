"""
Reveal order relay.

Turns a reveal request into a reinscription order on the inscription
service and relays the payment charge back. Every validation happens before
any upstream call.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from lightwaves.clients.reveal import RevealServiceClient
from lightwaves.models.failure import InvalidFeeLevelError, InvalidRequestError
from lightwaves.models.fees import DEFAULT_FEE_LEVEL, FEE_LEVELS, FeeSnapshot
from lightwaves.services.fee_rates import FeeRateService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevealOrder:
    """A created reveal order and its payment instructions."""

    order_id: str | None
    charge: dict[str, Any] | None
    inscription_count: int
    fee_rate: int | float
    total_amount: int | float
    payment_address: str | None
    lightning_invoice: str | None


def _charge_fields(charge: Any) -> tuple[int | float, str | None, str | None]:
    """(amount, payment address, lightning invoice) from a charge object."""
    if not isinstance(charge, dict):
        return 0, None, None
    lightning = charge.get("lightning")
    invoice = lightning.get("address") if isinstance(lightning, dict) else None
    return charge.get("amount") or 0, charge.get("address"), invoice


class OrderRelay:
    """Creates reveal orders and proxies fee and order-status lookups."""

    def __init__(self, reveal_service: RevealServiceClient, fee_rates: FeeRateService) -> None:
        self.reveal_service = reveal_service
        self.fee_rates = fee_rates

    async def create_reveal(
        self,
        inscription_ids: Sequence[str] | None,
        receive_address: str | None,
        fee_level: str | None = DEFAULT_FEE_LEVEL,
    ) -> RevealOrder:
        """
        Create a reinscription order for the given inscriptions.

        Raises:
            InvalidRequestError: If ids or receive address are missing
            InvalidFeeLevelError: If the fee tier is not low/medium/high
            FeeSourceError: If fee rates cannot be fetched
            RevealServiceError: If the order cannot be created
        """
        if not inscription_ids:
            raise InvalidRequestError("Light Wave IDs required")
        if not receive_address:
            raise InvalidRequestError("Receive address required")

        level = DEFAULT_FEE_LEVEL if fee_level is None else fee_level
        if level not in FEE_LEVELS:
            raise InvalidFeeLevelError(level)

        snapshot = await self.fee_rates.get_snapshot()
        fee_rate = snapshot.rate_for(level)

        logger.info(
            "Creating reveal order for %d inscriptions at %s sat/vB",
            len(inscription_ids),
            fee_rate,
        )
        order = await self.reveal_service.create_reinscription(
            inscription_ids, fee_rate, receive_address
        )

        raw_id = order.get("id")
        order_id = str(raw_id) if raw_id is not None else None
        charge = order.get("charge")
        amount, payment_address, invoice = _charge_fields(charge)
        logger.info("Reveal order %s created", order_id)

        return RevealOrder(
            order_id=order_id,
            charge=charge if isinstance(charge, dict) else None,
            inscription_count=len(inscription_ids),
            fee_rate=fee_rate,
            total_amount=amount,
            payment_address=payment_address,
            lightning_invoice=invoice,
        )

    async def get_fee_rates(self) -> FeeSnapshot:
        """Current fee tiers (cached)."""
        return await self.fee_rates.get_snapshot()

    async def get_order_status(self, order_id: str) -> dict[str, Any]:
        """Upstream order object, untouched."""
        if not order_id:
            raise InvalidRequestError("Order ID required")
        return await self.reveal_service.get_order(order_id)

"""
Wallet check endpoint.

Lists the unrevealed Light Waves a wallet holds.
"""

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from lightwaves.api.dependencies import get_classifier
from lightwaves.models.classification import UnrevealedItem
from lightwaves.models.failure import InvalidRequestError, RequestFailedError, UpstreamError
from lightwaves.services.classifier import HoldingsClassifier
from lightwaves.services.discovery import IndexWindow
from lightwaves.services.membership import RangeMembership

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["wallet"])


class CheckWalletRequest(BaseModel):
    """Request model for a wallet check."""

    model_config = ConfigDict(populate_by_name=True)

    address: str | None = Field(default=None, description="Wallet address to check")
    start_index: int | None = Field(
        default=None,
        alias="startIndex",
        description="First collection index to check (enumerating discovery only)",
    )
    end_index: int | None = Field(
        default=None,
        alias="endIndex",
        description="Collection index to stop before (enumerating discovery only)",
    )


class UnrevealedResponse(BaseModel):
    """One unrevealed Light Wave."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    revealed: Literal[False] = False
    sat_ordinal: str = Field(alias="satOrdinal")
    label: str
    index: int | None = None

    @classmethod
    def from_item(cls, item: UnrevealedItem) -> "UnrevealedResponse":
        return cls(id=item.id, sat_ordinal=item.sat, label=item.label, index=item.index)


class Totals(BaseModel):
    """Aggregate counts for a wallet check."""

    model_config = ConfigDict(populate_by_name=True)

    owned: int
    in_range: int | None = Field(default=None, alias="inRange")
    unrevealed: int


class CheckWalletResponse(BaseModel):
    """Response model for a wallet check."""

    status: str = "success"
    unrevealed: list[UnrevealedResponse] = Field(default_factory=list)
    totals: Totals


@router.post(
    "/check-wallet",
    response_model=CheckWalletResponse,
    response_model_exclude_none=True,
)
async def check_wallet(
    request: CheckWalletRequest,
    classifier: Annotated[HoldingsClassifier, Depends(get_classifier)],
) -> CheckWalletResponse:
    """
    Find the unrevealed Light Waves held by a wallet.

    A Light Wave is unrevealed while its satoshi carries a single
    inscription. Returns 400 without an address, 502 if the indexer fails.
    """
    address = (request.address or "").strip()
    if not address:
        raise InvalidRequestError("Wallet address required")

    window = None
    if request.start_index is not None or request.end_index is not None:
        window = IndexWindow(start=request.start_index or 0, stop=request.end_index)

    logger.info("Checking Light Waves for address: %s", address)
    try:
        result = await classifier.classify(address, window)
    except UpstreamError as e:
        logger.error("Error checking wallet %s: %s", address, e.detail or e.message)
        raise RequestFailedError("Failed to check wallet", e) from e

    by_range = isinstance(classifier.membership, RangeMembership)
    return CheckWalletResponse(
        unrevealed=[UnrevealedResponse.from_item(item) for item in result.unrevealed],
        totals=Totals(
            owned=result.owned,
            in_range=result.in_collection if by_range else None,
            unrevealed=result.unrevealed_count,
        ),
    )

"""Recommended fee rates from mempool.space."""

import time
from collections.abc import Callable
from typing import Any

import httpx

from lightwaves.models.failure import FailureKind, FeeSourceError
from lightwaves.models.fees import FeeSnapshot

MEMPOOL_FEES_URL = "https://mempool.space/api/v1/fees/recommended"

# mempool.space field -> tier
TIER_FIELDS = {
    "low": "economyFee",
    "medium": "hourFee",
    "high": "fastestFee",
}


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def parse_fee_tiers(data: Any, timestamp: int) -> FeeSnapshot:
    """
    Build a snapshot from a recommended-fees payload.

    Every tier must be a positive number; anything else is rejected rather
    than defaulted.

    Raises:
        FeeSourceError: If the payload is not the expected shape
    """
    if not isinstance(data, dict):
        raise FeeSourceError(
            "Invalid fee data from mempool.space",
            detail=f"expected object, got {type(data).__name__}",
            kind=FailureKind.INVALID_UPSTREAM_DATA,
        )

    rates: dict[str, int | float] = {}
    for tier, field_name in TIER_FIELDS.items():
        value = data.get(field_name)
        if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
            raise FeeSourceError(
                "Invalid fee data from mempool.space",
                detail=f"{field_name}={value!r}",
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            )
        rates[tier] = value

    return FeeSnapshot(timestamp=timestamp, **rates)


class FeeSourceClient:
    """Fetches the three recommended fee tiers."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str = MEMPOOL_FEES_URL,
        wall_clock_ms: Callable[[], int] = _wall_clock_ms,
    ) -> None:
        self.http = http
        self.url = url
        self.wall_clock_ms = wall_clock_ms

    async def fetch(self) -> FeeSnapshot:
        """
        Fetch current fee tiers.

        Raises:
            FeeSourceError: If the request fails or returns unusable data
        """
        try:
            response = await self.http.get(self.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FeeSourceError("Fee source request failed", detail=str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise FeeSourceError(
                "Invalid fee data from mempool.space",
                detail=str(e),
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            ) from e

        return parse_fee_tiers(data, timestamp=self.wall_clock_ms())

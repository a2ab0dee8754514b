"""
Inscription service client.

Creates reinscription orders and looks up order status on OrdinalsBot.
The service builds, funds and broadcasts the transactions; this client only
relays the order and the payment charge it returns.
"""

from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

import httpx

from lightwaves.models.failure import FailureKind, RevealServiceError

ORDINALSBOT_API_BASE = "https://api.ordinalsbot.com"

# Reveals are performed by writing an empty child inscription onto the sat
BLANK_CHILD_INSCRIPTION = {"contentType": "text/plain", "content": ""}


def _error_detail(response: httpx.Response) -> str:
    """Best-effort diagnostic from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return str(body)[:200]


class RevealServiceClient:
    """Client for the reinscription order API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str = ORDINALSBOT_API_BASE,
    ) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    async def _send(self, method: str, path: str, json: Any = None) -> dict[str, Any]:
        try:
            response = await self.http.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers={"x-api-key": self.api_key},
            )
        except httpx.HTTPError as e:
            raise RevealServiceError(
                f"Reveal service request failed: {path}", detail=str(e)
            ) from e

        if response.is_error:
            raise RevealServiceError(
                f"Reveal service returned HTTP {response.status_code}",
                detail=_error_detail(response),
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RevealServiceError(
                "Reveal service returned invalid JSON",
                detail=str(e),
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            ) from e

        if not isinstance(data, dict):
            raise RevealServiceError(
                "Reveal service returned unexpected payload",
                detail=f"expected object, got {type(data).__name__}",
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            )
        return data

    async def create_reinscription(
        self,
        inscription_ids: Sequence[str],
        fee_rate: int | float,
        receive_address: str,
    ) -> dict[str, Any]:
        """
        Submit a reinscription order that writes a blank child onto each sat.

        Args:
            inscription_ids: Inscriptions whose satoshis get the new inscription
            fee_rate: Fee rate in sat/vB
            receive_address: Where the reinscribed sats are delivered

        Returns:
            Raw order object (id, charge, ...)

        Raises:
            RevealServiceError: If the order could not be created
        """
        order = {
            "inscriptionIds": list(inscription_ids),
            "fee": fee_rate,
            "receiveAddress": receive_address,
            "reinscribe": True,
            "childInscription": dict(BLANK_CHILD_INSCRIPTION),
        }
        return await self._send("POST", "/reinscribe", json=order)

    async def get_order(self, order_id: str) -> dict[str, Any]:
        """
        Fetch an order by id. The order object is returned untouched.

        Raises:
            RevealServiceError: If the lookup fails
        """
        return await self._send("GET", f"/order/{quote(order_id, safe='')}")

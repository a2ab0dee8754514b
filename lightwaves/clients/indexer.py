"""
Ordinals indexer client.

Talks to the Hiro Ordinals API for inscription listings, inscription detail
and per-satoshi inscription counts.
"""

from collections.abc import Sequence
from typing import Any

import httpx

from lightwaves.models.failure import FailureKind, IndexerError
from lightwaves.models.inscription import Inscription, InscriptionPage, canonical_sat

HIRO_API_BASE = "https://api.hiro.so"

# Largest page the indexer serves
MAX_PAGE_SIZE = 60


class IndexerClient:
    """
    Client for the ordinals indexer.

    All failures (transport errors, non-2xx responses, undecodable bodies)
    surface as IndexerError. A 404 on inscription detail is not a failure:
    the inscription simply does not exist.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str = HIRO_API_BASE,
        api_key: str | None = None,
    ) -> None:
        """
        Initialize the indexer client.

        Args:
            http: Shared async HTTP client
            base_url: Indexer API base URL
            api_key: Optional API key; requests are unauthenticated without it
        """
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.headers = {"x-api-key": api_key} if api_key else {}

    async def _request(self, path: str, params: Any = None) -> httpx.Response:
        try:
            return await self.http.get(
                f"{self.base_url}{path}", params=params, headers=self.headers
            )
        except httpx.HTTPError as e:
            raise IndexerError(f"Indexer request failed: {path}", detail=str(e)) from e

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise IndexerError(
                f"Indexer returned HTTP {response.status_code}",
                detail=response.text[:200] or str(e),
                upstream_status=response.status_code,
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise IndexerError(
                "Indexer returned invalid JSON",
                detail=str(e),
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            ) from e

        if not isinstance(data, dict):
            raise IndexerError(
                "Indexer returned unexpected payload",
                detail=f"expected object, got {type(data).__name__}",
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            )
        return data

    async def _get(self, path: str, params: Any = None) -> dict[str, Any]:
        return self._decode(await self._request(path, params))

    @staticmethod
    def _parse_page(data: dict[str, Any]) -> InscriptionPage:
        results = data.get("results")
        total = data.get("total")
        if not isinstance(results, list) or not isinstance(total, int) or isinstance(total, bool):
            raise IndexerError(
                "Indexer returned malformed inscription listing",
                detail="missing 'results' or 'total'",
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            )
        try:
            inscriptions = [Inscription.from_api(item) for item in results]
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise IndexerError(
                "Indexer returned malformed inscription",
                detail=str(e),
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            ) from e
        return InscriptionPage(total=total, results=inscriptions)

    async def list_inscriptions_by_address(
        self,
        address: str,
        offset: int = 0,
        limit: int = MAX_PAGE_SIZE,
    ) -> InscriptionPage:
        """
        Fetch one page of inscriptions currently owned by an address.

        Raises:
            IndexerError: If the request fails
        """
        data = await self._get(
            "/ordinals/v1/inscriptions",
            params={"address": address, "offset": offset, "limit": limit},
        )
        return self._parse_page(data)

    async def list_inscriptions_by_ids(self, inscription_ids: Sequence[str]) -> InscriptionPage:
        """
        Fetch the inscriptions matching an explicit id set.

        Ids that do not exist are simply absent from the result.

        Raises:
            ValueError: If more ids are requested than fit in one page
            IndexerError: If the request fails
        """
        if not inscription_ids:
            return InscriptionPage(total=0, results=[])
        if len(inscription_ids) > MAX_PAGE_SIZE:
            raise ValueError(f"At most {MAX_PAGE_SIZE} ids per request")

        params: list[tuple[str, str | int]] = [("id", i) for i in inscription_ids]
        params.append(("limit", len(inscription_ids)))
        data = await self._get("/ordinals/v1/inscriptions", params=params)
        return self._parse_page(data)

    async def get_inscription(self, inscription_id: str) -> Inscription | None:
        """
        Fetch inscription detail, including its satoshi ordinal.

        Returns:
            The inscription, or None if the indexer does not know it

        Raises:
            IndexerError: If the request fails
        """
        response = await self._request(f"/ordinals/v1/inscriptions/{inscription_id}")
        if response.status_code == 404:
            return None

        data = self._decode(response)
        try:
            return Inscription.from_api(data)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise IndexerError(
                "Indexer returned malformed inscription",
                detail=str(e),
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            ) from e

    async def get_sat_inscription_count(self, sat: str) -> int:
        """
        Total number of inscriptions ever written to a satoshi.

        Raises:
            ValueError: If ``sat`` is not a valid ordinal
            IndexerError: If the request fails
        """
        ordinal = canonical_sat(sat)
        if ordinal is None:
            raise ValueError(f"Invalid satoshi ordinal: {sat!r}")

        data = await self._get(
            f"/ordinals/v1/sats/{ordinal}/inscriptions",
            params={"limit": 1},
        )
        total = data.get("total")
        if not isinstance(total, int) or isinstance(total, bool) or total < 0:
            raise IndexerError(
                "Indexer returned malformed inscription count",
                detail=f"sat {ordinal}: total={total!r}",
                kind=FailureKind.INVALID_UPSTREAM_DATA,
            )
        return total

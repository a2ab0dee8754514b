import os
from collections import defaultdict
from collections.abc import Sequence
from typing import Any

import pytest

from lightwaves.models.failure import IndexerError
from lightwaves.models.inscription import Inscription, InscriptionPage

BASE_ID = "dd34a6612e0c03dada94ecf3feaca979659585ab0c9cf2e301e7303659712d4e"
OTHER_BASE_ID = "ab" * 32
WALLET = "bc1pwalletaddress0000000000000000000000000000000000000000000"

# lightwaves.main builds the app at import time and requires configuration
os.environ.setdefault("ORDINAL_BOT_API_KEY", "test-key")
os.environ.setdefault("COLLECTION_BASE_ID", BASE_ID)
os.environ.setdefault("COLLECTION_MAX_INDEX", "3332")


class FakeIndexer:
    """
    In-memory indexer with call recording and injectable failures.

    owned: what list_inscriptions_by_address pages through
    known: detail records by id (also served by list_inscriptions_by_ids)
    counts: inscription count per canonical sat
    """

    def __init__(
        self,
        owned: Sequence[Inscription] = (),
        known: Sequence[Inscription] = (),
        counts: dict[str, int] | None = None,
        failing_details: Sequence[str] = (),
        failing_counts: Sequence[str] = (),
        failing_id_batches: Sequence[str] = (),
        fail_listing: bool = False,
    ) -> None:
        self.owned = list(owned)
        self.known = {i.id: i for i in known}
        self.counts = counts or {}
        self.failing_details = set(failing_details)
        self.failing_counts = set(failing_counts)
        self.failing_id_batches = set(failing_id_batches)
        self.fail_listing = fail_listing
        self.calls: dict[str, list[Any]] = defaultdict(list)

    async def list_inscriptions_by_address(
        self, address: str, offset: int = 0, limit: int = 60
    ) -> InscriptionPage:
        self.calls["list"].append((address, offset, limit))
        if self.fail_listing:
            raise IndexerError("Indexer returned HTTP 503", detail="unavailable")
        return InscriptionPage(total=len(self.owned), results=self.owned[offset : offset + limit])

    async def list_inscriptions_by_ids(self, ids: Sequence[str]) -> InscriptionPage:
        self.calls["ids"].append(list(ids))
        if self.failing_id_batches.intersection(ids):
            raise IndexerError("Indexer returned HTTP 500", detail="batch failed")
        results = [self.known[i] for i in ids if i in self.known]
        return InscriptionPage(total=len(results), results=results)

    async def get_inscription(self, inscription_id: str) -> Inscription | None:
        self.calls["detail"].append(inscription_id)
        if inscription_id in self.failing_details:
            raise IndexerError("Indexer request failed", detail=f"timeout {inscription_id}")
        return self.known.get(inscription_id)

    async def get_sat_inscription_count(self, sat: str) -> int:
        self.calls["count"].append(sat)
        if sat in self.failing_counts:
            raise IndexerError("Indexer request failed", detail=f"timeout sat {sat}")
        return self.counts.get(sat, 0)


@pytest.fixture
def indexer_factory():
    """Build a FakeIndexer."""
    return FakeIndexer


def member_id(index: int, base_id: str = BASE_ID) -> str:
    return f"{base_id}i{index}"


@pytest.fixture
def make_member():
    """Build a collection inscription owned by the test wallet."""

    def _make(index: int, sat: str | None = None, address: str = WALLET) -> Inscription:
        return Inscription(id=member_id(index), address=address, sat=sat)

    return _make


@pytest.fixture
def base_id() -> str:
    return BASE_ID


@pytest.fixture
def other_base_id() -> str:
    return OTHER_BASE_ID


@pytest.fixture
def wallet() -> str:
    return WALLET

"""
Owned-inscription discovery.

Three ways to find the inscriptions a wallet holds:

- PullThenFilter: page through everything the address owns. Membership is
  applied afterwards by the classifier. A failed page fails the request:
  without the full listing there is no correct answer.
- PushThenVerify: ask the indexer for the collection's ids in batches and
  keep those owned by the address. A failed batch is logged and contributes
  nothing.
- FullEnumeration: fetch every collection id one by one (bounded) in small
  batches and keep those owned by the address. A failed batch is logged and
  contributes nothing.

Output order is discovery order.
"""

import asyncio
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from lightwaves.clients.indexer import MAX_PAGE_SIZE, IndexerClient
from lightwaves.config import Settings
from lightwaves.models.failure import ConfigurationError, IndexerError, InvalidRequestError
from lightwaves.models.inscription import Inscription
from lightwaves.services.concurrency import DEFAULT_CONCURRENCY, gather_bounded
from lightwaves.services.membership import CollectionMembership, PatternMembership

logger = logging.getLogger(__name__)

DEFAULT_ID_BATCH_SIZE = 50
DEFAULT_ENUMERATION_BATCH_SIZE = 10
DEFAULT_BATCH_DELAY_SECONDS = 0.1


@dataclass(frozen=True)
class IndexWindow:
    """Half-open collection index window [start, stop)."""

    start: int = 0
    stop: int | None = None

    def __post_init__(self) -> None:
        if self.start < 0:
            raise InvalidRequestError("startIndex must be non-negative")
        if self.stop is not None and self.stop < self.start:
            raise InvalidRequestError("endIndex must not be less than startIndex")


def _chunks(ids: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for offset in range(0, len(ids), size):
        yield ids[offset : offset + size]


class DiscoveryStrategy:
    """Finds the inscriptions an address holds."""

    name: str

    async def discover(self, address: str, window: IndexWindow | None = None) -> list[Inscription]:
        """
        Inscriptions held by ``address``.

        Args:
            address: Wallet address
            window: Optional collection index window; ignored by strategies
                that do not enumerate the collection

        Raises:
            IndexerError: If discovery cannot produce a trustworthy answer
        """
        raise NotImplementedError


class PullThenFilter(DiscoveryStrategy):
    """Page through every inscription the address owns."""

    name = "pull"

    def __init__(self, indexer: IndexerClient, page_size: int = MAX_PAGE_SIZE) -> None:
        self.indexer = indexer
        self.page_size = page_size

    async def discover(self, address: str, window: IndexWindow | None = None) -> list[Inscription]:
        owned: list[Inscription] = []
        offset = 0
        total: int | None = None

        # Sequential: the total is only known after the first page
        while total is None or offset < total:
            page = await self.indexer.list_inscriptions_by_address(
                address, offset=offset, limit=self.page_size
            )
            total = page.total
            if not page.results:
                if offset < total:
                    logger.warning(
                        "Listing for %s ended early at %d of %d inscriptions",
                        address,
                        offset,
                        total,
                    )
                break
            owned.extend(page.results)
            offset += len(page.results)

        logger.info("Address %s holds %d inscriptions", address, len(owned))
        return owned


class _EnumeratingStrategy(DiscoveryStrategy):
    """Shared batching for strategies that walk the collection's id space."""

    def __init__(
        self,
        indexer: IndexerClient,
        membership: PatternMembership,
        batch_size: int,
        batch_delay: float = DEFAULT_BATCH_DELAY_SECONDS,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.indexer = indexer
        self.membership = membership
        self.batch_size = batch_size
        self.batch_delay = batch_delay

    async def _fetch_batch(self, ids: Sequence[str]) -> list[Inscription]:
        """Inscriptions that exist among ``ids``."""
        raise NotImplementedError

    async def discover(self, address: str, window: IndexWindow | None = None) -> list[Inscription]:
        window = window or IndexWindow()
        ids = list(self.membership.enumerate_ids(window.start, window.stop))
        owned: list[Inscription] = []
        failed_batches = 0

        for batch_number, batch in enumerate(_chunks(ids, self.batch_size)):
            if batch_number and self.batch_delay:
                await asyncio.sleep(self.batch_delay)
            try:
                found = await self._fetch_batch(batch)
            except IndexerError as e:
                failed_batches += 1
                logger.warning(
                    "Discovery batch %s..%s failed, skipping: %s",
                    batch[0],
                    batch[-1],
                    e.detail or e.message,
                )
                continue
            owned.extend(i for i in found if i.owned_by(address))

        logger.info(
            "%s discovery for %s: checked %d ids, %d owned, %d failed batches",
            self.name,
            address,
            len(ids),
            len(owned),
            failed_batches,
        )
        return owned


class PushThenVerify(_EnumeratingStrategy):
    """Query the collection's ids in batches and keep the address's."""

    name = "push"

    def __init__(
        self,
        indexer: IndexerClient,
        membership: PatternMembership,
        batch_size: int = DEFAULT_ID_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY_SECONDS,
    ) -> None:
        if batch_size > MAX_PAGE_SIZE:
            raise ValueError(f"batch_size must not exceed {MAX_PAGE_SIZE}")
        super().__init__(indexer, membership, batch_size, batch_delay)

    async def _fetch_batch(self, ids: Sequence[str]) -> list[Inscription]:
        page = await self.indexer.list_inscriptions_by_ids(ids)
        return page.results


class FullEnumeration(_EnumeratingStrategy):
    """Fetch every collection id individually and keep the address's."""

    name = "enumerate"

    def __init__(
        self,
        indexer: IndexerClient,
        membership: PatternMembership,
        batch_size: int = DEFAULT_ENUMERATION_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY_SECONDS,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        super().__init__(indexer, membership, batch_size, batch_delay)
        self.concurrency = concurrency

    async def _fetch_batch(self, ids: Sequence[str]) -> list[Inscription]:
        details = await gather_bounded(ids, self.indexer.get_inscription, self.concurrency)
        return [d for d in details if d is not None]


def discovery_from_settings(
    settings: Settings,
    indexer: IndexerClient,
    membership: CollectionMembership,
) -> DiscoveryStrategy:
    """Build the configured discovery strategy."""
    if settings.discovery_strategy == "pull":
        return PullThenFilter(indexer)

    if not isinstance(membership, PatternMembership):
        raise ConfigurationError(
            f"{settings.discovery_strategy} discovery requires a pattern collection"
        )

    if settings.discovery_strategy == "push":
        return PushThenVerify(
            indexer,
            membership,
            batch_size=settings.discovery_batch_size,
            batch_delay=settings.batch_delay_seconds,
        )
    return FullEnumeration(
        indexer,
        membership,
        batch_size=settings.enumeration_batch_size,
        batch_delay=settings.batch_delay_seconds,
        concurrency=settings.fetch_concurrency,
    )

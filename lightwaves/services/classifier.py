"""
Holdings classifier.

Determines which collection members a wallet holds and which of them are
still unrevealed.

A member is UNREVEALED iff its satoshi carries exactly one inscription.
A second inscription on the same sat is a reveal. A failed count lookup is
treated as "not unrevealed": under-reporting is preferred to offering a
reveal for a sat whose state is unknown.

Steps:
1. Discover the inscriptions the wallet holds
2. Filter to collection members (resolving sats first for range collections)
3. Resolve missing sats with bounded concurrency
4. Look up the inscription count of each distinct sat with bounded concurrency
5. Keep members whose sat count is exactly 1

Sats are compared and deduplicated by canonical decimal string, never as
floats.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from lightwaves.clients.indexer import IndexerClient
from lightwaves.models.classification import ClassificationResult, UnrevealedItem
from lightwaves.models.failure import IndexerError, ItemFailurePolicy
from lightwaves.models.inscription import Candidate, Inscription, canonical_sat
from lightwaves.services.concurrency import DEFAULT_CONCURRENCY, gather_bounded
from lightwaves.services.discovery import DiscoveryStrategy, IndexWindow
from lightwaves.services.membership import CollectionMembership, PatternMembership

logger = logging.getLogger(__name__)

DEFAULT_LABEL_PREFIX = "Light Wave"


class HoldingsClassifier:
    """Partitions a wallet's collection members into revealed and unrevealed."""

    def __init__(
        self,
        indexer: IndexerClient,
        membership: CollectionMembership,
        discovery: DiscoveryStrategy,
        concurrency: int = DEFAULT_CONCURRENCY,
        detail_policy: ItemFailurePolicy = ItemFailurePolicy.SKIP,
        count_policy: ItemFailurePolicy = ItemFailurePolicy.SKIP,
        label_prefix: str = DEFAULT_LABEL_PREFIX,
    ) -> None:
        """
        Args:
            indexer: Indexer client for detail and sat-count lookups
            membership: Collection membership rule
            discovery: Strategy that finds the wallet's inscriptions
            concurrency: Worker pool size for detail and count lookups
            detail_policy: ABORT fails the request when a detail lookup fails;
                SKIP drops that inscription
            count_policy: ABORT fails the request when a count lookup fails;
                SKIP treats that sat's count as 0
            label_prefix: Display name used in item labels
        """
        self.indexer = indexer
        self.membership = membership
        self.discovery = discovery
        self.concurrency = concurrency
        self.detail_policy = detail_policy
        self.count_policy = count_policy
        self.label_prefix = label_prefix

    async def classify(
        self, address: str, window: IndexWindow | None = None
    ) -> ClassificationResult:
        """
        Classify the collection members held by an address.

        Raises:
            IndexerError: If discovery fails, or a lookup fails under ABORT
        """
        held = _unique_by_id(await self.discovery.discover(address, window))

        if self.membership.keyed_by_sat:
            pairs = list(zip(held, await self.resolve_sats(held), strict=True))
        else:
            in_collection = [i for i in held if self.membership.contains(i)]
            pairs = list(zip(in_collection, await self.resolve_sats(in_collection), strict=True))

        owned = 0
        candidates: list[Candidate] = []
        for inscription, sat in pairs:
            index = self.membership.index_of(inscription, sat)
            if index is None:
                continue
            owned += 1
            if sat is not None:
                candidates.append(Candidate(inscription=inscription, sat=sat, index=index))

        if not candidates:
            logger.info("Address %s holds no resolvable collection members", address)
            return ClassificationResult(owned=owned)

        counts = await self.count_inscriptions(distinct_sats(c.sat for c in candidates))
        unrevealed = [self._to_item(c) for c in candidates if counts.get(c.sat, 0) == 1]

        logger.info(
            "Address %s: %d members, %d resolved, %d unrevealed",
            address,
            owned,
            len(candidates),
            len(unrevealed),
        )
        return ClassificationResult(
            unrevealed=unrevealed,
            owned=owned,
            in_collection=len(candidates),
        )

    async def resolve_sats(self, inscriptions: Sequence[Inscription]) -> list[str | None]:
        """
        Satoshi of each inscription, in input order.

        Inscriptions that already carry a sat are not looked up again.
        Unresolvable entries are None under SKIP.
        """

        async def resolve(inscription: Inscription) -> str | None:
            known = canonical_sat(inscription.sat)
            if known is not None:
                return known
            try:
                detail = await self.indexer.get_inscription(inscription.id)
            except IndexerError as e:
                if self.detail_policy is ItemFailurePolicy.ABORT:
                    raise
                logger.warning("Skipping %s, detail lookup failed: %s", inscription.id, e.detail)
                return None

            sat = canonical_sat(detail.sat) if detail is not None else None
            if sat is None:
                if self.detail_policy is ItemFailurePolicy.ABORT:
                    raise IndexerError(
                        "Could not resolve satoshi",
                        detail=f"no satoshi for inscription {inscription.id}",
                    )
                logger.warning("Skipping %s, satoshi not found", inscription.id)
            return sat

        return await gather_bounded(inscriptions, resolve, self.concurrency)

    async def count_inscriptions(self, sats: Sequence[str]) -> dict[str, int]:
        """
        Inscription count per sat. Failed lookups count as 0 under SKIP.
        """

        async def count(sat: str) -> int:
            try:
                return await self.indexer.get_sat_inscription_count(sat)
            except IndexerError as e:
                if self.count_policy is ItemFailurePolicy.ABORT:
                    raise
                logger.warning("Count lookup for sat %s failed, treating as 0: %s", sat, e.detail)
                return 0

        results = await gather_bounded(sats, count, self.concurrency)
        return dict(zip(sats, results, strict=True))

    def _to_item(self, candidate: Candidate) -> UnrevealedItem:
        is_pattern = isinstance(self.membership, PatternMembership)
        return UnrevealedItem(
            id=candidate.id,
            sat=candidate.sat,
            label=f"{self.label_prefix} #{candidate.index + 1}",
            index=candidate.index if is_pattern else None,
        )


def _unique_by_id(inscriptions: Iterable[Inscription]) -> list[Inscription]:
    seen: set[str] = set()
    unique: list[Inscription] = []
    for inscription in inscriptions:
        if inscription.id not in seen:
            seen.add(inscription.id)
            unique.append(inscription)
    return unique


def distinct_sats(sats: Iterable[Any]) -> list[str]:
    """Unique canonical sat strings, first occurrence order kept."""
    seen: dict[str, None] = {}
    for sat in sats:
        key = canonical_sat(sat)
        if key is not None:
            seen.setdefault(key, None)
    return list(seen)

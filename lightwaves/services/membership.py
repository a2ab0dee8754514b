"""
Collection membership rules.

A collection is either a contiguous satoshi range or a base inscription id
plus an index bound. Both rules are pure functions of their configuration.

Range:    member(sat) iff start <= sat <= start + supply - 1
Pattern:  member(id)  iff id == f"{base_id}i{n}" with 0 <= n <= max_index
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

from lightwaves.config import Settings
from lightwaves.models.failure import ConfigurationError
from lightwaves.models.inscription import Inscription, parse_sat

INSCRIPTION_ID_PATTERN = re.compile(r"([a-f0-9]{64})i([0-9]+)")


class CollectionMembership:
    """Decides whether an inscription belongs to the configured collection."""

    # True when membership is decided by satoshi, so sats must be
    # resolved before filtering
    keyed_by_sat: bool = False

    def index_of(self, inscription: Inscription, sat: str | None = None) -> int | None:
        """
        Collection index of an inscription, or None if it is not a member.

        Args:
            inscription: The inscription to test
            sat: Resolved satoshi ordinal, overriding ``inscription.sat``
        """
        raise NotImplementedError

    def contains(self, inscription: Inscription, sat: str | None = None) -> bool:
        return self.index_of(inscription, sat) is not None

    def describe(self) -> dict[str, object]:
        """Summary for the service directory."""
        raise NotImplementedError


@dataclass(frozen=True)
class RangeMembership(CollectionMembership):
    """Collection defined by a contiguous satoshi range."""

    start: int
    supply: int

    keyed_by_sat = True

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("start must be non-negative")
        if self.supply < 1:
            raise ValueError("supply must be at least 1")

    @property
    def end(self) -> int:
        """Last member satoshi (inclusive)."""
        return self.start + self.supply - 1

    def contains_sat(self, sat: object) -> bool:
        value = parse_sat(sat)
        return value is not None and self.start <= value <= self.end

    def index_of(self, inscription: Inscription, sat: str | None = None) -> int | None:
        value = parse_sat(sat if sat is not None else inscription.sat)
        if value is None or not self.start <= value <= self.end:
            return None
        return value - self.start

    def describe(self) -> dict[str, object]:
        return {"strategy": "range", "startSat": str(self.start), "endSat": str(self.end)}


@dataclass(frozen=True)
class PatternMembership(CollectionMembership):
    """Collection defined by a base inscription id and an index bound."""

    base_id: str
    max_index: int

    def __post_init__(self) -> None:
        if not re.fullmatch(r"[a-f0-9]{64}", self.base_id):
            raise ValueError("base_id must be 64 lowercase hex characters")
        if self.max_index < 0:
            raise ValueError("max_index must be non-negative")

    def parse_index(self, inscription_id: str) -> int | None:
        """Collection index encoded in an inscription id, or None."""
        match = INSCRIPTION_ID_PATTERN.fullmatch(inscription_id)
        if match is None or match.group(1) != self.base_id:
            return None
        index = int(match.group(2))
        return index if index <= self.max_index else None

    def index_of(self, inscription: Inscription, sat: str | None = None) -> int | None:
        return self.parse_index(inscription.id)

    def inscription_id(self, index: int) -> str:
        return f"{self.base_id}i{index}"

    def enumerate_ids(self, start: int = 0, stop: int | None = None) -> Iterator[str]:
        """
        Every member id with index in [start, stop), clamped to the collection.
        """
        upper = self.max_index + 1 if stop is None else min(stop, self.max_index + 1)
        for index in range(max(start, 0), upper):
            yield self.inscription_id(index)

    def describe(self) -> dict[str, object]:
        return {"strategy": "pattern", "baseId": self.base_id, "maxIndex": self.max_index}


def membership_from_settings(settings: Settings) -> CollectionMembership:
    """Build the membership rule for the configured collection identity."""
    if settings.collection_start_sat is not None and settings.collection_supply is not None:
        return RangeMembership(
            start=settings.collection_start_sat,
            supply=settings.collection_supply,
        )
    if settings.collection_base_id is not None and settings.collection_max_index is not None:
        return PatternMembership(
            base_id=settings.collection_base_id,
            max_index=settings.collection_max_index,
        )
    raise ConfigurationError("Collection identity is not configured")

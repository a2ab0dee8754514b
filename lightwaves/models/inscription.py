import re
from dataclasses import dataclass
from typing import Any

# Satoshi ordinals exceed the 53-bit float-safe range, so they are carried
# as canonical decimal strings and only parsed to int for comparisons.
_SAT_PATTERN = re.compile(r"[0-9]+")


def parse_sat(value: Any) -> int | None:
    """
    Parse a satoshi ordinal to an int.

    Accepts non-negative ints and digit-only strings (surrounding whitespace
    allowed). Returns None for anything else, including bools, floats,
    negative values and strings with signs or garbage.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        text = value.strip()
        if _SAT_PATTERN.fullmatch(text):
            try:
                return int(text)
            except ValueError:
                # Past the interpreter's integer string conversion limit
                return None
    return None


def canonical_sat(value: Any) -> str | None:
    """Canonical string form of a satoshi ordinal ("007" -> "7"), or None."""
    sat = parse_sat(value)
    return None if sat is None else str(sat)


@dataclass(frozen=True)
class Inscription:
    """
    An inscription as reported by the indexer.

    ``sat`` is the canonical sat string, or None when the listing did not
    include it and a detail lookup is still needed.
    """

    id: str
    address: str | None = None
    genesis_address: str | None = None
    sat: str | None = None

    def owned_by(self, address: str) -> bool:
        """True if the address is the current or genesis owner."""
        return address in (self.address, self.genesis_address)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Inscription":
        """Build from an indexer inscription object."""
        return cls(
            id=str(data["id"]),
            address=data.get("address") or None,
            genesis_address=data.get("genesis_address") or None,
            sat=canonical_sat(data.get("sat_ordinal")),
        )


@dataclass(frozen=True)
class InscriptionPage:
    """One page of an inscription listing."""

    total: int
    results: list[Inscription]


@dataclass(frozen=True)
class Candidate:
    """An owned collection member with its satoshi resolved."""

    inscription: Inscription
    sat: str
    index: int

    @property
    def id(self) -> str:
        return self.inscription.id

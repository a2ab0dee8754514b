from dataclasses import dataclass, field


@dataclass(frozen=True)
class UnrevealedItem:
    """An owned collection member whose satoshi carries a single inscription."""

    id: str
    sat: str
    label: str
    index: int | None = None


@dataclass
class ClassificationResult:
    """
    Outcome of classifying one wallet.

    ``owned`` counts collection members found in the wallet,
    ``in_collection`` those whose satoshi could be resolved.
    """

    unrevealed: list[UnrevealedItem] = field(default_factory=list)
    owned: int = 0
    in_collection: int = 0

    @property
    def unrevealed_count(self) -> int:
        return len(self.unrevealed)

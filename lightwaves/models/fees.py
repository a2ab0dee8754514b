from dataclasses import asdict, dataclass
from typing import Any

FEE_LEVELS = ("low", "medium", "high")
DEFAULT_FEE_LEVEL = "medium"


@dataclass(frozen=True)
class FeeSnapshot:
    """
    Recommended fee rates (sat/vB) captured at one moment.

    Immutable so a cached snapshot can be shared between concurrent
    requests without copying.
    """

    low: int | float
    medium: int | float
    high: int | float
    timestamp: int  # milliseconds since epoch

    def rate_for(self, level: str) -> int | float:
        """Fee rate for a named tier. Raises KeyError for unknown tiers."""
        if level not in FEE_LEVELS:
            raise KeyError(level)
        rate: int | float = getattr(self, level)
        return rate

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

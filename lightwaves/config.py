import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lightwaves.models.failure import ConfigurationError, ItemFailurePolicy

BASE_ID_PATTERN = re.compile(r"[a-f0-9]{64}")

DiscoveryStrategyName = Literal["pull", "push", "enumerate"]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Light Waves Reveal API"
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 3000

    cors_origins: list[str] = [
        "https://kanetix.github.io",
        "https://kanetix.io",
        "https://www.kanetix.io",
    ]

    # Reveal service (required)
    ordinal_bot_api_key: str = Field(min_length=1)
    reveal_service_url: str = "https://api.ordinalsbot.com"

    # Indexer (key optional, requests go unauthenticated without it)
    hiro_api_key: str | None = None
    indexer_url: str = "https://api.hiro.so"

    fee_source_url: str = "https://mempool.space/api/v1/fees/recommended"
    fee_cache_ttl_seconds: float = 30.0

    http_timeout: float = 30.0

    # =========================================================================
    # COLLECTION IDENTITY
    # Exactly one of: start sat + supply (range), base id + max index (pattern)
    # =========================================================================

    collection_name: str = "Light Wave"
    collection_start_sat: int | None = Field(default=None, ge=0)
    collection_supply: int | None = Field(default=None, ge=1)
    collection_base_id: str | None = None
    collection_max_index: int | None = Field(default=None, ge=0)

    # =========================================================================
    # CLASSIFIER TUNING
    # =========================================================================

    discovery_strategy: DiscoveryStrategyName = "pull"
    detail_failure_policy: ItemFailurePolicy = ItemFailurePolicy.SKIP
    count_failure_policy: ItemFailurePolicy = ItemFailurePolicy.SKIP
    fetch_concurrency: int = Field(default=12, ge=1)
    discovery_batch_size: int = Field(default=50, ge=1, le=60)
    enumeration_batch_size: int = Field(default=10, ge=1)
    batch_delay_seconds: float = Field(default=0.1, ge=0)

    @model_validator(mode="after")
    def _check_collection(self) -> "Settings":
        has_range = self.collection_start_sat is not None or self.collection_supply is not None
        has_pattern = self.collection_base_id is not None or self.collection_max_index is not None

        if has_range and has_pattern:
            raise ValueError(
                "Configure either COLLECTION_START_SAT/COLLECTION_SUPPLY "
                "or COLLECTION_BASE_ID/COLLECTION_MAX_INDEX, not both"
            )
        if not has_range and not has_pattern:
            raise ValueError("Collection identity is not configured")

        if has_range and (self.collection_start_sat is None or self.collection_supply is None):
            raise ValueError("COLLECTION_START_SAT and COLLECTION_SUPPLY must both be set")

        if has_pattern:
            if self.collection_base_id is None or self.collection_max_index is None:
                raise ValueError("COLLECTION_BASE_ID and COLLECTION_MAX_INDEX must both be set")
            if not BASE_ID_PATTERN.fullmatch(self.collection_base_id):
                raise ValueError("COLLECTION_BASE_ID must be 64 lowercase hex characters")

        if self.discovery_strategy != "pull" and not has_pattern:
            raise ValueError(
                f"DISCOVERY_STRATEGY={self.discovery_strategy} requires "
                "COLLECTION_BASE_ID/COLLECTION_MAX_INDEX"
            )
        return self

    @property
    def uses_range_collection(self) -> bool:
        return self.collection_start_sat is not None


def load_settings() -> Settings:
    """
    Load settings from the environment.

    Raises:
        ConfigurationError: If required settings are missing or inconsistent
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError("Invalid configuration", detail=problems) from e


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()

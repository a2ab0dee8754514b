"""Tests for settings validation and startup fail-fast."""

import httpx
import pytest
from pydantic import ValidationError

from lightwaves.api.dependencies import build_services
from lightwaves.config import Settings, get_settings, load_settings
from lightwaves.main import create_app
from lightwaves.models.failure import ConfigurationError, ItemFailurePolicy
from lightwaves.services.discovery import FullEnumeration, PullThenFilter, PushThenVerify
from lightwaves.services.membership import PatternMembership, RangeMembership

COLLECTION_ENV = (
    "COLLECTION_START_SAT",
    "COLLECTION_SUPPLY",
    "COLLECTION_BASE_ID",
    "COLLECTION_MAX_INDEX",
    "DISCOVERY_STRATEGY",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment with only the reveal service key set."""
    for name in COLLECTION_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ORDINAL_BOT_API_KEY", "test-key")
    return monkeypatch


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings:
    def test_pattern_collection(self, clean_env, base_id: str) -> None:
        settings = make_settings(collection_base_id=base_id, collection_max_index=3332)

        assert not settings.uses_range_collection
        assert settings.discovery_strategy == "pull"
        assert settings.detail_failure_policy is ItemFailurePolicy.SKIP
        assert settings.fetch_concurrency == 12
        assert settings.port == 3000

    def test_range_collection(self, clean_env) -> None:
        settings = make_settings(collection_start_sat=1_952_000_000_000_000, collection_supply=3333)

        assert settings.uses_range_collection

    def test_reads_environment(self, clean_env, base_id: str) -> None:
        clean_env.setenv("COLLECTION_BASE_ID", base_id)
        clean_env.setenv("COLLECTION_MAX_INDEX", "99")
        clean_env.setenv("COUNT_FAILURE_POLICY", "abort")

        settings = make_settings()

        assert settings.collection_max_index == 99
        assert settings.count_failure_policy is ItemFailurePolicy.ABORT

    def test_api_key_required(self, clean_env, base_id: str) -> None:
        clean_env.delenv("ORDINAL_BOT_API_KEY")

        with pytest.raises(ValidationError):
            make_settings(collection_base_id=base_id, collection_max_index=1)

    def test_empty_api_key_rejected(self, clean_env, base_id: str) -> None:
        with pytest.raises(ValidationError):
            make_settings(
                ordinal_bot_api_key="", collection_base_id=base_id, collection_max_index=1
            )

    def test_collection_required(self, clean_env) -> None:
        with pytest.raises(ValidationError, match="Collection identity is not configured"):
            make_settings()

    def test_both_identities_rejected(self, clean_env, base_id: str) -> None:
        with pytest.raises(ValidationError, match="not both"):
            make_settings(
                collection_start_sat=1,
                collection_supply=1,
                collection_base_id=base_id,
                collection_max_index=1,
            )

    def test_half_range_rejected(self, clean_env) -> None:
        with pytest.raises(ValidationError, match="must both be set"):
            make_settings(collection_start_sat=1)

    def test_bad_base_id_rejected(self, clean_env, base_id: str) -> None:
        with pytest.raises(ValidationError, match="64 lowercase hex"):
            make_settings(collection_base_id=base_id.upper(), collection_max_index=1)

    def test_enumerating_discovery_needs_pattern(self, clean_env) -> None:
        with pytest.raises(ValidationError, match="DISCOVERY_STRATEGY=push"):
            make_settings(
                collection_start_sat=1,
                collection_supply=1,
                discovery_strategy="push",
            )

    def test_batch_size_capped(self, clean_env, base_id: str) -> None:
        with pytest.raises(ValidationError):
            make_settings(
                collection_base_id=base_id,
                collection_max_index=1,
                discovery_batch_size=61,
            )


class TestLoadSettings:
    def test_wraps_validation_error(self, clean_env) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

        assert exc_info.value.message == "Invalid configuration"
        assert "Collection identity" in exc_info.value.detail

    def test_create_app_exits_on_bad_config(self, clean_env) -> None:
        clean_env.delenv("ORDINAL_BOT_API_KEY")
        get_settings.cache_clear()
        try:
            with pytest.raises(SystemExit) as exc_info:
                create_app()
        finally:
            get_settings.cache_clear()

        assert exc_info.value.code == 1


class TestBuildServices:
    async def test_pattern_wiring(self, clean_env, base_id: str) -> None:
        settings = make_settings(
            collection_base_id=base_id,
            collection_max_index=9,
            discovery_strategy="enumerate",
            collection_name="Wave",
        )

        async with httpx.AsyncClient() as http:
            services = build_services(settings, http)

        assert isinstance(services.membership, PatternMembership)
        assert isinstance(services.classifier.discovery, FullEnumeration)
        assert services.classifier.label_prefix == "Wave"

    async def test_push_wiring(self, clean_env, base_id: str) -> None:
        settings = make_settings(
            collection_base_id=base_id,
            collection_max_index=9,
            discovery_strategy="push",
            discovery_batch_size=25,
        )

        async with httpx.AsyncClient() as http:
            services = build_services(settings, http)

        assert isinstance(services.classifier.discovery, PushThenVerify)
        assert services.classifier.discovery.batch_size == 25

    async def test_range_wiring(self, clean_env) -> None:
        settings = make_settings(collection_start_sat=500, collection_supply=10)

        async with httpx.AsyncClient() as http:
            services = build_services(settings, http)

        assert services.membership == RangeMembership(start=500, supply=10)
        assert isinstance(services.classifier.discovery, PullThenFilter)

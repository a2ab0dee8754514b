"""
Light Waves services.

Holdings classification and reveal order relay.
"""

from lightwaves.services.classifier import HoldingsClassifier, distinct_sats
from lightwaves.services.concurrency import DEFAULT_CONCURRENCY, gather_bounded
from lightwaves.services.discovery import (
    DiscoveryStrategy,
    FullEnumeration,
    IndexWindow,
    PullThenFilter,
    PushThenVerify,
    discovery_from_settings,
)
from lightwaves.services.fee_rates import DEFAULT_FEE_TTL_SECONDS, FeeRateService, fee_cache
from lightwaves.services.membership import (
    CollectionMembership,
    PatternMembership,
    RangeMembership,
    membership_from_settings,
)
from lightwaves.services.order_relay import OrderRelay, RevealOrder

__all__ = [
    "DEFAULT_CONCURRENCY",
    "DEFAULT_FEE_TTL_SECONDS",
    "CollectionMembership",
    "DiscoveryStrategy",
    "FeeRateService",
    "FullEnumeration",
    "HoldingsClassifier",
    "IndexWindow",
    "OrderRelay",
    "PatternMembership",
    "PullThenFilter",
    "PushThenVerify",
    "RangeMembership",
    "RevealOrder",
    "discovery_from_settings",
    "distinct_sats",
    "fee_cache",
    "gather_bounded",
    "membership_from_settings",
]

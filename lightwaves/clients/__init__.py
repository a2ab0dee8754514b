"""HTTP clients for the upstream services."""

from lightwaves.clients.fees import FeeSourceClient, parse_fee_tiers
from lightwaves.clients.indexer import MAX_PAGE_SIZE, IndexerClient
from lightwaves.clients.reveal import BLANK_CHILD_INSCRIPTION, RevealServiceClient

__all__ = [
    "BLANK_CHILD_INSCRIPTION",
    "MAX_PAGE_SIZE",
    "FeeSourceClient",
    "IndexerClient",
    "RevealServiceClient",
    "parse_fee_tiers",
]

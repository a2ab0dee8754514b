from lightwaves.models.classification import ClassificationResult, UnrevealedItem
from lightwaves.models.failure import (
    ConfigurationError,
    FailureKind,
    FeeSourceError,
    IndexerError,
    InvalidFeeLevelError,
    InvalidRequestError,
    ItemFailurePolicy,
    KnownError,
    RequestFailedError,
    RevealServiceError,
    UpstreamError,
)
from lightwaves.models.fees import DEFAULT_FEE_LEVEL, FEE_LEVELS, FeeSnapshot
from lightwaves.models.inscription import (
    Candidate,
    Inscription,
    InscriptionPage,
    canonical_sat,
    parse_sat,
)

__all__ = [
    "DEFAULT_FEE_LEVEL",
    "FEE_LEVELS",
    "Candidate",
    "ClassificationResult",
    "ConfigurationError",
    "FailureKind",
    "FeeSnapshot",
    "FeeSourceError",
    "IndexerError",
    "Inscription",
    "InscriptionPage",
    "InvalidFeeLevelError",
    "InvalidRequestError",
    "ItemFailurePolicy",
    "KnownError",
    "RequestFailedError",
    "RevealServiceError",
    "UnrevealedItem",
    "UpstreamError",
    "canonical_sat",
    "parse_sat",
]

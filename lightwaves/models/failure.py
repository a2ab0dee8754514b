"""
Failure classification for the reveal API.

Every user-visible failure is a KnownError subclass. The exception handler in
lightwaves.main renders them as a flat JSON object:

    {"error": "<short message>", "details": "<upstream diagnostic>"}

INVARIANT: No stack traces or internal state reach the client.

Upstream failures carry the HTTP status of the endpoint family they belong
to: indexer failures surface as 502, reveal service and fee source
failures as 500.
"""

from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"

    # Resource failures
    NOT_FOUND = "not_found"

    # Service failures
    EXTERNAL_API_ERROR = "external_api_error"
    INVALID_UPSTREAM_DATA = "invalid_upstream_data"

    # Startup
    CONFIGURATION = "configuration"

    # Unknown
    UNKNOWN = "unknown"


class ItemFailurePolicy(str, Enum):
    """
    What a bulk lookup does when a single item fails.

    ABORT propagates the failure and fails the whole request.
    SKIP logs the failure and continues with a placeholder for that item.
    """

    ABORT = "abort"
    SKIP = "skip"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        """Convert to the JSON error body sent to clients."""
        body: dict[str, Any] = {"error": self.message}
        if self.detail:
            body["details"] = self.detail
        return body


class InvalidRequestError(KnownError):
    """A request failed validation before any upstream call was made."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            detail=detail,
            status_code=400,
        )


class InvalidFeeLevelError(KnownError):
    """
    The requested fee tier is not one of low/medium/high.

    Reported as 500 to match the create-reveal contract, which treats
    every non-400 failure of that endpoint uniformly.
    """

    def __init__(self, fee_level: str):
        self.fee_level = fee_level
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Invalid fee level: {fee_level}",
            status_code=500,
        )


class ConfigurationError(KnownError):
    """Required configuration is missing or inconsistent."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.CONFIGURATION,
            message=message,
            detail=detail,
            status_code=500,
        )


class UpstreamError(KnownError):
    """An external service was unreachable or returned unusable data."""

    service = "upstream"
    default_status = 502

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        kind: FailureKind = FailureKind.EXTERNAL_API_ERROR,
        upstream_status: int | None = None,
    ):
        self.upstream_status = upstream_status
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            status_code=self.default_status,
        )


class IndexerError(UpstreamError):
    """Failure talking to the ordinals indexer."""

    service = "indexer"
    default_status = 502


class RevealServiceError(UpstreamError):
    """Failure talking to the inscription (reveal) service."""

    service = "reveal_service"
    default_status = 500


class FeeSourceError(UpstreamError):
    """Failure talking to the fee estimation service."""

    service = "fee_source"
    default_status = 500


class RequestFailedError(KnownError):
    """
    Endpoint-level wrapper for an upstream failure.

    Carries the endpoint's fixed user message; the upstream diagnostic is
    kept in ``detail``.
    """

    def __init__(self, message: str, cause: UpstreamError | KnownError):
        self.cause = cause
        super().__init__(
            kind=cause.kind,
            message=message,
            detail=cause.detail or cause.message,
            status_code=cause.status_code,
        )

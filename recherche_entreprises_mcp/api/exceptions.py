"""ABOUTME: Error taxonomy for the API Recherche d'Entreprises client.

Every failure a search can produce is one of these exceptions. Each carries
the machine-readable error code the MCP layer reports in result metadata.
"""

from typing import Any, Optional

from ..common.error_handling import (
    ERROR_BAD_REQUEST,
    ERROR_NETWORK_ERROR,
    ERROR_RATE_LIMITED,
    ERROR_TIMEOUT,
    ERROR_UPSTREAM,
    ERROR_VALIDATION_FAILED,
)


class RechercheEntreprisesError(Exception):
    """Base class for all business search failures."""

    error_code: str = ERROR_UPSTREAM
    error_type: str = "search_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RechercheEntreprisesError):
    """Caller-supplied parameters violate a documented constraint.

    Raised before any network I/O.
    """

    error_code = ERROR_VALIDATION_FAILED
    error_type = "validation_error"

    def __init__(self, field_name: str, message: str, field_value: Any = None):
        super().__init__(message)
        self.field_name = field_name
        self.field_value = field_value


class RateLimitExceeded(RechercheEntreprisesError):
    """Upstream answered 429 despite local pacing."""

    error_code = ERROR_RATE_LIMITED
    error_type = "rate_limit_error"

    def __init__(
        self,
        message: str = "Rate limit exceeded. The API accepts maximum 7 requests per second.",
        retry_after_seconds: Optional[int] = None
    ):
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class BadRequest(RechercheEntreprisesError):
    """Upstream answered 400 with an explanation of what it rejected."""

    error_code = ERROR_BAD_REQUEST
    error_type = "bad_request_error"

    def __init__(self, upstream_message: str):
        super().__init__(f"Bad request: {upstream_message}")
        self.upstream_message = upstream_message


class TransportError(RechercheEntreprisesError):
    """Any other non-2xx status, or a network-level failure."""

    error_code = ERROR_NETWORK_ERROR
    error_type = "network_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        timed_out: bool = False
    ):
        super().__init__(message)
        self.status_code = status_code
        self.timed_out = timed_out
        if timed_out:
            self.error_code = ERROR_TIMEOUT


class LogicalApiError(RechercheEntreprisesError):
    """A 2xx response whose body is the upstream error envelope."""

    error_code = ERROR_UPSTREAM
    error_type = "upstream_error"

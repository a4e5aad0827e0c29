"""ABOUTME: Shared error handling utilities for the business search MCP tools.

Provides standardized error codes, error result creation functions, and HTTP status
code helpers so every tool reports failures in the same shape.
"""

from typing import Optional, Dict, Any
from mcp.types import TextContent, CallToolResult


# =============================================================================
# Error Code Constants
# =============================================================================

# Input validation errors
ERROR_VALIDATION_FAILED: str = "validation_failed"

# Network and upstream errors
ERROR_TIMEOUT: str = "timeout"
ERROR_NETWORK_ERROR: str = "network_error"
ERROR_BAD_REQUEST: str = "bad_request"
ERROR_UPSTREAM: str = "upstream_error"

# Resource errors
ERROR_RATE_LIMITED: str = "rate_limited"

# General errors
ERROR_UNEXPECTED: str = "unexpected_error"


# =============================================================================
# HTTP Status Code Helpers
# =============================================================================

class HTTPStatusCodes:
    """Helper methods for HTTP status code checks.

    Provides semantic methods to check HTTP status codes instead of
    hardcoding numeric values throughout the codebase.
    """

    @staticmethod
    def is_success(status_code: int) -> bool:
        """Check if status code indicates success (2xx).

        Args:
            status_code: HTTP status code

        Returns:
            True if status code is in range 200-299
        """
        return 200 <= status_code < 300

    @staticmethod
    def is_rate_limit(status_code: int) -> bool:
        """Check if status code indicates rate limiting.

        Args:
            status_code: HTTP status code

        Returns:
            True if status code is 429 (Too Many Requests)

        Example:
            if HTTPStatusCodes.is_rate_limit(response.status_code):
                raise RateLimitExceeded()
        """
        return status_code == 429

    @staticmethod
    def is_bad_request(status_code: int) -> bool:
        """Check if status code indicates the upstream rejected the parameters.

        Args:
            status_code: HTTP status code

        Returns:
            True if status code is 400 (Bad Request)
        """
        return status_code == 400

    @staticmethod
    def is_server_error(status_code: int) -> bool:
        """Check if status code indicates server error (5xx)."""
        return 500 <= status_code < 600


# =============================================================================
# Main Error Creation Function
# =============================================================================

def create_error_result(
    error_message: str,
    error_code: str,
    error_type: str = "error",
    additional_metadata: Optional[Dict[str, Any]] = None
) -> CallToolResult:
    """Create standardized error CallToolResult.

    This is the main error creation function used by the tools.
    Use the convenience wrapper functions below for common error types.

    Args:
        error_message: Human-readable error message for users and LLMs
        error_code: Machine-readable error code (use ERROR_* constants)
        error_type: Error category/type (e.g., "validation_error", "network_error")
        additional_metadata: Additional context for debugging (optional)

    Returns:
        CallToolResult with standardized error format

    Example:
        result = create_error_result(
            error_message="Business search failed: HTTP 503: Service Unavailable",
            error_code=ERROR_NETWORK_ERROR,
            error_type="network_error",
            additional_metadata={"status_code": 503}
        )
    """
    metadata = {
        "error_type": error_type,
        "error_code": error_code,
    }

    if additional_metadata:
        metadata.update(additional_metadata)

    return CallToolResult(
        content=[TextContent(type="text", text=f"Error: {error_message}")],
        isError=True,
        metadata=metadata
    )


# =============================================================================
# Convenience Wrapper Functions
# =============================================================================

def create_validation_error(
    field_name: str,
    error_message: str,
    field_value: Any = None
) -> CallToolResult:
    """Create a validation error for invalid input fields.

    Args:
        field_name: Name of the field that failed validation
        error_message: Human-readable description of the validation failure
        field_value: The invalid value that was provided (optional, for debugging)

    Returns:
        CallToolResult with validation error

    Example:
        return create_validation_error(
            field_name="per_page",
            error_message="per_page parameter cannot exceed 25",
            field_value=50
        )
    """
    metadata = {"field_name": field_name}
    if field_value is not None:
        metadata["field_value"] = field_value

    return create_error_result(
        error_message=error_message,
        error_code=ERROR_VALIDATION_FAILED,
        error_type="validation_error",
        additional_metadata=metadata
    )


def create_rate_limit_error(
    error_message: str = "Rate limit exceeded",
    retry_after_seconds: Optional[int] = None
) -> CallToolResult:
    """Create a rate limit error for throttled requests.

    Args:
        error_message: Base message describing the throttled call
        retry_after_seconds: Seconds to wait before retrying (optional)

    Returns:
        CallToolResult with rate limit error

    Example:
        return create_rate_limit_error(
            "Business search failed: Rate limit exceeded",
            retry_after_seconds=1
        )
    """
    message = error_message

    if retry_after_seconds is not None:
        message += f". Retry after {retry_after_seconds} seconds"

    metadata = {}
    if retry_after_seconds is not None:
        metadata["retry_after_seconds"] = retry_after_seconds

    return create_error_result(
        error_message=message,
        error_code=ERROR_RATE_LIMITED,
        error_type="rate_limit_error",
        additional_metadata=metadata if metadata else None
    )

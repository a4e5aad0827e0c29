"""ABOUTME: Common MCP server utilities and shared infrastructure."""

from .mcp_base import MCPServerBase, setup_logging
from .error_handling import (
    # Error code constants
    ERROR_VALIDATION_FAILED,
    ERROR_TIMEOUT,
    ERROR_NETWORK_ERROR,
    ERROR_BAD_REQUEST,
    ERROR_UPSTREAM,
    ERROR_RATE_LIMITED,
    ERROR_UNEXPECTED,
    # HTTP status code helpers
    HTTPStatusCodes,
    # Error creation functions
    create_error_result,
    create_validation_error,
    create_rate_limit_error,
)
from .rate_limit import RateLimiter

__all__ = [
    "MCPServerBase",
    "setup_logging",
    "RateLimiter",
    # Error code constants
    "ERROR_VALIDATION_FAILED",
    "ERROR_TIMEOUT",
    "ERROR_NETWORK_ERROR",
    "ERROR_BAD_REQUEST",
    "ERROR_UPSTREAM",
    "ERROR_RATE_LIMITED",
    "ERROR_UNEXPECTED",
    # HTTP status code helpers
    "HTTPStatusCodes",
    # Error creation functions
    "create_error_result",
    "create_validation_error",
    "create_rate_limit_error",
]

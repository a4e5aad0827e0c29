"""ABOUTME: API Recherche d'Entreprises client - models, validation, transport and formatting."""

from .client import RechercheEntreprisesClient
from .exceptions import (
    BadRequest,
    LogicalApiError,
    RateLimitExceeded,
    RechercheEntreprisesError,
    TransportError,
    ValidationError,
)
from .formatting import format_search_response
from .models import BusinessResult, NearbySearchParams, SearchResponse, TextSearchParams
from .requests import (
    build_query_string,
    encode_query_string,
    validate_and_build_nearby_search,
    validate_and_build_text_search,
)

__all__ = [
    "RechercheEntreprisesClient",
    # Errors
    "RechercheEntreprisesError",
    "ValidationError",
    "RateLimitExceeded",
    "BadRequest",
    "TransportError",
    "LogicalApiError",
    # Models
    "TextSearchParams",
    "NearbySearchParams",
    "SearchResponse",
    "BusinessResult",
    # Requests and formatting
    "build_query_string",
    "encode_query_string",
    "validate_and_build_text_search",
    "validate_and_build_nearby_search",
    "format_search_response",
]

"""
HTTP client for the French government's API Recherche d'Entreprises.

Validates search parameters, paces outbound calls with a shared rate limiter,
and maps every upstream failure onto the exceptions in exceptions.py.
"""

import logging
from typing import Any, Mapping, Optional, Union

import httpx
import pydantic
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..common.error_handling import HTTPStatusCodes
from ..common.http_utils import (
    DEFAULT_HTTP_TIMEOUT,
    build_async_client,
    clamp_timeout,
    get_retry_after_seconds,
    parse_json_body,
)
from ..common.rate_limit import DEFAULT_REQUESTS_PER_SECOND, RateLimiter
from .exceptions import BadRequest, LogicalApiError, RateLimitExceeded, TransportError
from .models import NearbySearchParams, SearchResponse, TextSearchParams
from .requests import (
    QueryString,
    encode_query_string,
    validate_and_build_nearby_search,
    validate_and_build_text_search,
)

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://recherche-entreprises.api.gouv.fr"
USER_AGENT = "recherche-entreprises-mcp/1.0.0"

SEARCH_PATH = "/search"
NEAR_POINT_PATH = "/near_point"


class RechercheEntreprisesConfig(BaseSettings):
    """Client configuration from environment (RECHERCHE_ENTREPRISES_*)."""

    model_config = SettingsConfigDict(
        env_prefix="RECHERCHE_ENTREPRISES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_HTTP_TIMEOUT
    rate_limit: float = Field(default=DEFAULT_REQUESTS_PER_SECOND, gt=0)


class RechercheEntreprisesClient:
    """Async client for the /search and /near_point endpoints.

    Provides:
    - Parameter validation before any network I/O
    - Rate limiting (7 requests/second by default, the published upstream limit)
    - A single attempt per call: no retries, no caching
    - Typed failures (RateLimitExceeded, BadRequest, TransportError, LogicalApiError)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        config: Optional[RechercheEntreprisesConfig] = None
    ):
        """Initialize the client.

        Args:
            base_url: API root. If None, reads RECHERCHE_ENTREPRISES_BASE_URL
                      (default: the public government endpoint).
            timeout: HTTP timeout in seconds, clamped to 1-300.
                     If None, reads RECHERCHE_ENTREPRISES_TIMEOUT (default: 10).
            rate_limiter: Shared limiter. If None, one is created from
                          RECHERCHE_ENTREPRISES_RATE_LIMIT (requests per second).
            transport: Optional httpx transport, used by tests to fake the upstream.
            config: Settings to use instead of reading the environment.
        """
        config = config or RechercheEntreprisesConfig()
        self.base_url = (base_url or config.base_url).rstrip("/")
        self.timeout = clamp_timeout(timeout if timeout is not None else config.timeout)
        self.rate_limiter = rate_limiter or RateLimiter(config.rate_limit)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            f"RechercheEntreprisesClient initialized (base_url={self.base_url}, "
            f"timeout={self.timeout}s, rate={self.rate_limiter.requests_per_second}/s)"
        )

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(
                timeout=self.timeout,
                headers={
                    "Accept": "application/json",
                    "User-Agent": USER_AGENT,
                },
                transport=self._transport
            )
        return self._client

    async def search_businesses(
        self,
        params: Union[TextSearchParams, Mapping[str, Any], None]
    ) -> SearchResponse:
        """Search businesses by text criteria (GET /search).

        Args:
            params: TextSearchParams or the equivalent argument mapping

        Returns:
            Parsed SearchResponse

        Raises:
            ValidationError: If the parameters break a rule (no request is sent)
            RateLimitExceeded: If the upstream answers 429
            BadRequest: If the upstream answers 400
            LogicalApiError: If a 2xx body is the upstream error envelope
            TransportError: For any other HTTP status or network failure
        """
        query = validate_and_build_text_search(params)
        return await self._request(SEARCH_PATH, query)

    async def search_nearby(
        self,
        params: Union[NearbySearchParams, Mapping[str, Any], None]
    ) -> SearchResponse:
        """Search businesses around a point (GET /near_point).

        Raises the same exceptions as search_businesses.
        """
        query = validate_and_build_nearby_search(params)
        return await self._request(NEAR_POINT_PATH, query)

    async def _request(self, path: str, query: QueryString) -> SearchResponse:
        """Issue one rate-limited GET and decode the result."""
        url = f"{self.base_url}{path}"
        encoded = encode_query_string(query)
        if encoded:
            url = f"{url}?{encoded}"

        await self.rate_limiter.wait()
        logger.info(f"GET {path}?{encoded}")

        try:
            response = await self._get_http_client().get(url)
        except httpx.TimeoutException as e:
            logger.error(f"Request to {path} timed out after {self.timeout}s")
            raise TransportError(
                f"Request timed out after {self.timeout} seconds",
                timed_out=True
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Network error calling {path}: {e}")
            raise TransportError(f"Network error: {e}") from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> SearchResponse:
        status_code = response.status_code

        if HTTPStatusCodes.is_rate_limit(status_code):
            retry_after = get_retry_after_seconds(response)
            logger.warning(f"Upstream rate limit exceeded (retry_after={retry_after})")
            raise RateLimitExceeded(retry_after_seconds=retry_after)

        if HTTPStatusCodes.is_bad_request(status_code):
            body = parse_json_body(response)
            if isinstance(body, dict) and body.get("erreur"):
                message = str(body["erreur"])
            else:
                message = response.text or response.reason_phrase
            logger.warning(f"Upstream rejected request: {message}")
            raise BadRequest(message)

        if not HTTPStatusCodes.is_success(status_code):
            if HTTPStatusCodes.is_server_error(status_code):
                logger.error(f"Upstream server error: {status_code} {response.reason_phrase}")
            else:
                logger.warning(f"Upstream HTTP error: {status_code} {response.reason_phrase}")
            raise TransportError(f"HTTP {status_code}: {response.reason_phrase}", status_code=status_code)

        data = parse_json_body(response)
        if not isinstance(data, dict):
            raise TransportError("Upstream response is not a JSON object", status_code=status_code)

        if "erreur" in data:
            logger.warning(f"Upstream returned error envelope: {data['erreur']}")
            raise LogicalApiError(str(data["erreur"]))

        try:
            result = SearchResponse.model_validate(data)
        except pydantic.ValidationError as e:
            logger.error(f"Unexpected upstream response format: {e}")
            raise TransportError(
                f"Unexpected response format ({e.error_count()} invalid field(s))",
                status_code=status_code
            ) from e

        logger.info(
            f"Upstream returned {len(result.results)} results "
            f"(total={result.total_results}, page {result.page}/{result.total_pages})"
        )
        return result

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug("RechercheEntreprisesClient closed")

    async def __aenter__(self) -> "RechercheEntreprisesClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

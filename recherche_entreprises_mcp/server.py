"""ABOUTME: Business Search MCP Server - French company directory via API Recherche d'Entreprises.

Exposes two tools, search_businesses (text criteria) and search_businesses_nearby
(coordinates + radius). Both return a markdown report built from the upstream
response; failures come back as error results with error_type/error_code metadata.
"""

from typing import Any, Awaitable, Callable, List, Mapping, Optional

from mcp.shared.exceptions import McpError
from mcp.types import (
    METHOD_NOT_FOUND,
    CallToolRequest,
    CallToolResult,
    ErrorData,
    ServerResult,
    Tool,
)

from . import __version__
from .api.client import RechercheEntreprisesClient
from .api.exceptions import (
    RateLimitExceeded,
    RechercheEntreprisesError,
    TransportError,
    ValidationError,
)
from .api.formatting import format_search_response
from .api.models import SearchResponse
from .common.error_handling import (
    ERROR_UNEXPECTED,
    create_error_result,
    create_rate_limit_error,
    create_validation_error,
)
from .common.mcp_base import MCPServerBase
from .tools import SEARCH_BUSINESSES, SEARCH_BUSINESSES_NEARBY, TOOLS

SERVER_NAME = "recherche-entreprises"

TEXT_SEARCH_LABEL = "text search"
GEOGRAPHIC_SEARCH_LABEL = "geographic search"

TEXT_SEARCH_FAILURE = "Business search failed"
GEOGRAPHIC_SEARCH_FAILURE = "Geographic search failed"

SearchCall = Callable[[Optional[Mapping[str, Any]]], Awaitable[SearchResponse]]


class BusinessSearchServer(MCPServerBase):
    """MCP server publishing the business search tools."""

    def __init__(self, client: Optional[RechercheEntreprisesClient] = None):
        super().__init__(SERVER_NAME, version=__version__)
        self.client = client or RechercheEntreprisesClient()
        self.add_shutdown_callback(self.client.aclose)
        self._handlers = {
            SEARCH_BUSINESSES: self.search_businesses,
            SEARCH_BUSINESSES_NEARBY: self.search_businesses_nearby,
        }
        self._register_handlers()

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def handle_list_tools() -> List[Tool]:
            return self.list_tools()

        # McpError propagates to the session as a JSON-RPC error. No schema check
        # here: the rule tables are the only argument validators.
        async def handle_call_tool(request: CallToolRequest) -> ServerResult:
            result = await self.call_tool(request.params.name, request.params.arguments)
            return ServerResult(result)

        self.server.request_handlers[CallToolRequest] = handle_call_tool

    def list_tools(self) -> List[Tool]:
        return [tool.to_mcp_tool() for tool in TOOLS]

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None
    ) -> CallToolResult:
        """Dispatch a tool call by name.

        Args:
            name: Tool name from the registry
            arguments: Tool arguments as sent by the client

        Returns:
            CallToolResult, with isError=True when the search failed

        Raises:
            McpError: METHOD_NOT_FOUND for an unknown tool name
        """
        handler = self._handlers.get(name)
        if handler is None:
            self.logger.warning(f"Unknown tool requested: {name}")
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))
        return await handler(arguments)

    async def search_businesses(self, arguments: Optional[Mapping[str, Any]]) -> CallToolResult:
        """Run a text-criteria search (GET /search)."""
        return await self._run_search(
            SEARCH_BUSINESSES,
            self.client.search_businesses,
            arguments,
            search_label=TEXT_SEARCH_LABEL,
            failure_prefix=TEXT_SEARCH_FAILURE
        )

    async def search_businesses_nearby(self, arguments: Optional[Mapping[str, Any]]) -> CallToolResult:
        """Run a geographic search around lat/long (GET /near_point)."""
        return await self._run_search(
            SEARCH_BUSINESSES_NEARBY,
            self.client.search_nearby,
            arguments,
            search_label=GEOGRAPHIC_SEARCH_LABEL,
            failure_prefix=GEOGRAPHIC_SEARCH_FAILURE
        )

    async def _run_search(
        self,
        tool_name: str,
        search: SearchCall,
        arguments: Optional[Mapping[str, Any]],
        search_label: str,
        failure_prefix: str
    ) -> CallToolResult:
        self.log_tool_start(tool_name, **dict(arguments or {}))

        try:
            response = await search(arguments)
        except ValidationError as e:
            self.log_tool_error(tool_name, e.error_code, e.message, field=e.field_name)
            return create_validation_error(
                field_name=e.field_name,
                error_message=f"{failure_prefix}: {e.message}",
                field_value=e.field_value
            )
        except RateLimitExceeded as e:
            self.log_tool_error(tool_name, e.error_code, e.message)
            return create_rate_limit_error(
                error_message=f"{failure_prefix}: {e.message.rstrip('.')}",
                retry_after_seconds=e.retry_after_seconds
            )
        except RechercheEntreprisesError as e:
            self.log_tool_error(tool_name, e.error_code, e.message)
            metadata = None
            if isinstance(e, TransportError) and e.status_code is not None:
                metadata = {"status_code": e.status_code}
            return create_error_result(
                error_message=f"{failure_prefix}: {e.message}",
                error_code=e.error_code,
                error_type=e.error_type,
                additional_metadata=metadata
            )
        except Exception as e:
            self.logger.error(f"Unexpected error in {tool_name}: {e}", exc_info=True)
            return create_error_result(
                error_message=f"{failure_prefix}: {e}",
                error_code=ERROR_UNEXPECTED,
                error_type="unexpected_error"
            )

        self.log_tool_complete(
            tool_name,
            results=len(response.results),
            total=response.total_results
        )
        return self.create_success_result(
            format_search_response(response, search_label),
            {
                "search_type": search_label,
                "total_results": response.total_results,
                "page": response.page,
                "per_page": response.per_page,
                "total_pages": response.total_pages,
                "result_count": len(response.results),
            }
        )


def create_server(client: Optional[RechercheEntreprisesClient] = None) -> BusinessSearchServer:
    """Build a server around a client configured from the environment."""
    return BusinessSearchServer(client)

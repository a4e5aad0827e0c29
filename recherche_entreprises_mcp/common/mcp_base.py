"""ABOUTME: Base class for MCP servers with common initialization, logging, and transport patterns.

Wraps the official MCP SDK's low-level Server so tools can be published from
static descriptors (name, description, JSON schema) and dispatched by name.
"""

import contextlib
import logging
import os
import sys
from typing import Any, Awaitable, Callable, Dict, List, Optional

import anyio
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import CallToolResult, TextContent
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route


def setup_logging(logger_name: str, level: Optional[int] = None) -> logging.Logger:
    """Configure logging for an MCP server.

    Logs always go to stderr: on the stdio transport stdout carries the
    protocol stream.

    Args:
        logger_name: Name of the logger (typically __name__)
        level: Logging level. If None, read from LOG_LEVEL (default: INFO)

    Returns:
        Configured logger instance
    """
    if level is None:
        level_name = os.getenv("LOG_LEVEL", "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, stream=sys.stderr)
    return logging.getLogger(logger_name)


class MCPServerBase:
    """Base class for MCP servers with common patterns.

    Provides:
    - Standard MCP server initialization
    - Consistent logging setup
    - stdio and streamable-http transports
    - Shutdown hooks for releasing shared resources
    """

    def __init__(self, server_name: str, version: Optional[str] = None):
        """Initialize MCP server base.

        Args:
            server_name: Name of the MCP server (e.g., "recherche-entreprises")
            version: Server version reported during initialization
        """
        self.server_name = server_name
        self.server = Server(server_name, version=version)
        self.logger = setup_logging(__name__)
        self._shutdown_callbacks: List[Callable[[], Awaitable[None]]] = []

    def add_shutdown_callback(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register a coroutine function to await when the transport stops."""
        self._shutdown_callbacks.append(callback)

    async def shutdown(self) -> None:
        """Run shutdown callbacks in registration order."""
        for callback in self._shutdown_callbacks:
            await callback()

    async def run_stdio(self) -> None:
        """Serve over stdin/stdout until the client disconnects."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options()
                )
        finally:
            await self.shutdown()

    def get_streamable_http_app(self, path: str = "/mcp") -> Starlette:
        """Build the Starlette ASGI app for the streamable-http transport.

        Also exposes GET /health for container health checks.

        Args:
            path: Mount point of the MCP endpoint

        Returns:
            Starlette ASGI application instance
        """
        session_manager = StreamableHTTPSessionManager(app=self.server, stateless=True)

        async def handle_streamable_http(scope, receive, send) -> None:
            await session_manager.handle_request(scope, receive, send)

        async def health(request: Request) -> JSONResponse:
            return JSONResponse({"status": "ok", "server": self.server_name})

        @contextlib.asynccontextmanager
        async def lifespan(app: Starlette):
            async with session_manager.run():
                try:
                    yield
                finally:
                    await self.shutdown()

        return Starlette(
            routes=[
                Route("/health", health, methods=["GET"]),
                Mount(path, app=handle_streamable_http),
            ],
            lifespan=lifespan
        )

    def run(self, transport: str = "stdio", host: str = "0.0.0.0", port: int = 8000) -> None:
        """Run the MCP server.

        Args:
            transport: Transport protocol ("stdio" or "streamable-http")
            host: Bind address for streamable-http
            port: Bind port for streamable-http

        Raises:
            ValueError: If the transport is unknown
        """
        if transport == "stdio":
            anyio.run(self.run_stdio)
        elif transport == "streamable-http":
            import uvicorn

            uvicorn.run(self.get_streamable_http_app(), host=host, port=port)
        else:
            raise ValueError(f"Unknown transport: {transport}. Supported: stdio, streamable-http")

    def create_success_result(
        self,
        content: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> CallToolResult:
        """Create standardized success result.

        Args:
            content: The response text to return
            metadata: Optional metadata dictionary

        Returns:
            CallToolResult with standardized success format

        Examples:
            >>> result = server.create_success_result("# French Business Search Results ...")
            >>> result = server.create_success_result("...", {"total_results": 5})
        """
        text_content = TextContent(type="text", text=content)
        if metadata:
            return CallToolResult(content=[text_content], metadata=metadata)
        return CallToolResult(content=[text_content])

    def log_tool_start(self, tool_name: str, **params) -> None:
        """Log tool invocation with parameters.

        Examples:
            >>> server.log_tool_start("search_businesses", q="la poste")
        """
        if params:
            param_str = ", ".join(f"{k}={v}" for k, v in params.items())
            self.logger.info(f"{tool_name} started: {param_str}")
        else:
            self.logger.info(f"{tool_name} started")

    def log_tool_complete(self, tool_name: str, **metrics) -> None:
        """Log tool completion with execution metrics.

        Examples:
            >>> server.log_tool_complete("search_businesses", results=10, total_results=1234)
        """
        if metrics:
            metric_str = ", ".join(f"{k}={v}" for k, v in metrics.items())
            self.logger.info(f"{tool_name} completed: {metric_str}")
        else:
            self.logger.info(f"{tool_name} completed")

    def log_tool_error(
        self,
        tool_name: str,
        error_code: str,
        error_message: str,
        **context
    ) -> None:
        """Log tool error with context.

        Examples:
            >>> server.log_tool_error("search_businesses", "rate_limited", "Rate limit exceeded")
        """
        context_str = ", ".join(f"{k}={v}" for k, v in context.items()) if context else ""
        if context_str:
            self.logger.error(f"{tool_name} error [{error_code}]: {error_message} ({context_str})")
        else:
            self.logger.error(f"{tool_name} error [{error_code}]: {error_message}")

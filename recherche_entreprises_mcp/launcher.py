"""ABOUTME: Process entry point for the business search MCP server.

Transport and bind address come from the environment (MCP_TRANSPORT, HOST,
PORT). stdio is the default; streamable-http binds to 0.0.0.0 for Docker
networking.
"""

import os
import sys
from typing import Optional

from .common.mcp_base import setup_logging

logger = setup_logging(__name__)

SUPPORTED_TRANSPORTS = ("stdio", "streamable-http")


def run_server(
    transport: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None
) -> None:
    """Run the business search MCP server.

    Args:
        transport: "stdio" or "streamable-http" (default: MCP_TRANSPORT or stdio)
        host: Host to bind to for HTTP (default: HOST or 0.0.0.0)
        port: Port to bind to for HTTP (default: PORT or 8000)
    """
    transport = transport or os.getenv("MCP_TRANSPORT", "stdio")
    host = host or os.getenv("HOST", "0.0.0.0")
    port = port or int(os.getenv("PORT", "8000"))

    if transport not in SUPPORTED_TRANSPORTS:
        logger.error(f"Unknown MCP transport: {transport} (supported: {', '.join(SUPPORTED_TRANSPORTS)})")
        sys.exit(1)

    from .server import create_server

    server = create_server()

    if transport == "stdio":
        logger.info("Starting recherche-entreprises MCP server (transport: stdio)")
    else:
        logger.info(f"Starting recherche-entreprises MCP server on {host}:{port} (transport: streamable-http)")

    server.run(transport=transport, host=host, port=port)


def main() -> None:
    run_server()


if __name__ == "__main__":
    main()

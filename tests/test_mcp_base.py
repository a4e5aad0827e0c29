"""ABOUTME: Tests for MCPServerBase helpers and the process launcher."""

import logging

import pytest
from starlette.testclient import TestClient

from recherche_entreprises_mcp.common.error_handling import ERROR_RATE_LIMITED, create_rate_limit_error
from recherche_entreprises_mcp.common.mcp_base import MCPServerBase
from recherche_entreprises_mcp.launcher import run_server


@pytest.fixture
def base_server():
    return MCPServerBase("test-server", version="0.0.1")


class TestResults:
    """Tests for success and error result creation."""

    def test_success_result(self, base_server):
        """Test text content and metadata."""
        result = base_server.create_success_result("hello", {"total_results": 3})
        assert result.content[0].text == "hello"
        assert result.metadata == {"total_results": 3}
        assert not result.isError

    def test_success_result_without_metadata(self, base_server):
        """Test that metadata is optional."""
        result = base_server.create_success_result("hello")
        assert result.content[0].text == "hello"

    def test_rate_limit_result(self):
        """Test the rate limit text and its retry metadata."""
        result = create_rate_limit_error("Business search failed: Rate limit exceeded", retry_after_seconds=2)
        assert result.isError
        assert result.content[0].text == (
            "Error: Business search failed: Rate limit exceeded. Retry after 2 seconds"
        )
        assert result.metadata == {
            "error_type": "rate_limit_error",
            "error_code": ERROR_RATE_LIMITED,
            "retry_after_seconds": 2,
        }


class TestToolLogging:
    """Tests for the tool log line format."""

    def test_start_and_complete(self, base_server, caplog):
        """Test start and completion lines."""
        with caplog.at_level(logging.INFO, logger=base_server.logger.name):
            base_server.log_tool_start("search_businesses", q="la poste")
            base_server.log_tool_complete("search_businesses", results=10, total=1234)
        assert "search_businesses started: q=la poste" in caplog.text
        assert "search_businesses completed: results=10, total=1234" in caplog.text

    def test_error(self, base_server, caplog):
        """Test the error line carries the code."""
        with caplog.at_level(logging.ERROR, logger=base_server.logger.name):
            base_server.log_tool_error("search_businesses", "rate_limited", "Rate limit exceeded")
        assert "search_businesses error [rate_limited]: Rate limit exceeded" in caplog.text


class TestTransports:
    """Tests for transport selection and the HTTP app."""

    def test_unknown_transport(self, base_server):
        """Test that run() rejects unknown transports."""
        with pytest.raises(ValueError):
            base_server.run(transport="sse")

    def test_health_endpoint(self, base_server):
        """Test the HTTP app health check."""
        response = TestClient(base_server.get_streamable_http_app()).get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "server": "test-server"}

    @pytest.mark.asyncio
    async def test_shutdown_callbacks_run_in_order(self, base_server):
        """Test registered shutdown callbacks."""
        calls = []

        async def first():
            calls.append("first")

        async def second():
            calls.append("second")

        base_server.add_shutdown_callback(first)
        base_server.add_shutdown_callback(second)
        await base_server.shutdown()
        assert calls == ["first", "second"]

    def test_launcher_rejects_unknown_transport(self, monkeypatch):
        """Test that the launcher exits on an unknown MCP_TRANSPORT."""
        monkeypatch.setenv("MCP_TRANSPORT", "carrier-pigeon")
        with pytest.raises(SystemExit):
            run_server()

"""Tests for the FastMCP server.

Verifies server creation, configuration integration, singleton management,
and execution of every registered tool.  Backend credentials are removed
from the environment so analyses run the heuristic classifier.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

import pytest

from scope_sentinel import __version__
from scope_sentinel.config import ENV_PREFIX, GROQ_API_KEY_ENV, SentinelConfig
from scope_sentinel.engine.analyzer import ScopeAnalyzer
from scope_sentinel.engine.patterns import ALL_SIGNALS
from scope_sentinel.mcp.server import (
    create_server,
    get_analyzer,
    get_config,
    get_server,
    reset_server,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_tool_result(result) -> dict:
    """Extract a dict from a FastMCP ToolResult.

    FastMCP tool.run() returns a ToolResult whose .content is a list of
    TextContent objects.  The first TextContent's .text is JSON-encoded.
    """
    if isinstance(result, dict):
        return result
    if isinstance(result, str):
        return json.loads(result)
    if hasattr(result, "content") and result.content:
        text = result.content[0].text
        return json.loads(text)
    raise TypeError(f"Cannot parse tool result of type {type(result)}")


def _call_tool(server, name: str, arguments: dict) -> dict:
    tools = asyncio.run(server.get_tools())
    return _parse_tool_result(asyncio.run(tools[name].run(arguments)))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_server():
    """Ensure the server singleton is reset before and after each test."""
    reset_server()
    yield
    reset_server()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX) or key == GROQ_API_KEY_ENV:
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_logger():
    pkg_logger = logging.getLogger("scope_sentinel")
    saved_handlers = list(pkg_logger.handlers)
    saved_level = pkg_logger.level
    yield
    pkg_logger.handlers[:] = saved_handlers
    pkg_logger.setLevel(saved_level)


@pytest.fixture
def project_dir(tmp_path: Path) -> str:
    """Create a temporary project directory with a .git marker for root detection."""
    (tmp_path / ".git").mkdir()
    return str(tmp_path)


@pytest.fixture
def project_with_config(project_dir: str) -> str:
    """Create a project directory with a config.json file."""
    config_dir = Path(project_dir) / ".scope-sentinel"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.json").write_text(json.dumps({
        "log_level": "DEBUG",
        "backend_model": "file-model",
    }))
    return project_dir


# ---------------------------------------------------------------------------
# Server creation tests
# ---------------------------------------------------------------------------

class TestCreateServer:
    """Tests for create_server() factory function."""

    def test_returns_fastmcp_instance(self, project_dir):
        from fastmcp import FastMCP
        server = create_server(project_root=project_dir)
        assert isinstance(server, FastMCP)

    def test_server_name(self, project_dir):
        server = create_server(project_root=project_dir)
        assert server.name == "scope-sentinel"

    def test_respects_config_file(self, project_with_config):
        create_server(project_root=project_with_config)
        cfg = get_config()
        assert cfg.log_level == "DEBUG"
        assert cfg.backend_model == "file-model"

    def test_analyzer_without_key(self, project_dir):
        create_server(project_root=project_dir)
        assert isinstance(get_analyzer(), ScopeAnalyzer)
        assert not get_analyzer().has_backend

    def test_analyzer_with_key(self, project_dir, monkeypatch):
        monkeypatch.setenv(GROQ_API_KEY_ENV, "gsk_server_test_key")
        create_server(project_root=project_dir)
        assert get_analyzer().has_backend

    def test_registers_tools(self, project_dir):
        server = create_server(project_root=project_dir)
        tools = asyncio.run(server.get_tools())
        assert set(tools) == {
            "health_check",
            "analyze_message",
            "list_signals",
            "client_risk_score",
        }


# ---------------------------------------------------------------------------
# Singleton tests
# ---------------------------------------------------------------------------

class TestSingletons:
    def test_get_server_reuses_instance(self, project_dir):
        server = create_server(project_root=project_dir)
        assert get_server() is server

    def test_get_analyzer_before_create(self):
        with pytest.raises(RuntimeError, match="not been initialized"):
            get_analyzer()

    def test_get_config_before_create(self):
        with pytest.raises(RuntimeError, match="not been initialized"):
            get_config()

    def test_reset(self, project_dir):
        create_server(project_root=project_dir)
        reset_server()
        with pytest.raises(RuntimeError):
            get_config()

    def test_config_type(self, project_dir):
        create_server(project_root=project_dir)
        assert isinstance(get_config(), SentinelConfig)


# ---------------------------------------------------------------------------
# Tool tests
# ---------------------------------------------------------------------------

class TestHealthCheck:
    def test_reports_status(self, project_dir):
        server = create_server(project_root=project_dir)
        result = _call_tool(server, "health_check", {})
        assert result["status"] == "healthy"
        assert result["server_version"] == __version__
        assert result["backend_configured"] is False
        assert result["backend_model"] is None
        assert result["signal_count"] == len(ALL_SIGNALS)
        assert result["project_root"] == str(Path(project_dir).resolve())
        assert "timestamp" in result


class TestAnalyzeMessage:
    def test_quick_analysis(self, project_dir):
        server = create_server(project_root=project_dir)
        result = _call_tool(server, "analyze_message", {
            "message": "Can you also add a blog section? It shouldn't take too long.",
        })
        assert result["error"] is False
        assert result["riskLevel"] == "HIGH_RISK_SCOPE_CREEP"
        assert result["confidenceScore"] == 95
        assert result["isQuickAnalysis"] is True
        assert [r["type"] for r in result["replies"]] == [
            "POLITE_BOUNDARY", "PAID_ADDON", "NEGOTIATION_FRIENDLY",
        ]

    def test_with_project_context(self, project_dir):
        server = create_server(project_root=project_dir)
        result = _call_tool(server, "analyze_message", {
            "message": "I found a bug on the checkout page, it's not working.",
            "scope_summary": "Online store with checkout",
        })
        assert result["riskLevel"] == "LIKELY_IN_SCOPE"
        assert result["replies"] == []
        assert result["isQuickAnalysis"] is False

    def test_heuristic_only(self, project_dir, monkeypatch):
        monkeypatch.setenv(GROQ_API_KEY_ENV, "gsk_server_test_key")
        server = create_server(project_root=project_dir)
        result = _call_tool(server, "analyze_message", {
            "message": "Here are the photos for the homepage.",
            "heuristic_only": True,
        })
        assert result["riskLevel"] == "POSSIBLY_SCOPE_CREEP"
        assert result["confidenceScore"] == 50

    def test_blank_message_returns_error(self, project_dir):
        server = create_server(project_root=project_dir)
        result = _call_tool(server, "analyze_message", {"message": "   "})
        assert result["error"] is True
        assert "required" in result["message"]


class TestListSignals:
    def test_lists_all(self, project_dir):
        server = create_server(project_root=project_dir)
        result = _call_tool(server, "list_signals", {})
        assert result["count"] == len(ALL_SIGNALS)
        first = result["signals"][0]
        assert set(first) == {"pattern", "weight", "reason", "group"}


class TestClientRiskScore:
    def test_score(self, project_dir):
        server = create_server(project_root=project_dir)
        result = _call_tool(server, "client_risk_score", {
            "risk_levels": ["POSSIBLY_SCOPE_CREEP", "LIKELY_IN_SCOPE"],
        })
        assert result == {"client_risk_score": 23, "message_count": 2}

    def test_unknown_levels_count_as_in_scope(self, project_dir):
        server = create_server(project_root=project_dir)
        result = _call_tool(server, "client_risk_score", {
            "risk_levels": ["HIGH_RISK_SCOPE_CREEP", "MAYBE"],
        })
        assert result["client_risk_score"] == 45


class TestLifecycle:
    def test_reset_closes_analyzer(self, project_dir, monkeypatch):
        create_server(project_root=project_dir)
        closed = []
        monkeypatch.setattr(get_analyzer(), "close", lambda: closed.append(True))
        reset_server()
        assert closed == [True]

    def test_recreate_closes_previous_analyzer(self, project_dir, monkeypatch):
        create_server(project_root=project_dir)
        first = get_analyzer()
        closed = []
        monkeypatch.setattr(first, "close", lambda: closed.append(True))
        create_server(project_root=project_dir)
        assert closed == [True]
        assert get_analyzer() is not first

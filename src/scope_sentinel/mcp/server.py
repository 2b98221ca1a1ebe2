"""FastMCP server exposing the scope classification engine as MCP tools.

Typical usage as an MCP server entry point::

    # Via the registered entry point (pyproject.toml):
    # [project.entry-points."mcp.servers"]
    # scope-sentinel = "scope_sentinel.mcp:create_server"

    # Or programmatically:
    from scope_sentinel.mcp.server import create_server
    server = create_server()
    server.run(transport="stdio")

Tools:
- health_check -- server version and backend configuration
- analyze_message -- classify a client message against a project scope
- list_signals -- the heuristic signal library
- client_risk_score -- aggregate past verdicts into a client risk score
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastmcp import FastMCP

from scope_sentinel import __version__
from scope_sentinel.config import SentinelConfig
from scope_sentinel.engine.analyzer import ScopeAnalyzer
from scope_sentinel.engine.client_risk import calculate_client_risk_score
from scope_sentinel.engine.patterns import ALL_SIGNALS
from scope_sentinel.errors import InvalidMessageError
from scope_sentinel.models.context import ProjectContext

logger = logging.getLogger(__name__)

# Module-level singletons, created by create_server() and shared by all tools.
_server_instance: Optional[FastMCP] = None
_analyzer: Optional[ScopeAnalyzer] = None
_config: Optional[SentinelConfig] = None


def create_server(
    project_root: Optional[str] = None,
    config_path: Optional[str] = None,
) -> FastMCP:
    """Create and configure the FastMCP server instance.

    Loads :class:`SentinelConfig`, builds the :class:`ScopeAnalyzer` (with
    the backend classifier only when an API key is configured), and
    registers the tools.

    Parameters
    ----------
    project_root:
        Explicit project root path.  When None, it is auto-detected.
    config_path:
        Explicit config file path.  When None, looks for
        ``<project_root>/.scope-sentinel/config.json``.
    """
    global _server_instance, _analyzer, _config

    if _analyzer is not None:
        _analyzer.close()

    _config = SentinelConfig.load(project_root=project_root, config_path=config_path)
    _config.configure_logging()

    logger.info("Initializing Scope Sentinel MCP server v%s", __version__)
    logger.info(
        "Backend classifier: %s",
        _config.backend_model if _config.backend_configured else "(heuristic only)",
    )

    _analyzer = ScopeAnalyzer.from_config(_config)

    _server_instance = FastMCP(
        name="scope-sentinel",
        instructions=(
            "Scope Sentinel classifies client messages for scope creep risk. "
            "Call analyze_message with the message and, when available, the "
            "project's scope summary and out-of-scope items. It returns a "
            "risk tier, a confidence score, reasoning, and reply drafts."
        ),
        version=__version__,
    )

    _register_tools(_server_instance)

    logger.info("FastMCP server created successfully. Tools registered.")

    return _server_instance


def get_server() -> FastMCP:
    """Return the existing server instance, creating it if necessary."""
    if _server_instance is None:
        return create_server()
    return _server_instance


def get_analyzer() -> ScopeAnalyzer:
    """Return the analyzer used by the server.

    Raises
    ------
    RuntimeError
        If the server has not been created yet.
    """
    if _analyzer is None:
        raise RuntimeError(
            "Server has not been initialized. Call create_server() first."
        )
    return _analyzer


def get_config() -> SentinelConfig:
    """Return the configuration used by the server.

    Raises
    ------
    RuntimeError
        If the server has not been created yet.
    """
    if _config is None:
        raise RuntimeError(
            "Server has not been initialized. Call create_server() first."
        )
    return _config


def reset_server() -> None:
    """Reset the server singletons (primarily for testing)."""
    global _server_instance, _analyzer, _config
    if _analyzer is not None:
        _analyzer.close()
    _server_instance = None
    _analyzer = None
    _config = None
    logger.debug("Server singleton reset.")


# ---------------------------------------------------------------------------
# Tool registration
# ---------------------------------------------------------------------------


def _register_tools(server: FastMCP) -> None:
    """Register all MCP tools on the server instance."""

    @server.tool()
    def health_check() -> dict:
        """Check the health and configuration of the Scope Sentinel server.

        Returns:
            A dictionary with the server version, whether an external
            classifier backend is configured, the backend model, the
            number of heuristic signals, and a timestamp.
        """
        cfg = get_config()
        return {
            "server_version": __version__,
            "status": "healthy",
            "backend_configured": cfg.backend_configured,
            "backend_model": cfg.backend_model if cfg.backend_configured else None,
            "signal_count": len(ALL_SIGNALS),
            "project_root": cfg.project_root,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @server.tool()
    def analyze_message(
        message: str,
        scope_summary: str = "",
        out_of_scope_items: str = "",
        contract_text: str = "",
        heuristic_only: bool = False,
    ) -> dict:
        """Classify a client message for scope creep risk.

        Args:
            message: The client message to analyse.  Required, non-blank.
            scope_summary: Free text describing the agreed project scope.
                Leave empty for a quick analysis without project context.
            out_of_scope_items: Free text listing explicitly excluded work.
            contract_text: Contract text; only the first part is used.
            heuristic_only: Skip the external classifier backend.

        Returns:
            A dictionary with riskLevel, confidenceScore, reasoning, and
            replies, plus isQuickAnalysis and a timestamp.  On invalid
            input, ``{"error": True, "message": ...}``.
        """
        context = ProjectContext(
            scope_summary=scope_summary,
            out_of_scope_items=out_of_scope_items or None,
            contract_text=contract_text or None,
        )

        try:
            result = get_analyzer().analyze(
                message, context, use_backend=not heuristic_only
            )
        except InvalidMessageError as exc:
            logger.warning("analyze_message rejected: %s", exc)
            return {
                "error": True,
                "message": str(exc),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }

        logger.info(
            "Analysed message (%d chars): %s at %d%% confidence.",
            len(message),
            result.risk_level.value,
            result.confidence_score,
        )

        payload = result.to_dict()
        payload.update({
            "error": False,
            "isQuickAnalysis": context.is_empty,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })
        return payload

    @server.tool()
    def list_signals() -> dict:
        """List the weighted patterns used by the heuristic classifier.

        Returns:
            A dictionary with the signal count and each signal's pattern,
            weight, rationale, and group ('scope_creep' or 'in_scope').
        """
        return {
            "count": len(ALL_SIGNALS),
            "signals": [signal.to_dict() for signal in ALL_SIGNALS],
        }

    @server.tool()
    def client_risk_score(risk_levels: list[str]) -> dict:
        """Aggregate past verdicts for one client into a 0-100 risk score.

        Args:
            risk_levels: Risk tiers of the client's analysed messages.
                Unknown values count as in-scope.

        Returns:
            A dictionary with the client risk score and message count.
        """
        return {
            "client_risk_score": calculate_client_risk_score(risk_levels),
            "message_count": len(risk_levels),
        }

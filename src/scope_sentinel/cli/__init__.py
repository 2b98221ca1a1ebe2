"""Click CLI commands for developer-facing scope analysis.

Provides the ``scope-sentinel`` CLI entry point with subcommands:
- ``scope-sentinel analyze``     -- Classify a client message against a project scope.
- ``scope-sentinel signals``     -- List the heuristic signal library.
- ``scope-sentinel client-risk`` -- Aggregate past verdicts into a client risk score.
- ``scope-sentinel config``      -- Show the resolved configuration.
"""

from scope_sentinel.cli.main import analyze, cli, client_risk, show_config, signals

__all__ = ["analyze", "cli", "client_risk", "show_config", "signals"]

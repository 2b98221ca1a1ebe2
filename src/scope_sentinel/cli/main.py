"""Main Click CLI entry point for the scope-sentinel command.

Entry point registered in pyproject.toml::

    [project.scripts]
    scope-sentinel = "scope_sentinel.cli.main:cli"

Usage examples::

    scope-sentinel analyze "Can you also add a blog section?"
    scope-sentinel analyze - --scope-file scope.txt --json-output < message.txt
    scope-sentinel analyze "Quick change on all pages" --heuristic-only
    scope-sentinel signals --json-output
    scope-sentinel client-risk HIGH_RISK_SCOPE_CREEP LIKELY_IN_SCOPE
    scope-sentinel config
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import click

from scope_sentinel import __version__
from scope_sentinel.config import SentinelConfig
from scope_sentinel.engine.analyzer import ScopeAnalyzer
from scope_sentinel.engine.client_risk import calculate_client_risk_score
from scope_sentinel.engine.patterns import ALL_SIGNALS
from scope_sentinel.errors import InvalidMessageError
from scope_sentinel.models.context import ProjectContext
from scope_sentinel.models.result import AnalysisResult, RiskLevel

_RISK_COLOURS = {
    RiskLevel.LIKELY_IN_SCOPE: "green",
    RiskLevel.POSSIBLY_SCOPE_CREEP: "yellow",
    RiskLevel.HIGH_RISK_SCOPE_CREEP: "red",
}


@click.group()
@click.version_option(version=__version__, prog_name="scope-sentinel")
@click.option(
    "--project-root",
    type=click.Path(exists=False, file_okay=False),
    default=None,
    envvar="SCOPE_SENTINEL_PROJECT_ROOT",
    help="Project root used to locate .scope-sentinel/config.json. Auto-detected if not set.",
)
@click.option(
    "--config-path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Explicit path to a config.json file.",
)
@click.pass_context
def cli(ctx: click.Context, project_root: Optional[str], config_path: Optional[str]) -> None:
    """Scope Sentinel -- Scope creep risk analysis for client messages."""
    ctx.ensure_object(dict)
    ctx.obj["project_root"] = project_root
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("message")
@click.option("--scope", "scope_summary", default="", help="Project scope summary text.")
@click.option(
    "--scope-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read the project scope summary from a file.",
)
@click.option("--out-of-scope", "out_of_scope", default=None, help="Out-of-scope items text.")
@click.option(
    "--out-of-scope-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read the out-of-scope items from a file.",
)
@click.option(
    "--contract-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read contract text from a file.",
)
@click.option(
    "--heuristic-only",
    is_flag=True,
    default=False,
    help="Skip the external classifier even when one is configured.",
)
@click.option(
    "--json-output",
    "output_json",
    is_flag=True,
    default=False,
    help="Output the analysis as JSON instead of human-readable text.",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    message: str,
    scope_summary: str,
    scope_file: Optional[str],
    out_of_scope: Optional[str],
    out_of_scope_file: Optional[str],
    contract_file: Optional[str],
    heuristic_only: bool,
    output_json: bool,
) -> None:
    """Analyse MESSAGE for scope creep risk.

    Pass ``-`` as MESSAGE to read the message from standard input.  Without
    any scope options the message is analysed without project context.
    """
    if message == "-":
        message = click.get_text_stream("stdin").read()

    if scope_file:
        scope_summary = _read_text(scope_file, "--scope-file")
    if out_of_scope_file:
        out_of_scope = _read_text(out_of_scope_file, "--out-of-scope-file")
    contract_text = _read_text(contract_file, "--contract-file") if contract_file else None

    config = _load_config(ctx)
    config.configure_logging()

    context = ProjectContext(
        scope_summary=scope_summary,
        out_of_scope_items=out_of_scope or None,
        contract_text=contract_text,
    )

    with ScopeAnalyzer.from_config(config) as analyzer:
        try:
            result = analyzer.analyze(message, context, use_backend=not heuristic_only)
        except InvalidMessageError as exc:
            raise click.UsageError(str(exc)) from exc

    if output_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        _render_analysis_text(result, quick=context.is_empty)


@cli.command()
@click.option(
    "--json-output",
    "output_json",
    is_flag=True,
    default=False,
    help="Output the signal library as JSON.",
)
def signals(output_json: bool) -> None:
    """List the weighted patterns used by the heuristic classifier."""
    if output_json:
        click.echo(json.dumps([s.to_dict() for s in ALL_SIGNALS], indent=2))
        return

    for signal in ALL_SIGNALS:
        colour = "red" if signal.weight > 0 else "green"
        click.echo(
            click.style(f"{signal.weight:+.2f}", fg=colour)
            + f"  {signal.reason}  "
            + click.style(f"/{signal.pattern.pattern}/i", dim=True)
        )


@cli.command("client-risk")
@click.argument(
    "risk_levels",
    nargs=-1,
    type=click.Choice([level.value for level in RiskLevel]),
)
def client_risk(risk_levels: tuple[str, ...]) -> None:
    """Compute a client's 0-100 risk score from past verdicts."""
    click.echo(str(calculate_client_risk_score(risk_levels)))


@cli.command("config")
@click.option(
    "--json-output",
    "output_json",
    is_flag=True,
    default=False,
    help="Output the configuration as JSON.",
)
@click.pass_context
def show_config(ctx: click.Context, output_json: bool) -> None:
    """Show the resolved configuration (API key masked)."""
    data = _load_config(ctx).to_dict()

    if output_json:
        click.echo(json.dumps(data, indent=2, default=str))
        return

    click.secho("Scope Sentinel -- Configuration", fg="cyan", bold=True)
    click.secho("=" * 32, fg="cyan")
    width = max(len(key) for key in data)
    for key, value in data.items():
        click.echo(f"  {key.ljust(width)}  {value}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config(ctx: click.Context) -> SentinelConfig:
    """Load configuration from the group options, exiting on failure."""
    obj = ctx.obj or {}
    try:
        return SentinelConfig.load(
            project_root=obj.get("project_root"),
            config_path=obj.get("config_path"),
        )
    except ValueError as exc:
        click.secho(f"ERROR: Failed to load configuration: {exc}", fg="red", err=True)
        sys.exit(1)


def _read_text(path: str, option: str) -> str:
    """Read a UTF-8 text file, reporting undecodable bytes as a bad *option* value."""
    try:
        with open(path, "r", encoding="utf-8") as fp:
            return fp.read()
    except UnicodeDecodeError as exc:
        raise click.BadParameter(
            f"{path} is not valid UTF-8 text ({exc.reason} at byte {exc.start}).",
            param_hint=option,
        ) from exc


def _render_analysis_text(result: AnalysisResult, quick: bool = False) -> None:
    """Render an analysis result as formatted text to stdout."""
    colour = _RISK_COLOURS[result.risk_level]

    click.secho(
        f"{result.risk_level.label} ({result.risk_level.value})",
        fg=colour,
        bold=True,
    )
    click.echo(f"Confidence: {result.confidence_score}%")
    if quick:
        click.secho("Quick analysis: no project context supplied.", fg="yellow")
    click.echo()
    click.echo(result.reasoning)

    if result.replies:
        click.echo()
        click.secho("Suggested replies", fg="cyan", bold=True)
        click.secho("-" * 20, fg="cyan")
        for reply in result.replies:
            click.secho(f"[{reply.type.value}]", fg="cyan")
            click.echo(f"  {reply.content}")


if __name__ == "__main__":
    cli()

"""CLI entrypoint for vfy."""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Annotated

import typer

from vfy import __version__
from vfy.config import AppConfig, default_config_template, load_app_config, parse_severity
from vfy.errors import translate_error
from vfy.git import GitError, clone_repository, repo_name_from_url
from vfy.output import render_human, render_json, render_scans, render_stats
from vfy.report import ReportClient, ReportError, SourceType
from vfy.rules import build_rules, list_rule_info
from vfy.rules.base import Finding, Rule, severity_at_least
from vfy.walker import ScanError, ScanResult, scan_tree

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="vfy",
    no_args_is_help=True,
    help="Scan source trees for exposed secrets, weak crypto and insecure defaults.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Root command callback."""
    _ = version
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("scan")
def scan_command(
    target: Annotated[Path, typer.Argument(help="File or folder to scan.")] = Path("."),
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    fail_on: Annotated[
        str | None,
        typer.Option(help="Exit nonzero if any finding is at or above this severity."),
    ] = None,
    report: Annotated[
        bool | None,
        typer.Option("--report/--no-report", help="Send results to the report service."),
    ] = None,
    api_url: Annotated[str | None, typer.Option(help="Report service base URL.")] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Scan a local folder or single file (recursive)."""
    app_config = _load_config_or_raise(target, config_file)
    output_format = _resolve_format(format, app_config)
    threshold = _resolve_fail_on(fail_on, app_config)
    rules = _build_configured_rules_or_raise(app_config)

    result = _scan_or_exit(target, rules)
    _echo_findings(result.findings, output_format=output_format, root=str(target))

    if _report_enabled(report, app_config):
        _submit_report(
            app_config,
            api_url=api_url,
            repo_name=target.resolve().name,
            findings=result.findings,
            source_type="local",
            source_url=None,
        )

    _exit_on_threshold(result.findings, threshold)


@app.command("scan-repo")
def scan_repo_command(
    url: Annotated[str, typer.Argument(help="Repository URL to clone and scan.")],
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    fail_on: Annotated[
        str | None,
        typer.Option(help="Exit nonzero if any finding is at or above this severity."),
    ] = None,
    report: Annotated[
        bool | None,
        typer.Option("--report/--no-report", help="Send results to the report service."),
    ] = None,
    api_url: Annotated[str | None, typer.Option(help="Report service base URL.")] = None,
    depth: Annotated[int, typer.Option(help="Clone depth.", min=1)] = 1,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Clone a remote repository and scan it."""
    app_config = _load_config_or_raise(Path("."), config_file)
    output_format = _resolve_format(format, app_config)
    threshold = _resolve_fail_on(fail_on, app_config)
    rules = _build_configured_rules_or_raise(app_config)

    workdir = Path(tempfile.mkdtemp(prefix="vfy-"))
    try:
        checkout = workdir / "repo"
        if output_format == "human":
            typer.echo(f"Cloning {url} into {checkout}...", err=True)
        try:
            clone_repository(url, checkout, depth=depth)
        except GitError as exc:
            typer.echo(f"error: failed to clone {url}: {exc}", err=True)
            raise typer.Exit(code=2) from exc

        result = _scan_or_exit(checkout, rules)
        _echo_findings(result.findings, output_format=output_format, root=url)

        if _report_enabled(report, app_config):
            _submit_report(
                app_config,
                api_url=api_url,
                repo_name=repo_name_from_url(url),
                findings=result.findings,
                source_type="github",
                source_url=url,
            )
    finally:
        shutil.rmtree(workdir, ignore_errors=True)

    _exit_on_threshold(result.findings, threshold)


@app.command("status")
def status_command(
    api_url: Annotated[str | None, typer.Option(help="Report service base URL.")] = None,
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show totals recorded by the report service."""
    app_config = _load_config_or_raise(Path("."), config_file)
    output_format = _resolve_format(format, app_config)
    try:
        with _report_client(app_config, api_url) as client:
            stats = client.fetch_stats()
    except ReportError as exc:
        typer.echo(f"error: failed to fetch stats: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if output_format == "json":
        typer.echo(json.dumps(stats, sort_keys=True))
    else:
        typer.echo(render_stats(stats))


@app.command("history")
def history_command(
    api_url: Annotated[str | None, typer.Option(help="Report service base URL.")] = None,
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """List archived scans, newest first."""
    app_config = _load_config_or_raise(Path("."), config_file)
    output_format = _resolve_format(format, app_config)
    try:
        with _report_client(app_config, api_url) as client:
            scans = client.fetch_scans()
    except ReportError as exc:
        typer.echo(f"error: failed to fetch scans: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if output_format == "json":
        typer.echo(json.dumps(scans, sort_keys=True))
    else:
        typer.echo(render_scans(scans))


@app.command("rules")
def rules_command(
    repo: Annotated[Path, typer.Option(help="Directory to read config from.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """List detection rules and whether they are enabled."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = _resolve_format(format, app_config)
    active_rules = _build_configured_rules_or_raise(app_config)
    infos = list_rule_info(active_rules)

    if output_format == "json":
        payload = {
            "rules": [
                {
                    "rule_id": info.rule_id,
                    "kind": info.kind,
                    "category": info.category,
                    "severity": info.severity,
                    "hint": info.hint,
                    "enabled": info.enabled,
                }
                for info in infos
            ],
            "meta": {"config_source": app_config.source},
        }
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = ["Rules:"]
    for info in infos:
        state = "on" if info.enabled else "off"
        lines.append(f"- {info.rule_id} [{info.kind}] {info.severity}/{info.category} ({state})")
    typer.echo("\n".join(lines))


@app.command("config")
def config_command(
    repo: Annotated[Path, typer.Option(help="Directory to read config from.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = _resolve_format(format, app_config)
    active_rules = _build_configured_rules_or_raise(app_config)
    payload = app_config.to_dict()
    payload["active_rule_ids"] = [rule.rule_id for rule in active_rules]

    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    report = payload["report"]
    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- fail_on: {payload['fail_on']}",
        f"- report: enabled={report['enabled']} api_url={report['api_url']} "
        f"timeout={report['timeout']}",
        f"- rules.enable: {payload['rules']['enable']}",
        f"- rules.disable: {payload['rules']['disable']}",
        f"- active_rule_ids: {payload['active_rule_ids']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    path: Annotated[Path, typer.Option(help="Where to write the config file.")] = Path(".vfy.toml"),
    force: Annotated[bool, typer.Option(help="Overwrite an existing file.")] = False,
) -> None:
    """Write a starter config file."""
    if path.exists() and not force:
        raise typer.BadParameter(f"{path} already exists. Use --force to overwrite.")
    path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote {path}")


def main() -> None:
    """Console script entrypoint."""
    try:
        app()
    except Exception as exc:
        logger.debug("Unhandled error", exc_info=True)
        typer.echo(render_human([translate_error(exc)]), err=True)
        raise SystemExit(1) from exc


def _load_config_or_raise(target: Path, config_file: Path | None = None) -> AppConfig:
    base_dir = target if target.is_dir() else target.parent
    try:
        return load_app_config(base_dir, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc


def _build_configured_rules_or_raise(app_config: AppConfig) -> tuple[Rule, ...]:
    try:
        return build_rules(
            enabled_rule_ids=app_config.rule_enable,
            disabled_rule_ids=app_config.rule_disable,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config.rules") from exc


def _resolve_format(value: str | None, app_config: AppConfig) -> str:
    output_format = (value or app_config.format).lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")
    return output_format


def _resolve_fail_on(value: str | None, app_config: AppConfig) -> str | None:
    if value is None:
        return app_config.fail_on
    try:
        return parse_severity(value, "--fail-on")
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--fail-on") from exc


def _scan_or_exit(target: Path, rules: tuple[Rule, ...]) -> ScanResult:
    try:
        result = scan_tree(target, rules=rules)
    except ScanError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    for skipped in result.skipped:
        logger.info("Skipped %s (%s)", skipped.path, skipped.reason)
    logger.debug("Scanned %d file(s) under %s", result.files_scanned, target)
    return result


def _echo_findings(findings: tuple[Finding, ...], *, output_format: str, root: str) -> None:
    if output_format == "json":
        typer.echo(render_json(findings, root=root))
    else:
        typer.echo(render_human(findings))


def _report_enabled(flag: bool | None, app_config: AppConfig) -> bool:
    return flag if flag is not None else app_config.report.enabled


def _report_client(app_config: AppConfig, api_url: str | None) -> ReportClient:
    return ReportClient(
        api_url=api_url or app_config.report.api_url,
        timeout=app_config.report.timeout,
    )


def _submit_report(
    app_config: AppConfig,
    *,
    api_url: str | None,
    repo_name: str,
    findings: tuple[Finding, ...],
    source_type: SourceType,
    source_url: str | None,
) -> None:
    try:
        with _report_client(app_config, api_url) as client:
            ack = client.post_report(
                repo_name,
                findings,
                source_type=source_type,
                source_url=source_url,
            )
    except ReportError as exc:
        typer.echo(f"warning: failed to sync with report service: {exc}", err=True)
        return

    stats = ack.get("stats")
    if isinstance(stats, dict):
        typer.echo(f"Synced to report service: {json.dumps(stats, sort_keys=True)}", err=True)
    else:
        typer.echo("Synced to report service.", err=True)


def _exit_on_threshold(findings: tuple[Finding, ...], threshold: str | None) -> None:
    if threshold is None:
        return
    if any(severity_at_least(finding.severity, threshold) for finding in findings):
        raise typer.Exit(code=1)

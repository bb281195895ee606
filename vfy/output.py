"""Output rendering."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

import click

from vfy import __version__
from vfy.rules.base import SEVERITIES, Finding

SEVERITY_COLORS = {
    "Critical": "red",
    "High": "yellow",
    "Medium": "cyan",
    "Low": "white",
}


def render_human(findings: Sequence[Finding]) -> str:
    """Render findings grouped by category, colored by severity."""
    if not findings:
        return click.style("No issues found!", fg="green", bold=True)

    lines: list[str] = []
    for category, grouped in _group_by_category(findings):
        lines.append(click.style(f"{category} ({len(grouped)})", bold=True))
        for finding in grouped:
            lines.append(
                click.style(
                    f"{finding.severity} [{finding.category}] → {finding.message}",
                    fg=SEVERITY_COLORS.get(finding.severity),
                )
            )
            lines.append(f"   hint: {finding.hint}")

    counts = severity_counts(findings)
    summary = ", ".join(f"{counts[name]} {name}" for name in SEVERITIES if counts[name])
    lines.append(click.style(f"{len(findings)} issue(s): {summary}", bold=True))
    return "\n".join(lines)


def render_json(findings: Sequence[Finding], *, root: str) -> str:
    """Render stable JSON output for CI and automation."""
    return json.dumps(build_json_payload(findings, root=root), sort_keys=True)


def build_json_payload(findings: Sequence[Finding], *, root: str) -> dict[str, Any]:
    """Build stable JSON payload for CI and automation."""
    return {
        "findings": [finding.to_dict() for finding in findings],
        "summary": {
            "total": len(findings),
            "by_severity": severity_counts(findings),
        },
        "meta": {
            "generated_at": datetime.now(tz=UTC)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z"),
            "root": root,
            "version": __version__,
        },
    }


def render_stats(stats: dict[str, Any]) -> str:
    """Render report service totals."""
    lines = [click.style("Current stats:", bold=True)]
    for key in sorted(stats):
        lines.append(f"- {key}: {stats[key]}")
    return "\n".join(lines)


def severity_counts(findings: Sequence[Finding]) -> dict[str, int]:
    counts = {name: 0 for name in SEVERITIES}
    for finding in findings:
        counts[finding.severity] = counts.get(finding.severity, 0) + 1
    return counts


def _group_by_category(findings: Sequence[Finding]) -> list[tuple[str, list[Finding]]]:
    groups: dict[str, list[Finding]] = {}
    for finding in findings:
        groups.setdefault(finding.category, []).append(finding)
    return list(groups.items())


def render_scans(scans: Sequence[dict[str, Any]]) -> str:
    """Render archived scan records, one line per scan."""
    if not scans:
        return "No scans recorded yet."
    lines = [click.style("Scan history:", bold=True)]
    for scan in scans:
        issues = scan.get("fileIssues") or scan.get("issues") or []
        lines.append(
            f"- {scan.get('scannedAt', '?')}  {scan.get('repoName', '?')}: "
            f"{len(issues)} issue(s)"
        )
    return "\n".join(lines)

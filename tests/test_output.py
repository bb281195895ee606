"""Output rendering tests."""

from __future__ import annotations

import json

import click

from vfy.output import render_human, render_json, render_scans, render_stats, severity_counts
from vfy.rules.base import Finding


def test_render_human_reports_clean_scan() -> None:
    assert "No issues found!" in click.unstyle(render_human([]))


def test_render_human_groups_by_category_in_first_seen_order() -> None:
    findings = [
        _finding("Secrets", "Critical", "AWS Access Key found in a.js"),
        _finding("Logging", "Low", "Debug log file detected: b.log"),
        _finding("Secrets", "High", "JWT token found in c.js"),
    ]

    output = click.unstyle(render_human(findings))
    lines = output.splitlines()
    assert lines[0] == "Secrets (2)"
    assert lines[1] == "Critical [Secrets] → AWS Access Key found in a.js"
    assert lines[2] == "   hint: hint for AWS Access Key found in a.js"
    assert lines[3] == "High [Secrets] → JWT token found in c.js"
    assert "Logging (1)" in lines
    assert lines[-1] == "3 issue(s): 1 Critical, 1 High, 1 Low"


def test_render_human_colors_by_severity() -> None:
    output = render_human([_finding("Secrets", "Critical", "m")])
    assert click.style("Critical [Secrets] → m", fg="red") in output


def test_render_json_has_stable_schema_keys() -> None:
    findings = [_finding("Crypto", "High", "Weak crypto algorithm (MD5/SHA1) used in x.js")]

    payload = json.loads(render_json(findings, root="./repo"))
    assert set(payload.keys()) == {"findings", "summary", "meta"}
    assert set(payload["meta"].keys()) == {"generated_at", "root", "version"}
    assert payload["meta"]["root"] == "./repo"
    assert payload["summary"] == {
        "total": 1,
        "by_severity": {"Critical": 0, "High": 1, "Medium": 0, "Low": 0},
    }
    assert set(payload["findings"][0].keys()) == {
        "category",
        "severity",
        "message",
        "hint",
        "rule_id",
    }


def test_severity_counts_covers_every_level() -> None:
    counts = severity_counts([_finding("Errors", "Medium", "m"), _finding("Errors", "Medium", "n")])
    assert counts == {"Critical": 0, "High": 0, "Medium": 2, "Low": 0}


def test_render_stats_and_scans() -> None:
    stats = click.unstyle(render_stats({"totalScans": 2, "totalIssuesDetected": 5}))
    assert "- totalIssuesDetected: 5" in stats
    assert "- totalScans: 2" in stats

    scans = click.unstyle(
        render_scans(
            [{"repoName": "api", "scannedAt": "2024-05-01T10:00:00Z", "fileIssues": [{}, {}]}]
        )
    )
    assert "- 2024-05-01T10:00:00Z  api: 2 issue(s)" in scans
    assert render_scans([]) == "No scans recorded yet."


def _finding(category: str, severity: str, message: str) -> Finding:
    return Finding(
        category=category,
        severity=severity,
        message=message,
        hint=f"hint for {message}",
        rule_id="test_rule",
    )

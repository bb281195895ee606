"""Helpers for building synthetic source trees in tests."""

from __future__ import annotations

from pathlib import Path


def write_file(root: Path, rel_path: str, content: str | bytes) -> Path:
    target = root / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        target.write_bytes(content)
    else:
        target.write_text(content, encoding="utf-8")
    return target


def rule_ids(findings) -> list[str]:
    return [finding.rule_id for finding in findings]

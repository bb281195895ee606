"""Finding model and rule descriptors."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol

Severity = Literal["Critical", "High", "Medium", "Low"]

SEVERITIES: tuple[Severity, ...] = ("Critical", "High", "Medium", "Low")
SEVERITY_RANK: dict[str, int] = {"Critical": 4, "High": 3, "Medium": 2, "Low": 1}


@dataclass(frozen=True, slots=True)
class Finding:
    """A single issue reported against one file by one rule."""

    category: str
    severity: Severity
    message: str
    hint: str
    rule_id: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "category": self.category,
            "severity": self.severity,
            "message": self.message,
            "hint": self.hint,
            "rule_id": self.rule_id,
        }


class Rule(Protocol):
    """Protocol for detectors applied by the file scanner."""

    rule_id: str
    kind: Literal["filename", "content"]
    category: str
    severity: Severity
    hint: str

    def evaluate(self, path: str, content: str | None) -> Finding | None:
        """Return a finding for ``path`` or ``None`` when the rule does not fire."""


@dataclass(frozen=True, slots=True)
class FilenameRule:
    """Rule matched against the lower-cased base name of a path."""

    rule_id: str
    category: str
    severity: Severity
    message: str
    hint: str
    predicate: Callable[[str], bool]
    kind: Literal["filename", "content"] = "filename"

    def evaluate(self, path: str, content: str | None) -> Finding | None:
        _ = content
        if not self.predicate(os.path.basename(path).lower()):
            return None
        return _build_finding(self, path)


@dataclass(frozen=True, slots=True)
class ContentRule:
    """Rule matched against the full decoded text of a file."""

    rule_id: str
    category: str
    severity: Severity
    message: str
    hint: str
    predicate: Callable[[str], bool]
    kind: Literal["filename", "content"] = "content"

    def evaluate(self, path: str, content: str | None) -> Finding | None:
        if content is None or not self.predicate(content):
            return None
        return _build_finding(self, path)


def severity_at_least(severity: str, threshold: str) -> bool:
    """Return True when ``severity`` ranks at or above ``threshold``."""
    return SEVERITY_RANK.get(severity, 0) >= SEVERITY_RANK[threshold]


def _build_finding(rule: FilenameRule | ContentRule, path: str) -> Finding:
    return Finding(
        category=rule.category,
        severity=rule.severity,
        message=rule.message.format(path=path),
        hint=rule.hint,
        rule_id=rule.rule_id,
    )


"""Rules package."""

from dataclasses import dataclass

from vfy.rules.base import ContentRule, FilenameRule, Finding, Rule
from vfy.rules.filenames import FILENAME_RULES
from vfy.rules.hardening import HARDENING_RULES
from vfy.rules.secrets import SECRET_RULES

CONTENT_RULES: tuple[ContentRule, ...] = SECRET_RULES + HARDENING_RULES
ALL_RULES: tuple[Rule, ...] = FILENAME_RULES + CONTENT_RULES

__all__ = [
    "ALL_RULES",
    "CONTENT_RULES",
    "FILENAME_RULES",
    "ContentRule",
    "FilenameRule",
    "Finding",
    "Rule",
    "RuleInfo",
    "build_rules",
    "default_rules",
    "list_rule_info",
]


@dataclass(frozen=True, slots=True)
class RuleInfo:
    """Rule metadata for listing and selection."""

    rule_id: str
    kind: str
    category: str
    severity: str
    hint: str
    enabled: bool


def default_rules() -> tuple[Rule, ...]:
    """Return the full rule catalog in evaluation order."""
    return ALL_RULES


def build_rules(
    *,
    enabled_rule_ids: list[str] | None = None,
    disabled_rule_ids: list[str] | None = None,
) -> tuple[Rule, ...]:
    """Select rules by id while keeping catalog order."""
    registry = {rule.rule_id: rule for rule in ALL_RULES}
    requested_ids = set(enabled_rule_ids or []) | set(disabled_rule_ids or [])
    unknown = [rule_id for rule_id in requested_ids if rule_id not in registry]
    if unknown:
        joined = ", ".join(sorted(unknown))
        raise ValueError(f"Unknown rule ids: {joined}")

    if enabled_rule_ids is None and not disabled_rule_ids:
        return ALL_RULES

    enabled_set = set(enabled_rule_ids) if enabled_rule_ids is not None else set(registry)
    disabled_set = set(disabled_rule_ids or [])
    return tuple(
        rule
        for rule in ALL_RULES
        if rule.rule_id in enabled_set and rule.rule_id not in disabled_set
    )


def list_rule_info(active: tuple[Rule, ...] | None = None) -> list[RuleInfo]:
    """Return metadata for every known rule, flagging the ones in ``active``."""
    active_ids = {rule.rule_id for rule in (active if active is not None else ALL_RULES)}
    return [
        RuleInfo(
            rule_id=rule.rule_id,
            kind=rule.kind,
            category=rule.category,
            severity=rule.severity,
            hint=rule.hint,
            enabled=rule.rule_id in active_ids,
        )
        for rule in ALL_RULES
    ]

"""Configuration loading for vfy."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from vfy.rules.base import SEVERITY_RANK

CONFIG_FILENAMES = (".vfy.toml", "vfy.toml")
PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_TOOL_KEYS = ("vfy", "vfy-scan")
API_URL_ENV = "VFY_API_URL"
DEFAULT_API_URL = "http://localhost:4000"


@dataclass(slots=True)
class ReportConfig:
    """Report sink connection settings."""

    enabled: bool = True
    api_url: str = field(default_factory=lambda: os.environ.get(API_URL_ENV, DEFAULT_API_URL))
    timeout: float = 10.0

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "api_url": self.api_url, "timeout": self.timeout}


@dataclass(slots=True)
class AppConfig:
    """Runtime configuration values resolved from project files."""

    format: str = "human"
    fail_on: str | None = None
    rule_enable: list[str] | None = None
    rule_disable: list[str] = field(default_factory=list)
    report: ReportConfig = field(default_factory=ReportConfig)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "fail_on": self.fail_on,
            "rules": {
                "enable": list(self.rule_enable) if self.rule_enable is not None else None,
                "disable": list(self.rule_disable),
            },
            "report": self.report.to_dict(),
            "source": self.source,
        }


def load_app_config(base_dir: Path, config_path: Path | None = None) -> AppConfig:
    """Load config from explicit path or directory-local files with precedence."""
    base_dir = base_dir.resolve()
    if base_dir.is_file():
        base_dir = base_dir.parent

    if config_path is not None:
        resolved = config_path if config_path.is_absolute() else (base_dir / config_path)
        if not resolved.exists():
            raise ValueError(f"Config file does not exist: {resolved}")
        mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
        return _from_mapping(mapping, source=str(resolved))

    for filename in CONFIG_FILENAMES:
        resolved = base_dir / filename
        if resolved.exists():
            mapping = _extract_config_mapping(_load_toml(resolved), source_path=resolved)
            return _from_mapping(mapping, source=str(resolved))

    pyproject_path = base_dir / PYPROJECT_FILENAME
    if pyproject_path.exists():
        mapping = _extract_config_mapping(_load_toml(pyproject_path), source_path=pyproject_path)
        if mapping:
            return _from_mapping(mapping, source=str(pyproject_path))

    return AppConfig()


def default_config_template() -> str:
    """Return a starter config template."""
    return "\n".join(
        [
            'format = "human"',
            'fail_on = "high"',
            "",
            "[report]",
            "enabled = true",
            f'api_url = "{DEFAULT_API_URL}"',
            "timeout = 10.0",
            "",
            "[rules]",
            '# enable = ["env_file", "aws_access_key"]',
            'disable = ["log_file"]',
            "",
        ]
    )


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as file_obj:
            loaded = tomllib.load(file_obj)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        return {}
    return loaded


def _extract_config_mapping(loaded: dict[str, Any], *, source_path: Path) -> dict[str, Any]:
    if source_path.name == PYPROJECT_FILENAME:
        section = _find_pyproject_tool_section(loaded)
        return section if section is not None else {}

    tool_section = _find_pyproject_tool_section(loaded)
    if tool_section is not None:
        return tool_section
    return loaded


def _find_pyproject_tool_section(loaded: dict[str, Any]) -> dict[str, Any] | None:
    tool = loaded.get("tool")
    if not isinstance(tool, dict):
        return None
    for key in PYPROJECT_TOOL_KEYS:
        section = tool.get(key)
        if isinstance(section, dict):
            return section
    return None


def _from_mapping(mapping: dict[str, Any], *, source: str) -> AppConfig:
    rules_mapping = _as_table(mapping.get("rules"), "rules")
    report_mapping = _as_table(mapping.get("report"), "report")

    raw_format = mapping.get("format", "human")
    format_value = str(raw_format).lower()
    if format_value not in {"human", "json"}:
        format_value = "human"

    raw_fail = mapping.get("fail_on")
    fail_value = None if raw_fail is None else parse_severity(raw_fail, "fail_on")

    return AppConfig(
        format=format_value,
        fail_on=fail_value,
        rule_enable=_as_str_list_or_none(rules_mapping.get("enable")),
        rule_disable=_as_str_list(rules_mapping.get("disable")),
        report=_parse_report_config(report_mapping),
        source=source,
    )


def _parse_report_config(value: dict[str, Any]) -> ReportConfig:
    defaults = ReportConfig()
    timeout = _as_float(value.get("timeout", defaults.timeout), "report.timeout")
    if timeout <= 0:
        raise ValueError("report.timeout must be > 0")
    return ReportConfig(
        enabled=_as_bool(value.get("enabled", True), "report.enabled"),
        api_url=_as_str(value.get("api_url", defaults.api_url), "report.api_url"),
        timeout=timeout,
    )


def parse_severity(raw: Any, field_name: str) -> str:
    """Normalize a severity name (any case) to its canonical spelling."""
    value = str(raw).capitalize()
    if value not in SEVERITY_RANK:
        choices = ", ".join(name.lower() for name in SEVERITY_RANK)
        raise ValueError(f"{field_name} must be one of: {choices}")
    return value


def _as_table(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{field_name} must be a table/object")
    return value


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("Expected a list of strings")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("Expected a list of strings")
        items.append(item)
    return items


def _as_str_list_or_none(value: Any) -> list[str] | None:
    if value is None:
        return None
    return _as_str_list(value)


def _as_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string")
    return value


def _as_bool(raw: Any, field_name: str) -> bool:
    if not isinstance(raw, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return raw


def _as_float(raw: Any, field_name: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{field_name} must be a number")
    return float(raw)

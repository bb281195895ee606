"""Filename rule tests."""

from __future__ import annotations

import pytest

from vfy.rules.filenames import FILENAME_RULES


def _fired(path: str) -> list[str]:
    return [
        rule.rule_id for rule in FILENAME_RULES if rule.evaluate(path, None) is not None
    ]


def test_filename_rules_keep_catalog_order() -> None:
    assert [rule.rule_id for rule in FILENAME_RULES] == [
        "env_file",
        "private_key_file",
        "config_file",
        "secret_filename",
        "log_file",
    ]


@pytest.mark.parametrize("name", [".env", ".env.local", "prod.ENV", "app/.Env.production"])
def test_env_file_rule_matches_lowercased_substring(name: str) -> None:
    assert _fired(name) == ["env_file"]


def test_env_file_finding_is_critical_secret_and_embeds_path() -> None:
    finding = FILENAME_RULES[0].evaluate("project/.env.local", None)
    assert finding is not None
    assert finding.category == "Secrets"
    assert finding.severity == "Critical"
    assert "project/.env.local" in finding.message
    assert finding.hint.startswith("Never commit .env files")


@pytest.mark.parametrize("name", ["id_rsa", "id_rsa.pub", "server.PEM", "keys/tls.pem"])
def test_private_key_file_rule(name: str) -> None:
    assert _fired(name) == ["private_key_file"]


def test_config_file_rule_requires_exact_basename() -> None:
    assert _fired("src/config.js") == ["config_file"]
    assert _fired("Config.JSON") == ["config_file"]
    assert _fired("config.jsx") == []
    assert _fired("app.config.js") == []


def test_secret_filename_rule_matches_secret_or_password() -> None:
    assert _fired("client_secret.txt") == ["secret_filename"]
    assert _fired("PasswordList.csv") == ["secret_filename"]


def test_log_file_rule_is_low_severity_logging() -> None:
    finding = FILENAME_RULES[4].evaluate("logs/debug.LOG", None)
    assert finding is not None
    assert (finding.category, finding.severity) == ("Logging", "Low")


def test_filename_rules_only_inspect_basename() -> None:
    assert _fired("secrets/.envoy/readme.md") == []
    assert _fired("password-store/main.py") == []


def test_several_filename_rules_can_fire_for_one_name() -> None:
    assert _fired("secret.env.log") == ["env_file", "secret_filename", "log_file"]

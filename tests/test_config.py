"""Config loading tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from vfy.config import DEFAULT_API_URL, AppConfig, default_config_template, load_app_config


def test_defaults_when_no_config_present(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VFY_API_URL", raising=False)

    config = load_app_config(tmp_path)
    assert config.format == "human"
    assert config.fail_on is None
    assert config.rule_enable is None
    assert config.rule_disable == []
    assert config.report.enabled is True
    assert config.report.api_url == DEFAULT_API_URL
    assert config.source is None


def test_env_var_overrides_default_api_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VFY_API_URL", "http://reports.internal:9000")

    assert AppConfig().report.api_url == "http://reports.internal:9000"


def test_dot_file_takes_precedence_over_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "\n".join(["[tool.vfy]", 'format = "human"', 'fail_on = "low"']),
        encoding="utf-8",
    )
    (tmp_path / ".vfy.toml").write_text(
        "\n".join(
            [
                'format = "json"',
                'fail_on = "HIGH"',
                "",
                "[report]",
                "enabled = false",
                'api_url = "http://example.test"',
                "timeout = 3",
                "",
                "[rules]",
                'disable = ["log_file"]',
            ]
        ),
        encoding="utf-8",
    )

    config = load_app_config(tmp_path)
    assert config.format == "json"
    assert config.fail_on == "High"
    assert config.report.enabled is False
    assert config.report.api_url == "http://example.test"
    assert config.report.timeout == 3.0
    assert config.rule_disable == ["log_file"]
    assert config.source == str(tmp_path / ".vfy.toml")


def test_pyproject_hyphenated_tool_key(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "\n".join(['[tool."vfy-scan".rules]', 'enable = ["env_file"]']),
        encoding="utf-8",
    )

    config = load_app_config(tmp_path)
    assert config.rule_enable == ["env_file"]
    assert config.source == str(tmp_path / "pyproject.toml")


def test_pyproject_without_tool_section_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")

    assert load_app_config(tmp_path).source is None


def test_explicit_config_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="does not exist"):
        load_app_config(tmp_path, config_path=Path("nope.toml"))


def test_invalid_values_raise(tmp_path: Path) -> None:
    (tmp_path / "vfy.toml").write_text('fail_on = "urgent"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="fail_on must be one of"):
        load_app_config(tmp_path)

    (tmp_path / "vfy.toml").write_text("[report]\ntimeout = 0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="report.timeout"):
        load_app_config(tmp_path)

    (tmp_path / "vfy.toml").write_text("format = [\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid TOML"):
        load_app_config(tmp_path)


def test_file_path_uses_parent_directory(tmp_path: Path) -> None:
    (tmp_path / ".vfy.toml").write_text('format = "json"\n', encoding="utf-8")
    target = tmp_path / "app.js"
    target.write_text("x\n", encoding="utf-8")

    assert load_app_config(target).format == "json"


def test_default_template_round_trips(tmp_path: Path) -> None:
    (tmp_path / ".vfy.toml").write_text(default_config_template(), encoding="utf-8")

    config = load_app_config(tmp_path)
    assert config.fail_on == "High"
    assert config.rule_disable == ["log_file"]
    assert config.rule_enable is None


def test_to_dict_reports_every_setting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VFY_API_URL", raising=False)
    config = AppConfig(fail_on="High", rule_enable=["env_file"], rule_disable=["log_file"])

    assert config.to_dict() == {
        "format": "human",
        "fail_on": "High",
        "rules": {"enable": ["env_file"], "disable": ["log_file"]},
        "report": {"enabled": True, "api_url": DEFAULT_API_URL, "timeout": 10.0},
        "source": None,
    }

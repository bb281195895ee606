"""Rules matched against file base names."""

from __future__ import annotations

from vfy.rules.base import FilenameRule

FILENAME_RULES: tuple[FilenameRule, ...] = (
    FilenameRule(
        rule_id="env_file",
        category="Secrets",
        severity="Critical",
        message="Sensitive .env file detected: {path}",
        hint="Never commit .env files. Use environment variables or secret managers.",
        predicate=lambda name: ".env" in name,
    ),
    FilenameRule(
        rule_id="private_key_file",
        category="Secrets",
        severity="Critical",
        message="Private key detected: {path}",
        hint="Remove private keys from repos. Store them securely outside version control.",
        predicate=lambda name: "id_rsa" in name or name.endswith(".pem"),
    ),
    FilenameRule(
        rule_id="config_file",
        category="Secrets",
        severity="High",
        message="Config file may contain secrets: {path}",
        hint="Check config files for hardcoded credentials. Move sensitive values to env vars.",
        predicate=lambda name: name in {"config.js", "config.json"},
    ),
    FilenameRule(
        rule_id="secret_filename",
        category="Secrets",
        severity="High",
        message="Potential secret in filename: {path}",
        hint="Avoid naming files with 'secret' or 'password'. It signals sensitive content.",
        predicate=lambda name: "secret" in name or "password" in name,
    ),
    FilenameRule(
        rule_id="log_file",
        category="Logging",
        severity="Low",
        message="Debug log file detected: {path}",
        hint="Logs may leak sensitive data. Avoid committing them.",
        predicate=lambda name: name.endswith(".log"),
    ),
)

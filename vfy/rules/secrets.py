"""Content rules for hardcoded credentials, keys and connection strings."""

from __future__ import annotations

import re
from collections.abc import Callable

from vfy.rules.base import ContentRule

AWS_ACCESS_KEY_RE = re.compile(r"AKIA[0-9A-Z]{16}")
PASSWORD_ASSIGNMENT_RE = re.compile(
    r"password\s*=\s*['\"].+['\"]", re.IGNORECASE | re.ASCII
)
API_KEY_ASSIGNMENT_RE = re.compile(
    r"api[_-]?key\s*=\s*['\"].+['\"]", re.IGNORECASE | re.ASCII
)
STRIPE_LIVE_KEY_RE = re.compile(r"sk_live_[0-9a-zA-Z]{24,}")
MONGODB_URI_RE = re.compile(r"mongodb://\S+", re.IGNORECASE | re.ASCII)
POSTGRES_URI_RE = re.compile(r"postgres://\S+", re.IGNORECASE | re.ASCII)
TOKEN_RUN_RE = re.compile(r"[A-Za-z0-9_-]+")


def matches(pattern: re.Pattern[str]) -> Callable[[str], bool]:
    """Build a predicate that is true when ``pattern`` occurs anywhere in the text."""
    return lambda text: pattern.search(text) is not None


def contains(literal: str) -> Callable[[str], bool]:
    """Build a predicate that is true when ``literal`` occurs in the text."""
    return lambda text: literal in text


def has_jwt(text: str) -> bool:
    """Look for ``eyJ<segment>.<segment>.<segment>`` in a single pass over token runs.

    The header run only needs ``eyJ`` somewhere before its last character; the
    two following runs must each be joined to the previous one by a single dot.
    """
    runs = [(match.start(), match.end()) for match in TOKEN_RUN_RE.finditer(text)]
    for index in range(len(runs) - 2):
        start, end = runs[index]
        if text.find("eyJ", start, end - 1) == -1:
            continue
        if _dot_joined(text, runs[index], runs[index + 1]) and _dot_joined(
            text, runs[index + 1], runs[index + 2]
        ):
            return True
    return False


def _dot_joined(text: str, left: tuple[int, int], right: tuple[int, int]) -> bool:
    return right[0] - left[1] == 1 and text[left[1]] == "."


SECRET_RULES: tuple[ContentRule, ...] = (
    ContentRule(
        rule_id="aws_access_key",
        category="Secrets",
        severity="Critical",
        message="AWS Access Key found in {path}",
        hint="Rotate AWS keys and use IAM roles instead of hardcoding.",
        predicate=matches(AWS_ACCESS_KEY_RE),
    ),
    ContentRule(
        rule_id="aws_secret_key",
        category="Secrets",
        severity="Critical",
        message="AWS secret key reference in {path}",
        hint="Remove AWS secrets from code. Use environment variables or secret managers.",
        predicate=contains("AWS_SECRET_KEY"),
    ),
    ContentRule(
        rule_id="hardcoded_password",
        category="Secrets",
        severity="Critical",
        message="Hardcoded password found in {path}",
        hint="Never hardcode passwords. Use env vars or secure vaults.",
        predicate=matches(PASSWORD_ASSIGNMENT_RE),
    ),
    ContentRule(
        rule_id="private_key_content",
        category="Secrets",
        severity="Critical",
        message="Private key content found in {path}",
        hint="Remove private keys from source code. Store them securely.",
        predicate=contains("BEGIN PRIVATE KEY"),
    ),
    ContentRule(
        rule_id="api_key",
        category="Secrets",
        severity="Critical",
        message="API key found in {path}",
        hint="Rotate API keys and store them outside code.",
        predicate=matches(API_KEY_ASSIGNMENT_RE),
    ),
    ContentRule(
        rule_id="stripe_live_key",
        category="Secrets",
        severity="Critical",
        message="Stripe live secret key found in {path}",
        hint="Use test keys in dev. Never commit live keys.",
        predicate=matches(STRIPE_LIVE_KEY_RE),
    ),
    ContentRule(
        rule_id="mongodb_uri",
        category="Secrets",
        severity="High",
        message="MongoDB connection string found in {path}",
        hint="Move DB connection strings to env vars.",
        predicate=matches(MONGODB_URI_RE),
    ),
    ContentRule(
        rule_id="postgres_uri",
        category="Secrets",
        severity="High",
        message="Postgres connection string found in {path}",
        hint="Store DB credentials securely outside code.",
        predicate=matches(POSTGRES_URI_RE),
    ),
    ContentRule(
        rule_id="jwt_token",
        category="Secrets",
        severity="High",
        message="JWT token found in {path}",
        hint="Never commit JWTs. Generate them dynamically.",
        predicate=has_jwt,
    ),
)

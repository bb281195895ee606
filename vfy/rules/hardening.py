"""Content rules for weak crypto, cookie flags, default creds and info leaks."""

from __future__ import annotations

import re
from collections.abc import Callable

from vfy.rules.base import ContentRule
from vfy.rules.secrets import matches

WEAK_HASH_RE = re.compile(r"crypto\.createHash\([\"'](md5|sha1)[\"']\)", re.IGNORECASE | re.ASCII)
PLAIN_SHA256_RE = re.compile(r"crypto\.createHash\([\"']sha256[\"']\)", re.IGNORECASE | re.ASCII)
COOKIE_CALL_RE = re.compile(r"res\.cookie\(", re.IGNORECASE | re.ASCII)
DEFAULT_CREDENTIAL_RE = re.compile(
    r"(admin|root)\s*[:=]\s*(admin|password|1234)", re.IGNORECASE | re.ASCII
)
CONSOLE_LOG_RE = re.compile(r"console\.log\(", re.IGNORECASE | re.ASCII)
LOGGED_SECRET_RE = re.compile(r"password|token", re.IGNORECASE | re.ASCII)
S3_URI_RE = re.compile(r"s3://\S+", re.IGNORECASE | re.ASCII)
ERROR_LABEL_RE = re.compile(r"Error:", re.IGNORECASE | re.ASCII)
STACK_FRAME_RE = re.compile(r"at\s+\S+")


def _match_without(pattern: re.Pattern[str], literal: str) -> Callable[[str], bool]:
    # Flag is looked up anywhere in the file, not only next to the match.
    return lambda text: pattern.search(text) is not None and literal not in text


def _logs_sensitive_value(text: str) -> bool:
    # Later calls on a line only see a suffix of what follows the first one.
    for line in text.split("\n"):
        call = CONSOLE_LOG_RE.search(line)
        if call is not None and LOGGED_SECRET_RE.search(line, call.end() + 1):
            return True
    return False


def _all_match(*patterns: re.Pattern[str]) -> Callable[[str], bool]:
    return lambda text: all(pattern.search(text) is not None for pattern in patterns)


HARDENING_RULES: tuple[ContentRule, ...] = (
    ContentRule(
        rule_id="weak_hash",
        category="Crypto",
        severity="High",
        message="Weak crypto algorithm (MD5/SHA1) used in {path}",
        hint="Use bcrypt, Argon2, or SHA256+salt for secure hashing.",
        predicate=matches(WEAK_HASH_RE),
    ),
    ContentRule(
        rule_id="plain_sha256",
        category="Crypto",
        severity="Medium",
        message="Plain SHA256 used for password hashing in {path}",
        hint="Use adaptive algorithms like bcrypt or Argon2 for password storage.",
        predicate=matches(PLAIN_SHA256_RE),
    ),
    ContentRule(
        rule_id="cookie_missing_httponly",
        category="Cookies",
        severity="High",
        message="Cookie set without HttpOnly flag in {path}",
        hint="Add { httpOnly: true } to cookies to prevent XSS attacks.",
        predicate=_match_without(COOKIE_CALL_RE, "HttpOnly"),
    ),
    ContentRule(
        rule_id="cookie_missing_secure",
        category="Cookies",
        severity="High",
        message="Cookie set without Secure flag in {path}",
        hint="Add { secure: true } to cookies to enforce HTTPS.",
        predicate=_match_without(COOKIE_CALL_RE, "Secure"),
    ),
    ContentRule(
        rule_id="default_credentials",
        category="Credentials",
        severity="Critical",
        message="Default credential found in {path}",
        hint="Remove default creds. Enforce strong unique passwords.",
        predicate=matches(DEFAULT_CREDENTIAL_RE),
    ),
    ContentRule(
        rule_id="sensitive_logging",
        category="Logging",
        severity="Medium",
        message="Sensitive data logged in {path}",
        hint="Avoid logging passwords or tokens. Use masked logs.",
        predicate=_logs_sensitive_value,
    ),
    ContentRule(
        rule_id="public_s3_bucket",
        category="Cloud",
        severity="High",
        message="Potential public S3 bucket reference in {path}",
        hint="Ensure S3 buckets are private and access-controlled.",
        predicate=_match_without(S3_URI_RE, "private"),
    ),
    ContentRule(
        rule_id="stack_trace_exposure",
        category="Errors",
        severity="Medium",
        message="Stack trace exposure risk in {path}",
        hint="Disable stack traces in production. Use generic error messages.",
        predicate=_all_match(ERROR_LABEL_RE, STACK_FRAME_RE),
    ),
)

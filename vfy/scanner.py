"""Single-file scanning.

A file is classified in two phases. Filename rules always run. Content rules
run only when the file can be read and its bytes decode as UTF-8 text; a read
or decode failure empties the content phase for that file and nothing more.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from vfy.rules import default_rules
from vfy.rules.base import Finding, Rule

logger = logging.getLogger(__name__)


def scan_file(
    path: str | os.PathLike[str], rules: Iterable[Rule] | None = None
) -> list[Finding]:
    """Apply filename rules, then content rules, to one regular file."""
    path_text = os.fspath(path)
    active_rules = tuple(rules) if rules is not None else default_rules()

    findings: list[Finding] = []
    for rule in active_rules:
        if rule.kind != "filename":
            continue
        finding = rule.evaluate(path_text, None)
        if finding is not None:
            findings.append(finding)

    content_rules = [rule for rule in active_rules if rule.kind == "content"]
    if not content_rules:
        return findings

    content = read_text(path_text)
    if content is None:
        return findings

    for rule in content_rules:
        finding = rule.evaluate(path_text, content)
        if finding is not None:
            findings.append(finding)
    return findings


def read_text(path: str | os.PathLike[str]) -> str | None:
    """Return file text, or ``None`` when it is unreadable or not text."""
    try:
        with open(path, "rb") as file_obj:
            raw = file_obj.read()
    except OSError as exc:
        logger.debug("Skipping content rules for %s: %s", path, exc)
        return None
    return decode_text(raw, path)


def decode_text(raw: bytes, path: str | os.PathLike[str] = "<bytes>") -> str | None:
    """Decode ``raw`` as UTF-8, treating NUL bytes or invalid sequences as binary."""
    if b"\x00" in raw:
        logger.debug("Skipping content rules for %s: binary content", path)
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.debug("Skipping content rules for %s: %s", path, exc)
        return None

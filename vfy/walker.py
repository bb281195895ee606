"""Directory traversal and scan orchestration."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from vfy.rules import default_rules
from vfy.rules.base import Finding, Rule
from vfy.scanner import scan_file

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = frozenset({"node_modules", ".git", "dist"})
MAX_DEPTH = 64


class ScanError(RuntimeError):
    """Raised when the scan root itself cannot be accessed."""


@dataclass(frozen=True, slots=True)
class SkippedPath:
    """A path the walker did not descend into or scan."""

    path: str
    reason: str


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Ordered findings from one traversal plus traversal bookkeeping."""

    root: str
    findings: tuple[Finding, ...]
    files_scanned: int
    skipped: tuple[SkippedPath, ...]


def scan(
    root: str | os.PathLike[str], rules: Iterable[Rule] | None = None
) -> tuple[Finding, ...]:
    """Scan a file or directory tree and return findings in discovery order."""
    return scan_tree(root, rules=rules).findings


def scan_tree(
    root: str | os.PathLike[str],
    *,
    rules: Iterable[Rule] | None = None,
    max_depth: int = MAX_DEPTH,
) -> ScanResult:
    """Scan ``root`` and keep track of every path that was skipped."""
    active_rules = tuple(rules) if rules is not None else default_rules()
    root_text = os.fspath(root)
    skipped: list[SkippedPath] = []
    findings: list[Finding] = []
    files_scanned = 0

    for file_path in iter_files(root_text, on_skip=skipped.append, max_depth=max_depth):
        files_scanned += 1
        findings.extend(scan_file(file_path, active_rules))

    return ScanResult(
        root=root_text,
        findings=tuple(findings),
        files_scanned=files_scanned,
        skipped=tuple(skipped),
    )


def iter_files(
    root: str,
    *,
    on_skip: Callable[[SkippedPath], None] | None = None,
    max_depth: int = MAX_DEPTH,
) -> Iterator[str]:
    """Yield regular files under ``root`` in directory-listing order.

    Raises ``ScanError`` only when ``root`` cannot be stat-ed or listed.
    Everything below the root is best effort: unreadable entries, excluded
    directories, symlink loops and over-deep trees are reported through
    ``on_skip`` and otherwise ignored.
    """
    try:
        root_stat = os.stat(root)
    except OSError as exc:
        raise ScanError(f"Cannot access scan root {root}: {exc}") from exc

    report = on_skip or _ignore_skip
    if stat.S_ISREG(root_stat.st_mode):
        yield root
        return
    if not stat.S_ISDIR(root_stat.st_mode):
        report(SkippedPath(path=root, reason="not a regular file or directory"))
        return

    if _is_excluded(root):
        report(SkippedPath(path=root, reason="excluded directory"))
        return

    try:
        entries = os.listdir(root)
    except OSError as exc:
        raise ScanError(f"Cannot list scan root {root}: {exc}") from exc

    visited = {(root_stat.st_dev, root_stat.st_ino)}
    yield from _walk_entries(
        root,
        entries,
        depth=1,
        visited=visited,
        report=report,
        max_depth=max_depth,
    )


def _walk_entries(
    directory: str,
    entries: list[str],
    *,
    depth: int,
    visited: set[tuple[int, int]],
    report: Callable[[SkippedPath], None],
    max_depth: int,
) -> Iterator[str]:
    for name in entries:
        path = os.path.join(directory, name)
        try:
            entry_stat = os.stat(path)
        except OSError as exc:
            logger.debug("Skipping unreadable path %s: %s", path, exc)
            report(SkippedPath(path=path, reason=f"unreadable: {exc.strerror or exc}"))
            continue

        if stat.S_ISREG(entry_stat.st_mode):
            yield path
            continue
        if not stat.S_ISDIR(entry_stat.st_mode):
            continue

        if name in EXCLUDED_DIRS:
            report(SkippedPath(path=path, reason="excluded directory"))
            continue

        key = (entry_stat.st_dev, entry_stat.st_ino)
        if key in visited:
            logger.debug("Skipping already visited directory %s", path)
            report(SkippedPath(path=path, reason="directory already visited"))
            continue
        if depth >= max_depth:
            logger.debug("Skipping %s: depth limit %d reached", path, max_depth)
            report(SkippedPath(path=path, reason="depth limit reached"))
            continue

        try:
            children = os.listdir(path)
        except OSError as exc:
            logger.debug("Skipping unlistable directory %s: %s", path, exc)
            report(SkippedPath(path=path, reason=f"unreadable: {exc.strerror or exc}"))
            continue

        visited.add(key)
        yield from _walk_entries(
            path,
            children,
            depth=depth + 1,
            visited=visited,
            report=report,
            max_depth=max_depth,
        )


def _is_excluded(path: str) -> bool:
    return os.path.basename(os.path.normpath(path)) in EXCLUDED_DIRS


def _ignore_skip(_skipped: SkippedPath) -> None:
    return None

"""Git subprocess helpers for fetching remote repositories."""

from __future__ import annotations

import os
import re
from pathlib import Path
from subprocess import CalledProcessError, run


class GitError(RuntimeError):
    """Raised when git command execution fails."""


def clone_repository(url: str, destination: Path, *, depth: int = 1) -> Path:
    """Shallow-clone ``url`` into ``destination`` and return the checkout path."""
    if not url or url.startswith("-"):
        raise GitError(f"invalid repository url: {url!r}")
    if depth <= 0:
        raise GitError("clone depth must be > 0")

    destination.parent.mkdir(parents=True, exist_ok=True)
    _run_git(
        destination.parent,
        ["clone", "--quiet", f"--depth={depth}", "--", url, str(destination)],
        env={"GIT_TERMINAL_PROMPT": "0"},
    )
    return destination


def repo_name_from_url(url: str) -> str:
    """Return the repository name a scan of ``url`` is reported under."""
    trimmed = url.rstrip("/")
    name = re.split(r"[/:]", trimmed)[-1] if trimmed else ""
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name or trimmed or url


def _run_git(cwd: Path, args: list[str], env: dict[str, str] | None = None) -> str:
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = os.environ.copy()
        merged_env.update(env)

    try:
        completed = run(
            ["git", *args],
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
            env=merged_env,
        )
    except CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        raise GitError(stderr or f"git {' '.join(args)} failed") from exc
    except FileNotFoundError as exc:
        raise GitError("git executable not found on PATH") from exc

    return completed.stdout

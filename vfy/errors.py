"""Translate runtime failures into findings for uniform CLI output."""

from __future__ import annotations

from vfy.rules.base import Finding


def translate_error(error: BaseException | str) -> Finding:
    """Map an exception (or message) to the closest known finding category."""
    message = str(error) or type(error).__name__

    if isinstance(error, ConnectionRefusedError) or "connection refused" in message.lower():
        return Finding(
            category="Database",
            severity="Critical",
            message="Database connection refused",
            hint="Make sure your DB server is running and connection string is correct.",
            rule_id="runtime_connection_refused",
        )
    if isinstance(error, ModuleNotFoundError) or "No module named" in message:
        return Finding(
            category="Dependencies",
            severity="High",
            message="Module not found",
            hint="Run `pip install` or check your import path.",
            rule_id="runtime_module_not_found",
        )
    if isinstance(error, SyntaxError) or "SyntaxError" in message:
        return Finding(
            category="Code",
            severity="High",
            message="Syntax error in code",
            hint="Check the line mentioned in the error for typos or missing brackets.",
            rule_id="runtime_syntax_error",
        )
    return Finding(
        category="Errors",
        severity="Medium",
        message=message,
        hint="Check logs and stack trace for more details.",
        rule_id="runtime_error",
    )

"""Client for the scan report service."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any, Literal

import httpx

from vfy.config import DEFAULT_API_URL
from vfy.rules.base import Finding

logger = logging.getLogger(__name__)

SourceType = Literal["local", "github"]


class ReportError(RuntimeError):
    """Raised when the report service cannot be reached or answers badly."""


def build_report_payload(
    repo_name: str,
    findings: Iterable[Finding],
    *,
    source_type: SourceType = "local",
    source_url: str | None = None,
    scanned_at: datetime | None = None,
) -> dict[str, Any]:
    """Build the JSON body accepted by ``POST /report``."""
    timestamp = scanned_at or datetime.now(tz=UTC)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return {
        "repoName": repo_name,
        "sourceType": source_type,
        "sourceUrl": source_url,
        "issues": [finding.to_dict() for finding in findings],
        "scannedAt": timestamp.astimezone(UTC).isoformat(timespec="milliseconds").replace(
            "+00:00", "Z"
        ),
    }


class ReportClient:
    """Synchronous HTTP client for submitting scans and reading totals.

    The service stores every submitted scan per repository and keeps running
    totals. This client performs a single attempt per call; callers decide
    whether a failure matters.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(base_url=self.api_url, timeout=timeout, transport=transport)

    def __enter__(self) -> ReportClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def post_report(
        self,
        repo_name: str,
        findings: Iterable[Finding],
        *,
        source_type: SourceType = "local",
        source_url: str | None = None,
        scanned_at: datetime | None = None,
    ) -> dict[str, Any]:
        """Submit one scan and return the service acknowledgment."""
        payload = build_report_payload(
            repo_name,
            findings,
            source_type=source_type,
            source_url=source_url,
            scanned_at=scanned_at,
        )
        data = self._request("POST", "/report", json=payload)
        if not isinstance(data, dict):
            raise ReportError("Unexpected response from report service: expected an object")
        return data

    def fetch_stats(self) -> dict[str, Any]:
        """Return aggregate totals kept by the service."""
        data = self._request("GET", "/stats")
        if not isinstance(data, dict):
            raise ReportError("Unexpected response from report service: expected an object")
        return data

    def fetch_scans(self) -> list[dict[str, Any]]:
        """Return the archived scans, newest first."""
        data = self._request("GET", "/scans")
        if not isinstance(data, list):
            raise ReportError("Unexpected response from report service: expected a list")
        return newest_first(item for item in data if isinstance(item, dict))

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Report service returned HTTP %s for %s %s",
                exc.response.status_code,
                method,
                path,
            )
            raise ReportError(
                f"Report service returned HTTP {exc.response.status_code} for {path}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Report service request failed for %s %s: %s", method, path, exc)
            raise ReportError(f"Could not reach report service at {self.api_url}: {exc}") from exc
        except ValueError as exc:
            raise ReportError(f"Report service sent invalid JSON for {path}") from exc


def newest_first(scans: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Order archived scan records by ``scannedAt``, most recent first."""
    return sorted(scans, key=_scanned_at, reverse=True)


def _scanned_at(scan: dict[str, Any]) -> datetime:
    raw = scan.get("scannedAt")
    if isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.min.replace(tzinfo=UTC)

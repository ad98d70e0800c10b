"""Endpoint metadata service client (httpx).

Queries ``GET {base_url}/api/endpoint/metadata`` for the requested agent
ids and reads ``data[].metadata.host.os``.  Transient transport errors and
5xx responses are retried with backoff; repeated failures open a circuit
breaker so a dead service fails fast on later runs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

import httpx

from workflow_insights.defaults import DIRECTORY_MAX_ATTEMPTS, DIRECTORY_TIMEOUT_SECONDS
from workflow_insights.resilience import CircuitBreaker, retry

log = logging.getLogger("workflow_insights.adapters.http_directory")

METADATA_PATH = "/api/endpoint/metadata"


class DirectoryServerError(Exception):
    """5xx from the metadata service (retryable)."""
    pass


def _os_name(host: dict[str, Any]) -> str | None:
    os_info = host.get("os") or {}
    for key in ("type", "platform", "name"):
        val = os_info.get(key)
        if val:
            return str(val)
    return None


def parse_metadata(payload: dict[str, Any]) -> dict[str, str | None]:
    """Extract ``{agent_id: os_name}`` from a metadata list response."""
    resolved: dict[str, str | None] = {}
    for item in payload.get("data", []):
        metadata = item.get("metadata", item)
        agent_id = (metadata.get("agent") or {}).get("id")
        if not agent_id:
            continue
        resolved[agent_id] = _os_name(metadata.get("host") or {})
    return resolved


class HttpDirectory:
    """DirectoryPort backed by the endpoint metadata HTTP API."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str = "",
        timeout: float = DIRECTORY_TIMEOUT_SECONDS,
        max_attempts: int = DIRECTORY_MAX_ATTEMPTS,
        client: httpx.Client | None = None,
        breaker: CircuitBreaker | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"ApiKey {api_key}"
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._headers = headers
        self._breaker = breaker or CircuitBreaker(name="endpoint-directory")
        retry_kwargs: dict[str, Any] = {
            "max_attempts": max_attempts,
            "exceptions": (httpx.TransportError, DirectoryServerError),
        }
        if sleep is not None:
            retry_kwargs["sleep"] = sleep
        self._fetch = retry(**retry_kwargs)(self._fetch_once)

    def _fetch_once(self, endpoint_ids: Sequence[str]) -> dict[str, Any]:
        params = [("endpointIds", e) for e in endpoint_ids]
        params.append(("pageSize", str(len(endpoint_ids))))
        resp = self._client.get(METADATA_PATH, params=params, headers=self._headers)
        if resp.status_code >= 500:
            raise DirectoryServerError(f"metadata service returned {resp.status_code}")
        resp.raise_for_status()
        return resp.json()

    def resolve_os(self, endpoint_ids: Sequence[str]) -> dict[str, str | None]:
        if not endpoint_ids:
            return {}
        payload = self._breaker.call(self._fetch, list(endpoint_ids))
        resolved = parse_metadata(payload)
        log.debug("Resolved %d of %d endpoints", len(resolved), len(endpoint_ids))
        return resolved

    def close(self) -> None:
        self._client.close()

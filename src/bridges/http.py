"""Shared request helper for provider clients.

Every outbound call goes through fetch_json so that timeouts, transport
errors and bad status codes all surface as NetworkError, and unreadable
bodies as UpstreamDataError. No retries: callers decide how to degrade.
"""

from typing import Any

import httpx
from loguru import logger

from src.bridges.exceptions import NetworkError, UpstreamDataError


def _upstream_message(resp: httpx.Response) -> str:
    """Best-effort extraction of the provider's own error message."""
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if msg:
            return str(msg)
    return f"HTTP {resp.status_code}"


async def fetch_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    tag: str,
    **kwargs: Any,
) -> Any:
    """Execute a single request and return the decoded JSON body."""
    try:
        resp = await getattr(client, method)(url, **kwargs)
    except httpx.TimeoutException as e:
        logger.debug(f"[{tag}] Timeout on {url}")
        raise NetworkError(f"Timeout calling {url}") from e
    except httpx.HTTPError as e:
        logger.debug(f"[{tag}] {type(e).__name__} on {url}: {e}")
        raise NetworkError(f"Request to {url} failed: {e}") from e

    if resp.status_code >= 400:
        msg = _upstream_message(resp)
        logger.debug(f"[{tag}] HTTP {resp.status_code} on {url}: {msg}")
        raise NetworkError(msg)

    try:
        return resp.json()
    except ValueError as e:
        raise UpstreamDataError(f"Malformed JSON from {url}") from e

"""
Storefront - Remote API Configuration
=======================================
HTTP client factory, request helper, and get_api dependency.
Every module talks to the catalog/order service through these.
"""

import logging
from typing import Any, Optional

import httpx
from fastapi import Request

from config.settings import API_BASE_URL, API_PREFIX, API_TIMEOUT, AUTH_COOKIE
from common.exceptions import RemoteServiceError

logger = logging.getLogger("storefront.api")

# Sentinel: use the client's default timeout
DEFAULT_TIMEOUT = object()


def create_client(token: Optional[str] = None, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Build a client for the remote service, authenticated as the given user."""
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.Client(
        base_url=f"{API_BASE_URL}{API_PREFIX}",
        headers=headers,
        timeout=API_TIMEOUT,
        transport=transport,
    )


def get_api(request: Request):
    """FastAPI dependency: yields a client bound to the caller's token, auto-closes after request."""
    client = create_client(request.cookies.get(AUTH_COOKIE))
    try:
        yield client
    finally:
        client.close()


def _error_message(resp: httpx.Response) -> str:
    """Pull a human-readable message out of an error response."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:200] or f"HTTP {resp.status_code}"
    if isinstance(data, dict):
        for key in ("error", "errorMessage", "message", "detail"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {resp.status_code}"


def request_json(
    api: httpx.Client,
    method: str,
    path: str,
    timeout: Any = DEFAULT_TIMEOUT,
    **kwargs,
) -> Any:
    """
    Send one request and return the decoded JSON body (None when empty).
    Transport failures and non-2xx responses raise RemoteServiceError.
    """
    if timeout is not DEFAULT_TIMEOUT:
        kwargs["timeout"] = timeout
    try:
        resp = api.request(method, path, **kwargs)
    except httpx.HTTPError as e:
        logger.error(f"{method} {path} failed: {e}")
        raise RemoteServiceError(f"Service unavailable: {e}") from e

    if resp.status_code >= 400:
        message = _error_message(resp)
        logger.error(f"{method} {path} -> {resp.status_code}: {message}")
        raise RemoteServiceError(message, status_code=resp.status_code)

    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None

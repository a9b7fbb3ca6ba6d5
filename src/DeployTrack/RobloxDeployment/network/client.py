# === NAVMAP v1 ===
# {
#   "module": "DeployTrack.RobloxDeployment.network.client",
#   "purpose": "Shared HTTPX async client factory.",
#   "sections": [
#     {
#       "id": "get-http-client",
#       "name": "get_http_client",
#       "anchor": "function-get-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "configure-http-client",
#       "name": "configure_http_client",
#       "anchor": "function-configure-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "close-http-client",
#       "name": "close_http_client",
#       "anchor": "function-close-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "reset-http-client",
#       "name": "reset_http_client",
#       "anchor": "function-reset-http-client",
#       "kind": "function"
#     },
#     {
#       "id": "create-http-client",
#       "name": "create_http_client",
#       "anchor": "function-create-http-client",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Shared HTTPX async client factory.

Provides one lazily created ``httpx.AsyncClient`` for the process. Mirror
probes, metadata lookups and manifest fetches all go through it, so timeouts
and connection pooling are configured in a single place.

Key design:
- **Lazy initialization**: Client created on first use, not at import time.
- **Thread-safe**: Creation is guarded by a ``threading.Lock`` with a double-check.
- **Swappable**: Tests install a client backed by ``httpx.MockTransport`` via
  :func:`configure_http_client`.

Example:
    >>> from DeployTrack.RobloxDeployment.network import get_http_client, close_http_client
    >>> client = get_http_client()
    >>> response = await client.get("https://setup.rbxcdn.com/version")
    >>> await close_http_client()  # at process shutdown or test cleanup
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import httpx

from ..settings import DeploymentSettings, get_settings

logger = logging.getLogger(__name__)


# ============================================================================
# Global Client State
# ============================================================================

_client: Optional[httpx.AsyncClient] = None
_client_lock = threading.Lock()


# ============================================================================
# Public API
# ============================================================================


def get_http_client() -> httpx.AsyncClient:
    """Get or create the shared HTTPX async client.

    Returns:
        The process-wide ``httpx.AsyncClient``.
    """
    global _client

    if _client is not None and not _client.is_closed:
        return _client

    with _client_lock:
        if _client is not None and not _client.is_closed:
            return _client
        _client = create_http_client()
        return _client


def configure_http_client(client: httpx.AsyncClient) -> None:
    """Install ``client`` as the shared HTTP client.

    The previous client, if any, is forgotten but not closed. The process-wide
    resolver is dropped so the next :func:`get_resolver` call binds to ``client``.
    """
    global _client

    with _client_lock:
        _client = client
    _drop_process_resolver()
    logger.debug("HTTP client replaced", extra={"client": type(client).__name__})


async def close_http_client() -> None:
    """Close the shared HTTP client and release its connections.

    Safe to call multiple times or when no client has been created. The
    process-wide resolver is dropped with it, so a later lookup builds a new
    resolver on a new client instead of using the closed one.
    """
    global _client

    with _client_lock:
        client, _client = _client, None
    _drop_process_resolver()
    if client is not None:
        await client.aclose()
        logger.debug("HTTP client closed")


def reset_http_client() -> None:
    """Forget the shared client without closing it (test isolation only)."""
    global _client

    with _client_lock:
        _client = None
    _drop_process_resolver()


# ============================================================================
# Implementation Details
# ============================================================================


def _drop_process_resolver() -> None:
    """Forget the process-wide resolver bound to the previous shared client."""
    # Local import: the resolver module imports this one
    from ..resolver import reset_resolver

    reset_resolver()


def create_http_client(settings: Optional[DeploymentSettings] = None) -> httpx.AsyncClient:
    """Create an HTTPX async client configured from ``settings``.

    Configuration:
    - Timeouts: connect and read from settings; write/pool share the read timeout
    - Redirects: followed (mirrors redirect to regional buckets)
    - Headers: configured User-Agent

    Returns:
        A new ``httpx.AsyncClient``; the caller owns it.
    """
    settings = settings or get_settings()

    client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.read_timeout_s, connect=settings.connect_timeout_s),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )

    logger.debug(
        "HTTPX async client created",
        extra={
            "connect_timeout_s": settings.connect_timeout_s,
            "read_timeout_s": settings.read_timeout_s,
        },
    )

    return client


__all__ = [
    "close_http_client",
    "configure_http_client",
    "create_http_client",
    "get_http_client",
    "reset_http_client",
]

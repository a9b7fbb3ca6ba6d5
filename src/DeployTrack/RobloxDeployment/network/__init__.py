"""Network subsystem: the shared HTTPX async client.

Modules:
- client: HTTPX async client factory with lazy singleton pattern

Example:
    >>> from DeployTrack.RobloxDeployment.network import get_http_client
    >>> client = get_http_client()
"""

from DeployTrack.RobloxDeployment.network.client import (
    close_http_client,
    configure_http_client,
    create_http_client,
    get_http_client,
    reset_http_client,
)

__all__ = [
    "close_http_client",
    "configure_http_client",
    "create_http_client",
    "get_http_client",
    "reset_http_client",
]

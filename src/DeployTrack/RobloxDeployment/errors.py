"""Exception hierarchy shared across mirror selection and deploy lookups.

Resolving deploy information touches several unreliable upstreams: a set of
content-delivery mirrors and a primary/secondary pair of metadata endpoints.
Failures are grouped under :class:`DeploymentError` so callers can catch the
whole family, while the subclasses keep the details needed to react to a
specific failure (the HTTP status of a rejected lookup, the mirrors that were
tried, and so on).
"""

from __future__ import annotations

from typing import Optional, Sequence

__all__ = [
    "DeploymentError",
    "NoReachableOriginError",
    "RemoteFetchError",
    "TransportFailure",
    "InvalidChannelError",
]


class DeploymentError(RuntimeError):
    """Base exception for deploy information lookups."""


class NoReachableOriginError(DeploymentError):
    """Raised when none of the configured deploy mirrors answered a probe."""

    def __init__(self, origins: Sequence[str]) -> None:
        super().__init__("Unable to find an accessible Roblox deploy mirror!")
        self.origins = tuple(origins)


class RemoteFetchError(DeploymentError):
    """Raised when the metadata endpoint answers with a non-success response.

    The upstream uses 400 for an invalid binary type, 404 when no version
    details exist for the channel and 500 when it failed to load them. The raw
    body is kept so callers can surface the upstream message verbatim.
    """

    def __init__(
        self,
        status_code: int,
        body: str,
        *,
        url: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(message or f"Failed to fetch deploy info (HTTP {status_code}): {body}")
        self.status_code = status_code
        self.body = body
        self.url = url


class TransportFailure(DeploymentError):
    """Raised when every metadata endpoint was unreachable at the transport level."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class InvalidChannelError(DeploymentError, ValueError):
    """Raised when a channel name cannot be used as a URL path segment."""


# === NAVMAP v1 ===
# {
#   "module": "DeployTrack.RobloxDeployment.errors",
#   "purpose": "Define the exception hierarchy used by mirror selection and deploy lookups",
#   "sections": [
#     {"id": "base", "name": "Base Exceptions", "anchor": "BAS", "kind": "api"},
#     {"id": "network", "name": "Mirror & Metadata Errors", "anchor": "NET", "kind": "api"},
#     {"id": "channel", "name": "Channel Errors", "anchor": "CHN", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

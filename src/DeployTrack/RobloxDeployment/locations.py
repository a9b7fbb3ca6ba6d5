# === NAVMAP v1 ===
# {
#   "module": "DeployTrack.RobloxDeployment.locations",
#   "purpose": "Compose deploy file URLs for a channel on a mirror",
#   "sections": [
#     {
#       "id": "is-default-channel",
#       "name": "is_default_channel",
#       "anchor": "function-is-default-channel",
#       "kind": "function"
#     },
#     {
#       "id": "validate-channel",
#       "name": "validate_channel",
#       "anchor": "function-validate-channel",
#       "kind": "function"
#     },
#     {
#       "id": "build-location",
#       "name": "build_location",
#       "anchor": "function-build-location",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Compose deploy file URLs for a channel on a mirror.

Deploy files for the default channel live at the mirror root; every other
channel lives under ``/channel/{name}`` with the name lower-cased::

    https://setup.rbxcdn.com/version-abc-rbxPkgManifest.txt
    https://setup.rbxcdn.com/channel/zcanary/version-abc-rbxPkgManifest.txt

Everything here is pure. Pinning a mirror is the job of
:class:`~DeployTrack.RobloxDeployment.mirrors.MirrorSelector`.
"""

from __future__ import annotations

import re
from typing import Optional

from .errors import InvalidChannelError
from .settings import DEFAULT_CHANNEL

# Query, fragment and percent characters would change which URL is requested
_CHANNEL_NAME = re.compile(r"[A-Za-z0-9_.-]+")


def is_default_channel(channel: str) -> bool:
    """Return ``True`` when ``channel`` names the default channel, ignoring case."""
    return channel.lower() == DEFAULT_CHANNEL.lower()


def validate_channel(channel: str) -> str:
    """Reject channel names that cannot be used as a single URL path segment.

    Args:
        channel: Channel name as supplied by the caller.

    Returns:
        The unchanged channel name.

    Raises:
        InvalidChannelError: If the name is blank, is ``.`` or ``..``, or holds
            characters outside letters, digits, ``_``, ``.`` and ``-``.
    """
    if not channel or not channel.strip():
        raise InvalidChannelError("Channel name cannot be empty")
    if channel in {".", ".."} or not _CHANNEL_NAME.fullmatch(channel):
        raise InvalidChannelError(f"Invalid channel name: {channel!r}")
    return channel


def build_location(
    base_origin: str,
    resource: str,
    channel: Optional[str] = None,
    *,
    configured_channel: str = DEFAULT_CHANNEL,
) -> str:
    """Build the URL of a deploy file.

    Args:
        base_origin: Pinned mirror origin, without trailing slash.
        resource: Resource path starting with ``/``.
        channel: Channel the resource belongs to. ``None`` or empty falls back
            to ``configured_channel``.
        configured_channel: The caller's globally configured channel.

    Returns:
        Fully-qualified resource URL.

    Examples:
        >>> build_location("https://setup.rbxcdn.com", "/version", "LIVE")
        'https://setup.rbxcdn.com/version'
        >>> build_location("https://setup.rbxcdn.com", "/version", "ZCanary")
        'https://setup.rbxcdn.com/channel/zcanary/version'
    """
    if not channel:
        channel = configured_channel
    validate_channel(channel)

    location = base_origin.rstrip("/")
    if not is_default_channel(channel):
        location += f"/channel/{channel.lower()}"
    return location + resource


__all__ = ["build_location", "is_default_channel", "validate_channel"]

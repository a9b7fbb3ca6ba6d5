"""Public API for resolving Roblox client deploy information.

This facade exposes the resolver used to look up the build published on a
release channel, the mirror selector and location builder it relies on, the
version cache, and the exception hierarchy callers are expected to handle.

Example:
    >>> from DeployTrack.RobloxDeployment import get_resolver
    >>> info = await get_resolver().get_info("LIVE")
"""

from __future__ import annotations

from .cache import VersionCache
from .errors import (
    DeploymentError,
    InvalidChannelError,
    NoReachableOriginError,
    RemoteFetchError,
    TransportFailure,
)
from .locations import build_location, is_default_channel, validate_channel
from .logging_config import setup_logging
from .mirrors import MirrorSelector
from .models import ClientVersion
from .resolver import DeploymentResolver, get_resolver, reset_resolver
from .settings import DEFAULT_CHANNEL, DeploymentSettings, get_settings
from .versioning import compare_versions

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CHANNEL",
    "ClientVersion",
    "DeploymentError",
    "DeploymentResolver",
    "DeploymentSettings",
    "InvalidChannelError",
    "MirrorSelector",
    "NoReachableOriginError",
    "RemoteFetchError",
    "TransportFailure",
    "VersionCache",
    "__version__",
    "build_location",
    "compare_versions",
    "get_resolver",
    "get_settings",
    "is_default_channel",
    "reset_resolver",
    "setup_logging",
    "validate_channel",
]

# === NAVMAP v1 ===
# {
#   "module": "DeployTrack.RobloxDeployment.resolver",
#   "purpose": "Resolve deploy information for release channels",
#   "sections": [
#     {
#       "id": "deploymentresolver",
#       "name": "DeploymentResolver",
#       "anchor": "class-deploymentresolver",
#       "kind": "class"
#     },
#     {
#       "id": "parse-http-date",
#       "name": "_parse_http_date",
#       "anchor": "function-parse-http-date",
#       "kind": "function"
#     },
#     {
#       "id": "get-resolver",
#       "name": "get_resolver",
#       "anchor": "function-get-resolver",
#       "kind": "function"
#     },
#     {
#       "id": "reset-resolver",
#       "name": "reset_resolver",
#       "anchor": "function-reset-resolver",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Resolve deploy information for release channels.

:class:`DeploymentResolver` answers "what build is published on channel X?".
A lookup goes through these steps:

1. Reuse the cached :class:`ClientVersion` for the channel, or fetch it from
   the primary client-version endpoint, falling back to the secondary one
   only when the primary is unreachable at the transport level.
2. For channels other than the default one, resolve the default channel
   through the same method and flag the channel when its version orders
   strictly before the default channel's.
3. When extra information is requested and no timestamp is known yet, take
   the ``Last-Modified`` header of the build's package manifest on the pinned
   mirror as an approximate release time. Failures here are logged and
   ignored.
4. Store the result in the cache and return it.

Cached entries still go through steps 2 and 3, so a cached entry that was
resolved without extra information is enriched the first time a caller asks
for it.

Example:
    >>> resolver = get_resolver()
    >>> info = await resolver.get_info("zcanary", extra_information=True)
    >>> info.version, info.is_behind_default_channel, info.timestamp
"""

from __future__ import annotations

import contextvars
import email.utils
import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

import httpx
import pydantic

from .cache import VersionCache
from .errors import RemoteFetchError, TransportFailure
from .locations import build_location, is_default_channel, validate_channel
from .logging_config import generate_correlation_id
from .mirrors import MirrorSelector
from .models import ClientVersion
from .network.client import get_http_client
from .settings import DEFAULT_CHANNEL, DeploymentSettings, get_settings
from .versioning import compare_versions

logger = logging.getLogger(__name__)

VersionComparator = Callable[[str, str], int]

_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "rbxdeploy_correlation_id", default=None
)


def _parse_http_date(value: str) -> Optional[datetime]:
    """Convert an HTTP date header into an aware local-time datetime."""
    try:
        parsed = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone()


class DeploymentResolver:
    """Resolves and caches deploy information per channel.

    One resolver is meant to live for the whole process (see
    :func:`get_resolver`); it owns the pinned mirror and the version cache.

    Args:
        settings: Configuration; the memoised environment settings by default.
        client: HTTP client for every request; the shared client by default.
        cache: Version cache; a fresh empty cache by default.
        comparator: Three-way version comparison used for staleness checks.
    """

    def __init__(
        self,
        settings: Optional[DeploymentSettings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[VersionCache] = None,
        comparator: VersionComparator = compare_versions,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client or get_http_client()
        self.cache = cache if cache is not None else VersionCache()
        self.comparator = comparator
        self.mirrors = MirrorSelector(
            self.settings.mirror_origins,
            self.client,
            probe_resource=self.settings.probe_resource,
        )

    async def get_location(self, resource: str, channel: Optional[str] = None) -> str:
        """Build the URL of a deploy file on the pinned mirror.

        Pins a mirror first if none is pinned yet.

        Raises:
            NoReachableOriginError: If no mirror is reachable.
        """
        origin = await self.mirrors.resolve_base_origin()
        return build_location(origin, resource, channel, configured_channel=self.settings.channel)

    async def get_info(self, channel: str, extra_information: bool = False) -> ClientVersion:
        """Return deploy information for ``channel``.

        Args:
            channel: Channel name; used verbatim as the cache key.
            extra_information: Also try to determine the release timestamp.

        Returns:
            The cached or freshly fetched :class:`ClientVersion`.

        Raises:
            InvalidChannelError: If ``channel`` is not a usable name.
            RemoteFetchError: If the metadata endpoint rejected the lookup.
            TransportFailure: If no metadata endpoint could be contacted.
            NoReachableOriginError: If enrichment needed a mirror and none answered.
        """
        validate_channel(channel)

        token = None
        if _correlation_id.get() is None:
            token = _correlation_id.set(generate_correlation_id())
        try:
            return await self._resolve(channel, extra_information)
        finally:
            if token is not None:
                _correlation_id.reset(token)

    async def _resolve(self, channel: str, extra_information: bool) -> ClientVersion:
        """Look up ``channel`` and compare it against the default channel.

        The staleness check uses the same case-insensitive default-channel test
        as URL building, so ``"live"`` counts as the default channel and never
        recurses. Cache keys stay case-sensitive.
        """
        log_extra = self._log_extra(channel)
        logger.info(
            "Getting deploy info for channel %s (extra_information=%s)",
            channel,
            extra_information,
            extra=log_extra,
        )

        client_version = self.cache.get(channel)
        if client_version is not None:
            logger.info("Deploy information is cached", extra=log_extra)
        else:
            client_version = await self._fetch_client_version(channel)

        if not is_default_channel(channel):
            default_version = await self.get_info(DEFAULT_CHANNEL)
            client_version.is_behind_default_channel = (
                self.comparator(client_version.version, default_version.version) < 0
            )

        if extra_information and client_version.timestamp is None:
            await self._enrich_timestamp(client_version, channel)

        self.cache.put(channel, client_version)
        return client_version

    async def _fetch_client_version(self, channel: str) -> ClientVersion:
        path = f"/v2/client-version/{self.settings.binary_type}/channel/{channel}"
        primary, *fallback = self.settings.metadata_endpoints
        log_extra = self._log_extra(channel)

        url = primary + path
        try:
            response = await self.client.get(url)
        except httpx.TransportError as exc:
            if not fallback:
                raise TransportFailure(f"Failed to contact {primary}: {exc}", url=url) from exc
            logger.warning(
                "Failed to contact %s! Falling back to %s...",
                primary,
                fallback[0],
                exc_info=True,
                extra={**log_extra, "url": url},
            )
            url = fallback[0] + path
            try:
                response = await self.client.get(url)
            except httpx.TransportError as fallback_exc:
                raise TransportFailure(
                    f"Failed to contact {fallback[0]}: {fallback_exc}", url=url
                ) from fallback_exc

        raw_response = response.text

        if not response.is_success:
            logger.error(
                "Failed to fetch deploy info! Status code: %s, response: %s",
                response.status_code,
                raw_response,
                extra={**log_extra, "url": url, "status_code": response.status_code},
            )
            raise RemoteFetchError(response.status_code, raw_response, url=url)

        try:
            return ClientVersion.model_validate_json(raw_response)
        except pydantic.ValidationError as exc:
            raise RemoteFetchError(
                response.status_code,
                raw_response,
                url=url,
                message=f"Malformed deploy info from {url}: {exc.error_count()} validation error(s)",
            ) from exc

    async def _enrich_timestamp(self, client_version: ClientVersion, channel: str) -> None:
        log_extra = self._log_extra(channel)
        logger.info("Getting extra information...", extra=log_extra)

        # package manifest's last modified date approximates the deploy time
        manifest_url = await self.get_location(
            f"/{client_version.version_guid}-rbxPkgManifest.txt", channel
        )
        try:
            async with self.client.stream("GET", manifest_url) as response:
                last_modified = response.headers.get("last-modified")
        except httpx.TransportError:
            logger.warning(
                "Failed to fetch %s", manifest_url, exc_info=True, extra={**log_extra, "url": manifest_url}
            )
            return

        if not last_modified:
            logger.debug("%s has no Last-Modified header", manifest_url, extra=log_extra)
            return

        logger.info("%s - Last-Modified: %s", manifest_url, last_modified, extra=log_extra)
        timestamp = _parse_http_date(last_modified)
        if timestamp is None:
            logger.warning("Unparseable Last-Modified value %r", last_modified, extra=log_extra)
            return
        client_version.timestamp = timestamp

    @staticmethod
    def _log_extra(channel: str) -> Dict[str, Optional[str]]:
        return {"channel": channel, "correlation_id": _correlation_id.get()}


_resolver: Optional[DeploymentResolver] = None
_resolver_lock = threading.Lock()


def get_resolver() -> DeploymentResolver:
    """Return the process-wide :class:`DeploymentResolver`, creating it on first use."""
    global _resolver

    with _resolver_lock:
        if _resolver is None:
            _resolver = DeploymentResolver()
        return _resolver


def reset_resolver() -> None:
    """Drop the process-wide resolver, its cache and its pinned mirror."""
    global _resolver

    with _resolver_lock:
        _resolver = None


__all__ = ["DeploymentResolver", "VersionComparator", "get_resolver", "reset_resolver"]

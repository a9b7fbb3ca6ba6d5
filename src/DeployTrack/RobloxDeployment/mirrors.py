# === NAVMAP v1 ===
# {
#   "module": "DeployTrack.RobloxDeployment.mirrors",
#   "purpose": "Probe deploy mirrors in order and pin the first reachable one",
#   "sections": [
#     {
#       "id": "mirrorselector",
#       "name": "MirrorSelector",
#       "anchor": "class-mirrorselector",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Probe deploy mirrors in order and pin the first reachable one.

Deploy files are served from several interchangeable origins. The first
origin that answers a probe without a transport error is pinned for the
lifetime of the selector; it is never re-probed, even if it later goes down.
Any HTTP status counts as reachable.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence, Tuple

import httpx

from .errors import NoReachableOriginError

logger = logging.getLogger(__name__)


class MirrorSelector:
    """Lazily pins one deploy mirror out of an ordered candidate list.

    Concurrent callers that arrive before an origin is pinned wait on a
    shared lock, so only one probe sequence runs.

    Attributes:
        origins: Candidate origins in probe order.
        probe_resource: Path requested on each candidate.
    """

    def __init__(
        self,
        origins: Sequence[str],
        client: httpx.AsyncClient,
        *,
        probe_resource: str = "/version",
    ) -> None:
        self.origins: Tuple[str, ...] = tuple(origin.rstrip("/") for origin in origins)
        self.probe_resource = probe_resource
        self._client = client
        self._pinned: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def pinned_origin(self) -> Optional[str]:
        """The pinned origin, or ``None`` before the first successful probe."""
        return self._pinned

    async def resolve_base_origin(self) -> str:
        """Return the pinned origin, probing candidates on first use.

        Returns:
            The first origin that answered its probe.

        Raises:
            NoReachableOriginError: If every candidate failed. Nothing is
                pinned, so a later call probes again.
        """
        if self._pinned is not None:
            return self._pinned

        async with self._lock:
            if self._pinned is not None:
                return self._pinned

            for origin in self.origins:
                logger.info("Testing connection to '%s'...", origin, extra={"origin": origin})
                try:
                    await self._client.get(f"{origin}{self.probe_resource}")
                except Exception:
                    logger.warning(
                        "Connection to '%s' failed!", origin, exc_info=True, extra={"origin": origin}
                    )
                    continue

                logger.info("Connection successful!", extra={"origin": origin})
                self._pinned = origin
                return origin

        logger.error("No deploy mirror is reachable", extra={"origins": list(self.origins)})
        raise NoReachableOriginError(self.origins)

    def reset(self) -> None:
        """Forget the pinned origin (test isolation only)."""
        self._pinned = None


__all__ = ["MirrorSelector"]

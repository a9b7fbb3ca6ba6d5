"""Process-lifetime cache of resolved deploy information, keyed by channel."""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from .models import ClientVersion


class VersionCache:
    """Thread-safe channel -> :class:`ClientVersion` mapping.

    Keys are used exactly as the caller passed them. Entries are never
    expired or evicted; the set of channels a process looks up is small and
    operator-chosen.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, ClientVersion] = {}
        self._lock = threading.Lock()

    def get(self, channel: str) -> Optional[ClientVersion]:
        with self._lock:
            return self._entries.get(channel)

    def put(self, channel: str, value: ClientVersion) -> None:
        """Store ``value`` for ``channel``, replacing any previous entry."""
        with self._lock:
            self._entries[channel] = value

    def channels(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, channel: object) -> bool:
        with self._lock:
            return channel in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["VersionCache"]

"""Three-way comparison of client version strings.

Client versions are dotted numeric strings (``0.612.0.6120532``), which parse
as PEP 440 release segments. Anything :mod:`packaging` rejects falls back to a
natural ordering over digit and letter runs.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple, Union

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)


def _normalize_version(version: Optional[str]) -> Optional[Version]:
    if version is None:
        return None

    trimmed = version.strip()
    if not trimmed:
        return None

    if trimmed.lower().startswith("v"):
        trimmed = trimmed[1:]

    try:
        return Version(trimmed)
    except InvalidVersion:
        logger.debug("Could not parse '%s' as a PEP 440 version", version)
        return None


def _natural_key(value: str) -> List[Tuple[int, Union[int, str]]]:
    # (1, int) sorts above (0, str) so mixed runs stay comparable
    parts = re.findall(r"\d+|[A-Za-z]+", value.lower())
    return [(1, int(p)) if p.isdigit() else (0, p) for p in parts]


def compare_versions(version1: str, version2: str) -> int:
    """Compare two version strings.

    Args:
        version1: First version string.
        version2: Second version string.

    Returns:
        ``-1`` if ``version1`` orders before ``version2``, ``0`` if they are
        equal and ``1`` if it orders after.

    Examples:
        >>> compare_versions("0.611.0.6110456", "0.612.0.6120532")
        -1
        >>> compare_versions("1.2.3", "1.2.3")
        0
    """
    v1 = _normalize_version(version1)
    v2 = _normalize_version(version2)
    if v1 is not None and v2 is not None:
        if v1 > v2:
            return 1
        if v1 < v2:
            return -1
        return 0

    k1, k2 = _natural_key(version1 or ""), _natural_key(version2 or "")
    if k1 > k2:
        return 1
    if k1 < k2:
        return -1
    return 0


__all__ = ["compare_versions"]

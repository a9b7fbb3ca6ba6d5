"""Tests for the per-channel version cache."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from DeployTrack.RobloxDeployment.cache import VersionCache
from DeployTrack.RobloxDeployment.models import ClientVersion


def _info(version: str = "1.2.3") -> ClientVersion:
    return ClientVersion(version=version, version_guid=f"version-{version}")


def test_get_returns_none_for_unknown_channel() -> None:
    assert VersionCache().get("LIVE") is None


def test_put_then_get_returns_same_object() -> None:
    cache = VersionCache()
    info = _info()
    cache.put("LIVE", info)
    assert cache.get("LIVE") is info
    assert "LIVE" in cache
    assert len(cache) == 1


def test_keys_are_case_sensitive() -> None:
    cache = VersionCache()
    cache.put("LIVE", _info())
    assert cache.get("live") is None
    assert "live" not in cache


def test_put_overwrites_existing_entry() -> None:
    cache = VersionCache()
    cache.put("zcanary", _info("1.0.0"))
    replacement = _info("2.0.0")
    cache.put("zcanary", replacement)
    assert cache.get("zcanary") is replacement
    assert cache.channels() == ["zcanary"]


def test_concurrent_puts_keep_one_entry_per_channel() -> None:
    cache = VersionCache()

    def _store(index: int) -> None:
        cache.put(f"channel-{index % 4}", _info(f"1.0.{index}"))

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(_store, range(200)))

    assert sorted(cache.channels()) == [f"channel-{i}" for i in range(4)]

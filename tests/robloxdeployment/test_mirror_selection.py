"""Tests for deploy mirror probing and pinning."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from DeployTrack.RobloxDeployment.errors import NoReachableOriginError
from DeployTrack.RobloxDeployment.mirrors import MirrorSelector
from tests.conftest import MIRRORS, FakeUpstream

pytestmark = pytest.mark.anyio


def _selector(http_client: httpx.AsyncClient) -> MirrorSelector:
    return MirrorSelector(MIRRORS, http_client, probe_resource="/version")


async def test_pins_first_reachable_origin(upstream: FakeUpstream, http_client) -> None:
    upstream.add("https://mirror-a.test/version", text="version-abc")
    upstream.add("https://mirror-b.test/version", text="version-abc")
    selector = _selector(http_client)

    assert await selector.resolve_base_origin() == "https://mirror-a.test"
    assert selector.pinned_origin == "https://mirror-a.test"
    assert upstream.urls == ["https://mirror-a.test/version"]


async def test_skips_failing_origins_in_order(upstream: FakeUpstream, http_client) -> None:
    upstream.fail("https://mirror-a.test/version", httpx.ConnectTimeout)
    upstream.fail("https://mirror-b.test/version", httpx.ConnectError)
    upstream.add("https://mirror-c.test/version", text="version-abc")
    selector = _selector(http_client)

    assert await selector.resolve_base_origin() == "https://mirror-c.test"
    assert upstream.urls == [
        "https://mirror-a.test/version",
        "https://mirror-b.test/version",
        "https://mirror-c.test/version",
    ]


async def test_any_status_counts_as_reachable(upstream: FakeUpstream, http_client) -> None:
    upstream.add("https://mirror-a.test/version", status=403, text="AccessDenied")
    selector = _selector(http_client)

    assert await selector.resolve_base_origin() == "https://mirror-a.test"


async def test_pinned_origin_is_never_reprobed(upstream: FakeUpstream, http_client) -> None:
    upstream.fail("https://mirror-a.test/version")
    upstream.add("https://mirror-b.test/version", text="version-abc")
    selector = _selector(http_client)
    await selector.resolve_base_origin()

    # the pinned mirror going away does not trigger another probe round
    upstream.fail("https://mirror-b.test/version")
    upstream.add("https://mirror-a.test/version", text="version-abc")
    probes_before = len(upstream.requests)

    assert await selector.resolve_base_origin() == "https://mirror-b.test"
    assert len(upstream.requests) == probes_before


async def test_all_origins_failing_raises_and_pins_nothing(
    upstream: FakeUpstream, http_client, caplog: pytest.LogCaptureFixture
) -> None:
    selector = _selector(http_client)

    with caplog.at_level(logging.WARNING, logger="DeployTrack.RobloxDeployment.mirrors"):
        with pytest.raises(NoReachableOriginError) as excinfo:
            await selector.resolve_base_origin()

    assert excinfo.value.origins == tuple(MIRRORS)
    assert selector.pinned_origin is None
    assert len(upstream.requests) == 3
    assert sum("failed" in record.getMessage() for record in caplog.records) == 3


async def test_failed_round_is_retried_on_next_call(upstream: FakeUpstream, http_client) -> None:
    selector = _selector(http_client)
    with pytest.raises(NoReachableOriginError):
        await selector.resolve_base_origin()

    upstream.add("https://mirror-b.test/version", text="version-abc")
    assert await selector.resolve_base_origin() == "https://mirror-b.test"


async def test_non_network_probe_errors_are_swallowed(upstream: FakeUpstream, http_client) -> None:
    upstream.fail("https://mirror-a.test/version", RuntimeError)
    upstream.add("https://mirror-b.test/version", text="version-abc")
    selector = _selector(http_client)

    assert await selector.resolve_base_origin() == "https://mirror-b.test"


async def test_concurrent_callers_share_one_probe_round(upstream: FakeUpstream, http_client) -> None:
    upstream.fail("https://mirror-a.test/version")
    upstream.add("https://mirror-b.test/version", text="version-abc")
    selector = _selector(http_client)

    results = await asyncio.gather(*(selector.resolve_base_origin() for _ in range(5)))

    assert results == ["https://mirror-b.test"] * 5
    assert upstream.urls == ["https://mirror-a.test/version", "https://mirror-b.test/version"]


async def test_reset_forgets_pinned_origin(upstream: FakeUpstream, http_client) -> None:
    upstream.add("https://mirror-a.test/version", text="version-abc")
    selector = _selector(http_client)
    await selector.resolve_base_origin()

    selector.reset()

    assert selector.pinned_origin is None

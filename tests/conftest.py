# === NAVMAP v1 ===
# {
#   "module": "tests.conftest",
#   "purpose": "Shared pytest fixtures for suite",
#   "sections": [
#     {"id": "fake-upstream", "name": "FakeUpstream", "anchor": "class-fakeupstream", "kind": "class"},
#     {"id": "fixtures", "name": "Fixtures", "anchor": "FIX", "kind": "fixtures"}
#   ]
# }
# === /NAVMAP ===

"""
Pytest Configuration

Puts `src` on sys.path, pins the anyio backend to asyncio, and provides a
hermetic fake of the deploy upstreams (mirrors, metadata endpoints and
manifests) built on ``httpx.MockTransport``. Process-wide state (memoised
settings, the shared HTTP client and the shared resolver) is reset around
every test.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type, Union

import httpx
import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from DeployTrack.RobloxDeployment.network.client import reset_http_client  # noqa: E402
from DeployTrack.RobloxDeployment.resolver import DeploymentResolver, reset_resolver  # noqa: E402
from DeployTrack.RobloxDeployment.settings import DeploymentSettings, reset_settings  # noqa: E402

MIRRORS = ["https://mirror-a.test", "https://mirror-b.test", "https://mirror-c.test"]
PRIMARY = "https://clientsettingscdn.test"
SECONDARY = "https://clientsettings.test"


def metadata_url(channel: str, host: str = PRIMARY) -> str:
    return f"{host}/v2/client-version/WindowsPlayer/channel/{channel}"


def deploy_payload(version: str, guid: str) -> Dict[str, str]:
    return {
        "version": version,
        "clientVersionUpload": guid,
        "bootstrapperVersion": "1, 6, 0, 6120532",
    }


class FakeUpstream:
    """Routes requests by exact URL and records every request it sees.

    Unrouted URLs fail with ``httpx.ConnectError`` as if the host were down.
    """

    def __init__(self) -> None:
        self.routes: Dict[str, Union[httpx.Response, Type[Exception]]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        url: str,
        status: int = 200,
        *,
        json_body: Optional[Mapping[str, Any]] = None,
        text: str = "",
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        content = json.dumps(json_body) if json_body is not None else text
        self.routes[url] = httpx.Response(status, content=content.encode("utf-8"), headers=headers)

    def fail(self, url: str, exc_type: Type[Exception] = httpx.ConnectError) -> None:
        self.routes[url] = exc_type

    @property
    def urls(self) -> List[str]:
        return [str(request.url) for request in self.requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # Yield so concurrent callers actually interleave
        await asyncio.sleep(0)
        route = self.routes.get(str(request.url))
        if route is None:
            raise httpx.ConnectError(f"no route to {request.url}", request=request)
        if isinstance(route, type):
            message = f"simulated failure for {request.url}"
            if issubclass(route, httpx.RequestError):
                raise route(message, request=request)
            raise route(message)
        return httpx.Response(
            route.status_code,
            content=route.content,
            headers=route.headers,
            request=request,
        )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_process_state(monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.upper().startswith("RBXDEPLOY_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    reset_http_client()
    reset_resolver()
    yield
    reset_settings()
    reset_http_client()
    reset_resolver()


@pytest.fixture
def settings() -> DeploymentSettings:
    return DeploymentSettings(
        mirror_origins=list(MIRRORS),
        metadata_endpoints=[PRIMARY, SECONDARY],
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def http_client(upstream: FakeUpstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
def resolver(settings: DeploymentSettings, http_client: httpx.AsyncClient) -> DeploymentResolver:
    return DeploymentResolver(settings, client=http_client)

"""
Shared pytest fixtures for the permacanonical test suite.

Provides fixtures for:
- A controllable clock and an in-memory release cache
- A fake GitHub API (replaces urlopen in the update client)
- An UpdateClient wired to both
"""

import json
from typing import Any
from urllib.error import URLError

import pytest

from permacanonical.core.cache import ReleaseCache
from permacanonical.core.update_client import UpdateClient
from permacanonical.host import StaticPluginHost

BASENAME = "permacanonical/permacanonical.php"


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None


class FakeGitHub:
    """Records requests and answers with a canned body or error."""

    def __init__(self) -> None:
        self.requests: list[Any] = []
        self.timeouts: list[float] = []
        self.body: bytes = b""
        self.error: Exception | None = None

    def release(self, **fields: Any) -> None:
        self.body = json.dumps(fields).encode("utf-8")

    def urlopen(self, req: Any, timeout: float | None = None) -> FakeResponse:
        self.requests.append(req)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def fail(self, error: Exception | None = None) -> None:
        self.error = error or URLError("connection refused")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ReleaseCache:
    return ReleaseCache(clock=clock)


@pytest.fixture
def github(monkeypatch: pytest.MonkeyPatch) -> FakeGitHub:
    fake = FakeGitHub()
    monkeypatch.setattr("permacanonical.core.update_client.urlopen", fake.urlopen)
    return fake


@pytest.fixture
def plugin_host(tmp_path) -> StaticPluginHost:
    plugins_dir = tmp_path / "plugins"
    plugins_dir.mkdir()
    return StaticPluginHost(str(plugins_dir))


@pytest.fixture
def client(cache: ReleaseCache, plugin_host: StaticPluginHost) -> UpdateClient:
    return UpdateClient(
        plugin_basename=BASENAME,
        github_owner="acme",
        github_repo="widget",
        version="1.0.1",
        cache=cache,
        host=plugin_host,
    )

"""Common test fixtures."""

from typing import Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.health import ProbeExecutor, StatusAggregator, StatusCache
from app.main import create_app
from app.services.node_directory import NodeDirectory

MEDIA_SERVERS = [
    "https://player1.test",
    "https://player2.test",
    "https://player3.test",
]


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def media_handler(
    statuses: Dict[str, int], failures: Dict[str, Exception] = None
) -> Callable[[httpx.Request], httpx.Response]:
    """MockTransport handler answering per host; unknown hosts get 404."""
    failures = failures or {}

    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host in failures:
            raise failures[host]
        return httpx.Response(statuses.get(host, 404))

    return handler


def make_prober(handler: Callable[[httpx.Request], httpx.Response]) -> ProbeExecutor:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ProbeExecutor(timeout=1.0, client=client)


@pytest.fixture
def node_directory() -> NodeDirectory:
    """Directory with two backend nodes."""
    return NodeDirectory.from_mapping({"n1": "http://n1:5279/", "n2": "http://n2:5279/"})


@pytest.fixture
def media_servers() -> List[str]:
    return list(MEDIA_SERVERS)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def healthy_aggregator(node_directory, media_servers) -> StatusAggregator:
    """Aggregator whose media servers all answer with the sentinel code."""
    return StatusAggregator(
        node_directory, make_prober(media_handler({})), media_servers=media_servers
    )


@pytest.fixture
def client_factory():
    """Build a TestClient whose /status is served by the given cache."""

    def factory(cache: StatusCache) -> TestClient:
        app = create_app()
        app.state.status_cache = cache
        return TestClient(app)

    return factory


@pytest.fixture(name="media_handler")
def media_handler_fixture():
    return media_handler


@pytest.fixture(name="make_prober")
def make_prober_fixture():
    return make_prober

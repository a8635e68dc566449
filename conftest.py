"""Global pytest fixtures for testing."""

import contextlib
from collections.abc import AsyncGenerator, Callable, Iterator
from unittest.mock import AsyncMock, patch

import dotenv
import httpx
import pytest
import pytest_asyncio

from opml_core.schemas import Feed
from opml_rss import create_client

with contextlib.suppress(OSError):
    dotenv.load_dotenv()

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that records every request it serves."""

    def __init__(self, handler: Handler):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def count(self, path: str | None = None) -> int:
        """Return how many requests were served, optionally for one path."""
        if path is None:
            return len(self.requests)
        return sum(1 for request in self.requests if request.url.path == path)


@pytest.fixture
def make_feed() -> Callable[..., Feed]:
    """Factory for Feed instances."""

    def _make(
        title: str = "Test Feed",
        url: str = "https://feeds.example.com/feed.xml",
        categories: list[str] | None = None,
        html_url: str | None = None,
    ) -> Feed:
        return Feed(title=title, xml_url=url, html_url=html_url, category=categories or [])

    return _make


@pytest.fixture
def transport_factory() -> Callable[[Handler], RecordingTransport]:
    """Build a recording mock transport from a request handler."""
    return RecordingTransport


@pytest_asyncio.fixture
async def client_factory() -> AsyncGenerator[Callable[..., httpx.AsyncClient], None]:
    """Create validator clients bound to mock transports; closes them on teardown."""
    clients: list[httpx.AsyncClient] = []

    def _make(transport: httpx.AsyncBaseTransport, timeout: float = 10.0) -> httpx.AsyncClient:
        client = create_client(timeout, transport=transport)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def backoff_sleep() -> Iterator[AsyncMock]:
    """Replace backoff sleeps with an AsyncMock so retry tests run instantly."""
    with patch("opml_rss.validator._backoff_sleep", new=AsyncMock()) as mocked:
        yield mocked

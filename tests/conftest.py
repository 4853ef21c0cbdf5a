"""Shared fixtures for the dependents tests."""

import asyncio
import socket
import threading
from collections.abc import Generator
from contextlib import closing

import pytest
from aiohttp import web

from tests.mock_server import MockDependent, create_app, make_dependents


@pytest.fixture
def sixty_two_dependents() -> list[MockDependent]:
    """Three pages' worth of dependents, as in the "62 Repositories" case."""
    return make_dependents(62)


# =============================================================================
# Mock GitHub over real HTTP
# =============================================================================


def find_free_port() -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class ThreadedAppServer:
    """Serve an aiohttp application from its own event loop thread.

    The drivers under test run their own (sync or async) clients, so the
    server can't share their loop.
    """

    host = "127.0.0.1"

    def __init__(self, app: web.Application) -> None:
        self.app = app
        self.port = find_free_port()
        self._loop = asyncio.new_event_loop()
        self._runner = web.AppRunner(app)
        self._ready = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def _serve(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_until_complete(self._runner.setup())
        site = web.TCPSite(self._runner, self.host, self.port)
        self._loop.run_until_complete(site.start())
        self._ready.set()
        self._loop.run_forever()

    def __enter__(self) -> "ThreadedAppServer":
        self._thread.start()
        if not self._ready.wait(timeout=5.0):
            raise RuntimeError(f"mock server on port {self.port} did not start")
        return self

    def __exit__(self, *args: object) -> None:
        asyncio.run_coroutine_threadsafe(
            self._runner.cleanup(), self._loop
        ).result(timeout=5.0)
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5.0)
        self._loop.close()


@pytest.fixture
def dependents_server(
    sixty_two_dependents: list[MockDependent],
) -> Generator[ThreadedAppServer, None, None]:
    """Mock GitHub listing sixty-two dependents of any repository.

    Requested URLs are recorded in ``server.app[HITS]``.
    """
    with ThreadedAppServer(create_app(sixty_two_dependents)) as server:
        yield server


@pytest.fixture
def server_url(dependents_server: ThreadedAppServer) -> str:
    """First dependents page of octo/lib on the mock server."""
    return f"{dependents_server.url}/octo/lib/network/dependents"

import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from config import Config  # noqa: E402


class FakeResponse:
    def __init__(self, status, body=""):
        self.status = status
        self.body = body

    async def text(self):
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession.

    ``routes`` maps a URL to ``(status, body)``, to an exception raised on
    every request, or to a list of such outcomes consumed one per request.
    A bytes body is decoded as UTF-8 when the text is read.
    Unknown URLs answer 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        route = self.routes.get(url, (404, ""))
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, BaseException):
            raise route
        status, body = route
        return FakeResponse(status, body)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


@pytest.fixture()
def make_session():
    return FakeSession


@pytest.fixture()
def fast_config(tmp_path):
    return Config(
        output_path=str(tmp_path / "data" / "examples.json"),
        snippets_dir=str(tmp_path / "data" / "snippets"),
        backoff_sec=0.0,
        delay_sec=0.0,
        overview_attempts=2,
        detail_attempts=1,
    )

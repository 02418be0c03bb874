# tests/conftest.py
from collections.abc import Callable

import httpx
import pytest

from portal.config import Settings

UPSTREAM = "https://vault.test/api/v1.3"
RELAY = "https://relay.test"


def make_settings(**overrides) -> Settings:
    """Isolated settings: never read .env, always pin the three secrets explicitly."""
    values = {
        "VAULTRE_API_URL": UPSTREAM,
        "VAULTRE_API_TOKEN": "token-abcdef123456",
        "VAULTRE_API_KEY": "key-abcdef123456",
        "RELAY_BASE_URL": RELAY,
        "HTTP_BACKOFF_BASE_S": 0.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def cfg() -> Settings:
    return make_settings()


@pytest.fixture
def missing_cfg() -> Settings:
    return make_settings(VAULTRE_API_URL=None, VAULTRE_API_TOKEN=None, VAULTRE_API_KEY=None)


class Recorder:
    """MockTransport wrapper that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder():
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> Recorder:
        return Recorder(handler)

    return _make

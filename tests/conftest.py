import json

import httpx
import pytest

from educloud.client import EduCloudClient
from educloud.config import Settings
from educloud.gateway.navigator import RecordingNavigator
from educloud.shared.storage import MemoryStorage

API_URL = "http://api.test/api"


class FakeApi:
    """Canned responses keyed by (method, path); every request is recorded."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method, path, status=200, json=None):
        self.routes[(method.upper(), path)] = (status, json)

    def calls_to(self, method, path):
        return [c for c in self.calls if c["method"] == method.upper() and c["path"] == path]

    def record(self, request: httpx.Request) -> str:
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        self.calls.append(
            {
                "method": request.method,
                "path": path,
                "params": dict(request.url.params),
                "json": json.loads(request.content) if request.content else None,
                "auth": request.headers.get("authorization"),
            }
        )
        return path

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = self.record(request)
        status, payload = self.routes.get((request.method, path), (404, {"message": "Not found"}))
        return httpx.Response(status, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_settings(**overrides) -> Settings:
    values = dict(
        API_URL=API_URL,
        ENVIRONMENT="test",
        SESSION_BACKEND="memory",
        LOG_LEVEL="WARNING",
        LOG_FORMAT="console",
        DEMO_LOGIN_ENABLED=True,
    )
    values.update(overrides)
    return Settings(**values)


async def _sign_in(client: EduCloudClient, *, provider=None, school=None):
    """Persist tokens the way a login would, then rehydrate both sessions."""
    if provider:
        await client.storage.set("provider_token", provider)
    if school:
        await client.storage.set("school_token", school)
    await client.sessions.rehydrate()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def navigator():
    return RecordingNavigator(location="/")


@pytest.fixture
async def client(settings, storage, navigator, api):
    c = EduCloudClient(settings, storage, navigator, transport=api.transport)
    yield c
    await c.aclose()


@pytest.fixture
def sign_in():
    return _sign_in


@pytest.fixture
def settings_factory():
    return make_settings

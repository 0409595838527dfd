# tests/conftest.py
import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from sdk.client import SuperGainsClient
from sdk.storage import LocalStorage

BASE_URL = "http://testserver"


class CountingSession:
    """Wraps a TestClient and records every (method, url) it is asked for."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = []

    @property
    def headers(self):
        return self.inner.headers

    def request(self, method, url, **kwargs):
        self.calls.append((method, url))
        return self.inner.request(method, url, **kwargs)

    def count(self, method, suffix):
        return sum(1 for m, u in self.calls if m == method and u.endswith(suffix))


class CountingTransport(httpx.AsyncBaseTransport):
    """Async transport that records request paths before handing them to the app."""

    def __init__(self, inner):
        self.inner = inner
        self.paths = []

    async def handle_async_request(self, request):
        self.paths.append(request.url.path)
        return await self.inner.handle_async_request(request)

    async def aclose(self):
        await self.inner.aclose()


class FakeResponse:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class StubSession:
    """Session that answers from a queue of canned responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.headers = {}
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


class FakeClock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def backend():
    client = TestClient(app)
    client.post("/reset")
    return client


@pytest.fixture
def session(backend):
    return CountingSession(TestClient(app))


@pytest.fixture
def transport():
    return CountingTransport(httpx.ASGITransport(app=app))


@pytest.fixture
def api(session, transport):
    return SuperGainsClient(base_url=BASE_URL, session=session, async_transport=transport)


@pytest.fixture
def storage():
    return LocalStorage()


@pytest.fixture
def clock():
    return FakeClock()


def make_product(backend, name="Whey Protein", price_cents=4999, stock=10, **fields):
    payload = {"name": name, "price_cents": price_cents, "stock": stock}
    payload.update(fields)
    r = backend.post("/products", json=payload)
    assert r.status_code == 201
    return r.json()["data"]


def register(backend, email="alice@example.com", password="pw"):
    r = backend.post("/users/register", json={"email": email, "password": password})
    assert r.status_code == 201
    return r.json()["data"]["accessToken"]

"""Shared fakes: an in-memory HTTP session and a controllable clock."""
import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from urllib.parse import urlsplit

import pytest
import requests

from notemap.api_client import ApiClient
from notemap.notifications import NotificationSink

BASE_URL = "http://notes.test/api"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def json(self):
        if self._text is not None:
            raise ValueError(f"Expecting value: {self._text[:20]!r}")
        return self._payload


class FakeSession:
    """Routes by endpoint path suffix; records every call made."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def route(self, endpoint, payload=None, status=200, text=None, error=None, hook=None):
        self.routes[endpoint] = (FakeResponse(status, payload, text), error, hook)

    def get(self, url, timeout=None):
        return self._handle("GET", url, timeout=timeout)

    def post(self, url, files=None, timeout=None):
        return self._handle("POST", url, files=files, timeout=timeout)

    def _handle(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        path = urlsplit(url).path
        for endpoint, (response, error, hook) in self.routes.items():
            if path.endswith(endpoint):
                if hook is not None:
                    hook()
                if error is not None:
                    raise error
                return response
        raise requests.ConnectionError(f"no route for {url}")

    def paths(self):
        return [urlsplit(c["url"]).path for c in self.calls]


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return ApiClient(BASE_URL, session=session)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier(clock):
    return NotificationSink(ttl=5.0, clock=clock)

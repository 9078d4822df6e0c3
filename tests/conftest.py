"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest
import requests

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


class FakeResponse:
    """Just enough of requests.Response for the clients."""

    def __init__(self, payload=None, status_code=200, raw=None):
        self._payload = payload
        self.status_code = status_code
        if raw is not None:
            self.content = raw
        else:
            self.content = b"" if payload is None else b"{}"

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """
    Records GET calls and answers them from a route table.

    Routes map a URL substring to either a FakeResponse, an exception
    instance (raised), or a list of those (consumed in order).
    """

    def __init__(self, routes=None):
        self.headers = {}
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        for fragment in sorted(self.routes, key=len, reverse=True):
            if fragment in url:
                answer = self.routes[fragment]
                if isinstance(answer, list):
                    answer = answer.pop(0)
                if isinstance(answer, Exception):
                    raise answer
                return answer
        raise requests.exceptions.ConnectionError(f"no route for {url}")

    def urls(self):
        return [call["url"] for call in self.calls]


@pytest.fixture()
def fake_response():
    return FakeResponse


@pytest.fixture()
def fake_session():
    """Factory: fake_session({"fragment": FakeResponse(...)})"""
    return FakeSession


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture()
def recording_sleep():
    return RecordingSleep()

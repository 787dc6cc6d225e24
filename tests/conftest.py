"""Shared test fixtures for the PRO auth client.

HTTP traffic is served by ``httpx.MockTransport``: the ``pro_api`` fixture
patches ``httpx.AsyncClient`` so every client the code under test creates
talks to an in-process fake of the PRO website instead of the network.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs

import httpx
import pytest

from pro_oauth.models import FeatureInfo, PluginSettings, ProConfig


DAY_MS = 24 * 60 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


def form_body(request: httpx.Request) -> Dict[str, str]:
    """Decode a form-encoded request body into a flat dict."""
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


class FakeProApi:
    """Routes requests by path to canned responses and records them."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, path: str, json_body: Any = None, status_code: int = 200,
           raw: Optional[bytes] = None, exc: Optional[Exception] = None) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if exc is not None:
                raise exc
            if raw is not None:
                return httpx.Response(status_code, content=raw)
            return httpx.Response(status_code, json=json_body)
        self.routes[path] = respond

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "not_found"})
        return route(request)

    def calls(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def pro_api(monkeypatch: pytest.MonkeyPatch) -> FakeProApi:
    """Fake PRO website behind every ``httpx.AsyncClient``."""
    api = FakeProApi()
    real_client = httpx.AsyncClient

    def make_client(*args: Any, **kwargs: Any) -> httpx.AsyncClient:
        kwargs["transport"] = httpx.MockTransport(api.handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", make_client)
    return api


class SaveRecorder:
    """Zero-argument persistence hook that counts its calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def save() -> SaveRecorder:
    return SaveRecorder()


@pytest.fixture
def connected_pro() -> ProConfig:
    """A PRO config with a valid token and one fresh entitlement."""
    ts = now_ms()
    return ProConfig(
        access_token="T",
        access_token_expires_in_ms=4 * 3600 * 1000,
        access_token_expires_at_time_ms=ts + 10000,
        refresh_token="R",
        credentials_should_be_deleted_at_time_ms=ts + 10000000,
        enabled_pro_features=[
            FeatureInfo(feature_name="feature-smart_conflict", expire_at_time_ms=ts + 10 * DAY_MS),
        ],
        email="user@example.com",
    )


@pytest.fixture
def plugin_settings(connected_pro: ProConfig) -> PluginSettings:
    return PluginSettings(pro=connected_pro, conflict_action="smart_conflict", service_type="s3")


def token_json(access_token: str = "new-access", expires_in: int = 3600,
               refresh_token: Optional[str] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {"access_token": access_token, "expires_in": expires_in}
    if refresh_token is not None:
        data["refresh_token"] = refresh_token
    return data

"""Shared fixtures: an in-memory fake of the Spotify accounts and Web API."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from daylist.config import Settings
from daylist.spotify.client import API_BASE_URL
from daylist.web import create_web_app
from daylist.web import dependencies

ACCESS_TOKEN = "access-123"


def playlist_item(title: str, *artists: str) -> dict[str, Any]:
    return {"track": {"name": title, "artists": [{"name": name} for name in artists]}}


@dataclass
class FakeSpotify:
    """Answers the handful of Spotify endpoints the service calls."""

    playlists: list[Any] = field(default_factory=list)
    items: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    profile: dict[str, Any] = field(
        default_factory=lambda: {"id": "listener", "display_name": "Listener"}
    )
    token_status: int = 200
    failing_paths: set[str] = field(default_factory=set)
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.url.host == "accounts.spotify.com":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            return httpx.Response(
                200,
                json={
                    "access_token": ACCESS_TOKEN,
                    "token_type": "Bearer",
                    "expires_in": 3600,
                    "scope": "playlist-read-private",
                },
            )
        if path in self.failing_paths:
            return httpx.Response(502, json={"error": {"status": 502, "message": "Bad gateway"}})
        if path == "/v1/me":
            return httpx.Response(200, json=self.profile)
        if path == "/v1/me/playlists":
            return httpx.Response(200, json={"items": self.playlists})
        if path.startswith("/v1/playlists/") and path.endswith("/tracks"):
            playlist_id = path.split("/")[3]
            if playlist_id not in self.items:
                return httpx.Response(404, json={"error": {"status": 404, "message": "Not found"}})
            return httpx.Response(200, json={"items": self.items[playlist_id]})
        return httpx.Response(404)

    def api_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=API_BASE_URL, transport=httpx.MockTransport(self.handler))

    def auth_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path == path]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        spotify_redirect_uri="http://localhost:8080/callback",
        spotify_pkce_enabled=True,
        web_host="127.0.0.1",
        web_port=8080,
        open_browser=False,
    )


@pytest.fixture
def fake_spotify() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
def app(settings: Settings, fake_spotify: FakeSpotify) -> FastAPI:
    web_app = create_web_app(
        api_client_factory=fake_spotify.api_client,
        auth_client_factory=fake_spotify.auth_client,
    )
    web_app.dependency_overrides[dependencies._get_settings] = lambda: settings
    return web_app


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def state_from(location: str) -> str:
    return parse_qs(urlparse(location).query)["state"][0]


def login(client: TestClient, code: str = "auth-code") -> httpx.Response:
    """Walk through the redirect and callback like a browser would."""
    redirect = client.get("/daylist", follow_redirects=False)
    assert redirect.status_code == 307
    state = state_from(redirect.headers["location"])
    return client.get("/callback", params={"code": code, "state": state})

"""Spotify authorization helpers (state, PKCE, code exchange)."""

from __future__ import annotations

import base64
import hashlib
import secrets
from collections.abc import Iterable
from dataclasses import dataclass

import httpx

from ..config import SPOTIFY_SCOPES
from .client import DEFAULT_TIMEOUT

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"  # noqa: S105 - OAuth endpoint
DEFAULT_SCOPES = SPOTIFY_SCOPES


class SpotifyAuthError(RuntimeError):
    """Raised when an OAuth exchange with Spotify fails."""


@dataclass(slots=True)
class TokenResponse:
    """Normalized token payload returned by Spotify."""

    access_token: str
    scope: str


def generate_code_verifier(length: int = 96) -> str:
    """Return a securely generated PKCE code verifier string."""

    # token_urlsafe yields ~4/3 chars per byte; PKCE allows 43-128 chars
    verifier = secrets.token_urlsafe(length)
    return verifier[:128]


def generate_code_challenge(code_verifier: str) -> str:
    """Derive an S256 code challenge from a verifier."""

    digest = hashlib.sha256(code_verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("utf-8")


def generate_state() -> str:
    """Return a random anti-forgery state for one authorization attempt."""

    return secrets.token_urlsafe(32)


def build_authorization_url(
    *,
    client_id: str,
    redirect_uri: str,
    state: str,
    scopes: Iterable[str] = DEFAULT_SCOPES,
    code_challenge: str | None = None,
) -> str:
    """Compose the Spotify consent-screen URL, with PKCE when a challenge is given."""

    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": " ".join(scopes),
        "state": state,
    }
    if code_challenge is not None:
        params["code_challenge"] = code_challenge
        params["code_challenge_method"] = "S256"
    return str(httpx.URL(AUTHORIZE_URL, params=params))


def _basic_auth(client_id: str, client_secret: str | None) -> httpx.BasicAuth | None:
    if client_secret is None:
        return None
    return httpx.BasicAuth(client_id, client_secret)


async def _post_token_request(
    data: dict[str, str],
    *,
    client_id: str,
    client_secret: str | None,
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, object]:
    owns_client = http_client is None
    auth = _basic_auth(client_id, client_secret)
    if auth is None:
        data.setdefault("client_id", client_id)

    http = http_client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)
    try:
        response = await http.post(
            TOKEN_URL,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            auth=auth if auth is not None else httpx.USE_CLIENT_DEFAULT,
        )
        if response.status_code >= 400:
            raise SpotifyAuthError(
                f"Spotify token endpoint returned {response.status_code}: {response.text}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise SpotifyAuthError("Spotify token endpoint returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise SpotifyAuthError("Unexpected response from Spotify token endpoint")
        return payload
    except httpx.HTTPError as exc:
        raise SpotifyAuthError("Failed to contact Spotify token endpoint") from exc
    finally:
        if owns_client:
            await http.aclose()


def _parse_token_payload(payload: dict[str, object]) -> TokenResponse:
    access_token = payload.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        raise SpotifyAuthError("Invalid token payload from Spotify")
    return TokenResponse(access_token=access_token, scope=str(payload.get("scope") or ""))


async def exchange_code_for_tokens(
    *,
    client_id: str,
    client_secret: str | None,
    code: str,
    redirect_uri: str,
    code_verifier: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> TokenResponse:
    """Exchange an authorization code for a Spotify access token."""

    data = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
    }
    if code_verifier is not None:
        data["code_verifier"] = code_verifier
    payload = await _post_token_request(
        data,
        client_id=client_id,
        client_secret=client_secret,
        http_client=http_client,
    )
    return _parse_token_payload(payload)


__all__ = [
    "AUTHORIZE_URL",
    "DEFAULT_SCOPES",
    "TOKEN_URL",
    "SpotifyAuthError",
    "TokenResponse",
    "build_authorization_url",
    "exchange_code_for_tokens",
    "generate_code_challenge",
    "generate_code_verifier",
    "generate_state",
]

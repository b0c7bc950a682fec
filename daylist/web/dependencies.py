"""FastAPI dependencies shared by the routers, including the auth gate."""

from __future__ import annotations

import logging
from typing import Annotated

import httpx
from fastapi import Depends, Request, status
from fastapi.responses import RedirectResponse

from ..config import Settings, load_settings
from ..session import SpotifySession
from ..spotify.client import SpotifyClient

logger = logging.getLogger(__name__)


class AuthorizationRequired(Exception):
    """Raised by the auth gate to send the browser to Spotify's consent screen."""

    def __init__(self, authorization_url: str) -> None:
        super().__init__(authorization_url)
        self.authorization_url = authorization_url


async def authorization_required_handler(
    request: Request, exc: AuthorizationRequired
) -> RedirectResponse:
    return RedirectResponse(
        url=exc.authorization_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT
    )


def _get_settings() -> Settings:
    return load_settings()


def _get_session(request: Request) -> SpotifySession:
    return request.app.state.session


def _get_api_http(request: Request) -> httpx.AsyncClient:
    return request.app.state.api_http


def _get_auth_http(request: Request) -> httpx.AsyncClient:
    return request.app.state.auth_http


SettingsDep = Annotated[Settings, Depends(_get_settings)]
SessionDep = Annotated[SpotifySession, Depends(_get_session)]
ApiHttpDep = Annotated[httpx.AsyncClient, Depends(_get_api_http)]
AuthHttpDep = Annotated[httpx.AsyncClient, Depends(_get_auth_http)]


async def require_spotify_client(session: SessionDep, settings: SettingsDep) -> SpotifyClient:
    """Return the session's client or redirect the caller to log in."""

    client = await session.current_client()
    if client is None:
        logger.info("No Spotify session yet; redirecting to authorization")
        raise AuthorizationRequired(session.begin_authorization(settings))
    return client


SpotifyClientDep = Annotated[SpotifyClient, Depends(require_spotify_client)]


__all__ = [
    "ApiHttpDep",
    "AuthHttpDep",
    "AuthorizationRequired",
    "SessionDep",
    "SettingsDep",
    "SpotifyClientDep",
    "authorization_required_handler",
    "require_spotify_client",
]

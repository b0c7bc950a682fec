"""Factory for the FastAPI web application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from ..session import SpotifySession
from ..spotify.client import DEFAULT_TIMEOUT, default_http_client
from . import auth_routes, daylist_routes, health
from .dependencies import AuthorizationRequired, authorization_required_handler

logger = logging.getLogger(__name__)

HttpClientFactory = Callable[[], httpx.AsyncClient]


def _default_auth_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)


def create_web_app(
    *,
    session: SpotifySession | None = None,
    api_client_factory: HttpClientFactory = default_http_client,
    auth_client_factory: HttpClientFactory = _default_auth_http_client,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    The HTTP clients for the Web API and the accounts service are opened in
    the lifespan and shared by every request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.api_http = api_client_factory()
        app.state.auth_http = auth_client_factory()
        try:
            yield
        finally:
            logger.info("Closing Spotify HTTP clients")
            await app.state.api_http.aclose()
            await app.state.auth_http.aclose()

    app = FastAPI(title="Daylist", version="0.1.0", lifespan=lifespan)
    app.state.session = session or SpotifySession()
    app.add_exception_handler(AuthorizationRequired, authorization_required_handler)
    app.include_router(health.router)
    app.include_router(auth_routes.router)
    app.include_router(daylist_routes.router)
    return app


__all__ = ["create_web_app"]

"""Spotify authorization callback."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ..config import CALLBACK_PATH
from ..spotify import auth as spotify_auth
from ..spotify.client import SpotifyClient, SpotifyClientError
from .dependencies import ApiHttpDep, AuthHttpDep, SessionDep, SettingsDep

logger = logging.getLogger(__name__)
router = APIRouter(tags=["spotify"])

TOKEN_ERROR_DETAIL = "Couldn't get token"
INTERNAL_ERROR_DETAIL = "Internal Server Error"


@router.get(CALLBACK_PATH, summary="Handle Spotify authorization callback")
async def authorization_callback(
    *,
    code: str | None = Query(None, description="Authorization code from Spotify"),
    state: str | None = Query(None, description="CSRF prevention state token"),
    error: str | None = Query(None, description="Spotify error returned during auth"),
    settings: SettingsDep,
    session: SessionDep,
    api_http: ApiHttpDep,
    auth_http: AuthHttpDep,
) -> dict[str, str]:
    """Exchange the authorization code and store the resulting client."""

    pending = session.complete_authorization(state) if state else None
    if error is not None:
        logger.warning("Spotify authorization failed: %s", error)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=TOKEN_ERROR_DETAIL)
    if pending is None:
        logger.warning("Callback state did not match any pending authorization")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=TOKEN_ERROR_DETAIL)
    if not code:
        logger.warning("Callback is missing the authorization code")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=TOKEN_ERROR_DETAIL)

    try:
        token_response = await spotify_auth.exchange_code_for_tokens(
            client_id=settings.spotify_client_id,
            client_secret=settings.spotify_client_secret,
            code=code,
            redirect_uri=settings.spotify_redirect_uri,
            code_verifier=pending.code_verifier,
            http_client=auth_http,
        )
    except spotify_auth.SpotifyAuthError as exc:
        logger.exception("Failed to exchange Spotify authorization code")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR_DETAIL
        ) from exc

    logger.debug("Spotify granted scopes: %s", token_response.scope or "(none)")
    client = SpotifyClient(access_token=token_response.access_token, http_client=api_http)
    await session.replace_client(client)

    try:
        profile = await client.get_profile()
    except SpotifyClientError as exc:
        logger.exception("Failed to fetch the Spotify profile after login")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR_DETAIL
        ) from exc

    display_name = profile.get("display_name") or profile.get("id") or ""
    logger.info("Logged in to Spotify as %s", display_name)
    return {"message": f"Welcome {display_name}"}


__all__ = ["authorization_callback", "router"]

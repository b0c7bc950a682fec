"""Bearer-token Spotify Web API client used as the session handle."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.spotify.com/v1"
PLAYLIST_PAGE_LIMIT = 50
PLAYLIST_ITEM_FIELDS = "items(track(name,artists(name)))"
DEFAULT_TIMEOUT = httpx.Timeout(10.0, read=10.0)


class SpotifyClientError(RuntimeError):
    """Raised when Spotify API responses indicate an error."""


def default_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=API_BASE_URL, timeout=DEFAULT_TIMEOUT)


def _error_message(response: httpx.Response) -> str:
    try:
        error_json = response.json()
    except ValueError:
        return response.text
    if isinstance(error_json, dict):
        error_obj = error_json.get("error")
        if isinstance(error_obj, dict) and error_obj.get("message"):
            return str(error_obj["message"])
    return response.text


class SpotifyClient:
    """Authenticated view of the Spotify Web API for one access token.

    The underlying ``httpx.AsyncClient`` is owned by the caller and may be
    shared by several instances; replacing a session never closes it.
    """

    def __init__(self, *, access_token: str, http_client: httpx.AsyncClient) -> None:
        self._access_token = access_token
        self._http = http_client

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        headers.setdefault("Authorization", f"Bearer {self._access_token}")
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Spotify API unreachable: %s %s (%s)", method, path, exc)
            raise SpotifyClientError(f"Failed to contact Spotify: {exc}") from exc

        if not (200 <= response.status_code < 300):
            logger.error(
                "Spotify API error: %s %s -> %d, body: %s",
                method,
                path,
                response.status_code,
                response.text[:1000] if response.text else "(empty)",
            )
            raise SpotifyClientError(
                f"Spotify request failed ({response.status_code}): {_error_message(response)}"
            )
        return response

    async def _get_json(self, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._request("GET", path, **kwargs)
        try:
            payload = response.json()
        except ValueError as exc:
            raise SpotifyClientError(f"Spotify returned invalid JSON for {path}") from exc
        if not isinstance(payload, dict):
            raise SpotifyClientError(f"Unexpected response shape for {path}")
        return payload

    async def get_profile(self) -> dict[str, Any]:
        return await self._get_json("/me")

    async def get_current_user_playlists(
        self, *, limit: int = PLAYLIST_PAGE_LIMIT
    ) -> list[dict[str, Any]]:
        """Return one page of the current user's playlists (max 50)."""
        payload = await self._get_json(
            "/me/playlists", params={"limit": min(limit, PLAYLIST_PAGE_LIMIT)}
        )
        items = payload.get("items")
        if not isinstance(items, list):
            return []
        return items

    async def get_playlist_items(self, playlist_id: str) -> list[dict[str, Any]]:
        """Return the first page of a playlist's items, trimmed to track names and artists."""
        payload = await self._get_json(
            f"/playlists/{playlist_id}/tracks",
            params={"fields": PLAYLIST_ITEM_FIELDS},
        )
        items = payload.get("items")
        if not isinstance(items, list):
            raise SpotifyClientError(f"Playlist {playlist_id} response has no item list")
        return items


__all__ = [
    "API_BASE_URL",
    "DEFAULT_TIMEOUT",
    "PLAYLIST_PAGE_LIMIT",
    "SpotifyClient",
    "SpotifyClientError",
    "default_http_client",
]

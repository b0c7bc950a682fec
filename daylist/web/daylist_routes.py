"""Protected endpoint that returns the user's current daylist."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException, status

from ..extractor import fetch_playlist
from ..locator import locate_daylist
from ..spotify.client import SpotifyClientError
from .dependencies import SpotifyClientDep

logger = logging.getLogger(__name__)
router = APIRouter(tags=["daylist"])

NOT_FOUND_MESSAGE = "Sorry, We couldn't find a daylist playlist"


@router.get("/daylist", summary="Tracks of the current daylist")
async def get_daylist(client: SpotifyClientDep) -> dict[str, Any]:
    playlist_id = await locate_daylist(client)
    if playlist_id is None:
        return {"message": NOT_FOUND_MESSAGE}

    try:
        playlist = await fetch_playlist(client, playlist_id)
    except SpotifyClientError as exc:
        logger.exception("Failed to fetch items of daylist %s", playlist_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error"
        ) from exc

    return {"message": "success", "data": asdict(playlist)}


__all__ = ["NOT_FOUND_MESSAGE", "get_daylist", "router"]

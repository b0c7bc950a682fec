"""Find the user's daylist among their playlists."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any, Final

from .spotify.client import PLAYLIST_PAGE_LIMIT, SpotifyClient, SpotifyClientError

logger = logging.getLogger(__name__)

# "daylist", optional spaces, one separator character, then anything up to the end.
DAYLIST_PATTERN: Final[re.Pattern[str]] = re.compile(r"daylist\s*\W\s*.*", re.ASCII)


def is_daylist_name(name: str) -> bool:
    return DAYLIST_PATTERN.fullmatch(name) is not None


def find_daylist_id(playlists: Iterable[Any]) -> str | None:
    """Return the id of the first playlist whose name looks like a daylist."""
    for playlist in playlists:
        if not isinstance(playlist, dict):
            continue
        name = playlist.get("name")
        if isinstance(name, str) and is_daylist_name(name):
            playlist_id = playlist.get("id")
            if isinstance(playlist_id, str) and playlist_id:
                return playlist_id
    return None


async def locate_daylist(client: SpotifyClient) -> str | None:
    """Look through one page of the user's playlists for the daylist.

    A failed fetch is logged and reported the same way as "no match".
    """
    try:
        playlists = await client.get_current_user_playlists(limit=PLAYLIST_PAGE_LIMIT)
    except SpotifyClientError:
        logger.exception("Failed to fetch the current user's playlists")
        return None

    playlist_id = find_daylist_id(playlists)
    if playlist_id is None:
        logger.info("No daylist among %d playlists", len(playlists))
    else:
        logger.debug("Found daylist %s", playlist_id)
    return playlist_id


__all__ = ["DAYLIST_PATTERN", "find_daylist_id", "is_daylist_name", "locate_daylist"]

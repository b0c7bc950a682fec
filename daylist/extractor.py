"""Flatten Spotify playlist items into title/artist tracks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .spotify.client import SpotifyClient


@dataclass(slots=True)
class Track:
    title: str
    artists: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Playlist:
    tracks: list[Track] = field(default_factory=list)


def _to_track(item: dict[str, Any]) -> Track:
    track = item.get("track") or {}
    return Track(
        title=track.get("name") or "",
        artists=[artist.get("name") or "" for artist in track.get("artists") or []],
    )


def extract_tracks(items: Iterable[dict[str, Any]]) -> Playlist:
    """Map playlist items to tracks, one track per item, order preserved."""
    return Playlist(tracks=[_to_track(item) for item in items])


async def fetch_playlist(client: SpotifyClient, playlist_id: str) -> Playlist:
    """Fetch a playlist's items and flatten them.

    Raises:
        SpotifyClientError: when the items cannot be fetched.
    """
    items = await client.get_playlist_items(playlist_id)
    return extract_tracks(items)


__all__ = ["Playlist", "Track", "extract_tracks", "fetch_playlist"]

"""Spotify OAuth helpers and Web API client."""

from . import auth
from .client import SpotifyClient, SpotifyClientError

__all__ = ["SpotifyClient", "SpotifyClientError", "auth"]

"""Web surface: greeting, Spotify callback and the daylist endpoint."""

from . import auth_routes, daylist_routes, health
from .app import create_web_app

__all__ = ["auth_routes", "create_web_app", "daylist_routes", "health"]

"""Local web service that serves the logged-in user's Spotify daylist."""

__version__ = "0.1.0"

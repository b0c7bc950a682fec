from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from os import getenv
from typing import Final
from urllib.parse import urlparse

from dotenv import load_dotenv

DEFAULT_REDIRECT_URI: Final[str] = "http://localhost:8080/callback"
DEFAULT_WEB_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8080
DEFAULT_SPOTIFY_PKCE_ENABLED: Final[bool] = True
DEFAULT_OPEN_BROWSER: Final[bool] = True
CALLBACK_PATH: Final[str] = "/callback"

SPOTIFY_SCOPES: Final[tuple[str, ...]] = (
    "playlist-read-private",
    "playlist-modify-private",
    "user-read-private",
)


load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when required configuration values are missing or invalid."""


def _require(name: str) -> str:
    value = getenv(name)
    if value is None or not value.strip():
        raise ConfigurationError(f"Environment variable '{name}' must be set.")
    return value.strip()


def _bool(name: str, default: bool) -> bool:
    raw = getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y"}:
        return True
    if normalized in {"0", "false", "f", "no", "n"}:
        return False
    raise ConfigurationError(
        f"Environment variable '{name}' must be a boolean-like value (true/false)."
    )


def _int(name: str, default: int) -> int:
    raw = getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable '{name}' must be an integer.") from exc


def _redirect_uri() -> str:
    """Return SPOTIFY_REDIRECT_URI, which must point at the callback route."""
    redirect_uri = (getenv("SPOTIFY_REDIRECT_URI") or DEFAULT_REDIRECT_URI).strip()
    if urlparse(redirect_uri).path.rstrip("/") != CALLBACK_PATH:
        raise ConfigurationError(
            f"SPOTIFY_REDIRECT_URI must end with '{CALLBACK_PATH}', got '{redirect_uri}'."
        )
    return redirect_uri


@dataclass(frozen=True, slots=True)
class Settings:
    """Strongly typed configuration values backed by environment variables."""

    spotify_client_id: str
    spotify_client_secret: str | None
    spotify_redirect_uri: str
    spotify_pkce_enabled: bool

    web_host: str
    web_port: int
    open_browser: bool

    @classmethod
    def from_env(cls) -> Settings:
        client_secret = getenv("SPOTIFY_CLIENT_SECRET") or None
        pkce_enabled = _bool("SPOTIFY_PKCE_ENABLED", DEFAULT_SPOTIFY_PKCE_ENABLED)
        if not pkce_enabled and client_secret is None:
            raise ConfigurationError(
                "SPOTIFY_CLIENT_SECRET is required when SPOTIFY_PKCE_ENABLED is false."
            )
        return cls(
            spotify_client_id=_require("SPOTIFY_CLIENT_ID"),
            spotify_client_secret=client_secret,
            spotify_redirect_uri=_redirect_uri(),
            spotify_pkce_enabled=pkce_enabled,
            web_host=(getenv("WEB_HOST", DEFAULT_WEB_HOST).strip() or DEFAULT_WEB_HOST),
            web_port=_int("PORT", DEFAULT_PORT),
            open_browser=_bool("OPEN_BROWSER", DEFAULT_OPEN_BROWSER),
        )


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Return cached settings constructed from the environment."""

    return Settings.from_env()


__all__ = ["CALLBACK_PATH", "SPOTIFY_SCOPES", "ConfigurationError", "Settings", "load_settings"]

"""Application entry points for the daylist service."""

from __future__ import annotations

import argparse
import logging
import webbrowser
from collections.abc import Sequence

from fastapi import FastAPI

from .config import load_settings
from .logging import setup_logging
from .web import create_web_app

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Expose a FastAPI application for ASGI servers."""

    return create_web_app()


app = create_app()


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve your Spotify daylist as JSON")
    parser.add_argument("--host", default=None, help="Interface to listen on (default: WEB_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: PORT)")
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Only print the Spotify login URL instead of opening it",
    )
    return parser.parse_args(argv)


def _open_login_page(url: str) -> None:
    try:
        opened = webbrowser.open(url, new=1, autoraise=True)
    except webbrowser.Error as exc:
        logger.warning("Could not open a browser: %s", exc)
        return
    if not opened:
        logger.warning("No browser available; open the login URL manually")


def main(argv: Sequence[str] | None = None) -> None:
    """Print the Spotify login URL, open it, and serve the API with uvicorn."""

    import uvicorn

    args = _parse_args(argv)
    setup_logging()
    settings = load_settings()
    host = args.host if args.host is not None else settings.web_host
    port = args.port if args.port is not None else settings.web_port

    login_url = app.state.session.begin_authorization(settings, pinned=True)
    print(
        "Please log in to Spotify by visiting the following page in your browser:\n\n",
        login_url,
    )
    if settings.open_browser and not args.no_browser:
        _open_login_page(login_url)

    logger.info("Listening on %s:%s (callback %s)", host, port, settings.spotify_redirect_uri)
    uvicorn.run(app, host=host, port=port, reload=False)


if __name__ == "__main__":  # pragma: no cover
    main()

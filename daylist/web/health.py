"""Greeting and health endpoints."""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter

from .dependencies import SessionDep

router = APIRouter(tags=["health"])
_start_time = time.monotonic()


@router.get("/", summary="Greeting")
async def greeting() -> dict[str, str]:
    return {"message": "Hello World!"}


@router.get("/healthz", summary="Service health status")
async def healthcheck(session: SessionDep) -> dict[str, Any]:
    """Report uptime and whether a Spotify login has completed."""

    uptime_seconds = round(time.monotonic() - _start_time, 2)
    return {
        "status": "ok",
        "uptime_seconds": uptime_seconds,
        "authenticated": await session.current_client() is not None,
    }


__all__ = ["greeting", "healthcheck", "router"]

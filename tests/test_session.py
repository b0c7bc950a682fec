"""Tests for the shared Spotify session and its readers/writer lock."""

from __future__ import annotations

import asyncio
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from daylist.config import Settings
from daylist.session import ReadWriteLock, SpotifySession
from daylist.spotify.client import SpotifyClient


@pytest.mark.asyncio
async def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()

    async with lock.read(), lock.read():
        assert lock.readers == 2
        assert not lock.writer_active

    assert lock.readers == 0


@pytest.mark.asyncio
async def test_writer_waits_for_readers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []

    async def write() -> None:
        async with lock.write():
            order.append("write")

    async with lock.read():
        writer = asyncio.create_task(write())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert not writer.done()
        order.append("read-done")

    await writer
    assert order == ["read-done", "write"]


@pytest.mark.asyncio
async def test_waiting_writer_blocks_new_readers() -> None:
    lock = ReadWriteLock()
    order: list[str] = []

    async def write() -> None:
        async with lock.write():
            order.append("write")

    async def read() -> None:
        async with lock.read():
            order.append("late-read")

    async with lock.read():
        writer = asyncio.create_task(write())
        await asyncio.sleep(0)
        reader = asyncio.create_task(read())
        await asyncio.sleep(0)
        assert order == []

    await asyncio.gather(writer, reader)
    assert order == ["write", "late-read"]


@pytest.mark.asyncio
async def test_session_starts_empty_and_keeps_latest_client() -> None:
    session = SpotifySession()
    assert await session.current_client() is None

    async with httpx.AsyncClient() as http:
        first = SpotifyClient(access_token="one", http_client=http)
        second = SpotifyClient(access_token="two", http_client=http)
        await session.replace_client(first)
        await session.replace_client(second)

        assert await session.current_client() is second


def test_each_authorization_gets_its_own_state(settings: Settings) -> None:
    session = SpotifySession()

    first = parse_qs(urlparse(session.begin_authorization(settings)).query)
    second = parse_qs(urlparse(session.begin_authorization(settings)).query)

    assert first["state"] != second["state"]
    assert first["code_challenge"] != second["code_challenge"]
    assert session.pending_count == 2


def test_pending_state_is_consumed_once(settings: Settings) -> None:
    session = SpotifySession()
    url = session.begin_authorization(settings)
    state = parse_qs(urlparse(url).query)["state"][0]

    pending = session.complete_authorization(state)

    assert pending is not None
    assert pending.code_verifier is not None
    assert session.complete_authorization(state) is None
    assert session.complete_authorization("never-issued") is None


def test_pending_states_are_capped(settings: Settings) -> None:
    session = SpotifySession(max_pending=3)
    first_state = parse_qs(urlparse(session.begin_authorization(settings)).query)["state"][0]
    for _ in range(5):
        session.begin_authorization(settings)

    assert session.pending_count == 3
    assert session.complete_authorization(first_state) is None


def test_startup_login_state_survives_later_redirects(settings: Settings) -> None:
    session = SpotifySession(max_pending=16)
    startup_url = session.begin_authorization(settings, pinned=True)
    startup_state = parse_qs(urlparse(startup_url).query)["state"][0]
    for _ in range(16):
        session.begin_authorization(settings)

    assert session.pending_count == 16
    pending = session.complete_authorization(startup_state)
    assert pending is not None
    assert pending.pinned
    assert session.complete_authorization(startup_state) is None

"""Process-wide Spotify session shared by the web handlers."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from .config import SPOTIFY_SCOPES, Settings
from .spotify import auth as spotify_auth
from .spotify.client import SpotifyClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 16


class ReadWriteLock:
    """Asyncio readers/writer lock.

    Any number of readers may hold the lock together; a writer holds it
    alone. A waiting writer blocks new readers so it cannot be starved.
    """

    def __init__(self) -> None:
        self._condition = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writer_active(self) -> bool:
        return self._writer

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._writer and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._condition:
            self._writers_waiting += 1
            try:
                await self._condition.wait_for(lambda: not self._writer and self._readers == 0)
            finally:
                self._writers_waiting -= 1
                # wake readers parked behind a writer that gave up waiting
                self._condition.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._condition:
                self._writer = False
                self._condition.notify_all()


@dataclass(slots=True)
class PendingAuthorization:
    state: str
    code_verifier: str | None
    pinned: bool = False


class SpotifySession:
    """Holds the authenticated client and the outstanding OAuth states.

    The client is absent until the first successful callback and is then
    replaced on every later login; there is no logout.
    """

    def __init__(self, *, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        self._lock = ReadWriteLock()
        self._client: SpotifyClient | None = None
        self._pending: OrderedDict[str, PendingAuthorization] = OrderedDict()
        self._max_pending = max_pending

    async def current_client(self) -> SpotifyClient | None:
        async with self._lock.read():
            return self._client

    async def replace_client(self, client: SpotifyClient) -> None:
        async with self._lock.write():
            self._client = client
        logger.info("Spotify session stored")

    def begin_authorization(self, settings: Settings, *, pinned: bool = False) -> str:
        """Issue a fresh state (and PKCE verifier) and return the consent URL.

        Pinned states (the login link printed at startup) are never evicted
        by the cap; like every state they are still consumed on first use.
        """
        state = spotify_auth.generate_state()
        code_verifier: str | None = None
        code_challenge: str | None = None
        if settings.spotify_pkce_enabled:
            code_verifier = spotify_auth.generate_code_verifier()
            code_challenge = spotify_auth.generate_code_challenge(code_verifier)

        self._pending[state] = PendingAuthorization(
            state=state, code_verifier=code_verifier, pinned=pinned
        )
        self._evict_stale()

        return spotify_auth.build_authorization_url(
            client_id=settings.spotify_client_id,
            redirect_uri=settings.spotify_redirect_uri,
            state=state,
            scopes=SPOTIFY_SCOPES,
            code_challenge=code_challenge,
        )

    def _evict_stale(self) -> None:
        unpinned = [key for key, pending in self._pending.items() if not pending.pinned]
        while len(self._pending) > self._max_pending and unpinned:
            expired = unpinned.pop(0)
            del self._pending[expired]
            logger.debug("Dropping stale authorization state %s…", expired[:8])

    def complete_authorization(self, state: str) -> PendingAuthorization | None:
        """Consume a pending state; None when it was never issued or already used."""
        return self._pending.pop(state, None)

    @property
    def pending_count(self) -> int:
        return len(self._pending)


__all__ = ["PendingAuthorization", "ReadWriteLock", "SpotifySession"]

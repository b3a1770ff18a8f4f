"""
In-memory cache index: identifier -> materialized path.
Safe for asyncio without locks (single-threaded event loop). Concurrent loads
of the same missing identifier share one pending task, so the loader runs once
and every caller sees the same result or the same exception.
"""
import asyncio
import functools
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

from audio_cache.services.models import EntryState

logger = logging.getLogger(__name__)

Loader = Callable[[str], Awaitable[Path]]


class CacheIndex:
    def __init__(self) -> None:
        self._files: dict[str, Path] = {}
        self._pending: dict[str, asyncio.Future[Path]] = {}

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._files

    def __len__(self) -> int:
        return len(self._files)

    def get(self, identifier: str) -> Optional[Path]:
        return self._files.get(identifier)

    def state(self, identifier: str) -> EntryState:
        if identifier in self._files:
            return EntryState.RESIDENT
        if identifier in self._pending:
            return EntryState.LOADING
        return EntryState.ABSENT

    async def load(self, identifier: str, loader: Loader) -> Path:
        path = self._files.get(identifier)
        if path is not None:
            logger.debug("Cache hit", extra={"identifier": identifier})
            return path

        pending = self._pending.get(identifier)
        if pending is None:
            pending = asyncio.ensure_future(loader(identifier))
            self._pending[identifier] = pending
            # Registered before any waiter, so the entry is settled by the time
            # the first caller resumes.
            pending.add_done_callback(functools.partial(self._settle, identifier))
        else:
            logger.debug("Joining in-flight load", extra={"identifier": identifier})

        # A cancelled caller must not cancel the load for the others.
        return await asyncio.shield(pending)

    def _settle(self, identifier: str, pending: "asyncio.Future[Path]") -> None:
        failed = pending.cancelled() or pending.exception() is not None
        if self._pending.get(identifier) is not pending:
            # Discarded while loading; the result is not recorded.
            return
        del self._pending[identifier]
        if not failed:
            self._files[identifier] = pending.result()

    def discard(self, identifier: str) -> None:
        self._files.pop(identifier, None)
        self._pending.pop(identifier, None)

    def clear(self) -> None:
        self._files.clear()
        self._pending.clear()

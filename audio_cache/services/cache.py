"""
Audio cache: the public surface.
  identifier → index lookup → (miss) resolve → fetch → materialize → record
Playback helpers hand the materialized path to a Player.
"""
import asyncio
import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from audio_cache.config.settings import settings
from audio_cache.services import player as playback
from audio_cache.services.fetchers import BundleFetcher, ByteFetcher, NetworkFetcher
from audio_cache.services.index import CacheIndex
from audio_cache.services.materializer import materialize
from audio_cache.services.models import EntryState
from audio_cache.services.player import FfplayPlayer, Player, ReleaseMode
from audio_cache.services.resolver import resolve

logger = logging.getLogger(__name__)


class AudioCache:
    """
    Copies bundled or remote audio to local storage so it can be played from
    a file path. Pre-load with `load`/`load_all`, or let `play`/`loop` load on
    demand. Each instance owns its own index.

    With a `fixed_player`, every playback call reuses (and restarts) that one
    player. Without it, each call gets a fresh player from `player_factory`, so
    sounds can overlap.
    """

    def __init__(
        self,
        prefix: Optional[str] = None,
        fixed_player: Optional[Player] = None,
        *,
        temp_dir: Optional[Path] = None,
        bundle: Optional[BundleFetcher] = None,
        network: Optional[ByteFetcher] = None,
        player_factory: Callable[[], Player] = FfplayPlayer,
    ):
        self.temp_dir = Path(temp_dir) if temp_dir is not None else settings.TEMP_DIR
        self.fixed_player = fixed_player
        self._bundle = bundle or BundleFetcher.from_settings()
        # Per instance; a shared fetcher keeps its own default.
        self.prefix = prefix if prefix is not None else self._bundle.prefix
        self._network = network or NetworkFetcher()
        self._player_factory = player_factory
        self._index = CacheIndex()
        self._background: set[asyncio.Task] = set()

    async def __aenter__(self) -> "AudioCache":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ── Loading ─────────────────────────────────────────────────────────────

    async def load(self, identifier: str) -> Path:
        """Materialize `identifier` once and return its local path."""
        return await self._index.load(identifier, self.fetch_to_file)

    async def load_all(self, identifiers: Iterable[str]) -> list[Path]:
        """
        Load every identifier concurrently, preserving order.
        Fails as a whole if any one fails, but only after every load settled,
        so no entry is left loading behind the error.
        """
        results = await asyncio.gather(
            *(self.load(i) for i in identifiers), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    async def fetch_to_file(self, identifier: str) -> Path:
        """Fetch and write `identifier` to its cache path without recording it."""
        source = resolve(identifier, self.temp_dir)
        if source.is_network:
            data = await self._network.fetch(source)
        else:
            data = await self._bundle.fetch(source, prefix=self.prefix)
        return await materialize(source.local_path, data)

    def state(self, identifier: str) -> EntryState:
        return self._index.state(identifier)

    def is_cached(self, identifier: str) -> bool:
        return identifier in self._index

    def clear(self, identifier: str) -> None:
        """Forget `identifier`. The file stays on disk."""
        self._index.discard(identifier)

    def clear_cache(self) -> None:
        """Forget every entry. Files stay on disk."""
        self._index.clear()

    # ── Playback ────────────────────────────────────────────────────────────

    async def play(self, identifier: str, volume: float = 1.0) -> Player:
        path = await self.load(identifier)
        player = self._player()
        await player.play(str(path), volume=volume, is_local=True)
        return player

    async def loop(self, identifier: str, volume: float = 1.0) -> Player:
        """
        Like `play`, but the sound starts over when it finishes.
        Returns once playback has been requested; the start is not awaited.
        """
        path = await self.load(identifier)
        player = self._player()
        player.set_release_mode(ReleaseMode.LOOP)
        task = asyncio.create_task(player.play(str(path), volume=volume, is_local=True))
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return player

    def disable_log(self) -> None:
        """Silence player logs (they are noisy outside of debugging)."""
        playback.set_log_enabled(False)

    def _player(self) -> Player:
        return self.fixed_player if self.fixed_player is not None else self._player_factory()

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Looped playback failed to start", exc_info=task.exception())

    async def close(self) -> None:
        close = getattr(self._network, "close", None)
        if close is not None:
            await close()

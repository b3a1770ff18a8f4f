"""
Playback collaborator.
- Player protocol the cache hands local paths to.
- FfplayPlayer: plays a file through an `ffplay` subprocess (async wrapper).
- Process-wide log toggle shared by every player.
"""
import asyncio
import logging
import shutil
from enum import Enum
from typing import Optional, Protocol

from audio_cache.config.settings import settings
from audio_cache.errors import PlaybackError

logger = logging.getLogger(__name__)

_log_enabled = True


class ReleaseMode(str, Enum):
    RELEASE = "release"  # play once
    LOOP = "loop"        # start over when finished


class Player(Protocol):
    async def play(self, path: str, *, volume: float = 1.0, is_local: bool = True) -> None:
        ...

    def set_release_mode(self, mode: ReleaseMode) -> None:
        ...

    async def stop(self) -> None:
        ...


def set_log_enabled(enabled: bool) -> None:
    """Toggle player logging for the whole process (ffplay output included)."""
    global _log_enabled
    _log_enabled = enabled
    logger.setLevel(logging.NOTSET if enabled else logging.WARNING)


def log_enabled() -> bool:
    return _log_enabled


class FfplayPlayer:
    def __init__(self, ffplay_path: Optional[str] = None):
        self._ffplay = ffplay_path or settings.FFPLAY_PATH
        self._proc: Optional[asyncio.subprocess.Process] = None
        self._lock = asyncio.Lock()
        self.release_mode = ReleaseMode.RELEASE

    @property
    def is_playing(self) -> bool:
        return self._proc is not None and self._proc.returncode is None

    def set_release_mode(self, mode: ReleaseMode) -> None:
        self.release_mode = mode

    async def play(self, path: str, *, volume: float = 1.0, is_local: bool = True) -> None:
        """
        Start playback and return once ffplay is running.
        Any sound already playing on this player is stopped first; overlapping
        calls are serialized so only the last one keeps playing.
        """
        ensure_ffplay(self._ffplay)
        async with self._lock:
            await self.stop()

            cmd = build_command(self._ffplay, path, volume, self.release_mode)
            logger.info(
                "Starting playback",
                extra={"path": path, "volume": volume, "mode": self.release_mode.value, "local": is_local},
            )
            try:
                self._proc = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=None if _log_enabled else asyncio.subprocess.DEVNULL,
                )
            except OSError as exc:
                raise PlaybackError(f"Could not start ffplay: {exc}") from exc

    async def wait(self) -> int:
        """Wait for the current sound to finish. Returns ffplay's exit code."""
        if self._proc is None:
            return 0
        return await self._proc.wait()

    async def stop(self) -> None:
        if not self.is_playing:
            return
        try:
            self._proc.terminate()  # type: ignore[union-attr]
        except ProcessLookupError:
            pass
        await self._proc.wait()  # type: ignore[union-attr]
        logger.debug("Playback stopped")


def build_command(ffplay: str, path: str, volume: float, mode: ReleaseMode) -> list[str]:
    level = max(0, min(100, round(volume * 100)))
    return [
        ffplay,
        "-nodisp",
        "-autoexit",
        "-loglevel", "error" if _log_enabled else "quiet",
        "-volume", str(level),
        *(["-loop", "0"] if mode == ReleaseMode.LOOP else []),
        path,
    ]


def ensure_ffplay(ffplay: Optional[str] = None) -> None:
    ffplay = ffplay or settings.FFPLAY_PATH
    if not shutil.which(ffplay):
        raise PlaybackError(
            f"ffplay not found at '{ffplay}'. "
            "Ensure ffmpeg is installed and in PATH."
        )

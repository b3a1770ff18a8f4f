"""
Byte fetchers: retrieve the raw bytes behind an AssetSource.
- BundleFetcher reads packaged resources (importlib.resources) or a directory.
- NetworkFetcher performs a single GET over a shared aiohttp session.
"""
import asyncio
import logging
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Optional, Protocol, Union

import aiohttp

from audio_cache.config.settings import settings
from audio_cache.errors import AssetNotFound
from audio_cache.services.models import AssetSource
from audio_cache.utils.http_client import build_session, fetch_bytes

logger = logging.getLogger(__name__)


class ByteFetcher(Protocol):
    async def fetch(self, source: AssetSource) -> bytes:
        ...


class BundleFetcher:
    """Reads `<root>/<prefix><identifier>`."""

    def __init__(self, root: Union[Traversable, Path], prefix: str = ""):
        self.root = root
        self.prefix = prefix

    @classmethod
    def from_settings(cls, prefix: Optional[str] = None) -> "BundleFetcher":
        if settings.ASSET_PACKAGE:
            root: Union[Traversable, Path] = resources.files(settings.ASSET_PACKAGE)
        else:
            root = settings.ASSET_DIR
        return cls(root, settings.ASSET_PREFIX if prefix is None else prefix)

    async def fetch(self, source: AssetSource, prefix: Optional[str] = None) -> bytes:
        prefix = self.prefix if prefix is None else prefix
        name = f"{prefix}{source.identifier}"
        return await asyncio.to_thread(self._read, name)

    def _read(self, name: str) -> bytes:
        resource = self.root.joinpath(name)
        try:
            return resource.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            logger.warning("Bundled asset missing", extra={"asset": name})
            raise AssetNotFound(name) from exc


class NetworkFetcher:
    """GETs the literal identifier URL. Owns its session only if it built it."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self._session = session
        self._owns_session = session is None

    async def fetch(self, source: AssetSource) -> bytes:
        if self._session is None or self._session.closed:
            self._session = build_session()
            self._owns_session = True
        data = await fetch_bytes(self._session, source.identifier)
        logger.debug(
            "Fetched network asset",
            extra={"url": source.identifier[:120], "size_kb": len(data) // 1024},
        )
        return data

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

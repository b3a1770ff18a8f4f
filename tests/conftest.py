"""Pytest fixtures for audio_cache tests."""
import asyncio
from pathlib import Path
from typing import Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from audio_cache.services.fetchers import BundleFetcher
from audio_cache.services.models import AssetSource
from audio_cache.services.player import ReleaseMode

CLICK = b"RIFF-click-bytes"
MUSIC = b"ID3-music-bytes" * 64


class FakePlayer:
    """Records calls instead of making sound."""

    def __init__(self):
        self.played: list[tuple[str, float, bool]] = []
        self.release_mode = ReleaseMode.RELEASE

    async def play(self, path: str, *, volume: float = 1.0, is_local: bool = True) -> None:
        self.played.append((path, volume, is_local))

    def set_release_mode(self, mode: ReleaseMode) -> None:
        self.release_mode = mode

    async def stop(self) -> None:
        pass


class CountingFetcher:
    """Wraps a fetcher and counts how often each identifier is fetched."""

    def __init__(self, inner):
        self.inner = inner
        self.calls: list[str] = []

    @property
    def prefix(self) -> str:
        return self.inner.prefix

    @prefix.setter
    def prefix(self, value: str) -> None:
        self.inner.prefix = value

    async def fetch(self, source: AssetSource, **kwargs) -> bytes:
        self.calls.append(source.identifier)
        return await self.inner.fetch(source, **kwargs)

    def count(self, identifier: Optional[str] = None) -> int:
        if identifier is None:
            return len(self.calls)
        return self.calls.count(identifier)

    async def close(self) -> None:
        close = getattr(self.inner, "close", None)
        if close is not None:
            await close()


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def asset_root(tmp_path) -> Path:
    root = tmp_path / "bundle"
    (root / "assets" / "audio" / "sfx").mkdir(parents=True)
    (root / "assets" / "audio" / "click.wav").write_bytes(CLICK)
    (root / "assets" / "audio" / "sfx" / "music.mp3").write_bytes(MUSIC)
    return root


@pytest.fixture
def bundle(asset_root) -> CountingFetcher:
    return CountingFetcher(BundleFetcher(asset_root, prefix="assets/audio/"))


@pytest.fixture
async def audio_server():
    hits: dict[str, int] = {}

    async def serve(request: web.Request) -> web.Response:
        hits[request.path] = hits.get(request.path, 0) + 1
        return web.Response(body=MUSIC, content_type="audio/mpeg")

    async def missing(request: web.Request) -> web.Response:
        hits[request.path] = hits.get(request.path, 0) + 1
        return web.Response(status=404, text="no such track")

    app = web.Application()
    app.router.add_get("/tracks/{name}", serve)
    app.router.add_get("/missing.mp3", missing)

    server = TestServer(app)
    await server.start_server()
    yield AudioServer(server, hits)
    await server.close()


class AudioServer:
    def __init__(self, server: TestServer, hits: dict[str, int]):
        self._server = server
        self.hits = hits

    def url(self, path: str) -> str:
        return str(self._server.make_url(path))


class FfplayStub:
    """A stand-in ffplay executable plus every process spawned from it."""

    def __init__(self, path: str, spawned: list):
        self.path = path
        self.spawned = spawned

    def live(self) -> list:
        return [proc for proc in self.spawned if proc.returncode is None]


@pytest.fixture
async def ffplay_stub(tmp_path, monkeypatch):
    script = tmp_path / "ffplay"
    script.write_text("#!/bin/sh\nexec sleep 30\n")
    script.chmod(0o755)

    spawned: list[asyncio.subprocess.Process] = []
    real_exec = asyncio.create_subprocess_exec

    async def recording_exec(*args, **kwargs):
        proc = await real_exec(*args, **kwargs)
        spawned.append(proc)
        return proc

    monkeypatch.setattr(asyncio, "create_subprocess_exec", recording_exec)
    yield FfplayStub(str(script), spawned)

    for proc in spawned:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()

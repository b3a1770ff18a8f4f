"""
Exception taxonomy.
Every failure raised by the cache derives from AudioCacheError, and also from
the builtin that best describes it so callers can catch either.
"""
from typing import Optional


class AudioCacheError(Exception):
    pass


class UnsafeIdentifierError(AudioCacheError, ValueError):
    pass


class AssetNotFound(AudioCacheError, LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Bundled asset not found: {name}")


class NetworkError(AudioCacheError):
    def __init__(self, url: str, message: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        prefix = f"HTTP {status}" if status is not None else "Transport error"
        super().__init__(f"{prefix} for {url}: {message}")


class MaterializeError(AudioCacheError, OSError):
    pass


class PlaybackError(AudioCacheError):
    pass

"""Local materialization cache for bundled and remote audio assets."""
from audio_cache.errors import (
    AssetNotFound,
    AudioCacheError,
    MaterializeError,
    NetworkError,
    PlaybackError,
    UnsafeIdentifierError,
)
from audio_cache.services.cache import AudioCache
from audio_cache.services.models import AssetSource, EntryState, SourceKind
from audio_cache.services.player import FfplayPlayer, Player, ReleaseMode

__all__ = [
    "AssetNotFound",
    "AssetSource",
    "AudioCache",
    "AudioCacheError",
    "EntryState",
    "FfplayPlayer",
    "MaterializeError",
    "NetworkError",
    "PlaybackError",
    "Player",
    "ReleaseMode",
    "SourceKind",
    "UnsafeIdentifierError",
]

from audio_cache.utils.http_client import build_session, fetch_bytes
from audio_cache.utils.logging import setup_logging

__all__ = ["build_session", "fetch_bytes", "setup_logging"]

"""
Async HTTP transport for network assets.
- One GET per call, no retries
- Redirect limit and total timeout from settings
- Full body buffered in memory
"""
import asyncio
import logging

import aiohttp
from aiohttp import ClientSession, TCPConnector

from audio_cache.config.settings import settings
from audio_cache.errors import NetworkError

logger = logging.getLogger(__name__)


def build_session() -> ClientSession:
    connector = TCPConnector(limit=20)
    timeout = aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT_SECONDS)
    return ClientSession(
        connector=connector,
        timeout=timeout,
        trust_env=False,
    )


async def fetch_bytes(session: ClientSession, url: str) -> bytes:
    """GET `url` and return the raw body. Raises NetworkError on any failure."""
    try:
        async with session.get(
            url,
            allow_redirects=True,
            max_redirects=settings.HTTP_MAX_REDIRECTS,
        ) as resp:
            if not 200 <= resp.status < 300:
                body = await resp.text(errors="replace")
                logger.warning(
                    "Unexpected HTTP status",
                    extra={"url": url[:120], "status": resp.status},
                )
                raise NetworkError(url, body[:200], status=resp.status)
            return await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.warning("HTTP request failed", extra={"url": url[:120], "error": str(exc)})
        raise NetworkError(url, str(exc) or type(exc).__name__) from exc

"""
Materializer: persist fetched bytes at their cache path.
An existing file is trusted as-is. New files are written to a sibling temp
file and renamed into place, so the target path never holds a partial write.
"""
import asyncio
import contextlib
import logging
import os
import uuid
from pathlib import Path

from audio_cache.errors import MaterializeError

logger = logging.getLogger(__name__)


async def materialize(path: Path, data: bytes) -> Path:
    return await asyncio.to_thread(_write, Path(path), data)


def _write(path: Path, data: bytes) -> Path:
    if path.is_file():
        logger.debug("Already materialized", extra={"path": str(path)})
        return path

    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.part")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        logger.warning(
            "Failed to materialize asset",
            extra={"path": str(path), "error": str(exc)},
        )
        raise MaterializeError(f"Could not write {path}: {exc}") from exc

    logger.info(
        "Materialized asset",
        extra={"path": str(path), "size_kb": len(data) // 1024},
    )
    return path

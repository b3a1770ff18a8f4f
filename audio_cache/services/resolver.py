"""
Source resolution: classify an identifier as network or bundle-relative and
compute the deterministic local path it materializes to.

    http://host/a/b.mp3   ->  <temp_dir>/host/a/b.mp3
    sfx/click.wav         ->  <temp_dir>/sfx/click.wav

The bundle prefix never takes part in the local path. Identifiers are not
normalized; they are only rejected when they could escape temp_dir.
"""
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from audio_cache.errors import UnsafeIdentifierError
from audio_cache.services.models import AssetSource, SourceKind

_NETWORK_SCHEMES = frozenset({"http", "https"})


def is_network_identifier(identifier: str) -> bool:
    try:
        return urlsplit(identifier).scheme in _NETWORK_SCHEMES
    except ValueError:
        return False


def resolve(identifier: str, temp_dir: Path) -> AssetSource:
    if not identifier:
        raise UnsafeIdentifierError("Identifier must not be empty")

    if is_network_identifier(identifier):
        parsed = urlsplit(identifier)
        host = parsed.hostname
        if not host:
            raise UnsafeIdentifierError(f"URL has no host: {identifier}")
        relative = PurePosixPath(host, parsed.path.lstrip("/"))
        kind = SourceKind.NETWORK
    else:
        relative = PurePosixPath(identifier)
        if relative.is_absolute() or Path(identifier).is_absolute():
            raise UnsafeIdentifierError(f"Absolute paths are not allowed: {identifier}")
        kind = SourceKind.BUNDLE

    if ".." in relative.parts:
        raise UnsafeIdentifierError(f"Path traversal is not allowed: {identifier}")

    return AssetSource(
        identifier=identifier,
        kind=kind,
        local_path=Path(temp_dir).joinpath(*relative.parts),
    )

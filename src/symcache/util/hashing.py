"""Digest helpers for committed symbol files."""

from __future__ import annotations

import hashlib
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def sha256sum(path: Path, *, chunk_size: int = _CHUNK_SIZE) -> str:
    """Return the SHA-256 hex digest of the file at `path`."""
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


__all__ = ["sha256sum"]

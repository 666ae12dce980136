"""Path utilities for locating the cache root."""

from __future__ import annotations

from pathlib import Path


def cache_root_from_config(root: str | Path) -> Path:
    """Return the absolute cache root for a configured path (``~`` expanded)."""
    return Path(root).expanduser().resolve()


__all__ = ["cache_root_from_config"]

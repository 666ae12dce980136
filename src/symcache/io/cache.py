"""Local cache layout for symbol files."""

from __future__ import annotations

from pathlib import Path

from symcache.types import SymbolKey


def relative_path(key: SymbolKey) -> str:
    """Return the symbol-server relative path ``name/GUIDAGE/name`` for `key`.

    The GUID is uppercased and the age is appended in hex with no separator,
    padding or prefix, matching the layout symbol servers and existing cache
    trees already use.
    """
    name = key.name.lower()
    return f"{name}/{key.guid.upper()}{key.age:x}/{name}"


def cache_path_for(key: SymbolKey, *, root: Path) -> Path:
    """Return the absolute location where `key` is stored under `root`."""
    return Path(root) / relative_path(key)


def temp_path_for(path: Path, *, suffix: str = ".tmp") -> Path:
    """Return the in-flight sibling used while a download is being committed."""
    return path.with_suffix(suffix)


__all__ = ["cache_path_for", "relative_path", "temp_path_for"]

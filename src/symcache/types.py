"""Shared value types for the symbol cache."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_GUID_LENGTH = 32
_IDENTIFIER_PATTERN = re.compile(r"^[0-9A-Fa-f]{33,}$")
_SEPARATORS = re.compile(r"[/\\\x00]")
_RESERVED_SEGMENTS = frozenset({".", ".."})


@dataclass(frozen=True, slots=True)
class SymbolKey:
    """Identity of one symbol file version: file name, build GUID and age."""

    name: str
    guid: str
    age: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("symbol name must not be empty")
        if not self.guid:
            raise ValueError("symbol guid must not be empty")
        # both end up as single path segments under the cache root
        if self.name in _RESERVED_SEGMENTS or _SEPARATORS.search(self.name):
            raise ValueError(f"symbol name must be a plain file name, got {self.name!r}")
        if _SEPARATORS.search(self.guid):
            raise ValueError(f"symbol guid must not contain path separators, got {self.guid!r}")
        if self.age < 0:
            raise ValueError(f"symbol age must be >= 0, got {self.age}")

    @classmethod
    def parse_identifier(cls, name: str, identifier: str) -> SymbolKey:
        """Build a key from the combined ``GUIDAGE`` form used in server URLs.

        The first 32 hex digits are the GUID, the remainder is the age in hex.
        """
        identifier = identifier.strip()
        if not _IDENTIFIER_PATTERN.match(identifier):
            raise ValueError(f"Malformed symbol identifier: {identifier!r}")
        return cls(
            name=name,
            guid=identifier[:_GUID_LENGTH],
            age=int(identifier[_GUID_LENGTH:], 16),
        )


class DownloadStatus(str, Enum):
    """Terminal state of a single ``download`` call."""

    CACHE_HIT = "cache_hit"
    COMMITTED = "committed"
    TRANSPORT_FAILURE = "transport_failure"
    SIZE_MISMATCH = "size_mismatch"
    VALIDATION_FAILURE = "validation_failure"
    FILESYSTEM_FAILURE = "filesystem_failure"

    @property
    def ok(self) -> bool:
        return self in (DownloadStatus.CACHE_HIT, DownloadStatus.COMMITTED)


@dataclass(frozen=True, slots=True)
class DownloadResult:
    """Outcome of ``SymbolCache.download``; truthy when the file is available."""

    status: DownloadStatus
    relative_path: str
    path: Path
    sha256: str | None = None

    @property
    def ok(self) -> bool:
        return self.status.ok

    def __bool__(self) -> bool:
        return self.ok


__all__ = ["DownloadResult", "DownloadStatus", "SymbolKey"]

"""Error taxonomy for symbol cache population."""

from __future__ import annotations


class SymbolCacheError(RuntimeError):
    """Base class for all symbol cache failures."""


class ConfigInvalid(SymbolCacheError):
    """Raised when the cache was constructed with an unusable root or server URL."""


class TransportFailure(SymbolCacheError):
    """Connection error or a non-200 response from the symbol server."""


class SizeMismatch(SymbolCacheError):
    """Content-Length missing, zero, or different from the received body size."""


class ValidationFailure(SymbolCacheError):
    """Downloaded file failed the structural content check."""


class FilesystemFailure(SymbolCacheError):
    """Cache directories or the temporary file could not be written."""


__all__ = [
    "ConfigInvalid",
    "FilesystemFailure",
    "SizeMismatch",
    "SymbolCacheError",
    "TransportFailure",
    "ValidationFailure",
]

"""Symbol cache core: the fetch, validate and commit sequencer."""

from .locks import DownloadLocks, LockScope
from .symbol_cache import SymbolCache

__all__ = ["DownloadLocks", "LockScope", "SymbolCache"]

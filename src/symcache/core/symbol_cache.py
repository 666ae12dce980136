"""On-demand symbol file cache backed by a remote symbol server."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from symcache.config.models import SymCacheConfig
from symcache.core.locks import DownloadLocks, LockScope
from symcache.errors import (
    ConfigInvalid,
    FilesystemFailure,
    SizeMismatch,
    TransportFailure,
    ValidationFailure,
)
from symcache.io.cache import cache_path_for, relative_path, temp_path_for
from symcache.io.fetcher import fetch_symbol
from symcache.io.server import ServerAddress, normalize_server_url, parse_server_address
from symcache.parse.pdb import get_stats
from symcache.services.validation import StatsParser, is_valid_symbol_file
from symcache.types import DownloadResult, DownloadStatus, SymbolKey
from symcache.util.hashing import sha256sum
from symcache.util.paths import cache_root_from_config

logger = logging.getLogger(__name__)


class SymbolCache:
    """Local directory of symbol files filled from an upstream symbol server.

    The filesystem is the only index: a file at the derived path is a cache
    hit and is trusted as-is. Misses are fetched, size-checked, written to a
    temporary sibling, validated and then renamed into place, so the final
    name is only ever seen complete.
    """

    def __init__(
        self,
        root: Path | str,
        server_url: str,
        *,
        lock_scope: LockScope | str = LockScope.GLOBAL,
        parser: StatsParser = get_stats,
        temp_suffix: str = ".tmp",
        cleanup_invalid_temp: bool = False,
        timeout_seconds: float | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._root = Path(root) if root else None
        self._server_url = normalize_server_url(server_url or "")
        self._server: ServerAddress | None = None
        self._locks = DownloadLocks(LockScope(lock_scope))
        self._parser = parser
        self._temp_suffix = temp_suffix
        self._cleanup_invalid_temp = cleanup_invalid_temp
        self._timeout_seconds = timeout_seconds
        self._headers = dict(headers or {})

        logger.info("Creating symbol cache root=%s server=%s", root, server_url)
        if not root or not server_url:
            logger.error("Invalid symbol cache, root=%r server=%r", root, server_url)
            return

        self._server = parse_server_address(self._server_url)
        if self._server is None:
            logger.error("Could not split server URL into host and path: %s", self._server_url)

    @classmethod
    def from_config(cls, config: SymCacheConfig) -> SymbolCache:
        """Build a cache from a loaded ``SymCacheConfig``."""
        return cls(
            cache_root_from_config(config.cache.root),
            config.cache.server_url,
            lock_scope=config.cache.lock_scope,
            temp_suffix=config.cache.temp_suffix,
            cleanup_invalid_temp=config.cache.cleanup_invalid_temp,
            timeout_seconds=config.http.timeout_seconds,
            headers={"User-Agent": config.http.user_agent},
        )

    @property
    def root(self) -> Path | None:
        return self._root

    @property
    def server(self) -> ServerAddress | None:
        return self._server

    @property
    def lock_scope(self) -> LockScope:
        return self._locks.scope

    def valid(self) -> bool:
        """Return False when construction inputs were empty or unparsable."""
        return self._root is not None and self._server is not None

    def resolve_path(self, key: SymbolKey) -> Path:
        """Return where `key` lives in the cache, whether or not it is present."""
        if self._root is None:
            raise ConfigInvalid("Symbol cache has no root directory")
        return cache_path_for(key, root=self._root)

    def download(self, key: SymbolKey) -> DownloadResult:
        """Ensure `key` is present in the cache, fetching it on a miss.

        Per-call failures are reported through the returned result's status;
        only an invalid cache raises (``ConfigInvalid``).
        """
        root, server = self._root, self._server
        if root is None or server is None:
            raise ConfigInvalid(f"Refusing download on invalid symbol cache ({self._server_url!r})")

        relative = relative_path(key)
        with self._locks.hold(relative):
            return self._download_locked(key, relative, root=root, server=server)

    def _download_locked(
        self, key: SymbolKey, relative: str, *, root: Path, server: ServerAddress
    ) -> DownloadResult:
        path = root / relative

        logger.info("Looking up symbol %s", relative)
        if path.exists():
            logger.info("Symbol already cached %s", relative)
            return DownloadResult(DownloadStatus.CACHE_HIT, relative, path)

        url = server.url_for(relative)
        logger.info("Downloading symbol %s from %s", relative, url)
        try:
            body = fetch_symbol(url, timeout_seconds=self._timeout_seconds, headers=self._headers)
            self._commit(key, path, body)
        except TransportFailure as exc:
            logger.error("Failed to download symbol %s: %s", relative, exc)
            return DownloadResult(DownloadStatus.TRANSPORT_FAILURE, relative, path)
        except SizeMismatch as exc:
            logger.error("Downloaded symbol size mismatch %s: %s", relative, exc)
            return DownloadResult(DownloadStatus.SIZE_MISMATCH, relative, path)
        except FilesystemFailure as exc:
            logger.error("Failed to write symbol %s: %s", relative, exc)
            return DownloadResult(DownloadStatus.FILESYSTEM_FAILURE, relative, path)
        except ValidationFailure as exc:
            logger.error("Downloaded symbol is invalid %s: %s", relative, exc)
            return DownloadResult(DownloadStatus.VALIDATION_FAILURE, relative, path)

        digest = sha256sum(path)
        logger.info("Downloaded symbol %s sha256=%s", relative, digest)
        return DownloadResult(DownloadStatus.COMMITTED, relative, path, sha256=digest)

    def _commit(self, key: SymbolKey, path: Path, body: bytes) -> None:
        """Write `body` beside `path`, validate it, and rename it into place."""
        tmp_path = temp_path_for(path, suffix=self._temp_suffix)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("wb") as handle:
                handle.write(body)
        except OSError as exc:
            raise FilesystemFailure(f"Could not write {tmp_path}: {exc}") from exc

        if not is_valid_symbol_file(key.name, tmp_path, parser=self._parser):
            if self._cleanup_invalid_temp:
                tmp_path.unlink(missing_ok=True)
            raise ValidationFailure(f"Content check rejected {tmp_path.name}")

        try:
            os.replace(tmp_path, path)
        except OSError as exc:
            raise FilesystemFailure(f"Could not rename {tmp_path} to {path}: {exc}") from exc


__all__ = ["SymbolCache"]

"""Content validation for freshly downloaded symbol files."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from symcache.parse.pdb import get_stats

# Kernel images known to be served stripped: they parse but carry no types.
TYPE_INFO_REQUIRED: frozenset[str] = frozenset({"ntoskrnl.pdb", "ntkrnlmp.pdb"})

StatsParser = Callable[[Path], Any]

logger = logging.getLogger(__name__)


def is_valid_symbol_file(name: str, path: Path, *, parser: StatsParser = get_stats) -> bool:
    """Return whether the file at `path`, downloaded for `name`, may be committed.

    The parser always runs and any error it raises rejects the file. Beyond
    that, only the names in ``TYPE_INFO_REQUIRED`` are checked, and only for a
    zero type count; every other name is accepted.
    """
    try:
        stats = parser(path)
    except Exception as exc:  # noqa: BLE001 - any parser error rejects the file
        logger.error("Failed to parse symbol file %s: %s", path, exc)
        return False

    if name.lower() in TYPE_INFO_REQUIRED and stats.type_count == 0:
        logger.warning("Rejecting %s without type information", name)
        return False

    return True


__all__ = ["StatsParser", "TYPE_INFO_REQUIRED", "is_valid_symbol_file"]

"""Minimal PDB (MSF 7.00) reader exposing record counts for validation.

Only the container is walked: superblock, stream directory, and the headers of
the TPI (stream 2) and IPI (stream 4) streams. Symbol records themselves are
never decoded.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

MSF_MAGIC = b"Microsoft C/C++ MSF 7.00\r\n\x1aDS\x00\x00\x00"
# power-of-two page sizes; large PDBs are linked with pages up to 32 KiB
VALID_BLOCK_SIZES = frozenset(1 << shift for shift in range(9, 16))

TPI_STREAM = 2
IPI_STREAM = 4
NIL_STREAM_SIZE = 0xFFFFFFFF

_SUPERBLOCK = struct.Struct("<32s6I")
_TPI_HEADER = struct.Struct("<5I")


class PdbParseError(ValueError):
    """Raised when a file is not a readable MSF 7.00 container."""


@dataclass(frozen=True, slots=True)
class PdbStats:
    """Summary counts reported for a symbol file."""

    block_size: int
    stream_count: int
    type_count: int
    id_count: int


def get_stats(path: Path | str) -> PdbStats:
    """Return ``PdbStats`` for the PDB at `path` without modifying it."""
    with Path(path).open("rb") as handle:
        return _MsfReader(handle).stats()


class _MsfReader:
    def __init__(self, handle: BinaryIO) -> None:
        self._handle = handle
        header = handle.read(_SUPERBLOCK.size)
        if len(header) < _SUPERBLOCK.size:
            raise PdbParseError("File too small for an MSF superblock")
        (
            magic,
            self.block_size,
            _free_block_map,
            self.num_blocks,
            self.directory_bytes,
            _unknown,
            self.block_map_addr,
        ) = _SUPERBLOCK.unpack(header)
        if magic != MSF_MAGIC:
            raise PdbParseError("Missing MSF 7.00 signature")
        if self.block_size not in VALID_BLOCK_SIZES:
            raise PdbParseError(f"Unsupported MSF block size {self.block_size}")
        self.stream_sizes, self.stream_blocks = self._read_directory()

    def stats(self) -> PdbStats:
        return PdbStats(
            block_size=self.block_size,
            stream_count=len(self.stream_sizes),
            type_count=self._record_count(TPI_STREAM),
            id_count=self._record_count(IPI_STREAM),
        )

    def _record_count(self, index: int) -> int:
        """Return TypeIndexEnd - TypeIndexBegin for a TPI-format stream."""
        if index >= len(self.stream_sizes):
            return 0
        data = self._read_stream_head(index, _TPI_HEADER.size)
        if len(data) < _TPI_HEADER.size:
            return 0
        _version, _header_size, begin, end, _record_bytes = _TPI_HEADER.unpack_from(data)
        if end < begin:
            raise PdbParseError(f"Stream {index} has inverted type index range")
        return end - begin

    def _read_directory(self) -> tuple[list[int], list[list[int]]]:
        block_count = _blocks_for(self.directory_bytes, self.block_size)
        self._seek_block(self.block_map_addr)
        block_map = self._handle.read(block_count * 4)
        if len(block_map) < block_count * 4:
            raise PdbParseError("Truncated stream directory block map")
        directory_blocks = struct.unpack(f"<{block_count}I", block_map)
        raw = self._read_blocks(directory_blocks)[: self.directory_bytes]

        cursor = _Cursor(raw)
        num_streams = cursor.u32()
        sizes = [cursor.u32() for _ in range(num_streams)]
        blocks: list[list[int]] = []
        for size in sizes:
            count = 0 if size == NIL_STREAM_SIZE else _blocks_for(size, self.block_size)
            blocks.append([cursor.u32() for _ in range(count)])
        return [0 if size == NIL_STREAM_SIZE else size for size in sizes], blocks

    def _read_stream_head(self, index: int, size: int) -> bytes:
        """Return at most `size` leading bytes of a stream, reading only its first block."""
        blocks = self.stream_blocks[index]
        if not blocks:
            return b""
        limit = min(size, self.stream_sizes[index], self.block_size)
        return self._read_blocks(blocks[:1])[:limit]

    def _read_blocks(self, blocks: tuple[int, ...] | list[int]) -> bytes:
        chunks = []
        for block in blocks:
            self._seek_block(block)
            chunk = self._handle.read(self.block_size)
            if len(chunk) < self.block_size:
                raise PdbParseError(f"Truncated MSF block {block}")
            chunks.append(chunk)
        return b"".join(chunks)

    def _seek_block(self, block: int) -> None:
        if block >= self.num_blocks:
            raise PdbParseError(f"Block {block} outside file ({self.num_blocks} blocks)")
        self._handle.seek(block * self.block_size)


class _Cursor:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def u32(self) -> int:
        if self._offset + 4 > len(self._data):
            raise PdbParseError("Truncated MSF stream directory")
        (value,) = struct.unpack_from("<I", self._data, self._offset)
        self._offset += 4
        return value


def _blocks_for(size: int, block_size: int) -> int:
    return (size + block_size - 1) // block_size


__all__ = ["MSF_MAGIC", "PdbParseError", "PdbStats", "get_stats"]

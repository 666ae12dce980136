from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

from requests.structures import CaseInsensitiveDict

from symcache.parse.pdb import MSF_MAGIC

GUID = "abcd1234abcd1234abcd1234abcd1234"
SERVER_URL = "https://symbols.example.test/download/symbols"

_TPI_VERSION = 20040203
_TPI_HEADER_SIZE = 56
_FIRST_TYPE_INDEX = 0x1000


class DummyResponse:
    def __init__(
        self,
        content: bytes,
        status_code: int = 200,
        *,
        content_length: int | str | None = -1,
    ) -> None:
        self.content = content
        self.status_code = status_code
        self.headers: CaseInsensitiveDict[str] = CaseInsensitiveDict()
        if content_length == -1:
            content_length = len(content)
        if content_length is not None:
            self.headers["Content-Length"] = str(content_length)


@dataclass
class StubStats:
    type_count: int


def stub_parser(type_count: int):
    """Return a parser that reports `type_count` for any file."""

    def _parse(path: Path) -> StubStats:
        return StubStats(type_count=type_count)

    return _parse


def _tpi_stream(count: int, record_bytes: int = 0) -> bytes:
    header = struct.pack(
        "<5I",
        _TPI_VERSION,
        _TPI_HEADER_SIZE,
        _FIRST_TYPE_INDEX,
        _FIRST_TYPE_INDEX + count,
        record_bytes,
    )
    return header.ljust(_TPI_HEADER_SIZE, b"\x00") + b"\xf1" * record_bytes


def build_pdb(
    *,
    type_count: int = 12,
    id_count: int = 3,
    block_size: int = 512,
    type_record_bytes: int = 0,
) -> bytes:
    """Build a minimal MSF 7.00 file with TPI and IPI stream headers.

    Layout: superblock, two free-page-map blocks, the block map, one directory
    block, then the data blocks of each non-empty stream. `type_record_bytes`
    pads the TPI stream so it can span several blocks.
    """

    streams = [b"", b"", _tpi_stream(type_count, type_record_bytes), b"", _tpi_stream(id_count)]
    block_map_block = 3
    directory_block = 4
    next_block = 5

    stream_blocks: list[list[int]] = []
    data_blocks: list[bytes] = []
    for stream in streams:
        blocks = []
        for offset in range(0, len(stream), block_size):
            blocks.append(next_block)
            data_blocks.append(stream[offset : offset + block_size].ljust(block_size, b"\x00"))
            next_block += 1
        stream_blocks.append(blocks)

    directory = struct.pack("<I", len(streams))
    directory += b"".join(struct.pack("<I", len(stream)) for stream in streams)
    for blocks in stream_blocks:
        directory += b"".join(struct.pack("<I", block) for block in blocks)
    assert len(directory) <= block_size

    superblock = struct.pack(
        "<32s6I", MSF_MAGIC, block_size, 1, next_block, len(directory), 0, block_map_block
    )

    blocks = [
        superblock.ljust(block_size, b"\x00"),
        b"\x00" * block_size,
        b"\x00" * block_size,
        struct.pack("<I", directory_block).ljust(block_size, b"\x00"),
        directory.ljust(block_size, b"\x00"),
        *data_blocks,
    ]
    return b"".join(blocks)

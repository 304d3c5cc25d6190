"""RIFF chunk primitives.

A RIFF stream is a sequence of chunks, each a 4-byte ASCII FourCC, a 4-byte
little-endian unsigned size and ``size`` bytes of payload. The helpers here
work on any seekable binary file object (an open file, ``io.BytesIO``).
"""

import io
import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from simplewav.errors import MalformedHeader, TruncatedFile

# FourCC identifiers
RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

# Audio format codes
WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_EXTENSIBLE = 0xFFFE

CHUNK_HEADER_SIZE = 8
RIFF_HEADER_SIZE = 12

_CHUNK_HEADER = struct.Struct("<4sI")


@dataclass(frozen=True)
class Chunk:
    """Location of a chunk inside a stream."""

    chunk_id: bytes
    size: int
    """Declared payload size in bytes."""
    offset: int
    """Stream position of the first payload byte."""

    @property
    def name(self) -> str:
        return self.chunk_id.decode("ascii", errors="replace")


def end_position(f: BinaryIO) -> int:
    """Return the stream length without moving the current position."""
    current = f.tell()
    end = f.seek(0, io.SEEK_END)
    f.seek(current)
    return end


def pack_chunk_header(chunk_id: bytes, size: int) -> bytes:
    """Serialize a chunk header (FourCC + size)."""
    if len(chunk_id) != 4:
        raise ValueError(f"Chunk id must be exactly 4 bytes, got {chunk_id!r}")
    return _CHUNK_HEADER.pack(chunk_id, size)


def read_chunk_header(f: BinaryIO) -> tuple[bytes, int]:
    """Read a RIFF chunk header (FourCC + size).

    Args:
        f: File handle positioned at the start of a chunk.

    Returns:
        Tuple of (chunk_id, chunk_size).

    Raises:
        TruncatedFile: If fewer than 8 bytes remain.
    """
    header = f.read(CHUNK_HEADER_SIZE)
    if len(header) < CHUNK_HEADER_SIZE:
        raise TruncatedFile("Unexpected end of file reading chunk header")

    chunk_id, chunk_size = _CHUNK_HEADER.unpack(header)
    return chunk_id, chunk_size


def read_riff_header(f: BinaryIO) -> int:
    """Read and check the 12-byte RIFF/WAVE preamble.

    Returns:
        The RIFF chunk size field.

    Raises:
        TruncatedFile: If the stream is shorter than the preamble.
        MalformedHeader: If the ids are not "RIFF" and "WAVE".
    """
    riff_header = f.read(RIFF_HEADER_SIZE)
    if len(riff_header) < RIFF_HEADER_SIZE:
        raise TruncatedFile("File too small to be a valid WAV file")

    if riff_header[:4] != RIFF_ID:
        raise MalformedHeader(f"Not a RIFF file (found {riff_header[:4]!r})")

    if riff_header[8:12] != WAVE_ID:
        raise MalformedHeader(f"Not a WAVE file (found {riff_header[8:12]!r})")

    return struct.unpack("<I", riff_header[4:8])[0]


def iter_chunks(f: BinaryIO) -> Iterator[Chunk]:
    """Walk the chunks from the current position to the end of the stream.

    Each chunk is yielded with the stream positioned at its payload. When the
    caller asks for the next chunk, the stream is moved exactly ``size`` bytes
    past the payload start, whatever the caller read in between.

    Raises:
        TruncatedFile: If a header is cut short, or a chunk that has to be
            skipped declares more bytes than remain.
    """
    end = end_position(f)
    while f.tell() < end:
        chunk_id, chunk_size = read_chunk_header(f)
        chunk = Chunk(chunk_id, chunk_size, f.tell())
        yield chunk

        next_offset = chunk.offset + chunk.size
        if next_offset > end:
            raise TruncatedFile(
                f"Chunk {chunk.name!r} declares {chunk.size} bytes but only "
                f"{end - chunk.offset} remain"
            )
        f.seek(next_offset)


def find_chunk(f: BinaryIO, target_id: bytes) -> Chunk:
    """Find a chunk by its FourCC identifier, skipping every other chunk.

    Args:
        f: File handle positioned at the start of a chunk.
        target_id: The FourCC identifier to search for.

    Returns:
        The matching chunk; the stream is left at its payload.

    Raises:
        TruncatedFile: If the stream ends before the chunk is found.
    """
    for chunk in iter_chunks(f):
        if chunk.chunk_id == target_id:
            return chunk

    raise TruncatedFile(f"Reached end of file without finding a {target_id!r} chunk")

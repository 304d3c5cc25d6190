"""Unit tests for the RIFF chunk primitives."""

import io
import struct

import pytest

from simplewav import MalformedHeader, TruncatedFile
from simplewav.riff import (
    find_chunk,
    iter_chunks,
    pack_chunk_header,
    read_chunk_header,
    read_riff_header,
)


def _chunk(chunk_id: bytes, payload: bytes) -> bytes:
    return chunk_id + struct.pack("<I", len(payload)) + payload


class TestChunkHeader:
    """Tests for packing and reading chunk headers."""

    def test_pack(self) -> None:
        assert pack_chunk_header(b"data", 6) == b"data\x06\x00\x00\x00"

    def test_pack_rejects_bad_id(self) -> None:
        with pytest.raises(ValueError):
            pack_chunk_header(b"dat", 6)

    def test_read(self) -> None:
        f = io.BytesIO(b"LIST\x1a\x00\x00\x00rest")
        assert read_chunk_header(f) == (b"LIST", 26)
        assert f.tell() == 8

    def test_read_short(self) -> None:
        with pytest.raises(TruncatedFile):
            read_chunk_header(io.BytesIO(b"LIST\x1a\x00"))


class TestRiffHeader:
    """Tests for the RIFF/WAVE preamble."""

    def test_valid(self) -> None:
        f = io.BytesIO(b"RIFF\x24\x00\x00\x00WAVE")
        assert read_riff_header(f) == 36

    def test_too_short(self) -> None:
        with pytest.raises(TruncatedFile):
            read_riff_header(io.BytesIO(b"RIFF"))

    def test_not_riff(self) -> None:
        with pytest.raises(MalformedHeader):
            read_riff_header(io.BytesIO(b"RIFX\x24\x00\x00\x00WAVE"))

    def test_not_wave(self) -> None:
        with pytest.raises(MalformedHeader):
            read_riff_header(io.BytesIO(b"RIFF\x24\x00\x00\x00AVI "))


class TestFindChunk:
    """Tests for scanning to a chunk by id."""

    def test_first_chunk(self) -> None:
        f = io.BytesIO(_chunk(b"data", b"\x01\x02"))
        chunk = find_chunk(f, b"data")
        assert chunk.size == 2
        assert chunk.offset == 8
        assert f.read(chunk.size) == b"\x01\x02"

    def test_skips_unknown_chunks(self) -> None:
        stream = _chunk(b"LIST", b"INFOabcd") + _chunk(b"junk", b"xyz") + _chunk(b"data", b"\x7f")
        f = io.BytesIO(stream)
        chunk = find_chunk(f, b"data")
        assert chunk.size == 1
        assert f.read(1) == b"\x7f"

    def test_odd_sized_chunk_is_skipped_without_padding(self) -> None:
        stream = _chunk(b"junk", b"abc") + _chunk(b"data", b"")
        chunk = find_chunk(io.BytesIO(stream), b"data")
        assert chunk.offset == 8 + 3 + 8

    def test_missing_chunk(self) -> None:
        with pytest.raises(TruncatedFile):
            find_chunk(io.BytesIO(_chunk(b"LIST", b"abcd")), b"data")

    def test_empty_stream(self) -> None:
        with pytest.raises(TruncatedFile):
            find_chunk(io.BytesIO(b""), b"data")

    def test_oversized_chunk(self) -> None:
        stream = b"LIST" + struct.pack("<I", 1000) + b"ab"
        with pytest.raises(TruncatedFile):
            find_chunk(io.BytesIO(stream), b"data")

    def test_partial_header_after_chunk(self) -> None:
        with pytest.raises(TruncatedFile):
            find_chunk(io.BytesIO(_chunk(b"LIST", b"abcd") + b"da"), b"data")


class TestIterChunks:
    """Tests for walking all chunks."""

    def test_lists_all_chunks(self) -> None:
        stream = _chunk(b"fmt ", b"\x00" * 16) + _chunk(b"LIST", b"abcd") + _chunk(b"data", b"\x00\x00")
        chunks = list(iter_chunks(io.BytesIO(stream)))
        assert [c.chunk_id for c in chunks] == [b"fmt ", b"LIST", b"data"]
        assert [c.size for c in chunks] == [16, 4, 2]
        assert [c.name for c in chunks] == ["fmt ", "LIST", "data"]

    def test_position_independent_of_reads(self) -> None:
        """Skipping always lands after the declared payload."""
        f = io.BytesIO(_chunk(b"LIST", b"abcdef") + _chunk(b"data", b"\x01"))
        chunks = iter_chunks(f)
        first = next(chunks)
        f.read(2)
        second = next(chunks)
        assert first.chunk_id == b"LIST"
        assert second.chunk_id == b"data"
        assert second.offset == 8 + 6 + 8

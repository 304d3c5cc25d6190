"""Reading and writing WAV files on disk.

The codec itself works on bytes; this module is the file-backed source and
sink around it. OS-level failures are reported as :class:`IOFailure`.
"""

import os
from pathlib import Path

from simplewav.codec import WaveHeader, decode_stream, encode, read_wave_header
from simplewav.errors import IOFailure, TruncatedFile
from simplewav.pcm import PCMBuffer
from simplewav.riff import Chunk, iter_chunks, read_riff_header
from simplewav.types import SizeConvention


def write_wav(
    path: Path | str,
    buffer: PCMBuffer,
    *,
    convention: SizeConvention = SizeConvention.fixed,
) -> None:
    """Encode a buffer and write it to ``path``.

    The bytes are written to a sibling temporary file which then replaces
    ``path``, so an existing file is never left half-written. Nothing is
    written if encoding fails.

    Raises:
        UnsupportedBitDepth, InvalidBuffer: If the buffer cannot be encoded.
        IOFailure: If the file cannot be written.
    """
    path = Path(path)
    wav_bytes = encode(buffer, convention=convention)

    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailure(f"Cannot create directory: {path.parent} ({e.strerror or e})", path) from e

    try:
        tmp_path.write_bytes(wav_bytes)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise IOFailure(f"Cannot write file: {path} ({e.strerror or e})", path) from e

    try:
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise IOFailure(f"Cannot replace file: {path} ({e.strerror or e})", path) from e


def read_wav(
    path: Path | str,
    *,
    convention: SizeConvention = SizeConvention.fixed,
) -> PCMBuffer:
    """Read and decode a WAV file.

    Raises:
        IOFailure: If the file cannot be opened or read.
        MalformedHeader, UnsupportedFormat, UnsupportedBitDepth, TruncatedFile:
            If the contents cannot be decoded.
    """
    path = Path(path)
    with _open_for_reading(path) as f:
        try:
            return decode_stream(f, convention=convention)
        except OSError as e:
            raise IOFailure(f"Cannot read file: {path} ({e.strerror or e})", path) from e


def read_wav_header(path: Path | str) -> WaveHeader:
    """Read only the header fields of a WAV file, up to the data chunk.

    Unlike :func:`read_wav` this accepts any PCM bit depth, so it can describe
    files the codec is unable to decode.
    """
    path = Path(path)
    with _open_for_reading(path) as f:
        try:
            return read_wave_header(f)
        except OSError as e:
            raise IOFailure(f"Cannot read file: {path} ({e.strerror or e})", path) from e


def _open_for_reading(path: Path):
    try:
        return open(path, "rb")
    except FileNotFoundError as e:
        raise IOFailure(f"File not found: {path}", path) from e
    except OSError as e:
        raise IOFailure(f"Cannot open file: {path}", path) from e


def list_chunks(path: Path | str) -> list[Chunk]:
    """List the chunks that follow the RIFF/WAVE preamble.

    Listing stops at the first chunk whose declared payload runs past the end
    of the file; that chunk is still included. Files written with
    ``SizeConvention.fixed`` at 8 bits end this way, because their data chunk
    declares two bytes per sample but stores one.

    Raises:
        IOFailure: If the file cannot be read.
        MalformedHeader, TruncatedFile: If the preamble itself is invalid.
    """
    path = Path(path)
    chunks: list[Chunk] = []
    with _open_for_reading(path) as f:
        try:
            read_riff_header(f)
            for chunk in iter_chunks(f):
                chunks.append(chunk)
        except TruncatedFile:
            if not chunks:
                raise
        except OSError as e:
            raise IOFailure(f"Cannot read file: {path} ({e.strerror or e})", path) from e
    return chunks

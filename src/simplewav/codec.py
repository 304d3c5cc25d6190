"""PCM WAV encoder and decoder.

Write path::

    PCMBuffer -> WaveHeader.for_buffer -> header bytes + quantized samples

Read path::

    bytes -> RIFF/WAVE preamble -> fmt chunk -> scan to data chunk
          -> dequantized samples -> fresh PCMBuffer

Samples are interleaved channel-major (ch0, ch1, ... for each frame) and stored
as signed little-endian integers, one byte for 8-bit and two for 16-bit.

Both paths are pure functions over in-memory data. Decoding is all-or-nothing:
any error is raised before a buffer is built.
"""

import io
import struct
from dataclasses import dataclass
from typing import BinaryIO

import numpy as np
from numpy.typing import NDArray

from simplewav.errors import (
    CodecResult,
    InvalidBuffer,
    MalformedHeader,
    TruncatedFile,
    UnsupportedBitDepth,
    UnsupportedFormat,
    WavError,
)
from simplewav.pcm import PCMBuffer
from simplewav.riff import (
    DATA_ID,
    FMT_ID,
    RIFF_ID,
    WAVE_FORMAT_EXTENSIBLE,
    WAVE_FORMAT_PCM,
    WAVE_ID,
    find_chunk,
    pack_chunk_header,
    read_chunk_header,
    read_riff_header,
)
from simplewav.types import SizeConvention

SUPPORTED_BIT_DEPTHS = (8, 16)

# Per-sample width used for data size accounting under SizeConvention.fixed
FIXED_STORAGE_WIDTH_BYTES = 2

FMT_CHUNK_SIZE = 16
# "WAVE" + fmt chunk header and body + data chunk header
RIFF_SIZE_OVERHEAD = 4 + 8 + FMT_CHUNK_SIZE + 8

MAX_CHUNK_SIZE = 0xFFFFFFFF

_FMT_BODY = struct.Struct("<HHIIHH")

_SAMPLE_DTYPES: dict[int, np.dtype] = {
    8: np.dtype("i1"),
    16: np.dtype("<i2"),
}


@dataclass(frozen=True)
class WaveHeader:
    """Every numeric field of the canonical 44-byte WAV header."""

    riff_size: int
    fmt_size: int
    format_tag: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int

    @classmethod
    def for_buffer(
        cls,
        buffer: PCMBuffer,
        convention: SizeConvention = SizeConvention.fixed,
    ) -> "WaveHeader":
        """Derive the header for a buffer; nothing here is set independently."""
        width = buffer.bit_depth // 8
        channels = buffer.channel_count()

        if convention is SizeConvention.fixed:
            data_size = buffer.frame_count() * channels * FIXED_STORAGE_WIDTH_BYTES
            block_align = width
        else:
            data_size = buffer.frame_count() * channels * width
            block_align = width * channels

        return cls(
            riff_size=RIFF_SIZE_OVERHEAD + data_size,
            fmt_size=FMT_CHUNK_SIZE,
            format_tag=WAVE_FORMAT_PCM,
            num_channels=channels,
            sample_rate=buffer.sample_rate,
            byte_rate=buffer.sample_rate * block_align,
            block_align=block_align,
            bits_per_sample=buffer.bit_depth,
            data_size=data_size,
        )

    @property
    def sample_width(self) -> int:
        """Bytes per stored sample."""
        return self.bits_per_sample // 8

    def frame_count(self, convention: SizeConvention = SizeConvention.fixed) -> int:
        """Frames per channel implied by the data chunk size."""
        if self.num_channels == 0:
            return 0
        if convention is SizeConvention.fixed:
            width = FIXED_STORAGE_WIDTH_BYTES
        else:
            width = self.sample_width
        return self.data_size // self.num_channels // width

    def pack(self) -> bytes:
        """Serialize RIFF preamble, fmt chunk and data chunk header."""
        return b"".join(
            [
                pack_chunk_header(RIFF_ID, self.riff_size),
                WAVE_ID,
                pack_chunk_header(FMT_ID, self.fmt_size),
                _FMT_BODY.pack(
                    self.format_tag,
                    self.num_channels,
                    self.sample_rate,
                    self.byte_rate,
                    self.block_align,
                    self.bits_per_sample,
                ),
                pack_chunk_header(DATA_ID, self.data_size),
            ]
        )


def quantize(samples: NDArray[np.floating], bit_depth: int) -> NDArray[np.signedinteger]:
    """Map normalized samples to signed integers of the given bit depth.

    ``s`` becomes ``round((s + 1) / 2 * 2**bits)``, clamped to
    ``[0, 2**bits - 1]`` and shifted down by half the range, so -1.0 maps to
    the most negative code and 1.0 to the most positive one. Values outside
    [-1, 1] clamp.
    """
    dtype = _sample_dtype(bit_depth)
    max_val = 1 << (dtype.itemsize * 8)
    half = max_val >> 1

    scaled = (np.asarray(samples, dtype=np.float64) + 1.0) / 2.0 * max_val
    scaled = np.clip(scaled, 0.0, max_val - 1.0)
    codes = np.floor(scaled + 0.5).astype(np.int64) - half
    return codes.astype(dtype)


def dequantize(codes: NDArray[np.integer], bit_depth: int) -> NDArray[np.float64]:
    """Scale signed integer codes back to floats by half the code range.

    This is not an exact inverse of :func:`quantize`; a round trip may be off
    by one quantization step. No clamping is applied.
    """
    dtype = _sample_dtype(bit_depth)
    half = float(1 << (dtype.itemsize * 8 - 1))
    return np.asarray(codes).astype(np.float64) / half


def encode(buffer: PCMBuffer, *, convention: SizeConvention = SizeConvention.fixed) -> bytes:
    """Serialize a PCM buffer as a RIFF/WAVE byte string.

    Args:
        buffer: The signal to encode.
        convention: Data size accounting (see :class:`SizeConvention`).

    Returns:
        The complete file contents.

    Raises:
        UnsupportedBitDepth: If ``buffer.bit_depth`` is not 8 or 16.
        InvalidBuffer: If the buffer has no channels, ragged channels,
            NaN samples or a sample rate outside the header range.
    """
    _validate_buffer(buffer)

    header = WaveHeader.for_buffer(buffer, convention)
    if header.riff_size > MAX_CHUNK_SIZE:
        raise InvalidBuffer(
            f"Encoded data ({header.data_size} bytes) does not fit in a RIFF chunk"
        )
    if header.byte_rate > MAX_CHUNK_SIZE:
        raise InvalidBuffer(f"Byte rate {header.byte_rate} does not fit in the fmt chunk")

    # Row-major flattening of (frames, channels) interleaves channel-major
    codes = quantize(buffer.as_array(), buffer.bit_depth)
    return header.pack() + codes.tobytes()


def decode(
    data: bytes | bytearray | memoryview,
    *,
    convention: SizeConvention = SizeConvention.fixed,
) -> PCMBuffer:
    """Parse a RIFF/WAVE byte string into a new PCM buffer.

    Raises:
        MalformedHeader: If the RIFF, WAVE or fmt ids do not match.
        UnsupportedFormat: If the fmt chunk is not integer PCM.
        UnsupportedBitDepth: If bits per sample is not 8 or 16.
        TruncatedFile: If there is no data chunk, or its samples are cut short.
    """
    return decode_stream(io.BytesIO(data), convention=convention)


def decode_stream(
    f: BinaryIO,
    *,
    convention: SizeConvention = SizeConvention.fixed,
) -> PCMBuffer:
    """Decode from a seekable binary stream positioned at the RIFF header."""
    header = read_wave_header(f)

    if header.bits_per_sample not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedBitDepth(header.bits_per_sample)

    frames = header.frame_count(convention)
    channels = header.num_channels
    needed = frames * channels * header.sample_width

    payload = f.read(needed)
    if len(payload) < needed:
        raise TruncatedFile(
            f"data chunk holds {len(payload)} bytes, {needed} needed for "
            f"{frames} frames x {channels} channels"
        )

    codes = np.frombuffer(payload, dtype=_SAMPLE_DTYPES[header.bits_per_sample])
    samples = dequantize(codes, header.bits_per_sample).reshape(frames, channels)

    return PCMBuffer(
        sample_rate=header.sample_rate,
        bit_depth=header.bits_per_sample,
        channels=[np.ascontiguousarray(samples[:, ch]) for ch in range(channels)],
    )


def read_wave_header(f: BinaryIO) -> WaveHeader:
    """Read the RIFF preamble and fmt chunk, then scan forward to the data chunk.

    Chunks between fmt and data are skipped by their declared size. On
    return the stream is positioned at the first sample byte.

    Raises:
        MalformedHeader: If ids mismatch, the fmt chunk is too small, or it
            declares zero channels.
        UnsupportedFormat: If the format tag is not PCM.
        TruncatedFile: If the stream ends before the data chunk.
    """
    riff_size = read_riff_header(f)

    fmt_id, fmt_size = read_chunk_header(f)
    if fmt_id != FMT_ID:
        raise MalformedHeader(f"Expected 'fmt ' chunk after WAVE, found {fmt_id!r}")
    if fmt_size < FMT_CHUNK_SIZE:
        raise MalformedHeader(f"fmt chunk too small ({fmt_size} bytes)")

    fmt_body = f.read(FMT_CHUNK_SIZE)
    if len(fmt_body) < FMT_CHUNK_SIZE:
        raise TruncatedFile("Unexpected end of file reading fmt chunk")

    (
        format_tag,
        num_channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
    ) = _FMT_BODY.unpack(fmt_body)

    if format_tag not in (WAVE_FORMAT_PCM, WAVE_FORMAT_EXTENSIBLE):
        raise UnsupportedFormat(format_tag)
    if num_channels == 0:
        raise MalformedHeader("fmt chunk declares zero channels")

    # Extended fmt chunks (cbSize and beyond)
    if fmt_size > FMT_CHUNK_SIZE:
        f.seek(fmt_size - FMT_CHUNK_SIZE, io.SEEK_CUR)

    data_chunk = find_chunk(f, DATA_ID)

    return WaveHeader(
        riff_size=riff_size,
        fmt_size=fmt_size,
        format_tag=format_tag,
        num_channels=num_channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        data_size=data_chunk.size,
    )


def encode_result(
    buffer: PCMBuffer,
    *,
    convention: SizeConvention = SizeConvention.fixed,
) -> CodecResult[bytes]:
    """Like :func:`encode`, but report failure as a value."""
    try:
        return CodecResult.success(encode(buffer, convention=convention))
    except WavError as e:
        return CodecResult.failure(e)


def decode_result(
    data: bytes | bytearray | memoryview,
    *,
    convention: SizeConvention = SizeConvention.fixed,
) -> CodecResult[PCMBuffer]:
    """Like :func:`decode`, but report failure as a value."""
    try:
        return CodecResult.success(decode(data, convention=convention))
    except WavError as e:
        return CodecResult.failure(e)


def _sample_dtype(bit_depth: int) -> np.dtype:
    try:
        return _SAMPLE_DTYPES[bit_depth]
    except KeyError:
        raise UnsupportedBitDepth(bit_depth) from None


def _validate_buffer(buffer: PCMBuffer) -> None:
    if buffer.bit_depth not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedBitDepth(buffer.bit_depth)

    if not 0 < buffer.sample_rate <= MAX_CHUNK_SIZE:
        raise InvalidBuffer(f"sample_rate must be a positive 32-bit value, got {buffer.sample_rate}")

    if buffer.channel_count() == 0:
        raise InvalidBuffer("Buffer has no channels")
    if buffer.channel_count() > 0xFFFF:
        raise InvalidBuffer(f"Too many channels for a WAV header: {buffer.channel_count()}")

    frames = buffer.frame_count()
    for i, channel in enumerate(buffer.channels):
        if np.ndim(channel) != 1:
            raise InvalidBuffer(f"channels[{i}] must be 1-D, got shape {np.shape(channel)}")
        if len(channel) != frames:
            raise InvalidBuffer(f"channels[{i}] has {len(channel)} samples, expected {frames}")
        if np.any(np.isnan(channel)):
            raise InvalidBuffer(f"channels[{i}] contains NaN samples")

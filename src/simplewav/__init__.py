"""simplewav - PCM WAV encoding and decoding.

This package converts multi-channel floating point signals to and from the
canonical RIFF/WAVE PCM container at 8 or 16 bits per sample.

File Layout
-----------
    +----------------------------------------+
    | RIFF header ("WAVE")                   |
    +----------------------------------------+
    | fmt  chunk (format, channels, rate)    |
    +----------------------------------------+
    | other chunks (skipped when reading)    |
    +----------------------------------------+
    | data chunk                             |
    |   - signed little-endian samples       |
    |   - channel-major interleaving         |
    +----------------------------------------+

Example Usage
-------------
>>> from simplewav import PCMBuffer, decode, encode
>>> buffer = PCMBuffer.from_channels(8000, 16, [[0.0, 1.0, -1.0]])
>>> wav_bytes = encode(buffer)
>>> decoded = decode(wav_bytes)
>>> decoded.channel_count(), decoded.frame_count()
(1, 3)
"""

from simplewav.codec import (
    WaveHeader,
    decode,
    decode_result,
    decode_stream,
    dequantize,
    encode,
    encode_result,
    quantize,
)
from simplewav.errors import (
    CodecResult,
    InvalidBuffer,
    IOFailure,
    MalformedHeader,
    TruncatedFile,
    UnsupportedBitDepth,
    UnsupportedFormat,
    WavError,
)
from simplewav.files import list_chunks, read_wav, read_wav_header, write_wav
from simplewav.pcm import PCMBuffer
from simplewav.types import BitDepth, SizeConvention

__all__ = [
    # Types
    "PCMBuffer",
    "WaveHeader",
    "BitDepth",
    "SizeConvention",
    # Codec
    "encode",
    "decode",
    "decode_stream",
    "encode_result",
    "decode_result",
    "quantize",
    "dequantize",
    # Files
    "read_wav",
    "read_wav_header",
    "write_wav",
    "list_chunks",
    # Errors
    "WavError",
    "UnsupportedBitDepth",
    "UnsupportedFormat",
    "MalformedHeader",
    "TruncatedFile",
    "InvalidBuffer",
    "IOFailure",
    "CodecResult",
]

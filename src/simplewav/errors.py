"""Error kinds raised by the WAV codec.

Every failure of :func:`simplewav.codec.encode` or :func:`simplewav.codec.decode`
is one of the :class:`WavError` subclasses below. Callers that prefer values over
exceptions can use :func:`simplewav.codec.encode_result` and
:func:`simplewav.codec.decode_result`, which wrap the outcome in a
:class:`CodecResult`.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")


class WavError(Exception):
    """Base class for all codec errors."""


class UnsupportedBitDepth(WavError):
    """Bit depth other than 8 or 16 on either path."""

    def __init__(self, bit_depth: int) -> None:
        self.bit_depth = bit_depth
        super().__init__(f"Unsupported bit depth: {bit_depth} (supported: 8, 16)")


class UnsupportedFormat(WavError):
    """fmt chunk declares a non-PCM audio format."""

    def __init__(self, format_tag: int) -> None:
        self.format_tag = format_tag
        super().__init__(f"Unsupported audio format tag: {format_tag:#06x} (only PCM is supported)")


class MalformedHeader(WavError):
    """RIFF, WAVE or fmt identifiers do not match, or header fields are unusable."""


class TruncatedFile(WavError):
    """Input ends before the data chunk or its samples are fully present."""


class InvalidBuffer(WavError):
    """PCM buffer cannot be encoded (ragged channels, NaN samples, bad rate)."""


class IOFailure(WavError):
    """Reading or writing the underlying file failed."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = path
        super().__init__(message)


@dataclass(frozen=True)
class CodecResult(Generic[T]):
    """Outcome of an encode or decode call as a value."""

    ok: bool
    value: T | None = None
    error: WavError | None = None

    @classmethod
    def success(cls, value: T) -> "CodecResult[T]":
        """Create a successful result."""
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: WavError) -> "CodecResult[T]":
        """Create a failed result."""
        return cls(ok=False, error=error)

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        if self.value is None:
            raise ValueError("CodecResult holds neither a value nor an error")
        return self.value

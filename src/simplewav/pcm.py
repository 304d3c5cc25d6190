"""In-memory multi-channel PCM signal."""

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

from simplewav.types import ChannelData


@dataclass(frozen=True)
class PCMBuffer:
    """A multi-channel signal in the normalized [-1.0, 1.0] float domain.

    The buffer does no validation of its own; the codec checks bit depth,
    channel lengths and sample values when encoding.
    """

    sample_rate: int
    """Samples per second."""

    bit_depth: int
    """Bits per stored sample (8 or 16 for encodable buffers)."""

    channels: list[ChannelData] = field(default_factory=list)
    """One float64 sample array per channel, all of equal length."""

    @classmethod
    def from_channels(
        cls,
        sample_rate: int,
        bit_depth: int,
        channels: Sequence[ArrayLike],
    ) -> "PCMBuffer":
        """Build a buffer from any sequence of per-channel sample sequences."""
        return cls(
            sample_rate=sample_rate,
            bit_depth=bit_depth,
            channels=[np.asarray(ch, dtype=np.float64) for ch in channels],
        )

    def channel_count(self) -> int:
        return len(self.channels)

    def frame_count(self) -> int:
        return len(self.channels[0]) if self.channels else 0

    def duration(self) -> float:
        """Length of the signal in seconds."""
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count() / self.sample_rate

    def as_array(self) -> NDArray[np.float64]:
        """Return the samples as a (frames, channels) array.

        Row-major flattening of the result gives channel-major interleaving:
        ch0, ch1, ... for frame 0, then frame 1, and so on.
        """
        if not self.channels:
            return np.zeros((0, 0), dtype=np.float64)
        return np.stack(self.channels, axis=1)

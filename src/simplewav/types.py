from enum import Enum
from typing import Literal, TypeAlias

import numpy as np
from numpy.typing import NDArray

ChannelData: TypeAlias = NDArray[np.float64]

BitDepth = Literal[8, 16]


class SizeConvention(str, Enum):
    """How the data chunk size and the derived fmt fields are accounted.

    ``fixed`` counts every sample as two bytes in the data chunk size no matter
    the bit depth, with per-channel block align. This is the legacy
    ofxSimpleWavFile convention.

    ``exact`` uses the canonical RIFF accounting: the true sample width in the
    data size, and block align / byte rate covering all channels.
    """

    fixed = "fixed"
    exact = "exact"

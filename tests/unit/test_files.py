"""Unit tests for reading and writing WAV files on disk."""

from pathlib import Path

import numpy as np
import pytest
from scipy.io import wavfile

from simplewav import (
    InvalidBuffer,
    IOFailure,
    MalformedHeader,
    PCMBuffer,
    SizeConvention,
    TruncatedFile,
    UnsupportedBitDepth,
    encode,
    list_chunks,
    read_wav,
    read_wav_header,
    write_wav,
)


def _stereo_buffer(num_frames: int = 256) -> PCMBuffer:
    t = np.arange(num_frames) / 8000
    return PCMBuffer.from_channels(
        8000,
        16,
        [0.5 * np.sin(2 * np.pi * 440 * t), 0.25 * np.cos(2 * np.pi * 220 * t)],
    )


class TestWriteWav:
    """Tests for write_wav."""

    def test_writes_encoded_bytes(self, tmp_path: Path) -> None:
        buffer = _stereo_buffer()
        path = tmp_path / "out.wav"

        write_wav(path, buffer)

        assert path.read_bytes() == encode(buffer)
        assert not (tmp_path / ".out.wav.tmp").exists()

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "out.wav"
        write_wav(path, _stereo_buffer())
        assert path.exists()

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.wav"
        path.write_bytes(b"old contents")
        write_wav(path, _stereo_buffer())
        assert path.read_bytes()[:4] == b"RIFF"

    def test_encode_failure_writes_nothing(self, tmp_path: Path) -> None:
        path = tmp_path / "out.wav"
        with pytest.raises(UnsupportedBitDepth):
            write_wav(path, PCMBuffer.from_channels(8000, 24, [[0.0]]))
        assert not path.exists()

    def test_invalid_buffer(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidBuffer):
            write_wav(tmp_path / "out.wav", PCMBuffer.from_channels(8000, 16, [[0.0], []]))

    def test_unwritable_path(self, tmp_path: Path) -> None:
        # A regular file where a directory is expected
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"")
        with pytest.raises(IOFailure) as exc_info:
            write_wav(blocker / "out.wav", _stereo_buffer())
        assert exc_info.value.path == blocker / "out.wav"

    def test_failed_write_leaves_no_temp_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def write_partially(self: Path, data: bytes) -> int:
            with open(self, "wb") as f:
                f.write(data[:10])
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(Path, "write_bytes", write_partially)

        with pytest.raises(IOFailure):
            write_wav(tmp_path / "out.wav", _stereo_buffer())

        assert list(tmp_path.iterdir()) == []


class TestReadWav:
    """Tests for read_wav and read_wav_header."""

    def test_roundtrip(self, tmp_path: Path) -> None:
        buffer = _stereo_buffer()
        path = tmp_path / "roundtrip.wav"
        write_wav(path, buffer)

        loaded = read_wav(path)

        assert loaded.channel_count() == 2
        assert loaded.frame_count() == 256
        assert loaded.sample_rate == 8000
        for original, restored in zip(buffer.channels, loaded.channels, strict=True):
            np.testing.assert_allclose(restored, original, atol=2 / 65536)

    def test_missing_file(self) -> None:
        with pytest.raises(IOFailure):
            read_wav(Path("/nonexistent/path/file.wav"))

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(IOFailure):
            read_wav(tmp_path)

    def test_invalid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "invalid.wav"
        path.write_bytes(b"not a wav file")
        with pytest.raises(MalformedHeader):
            read_wav(path)

    def test_header_of_undecodable_file(self, tmp_path: Path) -> None:
        """Headers can be read even when the bit depth is unsupported."""
        wav = encode(PCMBuffer.from_channels(44100, 16, [[0.0, 0.5]]))
        path = tmp_path / "24bit.wav"
        path.write_bytes(wav[:34] + (24).to_bytes(2, "little") + wav[36:])

        header = read_wav_header(path)

        assert header.bits_per_sample == 24
        assert header.sample_rate == 44100
        with pytest.raises(UnsupportedBitDepth):
            read_wav(path)


class TestListChunks:
    """Tests for list_chunks."""

    def test_canonical_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.wav"
        write_wav(path, _stereo_buffer(10))
        chunks = list_chunks(path)
        assert [(c.name, c.size) for c in chunks] == [("fmt ", 16), ("data", 40)]

    def test_fixed_8bit_file_stops_at_data(self, tmp_path: Path) -> None:
        path = tmp_path / "out.wav"
        write_wav(path, PCMBuffer.from_channels(8000, 8, [[0.0] * 10]))
        chunks = list_chunks(path)
        assert [c.name for c in chunks] == ["fmt ", "data"]
        assert chunks[-1].size == 20

    def test_invalid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "invalid.wav"
        path.write_bytes(b"RIFF")
        with pytest.raises(TruncatedFile):
            list_chunks(path)


class TestInteroperability:
    """Files are readable and writable by scipy's independent WAV implementation."""

    def test_scipy_reads_mono_16bit(self, tmp_path: Path) -> None:
        path = tmp_path / "mono.wav"
        write_wav(path, PCMBuffer.from_channels(8000, 16, [[0.0, 1.0, -1.0, 0.5]]))

        sample_rate, data = wavfile.read(str(path))

        assert sample_rate == 8000
        assert data.dtype == np.int16
        np.testing.assert_array_equal(data, [0, 32767, -32768, 16384])

    def test_scipy_reads_stereo_exact(self, tmp_path: Path) -> None:
        buffer = _stereo_buffer(64)
        path = tmp_path / "stereo.wav"
        write_wav(path, buffer, convention=SizeConvention.exact)

        sample_rate, data = wavfile.read(str(path))

        assert sample_rate == 8000
        assert data.shape == (64, 2)
        np.testing.assert_allclose(data[:, 1] / 32768, buffer.channels[1], atol=2 / 65536)

    def test_reads_scipy_output(self, tmp_path: Path) -> None:
        codes = np.array([[0, 100], [-32768, 32767], [16384, -16384]], dtype=np.int16)
        path = tmp_path / "scipy.wav"
        wavfile.write(str(path), 22050, codes)

        for convention in SizeConvention:
            buffer = read_wav(path, convention=convention)
            assert buffer.sample_rate == 22050
            assert buffer.channel_count() == 2
            assert buffer.frame_count() == 3
            np.testing.assert_array_equal(buffer.channels[0], codes[:, 0] / 32768)
            np.testing.assert_array_equal(buffer.channels[1], codes[:, 1] / 32768)

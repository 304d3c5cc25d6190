import json
import sys
from pathlib import Path
from typing import Annotated

import numpy as np
from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from simplewav.cli.validators import (
    validate_amplitude,
    validate_non_negative_float,
    validate_positive_float,
    validate_positive_integer,
)
from simplewav.errors import WavError
from simplewav.files import list_chunks, read_wav, read_wav_header, write_wav
from simplewav.pcm import PCMBuffer
from simplewav.riff import WAVE_FORMAT_PCM
from simplewav.tone import tone_buffer
from simplewav.types import BitDepth, SizeConvention

app = App(name="simplewav", help="Read, write and inspect PCM WAV files")
console = Console()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


@app.command
def tone(
    output: Path = Path("tone.wav"),
    frequency: Annotated[float, Parameter(validator=validate_positive_float)] = 100.0,
    duration: Annotated[float, Parameter(validator=validate_positive_float)] = 3.0,
    sample_rate: Annotated[int, Parameter(validator=validate_positive_integer)] = 48000,
    bit_depth: BitDepth = 16,
    fade: Annotated[float, Parameter(validator=validate_non_negative_float)] = 0.1,
    amplitude: Annotated[float, Parameter(validator=validate_amplitude)] = 1.0,
    channels: Annotated[int, Parameter(validator=validate_positive_integer)] = 1,
    convention: SizeConvention = SizeConvention.fixed,
) -> int:
    """
    Generate a faded sine tone and write it as a WAV file.

    Parameters
    ----------
    output: Path
        The output destination for the .wav file
    frequency: float
        Tone frequency in Hz
    duration: float
        Tone length in seconds
    sample_rate: int
        Sample rate in Hz
    bit_depth: BitDepth
        Bits per sample (8 or 16)
    fade: float
        Length of the linear fade-in and fade-out in seconds
    amplitude: float
        Peak amplitude in the normalized [0, 1] range
    channels: int
        Number of channels; every channel carries the same tone
    convention: SizeConvention
        Data size accounting: 'fixed' (ofxSimpleWavFile layout) or 'exact' (canonical RIFF)
    """
    buffer = tone_buffer(
        frequency=frequency,
        duration=duration,
        sample_rate=sample_rate,
        bit_depth=bit_depth,
        fade=fade,
        amplitude=amplitude,
        num_channels=channels,
    )

    console.print(f"Generating {frequency:g} Hz tone, {duration:g}s at {sample_rate} Hz...")
    try:
        write_wav(output, buffer, convention=convention)
    except WavError as e:
        print_error(f"Error writing {output}: {e}")
        return 1

    print_success(f"Wrote {output}")
    _print_shape(buffer)
    return 0


@app.command
def info(
    file: Path,
    convention: SizeConvention = SizeConvention.fixed,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
) -> int:
    """
    Display the header, chunk layout and signal shape of a WAV file.

    Parameters
    ----------
    file: Path
        The path to the .wav file
    convention: SizeConvention
        Data size accounting used to decode the file
    output_json: bool
        Output results as JSON (default: False)
    """
    if not file.exists():
        print_error(f"Error: File not found: {file}")
        return 1

    try:
        header = read_wav_header(file)
        chunks = list_chunks(file)
    except WavError as e:
        print_error(f"[FAIL] {file}: {e}")
        return 1

    results: dict[str, object] = {
        "file": str(file),
        "format_tag": header.format_tag,
        "channels": header.num_channels,
        "sample_rate": header.sample_rate,
        "byte_rate": header.byte_rate,
        "block_align": header.block_align,
        "bits_per_sample": header.bits_per_sample,
        "riff_size": header.riff_size,
        "data_size": header.data_size,
        "chunks": [{"id": chunk.name, "size": chunk.size} for chunk in chunks],
    }

    file_size = file.stat().st_size
    warnings = [
        f"{chunk.name!r} chunk declares {chunk.size} bytes but only "
        f"{max(file_size - chunk.offset, 0)} are stored"
        for chunk in chunks
        if chunk.offset + chunk.size > file_size
    ]
    results["warnings"] = warnings

    decode_error: str | None = None
    try:
        buffer = read_wav(file, convention=convention)
    except WavError as e:
        decode_error = str(e)
    else:
        results["frames"] = buffer.frame_count()
        results["duration_seconds"] = buffer.duration()
        results["peak"] = [float(np.max(np.abs(ch))) if len(ch) else 0.0 for ch in buffer.channels]

    if output_json:
        results["error"] = decode_error
        console.print(json.dumps(results, indent=2), markup=False, soft_wrap=True)
        return 0 if decode_error is None else 1

    format_name = "PCM" if header.format_tag == WAVE_FORMAT_PCM else "PCM (extensible)"
    console.print(f"[bold]WAV file: {file}[/bold]")
    console.print(f"  Format: {format_name}")
    console.print(f"  Channels: {header.num_channels}")
    console.print(f"  Sample rate: {header.sample_rate} Hz")
    console.print(f"  Bits per sample: {header.bits_per_sample}")
    console.print(f"  Byte rate: {header.byte_rate}")
    console.print(f"  Block align: {header.block_align}")
    console.print(f"  RIFF size: {header.riff_size}")
    console.print(f"  Data size: {header.data_size}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Chunk", justify="left")
    table.add_column("Size", justify="right")
    table.add_column("Offset", justify="right")
    for chunk in chunks:
        table.add_row(repr(chunk.name), str(chunk.size), str(chunk.offset))
    console.print(table)

    for warning in warnings:
        print_warning(f"  [WARN] {warning}")

    if decode_error is not None:
        print_error(f"[FAIL] Cannot decode samples: {decode_error}")
        return 1

    _print_shape(buffer)
    console.print(f"  Duration: {buffer.duration():.3f}s")
    return 0


@app.command
def convert(
    source: Path,
    output: Path,
    bit_depth: BitDepth | None = None,
    source_convention: SizeConvention = SizeConvention.fixed,
    convention: SizeConvention = SizeConvention.fixed,
) -> int:
    """
    Decode a WAV file and write it again, optionally changing its layout.

    Parameters
    ----------
    source: Path
        The .wav file to read
    output: Path
        The .wav file to write
    bit_depth: BitDepth | None
        Bits per sample of the output (default: same as source)
    source_convention: SizeConvention
        Data size accounting used to decode the source
    convention: SizeConvention
        Data size accounting used to encode the output
    """
    if not source.exists():
        print_error(f"Error: Source file not found: {source}")
        return 1

    try:
        buffer = read_wav(source, convention=source_convention)
    except WavError as e:
        print_error(f"Error reading {source}: {e}")
        return 1

    if bit_depth is not None and bit_depth != buffer.bit_depth:
        console.print(f"Requantizing {buffer.bit_depth}-bit -> {bit_depth}-bit...")
        buffer = PCMBuffer(
            sample_rate=buffer.sample_rate,
            bit_depth=bit_depth,
            channels=buffer.channels,
        )

    try:
        write_wav(output, buffer, convention=convention)
    except WavError as e:
        print_error(f"Error writing {output}: {e}")
        return 1

    print_success(f"Converted {source} -> {output}")
    _print_shape(buffer)
    return 0


def _print_shape(buffer: PCMBuffer) -> None:
    console.print(f"  Channel: {buffer.channel_count()}")
    console.print(f"  Length: {buffer.frame_count()}")


if __name__ == "__main__":
    sys.exit(app())

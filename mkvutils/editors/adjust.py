"""Pad and trim editors — add or remove audio at either end of a file."""

import logging
from pathlib import Path

from mkvutils import ffutil
from mkvutils.errors import InvalidInputError, NotFoundError
from mkvutils.filtergraph import Delay
from mkvutils.manifest import AudioFormat, PadConfig, TrimConfig
from mkvutils.timestamps import format_seconds, ms_to_seconds

logger = logging.getLogger(__name__)


def _check_input(input_path: Path) -> Path:
    input_path = Path(input_path)
    if not input_path.is_file():
        raise NotFoundError(f"Input file not found: {input_path}")
    return input_path


def pad_audio(
    input_path: Path,
    config: PadConfig,
    output_path: Path | None = None,
    audio_format: AudioFormat | None = None,
) -> Path:
    """Prepend ``start_ms`` and append ``end_ms`` of silence."""
    input_path = _check_input(input_path)
    start = ms_to_seconds(config.start_ms)
    end = ms_to_seconds(config.end_ms)
    fmt = audio_format or AudioFormat()
    output_path = output_path or input_path.with_name(input_path.stem + "_padded" + fmt.extension)

    sample_rate = ffutil.probe_audio(input_path).audio_sample_rate
    filters = []
    if start > 0:
        filters.append(Delay(start).render(sample_rate))
    if end > 0:
        filters.append(f"apad=pad_dur={format_seconds(end)}")

    ffutil.filter_audio(input_path, output_path, ",".join(filters) or "anull", codec=fmt.codec)
    logger.info("Padded %s (+%ss start, +%ss end) -> %s", input_path, start, end, output_path)
    return output_path


def trim_audio(
    input_path: Path,
    config: TrimConfig,
    output_path: Path | None = None,
    audio_format: AudioFormat | None = None,
) -> Path:
    """Drop ``start_ms`` from the front and ``end_ms`` from the back."""
    input_path = _check_input(input_path)
    start = ms_to_seconds(config.start_ms)
    end_cut = ms_to_seconds(config.end_ms)
    fmt = audio_format or AudioFormat()
    output_path = output_path or input_path.with_name(input_path.stem + "_trimmed" + fmt.extension)

    duration = ffutil.probe_audio(input_path).duration
    end = duration - end_cut
    if end <= start:
        raise InvalidInputError(
            f"Trimming {config.start_ms}ms + {config.end_ms}ms would remove all of "
            f"{input_path} ({duration}s)"
        )

    audio_filter = (
        f"atrim=start={format_seconds(start)}:end={format_seconds(end)},"
        "asetpts=PTS-STARTPTS"
    )
    ffutil.filter_audio(input_path, output_path, audio_filter, codec=fmt.codec)
    logger.info("Trimmed %s to [%s, %s) -> %s", input_path, start, end, output_path)
    return output_path

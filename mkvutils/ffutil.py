"""FFmpeg/ffprobe subprocess helpers."""

import json
import logging
import os
import shutil
import subprocess
from decimal import Decimal, InvalidOperation
from pathlib import Path

from mkvutils.errors import (
    EngineFailureError,
    FFmpegNotFoundError,
    NoAudioStreamError,
    NotFoundError,
    UnreadableMediaError,
)
from mkvutils.models import ProbeResult, StreamInfo
from mkvutils.timestamps import format_seconds

logger = logging.getLogger(__name__)


def ffmpeg_bin() -> str:
    return os.environ.get("MKVUTILS_FFMPEG", "ffmpeg")


def ffprobe_bin() -> str:
    return os.environ.get("MKVUTILS_FFPROBE", "ffprobe")


def check_ffmpeg() -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in (ffmpeg_bin(), ffprobe_bin()):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def run(cmd: list[str]) -> subprocess.CompletedProcess:
    """Run an engine command, raising EngineFailureError on a non-zero exit."""
    logger.debug("running: %s", " ".join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        raise EngineFailureError(cmd, result.returncode, result.stderr or "")
    return result


def _parse_fps(rate: str | None) -> float | None:
    if not rate or "/" not in rate:
        return None
    num, den = rate.split("/")
    if int(den) == 0:
        return None
    return int(num) / int(den)


def _opt_int(value) -> int | None:
    return int(value) if value not in (None, "", "N/A") else None


def parse_probe_output(data: dict, source: Path | str = "") -> ProbeResult:
    """Build a ProbeResult from ffprobe's ``-print_format json`` output."""
    fmt = data.get("format", {})
    try:
        duration = Decimal(fmt["duration"])
    except (KeyError, InvalidOperation) as e:
        raise UnreadableMediaError(f"No duration reported for {source}") from e

    streams = [
        StreamInfo(
            index=int(s.get("index", i)),
            codec_type=s.get("codec_type", ""),
            codec_name=s.get("codec_name", ""),
            sample_rate=_opt_int(s.get("sample_rate")),
            channels=_opt_int(s.get("channels")),
            width=_opt_int(s.get("width")),
            height=_opt_int(s.get("height")),
            fps=_parse_fps(s.get("r_frame_rate")) if s.get("codec_type") == "video" else None,
        )
        for i, s in enumerate(data.get("streams", []))
    ]

    return ProbeResult(
        duration=duration,
        format_name=fmt.get("format_long_name") or fmt.get("format_name", ""),
        bit_rate=_opt_int(fmt.get("bit_rate")),
        size=_opt_int(fmt.get("size")),
        streams=streams,
    )


def probe(input_path: Path) -> ProbeResult:
    """Extract media metadata via ffprobe."""
    input_path = Path(input_path)
    if not input_path.is_file():
        raise NotFoundError(f"Input file not found: {input_path}")

    cmd = [
        ffprobe_bin(),
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        raise UnreadableMediaError(
            f"ffprobe could not read {input_path}: {result.stderr.strip()}"
        )
    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise UnreadableMediaError(f"Unparsable ffprobe output for {input_path}") from e
    return parse_probe_output(data, input_path)


def probe_audio(input_path: Path) -> ProbeResult:
    """Like :func:`probe`, but the file must carry an audio stream."""
    result = probe(input_path)
    if result.audio_stream is None:
        raise NoAudioStreamError(f"No audio stream found in {input_path}")
    return result


def extract_segment(
    input_path: Path,
    output_path: Path,
    start: Decimal,
    duration: Decimal | None,
    codec: str = "flac",
) -> Path:
    """Cut ``[start, start + duration)`` (or ``[start, EOF)``) into a new file."""
    cmd = [
        ffmpeg_bin(), "-y",
        "-i", str(input_path),
        "-ss", format_seconds(start),
    ]
    if duration is not None:
        cmd += ["-t", format_seconds(duration)]
    cmd += ["-vn", "-acodec", codec, str(output_path)]
    run(cmd)
    return output_path


def mix_tracks(
    inputs: list[Path], filter_complex: str, output_path: Path, codec: str = "flac"
) -> Path:
    """Mix several inputs through a rendered filter graph ending in ``[out]``."""
    cmd = [ffmpeg_bin(), "-y"]
    for path in inputs:
        cmd += ["-i", str(path)]
    cmd += [
        "-filter_complex", filter_complex,
        "-map", "[out]",
        "-acodec", codec,
        str(output_path),
    ]
    run(cmd)
    return output_path


def filter_audio(
    input_path: Path, output_path: Path, audio_filter: str, codec: str = "flac"
) -> Path:
    cmd = [
        ffmpeg_bin(), "-y",
        "-i", str(input_path),
        "-af", audio_filter,
        "-vn",
        "-acodec", codec,
        str(output_path),
    ]
    run(cmd)
    return output_path


def extract_audio(input_path: Path, output_path: Path, codec: str = "flac") -> Path:
    """Drop the video and re-encode the audio."""
    cmd = [
        ffmpeg_bin(), "-y",
        "-i", str(input_path),
        "-vn",
        "-acodec", codec,
        str(output_path),
    ]
    run(cmd)
    return output_path


def replace_audio(video_path: Path, audio_path: Path, output_path: Path) -> Path:
    """Mux the first video stream of one file with the first audio stream of another."""
    cmd = [
        ffmpeg_bin(), "-y",
        "-i", str(video_path),
        "-i", str(audio_path),
        "-c:v", "copy",
        "-c:a", "copy",
        "-map", "0:v:0",
        "-map", "1:a:0",
        str(output_path),
    ]
    run(cmd)
    return output_path

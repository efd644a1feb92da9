"""Track editors — pull audio out of a video, put new audio back in, describe media."""

import logging
from pathlib import Path

from mkvutils import ffutil
from mkvutils.errors import NotFoundError
from mkvutils.manifest import AudioFormat
from mkvutils.models import ProbeResult

logger = logging.getLogger(__name__)


def extract(
    video_path: Path, output_path: Path | None = None, audio_format: AudioFormat | None = None
) -> Path:
    video_path = Path(video_path)
    if not video_path.is_file():
        raise NotFoundError(f"Input file not found: {video_path}")
    fmt = audio_format or AudioFormat()
    output_path = output_path or video_path.with_suffix(fmt.extension)
    ffutil.extract_audio(video_path, output_path, codec=fmt.codec)
    logger.info("Extracted audio to: %s", output_path)
    return output_path


def replace(
    video_path: Path,
    audio_path: Path | None = None,
    output_path: Path | None = None,
    audio_format: AudioFormat | None = None,
) -> Path:
    """Swap the audio of *video_path* for *audio_path* without re-encoding.

    *audio_path* defaults to the file ``extract`` would have written.
    """
    video_path = Path(video_path)
    if not video_path.is_file():
        raise NotFoundError(f"Input file not found: {video_path}")
    fmt = audio_format or AudioFormat()
    audio_path = Path(audio_path) if audio_path else video_path.with_suffix(fmt.extension)
    if not audio_path.is_file():
        raise NotFoundError(f"Audio file not found: {audio_path}")
    output_path = output_path or video_path.with_name(video_path.stem + "_replaced.mkv")

    ffutil.replace_audio(video_path, audio_path, output_path)
    logger.info("Created new video with replaced audio: %s", output_path)
    return output_path


def _format_size(size: int) -> str:
    for unit in ("B", "KiB", "MiB", "GiB"):
        if size < 1024 or unit == "GiB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return str(size)


def describe(result: ProbeResult) -> list[str]:
    """Human-readable summary lines for ``info``."""
    lines = [
        f"Container: {result.format_name}",
        f"Duration: {result.duration}s",
    ]
    if result.bit_rate:
        lines.append(f"Bitrate: {result.bit_rate // 1000} kb/s")
    if result.size:
        lines.append(f"Size: {_format_size(result.size)}")
    for s in result.streams:
        parts = [f"Stream #{s.index}: {s.codec_type}", s.codec_name]
        if s.codec_type == "audio":
            if s.sample_rate:
                parts.append(f"{s.sample_rate} Hz")
            if s.channels:
                parts.append(f"{s.channels} channels")
        elif s.codec_type == "video":
            if s.width and s.height:
                parts.append(f"{s.width}x{s.height}")
            if s.fps:
                parts.append(f"{s.fps:.2f} fps")
        lines.append(", ".join(parts))
    return lines


def info(media_path: Path) -> list[str]:
    return describe(ffutil.probe(media_path))

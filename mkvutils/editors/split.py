"""Split editor — cuts one audio file into numbered tracks."""

import logging
from pathlib import Path
from typing import Callable, Sequence

from mkvutils import ffutil
from mkvutils.errors import NotFoundError
from mkvutils.manifest import AudioFormat
from mkvutils.planners.split import plan_split

logger = logging.getLogger(__name__)


def default_tracks_dir(input_path: Path) -> Path:
    return input_path.with_name(input_path.stem + "_tracks")


def split_audio(
    input_path: Path,
    timestamps: Sequence[str],
    output_dir: Path | None = None,
    overlap_ms: int = 0,
    audio_format: AudioFormat | None = None,
    on_progress: Callable[[float], None] | None = None,
) -> list[Path]:
    """Write ``track_01``, ``track_02``, ... into *output_dir*.

    The whole plan is validated before ffmpeg runs. A failing ffmpeg call
    aborts the split and leaves already written tracks in place.
    """
    input_path = Path(input_path)
    if not input_path.is_file():
        raise NotFoundError(f"Audio file not found: {input_path}")

    fmt = audio_format or AudioFormat()
    segments = plan_split(timestamps, overlap_ms)

    output_dir = Path(output_dir) if output_dir else default_tracks_dir(input_path)
    output_dir.mkdir(parents=True, exist_ok=True)

    outputs: list[Path] = []
    for n, seg in enumerate(segments):
        out = output_dir / f"{seg.track_name}{fmt.extension}"
        ffutil.extract_segment(input_path, out, seg.start, seg.duration, codec=fmt.codec)
        logger.info("Created track %d: %s", seg.index, out)
        outputs.append(out)
        if on_progress:
            on_progress((n + 1) / len(segments))
    return outputs

"""Merge editor — joins a directory of tracks, crossfading at each seam."""

import logging
import shutil
from pathlib import Path

from mkvutils import ffutil
from mkvutils.errors import NotFoundError
from mkvutils.filtergraph import build_merge_graph, render
from mkvutils.manifest import AudioFormat
from mkvutils.models import MergePlan
from mkvutils.planners.merge import plan_merge
from mkvutils.timestamps import ms_to_seconds

logger = logging.getLogger(__name__)


def default_merged_path(input_dir: Path, extension: str = ".flac") -> Path:
    if not input_dir.name:
        input_dir = input_dir.resolve()
    return input_dir.with_name(input_dir.name + "_merged" + extension)


def discover_tracks(
    input_dir: Path, extension: str = ".flac", exclude: Path | None = None
) -> list[Path]:
    """Files in *input_dir* with *extension*, sorted lexicographically by name.

    This ordering is what makes split output (``track_01``, ``track_02``, ...)
    merge back in sequence.
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise NotFoundError(f"Input directory not found: {input_dir}")

    excluded = exclude.resolve() if exclude else None
    tracks = sorted(
        (
            p for p in input_dir.iterdir()
            if p.is_file()
            and p.suffix.lower() == extension.lower()
            and p.resolve() != excluded
        ),
        key=lambda p: p.name,
    )
    if not tracks:
        raise NotFoundError(f"No {extension} files found in directory: {input_dir}")
    return tracks


def plan_tracks(
    tracks: list[Path], overlap_ms: int = 0
) -> tuple[MergePlan, list[int | None]]:
    """Probe every track and plan the merge; also returns each track's sample rate."""
    probes = [ffutil.probe_audio(path) for path in tracks]
    plan = plan_merge([(path, p.duration) for path, p in zip(tracks, probes)], overlap_ms)
    return plan, [p.audio_sample_rate for p in probes]


def merge_tracks(
    input_dir: Path,
    output_path: Path | None = None,
    overlap_ms: int = 0,
    audio_format: AudioFormat | None = None,
) -> Path:
    """Merge every track in *input_dir* into one file and return its path."""
    ms_to_seconds(overlap_ms)
    fmt = audio_format or AudioFormat()
    input_dir = Path(input_dir)
    output_path = Path(output_path) if output_path else default_merged_path(input_dir, fmt.extension)

    tracks = discover_tracks(input_dir, fmt.extension, exclude=output_path)

    if len(tracks) == 1:
        shutil.copy2(tracks[0], output_path)
        logger.info("Single track, copied %s to %s", tracks[0], output_path)
        return output_path

    plan, sample_rates = plan_tracks(tracks, overlap_ms)
    filter_complex = render(build_merge_graph(plan, sample_rates))
    logger.debug("filter graph: %s", filter_complex)

    ffutil.mix_tracks(tracks, filter_complex, output_path, codec=fmt.codec)
    logger.info(
        "Merged %d tracks into %s (%ss)", len(tracks), output_path, plan.total_duration
    )
    return output_path

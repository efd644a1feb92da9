"""Merge planner — timeline placement and equal-power crossfade schedule.

Track ``i`` starts ``overlap`` seconds before the running end of the timeline
built from tracks ``1..i-1``. Where two tracks overlap, the outgoing one fades
out and the incoming one fades in over the whole overlap using quarter-sine
curves, so the squared gains sum to one and the mix needs no normalization.
"""

import logging
import math
from collections.abc import Mapping, Set
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from mkvutils.errors import InvalidInputError, NotFoundError
from mkvutils.models import MergeEntry, MergePlan
from mkvutils.timestamps import MILLISECOND, ms_to_seconds

logger = logging.getLogger(__name__)


def advance_total(
    previous_total: Decimal, file_duration: Decimal, overlap: Decimal, is_first: bool
) -> Decimal:
    """Timeline length after appending one more track."""
    if is_first:
        return file_duration
    return previous_total + file_duration - overlap


def equal_power_gains(progress: float) -> tuple[float, float]:
    """Gains of the outgoing and incoming track at ``progress`` (0..1) into a crossfade.

    Matches ffmpeg's ``qsin`` afade curve in both directions.
    """
    progress = min(max(progress, 0.0), 1.0)
    return math.cos(progress * math.pi / 2), math.sin(progress * math.pi / 2)


def _validate_order(tracks: Sequence[tuple[Path, Decimal]]) -> None:
    if isinstance(tracks, (Set, Mapping)):
        raise InvalidInputError("Merge input must be an ordered sequence of tracks")
    seen: set[Path] = set()
    for path, _ in tracks:
        path = Path(path)
        if path in seen:
            raise InvalidInputError(f"Track listed twice: {path}")
        seen.add(path)


def plan_merge(tracks: Sequence[tuple[Path, Decimal]], overlap_ms: int = 0) -> MergePlan:
    """Place each ``(path, duration)`` on a shared timeline with crossfades.

    Raises NotFoundError for an empty track list and InvalidInputError when the
    overlap cannot fit inside a track.
    """
    _validate_order(tracks)
    if not tracks:
        raise NotFoundError("No tracks to merge")

    overlap = ms_to_seconds(overlap_ms)
    last = len(tracks) - 1
    if last == 0:
        path, duration = tracks[0]
        duration = Decimal(str(duration))
        return MergePlan(
            entries=[MergeEntry(path=Path(path), duration=duration, start_offset=Decimal(0))],
            overlap=overlap,
            total_duration=duration,
        )

    entries: list[MergeEntry] = []
    total = Decimal(0)
    for i, (path, duration) in enumerate(tracks):
        duration = Decimal(str(duration))
        fade_in = overlap if i > 0 else Decimal(0)
        fade_out = overlap if i < last else Decimal(0)

        # Interior tracks carry both fades; if they met, three tracks would overlap.
        if fade_in + fade_out > duration:
            raise InvalidInputError(
                f"Overlap of {overlap_ms}ms does not fit in {path} "
                f"({duration.quantize(MILLISECOND)}s)"
            )

        start = Decimal(0) if i == 0 else total - overlap
        entries.append(
            MergeEntry(
                path=Path(path),
                duration=duration,
                start_offset=start,
                fade_in=fade_in,
                fade_out=fade_out,
            )
        )
        total = advance_total(total, duration, overlap, is_first=(i == 0))
        logger.debug(
            "track %d %s: delay=%s fade_in=%s fade_out=%s total=%s",
            i + 1, path, start, fade_in, fade_out, total,
        )

    return MergePlan(entries=entries, overlap=overlap, total_duration=total)

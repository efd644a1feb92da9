"""Split planner — timestamps and overlap to segment windows."""

import logging
from decimal import Decimal
from typing import Sequence

from mkvutils.errors import InvalidInputError
from mkvutils.models import Segment
from mkvutils.timestamps import format_timestamp, ms_to_seconds, to_seconds

logger = logging.getLogger(__name__)


def plan_split(timestamps: Sequence[str | Decimal | float], overlap_ms: int = 0) -> list[Segment]:
    """Return K+1 segments for K split points.

    Each segment after the first starts ``overlap_ms`` before the previous
    boundary and ends exactly on its own boundary; the last one is open-ended.
    Timestamps may be given as ``HH:MM:SS.mmm`` strings or as seconds.
    """
    if not timestamps:
        raise InvalidInputError("At least one timestamp must be provided")

    overlap = ms_to_seconds(overlap_ms)
    bounds = [to_seconds(t) for t in timestamps]

    if bounds[0] <= 0:
        raise InvalidInputError("First timestamp must be after 00:00:00.000")
    for prev, t in zip(bounds, bounds[1:]):
        if t <= prev:
            raise InvalidInputError(
                f"Timestamps must be strictly increasing: "
                f"{format_timestamp(t)} follows {format_timestamp(prev)}"
            )

    # An overlap reaching back past 0 would need a negative seek.
    if overlap > bounds[0]:
        raise InvalidInputError(
            f"Overlap of {overlap_ms}ms exceeds the first boundary "
            f"{format_timestamp(bounds[0])}"
        )

    segments = [Segment(index=1, start=Decimal("0.000"), duration=bounds[0])]
    for i in range(1, len(bounds)):
        start = bounds[i - 1] - overlap
        segments.append(Segment(index=i + 1, start=start, duration=bounds[i] - start))
    segments.append(Segment(index=len(bounds) + 1, start=bounds[-1] - overlap))

    for seg in segments:
        logger.debug(
            "track %d: start=%s duration=%s",
            seg.index, seg.start, "to end" if seg.duration is None else seg.duration,
        )
    return segments

"""Shared data types used across mkvutils."""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path


@dataclass(frozen=True)
class Segment:
    """One planned split window, in seconds.

    ``duration`` is None for the final segment, which runs to the end of input.
    """

    index: int
    start: Decimal
    duration: Decimal | None = None

    @property
    def end(self) -> Decimal | None:
        if self.duration is None:
            return None
        return self.start + self.duration

    @property
    def track_name(self) -> str:
        return f"track_{self.index:02d}"


@dataclass(frozen=True)
class MergeEntry:
    """Placement and fade schedule of one track on the merged timeline."""

    path: Path
    duration: Decimal
    start_offset: Decimal
    fade_in: Decimal = Decimal(0)
    fade_out: Decimal = Decimal(0)

    @property
    def fade_out_start(self) -> Decimal:
        return self.duration - self.fade_out


@dataclass
class MergePlan:
    entries: list[MergeEntry]
    overlap: Decimal
    total_duration: Decimal

    @property
    def is_passthrough(self) -> bool:
        return len(self.entries) == 1


@dataclass
class StreamInfo:
    """One stream as reported by ffprobe."""

    index: int
    codec_type: str
    codec_name: str
    sample_rate: int | None = None
    channels: int | None = None
    width: int | None = None
    height: int | None = None
    fps: float | None = None


@dataclass
class ProbeResult:
    """Metadata extracted from a media file via ffprobe."""

    duration: Decimal
    format_name: str = ""
    bit_rate: int | None = None
    size: int | None = None
    streams: list[StreamInfo] = field(default_factory=list)

    @property
    def audio_stream(self) -> StreamInfo | None:
        return next((s for s in self.streams if s.codec_type == "audio"), None)

    @property
    def video_stream(self) -> StreamInfo | None:
        return next((s for s in self.streams if s.codec_type == "video"), None)

    @property
    def audio_sample_rate(self) -> int | None:
        audio = self.audio_stream
        return audio.sample_rate if audio else None

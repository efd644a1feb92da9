"""Orchestrator — runs the editing command described by a Manifest."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Callable

from mkvutils import ffutil
from mkvutils.editors.adjust import pad_audio, trim_audio
from mkvutils.editors.merge import merge_tracks
from mkvutils.editors.split import split_audio
from mkvutils.editors.tracks import extract, info, replace
from mkvutils.manifest import Manifest

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    outputs: list[Path] = field(default_factory=list)
    duration_original: Decimal | None = None
    duration_final: Decimal | None = None
    info_lines: list[str] = field(default_factory=list)

    @property
    def output_path(self) -> Path | None:
        return self.outputs[0] if len(self.outputs) == 1 else None


def process(
    manifest: Manifest,
    on_progress: Callable[[str, float], None] | None = None,
) -> EngineResult:
    """Execute one manifest command.

    Args:
        manifest: Validated editing manifest.
        on_progress: Optional callback(stage_name, fraction_complete).
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    def _sub_progress(stage: str, base: float, span: float):
        """Return a callback that maps an editor's [0,1] to [base, base+span]."""
        def cb(frac: float) -> None:
            _progress(stage, base + frac * span)
        return cb

    ffutil.check_ffmpeg()
    fmt = manifest.audio_format
    result = EngineResult()

    if manifest.command == "info":
        _progress("Probing media", 0.0)
        result.info_lines = info(manifest.input)
        _progress("Done", 1.0)
        return result

    # --- Run the command ---
    if manifest.command == "split":
        _progress("Splitting tracks", 0.05)
        result.outputs = split_audio(
            manifest.input,
            manifest.split.timestamps,
            output_dir=manifest.output,
            overlap_ms=manifest.split.overlap_ms,
            audio_format=fmt,
            on_progress=_sub_progress("Splitting tracks", 0.05, 0.85),
        )
    elif manifest.command == "merge":
        _progress("Merging tracks", 0.05)
        result.outputs = [
            merge_tracks(
                manifest.input,
                manifest.output,
                overlap_ms=manifest.merge.overlap_ms,
                audio_format=fmt,
            )
        ]
    elif manifest.command == "extract":
        _progress("Extracting audio", 0.05)
        result.outputs = [extract(manifest.input, manifest.output, audio_format=fmt)]
    elif manifest.command == "replace":
        _progress("Replacing audio", 0.05)
        result.outputs = [
            replace(manifest.input, manifest.replace.audio, manifest.output, audio_format=fmt)
        ]
    elif manifest.command == "pad":
        _progress("Padding audio", 0.05)
        result.outputs = [pad_audio(manifest.input, manifest.pad, manifest.output, audio_format=fmt)]
    elif manifest.command == "trim":
        _progress("Trimming audio", 0.05)
        result.outputs = [trim_audio(manifest.input, manifest.trim, manifest.output, audio_format=fmt)]
    else:
        raise ValueError(f"Unknown command: {manifest.command}")

    # Split output durations are per track; only single-file results get a total.
    if result.output_path is not None:
        _progress("Verifying result", 0.92)
        result.duration_final = ffutil.probe(result.output_path).duration
        if manifest.input.is_file():
            result.duration_original = ffutil.probe(manifest.input).duration

    _progress("Done", 1.0)
    return result

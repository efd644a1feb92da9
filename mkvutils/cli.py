"""Thin CLI entry point — builds a Manifest and calls the engine."""

import argparse
import logging
import sys
from pathlib import Path

from mkvutils.engine import process
from mkvutils.errors import EngineFailureError, MkvUtilsError
from mkvutils.logging_config import setup_logging
from mkvutils.manifest import (
    Manifest,
    MergeConfig,
    PadConfig,
    ReplaceConfig,
    SplitConfig,
    TrimConfig,
    load_manifest,
)

EPILOG = """\
Timestamps should be in HH:MM:SS.mmm format (millisecond precision).

With -l, each split track starts overlap_ms before its split point, and merge
shifts every track after the first back by overlap_ms and crossfades it with
the previous one using equal-power curves (squared gains sum to 1).

Example:
  mkvutils split audio.flac -o custom_tracks -l 200 00:03:45.123 00:08:30.456
"""


class _Parser(argparse.ArgumentParser):
    """Usage errors exit with status 1 like every other failure."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="mkvutils",
        description="mkvutils — split, merge, crossfade and remux audio with ffmpeg.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for progress, -vv for planning details")
    sub = parser.add_subparsers(dest="command")

    ext = sub.add_parser("extract", help="Extract audio from video file to FLAC")
    ext.add_argument("input", type=Path, help="Input video file")
    ext.add_argument("-o", "--output", type=Path, help="Output FLAC file (default: <video_name>.flac)")

    rep = sub.add_parser("replace", help="Replace audio in video file with FLAC")
    rep.add_argument("input", type=Path, help="Input video file")
    rep.add_argument("-a", "--audio", type=Path, help="Replacement audio (default: <video_name>.flac)")
    rep.add_argument("-o", "--output", type=Path, help="Output video (default: <video_name>_replaced.mkv)")

    inf = sub.add_parser("info", help="Display detailed media information")
    inf.add_argument("input", type=Path, help="Media file")

    spl = sub.add_parser("split", help="Split audio file into tracks using timestamps")
    spl.add_argument("input", type=Path, help="Input audio file")
    spl.add_argument("-o", "--output", type=Path, help="Output directory (default: <audio_name>_tracks)")
    spl.add_argument("-l", "--overlap", type=int, default=0, help="Overlap with the previous track in ms")
    spl.add_argument("timestamps", nargs="+", help="Split points, HH:MM:SS.mmm")

    mrg = sub.add_parser("merge", help="Merge multiple FLAC files into a single file")
    mrg.add_argument("input", type=Path, help="Directory of tracks, merged in name order")
    mrg.add_argument("-o", "--output", type=Path, help="Output file (default: <directory_name>_merged.flac)")
    mrg.add_argument("-l", "--overlap", type=int, default=0, help="Crossfade length in ms")

    for name, verb, suffix in (
        ("pad", "Add silence to", "padded"),
        ("trim", "Cut audio from", "trimmed"),
    ):
        p = sub.add_parser(name, help=f"{verb} the start and/or end of an audio file")
        p.add_argument("input", type=Path, help="Input audio file")
        p.add_argument("-b", "--begin", type=int, default=0, help="Milliseconds at the start")
        p.add_argument("-e", "--end", type=int, default=0, help="Milliseconds at the end")
        p.add_argument("-o", "--output", type=Path, help=f"Output file (default: <audio_name>_{suffix}.flac)")

    run = sub.add_parser("run", help="Execute a JSON manifest")
    run.add_argument("manifest", type=Path, help="Path to a JSON manifest file")

    serve = sub.add_parser("serve", help="Launch the web UI")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    return parser


def manifest_from_args(args: argparse.Namespace) -> Manifest:
    m = Manifest(command=args.command, input=args.input, output=getattr(args, "output", None))
    if args.command == "split":
        m.split = SplitConfig(timestamps=list(args.timestamps), overlap_ms=args.overlap)
    elif args.command == "merge":
        m.merge = MergeConfig(overlap_ms=args.overlap)
    elif args.command == "replace":
        m.replace = ReplaceConfig(audio=args.audio)
    elif args.command == "pad":
        m.pad = PadConfig(start_ms=args.begin, end_ms=args.end)
    elif args.command == "trim":
        m.trim = TrimConfig(start_ms=args.begin, end_ms=args.end)
    return m


def _report(m: Manifest, result) -> None:
    if m.command == "info":
        print(f"Media Information for: {m.input}")
        print("-" * 40)
        for line in result.info_lines:
            print(f"  {line}")
        print("-" * 40)
        return

    if m.command == "split":
        for i, path in enumerate(result.outputs, 1):
            print(f"Created track {i}: {path}")
        if result.outputs:
            print(f"All tracks have been created in: {result.outputs[0].parent}")
        return

    labels = {
        "merge": "Merged audio files into",
        "extract": "Extracted audio to",
        "replace": "Created new video with replaced audio",
        "pad": "Padded audio written to",
        "trim": "Trimmed audio written to",
    }
    print(f"{labels[m.command]}: {result.output_path}")
    if result.duration_final is not None:
        if result.duration_original is not None and m.command in ("pad", "trim"):
            print(f"  Duration: {result.duration_original:.3f}s -> {result.duration_final:.3f}s")
        else:
            print(f"  Duration: {result.duration_final:.3f}s")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    setup_logging(level)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from mkvutils.web import create_app
        app = create_app()
        print(f"mkvutils web UI: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    try:
        m = load_manifest(args.manifest) if args.command == "run" else manifest_from_args(args)
        result = process(m)
    except EngineFailureError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.stderr:
            sys.stderr.write(e.stderr)
        sys.exit(1)
    except (MkvUtilsError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    _report(m, result)


if __name__ == "__main__":
    main()

"""mkvutils — split, merge and crossfade audio with ffmpeg."""

__version__ = "0.3.0"

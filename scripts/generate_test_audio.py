#!/usr/bin/env python3
"""Generate synthetic test audio for mkvutils split/merge testing.

Produces 10 seconds of stereo white noise at 48 kHz, the same signal the
crossfade checks measure levels on:
  noise.flac   aevalsrc random(0)-0.5, 10 s
"""

import subprocess
import sys
from pathlib import Path


def generate_test_audio(output: Path, duration: float = 10.0, seed: int = 0) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi",
        "-i", f"aevalsrc='random({seed})-0.5':s=48000",
        "-t", str(duration),
        "-ar", "48000",
        "-ac", "2",
        "-acodec", "flac",
        str(output),
    ]
    subprocess.run(cmd, check=True, capture_output=True)
    return output


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/noise.flac")
    generate_test_audio(out)
    print(f"Generated: {out}")

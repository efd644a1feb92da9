"""Shared test fixtures."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    """A placeholder input; ffmpeg calls are mocked wherever this is used."""
    path = tmp_path / "album.flac"
    path.write_bytes(b"fLaC")
    return path


@pytest.fixture
def tracks_dir(tmp_path: Path) -> Path:
    d = tmp_path / "album_tracks"
    d.mkdir()
    for n in (1, 2, 3):
        (d / f"track_{n:02d}.flac").write_bytes(f"track {n}".encode())
    (d / "notes.txt").write_text("not audio")
    return d

"""JSON manifest schema — the contract between CLI/API and engine."""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path

from mkvutils.errors import InvalidInputError

COMMANDS = ("split", "merge", "extract", "replace", "info", "pad", "trim")


@dataclass
class AudioFormat:
    """Codec and file extension used for every audio file mkvutils writes."""

    codec: str = "flac"
    extension: str = ".flac"


@dataclass
class SplitConfig:
    timestamps: list[str] = field(default_factory=list)
    overlap_ms: int = 0


@dataclass
class MergeConfig:
    overlap_ms: int = 0


@dataclass
class PadConfig:
    """Silence to add, in milliseconds."""

    start_ms: int = 0
    end_ms: int = 0


@dataclass
class TrimConfig:
    """Audio to drop, in milliseconds."""

    start_ms: int = 0
    end_ms: int = 0


@dataclass
class ReplaceConfig:
    audio: Path | None = None


@dataclass
class Manifest:
    """Top-level editing manifest."""

    command: str
    input: Path
    output: Path | None = None
    version: str = "1"
    audio_format: AudioFormat = field(default_factory=AudioFormat)
    split: SplitConfig = field(default_factory=SplitConfig)
    merge: MergeConfig = field(default_factory=MergeConfig)
    pad: PadConfig = field(default_factory=PadConfig)
    trim: TrimConfig = field(default_factory=TrimConfig)
    replace: ReplaceConfig = field(default_factory=ReplaceConfig)


def _section(data: dict, name: str, cls):
    """Build one config dataclass from its manifest object, checking keys and types."""
    raw = data.get(name)
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise InvalidInputError(f"Manifest field '{name}' must be an object")

    known = {f.name: f.type for f in fields(cls)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise InvalidInputError(f"Unknown '{name}' option(s): {', '.join(unknown)}")

    for key, value in raw.items():
        expected = known[key]
        if expected is int and (not isinstance(value, int) or isinstance(value, bool)):
            raise InvalidInputError(f"{name}.{key} must be an integer, got {value!r}")
        if expected is str and not isinstance(value, str):
            raise InvalidInputError(f"{name}.{key} must be a string, got {value!r}")
        if expected == list[str] and not isinstance(value, list):
            raise InvalidInputError(f"{name}.{key} must be a list, got {value!r}")
    return cls(**raw)


def manifest_from_dict(data: dict) -> Manifest:
    """Validate a decoded manifest document."""
    if "command" not in data or "input" not in data:
        raise ValueError("Manifest must contain 'command' and 'input' fields")
    if data["command"] not in COMMANDS:
        raise ValueError(
            f"Unknown command {data['command']!r}; expected one of {', '.join(COMMANDS)}"
        )

    for key in ("input", "output"):
        if data.get(key) is not None and not isinstance(data[key], str):
            raise InvalidInputError(f"Manifest field '{key}' must be a path string")

    replace = _section(data, "replace", ReplaceConfig)
    if replace.audio is not None:
        if not isinstance(replace.audio, str):
            raise InvalidInputError("replace.audio must be a path string")
        replace.audio = Path(replace.audio)

    return Manifest(
        version=data.get("version", "1"),
        command=data["command"],
        input=Path(data["input"]),
        output=Path(data["output"]) if data.get("output") else None,
        audio_format=_section(data, "audio_format", AudioFormat),
        split=_section(data, "split", SplitConfig),
        merge=_section(data, "merge", MergeConfig),
        pad=_section(data, "pad", PadConfig),
        trim=_section(data, "trim", TrimConfig),
        replace=replace,
    )


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest from a JSON file."""
    path = Path(path)
    return manifest_from_dict(json.loads(path.read_text()))

"""Structured audio filter graphs and their ffmpeg ``-filter_complex`` rendering.

Planners produce plain data (delays, fades, a mix); only :func:`render` knows
ffmpeg's filter syntax.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from mkvutils.models import MergePlan
from mkvutils.timestamps import format_seconds


@dataclass(frozen=True)
class Fade:
    """afade over ``[start, start + duration)`` of the track's own time origin."""

    direction: str  # "in" or "out"
    start: Decimal
    duration: Decimal
    curve: str = "qsin"

    def render(self, sample_rate: int | None = None) -> str:
        return (
            f"afade=t={self.direction}:st={format_seconds(self.start)}"
            f":d={format_seconds(self.duration)}:curve={self.curve}"
        )


@dataclass(frozen=True)
class Delay:
    seconds: Decimal

    def samples(self, sample_rate: int) -> int:
        return int((self.seconds * sample_rate).to_integral_value(rounding=ROUND_HALF_UP))

    def render(self, sample_rate: int | None = None) -> str:
        # Sample counts avoid adelay's millisecond rounding when the rate is known.
        if sample_rate:
            return f"adelay=delays={self.samples(sample_rate)}S:all=1"
        ms = (self.seconds * 1000).normalize()
        return f"adelay=delays={ms:f}:all=1"


@dataclass(frozen=True)
class Mix:
    inputs: int
    normalize: bool = False

    def render(self) -> str:
        return (
            f"amix=inputs={self.inputs}:duration=longest:dropout_transition=0"
            f":normalize={int(self.normalize)}"
        )


@dataclass
class TrackChain:
    """Filters applied to one ffmpeg input before mixing."""

    input_index: int
    ops: list[Fade | Delay] = field(default_factory=list)
    sample_rate: int | None = None

    @property
    def label(self) -> str:
        return f"a{self.input_index}"


@dataclass
class FilterGraph:
    chains: list[TrackChain]
    mix: Mix
    output_label: str = "out"


def build_merge_graph(
    plan: MergePlan, sample_rates: Sequence[int | None] | None = None
) -> FilterGraph:
    """Turn a merge plan into per-track fade/delay chains feeding one mix.

    *sample_rates* gives each input's own rate, so its delay is counted in
    that track's samples.
    """
    chains: list[TrackChain] = []
    for i, entry in enumerate(plan.entries):
        rate = sample_rates[i] if sample_rates else None
        chain = TrackChain(input_index=i, sample_rate=rate)
        if entry.fade_in > 0:
            chain.ops.append(Fade("in", Decimal(0), entry.fade_in))
        if entry.fade_out > 0:
            chain.ops.append(Fade("out", entry.fade_out_start, entry.fade_out))
        if entry.start_offset > 0:
            chain.ops.append(Delay(entry.start_offset))
        chains.append(chain)
    return FilterGraph(chains=chains, mix=Mix(inputs=len(chains)))


def render(graph: FilterGraph, sample_rate: int | None = None) -> str:
    """Render a FilterGraph as ffmpeg ``-filter_complex`` text.

    *sample_rate* applies to chains that do not carry their own rate.
    """
    parts: list[str] = []
    for chain in graph.chains:
        filters = ",".join(op.render(chain.sample_rate or sample_rate) for op in chain.ops) or "anull"
        parts.append(f"[{chain.input_index}:a]{filters}[{chain.label}]")

    mix_inputs = "".join(f"[{chain.label}]" for chain in graph.chains)
    parts.append(f"{mix_inputs}{graph.mix.render()}[{graph.output_label}]")
    return ";".join(parts)

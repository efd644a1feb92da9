"""Timestamp parsing and formatting at millisecond resolution.

All arithmetic happens on :class:`decimal.Decimal` values quantized to three
fractional digits so that sums and differences of boundaries are exact.
"""

import re
from decimal import Decimal

from mkvutils.errors import InvalidInputError

MILLISECOND = Decimal("0.001")

_TIMESTAMP_RE = re.compile(r"^(\d+):([0-5]?\d):([0-5]?\d(?:\.\d{1,3})?)$")


def parse_timestamp(text: str) -> Decimal:
    """Convert ``HH:MM:SS.mmm`` to seconds.

    Hours may have any number of digits; the fractional part is optional and
    limited to millisecond precision.
    """
    m = _TIMESTAMP_RE.match(text.strip())
    if m is None:
        raise InvalidInputError(
            f"Invalid timestamp {text!r}; expected HH:MM:SS.mmm"
        )
    hours, minutes, seconds = m.groups()
    total = int(hours) * 3600 + int(minutes) * 60 + Decimal(seconds)
    return total.quantize(MILLISECOND)


def ms_to_seconds(ms: int) -> Decimal:
    """Convert a non-negative millisecond count to seconds."""
    if ms < 0:
        raise InvalidInputError(f"Expected a non-negative millisecond value, got {ms}")
    return (Decimal(ms) / 1000).quantize(MILLISECOND)


def format_seconds(value: Decimal) -> str:
    """Render seconds the way ffmpeg's -ss/-t and filter options expect them."""
    return f"{value.quantize(MILLISECOND)}"


def format_timestamp(value: Decimal) -> str:
    """Inverse of :func:`parse_timestamp`."""
    value = value.quantize(MILLISECOND)
    sign = "-" if value < 0 else ""
    value = abs(value)
    whole = int(value)
    h, rem = divmod(whole, 3600)
    m, s = divmod(rem, 60)
    ms = int((value - whole) * 1000)
    return f"{sign}{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


def to_seconds(value: str | Decimal | int | float) -> Decimal:
    """Accept a timestamp string or a plain number of seconds."""
    if isinstance(value, str):
        return parse_timestamp(value)
    seconds = Decimal(str(value)).quantize(MILLISECOND)
    if seconds < 0:
        raise InvalidInputError(f"Negative time value: {value}")
    return seconds

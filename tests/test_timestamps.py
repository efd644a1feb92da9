"""Tests for timestamp parsing and formatting."""

from decimal import Decimal

import pytest

from mkvutils.errors import InvalidInputError
from mkvutils.timestamps import (
    format_seconds,
    format_timestamp,
    ms_to_seconds,
    parse_timestamp,
    to_seconds,
)


class TestParseTimestamp:
    def test_full_precision(self):
        assert parse_timestamp("00:03:45.123") == Decimal("225.123")

    def test_hours(self):
        assert parse_timestamp("01:00:00.000") == Decimal("3600")

    def test_without_fraction(self):
        assert parse_timestamp("00:00:07") == Decimal("7.000")

    def test_short_fraction_is_tenths(self):
        assert parse_timestamp("00:00:02.5") == Decimal("2.5")

    def test_quantized_to_milliseconds(self):
        assert parse_timestamp("00:00:01.2").as_tuple().exponent == -3

    @pytest.mark.parametrize("bad", ["", "3.5", "00:03", "00:61:00.000", "aa:bb:cc", "00:00:01.2345", "-00:00:01"])
    def test_malformed(self, bad):
        with pytest.raises(InvalidInputError, match="Invalid timestamp"):
            parse_timestamp(bad)


class TestMsToSeconds:
    def test_converts(self):
        assert ms_to_seconds(200) == Decimal("0.2")
        assert ms_to_seconds(0) == Decimal(0)

    def test_negative_rejected(self):
        with pytest.raises(InvalidInputError, match="non-negative"):
            ms_to_seconds(-100)


class TestToSeconds:
    def test_float_is_not_binary_rounded(self):
        assert to_seconds(2.8) == Decimal("2.800")

    def test_string_goes_through_parser(self):
        assert to_seconds("00:00:03.000") == Decimal("3")

    def test_negative_rejected(self):
        with pytest.raises(InvalidInputError):
            to_seconds(-1)


class TestFormatting:
    def test_format_seconds(self):
        assert format_seconds(Decimal("2.8")) == "2.800"
        assert format_seconds(Decimal(0)) == "0.000"

    def test_format_timestamp(self):
        assert format_timestamp(Decimal("225.123")) == "00:03:45.123"
        assert format_timestamp(Decimal("3723.5")) == "01:02:03.500"

    def test_format_parse_inverse(self):
        assert parse_timestamp(format_timestamp(Decimal("510.456"))) == Decimal("510.456")

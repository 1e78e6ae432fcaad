"""Tests for geo.units module."""

import math

import pytest

from geo.units import (
    coerce_unit,
    convert_length,
    length_to_degrees,
    length_to_radians,
    radians_to_length,
)
from shared.constants import EARTH_RADIUS_M, LengthUnit
from shared.errors import InvalidInput

KM_PER_DEGREE = math.radians(1) * EARTH_RADIUS_M / 1000


class TestCoerceUnit:
    """Tests for coerce_unit function."""

    def test_enum_passthrough(self):
        """LengthUnit values should be returned unchanged."""
        assert coerce_unit(LengthUnit.MILES) is LengthUnit.MILES

    def test_case_insensitive_name(self):
        """Unit names should be case-insensitive."""
        assert coerce_unit('Kilometres') is LengthUnit.KILOMETRES

    def test_unknown_unit(self):
        """Unknown names should raise InvalidInput."""
        with pytest.raises(InvalidInput):
            coerce_unit('parsecs')


class TestRadiansConversion:
    """Tests for radians/length helpers."""

    def test_one_radian_in_meters(self):
        """One radian should equal the earth radius in meters."""
        assert radians_to_length(1.0, 'meters') == EARTH_RADIUS_M

    def test_round_trip(self):
        """Length to radians and back should be stable."""
        assert radians_to_length(length_to_radians(42.0, 'miles'), 'miles') == pytest.approx(42.0)

    def test_length_to_degrees(self):
        """One degree of arc should be ~111.195 km."""
        assert length_to_degrees(KM_PER_DEGREE, 'kilometers') == pytest.approx(1.0)


class TestConvertLength:
    """Tests for convert_length function."""

    def test_meters_to_kilometers(self):
        """1000 m should be 1 km."""
        assert convert_length(1000, 'meters', 'kilometers') == pytest.approx(1.0)

    def test_miles_to_kilometers(self):
        """One mile should be 1.609344 km."""
        assert convert_length(1, LengthUnit.MILES, LengthUnit.KILOMETERS) == pytest.approx(1.609344)

    def test_zero(self):
        """Zero should stay zero."""
        assert convert_length(0, 'feet', 'meters') == 0

    def test_negative_rejected(self):
        """Negative lengths should raise InvalidInput."""
        with pytest.raises(InvalidInput):
            convert_length(-1, 'meters', 'kilometers')

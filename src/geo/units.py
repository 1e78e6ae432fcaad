"""Length unit handling on a spherical earth."""

from __future__ import annotations

import math

from shared.constants import UNIT_FACTORS, LengthUnit
from shared.errors import InvalidInput


def coerce_unit(units: LengthUnit | str) -> LengthUnit:
    """Return ``units`` as a LengthUnit, raising InvalidInput for unknown names."""
    if isinstance(units, LengthUnit):
        return units
    try:
        return LengthUnit(str(units).lower())
    except ValueError as e:
        msg = f'Unknown length unit: {units!r}'
        raise InvalidInput(msg, e) from e


def radians_to_length(
    radians: float, units: LengthUnit | str = LengthUnit.KILOMETERS
) -> float:
    """Convert an angle on the earth surface to a length in ``units``."""
    return radians * UNIT_FACTORS[coerce_unit(units)]


def length_to_radians(
    distance: float, units: LengthUnit | str = LengthUnit.KILOMETERS
) -> float:
    """Convert a length in ``units`` to the matching central angle in radians."""
    return distance / UNIT_FACTORS[coerce_unit(units)]


def length_to_degrees(
    distance: float, units: LengthUnit | str = LengthUnit.KILOMETERS
) -> float:
    return math.degrees(length_to_radians(distance, units))


def convert_length(
    length: float,
    original_unit: LengthUnit | str = LengthUnit.KILOMETERS,
    final_unit: LengthUnit | str = LengthUnit.KILOMETERS,
) -> float:
    """Convert a non-negative length between two units."""
    if not length >= 0:
        msg = f'length must be a non-negative number, got {length!r}'
        raise InvalidInput(msg)
    return radians_to_length(length_to_radians(length, original_unit), final_unit)

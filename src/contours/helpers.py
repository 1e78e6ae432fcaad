from __future__ import annotations

import math
from collections.abc import Sequence
from numbers import Real
from typing import Any

import numpy as np

from shared.errors import InvalidInput


def validate_breaks(breaks: Any, minimum: int) -> list[float]:
    """
    Check contour break values and return them as floats.

    Breaks must be finite numbers in strictly increasing order, at least
    ``minimum`` of them.
    """
    if isinstance(breaks, np.ndarray):
        breaks = breaks.tolist()
    if not isinstance(breaks, Sequence) or isinstance(breaks, str):
        msg = 'breaks must be a sequence of numbers'
        raise InvalidInput(msg)
    if len(breaks) < minimum:
        msg = f'At least {minimum} break value(s) required, got {len(breaks)}'
        raise InvalidInput(msg)
    levels: list[float] = []
    for value in breaks:
        if not isinstance(value, Real) or isinstance(value, bool) or not math.isfinite(value):
            msg = f'Break value must be a finite number, got {value!r}'
            raise InvalidInput(msg)
        levels.append(float(value))
    for lo, hi in zip(levels, levels[1:]):
        if hi <= lo:
            msg = f'breaks must be strictly increasing ({lo} followed by {hi})'
            raise InvalidInput(msg)
    return levels


def band_pairs(levels: list[float]) -> list[tuple[float, float]]:
    """Consecutive (lower, upper) pairs of the break values."""
    return list(zip(levels, levels[1:]))

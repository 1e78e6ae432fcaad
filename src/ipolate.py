"""
Public entry points: grid interpolation, contouring and planar lookup.

    from ipolate import interpolate, isobands

    grid = interpolate(samples, 100, grid_type='point', units='kilometers')
    bands = isobands(grid, [0, 10, 20])
"""

from __future__ import annotations

from contours import LatticeMatrix, grid_to_matrix, isobands, isolines
from domain.models import ContourOptions, InterpolateOptions, IpolateSettings
from geo.grids import build_grid, hex_grid, point_grid, square_grid, triangle_grid
from geo.measurement import bbox, distance
from geo.units import convert_length
from interpolation import interpolate, planepoint
from shared.constants import DistanceMethod, GridType, LengthUnit
from shared.errors import InvalidInput, IpolateError, NumericDegeneracy

__all__ = [
    'ContourOptions',
    'DistanceMethod',
    'GridType',
    'InterpolateOptions',
    'InvalidInput',
    'IpolateError',
    'IpolateSettings',
    'LatticeMatrix',
    'LengthUnit',
    'NumericDegeneracy',
    'bbox',
    'build_grid',
    'convert_length',
    'distance',
    'grid_to_matrix',
    'hex_grid',
    'interpolate',
    'isobands',
    'isolines',
    'planepoint',
    'point_grid',
    'square_grid',
    'triangle_grid',
]

"""Geo module - units, distances, GeoJSON helpers and grid generators."""

from .grids import (
    GRID_BUILDERS,
    build_grid,
    hex_grid,
    point_grid,
    square_grid,
    triangle_grid,
)
from .measurement import bbox, distance, pairwise_distances
from .units import convert_length, length_to_degrees, length_to_radians

__all__ = [
    'GRID_BUILDERS',
    'bbox',
    'build_grid',
    'convert_length',
    'distance',
    'hex_grid',
    'length_to_degrees',
    'length_to_radians',
    'pairwise_distances',
    'point_grid',
    'square_grid',
    'triangle_grid',
]

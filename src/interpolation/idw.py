"""
Inverse distance weighting of scattered samples onto regular grids.

Each grid cell receives sum(w_i * z_i) / sum(w_i) with w_i = 1 / d_i ** weight,
d_i being the distance from the cell's estimation point (the lattice point
itself, or the vertex centroid of the cell polygon) to sample i.
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Any

import numpy as np

from domain.models import InterpolateOptions, build_options
from geo.features import (
    clone_feature,
    feature_collection,
    geometry_type,
    get_coord,
    get_z_value,
    iter_features,
)
from geo.grids import build_grid
from geo.measurement import pairwise_distances, ring_centroid
from shared.constants import DistanceMethod, GridType, LengthUnit
from shared.diagnostics import log_grid_summary
from shared.errors import InvalidInput, NumericDegeneracy
from shared.memory_estimation import choose_idw_chunk_size

logger = logging.getLogger(__name__)


def read_samples(points: dict, z_property: str | None) -> tuple[np.ndarray, np.ndarray]:
    """Sample coordinates (n, 2) and values (n,) from a collection of points."""
    coords: list[list[float]] = []
    values: list[float] = []
    for feature in iter_features(points):
        if geometry_type(feature) != 'Point':
            msg = f'Samples must be Point features, got {geometry_type(feature)}'
            raise InvalidInput(msg)
        coords.append(get_coord(feature)[:2])
        values.append(get_z_value(feature, z_property))
    if not coords:
        msg = 'Sample set is empty'
        raise InvalidInput(msg)
    return np.asarray(coords, dtype=float), np.asarray(values, dtype=float)


def estimation_points(grid: dict, grid_type: GridType) -> np.ndarray:
    """Points at which each grid feature is estimated, (m, 2)."""
    features = grid['features']
    if not features:
        return np.empty((0, 2), dtype=float)
    if grid_type is GridType.POINT:
        return np.asarray(
            [f['geometry']['coordinates'][:2] for f in features], dtype=float
        )
    return np.asarray(
        [ring_centroid(f['geometry']['coordinates'][0]) for f in features],
        dtype=float,
    )


def _weighted_average(dist: np.ndarray, values: np.ndarray, weight: float) -> np.ndarray:
    if not np.all(np.isfinite(dist)):
        msg = 'Non-finite distance between a grid cell and a sample'
        raise NumericDegeneracy(msg)

    result = np.empty(dist.shape[0], dtype=float)
    exact = dist == 0
    has_exact = exact.any(axis=1)
    if has_exact.any():
        # Cells sitting on samples take their (mean) value directly
        hits = exact[has_exact]
        result[has_exact] = (hits * values).sum(axis=1) / hits.sum(axis=1)

    rest = ~has_exact
    if rest.any():
        d = dist[rest]
        # Normalising by the nearest distance keeps every weight in (0, 1]
        nearest = d.min(axis=1, keepdims=True)
        with np.errstate(under='ignore'):
            w = (nearest / d) ** weight
        result[rest] = (w * values).sum(axis=1) / w.sum(axis=1)

    if not np.all(np.isfinite(result)):
        msg = 'IDW produced a non-finite estimate'
        raise NumericDegeneracy(msg)
    return result


def idw_estimate(
    targets: np.ndarray,
    sample_xy: np.ndarray,
    sample_z: np.ndarray,
    weight: float,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
    chunk_size: int | None = None,
) -> np.ndarray:
    """
    Estimate values at ``targets`` from the samples.

    Targets are processed in fixed-size chunks, in order, so the output never
    depends on the chunk size.
    """
    targets = np.asarray(targets, dtype=float).reshape(-1, 2)
    sample_z = np.asarray(sample_z, dtype=float)
    out = np.empty(len(targets), dtype=float)
    if chunk_size is None:
        chunk_size = choose_idw_chunk_size(len(sample_z))
    for start in range(0, len(targets), chunk_size):
        block = targets[start : start + chunk_size]
        dist = pairwise_distances(block, sample_xy, units=units, method=method)
        out[start : start + len(block)] = _weighted_average(dist, sample_z, weight)
    return out


def _validate_cell_size(cell_size: Any) -> float:
    if (
        not isinstance(cell_size, Real)
        or isinstance(cell_size, bool)
        or not math.isfinite(cell_size)
        or cell_size <= 0
    ):
        msg = f'cell_size must be a positive number, got {cell_size!r}'
        raise InvalidInput(msg)
    return float(cell_size)


def interpolate(
    points: dict,
    cell_size: float,
    options: InterpolateOptions | dict | None = None,
    **overrides: Any,
) -> dict:
    """
    Estimate sample values on a grid covering the samples' bounding box.

    Args:
        points: FeatureCollection of Point features with known values.
        cell_size: Distance across each grid cell, in ``options.units``
            (coordinate units for the planar distance method).
        options: InterpolateOptions or a dict of its fields.
        **overrides: Individual option fields, e.g. ``grid_type='point'``.

    Returns:
        FeatureCollection of points or polygons (per grid type), each
        carrying the estimate under ``options.target_property``.

    Raises:
        InvalidInput: empty samples, bad cell size, weight or other options.
        NumericDegeneracy: distances that cannot be weighted.

    """
    opts = build_options(InterpolateOptions, options, **overrides)
    cell_size = _validate_cell_size(cell_size)
    sample_xy, sample_z = read_samples(points, opts.z_property)

    west, south = sample_xy.min(axis=0)
    east, north = sample_xy.max(axis=0)
    extent = (float(west), float(south), float(east), float(north))
    grid = build_grid(
        opts.grid_type, extent, cell_size, opts.units, opts.distance_method
    )
    targets = estimation_points(grid, opts.grid_type)
    logger.info(
        'IDW: %d samples -> %d %s cells (cell_size=%s %s, weight=%s, %s)',
        len(sample_z),
        len(targets),
        opts.grid_type.value,
        cell_size,
        opts.units.value,
        opts.weight,
        opts.distance_method.value,
    )

    values = idw_estimate(
        targets,
        sample_xy,
        sample_z,
        opts.weight,
        units=opts.units,
        method=opts.distance_method,
        chunk_size=opts.chunk_size,
    )

    features = []
    for feature, value in zip(grid['features'], values):
        out = clone_feature(feature)
        out['properties'][opts.target_property] = float(value)
        features.append(out)
    result = feature_collection(features)
    log_grid_summary(result, opts.target_property, 'idw', level=logging.DEBUG)
    return result

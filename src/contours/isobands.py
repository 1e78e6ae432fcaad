from __future__ import annotations

import logging
from typing import Any

from domain.models import ContourOptions, build_options
from geo.features import feature_collection, multi_polygon_feature
from shared.constants import MIN_BREAKS_ISOBANDS

from .helpers import band_pairs, validate_breaks
from .marching import assemble_polygons, band_edges, chain_rings
from .matrix import LatticeMatrix, grid_to_matrix

logger = logging.getLogger(__name__)


def band_polygons(matrix: LatticeMatrix, lower: float, upper: float) -> list:
    """MultiPolygon coordinates of the region lower <= value < upper."""
    rings = chain_rings(band_edges(matrix.values, lower, upper))
    return [
        [matrix.to_geo(ring) for ring in polygon]
        for polygon in assemble_polygons(rings)
    ]


def isobands(
    point_grid: dict,
    breaks: Any,
    options: ContourOptions | dict | None = None,
    **overrides: Any,
) -> dict:
    """
    Filled contour bands of a point grid between consecutive breaks.

    Band ``i`` covers values in ``[breaks[i], breaks[i + 1])`` and becomes a
    MultiPolygon feature whose ``z_property`` holds ``[lower, upper]``.
    Shells are counter-clockwise, holes clockwise. Empty bands yield no
    feature unless ``keep_empty`` is set.

    Raises:
        InvalidInput: invalid grid, breaks or options.

    """
    opts = build_options(ContourOptions, options, **overrides)
    levels = validate_breaks(breaks, MIN_BREAKS_ISOBANDS)
    matrix = grid_to_matrix(point_grid, opts.z_property)

    features = []
    for index, (lower, upper) in enumerate(band_pairs(levels)):
        polygons = band_polygons(matrix, lower, upper)
        logger.debug('Isoband [%s, %s): %d polygon(s)', lower, upper, len(polygons))
        if not polygons and not opts.keep_empty:
            continue
        properties = opts.properties_for(index)
        properties[opts.z_property] = [lower, upper]
        features.append(multi_polygon_feature(polygons, properties))

    logger.info(
        'Isobands: %d band(s) -> %d feature(s) on a %dx%d grid',
        len(levels) - 1,
        len(features),
        matrix.shape[1],
        matrix.shape[0],
    )
    return feature_collection(features)

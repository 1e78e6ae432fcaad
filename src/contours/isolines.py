from __future__ import annotations

import logging
from typing import Any

from domain.models import ContourOptions, build_options
from geo.features import feature_collection, multi_line_feature
from shared.constants import MIN_BREAKS_ISOLINES

from .helpers import validate_breaks
from .marching import chain_polylines, level_segments
from .matrix import grid_to_matrix

logger = logging.getLogger(__name__)


def isolines(
    point_grid: dict,
    breaks: Any,
    options: ContourOptions | dict | None = None,
    **overrides: Any,
) -> dict:
    """
    Contour lines of a point grid at each break value.

    Returns a FeatureCollection with one MultiLineString feature per break
    (in break order). Closed loops repeat their first vertex. A break
    whose lines are empty yields no feature unless ``keep_empty`` is set.

    Raises:
        InvalidInput: invalid grid, breaks or options.

    """
    opts = build_options(ContourOptions, options, **overrides)
    levels = validate_breaks(breaks, MIN_BREAKS_ISOLINES)
    matrix = grid_to_matrix(point_grid, opts.z_property)

    features = []
    for index, level in enumerate(levels):
        lines = chain_polylines(level_segments(matrix.values, level))
        coords = [matrix.to_geo(line) for line in lines]
        logger.debug('Isoline %s: %d line(s)', level, len(coords))
        if not coords and not opts.keep_empty:
            continue
        properties = opts.properties_for(index)
        properties[opts.z_property] = level
        features.append(multi_line_feature(coords, properties))

    logger.info(
        'Isolines: %d break(s) -> %d feature(s) on a %dx%d grid',
        len(levels),
        len(features),
        matrix.shape[1],
        matrix.shape[0],
    )
    return feature_collection(features)

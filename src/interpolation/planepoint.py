from __future__ import annotations

import logging
import math
from typing import Any

from geo.features import get_coord
from shared.constants import (
    DEGENERATE_TRIANGLE_RTOL,
    TRIANGLE_CORNER_PROPERTIES,
    TRIANGLE_VERTEX_COUNT,
)
from shared.errors import InvalidInput

logger = logging.getLogger(__name__)


def _triangle_ring(triangle: Any) -> tuple[list[list[float]], dict]:
    if not isinstance(triangle, dict):
        msg = 'Triangle must be a Polygon feature or geometry'
        raise InvalidInput(msg)
    if triangle.get('type') == 'Feature':
        geometry = triangle.get('geometry') or {}
        properties = triangle.get('properties') or {}
    else:
        geometry, properties = triangle, {}
    if geometry.get('type') != 'Polygon' or not geometry.get('coordinates'):
        msg = 'Triangle must be a Polygon'
        raise InvalidInput(msg)

    ring = [get_coord(pt) for pt in geometry['coordinates'][0]]
    if len(ring) > 1 and ring[0][:2] == ring[-1][:2]:
        ring = ring[:-1]
    if len(ring) != TRIANGLE_VERTEX_COUNT:
        msg = f'Triangle ring must have 3 vertices, got {len(ring)}'
        raise InvalidInput(msg)
    return ring, properties


def _corner_value(vertex: list[float], properties: dict, name: str) -> float:
    value = properties.get(name)
    if value is None:
        if len(vertex) < 3:
            msg = f'Triangle corner {name!r} has no value'
            raise InvalidInput(msg)
        value = vertex[2]
    try:
        fv = float(value)
    except (TypeError, ValueError) as e:
        msg = f'Triangle corner {name!r} is not numeric: {value!r}'
        raise InvalidInput(msg, e) from e
    if not math.isfinite(fv):
        msg = f'Triangle corner {name!r} is not finite'
        raise InvalidInput(msg)
    return fv


def planepoint(point: Any, triangle: Any) -> float:
    """
    Value at ``point`` on the plane through the triangle's three 3D vertices.

    Corner values come from the triangle properties ``a``, ``b`` and ``c``
    (in ring order), falling back to each vertex's third coordinate.
    The point is not required to lie inside the triangle.

    Raises:
        InvalidInput: malformed input, missing corner values or a
            degenerate (zero area) triangle.

    """
    x, y = get_coord(point)[:2]
    ring, properties = _triangle_ring(triangle)
    (x1, y1), (x2, y2), (x3, y3) = (v[:2] for v in ring)
    z1, z2, z3 = (
        _corner_value(v, properties, name)
        for v, name in zip(ring, TRIANGLE_CORNER_PROPERTIES)
    )

    area2 = (x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1)
    extent = max(abs(x2 - x1), abs(x3 - x1), abs(y2 - y1), abs(y3 - y1))
    if extent == 0 or abs(area2) <= DEGENERATE_TRIANGLE_RTOL * extent * extent:
        msg = 'Degenerate triangle: vertices are collinear or coincident'
        raise InvalidInput(msg)

    # Barycentric weights of the point
    l1 = ((x2 - x) * (y3 - y) - (x3 - x) * (y2 - y)) / area2
    l2 = ((x3 - x) * (y1 - y) - (x1 - x) * (y3 - y)) / area2
    l3 = 1.0 - l1 - l2
    value = l1 * z1 + l2 * z2 + l3 * z3
    logger.debug('planepoint(%s, %s) = %s', x, y, value)
    return value

"""
Regular grid generators over a bounding box.

Each grid type has its own geometry builder; ``build_grid`` picks one from
``GRID_BUILDERS``. Cell sizes are given as lengths and converted to
coordinate steps by measuring the bbox edges with the chosen distance
method (the planar method uses the cell size as the coordinate step).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from numbers import Real

from geo.features import feature_collection, point_feature, polygon_feature
from geo.measurement import coerce_method, distance
from geo.units import coerce_unit
from shared.constants import DistanceMethod, GridType, LengthUnit
from shared.errors import InvalidInput

logger = logging.getLogger(__name__)

Extent = tuple[float, float, float, float]

_HEX_ANGLES = [2 * math.pi / 6 * i for i in range(6)]
_HEX_COSINES = [math.cos(a) for a in _HEX_ANGLES]
_HEX_SINES = [math.sin(a) for a in _HEX_ANGLES]


@dataclass(frozen=True)
class CellSteps:
    """Cell width and height in coordinate units."""

    width: float
    height: float

    @property
    def finite(self) -> bool:
        return math.isfinite(self.width) and math.isfinite(self.height)


def _validate_extent(extent: Extent) -> Extent:
    if len(extent) != 4:
        msg = f'Extent must be (west, south, east, north), got {extent!r}'
        raise InvalidInput(msg)
    west, south, east, north = (float(v) for v in extent)
    if not all(math.isfinite(v) for v in (west, south, east, north)):
        msg = f'Extent must be finite, got {extent!r}'
        raise InvalidInput(msg)
    if east < west or north < south:
        msg = f'Extent is inverted: {extent!r}'
        raise InvalidInput(msg)
    return west, south, east, north


def cell_steps(
    extent: Extent,
    cell_size: float,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
) -> CellSteps:
    """Convert a cell size into coordinate steps along x and y."""
    if (
        not isinstance(cell_size, Real)
        or isinstance(cell_size, bool)
        or not math.isfinite(cell_size)
        or cell_size <= 0
    ):
        msg = f'cell_size must be a positive number, got {cell_size!r}'
        raise InvalidInput(msg)
    method = coerce_method(method)
    units = coerce_unit(units)
    west, south, east, north = _validate_extent(extent)
    if method is DistanceMethod.PLANAR:
        return CellSteps(float(cell_size), float(cell_size))

    x_dist = distance([west, south], [east, south], units=units, method=method)
    y_dist = distance([west, south], [west, north], units=units, method=method)
    width = cell_size / x_dist * (east - west) if x_dist > 0 else math.inf
    height = cell_size / y_dist * (north - south) if y_dist > 0 else math.inf
    return CellSteps(width, height)


def _centered_positions(start: float, end: float, step: float) -> list[float]:
    """Lattice positions centred inside [start, end]."""
    span = end - start
    if span <= 0 or not math.isfinite(step):
        return [start + span / 2]
    count = math.floor(span / step)
    offset = (span - count * step) / 2
    return [start + offset + k * step for k in range(count + 1)]


def _centered_origins(start: float, end: float, step: float) -> list[float]:
    """Lower edges of whole cells centred inside [start, end]."""
    span = end - start
    if span <= 0 or not math.isfinite(step):
        return []
    count = math.floor(span / step)
    offset = (span - count * step) / 2
    return [start + offset + k * step for k in range(count)]


def point_grid(
    extent: Extent,
    cell_size: float,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
    properties: dict | None = None,
) -> dict:
    """Point lattice, column by column (x outer, y inner)."""
    steps = cell_steps(extent, cell_size, units, method)
    west, south, east, north = _validate_extent(extent)
    xs = _centered_positions(west, east, steps.width)
    ys = _centered_positions(south, north, steps.height)
    features = [point_feature([x, y], properties) for x in xs for y in ys]
    logger.debug('Point grid: %d columns x %d rows', len(xs), len(ys))
    return feature_collection(features)


def square_grid(
    extent: Extent,
    cell_size: float,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
    properties: dict | None = None,
) -> dict:
    """Axis aligned square cells, column by column."""
    steps = cell_steps(extent, cell_size, units, method)
    west, south, east, north = _validate_extent(extent)
    w, h = steps.width, steps.height
    features = []
    for x in _centered_origins(west, east, w):
        for y in _centered_origins(south, north, h):
            ring = [[x, y], [x, y + h], [x + w, y + h], [x + w, y], [x, y]]
            features.append(polygon_feature([ring], properties))
    logger.debug('Square grid: %d cells', len(features))
    return feature_collection(features)


def _triangle_pair(x: float, y: float, w: float, h: float, xi: int, yi: int):
    bl, br, tr, tl = [x, y], [x + w, y], [x + w, y + h], [x, y + h]
    if xi % 2 == yi % 2:
        return [bl, tl, br, bl], [tl, tr, br, tl]
    if xi % 2 == 0:
        return [bl, tr, br, bl], [bl, tl, tr, bl]
    return [bl, tl, tr, bl], [bl, tr, br, bl]


def triangle_grid(
    extent: Extent,
    cell_size: float,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
    properties: dict | None = None,
) -> dict:
    """
    Square cells split into two triangles.

    Cells start at the south-west corner; the diagonal direction alternates
    with column and row parity.
    """
    steps = cell_steps(extent, cell_size, units, method)
    west, south, east, north = _validate_extent(extent)
    features = []
    if not steps.finite:
        return feature_collection(features)
    w, h = steps.width, steps.height
    columns = math.floor((east - west) / w) + 1
    rows = math.floor((north - south) / h) + 1
    for xi in range(columns):
        x = west + xi * w
        for yi in range(rows):
            y = south + yi * h
            for ring in _triangle_pair(x, y, w, h, xi, yi):
                features.append(polygon_feature([ring], properties))
    logger.debug('Triangle grid: %d cells', len(features))
    return feature_collection(features)


def _hexagon_ring(cx: float, cy: float, rx: float, ry: float) -> list[list[float]]:
    ring = [[cx + rx * c, cy + ry * s] for c, s in zip(_HEX_COSINES, _HEX_SINES)]
    ring.append(list(ring[0]))
    return ring


def hex_grid(
    extent: Extent,
    cell_size: float,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
    properties: dict | None = None,
) -> dict:
    """
    Flat-topped hexagons centred in the extent.

    ``cell_size`` is the distance between opposite vertices; odd columns are
    shifted half a hexagon down.
    """
    steps = cell_steps(extent, cell_size, units, method)
    west, south, east, north = _validate_extent(extent)
    features = []
    if not steps.finite:
        return feature_collection(features)

    radius = steps.width / 2
    hex_width = radius * 2
    hex_height = math.sqrt(3) / 2 * steps.height
    box_width = east - west
    box_height = north - south

    x_interval = 3 / 4 * hex_width
    y_interval = hex_height
    x_count = math.floor((box_width - hex_width) / (hex_width - radius / 2))
    x_adjust = (
        (x_count * x_interval - radius / 2 - box_width) / 2
        - radius / 2
        + x_interval / 2
    )
    y_count = math.floor((box_height - hex_height) / hex_height)
    y_adjust = (box_height - y_count * hex_height) / 2
    has_offset_y = y_count * hex_height - box_height > hex_height / 2
    if has_offset_y:
        y_adjust -= hex_height / 4

    for x in range(x_count + 1):
        is_odd = x % 2 == 1
        for y in range(y_count + 1):
            if y == 0 and (is_odd or has_offset_y):
                continue
            cx = x * x_interval + west - x_adjust
            cy = y * y_interval + south + y_adjust
            if is_odd:
                cy -= hex_height / 2
            ring = _hexagon_ring(cx, cy, steps.width / 2, steps.height / 2)
            features.append(polygon_feature([ring], properties))
    logger.debug('Hex grid: %d cells', len(features))
    return feature_collection(features)


GRID_BUILDERS: dict[GridType, Callable[..., dict]] = {
    GridType.POINT: point_grid,
    GridType.SQUARE: square_grid,
    GridType.TRIANGLE: triangle_grid,
    GridType.HEX: hex_grid,
}


def coerce_grid_type(grid_type: GridType | str) -> GridType:
    if isinstance(grid_type, GridType):
        return grid_type
    try:
        return GridType(str(grid_type).lower())
    except ValueError as e:
        msg = f'Unknown grid type: {grid_type!r}'
        raise InvalidInput(msg, e) from e


def build_grid(
    grid_type: GridType | str,
    extent: Extent,
    cell_size: float,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
    properties: dict | None = None,
) -> dict:
    """Build a grid of the requested type."""
    builder = GRID_BUILDERS[coerce_grid_type(grid_type)]
    return builder(extent, cell_size, units, method, properties)

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from geo.features import geometry_type, get_coord, get_z_value, iter_features
from shared.constants import MIN_GRID_SIZE
from shared.errors import InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatticeMatrix:
    """
    Values of a rectangular point grid.

    ``values[j, i]`` is the value at (``xs[i]``, ``ys[j]``); both axes are
    sorted ascending, so row 0 is the southern edge.
    """

    xs: np.ndarray
    ys: np.ndarray
    values: np.ndarray

    @property
    def shape(self) -> tuple[int, int]:
        return self.values.shape

    def to_geo(self, points: list[tuple[float, float]]) -> list[list[float]]:
        """Map lattice (column, row) coordinates back to grid coordinates."""
        if not points:
            return []
        arr = np.asarray(points, dtype=float)
        gx = np.interp(arr[:, 0], np.arange(len(self.xs)), self.xs)
        gy = np.interp(arr[:, 1], np.arange(len(self.ys)), self.ys)
        return [[float(x), float(y)] for x, y in zip(gx, gy)]


def grid_to_matrix(point_grid: dict, z_property: str | None) -> LatticeMatrix:
    """
    Arrange a point-grid FeatureCollection into a value matrix.

    Points may come in any order but must form a complete rectangular
    lattice with at least two distinct x and y coordinates.

    Raises:
        InvalidInput: non-point features, missing or non-finite values,
            duplicated lattice points or a non-rectangular layout.

    """
    coords: list[tuple[float, float]] = []
    zs: list[float] = []
    for feature in iter_features(point_grid):
        if geometry_type(feature) != 'Point':
            msg = f'Contouring needs a point grid, got {geometry_type(feature)}'
            raise InvalidInput(msg)
        x, y = get_coord(feature)[:2]
        coords.append((float(x), float(y)))
        zs.append(get_z_value(feature, z_property))

    xs = sorted({x for x, _ in coords})
    ys = sorted({y for _, y in coords})
    if len(xs) < MIN_GRID_SIZE or len(ys) < MIN_GRID_SIZE:
        msg = (
            f'Point grid must span at least {MIN_GRID_SIZE} columns and rows, '
            f'got {len(xs)}x{len(ys)}'
        )
        raise InvalidInput(msg)
    if len(coords) != len(xs) * len(ys):
        msg = (
            f'Point grid is not rectangular: {len(coords)} points for '
            f'{len(xs)} columns and {len(ys)} rows'
        )
        raise InvalidInput(msg)

    col = {x: i for i, x in enumerate(xs)}
    row = {y: j for j, y in enumerate(ys)}
    values = np.full((len(ys), len(xs)), np.nan, dtype=float)
    for (x, y), z in zip(coords, zs):
        j, i = row[y], col[x]
        if not np.isnan(values[j, i]):
            msg = f'Duplicate grid point at ({x}, {y})'
            raise InvalidInput(msg)
        values[j, i] = z
    values.setflags(write=False)

    logger.debug('Point grid arranged as %d rows x %d columns', len(ys), len(xs))
    return LatticeMatrix(
        xs=np.asarray(xs, dtype=float),
        ys=np.asarray(ys, dtype=float),
        values=values,
    )

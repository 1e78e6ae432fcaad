"""Tests for geo.grids module."""

import math

import pytest

from geo.grids import (
    build_grid,
    cell_steps,
    coerce_grid_type,
    hex_grid,
    point_grid,
    square_grid,
    triangle_grid,
)
from shared.constants import EARTH_RADIUS_M, GridType
from shared.errors import InvalidInput

KM_PER_DEGREE = math.radians(1) * EARTH_RADIUS_M / 1000


def _coords(fc):
    return [f['geometry']['coordinates'] for f in fc['features']]


class TestCellSteps:
    """Tests for cell_steps function."""

    def test_planar_uses_cell_size(self):
        """Planar steps should equal the cell size."""
        steps = cell_steps((0, 0, 10, 10), 2.5, method='planar')
        assert (steps.width, steps.height) == (2.5, 2.5)

    def test_haversine_one_degree(self):
        """A cell one degree long on the equator should be one degree wide."""
        steps = cell_steps((0, 0, 1, 1), KM_PER_DEGREE)
        assert steps.width == pytest.approx(1.0)
        assert steps.height == pytest.approx(1.0)

    def test_degenerate_axis_infinite(self):
        """Zero-width extents should give an infinite step."""
        steps = cell_steps((5, 0, 5, 1), 10)
        assert math.isinf(steps.width)
        assert not steps.finite

    @pytest.mark.parametrize('cell_size', [0, -1, float('nan'), True, '1'])
    def test_invalid_cell_size(self, cell_size):
        """Non-positive or non-numeric cell sizes should raise InvalidInput."""
        with pytest.raises(InvalidInput):
            cell_steps((0, 0, 1, 1), cell_size)

    def test_inverted_extent(self):
        """West greater than east should raise InvalidInput."""
        with pytest.raises(InvalidInput):
            cell_steps((1, 0, 0, 1), 1, method='planar')


class TestPointGrid:
    """Tests for point_grid function."""

    def test_exact_fit(self):
        """Lattice should include both edges when the span divides evenly."""
        fc = point_grid((0, 0, 10, 5), 1, method='planar')
        assert len(fc['features']) == 11 * 6

    def test_column_major_order(self):
        """Points should be generated column by column."""
        coords = _coords(point_grid((0, 0, 2, 2), 1, method='planar'))
        assert coords[:4] == [[0.0, 0.0], [0.0, 1.0], [0.0, 2.0], [1.0, 0.0]]

    def test_centred(self):
        """Leftover span should be split evenly on both sides."""
        coords = _coords(point_grid((0, 0, 10, 5), 3, method='planar'))
        xs = sorted({x for x, _ in coords})
        ys = sorted({y for _, y in coords})
        assert xs == [0.5, 3.5, 6.5, 9.5]
        assert ys == [1.0, 4.0]

    def test_properties_copied(self):
        """Each point should get its own copy of the properties."""
        fc = point_grid((0, 0, 1, 1), 1, method='planar', properties={'k': 1})
        fc['features'][0]['properties']['k'] = 2
        assert fc['features'][1]['properties']['k'] == 1


class TestSquareGrid:
    """Tests for square_grid function."""

    def test_cell_count_and_first_ring(self):
        """Whole cells only, centred vertically."""
        fc = square_grid((0, 0, 10, 5), 2, method='planar')
        assert len(fc['features']) == 10
        ring = _coords(fc)[0][0]
        assert ring == [[0.0, 0.5], [0.0, 2.5], [2.0, 2.5], [2.0, 0.5], [0.0, 0.5]]

    def test_too_small_extent(self):
        """Extents smaller than one cell should give an empty grid."""
        fc = square_grid((0, 0, 1, 1), 5, method='planar')
        assert fc['features'] == []


class TestTriangleGrid:
    """Tests for triangle_grid function."""

    def test_two_triangles_per_cell(self):
        """Every cell should be split into two closed triangles."""
        fc = triangle_grid((0, 0, 4, 2), 2, method='planar')
        assert len(fc['features']) == 3 * 2 * 2
        for rings in _coords(fc):
            assert len(rings[0]) == 4
            assert rings[0][0] == rings[0][-1]

    def test_starts_at_south_west(self):
        """First triangle should touch the south-west corner."""
        ring = _coords(triangle_grid((0, 0, 4, 2), 2, method='planar'))[0][0]
        assert ring[0] == [0.0, 0.0]

    def test_alternating_diagonal(self):
        """Neighbouring cells should use different diagonals."""
        first = _coords(triangle_grid((0, 0, 4, 2), 2, method='planar'))
        cell_00 = {tuple(p) for p in first[0][0]}
        cell_01 = {tuple(p) for p in first[2][0]}
        assert (0.0, 2.0) in cell_00
        assert (2.0, 4.0) in cell_01 or (0.0, 4.0) in cell_01


class TestHexGrid:
    """Tests for hex_grid function."""

    def test_closed_hexagons(self):
        """Each hexagon should have six distinct vertices plus closure."""
        fc = hex_grid((0, 0, 10, 10), 2, method='planar')
        assert len(fc['features']) == 27
        for rings in _coords(fc):
            ring = rings[0]
            assert len(ring) == 7
            assert ring[0] == ring[-1]

    def test_vertex_radius(self):
        """Vertices should lie half a cell from the centre along x."""
        ring = _coords(hex_grid((0, 0, 10, 10), 2, method='planar'))[0][0]
        cx = sum(p[0] for p in ring[:-1]) / 6
        assert ring[0][0] - cx == pytest.approx(1.0)


class TestBuildGrid:
    """Tests for build_grid dispatch."""

    @pytest.mark.parametrize('grid_type', list(GridType))
    def test_dispatch(self, grid_type):
        """Every grid type should be buildable by name."""
        fc = build_grid(grid_type.value, (0, 0, 4, 4), 1, method='planar')
        assert fc['type'] == 'FeatureCollection'
        assert fc['features']

    def test_unknown_grid_type(self):
        """Unknown grid types should raise InvalidInput."""
        with pytest.raises(InvalidInput):
            coerce_grid_type('octagon')

"""Tests for interpolation.idw module."""

import copy
import random

import numpy as np
import pytest

from interpolation.idw import (
    estimation_points,
    idw_estimate,
    interpolate,
    read_samples,
)
from shared.constants import GridType
from shared.errors import InvalidInput, NumericDegeneracy


@pytest.fixture
def corner_samples(point_factory, collection_factory):
    """Four planar samples on the corners of a 2x2 square."""
    return collection_factory(
        [
            point_factory(0, 0, elevation=10),
            point_factory(2, 0, elevation=20),
            point_factory(0, 2, elevation=30),
            point_factory(2, 2, elevation=40),
        ]
    )


@pytest.fixture
def random_samples(point_factory, collection_factory):
    """30 points with solRad values inside bbox [50, 30, 70, 50]."""
    rng = random.Random(20241018)
    features = [
        point_factory(
            rng.uniform(50, 70), rng.uniform(30, 50), solRad=rng.uniform(0, 50)
        )
        for _ in range(30)
    ]
    return collection_factory(features)


def _values(fc, prop='elevation'):
    return [f['properties'][prop] for f in fc['features']]


class TestReadSamples:
    """Tests for read_samples function."""

    def test_shapes(self, corner_samples):
        """Coordinates should be (n, 2) and values (n,)."""
        xy, z = read_samples(corner_samples, 'elevation')
        assert xy.shape == (4, 2)
        assert z.tolist() == [10.0, 20.0, 30.0, 40.0]

    def test_non_point_rejected(self, collection_factory):
        """Polygon samples should raise InvalidInput."""
        polygon = {
            'type': 'Feature',
            'geometry': {'type': 'Polygon', 'coordinates': [[[0, 0], [1, 0], [0, 1], [0, 0]]]},
            'properties': {'elevation': 1},
        }
        with pytest.raises(InvalidInput):
            read_samples(collection_factory([polygon]), 'elevation')

    def test_empty_rejected(self, collection_factory):
        """Empty sample sets should raise InvalidInput."""
        with pytest.raises(InvalidInput):
            read_samples(collection_factory([]), 'elevation')


class TestIdwEstimate:
    """Tests for idw_estimate function."""

    def test_midpoint_is_mean(self):
        """Point halfway between two samples should get their mean."""
        result = idw_estimate(
            [[1, 0]], np.array([[0.0, 0.0], [2.0, 0.0]]), [0, 10], 2, method='planar'
        )
        assert result[0] == pytest.approx(5.0)

    def test_higher_weight_favours_nearest(self):
        """A larger exponent should pull the estimate towards the nearest sample."""
        xy = np.array([[0.0, 0.0], [4.0, 0.0]])
        low = idw_estimate([[1, 0]], xy, [0, 10], 1, method='planar')[0]
        high = idw_estimate([[1, 0]], xy, [0, 10], 4, method='planar')[0]
        assert 0 < high < low < 10

    def test_exact_hit_uses_sample(self):
        """Targets on a sample should take its value exactly."""
        xy = np.array([[0.0, 0.0], [3.0, 0.0]])
        result = idw_estimate([[3, 0]], xy, [1, 7], 2, method='planar')
        assert result[0] == 7.0

    def test_coincident_samples_averaged(self):
        """Duplicate samples hit exactly should give their mean."""
        xy = np.array([[1.0, 1.0], [1.0, 1.0], [5.0, 5.0]])
        result = idw_estimate([[1, 1]], xy, [1, 3, 100], 1, method='planar')
        assert result[0] == 2.0

    def test_chunking_does_not_change_result(self):
        """Chunk size should not affect the estimates."""
        rng = np.random.default_rng(7)
        xy = rng.uniform(0, 10, size=(25, 2))
        z = rng.uniform(-5, 5, size=25)
        targets = rng.uniform(0, 10, size=(40, 2))
        whole = idw_estimate(targets, xy, z, 2, method='planar', chunk_size=1000)
        pieces = idw_estimate(targets, xy, z, 2, method='planar', chunk_size=3)
        np.testing.assert_allclose(whole, pieces, rtol=1e-12)

    def test_tiny_distances_stay_finite(self):
        """Large exponents over tiny distances should not overflow."""
        xy = np.array([[0.0, 0.0], [1e-9, 0.0]])
        result = idw_estimate([[3e-10, 0]], xy, [0, 1], 50, method='planar')
        assert np.isfinite(result[0])
        assert 0 <= result[0] <= 1

    def test_non_finite_distance(self):
        """Infinite distances should raise NumericDegeneracy."""
        xy = np.array([[np.inf, 0.0]])
        with pytest.raises(NumericDegeneracy):
            idw_estimate([[0, 0]], xy, [1], 1, method='planar')


class TestEstimationPoints:
    """Tests for estimation_points function."""

    def test_polygon_centroid(self, collection_factory):
        """Polygon cells should be estimated at their vertex centroid."""
        square = {
            'type': 'Feature',
            'geometry': {
                'type': 'Polygon',
                'coordinates': [[[0, 0], [0, 2], [2, 2], [2, 0], [0, 0]]],
            },
            'properties': {},
        }
        points = estimation_points(collection_factory([square]), GridType.SQUARE)
        assert points.tolist() == [[1.0, 1.0]]

    def test_empty_grid(self, collection_factory):
        """Empty grids should give an empty (0, 2) array."""
        assert estimation_points(collection_factory([]), GridType.HEX).shape == (0, 2)


class TestInterpolate:
    """Tests for interpolate function."""

    def test_values_within_sample_range(self, random_samples):
        """Every estimate should lie between the sample extremes."""
        result = interpolate(random_samples, 100, grid_type='point', z_property='solRad')
        sample_values = _values(random_samples, 'solRad')
        values = _values(result, 'solRad')
        assert values
        assert min(sample_values) - 1e-9 <= min(values)
        assert max(values) <= max(sample_values) + 1e-9

    def test_random_bbox_point_grid(self, random_samples):
        """30 random points in [50, 30, 70, 50] should give a valued point grid."""
        result = interpolate(
            random_samples,
            100,
            {'grid_type': 'point', 'z_property': 'solRad', 'units': 'kilometers'},
        )
        assert result['type'] == 'FeatureCollection'
        assert len(result['features']) > 100
        for feature in result['features']:
            assert feature['geometry']['type'] == 'Point'
            assert 0 <= feature['properties']['solRad'] <= 50

    def test_sample_on_lattice_point(self, corner_samples):
        """Lattice points on samples should carry the sample value."""
        result = interpolate(corner_samples, 1, grid_type='point', distance_method='planar')
        by_coord = {
            tuple(f['geometry']['coordinates']): f['properties']['elevation']
            for f in result['features']
        }
        assert by_coord[(0.0, 0.0)] == 10.0
        assert by_coord[(2.0, 2.0)] == 40.0
        assert by_coord[(1.0, 1.0)] == pytest.approx(25.0)

    @pytest.mark.parametrize('grid_type', ['square', 'hex', 'triangle'])
    def test_polygon_grids(self, corner_samples, grid_type):
        """Polygon grids should carry an estimate on every cell."""
        result = interpolate(
            corner_samples, 0.5, grid_type=grid_type, distance_method='planar'
        )
        assert result['features']
        for feature in result['features']:
            assert feature['geometry']['type'] == 'Polygon'
            assert 10 <= feature['properties']['elevation'] <= 40

    def test_output_property(self, corner_samples):
        """Estimates should go to output_property when set."""
        result = interpolate(
            corner_samples,
            1,
            grid_type='point',
            distance_method='planar',
            output_property='estimate',
        )
        props = result['features'][0]['properties']
        assert 'estimate' in props
        assert 'elevation' not in props

    def test_input_not_mutated(self, corner_samples):
        """Samples should be left untouched."""
        before = copy.deepcopy(corner_samples)
        interpolate(corner_samples, 1, distance_method='planar')
        assert corner_samples == before

    def test_deterministic(self, random_samples):
        """Identical input should give identical output."""
        a = interpolate(random_samples, 150, z_property='solRad')
        b = interpolate(random_samples, 150, z_property='solRad')
        assert a == b

    def test_empty_samples(self, collection_factory):
        """No samples should raise InvalidInput."""
        with pytest.raises(InvalidInput):
            interpolate(collection_factory([]), 1)

    @pytest.mark.parametrize('cell_size', [0, -5, float('nan'), None])
    def test_invalid_cell_size(self, corner_samples, cell_size):
        """Cell size must be a positive number."""
        with pytest.raises(InvalidInput):
            interpolate(corner_samples, cell_size)

    def test_invalid_weight(self, corner_samples):
        """Weight must be positive."""
        with pytest.raises(InvalidInput):
            interpolate(corner_samples, 1, weight=0)

    def test_missing_values(self, point_factory, collection_factory):
        """Samples without a value should raise InvalidInput."""
        fc = collection_factory([point_factory(0, 0), point_factory(1, 1, elevation=2)])
        with pytest.raises(InvalidInput):
            interpolate(fc, 1, distance_method='planar')

"""Pytest configuration and fixtures for ipolate tests."""

import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


def _point(x, y, **properties):
    return {
        'type': 'Feature',
        'geometry': {'type': 'Point', 'coordinates': [x, y]},
        'properties': properties,
    }


def _collection(features):
    return {'type': 'FeatureCollection', 'features': features}


def make_lattice(values, xs=None, ys=None, prop='elevation'):
    """Point grid FeatureCollection from a row-major (south to north) value list."""
    rows = len(values)
    cols = len(values[0])
    xs = xs if xs is not None else [float(i) for i in range(cols)]
    ys = ys if ys is not None else [float(j) for j in range(rows)]
    features = [
        _point(xs[i], ys[j], **{prop: values[j][i]})
        for i in range(cols)
        for j in range(rows)
    ]
    return _collection(features)


@pytest.fixture
def point_factory():
    """Build a Point feature: point_factory(x, y, **properties)."""
    return _point


@pytest.fixture
def collection_factory():
    """Wrap features into a FeatureCollection."""
    return _collection


@pytest.fixture
def lattice_factory():
    """Build a point grid from a 2D list of values."""
    return make_lattice


@pytest.fixture
def peak_lattice():
    """3x3 lattice, zero everywhere except 10 in the middle."""
    return make_lattice([[0, 0, 0], [0, 10, 0], [0, 0, 0]])

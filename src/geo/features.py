"""
GeoJSON-shaped dict helpers.

Builders always return new dicts; readers never modify their input.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Iterator, Sequence
from numbers import Real
from typing import Any

from shared.errors import InvalidInput


def _feature(geometry: dict, properties: dict | None) -> dict:
    return {
        'type': 'Feature',
        'geometry': geometry,
        'properties': dict(properties) if properties else {},
    }


def point_feature(coords: Sequence[float], properties: dict | None = None) -> dict:
    return _feature(
        {'type': 'Point', 'coordinates': [float(c) for c in coords]}, properties
    )


def polygon_feature(
    rings: Sequence[Sequence[Sequence[float]]], properties: dict | None = None
) -> dict:
    return _feature(
        {
            'type': 'Polygon',
            'coordinates': [[[float(c) for c in pt] for pt in ring] for ring in rings],
        },
        properties,
    )


def multi_polygon_feature(polygons: list, properties: dict | None = None) -> dict:
    return _feature({'type': 'MultiPolygon', 'coordinates': polygons}, properties)


def multi_line_feature(lines: list, properties: dict | None = None) -> dict:
    return _feature({'type': 'MultiLineString', 'coordinates': lines}, properties)


def feature_collection(features: list[dict]) -> dict:
    return {'type': 'FeatureCollection', 'features': features}


def clone_feature(feature: dict) -> dict:
    """Deep copy of a feature with a guaranteed properties dict."""
    out = copy.deepcopy(feature)
    if out.get('properties') is None:
        out['properties'] = {}
    return out


def iter_features(collection: Any) -> Iterator[dict]:
    """Iterate features of a FeatureCollection, validating its shape."""
    if not isinstance(collection, dict) or collection.get('type') != 'FeatureCollection':
        msg = 'Expected a GeoJSON FeatureCollection'
        raise InvalidInput(msg)
    features = collection.get('features')
    if not isinstance(features, list):
        msg = 'FeatureCollection has no features list'
        raise InvalidInput(msg)
    for feature in features:
        if not isinstance(feature, dict) or feature.get('type') != 'Feature':
            msg = f'Expected a GeoJSON Feature, got {type(feature).__name__}'
            raise InvalidInput(msg)
        yield feature


def geometry_type(feature: dict) -> str | None:
    geometry = feature.get('geometry') or {}
    return geometry.get('type')


def get_coord(obj: Any) -> list[float]:
    """
    Coordinates of a point given as a Feature<Point>, a Point geometry or
    a plain [x, y(, z)] sequence.
    """
    if isinstance(obj, dict):
        geometry = obj.get('geometry') if obj.get('type') == 'Feature' else obj
        if not isinstance(geometry, dict) or geometry.get('type') != 'Point':
            msg = 'Expected a Point geometry'
            raise InvalidInput(msg)
        coords = geometry.get('coordinates')
    else:
        coords = obj
    if (
        not isinstance(coords, Sequence)
        or isinstance(coords, str)
        or len(coords) < 2
        or not all(_is_number(c) for c in coords)
    ):
        msg = f'Invalid point coordinates: {coords!r}'
        raise InvalidInput(msg)
    return [float(c) for c in coords]


def get_z_value(feature: dict, z_property: str | None) -> float:
    """
    Scalar value of a point feature.

    Taken from ``properties[z_property]``, falling back to the third
    coordinate when the property is absent.
    """
    properties = feature.get('properties') or {}
    value = properties.get(z_property) if z_property is not None else None
    if value is None:
        coords = get_coord(feature)
        if len(coords) < 3:
            msg = f'Point has neither a {z_property!r} property nor a z coordinate'
            raise InvalidInput(msg)
        value = coords[2]
    if not _is_number(value) or not math.isfinite(value):
        msg = f'z-value must be a finite number, got {value!r}'
        raise InvalidInput(msg)
    return float(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)

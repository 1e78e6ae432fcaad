"""Distances, bounding boxes and centroids."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from pyproj import Geod

from geo.features import geometry_type, get_coord, iter_features
from geo.units import coerce_unit, radians_to_length
from shared.constants import (
    EARTH_RADIUS_M,
    GEODESIC_ELLIPSOID,
    DistanceMethod,
    LengthUnit,
)
from shared.errors import InvalidInput

logger = logging.getLogger(__name__)

_GEOD = Geod(ellps=GEODESIC_ELLIPSOID)


def coerce_method(method: DistanceMethod | str) -> DistanceMethod:
    if isinstance(method, DistanceMethod):
        return method
    try:
        return DistanceMethod(str(method).lower())
    except ValueError as e:
        msg = f'Unknown distance method: {method!r}'
        raise InvalidInput(msg, e) from e


def haversine_radians(lon1, lat1, lon2, lat2) -> np.ndarray:
    """Central angle between points given in degrees (broadcasting)."""
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dlat = phi2 - phi1
    dlng = np.radians(np.asarray(lon2) - np.asarray(lon1))
    a = np.sin(dlat / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlng / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def _geodesic_radians(lon1, lat1, lon2, lat2) -> np.ndarray:
    lon1, lat1, lon2, lat2 = np.broadcast_arrays(
        np.asarray(lon1, dtype=float),
        np.asarray(lat1, dtype=float),
        np.asarray(lon2, dtype=float),
        np.asarray(lat2, dtype=float),
    )
    shape = lon1.shape
    _, _, dist_m = _GEOD.inv(lon1.ravel(), lat1.ravel(), lon2.ravel(), lat2.ravel())
    return np.asarray(dist_m, dtype=float).reshape(shape) / EARTH_RADIUS_M


def pairwise_distances(
    origins: np.ndarray,
    targets: np.ndarray,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
) -> np.ndarray:
    """
    Distance matrix between two coordinate arrays.

    Args:
        origins: (n, 2) array of x/lon, y/lat.
        targets: (m, 2) array of x/lon, y/lat.
        units: Output length unit (ignored for the planar method).
        method: Distance method.

    Returns:
        (n, m) float array.

    """
    method = coerce_method(method)
    origins = np.asarray(origins, dtype=float).reshape(-1, 2)
    targets = np.asarray(targets, dtype=float).reshape(-1, 2)
    ox = origins[:, 0][:, None]
    oy = origins[:, 1][:, None]
    tx = targets[:, 0][None, :]
    ty = targets[:, 1][None, :]

    if method is DistanceMethod.PLANAR:
        return np.hypot(tx - ox, ty - oy)
    if method is DistanceMethod.GEODESIC:
        angle = _geodesic_radians(ox, oy, tx, ty)
    else:
        angle = haversine_radians(ox, oy, tx, ty)
    return radians_to_length(angle, coerce_unit(units))


def distance(
    origin: Any,
    destination: Any,
    units: LengthUnit | str = LengthUnit.KILOMETERS,
    method: DistanceMethod | str = DistanceMethod.HAVERSINE,
) -> float:
    """Distance between two points (features, geometries or coordinates)."""
    a = get_coord(origin)[:2]
    b = get_coord(destination)[:2]
    return float(pairwise_distances([a], [b], units=units, method=method)[0, 0])


def _iter_positions(coords: Any):
    if coords and isinstance(coords[0], (int, float)):
        yield coords
        return
    for part in coords:
        yield from _iter_positions(part)


def bbox(collection: dict) -> tuple[float, float, float, float]:
    """(west, south, east, north) over every position in a feature collection."""
    xs: list[float] = []
    ys: list[float] = []
    for feature in iter_features(collection):
        if geometry_type(feature) is None:
            continue
        for position in _iter_positions(feature['geometry'].get('coordinates') or []):
            xs.append(float(position[0]))
            ys.append(float(position[1]))
    if not xs:
        msg = 'Cannot compute the bounding box of an empty collection'
        raise InvalidInput(msg)
    return min(xs), min(ys), max(xs), max(ys)


def ring_centroid(ring: list) -> tuple[float, float]:
    """Mean of the ring vertices, closing vertex excluded."""
    vertices = ring[:-1] if len(ring) > 1 and ring[0] == ring[-1] else ring
    arr = np.asarray(vertices, dtype=float)[:, :2]
    cx, cy = arr.mean(axis=0)
    return float(cx), float(cy)

"""Value estimation: inverse distance weighting grids and planar triangles."""

from .idw import idw_estimate, interpolate
from .planepoint import planepoint

__all__ = ['idw_estimate', 'interpolate', 'planepoint']

"""Contour bands and lines of valued point grids (marching squares)."""

from __future__ import annotations

from .isobands import isobands as isobands
from .isolines import isolines as isolines
from .matrix import LatticeMatrix as LatticeMatrix
from .matrix import grid_to_matrix as grid_to_matrix

"""
Marching squares over a valued lattice.

Coordinates here are lattice coordinates: x is the column index, y the row
index (rows grow northward), so a cell (i, j) has corners bl=(i, j),
br=(i+1, j), tr=(i+1, j+1) and tl=(i, j+1). A lattice value is "above" a
level when ``value >= level``.

Segments are oriented with the region above the level on their left, which
makes them half-edges of the boundary of that region. Isoline polylines and
isoband rings are both obtained by chaining half-edges end to start.
"""

from __future__ import annotations

import logging
import math
from collections import Counter

import numpy as np

from shared.constants import (
    EDGE_BOTTOM,
    EDGE_LEFT,
    EDGE_RIGHT,
    EDGE_TOP,
    MARCHING_SQUARES_CENTER_WEIGHT,
    MIN_POINTS_FOR_RING,
    MS_BIT_BL,
    MS_BIT_BR,
    MS_BIT_TL,
    MS_BIT_TR,
    MS_CASE_SEGMENTS,
    MS_MASK_EMPTY,
    MS_MASK_FULL,
    MS_SADDLE_CASES,
)

logger = logging.getLogger(__name__)

Point = tuple[float, float]
Segment = tuple[Point, Point]


def corner_mask(bl: float, br: float, tr: float, tl: float, level: float) -> int:
    """4-bit marching squares case of one cell."""
    return (
        (MS_BIT_BL if bl >= level else 0)
        | (MS_BIT_BR if br >= level else 0)
        | (MS_BIT_TR if tr >= level else 0)
        | (MS_BIT_TL if tl >= level else 0)
    )


def case_segments(mask: int, center_above: bool = True) -> tuple:
    """
    Oriented (from_edge, to_edge) pairs for a case.

    ``center_above`` picks the saddle variant: True keeps the two above
    corners connected through the cell centre.
    """
    entry = MS_CASE_SEGMENTS[mask]
    if mask in MS_SADDLE_CASES:
        return entry[0] if center_above else entry[1]
    return entry


def edge_point(p: Point, q: Point, vp: float, vq: float, level: float) -> Point:
    """
    Linear crossing of ``level`` on the lattice edge p-q.

    Endpoints are put in canonical (row, column) order first so both cells
    sharing an edge get bit-identical coordinates.
    """
    if (p[1], p[0]) > (q[1], q[0]):
        p, q, vp, vq = q, p, vq, vp
    t = (level - vp) / (vq - vp)
    t = min(max(t, 0.0), 1.0)
    return (p[0] + t * (q[0] - p[0]), p[1] + t * (q[1] - p[1]))


def _cell_mask_array(values: np.ndarray, level: float) -> np.ndarray:
    above = values >= level
    return (
        above[:-1, :-1] * MS_BIT_BL
        | above[:-1, 1:] * MS_BIT_BR
        | above[1:, 1:] * MS_BIT_TR
        | above[1:, :-1] * MS_BIT_TL
    )


def cell_segments(values: np.ndarray, i: int, j: int, level: float) -> list[Segment]:
    """Oriented contour segments of cell (i, j); zero-length ones dropped."""
    v_bl = float(values[j, i])
    v_br = float(values[j, i + 1])
    v_tr = float(values[j + 1, i + 1])
    v_tl = float(values[j + 1, i])
    mask = corner_mask(v_bl, v_br, v_tr, v_tl, level)
    if mask in (MS_MASK_EMPTY, MS_MASK_FULL):
        return []

    bl = (float(i), float(j))
    br = (float(i + 1), float(j))
    tr = (float(i + 1), float(j + 1))
    tl = (float(i), float(j + 1))
    edges = {
        EDGE_BOTTOM: (bl, br, v_bl, v_br),
        EDGE_RIGHT: (br, tr, v_br, v_tr),
        EDGE_TOP: (tl, tr, v_tl, v_tr),
        EDGE_LEFT: (bl, tl, v_bl, v_tl),
    }
    center = (v_bl + v_br + v_tr + v_tl) * MARCHING_SQUARES_CENTER_WEIGHT

    segments = []
    for start_edge, end_edge in case_segments(mask, center >= level):
        a = edge_point(*edges[start_edge], level)
        b = edge_point(*edges[end_edge], level)
        if a != b:
            segments.append((a, b))
    return segments


def level_segments(values: np.ndarray, level: float) -> list[Segment]:
    """All oriented contour segments of a level, in row-major cell order."""
    masks = _cell_mask_array(values, level)
    rows, cols = np.nonzero((masks != MS_MASK_EMPTY) & (masks != MS_MASK_FULL))
    segments: list[Segment] = []
    for j, i in zip(rows.tolist(), cols.tolist()):
        segments.extend(cell_segments(values, i, j, level))
    return segments


def perimeter(shape: tuple[int, int]) -> list[tuple[int, int]]:
    """Lattice (i, j) points around the grid, counter-clockwise from (0, 0)."""
    rows, cols = shape
    ring = [(i, 0) for i in range(cols)]
    ring += [(cols - 1, j) for j in range(1, rows)]
    ring += [(i, rows - 1) for i in range(cols - 2, -1, -1)]
    ring += [(0, j) for j in range(rows - 2, 0, -1)]
    return ring


def _band_piece(
    p: Point, q: Point, vp: float, vq: float, lower: float, upper: float
) -> Segment | None:
    p_in = lower <= vp < upper
    q_in = lower <= vq < upper
    if p_in and q_in:
        return p, q
    if p_in:
        exit_level = upper if vq >= upper else lower
        return p, edge_point(p, q, vp, vq, exit_level)
    if q_in:
        entry_level = upper if vp >= upper else lower
        return edge_point(p, q, vp, vq, entry_level), q
    if vp < lower and vq >= upper:
        return edge_point(p, q, vp, vq, lower), edge_point(p, q, vp, vq, upper)
    if vp >= upper and vq < lower:
        return edge_point(p, q, vp, vq, upper), edge_point(p, q, vp, vq, lower)
    return None


def perimeter_band_edges(
    values: np.ndarray, lower: float, upper: float
) -> list[Segment]:
    """Parts of the grid border whose values lie in [lower, upper)."""
    ring = perimeter(values.shape)
    pieces: list[Segment] = []
    for k, (pi, pj) in enumerate(ring):
        qi, qj = ring[(k + 1) % len(ring)]
        piece = _band_piece(
            (float(pi), float(pj)),
            (float(qi), float(qj)),
            float(values[pj, pi]),
            float(values[qj, qi]),
            lower,
            upper,
        )
        if piece is not None and piece[0] != piece[1]:
            pieces.append(piece)
    return pieces


class HalfEdgeSet:
    """Directed edges where an edge and its reverse cancel each other."""

    def __init__(self) -> None:
        self._edges: Counter = Counter()

    def add(self, a: Point, b: Point) -> None:
        if a == b:
            return
        if self._edges[(b, a)] > 0:
            self._edges[(b, a)] -= 1
            return
        self._edges[(a, b)] += 1

    def edges(self) -> list[Segment]:
        out: list[Segment] = []
        for edge, count in self._edges.items():
            out.extend([edge] * count)
        return out


def band_edges(values: np.ndarray, lower: float, upper: float) -> list[Segment]:
    """Boundary half-edges of the band lower <= value < upper."""
    half_edges = HalfEdgeSet()
    for a, b in level_segments(values, lower):
        half_edges.add(a, b)
    for a, b in level_segments(values, upper):
        half_edges.add(b, a)
    for a, b in perimeter_band_edges(values, lower, upper):
        half_edges.add(a, b)
    return half_edges.edges()


def _adjacency(segments: list[Segment]) -> dict[Point, list[Point]]:
    outgoing: dict[Point, list[Point]] = {}
    for a, b in segments:
        outgoing.setdefault(a, []).append(b)
    return outgoing


def _pick_next(prev: Point | None, current: Point, candidates: list[Point]) -> int:
    """Index of the candidate making the leftmost turn."""
    if prev is None or len(candidates) == 1:
        return 0
    dx, dy = current[0] - prev[0], current[1] - prev[1]
    best, best_angle = 0, -math.inf
    for k, (cx, cy) in enumerate(candidates):
        ex, ey = cx - current[0], cy - current[1]
        angle = math.atan2(dx * ey - dy * ex, dx * ex + dy * ey)
        if angle > best_angle:
            best, best_angle = k, angle
    return best


def _walk(
    outgoing: dict[Point, list[Point]],
    start: Point,
    incoming: Counter | None = None,
) -> list[Point]:
    path = [start]
    prev: Point | None = None
    current = start
    while True:
        candidates = outgoing.get(current)
        if not candidates:
            break
        nxt = candidates.pop(_pick_next(prev, current, candidates))
        if incoming is not None:
            incoming[nxt] -= 1
        path.append(nxt)
        prev, current = current, nxt
        if current == start:
            break
    return path


def chain_polylines(segments: list[Segment]) -> list[list[Point]]:
    """
    Join oriented segments into polylines.

    Open chains (starting where more segments leave than arrive, i.e. on
    the grid border) come first, then closed loops, which repeat their first
    point at the end.
    """
    outgoing = _adjacency(segments)
    incoming: Counter = Counter(b for _, b in segments)
    lines: list[list[Point]] = []
    for start in list(outgoing):
        while len(outgoing[start]) > incoming[start]:
            lines.append(_walk(outgoing, start, incoming))
    for start in list(outgoing):
        while outgoing[start]:
            lines.append(_walk(outgoing, start, incoming))
    return lines


def split_pinched(ring: list[Point]) -> list[list[Point]]:
    """Split a closed ring at repeated vertices into simple closed rings."""
    path: list[Point] = []
    index: dict[Point, int] = {}
    rings: list[list[Point]] = []
    for pt in ring[:-1]:
        if pt in index:
            k = index[pt]
            rings.append([*path[k:], pt])
            for dropped in path[k + 1 :]:
                index.pop(dropped, None)
            path = path[: k + 1]
        else:
            index[pt] = len(path)
            path.append(pt)
    if path:
        rings.append([*path, path[0]])
    return [r for r in rings if len(r) >= MIN_POINTS_FOR_RING]


def simplify_ring(ring: list[Point]) -> list[Point]:
    """Drop vertices lying straight between their neighbours."""
    pts = ring[:-1]
    n = len(pts)
    kept = []
    for k in range(n):
        ax, ay = pts[k - 1]
        bx, by = pts[k]
        cx, cy = pts[(k + 1) % n]
        cross = (bx - ax) * (cy - by) - (by - ay) * (cx - bx)
        dot = (bx - ax) * (cx - bx) + (by - ay) * (cy - by)
        if cross == 0 and dot > 0:
            continue
        kept.append(pts[k])
    if len(kept) < MIN_POINTS_FOR_RING - 1:
        return []
    return [*kept, kept[0]]


def ring_area(ring: list[Point]) -> float:
    """Signed shoelace area; positive for counter-clockwise rings."""
    total = 0.0
    for (x1, y1), (x2, y2) in zip(ring, ring[1:]):
        total += x1 * y2 - x2 * y1
    return total / 2


def point_in_ring(pt: Point, ring: list[Point]) -> bool:
    """Even-odd ray casting test."""
    x, y = pt
    inside = False
    for (x1, y1), (x2, y2) in zip(ring, ring[1:]):
        if (y1 > y) != (y2 > y):
            x_cross = x1 + (y - y1) * (x2 - x1) / (y2 - y1)
            if x < x_cross:
                inside = not inside
    return inside


def chain_rings(edges: list[Segment]) -> list[list[Point]]:
    """Chain boundary half-edges into closed, simple, simplified rings."""
    outgoing = _adjacency(edges)
    rings: list[list[Point]] = []
    for start in list(outgoing):
        while outgoing[start]:
            path = _walk(outgoing, start)
            if path[-1] != start:
                logger.warning(
                    'Dropping open boundary fragment of %d points at %s',
                    len(path), start,
                )
                continue
            for simple in split_pinched(path):
                ring = simplify_ring(simple)
                if ring and ring_area(ring) != 0:
                    rings.append(ring)
    return rings


def assemble_polygons(rings: list[list[Point]]) -> list[list[list[Point]]]:
    """
    Group rings into polygons.

    Counter-clockwise rings are shells; each clockwise ring becomes a hole
    of the smallest shell containing it.
    """
    shells = [r for r in rings if ring_area(r) > 0]
    holes = [r for r in rings if ring_area(r) < 0]
    polygons: list[list[list[Point]]] = [[shell] for shell in shells]
    areas = [ring_area(shell) for shell in shells]
    for hole in holes:
        probe = _ring_probe(hole)
        owner = None
        for k, shell in enumerate(shells):
            if point_in_ring(probe, shell) and (owner is None or areas[k] < areas[owner]):
                owner = k
        if owner is None:
            logger.warning('Hole with %d points has no enclosing shell', len(hole))
            continue
        polygons[owner].append(hole)
    return polygons


def _ring_probe(ring: list[Point]) -> Point:
    # Midpoint of the first edge avoids vertices shared with other rings
    (x1, y1), (x2, y2) = ring[0], ring[1]
    return ((x1 + x2) / 2, (y1 + y2) / 2)

from enum import Enum

# Mean earth radius used by the spherical distance helpers (metres)
EARTH_RADIUS_M = 6371008.8

# Default property names
DEFAULT_Z_PROPERTY = 'elevation'
# Corner value properties of a triangle for planepoint()
TRIANGLE_CORNER_PROPERTIES = ('a', 'b', 'c')


class GridType(str, Enum):
    SQUARE = 'square'
    POINT = 'point'
    HEX = 'hex'
    TRIANGLE = 'triangle'


class LengthUnit(str, Enum):
    METERS = 'meters'
    METRES = 'metres'
    MILLIMETERS = 'millimeters'
    MILLIMETRES = 'millimetres'
    CENTIMETERS = 'centimeters'
    CENTIMETRES = 'centimetres'
    KILOMETERS = 'kilometers'
    KILOMETRES = 'kilometres'
    MILES = 'miles'
    NAUTICAL_MILES = 'nauticalmiles'
    INCHES = 'inches'
    YARDS = 'yards'
    FEET = 'feet'
    RADIANS = 'radians'
    DEGREES = 'degrees'


class DistanceMethod(str, Enum):
    """How distances between two coordinates are measured."""

    HAVERSINE = 'haversine'  # great circle on a sphere
    GEODESIC = 'geodesic'  # WGS84 ellipsoid (pyproj.Geod)
    PLANAR = 'planar'  # Euclidean, coordinate units


# Length of one radian of arc on the earth surface, per unit
UNIT_FACTORS: dict[LengthUnit, float] = {
    LengthUnit.METERS: EARTH_RADIUS_M,
    LengthUnit.METRES: EARTH_RADIUS_M,
    LengthUnit.MILLIMETERS: EARTH_RADIUS_M * 1000,
    LengthUnit.MILLIMETRES: EARTH_RADIUS_M * 1000,
    LengthUnit.CENTIMETERS: EARTH_RADIUS_M * 100,
    LengthUnit.CENTIMETRES: EARTH_RADIUS_M * 100,
    LengthUnit.KILOMETERS: EARTH_RADIUS_M / 1000,
    LengthUnit.KILOMETRES: EARTH_RADIUS_M / 1000,
    LengthUnit.MILES: EARTH_RADIUS_M / 1609.344,
    LengthUnit.NAUTICAL_MILES: EARTH_RADIUS_M / 1852,
    LengthUnit.INCHES: EARTH_RADIUS_M * 39.370,
    LengthUnit.YARDS: EARTH_RADIUS_M * 1.0936,
    LengthUnit.FEET: EARTH_RADIUS_M * 3.28084,
    LengthUnit.RADIANS: 1.0,
    LengthUnit.DEGREES: 180.0 / 3.141592653589793,
}

# Ellipsoid for DistanceMethod.GEODESIC
GEODESIC_ELLIPSOID = 'WGS84'

# --- IDW
# Default distance-decay exponent
IDW_DEFAULT_WEIGHT = 1.0
# Upper bound on grid cells per distance-matrix chunk
IDW_MAX_CHUNK_CELLS = 65536
# Lower bound, used when the memory budget is tiny or unknown
IDW_MIN_CHUNK_CELLS = 256

# --- Memory budget for the IDW distance matrices
# Share of the available RAM the chunk buffers may take
MEMORY_SAFETY_RATIO = 0.25
# Keep at least this much RAM free (MB)
MEMORY_MIN_FREE_MB = 256
# float64 buffers alive per (cell, sample) pair: distances, weights, products
IDW_BUFFERS_PER_PAIR = 3

# --- Planepoint
# Twice the triangle area relative to its squared extent below which the
# triangle is treated as degenerate
DEGENERATE_TRIANGLE_RTOL = 1e-12
TRIANGLE_VERTEX_COUNT = 3

# --- Contours
MIN_GRID_SIZE = 2
MIN_BREAKS_ISOBANDS = 2
MIN_BREAKS_ISOLINES = 1
MIN_POINTS_FOR_RING = 4

# Marching squares corner bits (lattice y grows northward)
MS_BIT_BL = 1  # 0b0001 bottom left
MS_BIT_BR = 2  # 0b0010 bottom right
MS_BIT_TR = 4  # 0b0100 top right
MS_BIT_TL = 8  # 0b1000 top left

MS_MASK_EMPTY = 0
MS_MASK_FULL = 15
MS_MASK_BL_TR = MS_BIT_BL | MS_BIT_TR  # 5, saddle
MS_MASK_BR_TL = MS_BIT_BR | MS_BIT_TL  # 10, saddle
MS_SADDLE_CASES = (MS_MASK_BL_TR, MS_MASK_BR_TL)

# Cell edges
EDGE_BOTTOM = 'B'
EDGE_RIGHT = 'R'
EDGE_TOP = 'T'
EDGE_LEFT = 'L'

# Case table: mask -> oriented segments (from_edge, to_edge), region >= level
# on the left. Saddles hold two variants: (centre above, centre below).
MS_CASE_SEGMENTS: tuple = (
    (),  # 0
    ((EDGE_BOTTOM, EDGE_LEFT),),  # 1  bl
    ((EDGE_RIGHT, EDGE_BOTTOM),),  # 2  br
    ((EDGE_RIGHT, EDGE_LEFT),),  # 3  bl+br
    ((EDGE_TOP, EDGE_RIGHT),),  # 4  tr
    (
        ((EDGE_BOTTOM, EDGE_RIGHT), (EDGE_TOP, EDGE_LEFT)),
        ((EDGE_BOTTOM, EDGE_LEFT), (EDGE_TOP, EDGE_RIGHT)),
    ),  # 5  bl+tr
    ((EDGE_TOP, EDGE_BOTTOM),),  # 6  br+tr
    ((EDGE_TOP, EDGE_LEFT),),  # 7  all but tl
    ((EDGE_LEFT, EDGE_TOP),),  # 8  tl
    ((EDGE_BOTTOM, EDGE_TOP),),  # 9  bl+tl
    (
        ((EDGE_LEFT, EDGE_BOTTOM), (EDGE_RIGHT, EDGE_TOP)),
        ((EDGE_RIGHT, EDGE_BOTTOM), (EDGE_LEFT, EDGE_TOP)),
    ),  # 10 br+tl
    ((EDGE_RIGHT, EDGE_TOP),),  # 11 all but tr
    ((EDGE_LEFT, EDGE_RIGHT),),  # 12 tr+tl
    ((EDGE_BOTTOM, EDGE_RIGHT),),  # 13 all but br
    ((EDGE_LEFT, EDGE_BOTTOM),),  # 14 all but bl
    (),  # 15
)

# Weight of each corner in the saddle-deciding centre value
MARCHING_SQUARES_CENTER_WEIGHT = 0.25

# --- Logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# Environment variable overriding the profiles location
PROFILES_HOME_ENV = 'IPOLATE_HOME'

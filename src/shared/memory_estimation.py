"""Memory estimation and safe chunk selection for the IDW distance matrices."""

import logging

import psutil

from shared.constants import (
    IDW_BUFFERS_PER_PAIR,
    IDW_MAX_CHUNK_CELLS,
    IDW_MIN_CHUNK_CELLS,
    MEMORY_MIN_FREE_MB,
    MEMORY_SAFETY_RATIO,
)

logger = logging.getLogger(__name__)

_BYTES_PER_F64 = 8
_MB = 1024 * 1024


def estimate_idw_memory_mb(cells: int, samples: int) -> dict:
    """
    Estimate peak memory of one IDW chunk.

    A chunk holds a (cells x samples) float64 distance matrix plus the
    weight and product matrices derived from it.

    Returns dict with component breakdown and peak estimate in MB.
    """
    pair_mb = cells * samples * _BYTES_PER_F64 / _MB
    matrices_mb = pair_mb * IDW_BUFFERS_PER_PAIR
    # Estimation points and per-cell results
    vectors_mb = cells * 4 * _BYTES_PER_F64 / _MB
    # numpy temporaries while broadcasting
    overhead_mb = matrices_mb * 0.2
    peak_mb = matrices_mb + vectors_mb + overhead_mb
    return {
        'matrices_mb': round(matrices_mb, 1),
        'vectors_mb': round(vectors_mb, 1),
        'overhead_mb': round(overhead_mb, 1),
        'peak_mb': round(peak_mb, 1),
    }


def get_available_memory_mb() -> float:
    """Return available system memory in MB. Returns 0 if it cannot be read."""
    try:
        return psutil.virtual_memory().available / _MB
    except psutil.Error:
        return 0.0


def choose_idw_chunk_size(
    samples: int,
    safety_ratio: float = MEMORY_SAFETY_RATIO,
    min_free_mb: float = MEMORY_MIN_FREE_MB,
) -> int:
    """
    Choose how many grid cells to estimate per vectorised chunk.

    The chunk is as large as the memory budget allows, clamped to
    [IDW_MIN_CHUNK_CELLS, IDW_MAX_CHUNK_CELLS].
    """
    available_mb = get_available_memory_mb()
    budget_mb = available_mb * safety_ratio - min_free_mb
    if available_mb <= 0 or budget_mb <= 0:
        logger.debug(
            'Memory budget unavailable (available ~%.0f MB), using %d cells per chunk',
            available_mb, IDW_MIN_CHUNK_CELLS,
        )
        return IDW_MIN_CHUNK_CELLS

    # Matrices plus 20% overhead, see estimate_idw_memory_mb()
    per_cell_mb = max(samples, 1) * _BYTES_PER_F64 * IDW_BUFFERS_PER_PAIR * 1.2 / _MB
    cells = int(budget_mb / per_cell_mb)
    chunk = max(IDW_MIN_CHUNK_CELLS, min(IDW_MAX_CHUNK_CELLS, cells))

    if chunk < IDW_MAX_CHUNK_CELLS:
        logger.info(
            'IDW chunk limited to %d cells for %d samples '
            '(budget ~%.0f MB, available ~%.0f MB)',
            chunk, samples, budget_mb, available_mb,
        )
    return chunk

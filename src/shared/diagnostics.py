"""
Diagnostic utilities.

Logging setup plus short summaries of memory and of produced grids.
"""

from __future__ import annotations

import logging
import math
import sys
from pathlib import Path
from typing import Any

import psutil

from shared.constants import LOG_FORMAT, LOG_LEVELS

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def setup_logging(
    level: int | str = logging.INFO,
    log_file: str | Path | None = None,
) -> None:
    """Configure root logging: stdout plus an optional UTF-8 log file."""
    if isinstance(level, str):
        name = level.upper()
        if name not in LOG_LEVELS:
            msg = f'Unknown log level: {level}'
            raise ValueError(msg)
        level = getattr(logging, name)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_path), encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def get_memory_info() -> dict[str, Any]:
    """Get process and system memory usage."""
    try:
        process = psutil.Process()
        memory_info = process.memory_info()
        system_memory = psutil.virtual_memory()

        return {
            'process_rss_mb': round(memory_info.rss / _MB, 2),
            'process_vms_mb': round(memory_info.vms / _MB, 2),
            'system_total_mb': round(system_memory.total / _MB, 2),
            'system_available_mb': round(system_memory.available / _MB, 2),
            'system_used_percent': system_memory.percent,
        }
    except psutil.Error as e:
        return {'error': f'Failed to get memory info: {e}'}


def log_memory_usage(context: str = '') -> None:
    """Quick memory usage logging."""
    memory_info = get_memory_info()
    context_label = f' ({context})' if context else ''
    logger.info(
        'Memory usage%s: RSS=%sMB, Available=%sMB',
        context_label,
        memory_info.get('process_rss_mb', 'N/A'),
        memory_info.get('system_available_mb', 'N/A'),
    )


def grid_summary(collection: dict, prop: str) -> dict[str, Any]:
    """Count, min and max of ``prop`` over a feature collection."""
    values = []
    for feature in collection.get('features', []):
        value = (feature.get('properties') or {}).get(prop)
        if isinstance(value, (int, float)) and math.isfinite(value):
            values.append(float(value))
    return {
        'features': len(collection.get('features', [])),
        'valued': len(values),
        'min': min(values) if values else None,
        'max': max(values) if values else None,
    }


def log_grid_summary(
    collection: dict,
    prop: str,
    context: str = '',
    level: int = logging.INFO,
) -> None:
    """Log a one-line summary of a valued grid."""
    summary = grid_summary(collection, prop)
    context_label = f' ({context})' if context else ''
    logger.log(
        level,
        'Grid%s: %d features, %d valued, %s in [%s, %s]',
        context_label,
        summary['features'],
        summary['valued'],
        prop,
        summary['min'],
        summary['max'],
    )

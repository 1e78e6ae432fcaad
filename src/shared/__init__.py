"""Shared utilities and helpers."""
from shared.diagnostics import (
    log_grid_summary,
    log_memory_usage,
    setup_logging,
)
from shared.errors import InvalidInput, IpolateError, NumericDegeneracy

__all__ = [
    'InvalidInput',
    'IpolateError',
    'NumericDegeneracy',
    'log_grid_summary',
    'log_memory_usage',
    'setup_logging',
]

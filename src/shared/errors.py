"""Errors raised by the interpolation and contouring operations."""

from __future__ import annotations


class IpolateError(Exception):
    """Base error."""

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class InvalidInput(IpolateError, ValueError):
    """Malformed or out-of-range arguments (detected before any work is done)."""


class NumericDegeneracy(IpolateError, ArithmeticError):
    """Weights or distances that cannot produce a finite estimate."""

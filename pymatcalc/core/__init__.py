"""
Core infrastructure for pymatcalc.

This module provides shared abstractions and utilities used by the matrix
backends and the linalg domain.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    constants: Thresholds and defaults
    compute: Tolerances, formatting, timing, elimination kernels
"""

from pymatcalc.core.result import Result
from pymatcalc.core.exceptions import (
    PyMatCalcError,
    ValidationError,
    DimensionError,
    NotSquareError,
    CellIndexError,
    NumericalError,
    SingularMatrixError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyMatCalcError",
    "ValidationError",
    "DimensionError",
    "NotSquareError",
    "CellIndexError",
    "NumericalError",
    "SingularMatrixError",
]

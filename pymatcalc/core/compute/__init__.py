"""
Shared compute infrastructure for pymatcalc.

IMPORTANT: This is NOT where the matrix backends live. Those go in
pymatcalc.matrix. This module contains shared NUMERIC infrastructure.

Submodules:
    tolerances: Loose floating point comparison and digit counting
    formatting: Print-string layout
    timing: Execution timing utilities
    linalg: Elimination kernels
"""

from pymatcalc.core.compute.tolerances import (
    EPSILON,
    almost_equal,
    almost_equal_array,
    near_zero_mask,
    is_near_zero,
    integer_part_digit_count,
)
from pymatcalc.core.compute.formatting import format_grid, format_term_number
from pymatcalc.core.compute.timing import Timer

__all__ = [
    # Tolerances
    "EPSILON",
    "almost_equal",
    "almost_equal_array",
    "near_zero_mask",
    "is_near_zero",
    "integer_part_digit_count",
    # Formatting
    "format_grid",
    "format_term_number",
    # Timing
    "Timer",
]

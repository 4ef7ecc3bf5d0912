"""
Engine-wide constants for pymatcalc.

This module is the SINGLE SOURCE OF TRUTH for tunable numbers that more
than one module relies on. Import from here, never hard-code the values.

Usage:
    from pymatcalc.core.constants import SPARSITY_THRESHOLD

    if matrix.sparsity() > SPARSITY_THRESHOLD:
        ...
"""

# Sparsity above this value makes a matrix "sparse". The threshold value
# itself is reserved for "dense" (2 zero cells out of 4 is dense).
SPARSITY_THRESHOLD = 0.5

# Density at or above this value makes a matrix "dense".
DENSITY_THRESHOLD = 1.0 - SPARSITY_THRESHOLD

# Digits after the decimal point for print strings and solve step snapshots.
DEFAULT_PRECISION = 2

# Laplace expansion is O(n!). Square matrices larger than this trigger a
# RuntimeWarning from determinant, minor matrix and inverse.
LAPLACE_WARNING_DIMENSION = 9

# Backend identifiers, as reported by Matrix.backend_name.
BACKEND_DENSE = 'dense'
BACKEND_SPARSE = 'sparse'

__all__ = [
    'SPARSITY_THRESHOLD',
    'DENSITY_THRESHOLD',
    'DEFAULT_PRECISION',
    'LAPLACE_WARNING_DIMENSION',
    'BACKEND_DENSE',
    'BACKEND_SPARSE',
]

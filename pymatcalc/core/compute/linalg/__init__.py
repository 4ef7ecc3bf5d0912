"""
Linear algebra kernels for pymatcalc.

All functions follow these conventions:
    - Kernels operate on float64 NumPy grids, never on Matrix handles
    - In-place kernels say so; everything else works on a copy
    - Near-zero decisions go through pymatcalc.core.compute.tolerances

Submodules:
    elimination: Gaussian / Gauss-Jordan elimination, rank, solution readout
"""

from pymatcalc.core.compute.linalg.elimination import (
    EliminationReadout,
    forward_eliminate,
    backward_eliminate,
    count_nonzero_rows,
    echelon_rank,
    read_solution,
    solve_augmented,
)

__all__ = [
    "EliminationReadout",
    "forward_eliminate",
    "backward_eliminate",
    "count_nonzero_rows",
    "echelon_rank",
    "read_solution",
    "solve_augmented",
]

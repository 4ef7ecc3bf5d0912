"""
Linear algebra on Matrix handles.

Public API:
    solve(A, b, ...) -> LinearSystemSolution
    rank(A) -> int
    determinant(A) -> float
    inverse(A, check_singular=False) -> Matrix

solve() handles:
    - Input validation
    - Design construction
    - Backend selection
    - Result wrapping

Example:
    >>> from pymatcalc.linalg import solve
    >>> sol = solve(A, b, verbose=True)
    >>> print(sol.text)
    >>> print(sol.summary())
"""

from pymatcalc.linalg.design import LinearSystemDesign
from pymatcalc.linalg.solution import LinearSystemSolution
from pymatcalc.linalg.solvers import solve, rank, determinant, inverse

__all__ = [
    "solve",
    "rank",
    "determinant",
    "inverse",
    "LinearSystemDesign",
    "LinearSystemSolution",
]

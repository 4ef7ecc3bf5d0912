"""
Solver dispatch for linear algebra.

This module provides the public functions of pymatcalc.linalg and backend
selection. Inputs may be Matrix handles or any 2D array-like.
"""

import warnings
from typing import Literal, Union

from numpy.typing import ArrayLike

from pymatcalc.core.constants import DEFAULT_PRECISION
from pymatcalc.core.exceptions import SingularMatrixError, ValidationError
from pymatcalc.core.validation import check_precision
from pymatcalc.linalg.design import LinearSystemDesign
from pymatcalc.linalg.solution import LinearSystemSolution
from pymatcalc.linalg.backends.cpu import CPUEliminationBackend
from pymatcalc.matrix.handle import Matrix


BackendChoice = Literal['auto', 'cpu']

MatrixLike = Union[Matrix, ArrayLike]


def solve(
    coefficients: MatrixLike,
    constants: MatrixLike,
    *,
    verbose: bool = False,
    precision: int = DEFAULT_PRECISION,
    backend: BackendChoice = 'auto',
) -> LinearSystemSolution:
    """
    Solve the linear system ``A x = b`` by Gauss-Jordan elimination.

    Inconsistent systems are a normal outcome: the solution reports
    ``is_consistent == False`` and its text reads "No solution.".

    Args:
        coefficients: A (n x m), a Matrix or array-like
        constants: b (n x 1 or length n), a Matrix or array-like
        verbose: Record a matrix snapshot after every elimination step
        precision: Decimals used in the step snapshots
        backend: 'auto' or 'cpu' (the only implementation)

    Returns:
        LinearSystemSolution with equations, free variables and text

    Raises:
        ValidationError: If inputs are invalid or empty
        DimensionError: If b is not a single column matching A's rows

    Example:
        >>> from pymatcalc.linalg import solve
        >>> sol = solve([[1, 2], [3, 4]], [5, 6])
        >>> sol.equations
        ('x1 = - 4', 'x2 = + 4.5')
    """
    precision = check_precision(precision)
    design = _ensure_design(coefficients, constants)
    backend_impl = _get_backend(backend, verbose, precision)
    result = backend_impl.solve(design)
    return LinearSystemSolution(_result=result, _design=design)


def rank(matrix: MatrixLike) -> int:
    """Rank by forward elimination. Any shape; 0 for the invalid matrix."""
    return _ensure_matrix(matrix).rank()


def determinant(matrix: MatrixLike) -> float:
    """
    Determinant by Laplace expansion along row 0.

    Raises:
        NotSquareError: If the matrix is not square
    """
    return _ensure_matrix(matrix).determinant()


def inverse(matrix: MatrixLike, *, check_singular: bool = False) -> Matrix:
    """
    Inverse by the adjugate method.

    Args:
        matrix: Square Matrix or array-like
        check_singular: Raise instead of returning the invalid matrix when
            the determinant is ~0 or NaN

    Returns:
        The inverse, or the invalid matrix for a singular input

    Raises:
        NotSquareError: If the matrix is not square
        SingularMatrixError: If check_singular is set and matrix is singular
    """
    handle = _ensure_matrix(matrix)
    result = handle.inverse()
    if check_singular and handle.is_valid and not result.is_valid:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", RuntimeWarning)
            det = handle.determinant()
        raise SingularMatrixError(
            f"matrix: {handle.rows}x{handle.columns} matrix is singular "
            f"(determinant {det!r})",
            matrix_name='matrix',
            determinant=det,
        )
    return result


def _ensure_matrix(value: MatrixLike) -> Matrix:
    if isinstance(value, Matrix):
        return value
    return Matrix.from_array(value)


def _ensure_design(coefficients: MatrixLike, constants: MatrixLike) -> LinearSystemDesign:
    if isinstance(coefficients, Matrix) and isinstance(constants, Matrix):
        return LinearSystemDesign.from_matrices(coefficients, constants)
    if isinstance(coefficients, Matrix):
        coefficients = coefficients.to_numpy()
    if isinstance(constants, Matrix):
        constants = constants.to_numpy()
    return LinearSystemDesign.from_arrays(coefficients, constants)


def _get_backend(
    choice: BackendChoice,
    verbose: bool,
    precision: int,
) -> CPUEliminationBackend:
    """
    Select and instantiate the backend.

    Raises:
        ValidationError: If unknown backend specified
    """
    if choice in ('auto', 'cpu'):
        return CPUEliminationBackend(verbose=verbose, precision=precision)
    raise ValidationError(f"backend: unknown backend {choice!r}")

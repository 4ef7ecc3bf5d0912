"""
pymatcalc: dense and sparse matrices with classical elimination algorithms.

One Matrix handle over two interchangeable storage backends, with
Gaussian elimination, Laplace-expansion determinants, adjugate inverses
and rank.

Submodules:
    matrix: Matrix handle, DenseMatrix / SparseMatrix backends
    linalg: solve, rank, determinant, inverse
    core: exceptions, validation, tolerances, formatting
"""

__version__ = "0.1.0"

from pymatcalc.core.constants import DEFAULT_PRECISION, SPARSITY_THRESHOLD
from pymatcalc.core.exceptions import (
    PyMatCalcError,
    ValidationError,
    DimensionError,
    NotSquareError,
    CellIndexError,
    NumericalError,
    SingularMatrixError,
)
from pymatcalc.matrix import Matrix, DenseMatrix, SparseMatrix
from pymatcalc import linalg


def create_dense(rows: int, columns: int, fill: float = 0.0) -> Matrix:
    """Dense rows x columns matrix with every cell set to fill."""
    return Matrix.dense(rows, columns, fill)


def create_sparse(rows: int, columns: int) -> Matrix:
    """Empty (all-zero) sparse rows x columns matrix."""
    return Matrix.sparse(rows, columns)


def create_zero(rows: int, columns: int) -> Matrix:
    return Matrix.zero(rows, columns)


def create_identity(size: int) -> Matrix:
    return Matrix.identity(size)


__all__ = [
    "__version__",
    # Factories
    "create_dense",
    "create_sparse",
    "create_zero",
    "create_identity",
    # Types
    "Matrix",
    "DenseMatrix",
    "SparseMatrix",
    # Submodules
    "linalg",
    # Constants
    "DEFAULT_PRECISION",
    "SPARSITY_THRESHOLD",
    # Exceptions
    "PyMatCalcError",
    "ValidationError",
    "DimensionError",
    "NotSquareError",
    "CellIndexError",
    "NumericalError",
    "SingularMatrixError",
]

"""
Matrix: the owning value wrapper around one backend.

The handle is the public surface of the engine. It:
    - validates preconditions once (indices, shapes, squareness)
    - propagates the invalid matrix instead of raising
    - owns exactly one backend, deep-copied on copy
    - applies the density policy only when asked to

Invalid matrix:
    A handle with zero rows or zero columns wraps no backend. Queries on it
    return sentinels (NaN cell, 0 rows/columns/rank, "" text, False
    predicates), mutators are no-ops, and factory-like operations return
    another invalid handle. Nothing raises because an operand is invalid.

Usage:
    >>> from pymatcalc import Matrix
    >>> a = Matrix.from_array([[1, 2], [3, 4]])
    >>> a.determinant()
    -2.0
    >>> print(a.inverse().print_string(), end='')
    -2.00,  1.00
     1.50, -0.50
"""

from __future__ import annotations

import numbers
import warnings
from typing import Any, Iterator, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray
import scipy.sparse

from pymatcalc.core.constants import (
    BACKEND_DENSE,
    BACKEND_SPARSE,
    DEFAULT_PRECISION,
    LAPLACE_WARNING_DIMENSION,
)
from pymatcalc.core.exceptions import ValidationError
from pymatcalc.core.compute.linalg.elimination import EliminationReadout
from pymatcalc.core.validation import (
    check_2d,
    check_array,
    check_augmented_column,
    check_cell_index,
    check_dimension,
    check_multiplicable,
    check_precision,
    check_same_columns,
    check_same_rows,
    check_same_shape,
    check_split_index,
    check_square,
    check_sub_matrix_bounds,
)
from pymatcalc.matrix.base import Cell, MatrixBase
from pymatcalc.matrix.dense import DenseMatrix
from pymatcalc.matrix.sparse import SparseMatrix


Representation = Literal['auto', 'dense', 'sparse']


def _warn_laplace(n: int, operation: str) -> None:
    if n > LAPLACE_WARNING_DIMENSION:
        warnings.warn(
            f"{operation} of a {n}x{n} matrix uses Laplace expansion, which "
            f"grows factorially with the dimension; expect a long run time.",
            RuntimeWarning,
            stacklevel=3,
        )


class Matrix:
    """
    Value-semantics matrix handle.

    Construction:
        Matrix.dense(rows, columns, fill=0.0)
        Matrix.sparse(rows, columns)
        Matrix.zero(rows, columns)          # sparse, all zero
        Matrix.identity(n)                  # sparse, ones on the diagonal
        Matrix.from_array(values)           # representation chosen by density
        Matrix.from_scipy(spmatrix)         # sparse
        Matrix()                            # the invalid matrix
    """

    __hash__ = None  # mutable

    def __init__(self, backend: MatrixBase | None = None):
        if backend is not None and (backend.rows == 0 or backend.columns == 0):
            backend = None
        self._backend = backend

    # === Construction ===

    @classmethod
    def invalid(cls) -> Matrix:
        return cls()

    @classmethod
    def dense(cls, rows: int, columns: int, fill: float = 0.0) -> Matrix:
        rows = check_dimension(rows, 'rows')
        columns = check_dimension(columns, 'columns')
        if rows == 0 or columns == 0:
            return cls()
        return cls(DenseMatrix(rows, columns, fill))

    @classmethod
    def sparse(cls, rows: int, columns: int) -> Matrix:
        rows = check_dimension(rows, 'rows')
        columns = check_dimension(columns, 'columns')
        if rows == 0 or columns == 0:
            return cls()
        return cls(SparseMatrix(rows, columns))

    @classmethod
    def zero(cls, rows: int, columns: int) -> Matrix:
        return cls.sparse(rows, columns)

    @classmethod
    def identity(cls, size: int) -> Matrix:
        size = check_dimension(size, 'size')
        if size == 0:
            return cls()
        return cls(SparseMatrix.identity(size))

    @classmethod
    def from_array(
        cls,
        values: ArrayLike,
        representation: Representation = 'auto',
    ) -> Matrix:
        """
        Build a matrix from a 2D array-like.

        Args:
            values: 2D numeric data, copied
            representation: 'dense', 'sparse', or 'auto' to pick by density
                (sparse only when sparsity exceeds SPARSITY_THRESHOLD)

        Returns:
            Matrix (invalid if values has no rows or no columns)

        Raises:
            ValidationError: If values is not numeric or representation is unknown
            DimensionError: If values is not 2D
        """
        if representation not in ('auto', BACKEND_DENSE, BACKEND_SPARSE):
            raise ValidationError(
                f"representation: expected 'auto', 'dense' or 'sparse', got {representation!r}"
            )

        grid = check_array(values, 'values')
        check_2d(grid, 'values')
        if grid.shape[0] == 0 or grid.shape[1] == 0:
            return cls()

        backend: MatrixBase = DenseMatrix.from_array(grid)
        if representation == BACKEND_SPARSE or (
            representation == 'auto' and backend.is_sparse()
        ):
            backend = backend.clone_as_opposite()
        return cls(backend)

    @classmethod
    def from_scipy(cls, matrix: Any) -> Matrix:
        """Sparse-backed matrix from any scipy.sparse matrix or array."""
        if not scipy.sparse.issparse(matrix):
            raise ValidationError(
                f"matrix: expected a scipy.sparse matrix, got {type(matrix).__name__}"
            )
        return cls(SparseMatrix.from_scipy(matrix))

    # === State ===

    @property
    def is_valid(self) -> bool:
        return self._backend is not None

    @property
    def backend_name(self) -> str | None:
        """'dense', 'sparse', or None for the invalid matrix."""
        if self._backend is None:
            return None
        return self._backend.backend_name

    @property
    def rows(self) -> int:
        return 0 if self._backend is None else self._backend.rows

    @property
    def columns(self) -> int:
        return 0 if self._backend is None else self._backend.columns

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.columns)

    # === Cells ===

    def get_cell(self, row: int, column: int) -> float:
        if self._backend is None:
            return float('nan')
        row, column = check_cell_index(row, column, self.shape)
        return self._backend.get_cell(row, column)

    def set_cell(self, row: int, column: int, value: float) -> None:
        if self._backend is None:
            return
        row, column = check_cell_index(row, column, self.shape)
        self._backend.set_cell(row, column, float(value))

    def cells(self) -> Iterator[Cell]:
        """
        (row, column, value) triples in row-then-column order.

        Dense matrices yield every cell, sparse matrices only stored entries.
        """
        if self._backend is None:
            return iter(())
        return self._backend.cells()

    # === In-place mutation ===

    def resize(self, rows: int, columns: int) -> None:
        """Truncate or zero-extend. Resizing to zero makes the matrix invalid."""
        if self._backend is None:
            return
        rows = check_dimension(rows, 'rows')
        columns = check_dimension(columns, 'columns')
        if rows == 0 or columns == 0:
            self._backend = None
            return
        self._backend.resize(rows, columns)

    def resize_rows(self, rows: int) -> None:
        self.resize(rows, self.columns)

    def resize_columns(self, columns: int) -> None:
        self.resize(self.rows, columns)

    def transpose(self) -> None:
        if self._backend is not None:
            self._backend.transpose()

    def scale(self, factor: float) -> None:
        if self._backend is not None:
            self._backend.scale(float(factor))

    def apply_checkerboard(self) -> None:
        if self._backend is None:
            return
        check_square(self.shape, 'apply_checkerboard')
        self._backend.apply_checkerboard()

    # === Binary operations ===

    def equal(self, other: Matrix) -> bool:
        if self._backend is None or other._backend is None:
            return False
        return self._backend.equal(other._backend)

    def add(self, other: Matrix) -> Matrix:
        if self._backend is None or other._backend is None:
            return Matrix()
        check_same_shape(self.shape, other.shape, 'add')
        return Matrix(self._backend.add(other._backend))

    def subtract(self, other: Matrix) -> Matrix:
        if self._backend is None or other._backend is None:
            return Matrix()
        check_same_shape(self.shape, other.shape, 'subtract')
        return Matrix(self._backend.subtract(other._backend))

    def multiply(self, other: Matrix) -> Matrix:
        if self._backend is None or other._backend is None:
            return Matrix()
        check_multiplicable(self.shape, other.shape)
        return Matrix(self._backend.multiply(other._backend))

    def merge_by_columns(self, other: Matrix) -> Matrix:
        """``[self | other]``"""
        if self._backend is None or other._backend is None:
            return Matrix()
        check_same_rows(self.shape, other.shape, 'merge_by_columns')
        return Matrix(self._backend.merge_by_columns(other._backend))

    def merge_by_rows(self, other: Matrix) -> Matrix:
        """``self`` on top of ``other``."""
        if self._backend is None or other._backend is None:
            return Matrix()
        check_same_columns(self.shape, other.shape, 'merge_by_rows')
        return Matrix(self._backend.merge_by_rows(other._backend))

    # === Sub-matrices ===

    def split_by_column(self, index: int, return_left: bool = True) -> Matrix:
        if self._backend is None:
            return Matrix()
        index = check_split_index(index, self.columns, 'index')
        return Matrix(self._backend.split_by_column(index, return_left))

    def split_by_row(self, index: int, return_top: bool = True) -> Matrix:
        if self._backend is None:
            return Matrix()
        index = check_split_index(index, self.rows, 'index')
        return Matrix(self._backend.split_by_row(index, return_top))

    def sub_matrix(
        self,
        start_row: int,
        row_count: int,
        start_column: int,
        column_count: int,
    ) -> Matrix:
        if self._backend is None:
            return Matrix()
        bounds = check_sub_matrix_bounds(
            self.shape, start_row, row_count, start_column, column_count,
        )
        return Matrix(self._backend.sub_matrix(*bounds))

    def sub_matrix_excluding(self, row: int, column: int) -> Matrix:
        if self._backend is None:
            return Matrix()
        row, column = check_cell_index(row, column, self.shape)
        return Matrix(self._backend.sub_matrix_excluding(row, column))

    def sub_matrix_top_left(self, ignored_row: int, ignored_column: int) -> Matrix:
        if self._backend is None:
            return Matrix()
        ignored_row, ignored_column = check_cell_index(ignored_row, ignored_column, self.shape)
        return Matrix(self._backend.sub_matrix_top_left(ignored_row, ignored_column))

    def sub_matrix_top_right(self, ignored_row: int, ignored_column: int) -> Matrix:
        if self._backend is None:
            return Matrix()
        ignored_row, ignored_column = check_cell_index(ignored_row, ignored_column, self.shape)
        return Matrix(self._backend.sub_matrix_top_right(ignored_row, ignored_column))

    def sub_matrix_bottom_left(self, ignored_row: int, ignored_column: int) -> Matrix:
        if self._backend is None:
            return Matrix()
        ignored_row, ignored_column = check_cell_index(ignored_row, ignored_column, self.shape)
        return Matrix(self._backend.sub_matrix_bottom_left(ignored_row, ignored_column))

    def sub_matrix_bottom_right(self, ignored_row: int, ignored_column: int) -> Matrix:
        if self._backend is None:
            return Matrix()
        ignored_row, ignored_column = check_cell_index(ignored_row, ignored_column, self.shape)
        return Matrix(self._backend.sub_matrix_bottom_right(ignored_row, ignored_column))

    # === Determinant family ===

    def determinant(self) -> float:
        """
        Determinant by Laplace expansion along row 0.

        Returns NaN for the invalid matrix.

        Raises:
            NotSquareError: If the matrix is not square
        """
        if self._backend is None:
            return float('nan')
        check_square(self.shape, 'determinant')
        _warn_laplace(self.rows, 'determinant')
        return float(self._backend.determinant())

    def minor_matrix(self) -> Matrix:
        if self._backend is None:
            return Matrix()
        check_square(self.shape, 'minor_matrix')
        _warn_laplace(self.rows, 'minor_matrix')
        return Matrix(self._backend.minor_matrix())

    def inverse(self, determinant: float | None = None) -> Matrix:
        """
        Inverse by the adjugate method.

        Args:
            determinant: The matrix's determinant if already known;
                computed when omitted.

        Returns:
            The inverse in the same representation, or the invalid matrix
            when the determinant is ~0 or NaN (singular).

        Raises:
            NotSquareError: If the matrix is not square
        """
        if self._backend is None:
            return Matrix()
        check_square(self.shape, 'inverse')
        _warn_laplace(self.rows, 'inverse')
        if determinant is None:
            determinant = self._backend.determinant()
        return Matrix(self._backend.inverse(float(determinant)))

    # === Elimination ===

    def rank(self) -> int:
        if self._backend is None:
            return 0
        return self._backend.rank()

    def solve_system(
        self,
        augmented: Matrix,
        verbose: bool = False,
        precision: int = DEFAULT_PRECISION,
    ) -> EliminationReadout | None:
        """Structured Gauss-Jordan result, or None if either matrix is invalid."""
        if self._backend is None or augmented._backend is None:
            return None
        check_augmented_column(self.shape, augmented.shape)
        precision = check_precision(precision)
        return self._backend.solve_system(augmented._backend, verbose, precision)

    def solve_for(
        self,
        augmented: Matrix,
        verbose: bool = False,
        precision: int = DEFAULT_PRECISION,
    ) -> str:
        """
        Solve ``self @ x = augmented`` and describe the solution as text.

        Args:
            augmented: rows x 1 column of constants
            verbose: Prefix the text with a snapshot after every step
            precision: Decimals in the step snapshots

        Returns:
            "\\nSolution:\\n\\n" followed by one line per pivot variable, a
            free-variable line when some exist, or "No solution.". Empty
            when either matrix is invalid.
        """
        readout = self.solve_system(augmented, verbose, precision)
        if readout is None:
            return ''
        return readout.text

    # === Representation policy ===

    def sparsity(self) -> float:
        if self._backend is None:
            return float('nan')
        return self._backend.sparsity()

    def density(self) -> float:
        if self._backend is None:
            return float('nan')
        return self._backend.density()

    def is_sparse(self) -> bool:
        return self._backend is not None and self._backend.is_sparse()

    def is_dense(self) -> bool:
        return self._backend is not None and self._backend.is_dense()

    def requires_conversion(self) -> bool:
        """True when the storage disagrees with the density policy."""
        if self._backend is None:
            return False
        if self._backend.backend_name == BACKEND_DENSE:
            return self._backend.is_sparse()
        return self._backend.is_dense()

    def convert_to_appropriate_type(self) -> None:
        if self.requires_conversion():
            self._backend = self._backend.clone_as_opposite()

    def to_dense(self) -> None:
        """Switch to dense storage regardless of density."""
        if self._backend is not None and self._backend.backend_name != BACKEND_DENSE:
            self._backend = self._backend.clone_as_opposite()

    def to_sparse(self) -> None:
        """Switch to sparse storage regardless of density."""
        if self._backend is not None and self._backend.backend_name != BACKEND_SPARSE:
            self._backend = self._backend.clone_as_opposite()

    # === Export ===

    def to_numpy(self) -> NDArray[np.floating[Any]]:
        if self._backend is None:
            return np.empty((0, 0), dtype=np.float64)
        return self._backend.to_numpy()

    def to_scipy(self) -> scipy.sparse.coo_matrix:
        if self._backend is None:
            return scipy.sparse.coo_matrix((0, 0), dtype=np.float64)
        if isinstance(self._backend, SparseMatrix):
            return self._backend.to_scipy()
        return self._backend.clone_as_opposite().to_scipy()

    def print_string(self, precision: int = DEFAULT_PRECISION) -> str:
        if self._backend is None:
            return ''
        precision = check_precision(precision)
        return self._backend.print_string(precision)

    # === Copying ===

    def copy(self) -> Matrix:
        if self._backend is None:
            return Matrix()
        return Matrix(self._backend.clone())

    def __copy__(self) -> Matrix:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Matrix:
        return self.copy()

    # === Operators ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equal(other)

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return not self.equal(other)

    def __add__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: object) -> Matrix:
        if isinstance(other, Matrix):
            return self.multiply(other)
        if isinstance(other, numbers.Real):
            scaled = self.copy()
            scaled.scale(float(other))
            return scaled
        return NotImplemented

    def __rmul__(self, other: object) -> Matrix:
        if isinstance(other, numbers.Real):
            return self.__mul__(other)
        return NotImplemented

    def __neg__(self) -> Matrix:
        return self * -1.0

    # === Text ===

    def __str__(self) -> str:
        return self.print_string()

    def __repr__(self) -> str:
        if self._backend is None:
            return "Matrix(invalid)"
        return f"Matrix({self.backend_name}, {self.rows}x{self.columns})"


"""
Abstract matrix backend and the double-dispatch protocol.

A backend is a rectangular grid of doubles addressed by zero-based
(row, column). Two storage strategies implement it (DenseMatrix and
SparseMatrix); this module holds what they share.

Double dispatch:
    Every binary operation has a public entry point that takes "the other
    matrix" abstractly. Each concrete class implements the entry point by
    calling the operation back on its argument, passing itself as the
    concrete left operand:

        DenseMatrix.add(right)   ->  right._add_dense(self)
        SparseMatrix.add(right)  ->  right._add_sparse(self)

    By the time ``_add_dense`` / ``_add_sparse`` runs, both operand types
    are known, so each of the four (left, right) pairs has its own
    implementation. The result is sparse only when both operands are
    sparse. Adding a third backend means one new ``_op_<kind>`` per
    operation on every existing class plus on itself.

Preconditions (shapes, indices, squareness) are NOT checked here. The
Matrix handle validates once at the public surface; the recursive
algorithms below would otherwise re-validate at every level.

"No result" (zero-sized window, empty split, singular inverse) is
signalled by returning None.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Iterator, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pymatcalc.core.constants import (
    DEFAULT_PRECISION,
    DENSITY_THRESHOLD,
    SPARSITY_THRESHOLD,
)
from pymatcalc.core.compute.formatting import format_grid
from pymatcalc.core.compute.linalg.elimination import EliminationReadout
from pymatcalc.core.compute.tolerances import is_near_zero

if TYPE_CHECKING:
    from pymatcalc.matrix.dense import DenseMatrix
    from pymatcalc.matrix.sparse import SparseMatrix

Cell = tuple[int, int, float]


class MatrixBase(ABC):
    """Storage-independent matrix backend."""

    backend_name: str = ''

    # === Shape ===

    @property
    @abstractmethod
    def rows(self) -> int:
        ...

    @property
    @abstractmethod
    def columns(self) -> int:
        ...

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.columns)

    # === Storage primitives ===

    @classmethod
    @abstractmethod
    def _blank(cls, rows: int, columns: int) -> MatrixBase:
        """All-zero matrix of the same backend."""

    @abstractmethod
    def get_cell(self, row: int, column: int) -> float:
        ...

    @abstractmethod
    def set_cell(self, row: int, column: int, value: float) -> None:
        ...

    @abstractmethod
    def resize(self, rows: int, columns: int) -> None:
        """Truncate or zero-extend to rows x columns."""

    @abstractmethod
    def transpose(self) -> None:
        ...

    @abstractmethod
    def scale(self, factor: float) -> None:
        ...

    @abstractmethod
    def apply_checkerboard(self) -> None:
        """Negate every cell where row + column is odd (minor -> cofactor)."""

    @abstractmethod
    def clone(self) -> MatrixBase:
        ...

    @abstractmethod
    def clone_as_opposite(self) -> MatrixBase:
        """Deep copy in the other storage strategy."""

    @abstractmethod
    def cells(self) -> Iterator[Cell]:
        """(row, column, value) triples in row-then-column order."""

    @abstractmethod
    def count_nonzero(self) -> int:
        ...

    @abstractmethod
    def to_numpy(self) -> NDArray[np.floating[Any]]:
        ...

    @abstractmethod
    def sub_matrix(
        self,
        start_row: int,
        row_count: int,
        start_column: int,
        column_count: int,
    ) -> MatrixBase | None:
        """Copy of a rectangle; None when either count is zero."""

    @abstractmethod
    def _first_row_entries(self) -> Iterator[tuple[int, float]]:
        """(column, value) pairs of row 0 that may be nonzero."""

    # === Elimination ===

    @abstractmethod
    def rank(self) -> int:
        ...

    @abstractmethod
    def solve_system(
        self,
        augmented: MatrixBase,
        verbose: bool = False,
        precision: int = DEFAULT_PRECISION,
    ) -> EliminationReadout:
        """Gauss-Jordan elimination of ``[self | augmented]``."""

    def solve_for(
        self,
        augmented: MatrixBase,
        verbose: bool = False,
        precision: int = DEFAULT_PRECISION,
    ) -> str:
        return self.solve_system(augmented, verbose, precision).text

    # === Double-dispatch entry points ===

    @abstractmethod
    def equal(self, right: MatrixBase) -> bool:
        ...

    @abstractmethod
    def add(self, right: MatrixBase) -> MatrixBase:
        ...

    @abstractmethod
    def subtract(self, right: MatrixBase) -> MatrixBase:
        ...

    @abstractmethod
    def multiply(self, right: MatrixBase) -> MatrixBase:
        ...

    @abstractmethod
    def merge_by_columns(self, right: MatrixBase) -> MatrixBase:
        """``[self | right]``"""

    @abstractmethod
    def merge_by_rows(self, right: MatrixBase) -> MatrixBase:
        """``self`` stacked on top of ``right``."""

    # === Double-dispatch targets ===
    # ``self`` is the RIGHT operand; ``left`` arrives with its concrete type.

    @abstractmethod
    def _equal_dense(self, left: DenseMatrix) -> bool: ...

    @abstractmethod
    def _equal_sparse(self, left: SparseMatrix) -> bool: ...

    @abstractmethod
    def _add_dense(self, left: DenseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _add_sparse(self, left: SparseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _subtract_dense(self, left: DenseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _subtract_sparse(self, left: SparseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _multiply_dense(self, left: DenseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _multiply_sparse(self, left: SparseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _merge_by_columns_dense(self, left: DenseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _merge_by_columns_sparse(self, left: SparseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _merge_by_rows_dense(self, left: DenseMatrix) -> MatrixBase: ...

    @abstractmethod
    def _merge_by_rows_sparse(self, left: SparseMatrix) -> MatrixBase: ...

    # === Density ===

    def sparsity(self) -> float:
        total = self.rows * self.columns
        return (total - self.count_nonzero()) / total

    def density(self) -> float:
        return 1.0 - self.sparsity()

    def is_sparse(self) -> bool:
        return self.sparsity() > SPARSITY_THRESHOLD

    def is_dense(self) -> bool:
        return self.density() >= DENSITY_THRESHOLD

    # === Resizing ===

    def resize_rows(self, rows: int) -> None:
        self.resize(rows, self.columns)

    def resize_columns(self, columns: int) -> None:
        self.resize(self.rows, columns)

    # === Splits and quadrants ===

    def split_by_column(self, index: int, return_left: bool = True) -> MatrixBase | None:
        """Columns [0, index) or [index, columns)."""
        if return_left:
            return self.sub_matrix(0, self.rows, 0, index)
        return self.sub_matrix(0, self.rows, index, self.columns - index)

    def split_by_row(self, index: int, return_top: bool = True) -> MatrixBase | None:
        """Rows [0, index) or [index, rows)."""
        if return_top:
            return self.sub_matrix(0, index, 0, self.columns)
        return self.sub_matrix(index, self.rows - index, 0, self.columns)

    def sub_matrix_top_left(self, ignored_row: int, ignored_column: int) -> MatrixBase | None:
        return self.sub_matrix(0, ignored_row, 0, ignored_column)

    def sub_matrix_top_right(self, ignored_row: int, ignored_column: int) -> MatrixBase | None:
        return self.sub_matrix(
            0, ignored_row,
            ignored_column + 1, self.columns - ignored_column - 1,
        )

    def sub_matrix_bottom_left(self, ignored_row: int, ignored_column: int) -> MatrixBase | None:
        return self.sub_matrix(
            ignored_row + 1, self.rows - ignored_row - 1,
            0, ignored_column,
        )

    def sub_matrix_bottom_right(self, ignored_row: int, ignored_column: int) -> MatrixBase | None:
        return self.sub_matrix(
            ignored_row + 1, self.rows - ignored_row - 1,
            ignored_column + 1, self.columns - ignored_column - 1,
        )

    def sub_matrix_excluding(self, row: int, column: int) -> MatrixBase | None:
        """
        The matrix with ``row`` and ``column`` deleted.

        Built from the four quadrants around (row, column): the top pair and
        the bottom pair are merged by columns, then the two halves by rows.
        Any quadrant may be missing at a boundary; a 1x1 matrix has no
        remainder and yields None.
        """
        top = _join(
            self.sub_matrix_top_left(row, column),
            self.sub_matrix_top_right(row, column),
            by_rows=False,
        )
        bottom = _join(
            self.sub_matrix_bottom_left(row, column),
            self.sub_matrix_bottom_right(row, column),
            by_rows=False,
        )
        return _join(top, bottom, by_rows=True)

    # === Laplace expansion ===

    def determinant(self) -> float:
        """
        Determinant by Laplace expansion along row 0.

        Row-0 cells within tolerance of zero are skipped, so a sparse row
        costs one recursion per stored entry only. O(n!) in general.
        """
        n = self.rows
        if n == 1:
            return self.get_cell(0, 0)
        if n == 2:
            return (
                self.get_cell(0, 0) * self.get_cell(1, 1)
                - self.get_cell(0, 1) * self.get_cell(1, 0)
            )

        total = 0.0
        for column, value in self._first_row_entries():
            if is_near_zero(value):
                continue
            minor = self.sub_matrix_excluding(0, column)
            sign = 1.0 if column % 2 == 0 else -1.0
            total += sign * value * minor.determinant()
        return total

    def minor_matrix(self) -> MatrixBase:
        """
        Determinant of sub_matrix_excluding(r, c) for every cell.

        The minor of a 1x1 matrix is the determinant of the empty matrix, 1.
        """
        n = self.rows
        result = self._blank(n, n)
        if n == 1:
            result.set_cell(0, 0, 1.0)
            return result

        for r in range(n):
            for c in range(n):
                result.set_cell(r, c, self.sub_matrix_excluding(r, c).determinant())
        return result

    def inverse(self, determinant: float) -> MatrixBase | None:
        """
        Inverse by the adjugate method, given the determinant.

        minor matrix -> checkerboard (cofactors) -> transpose (adjugate)
        -> scale by 1 / determinant. None when the determinant is ~0 or NaN.
        A 1x1 matrix inverts to a single cell holding the determinant.
        """
        if math.isnan(determinant) or is_near_zero(determinant):
            return None

        if self.rows == 1:
            result = self._blank(1, 1)
            result.set_cell(0, 0, determinant)
            return result

        result = self.minor_matrix()
        result.apply_checkerboard()
        result.transpose()
        result.scale(1.0 / determinant)
        return result

    # === Text ===

    def print_string(self, precision: int = DEFAULT_PRECISION) -> str:
        return format_grid(self.to_numpy(), precision)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rows}x{self.columns})"


def _join(
    first: MatrixBase | None,
    second: MatrixBase | None,
    *,
    by_rows: bool,
) -> MatrixBase | None:
    """Merge two optional pieces; a missing piece is skipped."""
    if first is None:
        return second
    if second is None:
        return first
    if by_rows:
        return first.merge_by_rows(second)
    return first.merge_by_columns(second)

"""
Dense backend: every cell stored in a float64 NumPy grid.
"""

from __future__ import annotations

from typing import Any, Iterator, TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatcalc.core.constants import BACKEND_DENSE, DEFAULT_PRECISION
from pymatcalc.core.compute.linalg.elimination import (
    EliminationReadout,
    echelon_rank,
    solve_augmented,
)
from pymatcalc.core.compute.tolerances import almost_equal_array, near_zero_mask
from pymatcalc.matrix.base import Cell, MatrixBase

if TYPE_CHECKING:
    from pymatcalc.matrix.sparse import SparseMatrix


class DenseMatrix(MatrixBase):
    """
    Matrix stored as a complete rows x columns grid.

    Zeros occupy storage like any other value. Row operations and
    elementwise arithmetic are NumPy vector operations on the grid.
    """

    backend_name = BACKEND_DENSE

    def __init__(self, rows: int, columns: int, fill: float = 0.0):
        self._grid = np.full((rows, columns), float(fill), dtype=np.float64)

    @classmethod
    def from_array(cls, values: ArrayLike) -> DenseMatrix:
        """Copy a 2D array-like into a new dense matrix."""
        return cls._from_grid(np.array(values, dtype=np.float64, copy=True))

    @classmethod
    def _from_grid(cls, grid: NDArray[np.floating[Any]]) -> DenseMatrix:
        """Adopt ``grid`` without copying."""
        matrix = cls.__new__(cls)
        matrix._grid = grid
        return matrix

    @classmethod
    def _blank(cls, rows: int, columns: int) -> DenseMatrix:
        return cls(rows, columns)

    @property
    def rows(self) -> int:
        return self._grid.shape[0]

    @property
    def columns(self) -> int:
        return self._grid.shape[1]

    @property
    def grid(self) -> NDArray[np.floating[Any]]:
        """The underlying grid (not a copy)."""
        return self._grid

    # === Storage primitives ===

    def get_cell(self, row: int, column: int) -> float:
        return float(self._grid[row, column])

    def set_cell(self, row: int, column: int, value: float) -> None:
        self._grid[row, column] = value

    def resize(self, rows: int, columns: int) -> None:
        if (rows, columns) == self.shape:
            return
        resized = np.zeros((rows, columns), dtype=np.float64)
        keep_rows = min(rows, self.rows)
        keep_columns = min(columns, self.columns)
        resized[:keep_rows, :keep_columns] = self._grid[:keep_rows, :keep_columns]
        self._grid = resized

    def transpose(self) -> None:
        self._grid = np.ascontiguousarray(self._grid.T)

    def scale(self, factor: float) -> None:
        self._grid *= factor

    def apply_checkerboard(self) -> None:
        row_index, column_index = np.indices(self._grid.shape)
        odd = (row_index + column_index) % 2 == 1
        self._grid[odd] = -self._grid[odd]

    def clone(self) -> DenseMatrix:
        return DenseMatrix._from_grid(self._grid.copy())

    def clone_as_opposite(self) -> SparseMatrix:
        from pymatcalc.matrix.sparse import SparseMatrix
        return SparseMatrix.from_cells(self.rows, self.columns, self.cells())

    def cells(self) -> Iterator[Cell]:
        for r in range(self.rows):
            for c in range(self.columns):
                yield r, c, float(self._grid[r, c])

    def count_nonzero(self) -> int:
        return int(np.count_nonzero(~near_zero_mask(self._grid)))

    def to_numpy(self) -> NDArray[np.floating[Any]]:
        return self._grid.copy()

    def sub_matrix(
        self,
        start_row: int,
        row_count: int,
        start_column: int,
        column_count: int,
    ) -> DenseMatrix | None:
        if row_count == 0 or column_count == 0:
            return None
        window = self._grid[
            start_row:start_row + row_count,
            start_column:start_column + column_count,
        ]
        return DenseMatrix._from_grid(window.copy())

    def _first_row_entries(self) -> Iterator[tuple[int, float]]:
        for c in range(self.columns):
            yield c, float(self._grid[0, c])

    # === Elimination ===

    def rank(self) -> int:
        return echelon_rank(self._grid)

    def solve_system(
        self,
        augmented: MatrixBase,
        verbose: bool = False,
        precision: int = DEFAULT_PRECISION,
    ) -> EliminationReadout:
        system = self.merge_by_columns(augmented)
        return solve_augmented(system.to_numpy(), verbose=verbose, precision=precision)

    # === Double dispatch: entry points ===

    def equal(self, right: MatrixBase) -> bool:
        return right._equal_dense(self)

    def add(self, right: MatrixBase) -> MatrixBase:
        return right._add_dense(self)

    def subtract(self, right: MatrixBase) -> MatrixBase:
        return right._subtract_dense(self)

    def multiply(self, right: MatrixBase) -> MatrixBase:
        return right._multiply_dense(self)

    def merge_by_columns(self, right: MatrixBase) -> MatrixBase:
        return right._merge_by_columns_dense(self)

    def merge_by_rows(self, right: MatrixBase) -> MatrixBase:
        return right._merge_by_rows_dense(self)

    # === Double dispatch: left operand is dense ===

    def _equal_dense(self, left: DenseMatrix) -> bool:
        if left.shape != self.shape:
            return False
        return bool(np.all(almost_equal_array(left._grid, self._grid)))

    def _add_dense(self, left: DenseMatrix) -> DenseMatrix:
        return DenseMatrix._from_grid(left._grid + self._grid)

    def _subtract_dense(self, left: DenseMatrix) -> DenseMatrix:
        return DenseMatrix._from_grid(left._grid - self._grid)

    def _multiply_dense(self, left: DenseMatrix) -> DenseMatrix:
        product = np.zeros((left.rows, self.columns), dtype=np.float64)
        for i in range(left.rows):
            for j in range(left.columns):
                product[i, :] += left._grid[i, j] * self._grid[j, :]
        return DenseMatrix._from_grid(product)

    def _merge_by_columns_dense(self, left: DenseMatrix) -> DenseMatrix:
        return DenseMatrix._from_grid(np.hstack([left._grid, self._grid]))

    def _merge_by_rows_dense(self, left: DenseMatrix) -> DenseMatrix:
        return DenseMatrix._from_grid(np.vstack([left._grid, self._grid]))

    # === Double dispatch: left operand is sparse ===

    def _equal_sparse(self, left: SparseMatrix) -> bool:
        if left.shape != self.shape:
            return False
        return bool(np.all(almost_equal_array(left.to_numpy(), self._grid)))

    def _add_sparse(self, left: SparseMatrix) -> DenseMatrix:
        total = self._grid.copy()
        for r, c, value in left.cells():
            total[r, c] += value
        return DenseMatrix._from_grid(total)

    def _subtract_sparse(self, left: SparseMatrix) -> DenseMatrix:
        difference = -self._grid
        for r, c, value in left.cells():
            difference[r, c] += value
        return DenseMatrix._from_grid(difference)

    def _multiply_sparse(self, left: SparseMatrix) -> DenseMatrix:
        product = np.zeros((left.rows, self.columns), dtype=np.float64)
        for i, j, value in left.cells():
            product[i, :] += value * self._grid[j, :]
        return DenseMatrix._from_grid(product)

    def _merge_by_columns_sparse(self, left: SparseMatrix) -> DenseMatrix:
        return DenseMatrix._from_grid(np.hstack([left.to_numpy(), self._grid]))

    def _merge_by_rows_sparse(self, left: SparseMatrix) -> DenseMatrix:
        return DenseMatrix._from_grid(np.vstack([left.to_numpy(), self._grid]))

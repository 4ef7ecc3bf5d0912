"""
Sparse backend: only nonzero cells are stored, keyed by (row, column).

Invariant: no stored value is within tolerance of zero. ``set_cell`` drops
the entry instead of storing a near-zero value, so the entry count is
always the nonzero count and density is O(1) to compute.

Elementwise operations, merges and the Laplace expansion touch stored
entries only. Elimination (rank, solve) densifies and delegates to the
dense backend, since fill-in makes a sparse intermediate pointless.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable, Iterator

import numpy as np
from numpy.typing import NDArray
from scipy import sparse

from pymatcalc.core.constants import BACKEND_SPARSE, DEFAULT_PRECISION
from pymatcalc.core.compute.linalg.elimination import EliminationReadout
from pymatcalc.core.compute.tolerances import almost_equal, is_near_zero
from pymatcalc.matrix.base import Cell, MatrixBase
from pymatcalc.matrix.dense import DenseMatrix


class SparseMatrix(MatrixBase):
    """Coordinate-map matrix; absent cells are zero."""

    backend_name = BACKEND_SPARSE

    def __init__(self, rows: int, columns: int):
        self._rows = rows
        self._columns = columns
        self._entries: dict[tuple[int, int], float] = {}

    @classmethod
    def from_cells(
        cls,
        rows: int,
        columns: int,
        cells: Iterable[Cell],
    ) -> SparseMatrix:
        """Build from (row, column, value) triples; near-zero values are skipped."""
        matrix = cls(rows, columns)
        for r, c, value in cells:
            matrix.set_cell(r, c, value)
        return matrix

    @classmethod
    def identity(cls, size: int) -> SparseMatrix:
        return cls.from_cells(size, size, ((i, i, 1.0) for i in range(size)))

    @classmethod
    def from_scipy(cls, matrix: Any) -> SparseMatrix:
        """
        Build from any scipy.sparse matrix or array.

        Duplicate coordinates (legal in COO form) are summed.
        """
        coo = matrix.tocoo()
        accumulated: dict[tuple[int, int], float] = defaultdict(float)
        for i, j, value in zip(coo.row.tolist(), coo.col.tolist(), coo.data.tolist()):
            accumulated[(i, j)] += float(value)

        rows, columns = coo.shape
        return cls.from_cells(
            rows, columns,
            ((i, j, value) for (i, j), value in accumulated.items()),
        )

    @classmethod
    def _blank(cls, rows: int, columns: int) -> SparseMatrix:
        return cls(rows, columns)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    # === Storage primitives ===

    def get_cell(self, row: int, column: int) -> float:
        return self._entries.get((row, column), 0.0)

    def set_cell(self, row: int, column: int, value: float) -> None:
        value = float(value)
        if is_near_zero(value):
            self._entries.pop((row, column), None)
        else:
            self._entries[(row, column)] = value

    def resize(self, rows: int, columns: int) -> None:
        if rows < self._rows or columns < self._columns:
            self._entries = {
                (r, c): value
                for (r, c), value in self._entries.items()
                if r < rows and c < columns
            }
        self._rows = rows
        self._columns = columns

    def transpose(self) -> None:
        self._entries = {(c, r): value for (r, c), value in self._entries.items()}
        self._rows, self._columns = self._columns, self._rows

    def scale(self, factor: float) -> None:
        entries = self._entries
        self._entries = {}
        for (r, c), value in entries.items():
            self.set_cell(r, c, value * factor)

    def apply_checkerboard(self) -> None:
        for (r, c), value in self._entries.items():
            if (r + c) % 2 == 1:
                self._entries[(r, c)] = -value

    def clone(self) -> SparseMatrix:
        matrix = SparseMatrix(self._rows, self._columns)
        matrix._entries = dict(self._entries)
        return matrix

    def clone_as_opposite(self) -> DenseMatrix:
        return DenseMatrix._from_grid(self.to_numpy())

    def cells(self) -> Iterator[Cell]:
        for (r, c), value in sorted(self._entries.items()):
            yield r, c, value

    def count_nonzero(self) -> int:
        return len(self._entries)

    def to_numpy(self) -> NDArray[np.floating[Any]]:
        grid = np.zeros((self._rows, self._columns), dtype=np.float64)
        for (r, c), value in self._entries.items():
            grid[r, c] = value
        return grid

    def to_scipy(self) -> sparse.coo_matrix:
        """COO matrix holding the stored entries in row-then-column order."""
        entries = list(self.cells())
        row = np.array([r for r, _, _ in entries], dtype=np.int64)
        col = np.array([c for _, c, _ in entries], dtype=np.int64)
        data = np.array([value for _, _, value in entries], dtype=np.float64)
        return sparse.coo_matrix((data, (row, col)), shape=(self._rows, self._columns))

    def sub_matrix(
        self,
        start_row: int,
        row_count: int,
        start_column: int,
        column_count: int,
    ) -> SparseMatrix | None:
        if row_count == 0 or column_count == 0:
            return None
        window = SparseMatrix(row_count, column_count)
        end_row = start_row + row_count
        end_column = start_column + column_count
        for (r, c), value in self._entries.items():
            if start_row <= r < end_row and start_column <= c < end_column:
                window._entries[(r - start_row, c - start_column)] = value
        return window

    def _first_row_entries(self) -> Iterator[tuple[int, float]]:
        first_row = sorted((c, value) for (r, c), value in self._entries.items() if r == 0)
        yield from first_row

    # === Elimination ===

    def rank(self) -> int:
        return self.clone_as_opposite().rank()

    def solve_system(
        self,
        augmented: MatrixBase,
        verbose: bool = False,
        precision: int = DEFAULT_PRECISION,
    ) -> EliminationReadout:
        return self.clone_as_opposite().solve_system(augmented, verbose, precision)

    # === Double dispatch: entry points ===

    def equal(self, right: MatrixBase) -> bool:
        return right._equal_sparse(self)

    def add(self, right: MatrixBase) -> MatrixBase:
        return right._add_sparse(self)

    def subtract(self, right: MatrixBase) -> MatrixBase:
        return right._subtract_sparse(self)

    def multiply(self, right: MatrixBase) -> MatrixBase:
        return right._multiply_sparse(self)

    def merge_by_columns(self, right: MatrixBase) -> MatrixBase:
        return right._merge_by_columns_sparse(self)

    def merge_by_rows(self, right: MatrixBase) -> MatrixBase:
        return right._merge_by_rows_sparse(self)

    # === Double dispatch: left operand is dense ===

    def _equal_dense(self, left: DenseMatrix) -> bool:
        # Comparison is symmetric; reuse the dense-side implementation.
        return left._equal_sparse(self)

    def _add_dense(self, left: DenseMatrix) -> DenseMatrix:
        total = left.to_numpy()
        for (r, c), value in self._entries.items():
            total[r, c] += value
        return DenseMatrix._from_grid(total)

    def _subtract_dense(self, left: DenseMatrix) -> DenseMatrix:
        difference = left.to_numpy()
        for (r, c), value in self._entries.items():
            difference[r, c] -= value
        return DenseMatrix._from_grid(difference)

    def _multiply_dense(self, left: DenseMatrix) -> DenseMatrix:
        product = np.zeros((left.rows, self._columns), dtype=np.float64)
        for (j, k), value in self._entries.items():
            product[:, k] += left.grid[:, j] * value
        return DenseMatrix._from_grid(product)

    def _merge_by_columns_dense(self, left: DenseMatrix) -> DenseMatrix:
        merged = np.zeros((left.rows, left.columns + self._columns), dtype=np.float64)
        merged[:, :left.columns] = left.grid
        for (r, c), value in self._entries.items():
            merged[r, left.columns + c] = value
        return DenseMatrix._from_grid(merged)

    def _merge_by_rows_dense(self, left: DenseMatrix) -> DenseMatrix:
        merged = np.zeros((left.rows + self._rows, left.columns), dtype=np.float64)
        merged[:left.rows, :] = left.grid
        for (r, c), value in self._entries.items():
            merged[left.rows + r, c] = value
        return DenseMatrix._from_grid(merged)

    # === Double dispatch: left operand is sparse ===

    def _equal_sparse(self, left: SparseMatrix) -> bool:
        if left.shape != self.shape:
            return False
        for key in left._entries.keys() | self._entries.keys():
            if not almost_equal(left._entries.get(key, 0.0), self._entries.get(key, 0.0)):
                return False
        return True

    def _add_sparse(self, left: SparseMatrix) -> SparseMatrix:
        total = left.clone()
        for (r, c), value in self._entries.items():
            total.set_cell(r, c, total.get_cell(r, c) + value)
        return total

    def _subtract_sparse(self, left: SparseMatrix) -> SparseMatrix:
        difference = left.clone()
        for (r, c), value in self._entries.items():
            difference.set_cell(r, c, difference.get_cell(r, c) - value)
        return difference

    def _multiply_sparse(self, left: SparseMatrix) -> SparseMatrix:
        right_rows: dict[int, list[tuple[int, float]]] = defaultdict(list)
        for (j, k), value in self._entries.items():
            right_rows[j].append((k, value))

        accumulated: dict[tuple[int, int], float] = defaultdict(float)
        for (i, j), left_value in left._entries.items():
            for k, right_value in right_rows.get(j, ()):
                accumulated[(i, k)] += left_value * right_value

        return SparseMatrix.from_cells(
            left.rows, self._columns,
            ((i, k, value) for (i, k), value in accumulated.items()),
        )

    def _merge_by_columns_sparse(self, left: SparseMatrix) -> SparseMatrix:
        merged = SparseMatrix(left.rows, left.columns + self._columns)
        merged._entries = dict(left._entries)
        for (r, c), value in self._entries.items():
            merged._entries[(r, left.columns + c)] = value
        return merged

    def _merge_by_rows_sparse(self, left: SparseMatrix) -> SparseMatrix:
        merged = SparseMatrix(left.rows + self._rows, left.columns)
        merged._entries = dict(left._entries)
        for (r, c), value in self._entries.items():
            merged._entries[(left.rows + r, c)] = value
        return merged

"""
Gaussian elimination kernels.

Operates in place on a float64 numpy grid. Used by the dense backend for
rank and solve; the sparse backend densifies and delegates here as well
(elimination fills in a sparse matrix almost immediately).

Pivot search is "first nonzero at or below the current pivot row", NOT
magnitude-based partial pivoting. The tie-break is observable: it decides
the verbose step trace and which columns end up as free variables.

Phases:
    forward:  reduce to Row Echelon Form (REF), skipping all-zero columns
    backward: clear the entries above every pivot, then scale each pivot
              row so the pivot is 1 (Reduced Row Echelon Form, RREF)
    readout:  turn the RREF augmented matrix into equations
"""

from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatcalc.core.constants import DEFAULT_PRECISION
from pymatcalc.core.compute.formatting import format_grid, format_term_number
from pymatcalc.core.compute.tolerances import is_near_zero, near_zero_mask


StepCallback = Callable[[NDArray[np.floating[Any]]], None]

NO_SOLUTION_TEXT = "No solution."
FREE_VARIABLES_SUFFIX = " are free variables."
SOLUTION_HEADER = "\nSolution:\n\n"


@dataclass(frozen=True)
class EliminationReadout:
    """
    Outcome of solving an augmented system ``[A | b]``.

    Attributes:
        reduced: The augmented matrix after both elimination phases
        pivot_columns: Column of the pivot of row 0, row 1, ... (zero-based)
        free_variables: Coefficient columns that never became a pivot
            (zero-based; empty when the system is inconsistent)
        equations: One "x<p> = ..." line per pivot row (empty when
            inconsistent)
        consistent: False when some row reads 0 = nonzero
        steps: Snapshots "Step k:\\n\\n<matrix>\\n\\n" (only when verbose)
    """
    reduced: NDArray[np.floating[Any]]
    pivot_columns: tuple[int, ...]
    free_variables: tuple[int, ...]
    equations: tuple[str, ...]
    consistent: bool
    steps: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        """The step snapshots followed by the solution body."""
        parts = list(self.steps)
        parts.append(SOLUTION_HEADER)

        if not self.consistent:
            parts.append(NO_SOLUTION_TEXT + "\n")
            return "".join(parts)

        for equation in self.equations:
            parts.append(equation + "\n")

        if self.free_variables:
            names = ", ".join(f"x{c + 1}" for c in self.free_variables)
            parts.append(names + FREE_VARIABLES_SUFFIX + "\n")

        return "".join(parts)


def _find_pivot_row(
    grid: NDArray[np.floating[Any]],
    column: int,
    start_row: int,
) -> int | None:
    """First row at/after start_row with a nonzero entry in column."""
    for r in range(start_row, grid.shape[0]):
        if not is_near_zero(float(grid[r, column])):
            return r
    return None


def forward_eliminate(
    grid: NDArray[np.floating[Any]],
    n_pivot_columns: int,
    on_step: StepCallback | None = None,
) -> list[int]:
    """
    Reduce ``grid`` to Row Echelon Form in place.

    Only the first ``n_pivot_columns`` columns are searched for pivots (the
    augmented column of a linear system is never a pivot), but row
    operations span the whole row.

    Args:
        grid: 2D float64 array, modified in place
        n_pivot_columns: Number of leading columns eligible as pivots
        on_step: Called with the grid after every pivot column

    Returns:
        Pivot column of each pivot row, in row order
    """
    n_rows = grid.shape[0]
    pivot_row = 0
    pivot_columns: list[int] = []

    for c in range(n_pivot_columns):
        if pivot_row >= n_rows:
            break

        found = _find_pivot_row(grid, c, pivot_row)
        if found is None:
            # All-zero column below the pivot row: not a pivot column.
            continue

        if found != pivot_row:
            grid[[pivot_row, found]] = grid[[found, pivot_row]]

        pivot_value = grid[pivot_row, c]
        for r in range(pivot_row + 1, n_rows):
            value = grid[r, c]
            if is_near_zero(float(value)):
                continue
            coefficient = value / pivot_value
            grid[r, :] -= coefficient * grid[pivot_row, :]

        pivot_columns.append(c)
        pivot_row += 1

        if on_step is not None:
            on_step(grid)

    return pivot_columns


def backward_eliminate(
    grid: NDArray[np.floating[Any]],
    pivot_columns: list[int] | tuple[int, ...],
    on_step: StepCallback | None = None,
) -> None:
    """
    Turn a Row Echelon Form grid into Reduced Row Echelon Form in place.

    Walks the pivots top to bottom. For each pivot, entries above it are
    eliminated (bottom-up), then the pivot row is divided by the pivot.
    Columns left of the pivot are already zero and are not touched.

    Args:
        grid: 2D float64 array in REF, modified in place
        pivot_columns: As returned by forward_eliminate
        on_step: Called after every elimination and every normalization
    """
    for pivot_row, c in enumerate(pivot_columns):
        pivot_value = grid[pivot_row, c]

        for r in range(pivot_row - 1, -1, -1):
            value = grid[r, c]
            if is_near_zero(float(value)):
                continue
            coefficient = value / pivot_value
            grid[r, c:] -= coefficient * grid[pivot_row, c:]

            if on_step is not None:
                on_step(grid)

        grid[pivot_row, c:] /= pivot_value

        if on_step is not None:
            on_step(grid)


def count_nonzero_rows(grid: NDArray[np.floating[Any]]) -> int:
    """Number of rows that are not entirely (almost) zero."""
    if grid.size == 0:
        return 0
    zero_rows = np.all(near_zero_mask(grid), axis=1)
    return int(np.count_nonzero(~zero_rows))


def echelon_rank(values: ArrayLike) -> int:
    """
    Rank via the forward phase only.

    Works on a copy; ``values`` is not modified.
    """
    grid = np.array(values, dtype=np.float64, copy=True)
    if grid.ndim != 2 or grid.size == 0:
        return 0
    forward_eliminate(grid, grid.shape[1])
    return count_nonzero_rows(grid)


def read_solution(
    grid: NDArray[np.floating[Any]],
    pivot_columns: list[int] | tuple[int, ...],
) -> tuple[bool, tuple[str, ...], tuple[int, ...]]:
    """
    Read equations off an RREF augmented matrix.

    Each pivot row yields ``x<p> = <terms>``: nonzero coefficients of other
    unknowns move to the right-hand side with their sign flipped, the
    constant keeps its sign and is always printed. A row that is zero
    except for its constant makes the whole system inconsistent.

    Returns:
        (consistent, equations, free_variables)
    """
    n_rows, n_cols = grid.shape
    augmented_col = n_cols - 1
    zero = near_zero_mask(grid)

    equations: list[str] = []
    for r in range(n_rows):
        nonzero = np.flatnonzero(~zero[r])
        if nonzero.size == 0:
            continue

        lead = int(nonzero[0])
        if lead == augmented_col:
            # 0 = nonzero
            return False, (), ()

        terms = [f"x{lead + 1} ="]
        for c in range(lead + 1, n_cols):
            is_constant = c == augmented_col

            if zero[r, c]:
                if not is_constant:
                    continue
                value = 0.0
            else:
                value = float(grid[r, c])

            if is_constant:
                sign = "-" if value < 0.0 else "+"
            else:
                sign = "+" if value < 0.0 else "-"

            term = f" {sign} {format_term_number(abs(value))}"
            if not is_constant:
                term += f"x{c + 1}"
            terms.append(term)

        equations.append("".join(terms))

    pivots = set(pivot_columns)
    free_variables = tuple(c for c in range(augmented_col) if c not in pivots)
    return True, tuple(equations), free_variables


def solve_augmented(
    augmented: ArrayLike,
    *,
    verbose: bool = False,
    precision: int = DEFAULT_PRECISION,
) -> EliminationReadout:
    """
    Gauss-Jordan elimination of an augmented system ``[A | b]``.

    Args:
        augmented: 2D array whose last column holds the constants
        verbose: Record a print-string snapshot after every step
        precision: Decimals used in the step snapshots

    Returns:
        EliminationReadout
    """
    grid = np.array(augmented, dtype=np.float64, copy=True)
    steps: list[str] = []

    def record(snapshot: NDArray[np.floating[Any]]) -> None:
        steps.append(
            f"Step {len(steps) + 1}:\n\n{format_grid(snapshot, precision)}\n\n"
        )

    on_step = record if verbose else None

    pivot_columns = forward_eliminate(grid, grid.shape[1] - 1, on_step)
    backward_eliminate(grid, pivot_columns, on_step)
    consistent, equations, free_variables = read_solution(grid, pivot_columns)

    return EliminationReadout(
        reduced=grid,
        pivot_columns=tuple(pivot_columns),
        free_variables=free_variables,
        equations=equations,
        consistent=consistent,
        steps=tuple(steps),
    )

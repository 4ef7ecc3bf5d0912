"""
Input validation utilities for pymatcalc.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Only the public surface (the Matrix handle and pymatcalc.linalg) calls
these. The dense and sparse backends assume their preconditions hold.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pymatcalc.core.exceptions import (
    ValidationError,
    DimensionError,
    NotSquareError,
    CellIndexError,
)


Shape = tuple[int, int]


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (mixed types or non-numeric
    data) and non-numeric dtypes. NaN and Inf are allowed: they are
    legitimate cell values.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray of dtype float64

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.dtype == np.bool_:
        return result.astype(np.float64)

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(f"{name}: complex values are not supported")

    return result.astype(np.float64, copy=False)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 2-dimensional.

    Raises:
        DimensionError: If array is not 2D
    """
    if array.ndim != 2:
        raise DimensionError(
            f"{name}: expected 2D array, got {array.ndim}D with shape {array.shape}"
        )


def check_dimension(value: Any, name: str) -> int:
    """
    Verify a row/column count is a non-negative integer.

    Zero is accepted (it produces the invalid matrix); negatives are not.

    Returns:
        The value as a plain int

    Raises:
        ValidationError: If value is not an integer or is negative
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(
            f"{name}: expected a non-negative integer, got {type(value).__name__}"
        )
    value = int(value)
    if value < 0:
        raise ValidationError(f"{name}: must be non-negative, got {value}")
    return value


def check_cell_index(row: Any, column: Any, shape: Shape) -> tuple[int, int]:
    """
    Verify (row, column) addresses a cell of a matrix with the given shape.

    Returns:
        (row, column) as plain ints

    Raises:
        CellIndexError: If either index is out of range or not an integer
    """
    for label, value in (("row", row), ("column", column)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise CellIndexError(
                f"{label} index must be an integer, got {type(value).__name__}",
                row=None, column=None, shape=shape,
            )

    row, column = int(row), int(column)
    n_rows, n_cols = shape
    if not (0 <= row < n_rows and 0 <= column < n_cols):
        raise CellIndexError(
            f"cell ({row}, {column}) is outside a {n_rows}x{n_cols} matrix",
            row=row, column=column, shape=shape,
        )
    return row, column


def check_same_shape(left: Shape, right: Shape, operation: str) -> None:
    """
    Verify two operands have identical shapes (add, subtract).

    Raises:
        DimensionError: If the shapes differ
    """
    if left != right:
        raise DimensionError(
            f"{operation}: shapes {left[0]}x{left[1]} and {right[0]}x{right[1]} differ",
            left_shape=left, right_shape=right, operation=operation,
        )


def check_multiplicable(left: Shape, right: Shape) -> None:
    """
    Verify left.columns == right.rows.

    Raises:
        DimensionError: If the inner dimensions differ
    """
    if left[1] != right[0]:
        raise DimensionError(
            f"multiply: {left[0]}x{left[1]} times {right[0]}x{right[1]} "
            f"(left has {left[1]} columns, right has {right[0]} rows)",
            left_shape=left, right_shape=right, operation='multiply',
        )


def check_same_rows(left: Shape, right: Shape, operation: str) -> None:
    """
    Verify both operands have the same number of rows (column-wise merge).

    Raises:
        DimensionError: If the row counts differ
    """
    if left[0] != right[0]:
        raise DimensionError(
            f"{operation}: row counts differ ({left[0]} vs {right[0]})",
            left_shape=left, right_shape=right, operation=operation,
        )


def check_same_columns(left: Shape, right: Shape, operation: str) -> None:
    """
    Verify both operands have the same number of columns (row-wise merge).

    Raises:
        DimensionError: If the column counts differ
    """
    if left[1] != right[1]:
        raise DimensionError(
            f"{operation}: column counts differ ({left[1]} vs {right[1]})",
            left_shape=left, right_shape=right, operation=operation,
        )


def check_square(shape: Shape, operation: str) -> None:
    """
    Verify a matrix is square.

    Raises:
        NotSquareError: If rows != columns
    """
    if shape[0] != shape[1]:
        raise NotSquareError(
            f"{operation}: requires a square matrix, got {shape[0]}x{shape[1]}",
            shape=shape, operation=operation,
        )


def check_split_index(index: Any, total: int, name: str) -> int:
    """
    Verify a split position lies in [0, total].

    The extremes are legal; they make one side of the split empty.

    Raises:
        ValidationError: If index is not an integer or is out of range
    """
    if isinstance(index, bool) or not isinstance(index, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(index).__name__}"
        )
    index = int(index)
    if not 0 <= index <= total:
        raise ValidationError(f"{name}: must be in [0, {total}], got {index}")
    return index


def check_sub_matrix_bounds(
    shape: Shape,
    start_row: Any,
    row_count: Any,
    start_column: Any,
    column_count: Any,
) -> tuple[int, int, int, int]:
    """
    Verify a rectangular window fits inside a matrix.

    Counts may be zero (yielding the invalid matrix); the window end must
    not run past the matrix edge.

    Returns:
        The four arguments as plain ints

    Raises:
        ValidationError: If any argument is negative or not an integer
        DimensionError: If the window extends beyond the matrix
    """
    start_row = check_dimension(start_row, "start_row")
    row_count = check_dimension(row_count, "row_count")
    start_column = check_dimension(start_column, "start_column")
    column_count = check_dimension(column_count, "column_count")

    n_rows, n_cols = shape
    if start_row + row_count > n_rows or start_column + column_count > n_cols:
        raise DimensionError(
            f"sub_matrix: window rows [{start_row}, {start_row + row_count}) x "
            f"columns [{start_column}, {start_column + column_count}) "
            f"exceeds a {n_rows}x{n_cols} matrix",
            left_shape=shape, operation='sub_matrix',
        )
    return start_row, row_count, start_column, column_count


def check_precision(precision: Any) -> int:
    """
    Verify a print precision is a non-negative integer.

    Raises:
        ValidationError: If precision is negative or not an integer
    """
    return check_dimension(precision, "precision")


def check_augmented_column(coefficients: Shape, constants: Shape) -> None:
    """
    Verify the constants of a linear system form a single matching column.

    Raises:
        DimensionError: If constants is not rows x 1
    """
    if constants[1] != 1 or constants[0] != coefficients[0]:
        raise DimensionError(
            f"solve: constants must be {coefficients[0]}x1, "
            f"got {constants[0]}x{constants[1]}",
            left_shape=coefficients, right_shape=constants, operation='solve',
        )

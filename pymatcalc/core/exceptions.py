"""
Exception hierarchy for pymatcalc.

All exceptions inherit from PyMatCalcError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information

Note that most "failure" states of the matrix engine are values, not
exceptions: an invalid matrix propagates silently, a singular inverse is
the invalid matrix, and an inconsistent linear system reports
"No solution." as data. Exceptions are reserved for precondition
violations at the public API surface.
"""


class PyMatCalcError(Exception):
    """Base exception for all pymatcalc errors."""
    pass


class ValidationError(PyMatCalcError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Matrix dimensions are incorrect or inconsistent.

    Raised when operand shapes don't fit the requested operation, e.g.
    adding a 2x3 matrix to a 3x2 matrix.

    Attributes:
        left_shape: Shape of the left (or only) operand, if known
        right_shape: Shape of the right operand, if any
        operation: Name of the operation that was attempted
    """

    def __init__(
        self,
        message: str,
        left_shape: tuple[int, int] | None = None,
        right_shape: tuple[int, int] | None = None,
        operation: str | None = None,
    ):
        super().__init__(message)
        self.left_shape = left_shape
        self.right_shape = right_shape
        self.operation = operation


class NotSquareError(DimensionError):
    """
    Matrix is not square.

    Raised by determinant, minor matrix, checkerboard and inverse, which
    are only defined for square matrices.

    Attributes:
        shape: The (rows, columns) of the offending matrix
    """

    def __init__(
        self,
        message: str,
        shape: tuple[int, int] | None = None,
        operation: str | None = None,
    ):
        super().__init__(message, left_shape=shape, operation=operation)
        self.shape = shape


class CellIndexError(ValidationError, IndexError):
    """
    Cell coordinates fall outside the matrix.

    Also an IndexError, so generic sequence-style handlers catch it.

    Attributes:
        row: Requested row index
        column: Requested column index
        shape: The (rows, columns) of the matrix
    """

    def __init__(
        self,
        message: str,
        row: int | None = None,
        column: int | None = None,
        shape: tuple[int, int] | None = None,
    ):
        super().__init__(message)
        self.row = row
        self.column = column
        self.shape = shape


class NumericalError(PyMatCalcError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Only raised when the caller explicitly asks for it
    (``linalg.inverse(..., check_singular=True)``). The handle-level
    ``Matrix.inverse`` returns the invalid matrix instead.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        determinant: The determinant that was judged to be zero (or NaN)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        determinant: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.determinant = determinant

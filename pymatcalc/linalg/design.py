"""
Linear system design.

Pairs a coefficient matrix A with a column of constants b for A x = b.
Validation happens once here; the elimination backend trusts it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatcalc.core.exceptions import ValidationError
from pymatcalc.core.validation import check_2d, check_array, check_augmented_column
from pymatcalc.matrix.handle import Matrix


@dataclass(frozen=True)
class LinearSystemDesign:
    """
    Specification of a linear system ``A x = b``.

    Immutable after construction; the matrices are private copies.

    Construction:
        LinearSystemDesign.from_matrices(A, b)   # Matrix handles
        LinearSystemDesign.from_arrays(A, b)     # array-likes; b may be 1D
    """
    _coefficients: Matrix
    _constants: Matrix

    @classmethod
    def from_matrices(cls, coefficients: Matrix, constants: Matrix) -> LinearSystemDesign:
        """Build from Matrix handles (copied)."""
        return cls._build(coefficients.copy(), constants.copy())

    @classmethod
    def from_arrays(cls, coefficients: ArrayLike, constants: ArrayLike) -> LinearSystemDesign:
        """
        Build from array-likes.

        The coefficients keep the representation chosen by density; the
        constants are always dense.
        """
        A = check_array(coefficients, 'coefficients')
        b = check_array(constants, 'constants')
        if b.ndim == 1:
            b = b.reshape(-1, 1)
        check_2d(A, 'coefficients')
        check_2d(b, 'constants')
        return cls._build(
            Matrix.from_array(A),
            Matrix.from_array(b, representation='dense'),
        )

    @classmethod
    def _build(cls, coefficients: Matrix, constants: Matrix) -> LinearSystemDesign:
        """Internal builder with validation."""
        if not coefficients.is_valid:
            raise ValidationError("coefficients: the invalid (empty) matrix cannot be solved")
        if not constants.is_valid:
            raise ValidationError("constants: the invalid (empty) matrix cannot be solved")
        check_augmented_column(coefficients.shape, constants.shape)
        return cls(_coefficients=coefficients, _constants=constants)

    # === Properties ===

    @property
    def coefficients(self) -> Matrix:
        """Coefficient matrix A (n_equations x n_unknowns)."""
        return self._coefficients

    @property
    def constants(self) -> Matrix:
        """Constants b (n_equations x 1)."""
        return self._constants

    @property
    def n_equations(self) -> int:
        return self._coefficients.rows

    @property
    def n_unknowns(self) -> int:
        return self._coefficients.columns

    @property
    def representation(self) -> str:
        """Storage of the coefficient matrix: 'dense' or 'sparse'."""
        return self._coefficients.backend_name

    def augmented(self) -> NDArray[np.floating[Any]]:
        """``[A | b]`` as a float64 array."""
        return np.hstack([self._coefficients.to_numpy(), self._constants.to_numpy()])

"""
Matrix abstraction and its two storage backends.

Public API:
    Matrix: owning value handle (use this)
    DenseMatrix, SparseMatrix: the backends, for code that needs to pick
        a storage strategy explicitly
    MatrixBase: the backend interface and double-dispatch protocol

Example:
    >>> from pymatcalc.matrix import Matrix
    >>> m = Matrix.identity(3)
    >>> m.backend_name
    'sparse'
    >>> m.requires_conversion()
    False
"""

from pymatcalc.matrix.base import MatrixBase
from pymatcalc.matrix.dense import DenseMatrix
from pymatcalc.matrix.sparse import SparseMatrix
from pymatcalc.matrix.handle import Matrix

__all__ = [
    "Matrix",
    "MatrixBase",
    "DenseMatrix",
    "SparseMatrix",
]

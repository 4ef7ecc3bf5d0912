"""
Tests for the Matrix handle.

Validates:
    - Named constructors and the invalid matrix
    - Invalid-state propagation (sentinels, no-ops, invalid results)
    - Precondition errors at the public surface
    - Operators and value semantics
    - Representation policy (requires_conversion, conversions)
    - Round-trip properties over both backends
"""

import copy
import math
import warnings

import numpy as np
import pytest
from scipy import sparse

from pymatcalc import (
    Matrix,
    create_dense,
    create_identity,
    create_sparse,
    create_zero,
)
from pymatcalc.core.constants import (
    DENSITY_THRESHOLD,
    LAPLACE_WARNING_DIMENSION,
    SPARSITY_THRESHOLD,
)
from pymatcalc.core.exceptions import (
    CellIndexError,
    DimensionError,
    NotSquareError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════


class TestConstruction:

    def test_dense(self):
        m = Matrix.dense(2, 3, 1.5)
        assert m.is_valid
        assert m.backend_name == 'dense'
        assert m.shape == (2, 3)
        assert m.get_cell(1, 2) == 1.5

    def test_sparse(self):
        m = Matrix.sparse(4, 4)
        assert m.backend_name == 'sparse'
        assert m.get_cell(3, 3) == 0.0

    def test_zero_is_sparse(self):
        assert Matrix.zero(2, 2).backend_name == 'sparse'

    def test_identity(self):
        m = Matrix.identity(3)
        assert m.backend_name == 'sparse'
        np.testing.assert_array_equal(m.to_numpy(), np.eye(3))

    def test_module_factories(self):
        assert create_dense(2, 2, 3.0).get_cell(0, 0) == 3.0
        assert create_sparse(2, 2).backend_name == 'sparse'
        assert create_zero(1, 5).shape == (1, 5)
        assert create_identity(2) == Matrix.from_array([[1, 0], [0, 1]])

    @pytest.mark.parametrize("rows, columns", [(0, 3), (3, 0), (0, 0)])
    def test_zero_dimension_is_invalid(self, rows, columns):
        assert not Matrix.dense(rows, columns).is_valid
        assert not Matrix.sparse(rows, columns).is_valid

    def test_negative_dimension_raises(self):
        with pytest.raises(ValidationError, match="rows"):
            Matrix.dense(-1, 2)

    def test_from_array_auto_dense(self):
        assert Matrix.from_array([[1, 2], [0, 4]]).backend_name == 'dense'

    def test_from_array_auto_sparse(self):
        assert Matrix.from_array([[1, 0], [0, 0]]).backend_name == 'sparse'

    def test_from_array_threshold_belongs_to_dense(self):
        assert Matrix.from_array([[1, 0], [0, 1]]).backend_name == 'dense'

    def test_from_array_forced(self):
        assert Matrix.from_array([[1, 0], [0, 0]], representation='dense').backend_name == 'dense'
        assert Matrix.from_array([[1, 2], [3, 4]], representation='sparse').backend_name == 'sparse'

    def test_from_array_unknown_representation(self):
        with pytest.raises(ValidationError, match="representation"):
            Matrix.from_array([[1]], representation='csr')

    def test_from_array_not_2d(self):
        with pytest.raises(DimensionError):
            Matrix.from_array([1, 2, 3])

    def test_from_array_empty_is_invalid(self):
        assert not Matrix.from_array(np.zeros((0, 3))).is_valid

    def test_from_scipy(self):
        m = Matrix.from_scipy(sparse.eye(3, format='csr'))
        assert m.backend_name == 'sparse'
        assert m == Matrix.identity(3)

    def test_from_scipy_rejects_dense(self):
        with pytest.raises(ValidationError, match="scipy.sparse"):
            Matrix.from_scipy(np.eye(2))


# ═══════════════════════════════════════════════════════════════════════
# Invalid matrix
# ═══════════════════════════════════════════════════════════════════════


class TestInvalidMatrix:

    @pytest.fixture
    def invalid(self):
        return Matrix()

    def test_sentinels(self, invalid):
        assert not invalid.is_valid
        assert invalid.backend_name is None
        assert invalid.rows == 0
        assert invalid.columns == 0
        assert math.isnan(invalid.get_cell(0, 0))
        assert invalid.rank() == 0
        assert invalid.print_string() == ""
        assert str(invalid) == ""
        assert math.isnan(invalid.determinant())
        assert math.isnan(invalid.sparsity())
        assert not invalid.is_sparse()
        assert not invalid.is_dense()
        assert not invalid.requires_conversion()
        assert list(invalid.cells()) == []
        assert invalid.to_numpy().shape == (0, 0)
        assert invalid.to_scipy().shape == (0, 0)
        assert repr(invalid) == "Matrix(invalid)"

    def test_mutators_are_no_ops(self, invalid):
        invalid.set_cell(0, 0, 1.0)
        invalid.resize(3, 3)
        invalid.transpose()
        invalid.scale(2.0)
        invalid.apply_checkerboard()
        invalid.to_dense()
        invalid.convert_to_appropriate_type()
        assert not invalid.is_valid

    def test_results_propagate_invalid(self, invalid):
        valid = Matrix.dense(2, 2, 1.0)
        assert not (invalid + valid).is_valid
        assert not (valid - invalid).is_valid
        assert not (valid * invalid).is_valid
        assert not valid.merge_by_columns(invalid).is_valid
        assert not invalid.merge_by_rows(valid).is_valid
        assert not invalid.split_by_column(0).is_valid
        assert not invalid.sub_matrix(0, 1, 0, 1).is_valid
        assert not invalid.inverse().is_valid
        assert not invalid.minor_matrix().is_valid
        assert not invalid.copy().is_valid

    def test_solve_with_invalid_is_empty(self, invalid):
        valid = Matrix.dense(2, 2, 1.0)
        assert valid.solve_for(invalid) == ""
        assert invalid.solve_for(Matrix.dense(2, 1)) == ""

    def test_never_equal(self, invalid):
        assert not invalid == Matrix()
        assert invalid != Matrix()
        assert invalid != Matrix.dense(1, 1)

    def test_resize_to_zero_invalidates(self):
        m = Matrix.dense(2, 2, 1.0)
        m.resize_rows(0)
        assert not m.is_valid

    def test_empty_window_is_invalid(self):
        m = Matrix.dense(3, 3, 1.0)
        assert not m.sub_matrix(1, 0, 0, 3).is_valid
        assert not m.split_by_row(0, return_top=True).is_valid
        assert not m.sub_matrix_top_left(0, 0).is_valid
        assert not Matrix.dense(1, 1, 2.0).sub_matrix_excluding(0, 0).is_valid


# ═══════════════════════════════════════════════════════════════════════
# Preconditions
# ═══════════════════════════════════════════════════════════════════════


class TestPreconditions:

    def test_cell_out_of_range(self):
        m = Matrix.dense(2, 2)
        with pytest.raises(CellIndexError):
            m.get_cell(2, 0)
        with pytest.raises(CellIndexError):
            m.set_cell(0, -1, 1.0)

    def test_add_shape_mismatch(self):
        with pytest.raises(DimensionError, match="add"):
            Matrix.dense(2, 3) + Matrix.dense(3, 2)

    def test_multiply_shape_mismatch(self):
        with pytest.raises(DimensionError, match="multiply"):
            Matrix.dense(2, 3) * Matrix.dense(2, 3)

    def test_merge_mismatch(self):
        with pytest.raises(DimensionError):
            Matrix.dense(2, 3).merge_by_columns(Matrix.dense(3, 3))
        with pytest.raises(DimensionError):
            Matrix.dense(2, 3).merge_by_rows(Matrix.dense(2, 2))

    @pytest.mark.parametrize("operation", ["determinant", "minor_matrix", "inverse", "apply_checkerboard"])
    def test_square_required(self, operation):
        with pytest.raises(NotSquareError):
            getattr(Matrix.dense(2, 3, 1.0), operation)()

    def test_rank_accepts_rectangular(self):
        assert Matrix.from_array([[1, 2, 3], [2, 4, 6]]).rank() == 1

    def test_split_out_of_range(self):
        with pytest.raises(ValidationError):
            Matrix.dense(2, 2).split_by_column(3)

    def test_sub_matrix_out_of_range(self):
        with pytest.raises(DimensionError):
            Matrix.dense(2, 2).sub_matrix(1, 2, 0, 1)

    def test_solve_constants_shape(self):
        with pytest.raises(DimensionError):
            Matrix.dense(3, 3, 1.0).solve_for(Matrix.dense(2, 1, 1.0))

    def test_negative_precision(self):
        with pytest.raises(ValidationError, match="precision"):
            Matrix.dense(1, 1).print_string(-1)


# ═══════════════════════════════════════════════════════════════════════
# Operators and value semantics
# ═══════════════════════════════════════════════════════════════════════


class TestOperators:

    def test_arithmetic(self, make_matrix):
        a = make_matrix([[1, 2], [3, 4]])
        b = make_matrix([[0, 1], [1, 0]])
        assert a + b == Matrix.from_array([[1, 3], [4, 4]])
        assert a - b == Matrix.from_array([[1, 1], [2, 4]])
        assert a * b == Matrix.from_array([[2, 1], [4, 3]])

    def test_scalar_multiply(self, make_matrix):
        a = make_matrix([[1, -2]])
        assert a * 3 == Matrix.from_array([[3, -6]])
        assert 0.5 * a == Matrix.from_array([[0.5, -1]])
        assert a == Matrix.from_array([[1, -2]])

    def test_negation(self, make_matrix):
        a = make_matrix([[1, 0], [0, -2]])
        assert -a == Matrix.from_array([[-1, 0], [0, 2]])
        assert (a + -a) == Matrix.zero(2, 2)

    def test_not_implemented_for_other_types(self):
        a = Matrix.dense(1, 1, 1.0)
        assert (a == 1.0) is False
        with pytest.raises(TypeError):
            a + 1.0
        with pytest.raises(TypeError):
            a * "x"

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Matrix.dense(1, 1))

    def test_copy_is_deep(self, make_matrix):
        a = make_matrix([[1, 2], [3, 4]])
        for duplicate in (a.copy(), copy.copy(a), copy.deepcopy(a)):
            duplicate.set_cell(0, 0, 99.0)
            assert a.get_cell(0, 0) == 1.0
            assert duplicate.backend_name == a.backend_name

    def test_repr(self):
        assert repr(Matrix.dense(2, 3)) == "Matrix(dense, 2x3)"

    def test_str_is_print_string(self, mixed_magnitudes):
        m = Matrix.from_array(mixed_magnitudes)
        assert str(m) == m.print_string(2)


# ═══════════════════════════════════════════════════════════════════════
# Representation policy
# ═══════════════════════════════════════════════════════════════════════


class TestRepresentationPolicy:

    @pytest.mark.parametrize("n_zero", range(10))
    def test_dense_and_sparse_are_complementary(self, representation, n_zero):
        values = np.ones(9)
        values[:n_zero] = 0.0
        m = Matrix.from_array(values.reshape(3, 3), representation=representation)
        assert m.is_dense() != m.is_sparse()
        assert m.is_dense() == (m.density() >= DENSITY_THRESHOLD)
        assert m.is_sparse() == (m.sparsity() > SPARSITY_THRESHOLD)
        assert m.is_sparse() == (n_zero >= 5)

    def test_density_of_dense_fives(self):
        m = Matrix.dense(2, 2, 5.0)
        m.set_cell(0, 0, 0.0)
        assert m.sparsity() == 0.25
        assert not m.requires_conversion()
        m.set_cell(1, 1, 0.0)
        assert m.sparsity() == 0.5
        assert m.is_dense()
        assert not m.requires_conversion()
        m.set_cell(0, 1, 0.0)
        assert m.sparsity() == 0.75
        assert m.is_sparse()
        assert m.requires_conversion()

    def test_convert_to_appropriate_type(self):
        m = Matrix.dense(3, 3)
        m.set_cell(1, 1, 2.0)
        m.convert_to_appropriate_type()
        assert m.backend_name == 'sparse'
        assert m.get_cell(1, 1) == 2.0
        assert not m.requires_conversion()

    def test_sparse_filled_up_requires_conversion(self):
        m = Matrix.sparse(2, 2)
        assert not m.requires_conversion()
        for r in range(2):
            for c in range(2):
                m.set_cell(r, c, 1.0)
        assert m.density() == 1.0
        assert m.requires_conversion()
        m.convert_to_appropriate_type()
        assert m.backend_name == 'dense'

    def test_algebra_never_converts(self):
        a = Matrix.from_array([[1, 2], [3, 4]])
        b = Matrix.from_array([[-1, -2], [-3, -4]])
        total = a + b
        assert total.backend_name == 'dense'
        assert total.requires_conversion()

    def test_forced_conversion_round_trip(self, rng):
        values = rng.standard_normal((3, 4))
        values[values < 0] = 0.0
        m = Matrix.from_array(values, representation='dense')
        original = m.copy()
        m.to_sparse()
        assert m.backend_name == 'sparse'
        assert m == original
        m.to_dense()
        assert m.backend_name == 'dense'
        assert m == original

    def test_to_scipy_from_dense(self):
        m = Matrix.from_array([[0, 2], [3, 0]], representation='dense')
        np.testing.assert_array_equal(m.to_scipy().toarray(), [[0, 2], [3, 0]])


# ═══════════════════════════════════════════════════════════════════════
# Properties over both backends
# ═══════════════════════════════════════════════════════════════════════


class TestProperties:

    def test_dense_equals_sparse(self, rng):
        values = rng.standard_normal((4, 3))
        values[rng.random((4, 3)) < 0.6] = 0.0
        dense = Matrix.from_array(values, representation='dense')
        sparse_ = Matrix.from_array(values, representation='sparse')
        assert dense == sparse_
        assert sparse_ == dense

    def test_transpose_involution(self, make_matrix, rng):
        m = make_matrix(rng.standard_normal((2, 5)))
        original = m.copy()
        m.transpose()
        assert m.shape == (5, 2)
        m.transpose()
        assert m == original

    def test_resize_to_same_size_is_no_op(self, make_matrix):
        m = make_matrix([[1, 2], [3, 4]])
        original = m.copy()
        m.resize(2, 2)
        assert m == original

    def test_shrink_then_grow(self, make_matrix):
        m = make_matrix([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        m.resize(2, 2)
        m.resize(3, 3)
        assert m == Matrix.from_array([[1, 2, 0], [4, 5, 0], [0, 0, 0]])

    def test_cells_dense_vs_sparse(self):
        values = [[0, 1], [2, 0]]
        assert len(list(Matrix.from_array(values, representation='dense').cells())) == 4
        assert list(Matrix.from_array(values, representation='sparse').cells()) == [
            (0, 1, 1.0), (1, 0, 2.0),
        ]

    def test_quadrants(self, make_matrix):
        m = make_matrix(np.arange(1.0, 10.0).reshape(3, 3))
        assert m.sub_matrix_top_left(1, 1) == Matrix.from_array([[1]])
        assert m.sub_matrix_top_right(1, 1) == Matrix.from_array([[3]])
        assert m.sub_matrix_bottom_left(1, 1) == Matrix.from_array([[7]])
        assert m.sub_matrix_bottom_right(1, 1) == Matrix.from_array([[9]])
        assert m.sub_matrix_excluding(1, 1) == Matrix.from_array([[1, 3], [7, 9]])

    def test_split_pieces_merge_back(self, make_matrix, rng):
        m = make_matrix(rng.standard_normal((3, 4)))
        left = m.split_by_column(1, return_left=True)
        right = m.split_by_column(1, return_left=False)
        assert left.merge_by_columns(right) == m
        top = m.split_by_row(2, return_top=True)
        bottom = m.split_by_row(2, return_top=False)
        assert top.merge_by_rows(bottom) == m

    def test_results_keep_representation(self, make_matrix, representation):
        m = make_matrix([[2, 0], [0, 4]])
        assert m.inverse().backend_name == representation
        assert m.minor_matrix().backend_name == representation
        assert (m * m).backend_name == representation


# ═══════════════════════════════════════════════════════════════════════
# Laplace size warning
# ═══════════════════════════════════════════════════════════════════════


class TestLaplaceWarning:

    def test_small_matrix_does_not_warn(self):
        m = Matrix.identity(LAPLACE_WARNING_DIMENSION)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert m.determinant() == 1.0

    def test_large_matrix_warns(self):
        m = Matrix.identity(LAPLACE_WARNING_DIMENSION + 1)
        with pytest.warns(RuntimeWarning, match="Laplace expansion"):
            assert m.determinant() == 1.0

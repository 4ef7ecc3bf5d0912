"""
Tests for the double-dispatch protocol.

Every binary operation is checked over all four (left, right) backend
pairs against a NumPy reference. The result is sparse only when both
operands are sparse, independent of operand order.
"""

import itertools

import numpy as np
import pytest

from pymatcalc.matrix.dense import DenseMatrix
from pymatcalc.matrix.sparse import SparseMatrix


BACKENDS = {
    'dense': DenseMatrix.from_array,
    'sparse': lambda values: DenseMatrix.from_array(values).clone_as_opposite(),
}

PAIRS = list(itertools.product(BACKENDS, repeat=2))


def _expected_type(left_kind, right_kind):
    if left_kind == 'sparse' and right_kind == 'sparse':
        return SparseMatrix
    return DenseMatrix


@pytest.fixture
def operands(rng):
    left = rng.integers(-4, 5, size=(3, 4)).astype(float)
    right = rng.integers(-4, 5, size=(3, 4)).astype(float)
    left[0, :] = 0.0
    right[:, 1] = 0.0
    return left, right


# ═══════════════════════════════════════════════════════════════════════
# Elementwise
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("left_kind, right_kind", PAIRS)
class TestElementwise:

    def test_add(self, operands, left_kind, right_kind):
        a, b = operands
        result = BACKENDS[left_kind](a).add(BACKENDS[right_kind](b))
        assert type(result) is _expected_type(left_kind, right_kind)
        np.testing.assert_allclose(result.to_numpy(), a + b)

    def test_subtract(self, operands, left_kind, right_kind):
        a, b = operands
        result = BACKENDS[left_kind](a).subtract(BACKENDS[right_kind](b))
        assert type(result) is _expected_type(left_kind, right_kind)
        np.testing.assert_allclose(result.to_numpy(), a - b)

    def test_add_commutes(self, operands, left_kind, right_kind):
        a, b = operands
        left = BACKENDS[left_kind](a)
        right = BACKENDS[right_kind](b)
        assert left.add(right).equal(right.add(left))

    def test_subtract_antisymmetric(self, operands, left_kind, right_kind):
        a, b = operands
        left = BACKENDS[left_kind](a)
        right = BACKENDS[right_kind](b)
        reversed_difference = right.subtract(left)
        reversed_difference.scale(-1.0)
        assert left.subtract(right).equal(reversed_difference)

    def test_equal_across_backends(self, operands, left_kind, right_kind):
        a, _ = operands
        assert BACKENDS[left_kind](a).equal(BACKENDS[right_kind](a))

    def test_not_equal(self, operands, left_kind, right_kind):
        a, b = operands
        assert not BACKENDS[left_kind](a).equal(BACKENDS[right_kind](b))

    def test_equal_shape_mismatch(self, operands, left_kind, right_kind):
        a, _ = operands
        assert not BACKENDS[left_kind](a).equal(BACKENDS[right_kind](a.T))

    def test_equal_within_tolerance(self, operands, left_kind, right_kind):
        a, _ = operands
        assert BACKENDS[left_kind](a).equal(BACKENDS[right_kind](a + 1e-14))


# ═══════════════════════════════════════════════════════════════════════
# Multiply and merges
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("left_kind, right_kind", PAIRS)
class TestStructural:

    def test_multiply(self, operands, left_kind, right_kind):
        a, b = operands
        result = BACKENDS[left_kind](a).multiply(BACKENDS[right_kind](b.T))
        assert type(result) is _expected_type(left_kind, right_kind)
        assert result.shape == (3, 3)
        np.testing.assert_allclose(result.to_numpy(), a @ b.T)

    def test_multiply_identity(self, operands, left_kind, right_kind):
        a, _ = operands
        identity = BACKENDS[right_kind](np.eye(4))
        assert BACKENDS[left_kind](a).multiply(identity).equal(BACKENDS[left_kind](a))

    def test_merge_by_columns(self, operands, left_kind, right_kind):
        a, b = operands
        result = BACKENDS[left_kind](a).merge_by_columns(BACKENDS[right_kind](b[:, :2]))
        assert type(result) is _expected_type(left_kind, right_kind)
        np.testing.assert_array_equal(result.to_numpy(), np.hstack([a, b[:, :2]]))

    def test_merge_by_rows(self, operands, left_kind, right_kind):
        a, b = operands
        result = BACKENDS[left_kind](a).merge_by_rows(BACKENDS[right_kind](b[:1]))
        assert type(result) is _expected_type(left_kind, right_kind)
        np.testing.assert_array_equal(result.to_numpy(), np.vstack([a, b[:1]]))

    def test_merge_order_is_the_only_difference(self, operands, left_kind, right_kind):
        a, b = operands
        left = BACKENDS[left_kind](a)
        right = BACKENDS[right_kind](b)
        forward = left.merge_by_columns(right).to_numpy()
        backward = right.merge_by_columns(left).to_numpy()
        np.testing.assert_array_equal(forward[:, :4], backward[:, 4:])
        np.testing.assert_array_equal(forward[:, 4:], backward[:, :4])


class TestSparseResultsKeepInvariant:

    def test_cancelling_add_stores_nothing(self):
        a = BACKENDS['sparse'](np.array([[1.0, 0.0], [0.0, 2.0]]))
        b = BACKENDS['sparse'](np.array([[-1.0, 0.0], [0.0, -2.0]]))
        total = a.add(b)
        assert isinstance(total, SparseMatrix)
        assert total.count_nonzero() == 0

    def test_sparse_product_skips_cancelled_entries(self):
        a = BACKENDS['sparse'](np.array([[1.0, 1.0]]))
        b = BACKENDS['sparse'](np.array([[1.0], [-1.0]]))
        product = a.multiply(b)
        assert product.shape == (1, 1)
        assert product.count_nonzero() == 0

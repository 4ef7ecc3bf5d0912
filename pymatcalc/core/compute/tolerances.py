"""
Floating point tolerance helpers.

Gaussian elimination compounds rounding error across pivot steps, so exact
equality would classify near-zero pivots as nonzero. Every "is this zero?"
and "are these equal?" decision in the engine goes through the loose,
dual absolute/relative comparison defined here.

EPSILON (machine epsilon * 1000) works for roughly 11 zeroes followed by
one nonzero digit.
"""

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray


EPSILON = float(np.finfo(np.float64).eps) * 1000


def almost_equal(left: float, right: float, epsilon: float = EPSILON) -> bool:
    """
    Approximate equality of two doubles.

    True when ``|left - right|`` is within the absolute tolerance
    ``epsilon`` OR within the relative tolerance ``epsilon * max(left, right)``.

    NaN handling:
        - two NaNs compare equal
        - NaN vs non-NaN compares unequal
        - a NaN epsilon forces "unequal"
    """
    if math.isnan(epsilon):
        return False

    left_nan = math.isnan(left)
    right_nan = math.isnan(right)
    if left_nan or right_nan:
        return left_nan and right_nan

    abs_diff = abs(left - right)
    if abs_diff <= epsilon:
        return True
    return abs_diff <= epsilon * max(left, right)


def almost_equal_array(
    left: ArrayLike,
    right: ArrayLike,
    epsilon: float = EPSILON,
) -> NDArray[np.bool_]:
    """
    Elementwise almost_equal over broadcastable arrays.

    Same rules as almost_equal, including the NaN rules, so the dense
    backend can compare whole grids without a Python-level loop.
    """
    left = np.asarray(left, dtype=np.float64)
    right = np.asarray(right, dtype=np.float64)
    shape = np.broadcast_shapes(left.shape, right.shape)

    if math.isnan(epsilon):
        return np.zeros(shape, dtype=bool)

    with np.errstate(invalid='ignore', over='ignore'):
        abs_diff = np.abs(left - right)
        close = (abs_diff <= epsilon) | (abs_diff <= epsilon * np.maximum(left, right))

    left_nan = np.isnan(left)
    right_nan = np.isnan(right)
    return np.where(left_nan | right_nan, left_nan & right_nan, close)


def near_zero_mask(values: NDArray[np.floating[Any]]) -> NDArray[np.bool_]:
    """Boolean mask of the cells that are almost equal to zero."""
    return almost_equal_array(values, 0.0)


def is_near_zero(value: float) -> bool:
    """Shorthand for almost_equal(value, 0.0)."""
    return almost_equal(value, 0.0)


def integer_part_digit_count(x: float, include_sign: bool) -> int:
    """
    Number of base-10 digits before the decimal point of ``x``.

    Every number has at least one digit (``0.5`` -> 1). When
    ``include_sign`` is True a negative value counts one extra character
    for the minus sign; zero never does (negative zero is still zero).

    Non-finite values count the characters Python prints for them
    (``nan`` / ``inf``) so print alignment stays consistent.

    Used only for column alignment in print strings.
    """
    if math.isnan(x) or math.isinf(x):
        num_digits = 3
    else:
        num_digits = len(str(int(abs(x))))

    if include_sign and x < 0.0:
        num_digits += 1

    return num_digits

"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pymatcalc import Matrix


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture(params=['dense', 'sparse'])
def representation(request):
    """Run a test once per storage backend."""
    return request.param


@pytest.fixture
def make_matrix(representation):
    """Build a Matrix from nested lists in the parametrized representation."""
    def _make(values):
        return Matrix.from_array(values, representation=representation)
    return _make


@pytest.fixture
def mixed_magnitudes():
    """3x3 with one, two and three digit integer parts."""
    return [
        [100.92, 5.0, 48.02],
        [0.0, 6.0, 7.0],
        [17.11, 55.55, 1.02],
    ]


@pytest.fixture
def determinant_1023():
    """4x4 whose determinant is 1023."""
    return [
        [1, 2, 3, 4],
        [12, 55, 55, 5],
        [11, 55, 55, 6],
        [10, 9, 8, 7],
    ]


@pytest.fixture
def unique_system():
    """A x = b with the unique solution x = (-2, 1.5, 0, 2.5)."""
    A = [
        [1, 2, -3, 0],
        [1, -1, 0, 1],
        [0, 2, -2, 0],
        [2, 1, 1, 1],
    ]
    b = [[1], [-1], [3], [0]]
    return A, b


@pytest.fixture
def underdetermined_system():
    """A x = b with x3, x4 free."""
    A = [
        [1, 3, -1, 4],
        [1, 1, -1, -2],
        [1, 7, -1, 16],
    ]
    b = [[8], [2], [20]]
    return A, b


@pytest.fixture
def inconsistent_system():
    """A x = b with no solution."""
    A = [
        [3, -1, -1, 0],
        [1, -1, 0, 1],
        [0, 1, -2, 2],
        [-1, 3, -1, -4],
    ]
    b = [[2], [5], [0], [-1]]
    return A, b

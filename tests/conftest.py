"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pymatrix import Matrix


def _random_matrix(rng, m, n, diagonal_boost=0.0):
    """m x n Matrix with standard normal entries, plus diagonal_boost on (k, k)."""
    values = rng.standard_normal((m, n))
    k = min(m, n)
    values[np.arange(k), np.arange(k)] += diagonal_boost
    return Matrix.from_rows(values)


@pytest.fixture
def random_matrix():
    """Factory: random_matrix(rng, m, n, diagonal_boost=0.0) -> Matrix."""
    return _random_matrix


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def small_square():
    """The 2 x 2 worked example: det = 4*3 - 3*6 = -6."""
    return Matrix.from_rows([[4.0, 3.0], [6.0, 3.0]])


@pytest.fixture
def well_conditioned(rng):
    """5 x 5 diagonally dominant (hence invertible) matrix."""
    return _random_matrix(rng, 5, 5, diagonal_boost=6.0)


@pytest.fixture
def tall_full_rank(rng):
    """7 x 3 matrix with full column rank."""
    return _random_matrix(rng, 7, 3, diagonal_boost=3.0)


@pytest.fixture
def collinear():
    """4 x 3 matrix whose third column is the sum of the first two (rank 2)."""
    return Matrix.from_rows([
        [1.0, 0.0, 1.0],
        [0.0, 1.0, 1.0],
        [2.0, 1.0, 3.0],
        [1.0, 3.0, 4.0],
    ])

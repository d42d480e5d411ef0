"""
Numerical precision constants and utilities.

Provides machine epsilon, the index range every allocation is checked
against, and the automatic negligibility threshold used for rank
decisions.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Any


# Machine epsilon for float64
EPSILON_64: float = np.finfo(np.float64).eps  # ~2.22e-16

# Machine epsilon for float32
EPSILON_32: float = np.finfo(np.float32).eps  # ~1.19e-7

# Largest element count a buffer may hold. Every rows*cols (and every
# intermediate bound used by the product) is checked against this.
MAX_ELEMENTS: int = int(np.iinfo(np.intp).max)


def machine_epsilon(dtype: np.dtype | type = np.float64) -> float:
    """
    Get machine epsilon for a given dtype.

    Integer dtypes have exact arithmetic; float64 epsilon is returned for
    them since every dividing kernel promotes integers to float64.

    Args:
        dtype: NumPy dtype or type

    Returns:
        Machine epsilon for the dtype
    """
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.inexact):
        return float(np.finfo(dtype).eps)
    return EPSILON_64


def default_negligible(values: NDArray[Any], shape: tuple[int, int]) -> float:
    """
    Automatic threshold below which a pivot counts as zero.

    Same rule as a QR rank decision: max(m, n) * eps * max|a_ij|.

    Args:
        values: Matrix entries (any shape)
        shape: (rows, cols) of the matrix

    Returns:
        Non-negative threshold; 0.0 for an all-zero matrix
    """
    if values.size == 0:
        return 0.0
    scale = float(np.max(np.abs(values)))
    return max(shape) * machine_epsilon(values.dtype) * scale


def is_close(
    a: float | NDArray[np.floating[Any]],
    b: float | NDArray[np.floating[Any]],
    rtol: float,
    atol: float,
) -> bool | NDArray[np.bool_]:
    """
    Check if values are numerically close.

    Uses the formula: |a - b| <= atol + rtol * |b|

    Args:
        a: First value(s)
        b: Second value(s)
        rtol: Relative tolerance
        atol: Absolute tolerance

    Returns:
        Boolean or boolean array indicating closeness
    """
    return np.abs(a - b) <= atol + rtol * np.abs(b)

"""
Precondition checks for pymatrix.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent. Nothing here is ever
compiled out: a violated precondition is always an exception.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Operand names included in all error messages
"""

import operator

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pymatrix.core.compute.precision import MAX_ELEMENTS
from pymatrix.core.exceptions import (
    DimensionError,
    MatrixIndexError,
    SizeOverflowError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
    dtype: np.dtype | type | None = None,
) -> NDArray[Any]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages
        dtype: Target dtype, or None to keep the inferred numeric dtype

    Returns:
        numpy.ndarray with numeric dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array, dtype=dtype)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, bool, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    return result


def check_finite(array: NDArray[Any], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_2d(array: NDArray[Any], name: str) -> None:
    """
    Verify array is 2-dimensional.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        DimensionError: If array is not 2D
    """
    if array.ndim != 2:
        raise DimensionError(
            f"{name}: expected 2D array, got {array.ndim}D with shape {array.shape}",
            actual=array.shape,
        )


def check_numeric_dtype(dtype: np.dtype | type, name: str) -> np.dtype:
    """
    Verify a dtype can serve as matrix element type.

    Returns:
        The normalized np.dtype

    Raises:
        ValidationError: If dtype is not numeric
    """
    try:
        dtype = np.dtype(dtype)
    except TypeError as e:
        raise ValidationError(f"{name}: invalid dtype: {e}") from e
    if not np.issubdtype(dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {dtype}, expected a numeric element type"
        )
    return dtype


def check_inexact(dtype: np.dtype, name: str) -> None:
    """
    Verify elements can hold quotients.

    Raises:
        ValidationError: If dtype is an integer type
    """
    if not np.issubdtype(dtype, np.inexact):
        raise ValidationError(
            f"{name}: in-place division needs a floating or complex dtype, got {dtype}"
        )


def checked_size(*factors: int, name: str) -> int:
    """
    Multiply sizes, refusing results beyond the index range.

    Python integers never wrap, so the product is exact and can be
    compared against MAX_ELEMENTS directly.

    Args:
        *factors: Non-negative integers to multiply
        name: What is being sized (for error messages)

    Returns:
        The product

    Raises:
        SizeOverflowError: If the product exceeds MAX_ELEMENTS
    """
    size = 1
    for factor in factors:
        size *= operator.index(factor)
    if size > MAX_ELEMENTS:
        raise SizeOverflowError(
            f"{name}: size {size} exceeds the representable index range ({MAX_ELEMENTS})",
            size=size,
            limit=MAX_ELEMENTS,
        )
    return size


def check_shape(rows: Any, cols: Any, name: str) -> tuple[int, int]:
    """
    Verify a requested shape is positive and allocatable.

    Args:
        rows: Requested row count
        cols: Requested column count
        name: Operand name for error messages

    Returns:
        (rows, cols) as Python ints

    Raises:
        DimensionError: If either size is not an integer or not positive
        SizeOverflowError: If rows * cols exceeds the index range
    """
    try:
        rows = operator.index(rows)
        cols = operator.index(cols)
    except TypeError as e:
        raise DimensionError(f"{name}: sizes must be integers: {e}") from e
    if rows <= 0 or cols <= 0:
        raise DimensionError(
            f"{name}: sizes must be positive, got {rows} x {cols}",
            actual=(rows, cols),
        )
    checked_size(rows, cols, name=name)
    return rows, cols


def check_index(i: Any, j: Any, shape: tuple[int, int], name: str) -> int:
    """
    Verify (i, j) addresses an element and return its row-major offset.

    Negative indices are rejected; they do not wrap around.

    Args:
        i: Row index
        j: Column index
        shape: (rows, cols) of the matrix
        name: Operand name for error messages

    Returns:
        Offset i * cols + j into the row-major buffer

    Raises:
        MatrixIndexError: If the index is out of range or not an integer
    """
    rows, cols = shape
    try:
        i = operator.index(i)
        j = operator.index(j)
    except TypeError as e:
        raise MatrixIndexError(f"{name}: indices must be integers: {e}", shape=shape) from e
    if not (0 <= i < rows and 0 <= j < cols):
        raise MatrixIndexError(
            f"{name}: index ({i}, {j}) out of range for {rows} x {cols} matrix",
            index=(i, j),
            shape=shape,
        )
    return i * cols + j


def check_same_shape(
    a_shape: tuple[int, int],
    b_shape: tuple[int, int],
    op: str,
) -> None:
    """
    Verify two operands have identical shapes.

    Raises:
        DimensionError: If shapes differ
    """
    if a_shape != b_shape:
        raise DimensionError(
            f"{op}: shape mismatch {a_shape[0]} x {a_shape[1]} vs {b_shape[0]} x {b_shape[1]}",
            expected=a_shape,
            actual=b_shape,
        )


def check_square(shape: tuple[int, int], name: str) -> None:
    """
    Verify a matrix is square.

    Raises:
        DimensionError: If rows != cols
    """
    if shape[0] != shape[1]:
        raise DimensionError(
            f"{name}: expected a square matrix, got {shape[0]} x {shape[1]}",
            expected=(shape[0], shape[0]),
            actual=shape,
        )


def check_inner_dims(
    a_shape: tuple[int, int],
    b_shape: tuple[int, int],
    op: str,
) -> None:
    """
    Verify A.cols == B.rows for the product A * B.

    Raises:
        DimensionError: If the inner dimensions differ
    """
    if a_shape[1] != b_shape[0]:
        raise DimensionError(
            f"{op}: inner dimensions differ ({a_shape[0]} x {a_shape[1]} "
            f"times {b_shape[0]} x {b_shape[1]})",
            expected=(a_shape[1], b_shape[1]),
            actual=b_shape,
        )


def check_range(lo: Any, hi: Any, limit: int, name: str) -> tuple[int, int]:
    """
    Verify an inclusive index range [lo, hi] lies within [0, limit).

    Returns:
        (lo, hi) as Python ints

    Raises:
        MatrixIndexError: If the range is empty, reversed or out of bounds
    """
    lo = operator.index(lo)
    hi = operator.index(hi)
    if not (0 <= lo <= hi < limit):
        raise MatrixIndexError(
            f"{name}: range [{lo}, {hi}] invalid for extent {limit}"
        )
    return lo, hi

"""
Elimination kernels over 2-D views of row-major buffers.

Everything here works on plain ndarrays (views obtained by reshaping a
DenseBuffer's 1-D storage) and knows nothing about sharing. Scratch
copies are taken wherever an algorithm must not disturb its input.

Three algorithms share the same row primitives:

    determinant          Gaussian elimination with partial pivoting,
                         reducing from the last column backward.
    gauss_jordan_divide  rhs <- divisor^-1 * rhs, full Gauss-Jordan
                         with partial pivoting applied to both sides.
    reduce_rows          Rank-revealing Gauss-Jordan: pivots whose
                         magnitude is <= negligible are recorded as
                         deficient instead of used. Accumulates the row
                         transform V with V * A = echelon.

rebuild_pseudo_inverse turns a reduction into the Moore-Penrose inverse
through the rank factorization A = F G:

    F = A[:, pivot_columns]        (m x r, full column rank)
    G = echelon[:r, :]             (r x n, full row rank)
    A+ = G' (G G')^-1 (F' F)^-1 F'

Both Gram matrices are r x r and invertible by construction, so the two
inner inverses go through gauss_jordan_divide as well.
"""

from __future__ import annotations

from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray

from pymatrix.core.exceptions import SingularMatrixError


# === Row primitives ===

def swap_rows(a: NDArray, i: int, k: int) -> None:
    """Exchange rows i and k in place."""
    if i != k:
        a[[i, k]] = a[[k, i]]


def scale_row(a: NDArray, i: int, factor) -> None:
    """Multiply row i by factor in place."""
    a[i] *= factor


def eliminate_column(a: NDArray, factors: NDArray, pivot_row: int) -> None:
    """
    Subtract factors[t] * a[pivot_row] from every row t.

    factors[pivot_row] must be zero. The outer product is formed before
    the subtraction, so the pivot row is read before any row is written.
    """
    a -= np.outer(factors, a[pivot_row])


def pivot_row(column: NDArray, start: int) -> tuple[int, float]:
    """
    Largest-magnitude entry of column[start:].

    Ties go to the first row, as np.argmax does.

    Returns:
        (row index into column, magnitude)
    """
    magnitudes = np.abs(column[start:])
    offset = int(np.argmax(magnitudes))
    return start + offset, float(magnitudes[offset])


def scratch_dtype(*dtypes: np.dtype) -> np.dtype:
    """Floating type wide enough for elimination on the given element types."""
    return np.result_type(*dtypes, np.float64)


# === Determinant ===

def determinant(a: NDArray):
    """
    Determinant of a square matrix.

    Column k (from the last to the first) is reduced against rows 0..k:
    the largest-magnitude entry among them is swapped into row k, then
    column k is cleared in rows 0..k-1. The matrix ends up lower
    triangular; each swap flips the sign.

    Args:
        a: Square 2-D array (not modified)

    Returns:
        Determinant as a scalar of the scratch dtype; exactly 0 when a
        zero pivot is met
    """
    work = np.array(a, dtype=scratch_dtype(a.dtype))
    n = work.shape[0]
    negative = False

    for k in range(n - 1, -1, -1):
        p, magnitude = pivot_row(work[:k + 1, k], 0)
        if magnitude == 0:
            return work.dtype.type(0)
        if p != k:
            swap_rows(work, p, k)
            negative = not negative
        if k:
            factors = work[:k, k] / work[k, k]
            work[:k, :k] -= np.outer(factors, work[k, :k])
            work[:k, k] = 0

    det = np.prod(np.diagonal(work))
    return -det if negative else det


# === Gauss-Jordan division ===

def gauss_jordan_divide(rhs: NDArray, divisor: NDArray) -> NDArray:
    """
    Overwrite rhs with divisor^-1 * rhs.

    Gauss-Jordan elimination with partial pivoting runs on a scratch copy
    of divisor; every row operation is mirrored on rhs.

    Args:
        rhs: n x m writable array, modified in place
        divisor: n x n array (not modified)

    Returns:
        Magnitudes of the n pivots, in elimination order

    Raises:
        SingularMatrixError: If a zero pivot is met
    """
    work = np.array(divisor, dtype=np.result_type(divisor.dtype, rhs.dtype))
    n = work.shape[0]
    pivots = np.empty(n, dtype=np.float64)

    for k in range(n):
        p, magnitude = pivot_row(work[:, k], k)
        if magnitude == 0:
            raise SingularMatrixError(
                f"Divisor is singular: zero pivot in column {k} of {n}",
                matrix_name='divisor',
                condition_number=float('inf'),
                rank=k,
                expected_rank=n,
            )
        swap_rows(work, p, k)
        swap_rows(rhs, p, k)

        pivot = work[k, k]
        pivots[k] = magnitude
        scale_row(work, k, 1 / pivot)
        scale_row(rhs, k, 1 / pivot)

        factors = work[:, k].copy()
        factors[k] = 0
        eliminate_column(work, factors, k)
        eliminate_column(rhs, factors, k)

    return pivots


# === Rank-revealing reduction ===

@dataclass(frozen=True)
class Reduction:
    """
    Outcome of a rank-revealing Gauss-Jordan pass.

    Attributes:
        echelon: Reduced row echelon form of the input (m x n)
        transform: Accumulated row operations V, with V @ A == echelon (m x m)
        pivot_columns: Columns that received a pivot, in order
        deficient_columns: Columns whose best pivot was negligible
        processed: Number of columns visited before rows ran out
    """
    echelon: NDArray
    transform: NDArray
    pivot_columns: tuple[int, ...]
    deficient_columns: tuple[int, ...]
    processed: int

    @property
    def rank(self) -> int:
        """Effective numerical rank."""
        return self.processed - len(self.deficient_columns)


def reduce_rows(a: NDArray, negligible: float) -> Reduction:
    """
    Rank-revealing Gauss-Jordan elimination.

    Columns are visited left to right. For each, the largest-magnitude
    candidate at or below the current pivot row is found; if it does not
    exceed negligible the column is recorded as deficient and skipped,
    otherwise it is swapped up, normalized to 1 and cleared from every
    other row. The same operations are applied to V (initially I).

    Args:
        a: m x n array (not modified)
        negligible: Pivots with magnitude <= this count as zero

    Returns:
        Reduction with the echelon form, V and the pivot bookkeeping
    """
    m, n = a.shape
    work = np.array(a, dtype=scratch_dtype(a.dtype))
    transform = np.eye(m, dtype=work.dtype)
    pivot_columns: list[int] = []
    deficient_columns: list[int] = []
    row = 0
    processed = 0

    for col in range(n):
        if row == m:
            break
        processed += 1
        p, magnitude = pivot_row(work[:, col], row)
        if magnitude <= negligible:
            deficient_columns.append(col)
            continue

        swap_rows(work, p, row)
        swap_rows(transform, p, row)

        pivot = work[row, col]
        scale_row(work, row, 1 / pivot)
        scale_row(transform, row, 1 / pivot)

        factors = work[:, col].copy()
        factors[row] = 0
        eliminate_column(work, factors, row)
        eliminate_column(transform, factors, row)

        pivot_columns.append(col)
        row += 1

    return Reduction(
        echelon=work,
        transform=transform,
        pivot_columns=tuple(pivot_columns),
        deficient_columns=tuple(deficient_columns),
        processed=processed,
    )


def rebuild_pseudo_inverse(a: NDArray, reduction: Reduction) -> NDArray:
    """
    Moore-Penrose inverse from a rank factorization.

    Args:
        a: The m x n matrix that was reduced
        reduction: Output of reduce_rows(a, ...)

    Returns:
        n x m pseudo-inverse; all zeros when the rank is 0
    """
    m, n = a.shape
    rank = reduction.rank
    dtype = reduction.echelon.dtype
    if rank == 0:
        return np.zeros((n, m), dtype=dtype)

    left = np.array(a[:, list(reduction.pivot_columns)], dtype=dtype)   # F, m x r
    right = reduction.echelon[:rank, :]                                 # G, r x n

    # (F'F)^-1 F'
    inner = np.ascontiguousarray(left.conj().T)
    gauss_jordan_divide(inner, inner @ left)
    # (GG')^-1 (F'F)^-1 F'
    right_h = right.conj().T
    gauss_jordan_divide(inner, right @ right_h)
    return right_h @ inner

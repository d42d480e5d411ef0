"""
Dense buffer kernel.

A DenseBuffer exclusively owns one contiguous 1-D ndarray holding a
rows x cols matrix in row-major order: element (i, j) lives at offset
i * cols + j. 2-D views are obtained by reshaping that array, never by
reordering it.

The kernel has no notion of sharing. Operations either mutate the
owned array in place or allocate a brand new buffer for their result
(product, transpose, negation, merge, pseudo-inverse). Every allocation
size is checked against the index range first.

In-place operations are safe when an operand is the buffer itself:
elementwise updates read each element once before writing it, and
products and divisions are computed into a fresh array before the old
one is dropped.
"""

from __future__ import annotations

import warnings
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pymatrix.buffer import _elimination
from pymatrix.core.compute.precision import default_negligible, machine_epsilon
from pymatrix.core.exceptions import DimensionError, MatrixIndexError, ValidationError
from pymatrix.core.policies import (
    ALL_EQUALITY_POLICIES,
    DEFAULT_EQUALITY_POLICY,
    EQUALITY_BYTEWISE,
)
from pymatrix.core.validation import (
    check_index,
    check_inexact,
    check_inner_dims,
    check_numeric_dtype,
    check_range,
    check_same_shape,
    check_shape,
    check_square,
    checked_size,
)


class DenseBuffer:
    """
    Fixed-shape, exclusively owned row-major matrix storage.

    Construction:
        DenseBuffer(rows, cols)                  # zero-filled
        DenseBuffer(rows, cols, value)           # filled with value
        DenseBuffer.adopt(rows, cols, array)     # takes ownership, no copy
        buffer.copy()                            # deep clone
    """

    __slots__ = ('_rows', '_cols', '_data')

    def __init__(
        self,
        rows: int,
        cols: int,
        value: Any = None,
        dtype: np.dtype | type = np.float64,
    ):
        rows, cols = check_shape(rows, cols, 'DenseBuffer')
        dtype = check_numeric_dtype(dtype, 'dtype')
        if value is None:
            data = np.zeros(rows * cols, dtype=dtype)
        else:
            data = np.full(rows * cols, value, dtype=dtype)
        self._rows = rows
        self._cols = cols
        self._data = data

    @classmethod
    def adopt(cls, rows: int, cols: int, data: NDArray[Any]) -> DenseBuffer:
        """
        Wrap an existing 1-D array without copying it.

        The caller hands over ownership: the array must not be used
        through any other reference afterwards.

        Raises:
            ValidationError: If data is not a writable, contiguous numeric ndarray
            DimensionError: If data does not hold exactly rows * cols elements
        """
        rows, cols = check_shape(rows, cols, 'adopt')
        if not isinstance(data, np.ndarray):
            raise ValidationError(
                f"adopt: expected numpy.ndarray, got {type(data).__name__}"
            )
        check_numeric_dtype(data.dtype, 'adopt')
        if data.ndim != 1 or data.size != rows * cols:
            raise DimensionError(
                f"adopt: expected 1D array of {rows * cols} elements, got shape {data.shape}",
                expected=(rows * cols,),
                actual=data.shape,
            )
        if not data.flags.c_contiguous or not data.flags.writeable:
            raise ValidationError("adopt: array must be contiguous and writable")
        buffer = cls.__new__(cls)
        buffer._rows = rows
        buffer._cols = cols
        buffer._data = data
        return buffer

    def copy(self) -> DenseBuffer:
        """Deep clone: the new buffer owns its own array."""
        return DenseBuffer.adopt(self._rows, self._cols, self._data.copy())

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> DenseBuffer:
        return self.copy()

    # === Shape and raw access ===

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return self._rows, self._cols

    @property
    def size(self) -> int:
        return self._rows * self._cols

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def view(self) -> NDArray[Any]:
        """Writable 2-D view of the owned array."""
        return self._data.reshape(self._rows, self._cols)

    def data(self) -> NDArray[Any]:
        """The owned 1-D array itself."""
        return self._data

    def const_data(self) -> NDArray[Any]:
        """Read-only 1-D view of the owned array."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def __getitem__(self, index: tuple[int, int]):
        return self._data[self._offset(index)]

    def __setitem__(self, index: tuple[int, int], value: Any) -> None:
        self._data[self._offset(index)] = value

    def _offset(self, index: Any) -> int:
        if not isinstance(index, tuple) or len(index) != 2:
            raise MatrixIndexError(
                f"expected a (row, col) pair, got {index!r}", shape=self.shape
            )
        return check_index(index[0], index[1], self.shape, 'DenseBuffer')

    # === Fill ===

    def fill(self, value: Any = 0) -> None:
        self._data.fill(value)

    def fill_zero(self) -> None:
        self._data.fill(0)

    def add_identity(self) -> None:
        """Add 1 to entries (k, k) for k < min(rows, cols)."""
        step = self._cols + 1
        count = min(self._rows, self._cols)
        checked_size(count, step, name='add_identity')
        self._data[:count * step:step] += 1

    # === Elementwise arithmetic ===

    def __iadd__(self, other: DenseBuffer) -> DenseBuffer:
        check_same_shape(self.shape, other.shape, '+=')
        self._data += other._data
        return self

    def __isub__(self, other: DenseBuffer) -> DenseBuffer:
        check_same_shape(self.shape, other.shape, '-=')
        self._data -= other._data
        return self

    def __neg__(self) -> DenseBuffer:
        return DenseBuffer.adopt(self._rows, self._cols, -self._data)

    def scale(self, factor: Any) -> None:
        """Multiply every element by a scalar."""
        self._check_scalar(factor, '*=')
        self._data *= factor

    def _check_scalar(self, scalar: Any, op: str) -> None:
        result = np.result_type(self._data, scalar)
        if not np.can_cast(result, self.dtype, casting='same_kind'):
            raise ValidationError(
                f"{op}: scalar {scalar!r} would promote {self.dtype} buffer to {result}"
            )

    def __imul__(self, other: Any) -> DenseBuffer:
        if isinstance(other, DenseBuffer):
            self._take(DenseBuffer.product(self, other))
        else:
            self.scale(other)
        return self

    def __itruediv__(self, other: Any) -> DenseBuffer:
        if isinstance(other, DenseBuffer):
            self.left_divide(other, stacklevel=3)
        else:
            check_inexact(self.dtype, '/=')
            self._check_scalar(other, '/=')
            self._data /= other
        return self

    def _take(self, other: DenseBuffer) -> None:
        """Replace this buffer's storage with a freshly computed one."""
        self._rows = other._rows
        self._cols = other._cols
        self._data = other._data

    # === Equality ===

    def equals(self, other: DenseBuffer, policy: str = DEFAULT_EQUALITY_POLICY) -> bool:
        """
        Exact comparison; shapes must match first.

        Args:
            other: Buffer to compare against
            policy: 'elementwise' or 'bytewise' (see pymatrix.core.policies)

        Raises:
            ValueError: If policy is unknown
        """
        if policy not in ALL_EQUALITY_POLICIES:
            raise ValueError(f"Unknown equality policy: {policy!r}")
        if self.shape != other.shape:
            return False
        if policy == EQUALITY_BYTEWISE:
            return (
                self.dtype == other.dtype
                and self._data.tobytes() == other._data.tobytes()
            )
        return bool(np.array_equal(self._data, other._data))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DenseBuffer):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    # === Products ===

    @staticmethod
    def product(a: DenseBuffer, b: DenseBuffer) -> DenseBuffer:
        """
        Full product a * b into a new buffer.

        a and b may be the same buffer.

        Raises:
            DimensionError: If a.cols != b.rows
            SizeOverflowError: If the result or accumulation bound overflows
        """
        check_inner_dims(a.shape, b.shape, '*')
        checked_size(a.rows, b.cols, name='product')
        checked_size(a.cols + 1, b.cols, name='product accumulation')
        result = np.matmul(a.view(), b.view())
        return DenseBuffer.adopt(a.rows, b.cols, np.ascontiguousarray(result).reshape(-1))

    def get_product(
        self,
        a: DenseBuffer,
        b: DenseBuffer,
        i1: int,
        i2: int,
        j1: int,
        j2: int,
    ) -> None:
        """
        Compute rows [i1, i2] and columns [j1, j2] of a * b into self.

        Bounds are inclusive. Everything outside the block is left
        untouched, so disjoint blocks can be filled independently.

        Raises:
            DimensionError: If a.cols != b.rows or self is not a.rows x b.cols
            MatrixIndexError: If a block range is empty or out of bounds
        """
        check_inner_dims(a.shape, b.shape, 'get_product')
        if self.shape != (a.rows, b.cols):
            raise DimensionError(
                f"get_product: target is {self._rows} x {self._cols}, "
                f"product is {a.rows} x {b.cols}",
                expected=(a.rows, b.cols),
                actual=self.shape,
            )
        i1, i2 = check_range(i1, i2, a.rows, 'get_product rows')
        j1, j2 = check_range(j1, j2, b.cols, 'get_product cols')
        block = a.view()[i1:i2 + 1, :] @ b.view()[:, j1:j2 + 1]
        self.view()[i1:i2 + 1, j1:j2 + 1] = block

    def transpose(self) -> DenseBuffer:
        result = np.ascontiguousarray(self.view().T)
        return DenseBuffer.adopt(self._cols, self._rows, result.reshape(-1))

    def times_transpose(self, other: DenseBuffer) -> DenseBuffer:
        """
        self * other' without materializing other'.

        Raises:
            DimensionError: If self.cols != other.cols
        """
        if self._cols != other._cols:
            raise DimensionError(
                f"times_transpose: column counts differ ({self._cols} vs {other._cols})",
                expected=(other._rows, self._cols),
                actual=other.shape,
            )
        checked_size(self._rows, other._rows, name='times_transpose')
        result = np.matmul(self.view(), other.view().T)
        return DenseBuffer.adopt(
            self._rows, other._rows, np.ascontiguousarray(result).reshape(-1)
        )

    # === Elimination ===

    def determinant(self):
        """
        Determinant by partial-pivot elimination on a scratch copy.

        Returns exactly 0 for a singular matrix.

        Raises:
            DimensionError: If the buffer is not square
        """
        check_square(self.shape, 'det')
        return _elimination.determinant(self.view())

    def left_divide(self, other: DenseBuffer, stacklevel: int = 2) -> None:
        """
        self <- other^-1 * self by Gauss-Jordan elimination.

        If other is this very buffer the result is the identity and no
        elimination runs. A RuntimeWarning is issued when the pivots span
        more than 1/(n * eps), i.e. the system is numerically singular.

        Elimination runs on a scratch copy; self is left untouched when
        an error is raised.

        Args:
            other: Square divisor with self.rows rows
            stacklevel: Passed to warnings.warn; callers that wrap this
                method add their own frames

        Raises:
            DimensionError: If other is not square or sizes differ
            ValidationError: If self cannot hold quotients (integer dtype)
            SingularMatrixError: If other is singular
        """
        check_square(other.shape, 'divisor')
        if other._rows != self._rows:
            raise DimensionError(
                f"/=: divisor is {other._rows} x {other._cols}, "
                f"dividend has {self._rows} rows",
                expected=(self._rows, self._rows),
                actual=other.shape,
            )
        check_inexact(self.dtype, '/=')
        if other is self:
            self.fill_zero()
            self.add_identity()
            return

        work_dtype = np.result_type(self.dtype, other.dtype)
        if not np.can_cast(work_dtype, self.dtype, casting='same_kind'):
            raise ValidationError(
                f"/=: divisor dtype {other.dtype} would promote {self.dtype} buffer to {work_dtype}"
            )
        rhs = self.view().copy()
        pivots = _elimination.gauss_jordan_divide(rhs, other.view())
        self._data = rhs.reshape(-1)
        limit = other._rows * machine_epsilon(work_dtype)
        if pivots.min() < limit * pivots.max():
            warnings.warn(
                f"Divisor is ill-conditioned (pivot ratio "
                f"{pivots.min() / pivots.max():.3e}); result may be inaccurate.",
                RuntimeWarning,
                stacklevel=stacklevel,
            )

    def pseudo_inverse(self, negligible: float | None = 0.0) -> DenseBuffer:
        """
        Moore-Penrose inverse into a new cols x rows buffer.

        The default of 0 only drops exact zero pivots. For floating-point
        data that may be rank-deficient pass None or a threshold sized to
        the data's accuracy, otherwise round-off residue is pivoted on
        and the result is far from A+.

        Args:
            negligible: Pivots with magnitude <= negligible count as zero;
                None selects max(m, n) * eps * max|a_ij|

        Returns:
            The pseudo-inverse; the zero matrix if the numerical rank is 0

        Raises:
            ValidationError: If negligible is negative or not finite
                (including an automatic threshold over non-finite data)
        """
        if negligible is None:
            negligible = default_negligible(self._data, self.shape)
        if not np.isfinite(negligible):
            raise ValidationError(f"negligible must be finite, got {negligible}")
        if negligible < 0:
            raise ValidationError(f"negligible must be >= 0, got {negligible}")
        checked_size(self._cols, self._rows, name='pseudo_inverse')
        checked_size(self._rows, self._rows, name='pseudo_inverse transform')
        a = self.view()
        reduction = _elimination.reduce_rows(a, negligible)
        result = _elimination.rebuild_pseudo_inverse(a, reduction)
        return DenseBuffer.adopt(
            self._cols, self._rows, np.ascontiguousarray(result).reshape(-1)
        )

    # === Norms ===

    def norm1(self):
        """Induced 1-norm: largest column sum of absolute values."""
        return np.max(np.sum(np.abs(self.view()), axis=0))

    def norminf(self):
        """Induced infinity-norm: largest row sum of absolute values."""
        return np.max(np.sum(np.abs(self.view()), axis=1))

    # === Blocks ===

    def cut(
        self,
        src: DenseBuffer,
        di: int = 0,
        dj: int = 0,
        si: int = 0,
        sj: int = 0,
        sm: int | None = None,
        sn: int | None = None,
    ) -> None:
        """
        Copy a clipped sm x sn region of src at (si, sj) into self at (di, dj).

        A negative destination offset shrinks the region and advances the
        source offset by the same amount (and a negative source offset
        does the converse). The region is then clamped to both buffers.
        An empty region is a no-op. sm/sn default to the whole source.
        """
        sm = src._rows if sm is None else sm
        sn = src._cols if sn is None else sn
        di, si, sm = _absorb_negative(di, si, sm)
        dj, sj, sn = _absorb_negative(dj, sj, sn)
        sm = min(sm, src._rows - si, self._rows - di)
        sn = min(sn, src._cols - sj, self._cols - dj)
        if sm <= 0 or sn <= 0:
            return
        # numpy copies through a temporary when the regions overlap
        self.view()[di:di + sm, dj:dj + sn] = src.view()[si:si + sm, sj:sj + sn]

    @staticmethod
    def merge_h(a: DenseBuffer, b: DenseBuffer) -> DenseBuffer:
        """[a b]: side by side; heights must match."""
        if a._rows != b._rows:
            raise DimensionError(
                f"merge_h: heights differ ({a._rows} vs {b._rows})",
                expected=(a._rows, b._cols),
                actual=b.shape,
            )
        checked_size(a._rows, a._cols + b._cols, name='merge_h')
        merged = np.hstack((a.view(), b.view()))
        return DenseBuffer.adopt(a._rows, a._cols + b._cols, merged.reshape(-1))

    @staticmethod
    def merge_v(a: DenseBuffer, b: DenseBuffer) -> DenseBuffer:
        """[a; b]: stacked; widths must match."""
        if a._cols != b._cols:
            raise DimensionError(
                f"merge_v: widths differ ({a._cols} vs {b._cols})",
                expected=(b._rows, a._cols),
                actual=b.shape,
            )
        checked_size(a._rows + b._rows, a._cols, name='merge_v')
        merged = np.vstack((a.view(), b.view()))
        return DenseBuffer.adopt(a._rows + b._rows, a._cols, merged.reshape(-1))

    def __repr__(self) -> str:
        return f"DenseBuffer({self._rows}x{self._cols}, {self.dtype})"


def _absorb_negative(dest: int, src: int, extent: int) -> tuple[int, int, int]:
    """Move a negative offset onto the other side by shrinking the extent."""
    if dest < 0:
        src -= dest
        extent += dest
        dest = 0
    if src < 0:
        dest -= src
        extent += src
        src = 0
    return dest, src, extent

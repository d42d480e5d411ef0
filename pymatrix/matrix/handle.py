"""
Copy-on-write matrix handle.

A Matrix is either null (no buffer) or shares a reference-counted cell
holding one DenseBuffer. Copies are cheap: they attach to the same cell
and bump its count. Every mutating operation first detaches, cloning
the buffer when anyone else still references it, so a mutation through
one handle is never visible through another.

Python name binding is not copying: ``b = a`` makes two names for one
handle. Value copies are made with ``a.copy()``, ``copy.copy(a)`` or
``Matrix.assign``.

Not thread-safe: reference counts and detaching are unsynchronized.
Never mutate two handles that may share a buffer from different threads
without external locking. Read-only use of distinct, already-detached
handles from several threads is safe.
"""

from __future__ import annotations

import sys
from typing import Any, Callable, TextIO

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.buffer.kernel import DenseBuffer
from pymatrix.core.compute.tolerances import ToleranceTier, select_tolerance
from pymatrix.core.exceptions import DimensionError, NullMatrixError
from pymatrix.core.validation import check_2d, check_array, check_inexact
from pymatrix.matrix.formatting import format_buffer


class _SharedCell:
    """A buffer plus the number of handles attached to it."""

    __slots__ = ('buffer', 'refs')

    def __init__(self, buffer: DenseBuffer):
        self.buffer = buffer
        self.refs = 1


class Matrix:
    """
    Dense matrix with value semantics over a shared row-major buffer.

    Construction:
        Matrix()                           # null
        Matrix(rows, cols)                 # zero-filled
        Matrix(rows, cols, value)          # filled with value
        Matrix.identity(n)
        Matrix.adopt(rows, cols, array)    # takes ownership of a 1-D array
        Matrix.from_rows([[1, 2], [3, 4]])
        a.copy()                           # shares a's buffer until written

    Operators:
        + - (matrices), unary - +, * / (scalar or matrix), @ (product),
        == != (exact). ``a /= b`` computes b^-1 * a.
    """

    __slots__ = ('_cell',)

    def __init__(
        self,
        rows: int | None = None,
        cols: int | None = None,
        value: Any = None,
        *,
        dtype: np.dtype | type = np.float64,
    ):
        self._cell: _SharedCell | None = None
        if rows is None and cols is None:
            if value is not None:
                raise DimensionError("Matrix: a fill value needs a shape")
            return
        if rows is None or cols is None:
            raise DimensionError(f"Matrix: both sizes are required, got {rows} x {cols}")
        self._cell = _SharedCell(DenseBuffer(rows, cols, value, dtype))

    # === Factories ===

    @classmethod
    def _from_buffer(cls, buffer: DenseBuffer) -> Matrix:
        matrix = cls()
        matrix._cell = _SharedCell(buffer)
        return matrix

    @classmethod
    def zeros(cls, rows: int, cols: int, dtype: np.dtype | type = np.float64) -> Matrix:
        return cls(rows, cols, dtype=dtype)

    @classmethod
    def full(
        cls, rows: int, cols: int, value: Any, dtype: np.dtype | type = np.float64
    ) -> Matrix:
        return cls(rows, cols, value, dtype=dtype)

    @classmethod
    def identity(cls, n: int, dtype: np.dtype | type = np.float64) -> Matrix:
        matrix = cls(n, n, dtype=dtype)
        matrix._cell.buffer.add_identity()
        return matrix

    @classmethod
    def adopt(cls, rows: int, cols: int, data: NDArray[Any] | None) -> Matrix:
        """
        Take ownership of a 1-D row-major array without copying it.

        None gives a null matrix.
        """
        if data is None:
            return cls()
        return cls._from_buffer(DenseBuffer.adopt(rows, cols, data))

    @classmethod
    def from_rows(cls, rows: ArrayLike, dtype: np.dtype | type | None = None) -> Matrix:
        """Build from a nested sequence or 2-D array (always copied)."""
        array = check_array(rows, 'rows', dtype=dtype)
        check_2d(array, 'rows')
        m, n = array.shape
        return cls.adopt(m, n, np.array(array, order='C').reshape(-1))

    # === Sharing ===

    def copy(self) -> Matrix:
        """Cheap copy sharing this handle's buffer."""
        matrix = Matrix()
        matrix._attach(self._cell)
        return matrix

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> Matrix:
        if self._cell is None:
            return Matrix()
        return Matrix._from_buffer(self._cell.buffer.copy())

    def assign(self, other: Matrix) -> Matrix:
        """Make this handle share other's buffer, releasing its own."""
        if other._cell is not self._cell:
            self._release()
            self._attach(other._cell)
        return self

    def _attach(self, cell: _SharedCell | None) -> None:
        if cell is not None:
            cell.refs += 1
        self._cell = cell

    def _release(self) -> None:
        cell = self._cell
        if cell is not None:
            cell.refs -= 1
            self._cell = None

    def __del__(self):
        # Attribute may be missing if __init__ raised.
        if getattr(self, '_cell', None) is not None:
            self._release()

    def detach(self) -> None:
        """Ensure this handle is the only owner of its buffer."""
        cell = self._cell
        if cell is not None and cell.refs > 1:
            cell.refs -= 1
            self._cell = _SharedCell(cell.buffer.copy())

    def _replace(self, buffer: DenseBuffer) -> None:
        self._release()
        self._cell = _SharedCell(buffer)

    def _buffer(self) -> DenseBuffer:
        if self._cell is None:
            raise NullMatrixError("Operation requires a non-null matrix")
        return self._cell.buffer

    def _mutable(self) -> DenseBuffer:
        self._buffer()
        self.detach()
        return self._cell.buffer

    @property
    def is_null(self) -> bool:
        return self._cell is None

    @property
    def ref_count(self) -> int:
        """Handles sharing this buffer (0 for a null matrix)."""
        return 0 if self._cell is None else self._cell.refs

    def shares_buffer_with(self, other: Matrix) -> bool:
        return self._cell is not None and self._cell is other._cell

    # === Shape ===

    @property
    def rows(self) -> int:
        return 0 if self._cell is None else self._cell.buffer.rows

    @property
    def cols(self) -> int:
        return 0 if self._cell is None else self._cell.buffer.cols

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    @property
    def size(self) -> int:
        return self.rows * self.cols

    @property
    def dtype(self) -> np.dtype | None:
        return None if self._cell is None else self._cell.buffer.dtype

    def resize(self, rows: int, cols: int, value: Any = None) -> None:
        """
        Discard the contents and reallocate at the new shape.

        Non-positive sizes leave the handle null.
        """
        if rows <= 0 or cols <= 0:
            self._release()
            return
        dtype = np.float64 if self._cell is None else self._cell.buffer.dtype
        self._replace(DenseBuffer(rows, cols, value, dtype))

    # === Element and raw access ===

    def __getitem__(self, index: tuple[int, int]):
        return self._buffer()[index]

    def __setitem__(self, index: tuple[int, int], value: Any) -> None:
        self._mutable()[index] = value

    def const_data(self) -> NDArray[Any]:
        """Read-only row-major view; does not detach."""
        return self._buffer().const_data()

    def data(self) -> NDArray[Any]:
        """
        Writable row-major view.

        Detaches first. The view stays tied to this handle's buffer only
        until the handle is copied; writes after that leak into the copies.
        """
        return self._mutable().data()

    def to_numpy(self) -> NDArray[Any]:
        """2-D copy of the contents."""
        return self._buffer().view().copy()

    # === Fill ===

    def fill(self, value: Any = 0) -> None:
        self._mutable().fill(value)

    def fill_zero(self) -> None:
        self._mutable().fill_zero()

    def add_identity(self) -> None:
        self._mutable().add_identity()

    # === Arithmetic ===

    def __iadd__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        source = other._buffer()
        target = self._mutable()
        target += source
        return self

    def __isub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        source = other._buffer()
        target = self._mutable()
        target -= source
        return self

    def __add__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        result = self.copy()
        result += other
        return result

    def __sub__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        result = self.copy()
        result -= other
        return result

    def __neg__(self) -> Matrix:
        return Matrix._from_buffer(-self._buffer())

    def __pos__(self) -> Matrix:
        return self.copy()

    def __imul__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            # Computed into a new buffer before the old one is released,
            # so a * a and shared operands are safe.
            self._replace(DenseBuffer.product(self._buffer(), other._buffer()))
        else:
            self._mutable().scale(other)
        return self

    def __mul__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return Matrix._from_buffer(DenseBuffer.product(self._buffer(), other._buffer()))
        result = self.copy()
        result *= other
        return result

    def __rmul__(self, other: Any) -> Matrix:
        return self * other

    def __imatmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.__imul__(other)

    def __matmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self * other

    def __itruediv__(self, other: Any) -> Matrix:
        return self._divide(other, stacklevel=4)

    def __truediv__(self, other: Any) -> Matrix:
        return self.copy()._divide(other, stacklevel=4)

    def _divide(self, other: Any, stacklevel: int) -> Matrix:
        # stacklevel counts this frame, the operator and the kernel call
        if isinstance(other, Matrix):
            divisor = other._buffer()
            if self.shares_buffer_with(other):
                target = self._buffer()
                if target.rows != target.cols:
                    raise DimensionError(
                        f"divisor: expected a square matrix, got {target.rows} x {target.cols}",
                        expected=(target.rows, target.rows),
                        actual=target.shape,
                    )
                check_inexact(target.dtype, '/=')
                identity = DenseBuffer(target.rows, target.cols, dtype=target.dtype)
                identity.add_identity()
                self._replace(identity)
            else:
                self._mutable().left_divide(divisor, stacklevel=stacklevel)
        else:
            target = self._mutable()
            target /= other
        return self

    def partial_product(
        self,
        a: Matrix,
        b: Matrix,
        i1: int,
        i2: int,
        j1: int,
        j2: int,
    ) -> None:
        """
        Fill rows [i1, i2] x columns [j1, j2] (inclusive) of self with a * b.

        self must already be a.rows x b.cols. a or b may be self.
        """
        left = a._buffer()
        right = b._buffer()
        self._mutable().get_product(left, right, i1, i2, j1, j2)

    def transpose(self) -> Matrix:
        return Matrix._from_buffer(self._buffer().transpose())

    @property
    def T(self) -> Matrix:
        return self.transpose()

    def times_transpose(self, other: Matrix) -> Matrix:
        """self * other' without forming other'."""
        return Matrix._from_buffer(self._buffer().times_transpose(other._buffer()))

    # === Scalars of the matrix ===

    def det(self):
        return self._buffer().determinant()

    def norm1(self):
        return self._buffer().norm1()

    def norminf(self):
        return self._buffer().norminf()

    def pseudo_inverse(self, negligible: float | None = 0.0) -> Matrix:
        """
        Moore-Penrose inverse by rank-revealing elimination.

        For rank diagnostics and alternative backends see
        pymatrix.pinv.pseudo_inverse.

        The default threshold of 0 suits exact data. Pass None, or a
        threshold sized to the data's accuracy, when a floating-point
        matrix may be rank-deficient, so that round-off residue is not
        mistaken for a pivot.

        Args:
            negligible: Pivots with magnitude <= negligible are treated as
                zero; None picks a threshold from the matrix scale

        Raises:
            ValidationError: If negligible is negative or not finite
        """
        return Matrix._from_buffer(self._buffer().pseudo_inverse(negligible))

    # === Blocks ===

    def cut(
        self,
        src: Matrix,
        di: int = 0,
        dj: int = 0,
        si: int = 0,
        sj: int = 0,
        sm: int | None = None,
        sn: int | None = None,
    ) -> None:
        """Copy the clipped region src[si:si+sm, sj:sj+sn] to self at (di, dj)."""
        source = src._buffer()
        self._mutable().cut(source, di, dj, si, sj, sm, sn)

    def block(self, si: int, sj: int, sm: int, sn: int) -> Matrix:
        """New sm x sn matrix holding the block at (si, sj); cells past the edge are 0."""
        source = self._buffer()
        result = DenseBuffer(sm, sn, dtype=source.dtype)
        result.cut(source, 0, 0, si, sj, sm, sn)
        return Matrix._from_buffer(result)

    @staticmethod
    def merge_h(a: Matrix, b: Matrix) -> Matrix:
        return Matrix._from_buffer(DenseBuffer.merge_h(a._buffer(), b._buffer()))

    @staticmethod
    def merge_v(a: Matrix, b: Matrix) -> Matrix:
        return Matrix._from_buffer(DenseBuffer.merge_v(a._buffer(), b._buffer()))

    # === Comparison ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if self._cell is other._cell:
            return True
        if self._cell is None or other._cell is None:
            return False
        return self._cell.buffer == other._cell.buffer

    __hash__ = None

    def allclose(self, other: Matrix, tier: ToleranceTier | None = None) -> bool:
        """
        Approximate comparison within a tolerance tier.

        Shapes must match; null matrices are only close to null matrices.
        The tier defaults to the one for this matrix's dtype.
        """
        if self._cell is None or other._cell is None:
            return self._cell is None and other._cell is None
        if self.shape != other.shape:
            return False
        if tier is None:
            tier = select_tolerance(self.dtype)
        return bool(np.allclose(
            self._cell.buffer.view(),
            other._cell.buffer.view(),
            rtol=tier.rtol,
            atol=tier.atol,
        ))

    # === Text ===

    def dump(self, to_string: Callable[[Any], str] = str, prefix: str = '') -> str:
        """Rows as "<prefix>[v1  v2  ...]" lines; "<prefix>[NULL]" when null."""
        buffer = None if self._cell is None else self._cell.buffer
        return format_buffer(buffer, to_string, prefix)

    def print(
        self,
        stream: TextIO | None = None,
        to_string: Callable[[Any], str] = str,
        prefix: str = '',
    ) -> None:
        """Write dump() to stream (stdout by default)."""
        if stream is None:
            stream = sys.stdout
        stream.write(self.dump(to_string, prefix))

    def __str__(self) -> str:
        return self.dump()

    def __repr__(self) -> str:
        if self._cell is None:
            return "Matrix(null)"
        buffer = self._cell.buffer
        return f"Matrix({buffer.rows}x{buffer.cols}, {buffer.dtype}, refs={self._cell.refs})"


def merge_h(a: Matrix, b: Matrix) -> Matrix:
    """[a b]: concatenate side by side (heights must match)."""
    return Matrix.merge_h(a, b)


def merge_v(a: Matrix, b: Matrix) -> Matrix:
    """[a; b]: stack vertically (widths must match)."""
    return Matrix.merge_v(a, b)

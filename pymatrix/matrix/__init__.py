"""
Copy-on-write matrix handles.

Public API:
    Matrix: value-semantics handle over a shared DenseBuffer
    merge_h(a, b) -> Matrix
    merge_v(a, b) -> Matrix

Example:
    >>> from pymatrix.matrix import Matrix
    >>> a = Matrix.from_rows([[4, 3], [6, 3]])
    >>> float(a.det())
    -6.0
    >>> b = a.copy()
    >>> b[0, 0] = 1.0      # detaches; a is unchanged
"""

from pymatrix.matrix.handle import Matrix, merge_h, merge_v

__all__ = [
    "Matrix",
    "merge_h",
    "merge_v",
]

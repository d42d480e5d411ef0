"""
pymatrix: dense matrices with copy-on-write value semantics.

A Matrix is a cheap-to-copy handle over a row-major buffer; writes
detach it from any handle it shares storage with. The buffer kernel
underneath provides products (full and blocked), transpose, determinant,
Gauss-Jordan inversion, a rank-revealing Moore-Penrose pseudo-inverse,
induced norms, and block cut/merge.

Submodules:
    matrix: Copy-on-write Matrix handle
    buffer: Exclusive-owner DenseBuffer kernel
    pinv: Pseudo-inverse solver with rank diagnostics
    core: Exceptions, validation, policies, tolerances, timing
"""

__version__ = "0.1.0"

from pymatrix.matrix import Matrix, merge_h, merge_v
from pymatrix.pinv import pseudo_inverse
from pymatrix.core.exceptions import (
    PyMatrixError,
    ValidationError,
    DimensionError,
    SizeOverflowError,
    NullMatrixError,
    MatrixIndexError,
    NumericalError,
    SingularMatrixError,
)

__all__ = [
    "__version__",
    "Matrix",
    "merge_h",
    "merge_v",
    "pseudo_inverse",
    "PyMatrixError",
    "ValidationError",
    "DimensionError",
    "SizeOverflowError",
    "NullMatrixError",
    "MatrixIndexError",
    "NumericalError",
    "SingularMatrixError",
]

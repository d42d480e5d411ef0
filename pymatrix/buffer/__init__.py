"""
Dense buffer kernel.

Exclusive-owner, fixed-shape row-major storage with in-place numeric
kernels. Sharing and copy-on-write live one layer up, in pymatrix.matrix.

Public API:
    DenseBuffer
"""

from pymatrix.buffer.kernel import DenseBuffer

__all__ = [
    "DenseBuffer",
]

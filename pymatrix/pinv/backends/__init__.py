"""
Pseudo-inverse backends.

Available backends:
    GaussJordanBackend: Rank-revealing elimination (reference)
    SVDBackend: Singular value decomposition via scipy.linalg
                (pymatrix.pinv.backends.svd, imported on demand)
"""

from pymatrix.pinv.backends.elimination import GaussJordanBackend

__all__ = [
    "GaussJordanBackend",
]

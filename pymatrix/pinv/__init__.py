"""
Moore-Penrose pseudo-inverse with diagnostics.

Matrix.pseudo_inverse() returns just the inverse. This module returns
the inverse together with its numerical rank, pivot bookkeeping, timing
and a residual check of the Moore-Penrose identities.

Public API:
    pseudo_inverse(A, negligible=0.0, backend='auto') -> PinvSolution

Example:
    >>> from pymatrix.pinv import pseudo_inverse
    >>> solution = pseudo_inverse(A, negligible=None)
    >>> solution.rank
    >>> print(solution.summary())
"""

from pymatrix.pinv.design import PinvDesign
from pymatrix.pinv.solution import PinvSolution, PinvParams
from pymatrix.pinv.solvers import pseudo_inverse

__all__ = [
    "pseudo_inverse",
    "PinvDesign",
    "PinvSolution",
    "PinvParams",
]

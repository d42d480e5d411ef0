"""
Solver dispatch for the pseudo-inverse.

This module provides the pseudo_inverse() function (public API) and
backend selection.
"""

from typing import Literal
from numpy.typing import ArrayLike

from pymatrix.matrix.handle import Matrix
from pymatrix.pinv.backends.elimination import GaussJordanBackend
from pymatrix.pinv.design import PinvDesign
from pymatrix.pinv.solution import PinvSolution


# Type alias for backend selection
BackendChoice = Literal['auto', 'cpu', 'cpu_gauss_jordan', 'cpu_svd']


def pseudo_inverse(
    A: Matrix | ArrayLike,
    *,
    negligible: float | None = 0.0,
    backend: BackendChoice = 'auto',
) -> PinvSolution:
    """
    Moore-Penrose pseudo-inverse with rank diagnostics.

    The result X satisfies A X A = A and X A X = X (and both products are
    Hermitian) for the rank-r matrix obtained by treating negligible
    pivots or singular values as zero.

    Args:
        A: Matrix handle or 2-D array-like (m x n)
        negligible: Pivots / singular values <= this count as zero.
            None derives a threshold from the matrix scale.
        backend: Computational backend to use:
            - 'auto' / 'cpu' / 'cpu_gauss_jordan': rank-revealing elimination
            - 'cpu_svd': singular value decomposition (scipy.linalg)

    Returns:
        PinvSolution with the n x m inverse, rank and diagnostics

    Raises:
        NullMatrixError: If A is a null Matrix
        ValidationError: If A has non-finite entries or negligible < 0
        ValueError: If backend is unknown

    Example:
        >>> from pymatrix.pinv import pseudo_inverse
        >>> solution = pseudo_inverse([[1, 2], [2, 4], [3, 6]], negligible=1e-12)
        >>> solution.rank
        1
        >>> print(solution.summary())
    """
    # === Input Validation ===
    design = PinvDesign.build(A, negligible)

    # === Select Backend ===
    backend_impl = _get_backend(backend)

    # === Solve ===
    result = backend_impl.solve(design)

    # === Wrap and Return ===
    return PinvSolution(_result=result, _design=design)


def _get_backend(choice: BackendChoice):
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_gauss_jordan'):
        return GaussJordanBackend()

    elif choice == 'cpu_svd':
        from pymatrix.pinv.backends.svd import SVDBackend
        return SVDBackend()

    else:
        raise ValueError(f"Unknown backend: {choice!r}")

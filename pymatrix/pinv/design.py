"""
Pseudo-inverse design.

Holds a validated snapshot of the matrix to invert and the rank
threshold. Backends read only from here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pymatrix.core.compute.precision import default_negligible
from pymatrix.core.exceptions import NullMatrixError, ValidationError
from pymatrix.core.validation import check_2d, check_array, check_finite, checked_size
from pymatrix.matrix.handle import Matrix


@dataclass(frozen=True)
class PinvDesign:
    """
    Input to a pseudo-inverse backend.

    Construction:
        PinvDesign.build(Matrix.from_rows(...), negligible=1e-12)
        PinvDesign.build(numpy_array)             # any 2-D array-like

    Immutable after construction; the matrix is copied, so later writes
    to the source handle do not reach the design.
    """
    _A: NDArray[Any]
    _negligible: float
    _auto_negligible: bool

    @classmethod
    def build(
        cls,
        A: Matrix | ArrayLike,
        negligible: float | None = 0.0,
    ) -> PinvDesign:
        """
        Validate inputs.

        Args:
            A: Matrix handle or 2-D array-like
            negligible: Rank threshold (>= 0), or None for the automatic
                threshold max(m, n) * eps * max|a_ij|

        Raises:
            NullMatrixError: If A is a null Matrix
            ValidationError: If A has non-finite entries or negligible < 0
            DimensionError: If A is not 2-D
        """
        if isinstance(A, Matrix):
            if A.is_null:
                raise NullMatrixError("pseudo_inverse: matrix is null")
            array = A.to_numpy()
        else:
            array = np.array(check_array(A, 'A'), order='C')
            check_2d(array, 'A')
        check_finite(array, 'A')
        m, n = array.shape
        checked_size(m, m, name='pseudo_inverse transform')

        auto = negligible is None
        if auto:
            negligible = default_negligible(array, (m, n))
        elif negligible < 0:
            raise ValidationError(f"negligible must be >= 0, got {negligible}")

        return cls(_A=array, _negligible=float(negligible), _auto_negligible=auto)

    @property
    def A(self) -> NDArray[Any]:
        """Matrix to invert (m x n)."""
        return self._A

    @property
    def m(self) -> int:
        return self._A.shape[0]

    @property
    def n(self) -> int:
        return self._A.shape[1]

    @property
    def negligible(self) -> float:
        """Pivots or singular values <= this count as zero."""
        return self._negligible

    @property
    def auto_negligible(self) -> bool:
        """True if the threshold was derived from the matrix."""
        return self._auto_negligible

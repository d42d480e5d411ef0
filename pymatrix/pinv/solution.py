"""
Pseudo-inverse solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pymatrix.core.compute.precision import is_close
from pymatrix.core.compute.tolerances import (
    ILL_CONDITIONED_THRESHOLD,
    ToleranceTier,
    select_tolerance,
)
from pymatrix.core.result import Result
from pymatrix.matrix.handle import Matrix

if TYPE_CHECKING:
    from pymatrix.pinv.design import PinvDesign


@dataclass(frozen=True)
class PinvParams:
    """
    Parameter payload for the pseudo-inverse.

    This is the immutable data computed by backends.

    Attributes:
        pinv: The pseudo-inverse (n x m)
        rank: Effective numerical rank
        pivot_columns: Columns that received a pivot (elimination only)
        deficient_columns: Columns rejected as negligible (elimination only)
        row_transform: V with V @ A == echelon form (elimination only)
        singular_values: All singular values of A (SVD only)
    """
    pinv: NDArray[Any]
    rank: int
    pivot_columns: tuple[int, ...] = ()
    deficient_columns: tuple[int, ...] = ()
    row_transform: NDArray[Any] | None = None
    singular_values: NDArray[np.floating[Any]] | None = None


@dataclass
class PinvSolution:
    """
    User-facing pseudo-inverse results.

    Wraps the backend Result and provides the inverse as a Matrix plus
    rank diagnostics and a check of the Moore-Penrose identities.
    """
    _result: Result[PinvParams]
    _design: 'PinvDesign'

    # Cached computations
    _matrix: Matrix | None = None

    @property
    def matrix(self) -> Matrix:
        """The pseudo-inverse as a Matrix (a shared copy on every access)."""
        if self._matrix is None:
            pinv = self._result.params.pinv
            n, m = pinv.shape
            self._matrix = Matrix.adopt(n, m, np.array(pinv, order='C').reshape(-1))
        return self._matrix.copy()

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def is_full_rank(self) -> bool:
        return self.rank == min(self._design.m, self._design.n)

    @property
    def pivot_columns(self) -> tuple[int, ...]:
        return self._result.params.pivot_columns

    @property
    def deficient_columns(self) -> tuple[int, ...]:
        return self._result.params.deficient_columns

    @property
    def row_transform(self) -> NDArray[Any] | None:
        return self._result.params.row_transform

    @property
    def singular_values(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.singular_values

    @property
    def negligible(self) -> float:
        return self._design.negligible

    def penrose_residuals(self) -> tuple[float, float]:
        """
        1-norms of the two defining residuals.

        Returns:
            (||A A+ A - A||_1, ||A+ A A+ - A+||_1)
        """
        A = self._design.A
        P = self._result.params.pinv
        return _norm1(A @ P @ A - A), _norm1(P @ A @ P - P)

    @property
    def condition_number(self) -> float:
        """Generalized condition estimate ||A||_1 ||A+||_1 (0 at rank 0)."""
        return _norm1(self._design.A) * _norm1(self._result.params.pinv)

    @property
    def tolerance(self) -> ToleranceTier:
        """Tier for the identity check, loosened for ill-conditioned input."""
        return select_tolerance(
            self._result.params.pinv.dtype,
            is_ill_conditioned=self.condition_number > ILL_CONDITIONED_THRESHOLD,
        )

    def satisfies_penrose(self) -> bool:
        """
        Whether A A+ A == A and A+ A A+ == A+ hold elementwise within
        the tolerance tier.
        """
        A = self._design.A
        P = self._result.params.pinv
        tier = self.tolerance
        return bool(
            np.all(is_close(A @ P @ A, A, tier.rtol, tier.atol))
            and np.all(is_close(P @ A @ P, P, tier.rtol, tier.atol))
        )

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Plain-text report of shape, rank and identity residuals."""
        first, second = self.penrose_residuals()
        lines = [
            "Moore-Penrose Pseudo-Inverse",
            "=" * 60,
            f"Input: {self._design.m} x {self._design.n}",
            f"Rank: {self.rank} of {min(self._design.m, self._design.n)}",
            f"Negligible threshold: {self.negligible:.3e}"
            + (" (auto)" if self._design.auto_negligible else ""),
        ]
        if self._result.params.row_transform is not None:
            lines.append(f"Pivot columns: {list(self.pivot_columns)}")
            lines.append(f"Deficient columns: {list(self.deficient_columns)}")
        if self.singular_values is not None:
            values = ", ".join(f"{s:.4g}" for s in self.singular_values)
            lines.append(f"Singular values: [{values}]")
        lines.extend([
            f"||A A+ A - A||_1: {first:.3e}",
            f"||A+ A A+ - A+||_1: {second:.3e}",
            f"Condition estimate: {self.condition_number:.3e}",
            f"Penrose identities: {'hold' if self.satisfies_penrose() else 'FAIL'} "
            f"({self.tolerance.name} tolerance)",
            "",
            f"Backend: {self.backend_name}",
        ])
        if self.timing is not None:
            lines.append(f"Time: {self.timing['total_seconds']:.4f}s")
        for warning in self.warnings:
            lines.append(f"Warning: {warning}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"PinvSolution({self._design.n}x{self._design.m}, rank={self.rank}, "
            f"backend={self.backend_name!r})"
        )


def _norm1(x: NDArray[Any]) -> float:
    return float(np.max(np.sum(np.abs(x), axis=0)))

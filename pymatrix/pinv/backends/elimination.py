"""
Rank-revealing Gauss-Jordan backend for the pseudo-inverse.

The reference implementation: the same elimination kernel that
Matrix.pseudo_inverse uses, with the pivot bookkeeping and the row
transform kept for the caller.
"""

from typing import Any

from pymatrix.buffer._elimination import rebuild_pseudo_inverse, reduce_rows
from pymatrix.core.compute.timing import timed
from pymatrix.core.result import Result
from pymatrix.pinv.design import PinvDesign
from pymatrix.pinv.solution import PinvParams


class GaussJordanBackend:
    """
    CPU backend using rank-revealing Gauss-Jordan elimination.

    Implements the Backend protocol for PinvDesign -> PinvParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_gauss_jordan'

    def solve(self, design: PinvDesign) -> Result[PinvParams]:
        """
        Compute A+ through the rank factorization A = F G.

        Algorithm:
            1. Reduce A to echelon form, skipping columns whose best
               pivot is <= negligible; accumulate V with V A = echelon
            2. F = pivot columns of A, G = nonzero rows of the echelon form
            3. A+ = G' (G G')^-1 (F' F)^-1 F'

        Args:
            design: Validated pseudo-inverse design

        Returns:
            Result containing PinvParams
        """
        with timed() as timer:
            with timer.section('reduction'):
                reduction = reduce_rows(design.A, design.negligible)
            with timer.section('reconstruction'):
                pinv = rebuild_pseudo_inverse(design.A, reduction)

        params = PinvParams(
            pinv=pinv,
            rank=reduction.rank,
            pivot_columns=reduction.pivot_columns,
            deficient_columns=reduction.deficient_columns,
            row_transform=reduction.transform,
        )

        info: dict[str, Any] = {
            'method': 'gauss_jordan',
            'rank': reduction.rank,
            'processed_columns': reduction.processed,
            'negligible': design.negligible,
        }

        warnings: list[str] = []
        full_rank = min(design.m, design.n)
        if reduction.rank < full_rank:
            warnings.append(
                f"Matrix is rank-deficient: rank={reduction.rank}, expected={full_rank}; "
                f"columns {list(reduction.deficient_columns)} were negligible"
            )

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings),
        )

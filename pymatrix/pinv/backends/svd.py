"""
SVD backend for the pseudo-inverse.

Uses LAPACK through scipy.linalg. Serves as an independent reference for
the elimination backend; singular values <= negligible are dropped.
"""

from typing import Any
import numpy as np
import scipy.linalg as sla

from pymatrix.core.compute.timing import timed
from pymatrix.core.result import Result
from pymatrix.pinv.design import PinvDesign
from pymatrix.pinv.solution import PinvParams


class SVDBackend:
    """
    CPU backend using the singular value decomposition.

    Implements the Backend protocol for PinvDesign -> PinvParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_svd'

    def solve(self, design: PinvDesign) -> Result[PinvParams]:
        """
        Compute A+ = V diag(1/s) U' over the retained singular values.

        Args:
            design: Validated pseudo-inverse design

        Returns:
            Result containing PinvParams
        """
        with timed() as timer:
            with timer.section('svd'):
                U, s, Vh = sla.svd(design.A, full_matrices=False)

            with timer.section('reconstruction'):
                keep = s > design.negligible
                rank = int(np.sum(keep))
                if rank == 0:
                    pinv = np.zeros(
                        (design.n, design.m), dtype=np.result_type(design.A, np.float64)
                    )
                else:
                    # s is sorted descending, so the kept values come first
                    U_r = U[:, :rank]
                    Vh_r = Vh[:rank, :]
                    pinv = (Vh_r.conj().T / s[:rank]) @ U_r.conj().T

        params = PinvParams(pinv=pinv, rank=rank, singular_values=s)

        info: dict[str, Any] = {
            'method': 'svd',
            'rank': rank,
            'negligible': design.negligible,
        }

        warnings: list[str] = []
        full_rank = min(design.m, design.n)
        if rank < full_rank:
            warnings.append(
                f"Matrix is rank-deficient: rank={rank}, expected={full_rank}; "
                f"{full_rank - rank} singular values were negligible"
            )

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings),
        )

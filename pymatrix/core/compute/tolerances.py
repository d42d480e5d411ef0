"""
Tolerance tiers for numerical comparison.

Defines precision expectations for matrix results:
- EXACT: bit-for-bit results (integer buffers, copies, cut/merge)
- FP64: double precision elimination on well-conditioned inputs
- FP64_ILL_CONDITIONED: double precision, cond > 1e4
- FP32: single precision buffers

Matrix equality (==) is always exact. These tiers back Matrix.allclose
and the Moore-Penrose residual checks of the pseudo-inverse solver.
"""

from dataclasses import dataclass

import numpy as np


# Condition estimate above which the looser tiers apply
ILL_CONDITIONED_THRESHOLD: float = 1e4


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


EXACT = ToleranceTier(
    rtol=0.0,
    atol=0.0,
    name='exact',
    description='No rounding allowed',
)

FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='fp64',
    description='Double precision elimination, well conditioned',
)

FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='fp64_ill_conditioned',
    description='Double precision elimination, ill-conditioned (cond > 1e4)',
)

FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='fp32',
    description='Single precision buffers',
)

FP32_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-2,
    atol=1e-3,
    name='fp32_ill_conditioned',
    description='Single precision buffers, ill-conditioned',
)


def select_tolerance(
    dtype: np.dtype | type,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select appropriate tolerance tier for a buffer dtype."""
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.inexact):
        return EXACT
    if np.finfo(dtype).bits <= 32:
        if is_ill_conditioned:
            return FP32_ILL_CONDITIONED
        return FP32
    if is_ill_conditioned:
        return FP64_ILL_CONDITIONED
    return FP64

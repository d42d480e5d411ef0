"""
Shared numeric infrastructure for pymatrix.

Submodules:
    precision: Machine epsilon, index range, negligibility thresholds
    tolerances: Tolerance tiers for approximate comparison
    timing: Execution timing utilities
"""

from pymatrix.core.compute.precision import (
    EPSILON_32,
    EPSILON_64,
    MAX_ELEMENTS,
    default_negligible,
    is_close,
    machine_epsilon,
)
from pymatrix.core.compute.tolerances import ToleranceTier, select_tolerance
from pymatrix.core.compute.timing import Timer, timed

__all__ = [
    # Precision
    "EPSILON_32",
    "EPSILON_64",
    "MAX_ELEMENTS",
    "default_negligible",
    "is_close",
    "machine_epsilon",
    # Tolerances
    "ToleranceTier",
    "select_tolerance",
    # Timing
    "Timer",
    "timed",
]

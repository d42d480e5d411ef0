"""
Core infrastructure for pymatrix.

This module provides the shared abstractions used by the buffer kernel,
the matrix handle and the pseudo-inverse solver.

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Precondition checks and overflow-checked sizing
    policies: Equality policy constants
    compute: Precision constants, tolerance tiers, timing
"""

from pymatrix.core.protocols import Backend
from pymatrix.core.result import Result
from pymatrix.core.exceptions import (
    PyMatrixError,
    ValidationError,
    DimensionError,
    SizeOverflowError,
    NullMatrixError,
    MatrixIndexError,
    NumericalError,
    SingularMatrixError,
)

__all__ = [
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "PyMatrixError",
    "ValidationError",
    "DimensionError",
    "SizeOverflowError",
    "NullMatrixError",
    "MatrixIndexError",
    "NumericalError",
    "SingularMatrixError",
]

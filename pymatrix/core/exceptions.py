"""
Exception hierarchy for pymatrix.

All exceptions inherit from PyMatrixError to allow catching any
library-specific error. Precondition violations (shape mismatch, bad
index, null handle, size overflow) are ValidationErrors; failures that
only show up during elimination are NumericalErrors.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyMatrixError(Exception):
    """Base exception for all pymatrix errors."""
    pass


class ValidationError(PyMatrixError):
    """
    Precondition on an input failed.

    Raised when a matrix operation is called with arguments that violate
    its contract.
    """
    pass


class DimensionError(ValidationError):
    """
    Matrix dimensions are incorrect or inconsistent.

    Raised for shape mismatches between operands, non-square inputs to
    square-only operations, and non-positive sizes.

    Attributes:
        expected: Expected shape, if meaningful
        actual: Actual shape, if meaningful
    """

    def __init__(
        self,
        message: str,
        expected: tuple[int, ...] | None = None,
        actual: tuple[int, ...] | None = None
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class SizeOverflowError(DimensionError):
    """
    A computed allocation size exceeds the representable index range.

    Attributes:
        size: The size that was requested
        limit: The largest size that can be indexed
    """

    def __init__(self, message: str, size: int, limit: int):
        super().__init__(message)
        self.size = size
        self.limit = limit


class NullMatrixError(ValidationError):
    """
    A null matrix was used where data is required.

    Null matrices have no buffer; only shape queries, equality,
    printing and assignment are defined for them.
    """
    pass


class MatrixIndexError(ValidationError, IndexError):
    """
    Element index is outside the matrix.

    Also an IndexError so that Python's sequence protocols treat it the
    usual way.

    Attributes:
        index: The offending (row, col) pair
        shape: Shape of the matrix that was indexed
    """

    def __init__(
        self,
        message: str,
        index: tuple[int, int] | None = None,
        shape: tuple[int, int] | None = None
    ):
        super().__init__(message)
        self.index = index
        self.shape = shape


class NumericalError(PyMatrixError):
    """
    Elimination could not produce a result.

    The inputs were well-formed, but the arithmetic itself failed.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular.

    Raised when Gauss-Jordan division finds a zero pivot, i.e. the
    divisor is not invertible.

    Attributes:
        matrix_name: Which operand was singular (e.g. 'divisor')
        condition_number: Condition estimate, when the caller has one
        rank: Number of pivots found before elimination stopped, if known
        expected_rank: Expected rank (the matrix order)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank

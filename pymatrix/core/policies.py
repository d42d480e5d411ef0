"""
Policy string constants for pymatrix.

This module is the SINGLE SOURCE OF TRUTH for policy strings.
Import from here, never use raw strings.

Usage:
    from pymatrix.core.policies import EQUALITY_BYTEWISE

    a.buffer.equals(b.buffer, policy=EQUALITY_BYTEWISE)
"""

# Compare element by element with the dtype's != operator.
# 0.0 == -0.0, and NaN never equals anything (including itself).
EQUALITY_ELEMENTWISE = 'elementwise'

# Compare the raw bytes of the two buffers.
# 0.0 != -0.0, and identical NaN payloads compare equal.
EQUALITY_BYTEWISE = 'bytewise'

# Policy used by Matrix.__eq__ and DenseBuffer.__eq__
DEFAULT_EQUALITY_POLICY = EQUALITY_ELEMENTWISE

# All policies as a frozenset for validation
ALL_EQUALITY_POLICIES = frozenset({
    EQUALITY_ELEMENTWISE,
    EQUALITY_BYTEWISE,
})

__all__ = [
    'EQUALITY_ELEMENTWISE',
    'EQUALITY_BYTEWISE',
    'DEFAULT_EQUALITY_POLICY',
    'ALL_EQUALITY_POLICIES',
]

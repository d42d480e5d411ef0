"""
Envelope returned by solver backends.

Kernel operations hand back plain matrices. A solver that has more to
say (the pseudo-inverse solver reports rank, pivots and timing) wraps
its payload in a Result together with that metadata.

Notes:
    - P is the solver-specific payload (e.g. PinvParams)
    - info holds small scalar facts: method name, rank, thresholds
    - timing may be None when a caller builds a Result by hand
    - frozen, so a solution object can hand it out without copying
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Solver payload plus what the solver learned on the way.

    Attributes:
        params: The payload
        info: Method name, rank and threshold used
        timing: Output of Timer.result(), or None
        backend_name: Which backend ran, e.g. 'cpu_gauss_jordan'
        warnings: Non-fatal findings such as rank deficiency

    Example:
        >>> Result(
        ...     params=PinvParams(pinv=x, rank=2),
        ...     info={'method': 'gauss_jordan', 'rank': 2},
        ...     timing=None,
        ...     backend_name='cpu_gauss_jordan',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

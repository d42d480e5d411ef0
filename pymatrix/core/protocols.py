"""
Structural interface shared by the pseudo-inverse backends.

Backends do not inherit from anything; having a `name` and a
`solve(design)` returning a Result is enough.
"""

from typing import Protocol, TypeVar, runtime_checkable

D = TypeVar('D')
P = TypeVar('P')


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Something that turns a validated design into a Result.

    Backends hold no state between calls; thresholds and inputs all
    come in through the design.
    """

    @property
    def name(self) -> str:
        """Short identifier of the form '<device>_<algorithm>', e.g. 'cpu_svd'."""
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Run the algorithm on design.

        Raises:
            NumericalError: If the computation cannot produce an answer
            ValidationError: If this backend cannot handle the design
        """
        ...

"""
Text rendering of matrices.

Each row renders as "<prefix>[v1  v2  ...]" followed by a newline; a
null matrix renders as "<prefix>[NULL]".
"""

from __future__ import annotations

from typing import Any, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from pymatrix.buffer.kernel import DenseBuffer

SEPARATOR = '  '
NULL_TEXT = '[NULL]'


def format_buffer(
    buffer: DenseBuffer | None,
    to_string: Callable[[Any], str] = str,
    prefix: str = '',
) -> str:
    """
    Render a buffer (or None for a null matrix) one line per row.

    Args:
        buffer: Buffer to render, or None
        to_string: Formats a single element
        prefix: Prepended to every line

    Returns:
        The rendered text, ending with a newline
    """
    if buffer is None:
        return f"{prefix}{NULL_TEXT}\n"
    lines = [
        f"{prefix}[{SEPARATOR.join(to_string(value) for value in row)}]\n"
        for row in buffer.view()
    ]
    return ''.join(lines)

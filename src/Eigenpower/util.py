"""
Useful general functions.
"""

from __future__ import annotations

from typing import Any

from ._typing import Size
from .errors import InvalidArgument


def size_to_string(size: Size) -> str:
    """Format a (rows, cols) pair as used in error messages."""
    return f"({size[0]}; {size[1]})"


def assert_equal_sizes(a: Any, b: Any) -> None:
    """Raise InvalidArgument unless both objects have the same size."""
    if a.size != b.size:
        raise InvalidArgument(
            f"Wrong matrix sizes: {size_to_string(a.size)} {size_to_string(b.size)}"
        )


def assert_square(a: Any) -> None:
    if not a.is_square:
        raise InvalidArgument(f"Matrix of size {size_to_string(a.size)} is not square.")

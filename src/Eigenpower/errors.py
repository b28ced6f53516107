"""
Exceptions raised by matrix operations and eigenvalue solvers.

Each class derives from the builtin exception it refines, so callers
may catch either.
"""


class InvalidArgument(ValueError):
    """An argument is malformed: mismatched sizes, ragged rows or a
    non-square matrix passed to a solver."""


class OutOfRange(IndexError):
    """Element access outside the logical bounds of a matrix."""


class MatrixRuntimeError(RuntimeError):
    """Operand shapes are incompatible with the requested operation."""

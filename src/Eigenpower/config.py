"""
Process-wide numeric settings.

One epsilon and one display precision are kept per scalar type. The epsilon
is used by every convergence check and by matrix equality, the precision by
the matrix formatters. Values start at the machine epsilon of the type and
a precision of 0.

The registry is shared by the whole process and is not synchronized:
do not change it from one thread while another one is computing.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, NamedTuple

import numpy as np

from ._typing import DTypeLike
from .errors import InvalidArgument

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 0


class NumericSettings(NamedTuple):
    eps: float
    precision: int


_SETTINGS: dict[np.dtype, NumericSettings] = {}


def scalar_type(dtype: DTypeLike) -> np.dtype:
    """Normalize a scalar type, rejecting anything that is not float or complex."""
    dt = np.dtype(dtype)
    if not np.issubdtype(dt, np.inexact):
        raise InvalidArgument(
            f"Only floating point and complex scalar types are supported, got {dt}"
        )
    return dt


def _settings(dtype: DTypeLike) -> NumericSettings:
    key = scalar_type(dtype)
    try:
        return _SETTINGS[key]
    except KeyError:
        value = NumericSettings(float(np.finfo(key).eps), DEFAULT_PRECISION)
        _SETTINGS[key] = value
        return value


def get_eps(dtype: DTypeLike = np.float64) -> float:
    """Tolerance used for comparisons of the given scalar type."""
    return _settings(dtype).eps


def get_precision(dtype: DTypeLike = np.float64) -> int:
    """Number of decimals used when formatting matrices of the given scalar type."""
    return _settings(dtype).precision


def set_eps(eps: float, precision: int, dtype: DTypeLike = np.float64) -> None:
    """Set the tolerance and the display precision of a scalar type.

    Parameters
    ----------
    eps: float
        Absolute tolerance. Two elements are considered equal when their
        difference is at most `eps`.
    precision: int
        Number of decimals shown by the matrix formatters.
    dtype: numpy dtype, optional (default=float64)
        Scalar type the settings apply to.
    """
    key = scalar_type(dtype)
    _SETTINGS[key] = NumericSettings(float(abs(eps)), int(precision))
    logger.debug("eps for %s set to %g (precision %d)", key, eps, precision)


@contextmanager
def local_eps(
    eps: float, precision: int | None = None, dtype: DTypeLike = np.float64
) -> Iterator[NumericSettings]:
    """Temporarily change the settings of a scalar type.

    The previous values are restored on exit, even if an exception is raised.
    """
    previous = _settings(dtype)
    if precision is None:
        precision = previous.precision
    set_eps(eps, precision, dtype)
    try:
        yield _settings(dtype)
    finally:
        set_eps(previous.eps, previous.precision, dtype)


def reset() -> None:
    """Forget every setting, going back to machine epsilon and precision 0."""
    _SETTINGS.clear()

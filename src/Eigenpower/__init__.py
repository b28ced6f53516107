"""
Eigenpower
~~~~~~~~~~

Dense matrices and power iteration eigenvalue solvers.


"""

import logging as _logging

from . import visualization
from .config import get_eps, get_precision, local_eps, set_eps
from .errors import InvalidArgument, MatrixRuntimeError, OutOfRange
from .matrix import Matrix
from .numeric import euclidean_norm, minimal_square_problem, solve_quadratic_equation
from .power_iteration import (
    EigenResult,
    Eigenpair,
    dominant_iteration_converges,
    power_method_complex,
    power_method_dominant,
    power_method_eigenvalues,
    power_method_squared,
    squared_iteration_converges,
)

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

__all__ = [
    "visualization",
    "Matrix",
    "Eigenpair",
    "EigenResult",
    "power_method_eigenvalues",
    "power_method_dominant",
    "power_method_squared",
    "power_method_complex",
    "dominant_iteration_converges",
    "squared_iteration_converges",
    "euclidean_norm",
    "minimal_square_problem",
    "solve_quadratic_equation",
    "get_eps",
    "set_eps",
    "get_precision",
    "local_eps",
    "InvalidArgument",
    "OutOfRange",
    "MatrixRuntimeError",
]

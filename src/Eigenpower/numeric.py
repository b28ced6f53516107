"""
Numeric helpers used by the eigenvalue solvers.
"""

from __future__ import annotations

import numpy as np
import scipy.linalg

from .errors import InvalidArgument
from .matrix import Matrix
from .util import size_to_string


def euclidean_norm(v: Matrix) -> float:
    """Euclidean (2-) norm of a vector.

    For complex vectors the norm is sqrt(sum |v_i|^2), a real number.
    """
    if not v.is_vector:
        raise InvalidArgument(
            f"Euclidean norm requires a vector, got matrix of size {size_to_string(v.size)}"
        )
    return float(np.linalg.norm(v.to_numpy().ravel()))


def minimal_square_problem(a: Matrix, b: Matrix) -> Matrix:
    """Least squares solution of the (usually overdetermined) system a x = b.

    Parameters
    ----------
    a: Matrix (shape=(N, K))
        Coefficients.
    b: Matrix (shape=(N, 1))
        Right hand side.

    Returns
    -------
    x: Matrix (shape=(K, 1))
        Column vector minimizing ||a x - b||. If `a` is rank deficient,
        the solution of minimal norm is returned.
    """
    if not b.is_col_vector or a.rows != b.rows:
        raise InvalidArgument(
            f"Cannot solve least squares problem for sizes {size_to_string(a.size)} "
            f"and {size_to_string(b.size)}"
        )
    x, _residues, _rank, _sv = scipy.linalg.lstsq(a.to_numpy(), b.to_numpy())
    return Matrix.from_numpy(x)


def solve_quadratic_equation(
    a: float, b: float, c: float
) -> tuple[complex, complex]:
    """Roots of a x^2 + b x + c = 0.

    Returns
    -------
    r1, r2: complex
        (-b + sqrt(d)) / 2a and (-b - sqrt(d)) / 2a, with d = b^2 - 4ac.
        Complex conjugate when d < 0.
    """
    if a == 0:
        raise InvalidArgument("Leading coefficient of a quadratic equation cannot be 0")

    sqrt_d = complex(np.emath.sqrt(b * b - 4 * a * c))
    return complex((-b + sqrt_d) / (2 * a)), complex((-b - sqrt_d) / (2 * a))

"""
Dominant eigenvalues of real square matrices by power iteration.

Three variants are provided:

- `power_method_dominant`: classic power iteration, for a single strictly
  dominant real eigenvalue.
- `power_method_squared`: power iteration on A^2, for a dominant pair of
  real eigenvalues of equal magnitude (+l, -l).
- `power_method_complex`: complex power iteration combined with a quadratic
  recurrence fit, for a dominant complex conjugate pair.

`power_method_eigenvalues` picks among them.

Non-convergence is not an error: every method returns an `EigenResult` whose
`iterations` is -1 when the iteration did not settle within `max_iters`
steps (or produced no usable eigenvector).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterator, NamedTuple

import numpy as np

from .errors import InvalidArgument
from .matrix import Matrix
from .numeric import euclidean_norm, minimal_square_problem, solve_quadratic_equation
from .util import assert_square, size_to_string

logger = logging.getLogger(__name__)

#: Previous estimate used before the first iteration.
START_ESTIMATE = 1e18

#: Tolerance of the Method 2 run used by the dispatcher to check feasibility.
PROBE_EPS = 0.1

DOMINANT, SQUARED, COMPLEX = 0, 1, 2


class Eigenpair(NamedTuple):
    """An eigenvalue and its eigenvector, a complex column matrix."""

    value: complex
    vector: Matrix


@dataclass(frozen=True)
class EigenResult:
    """Eigenpairs found by one of the power iteration methods.

    Behaves as the sequence of its eigenpairs.

    Parameters
    ----------
    eigenpairs: tuple of Eigenpair
        Zero, one or two eigenpairs.
    iterations: int
        Number of iterations, or -1 if the method did not converge.
    method: int
        Method that produced the result (DOMINANT, SQUARED or COMPLEX).
    """

    eigenpairs: tuple[Eigenpair, ...]
    iterations: int
    method: int

    @property
    def converged(self) -> bool:
        return self.iterations >= 0

    @property
    def eigenvalues(self) -> list[complex]:
        return [pair.value for pair in self.eigenpairs]

    def __iter__(self) -> Iterator[Eigenpair]:
        return iter(self.eigenpairs)

    def __len__(self) -> int:
        return len(self.eigenpairs)

    def __getitem__(self, k: int) -> Eigenpair:
        return self.eigenpairs[k]

    def __str__(self):
        values = ", ".join(f"{v:.6g}" for v in self.eigenvalues)
        return f"EigenResult(method={self.method}, iterations={self.iterations}, eigenvalues=[{values}])"

    __repr__ = __str__


def _unit_seed(a: Matrix) -> Matrix:
    y = Matrix(a.rows, 1)
    y[0] = 1
    return y


def _check_seed(a: Matrix, y: Matrix) -> None:
    if y.size != (a.rows, 1):
        raise InvalidArgument(
            f"Seed of size {size_to_string(y.size)} does not match matrix of size "
            f"{size_to_string(a.size)}"
        )


def _power_step(a: Matrix, u: Matrix, y: Matrix):
    """One power iteration step, updating u and y in place.

    Returns the Rayleigh quotient of the new u.
    """
    y.assign(a * u)
    u.assign(y / euclidean_norm(y))
    return u.scalar_product(a * u)


def _complex_step(
    a: Matrix, squared_a: Matrix, y: Matrix, u: Matrix
) -> tuple[complex, complex]:
    """One complex power iteration step followed by the fit of
    A^2 u + c1 A u + c0 u = 0, whose roots are returned."""
    y.assign(a * u)
    u.assign(y / euclidean_norm(y))
    if not np.all(np.isfinite(u.to_numpy())):
        return complex(np.nan), complex(np.nan)

    au = a * u
    lhs = Matrix.from_numpy(np.hstack((u.to_numpy().real, au.to_numpy().real)))
    rhs = Matrix.from_numpy((-1 * squared_a * u).to_numpy().real)

    c = minimal_square_problem(lhs, rhs)
    return solve_quadratic_equation(1, c[1], c[0])


def power_method_dominant(
    a: Matrix, y: Matrix | None = None, max_iters: int = 100
) -> EigenResult:
    """Dominant eigenvalue by classic power iteration.

    Converges when the eigenvalue of largest magnitude is real and strictly
    larger in magnitude than all others.

    Parameters
    ----------
    a: Matrix
        Square matrix.
    y: Matrix, optional
        Starting vector (column). A copy is used, with its first element set to 1.
        If not given, the first unit vector is used.
    max_iters: int, optional (default=100)
        Maximum number of iterations.

    Returns
    -------
    result: EigenResult
        A single eigenpair. `iterations` is -1 if the Rayleigh quotient did
        not settle or the iterate vanished.
    """
    assert_square(a)
    if y is None:
        y = _unit_seed(a)
    else:
        _check_seed(a, y)
        y = y.copy()
        y[0] = 1

    eps = a.eps

    with np.errstate(divide="ignore", invalid="ignore"):
        u = y / euclidean_norm(y)
        lam = u.scalar_product(a * u)
        prev_lam = START_ESTIMATE
        count = 0
        while abs(prev_lam - lam) > eps:
            prev_lam = lam
            lam = _power_step(a, u, y)
            count += 1
            if count > max_iters:
                break

    iterations = count + 1
    # A NaN norm also means the iterate vanished.
    if count >= max_iters or not euclidean_norm(u) >= eps:
        iterations = -1

    logger.debug("dominant power iteration: lambda=%g after %d iterations", lam, iterations)
    return EigenResult((Eigenpair(complex(lam), u.to_complex()),), iterations, DOMINANT)


def power_method_squared(
    a: Matrix, y: Matrix | None = None, max_iters: int = 100, eps: float | None = None
) -> EigenResult:
    """Dominant pair of real eigenvalues +l and -l, by power iteration on A^2.

    Power iteration on A^2 converges to l^2 whatever the sign of the
    dominant eigenvalues. The eigenvectors of +l and -l are then split from
    the converged iterate u as

        v1 = (l A u + A^2 u) / (2 l^2)
        v2 = (-l A u + A^2 u) / (2 l^2)

    Parameters
    ----------
    a: Matrix
        Square matrix.
    y: Matrix, optional
        Starting vector (column). It is overwritten with the last A^2 u, so a
        second call with the same `y` continues where the first one stopped.
        If not given, the first unit vector is used.
    max_iters: int, optional (default=100)
        Maximum number of iterations.
    eps: float, optional
        Convergence tolerance, and minimum norm of an accepted eigenvector.
        If not given, the global eps of the scalar type of `a`.

    Returns
    -------
    result: EigenResult
        Eigenpairs for +l then -l, each present only if its eigenvector does
        not vanish. `iterations` is -1 if the iteration did not settle or no
        eigenvector was accepted.
    """
    assert_square(a)
    if y is None:
        y = _unit_seed(a)
    else:
        _check_seed(a, y)
    if eps is None:
        eps = a.eps

    a2 = a * a

    with np.errstate(divide="ignore", invalid="ignore"):
        u = y / euclidean_norm(y)
        lam = np.sqrt(abs(u.scalar_product(a2 * u)))
        prev_lam = START_ESTIMATE
        count = 0
        while abs(lam - prev_lam) > eps:
            prev_lam = lam
            lam = np.sqrt(abs(_power_step(a2, u, y)))
            count += 1
            if count > max_iters:
                break

        v1 = (lam * a * u + a2 * u) / (2 * lam * lam)
        v2 = (-lam * a * u + a2 * u) / (2 * lam * lam)

    eigenpairs = []
    if euclidean_norm(v1) > eps:
        eigenpairs.append(Eigenpair(complex(lam), v1.to_complex()))
    if euclidean_norm(v2) > eps:
        eigenpairs.append(Eigenpair(complex(-lam), v2.to_complex()))

    iterations = count + 1
    if count >= max_iters or not eigenpairs:
        iterations = -1

    logger.debug(
        "squared power iteration: lambda=%g, %d eigenvectors after %d iterations",
        lam,
        len(eigenpairs),
        iterations,
    )
    return EigenResult(tuple(eigenpairs), iterations, SQUARED)


def power_method_complex(
    a: Matrix, y: Matrix | None = None, max_iters: int = 100
) -> EigenResult:
    """Dominant complex conjugate pair of eigenvalues.

    The iterate u of a complex power iteration converges to the plane
    spanned by the eigenvectors of the pair. At every step the recurrence
    A^2 u + c1 A u + c0 u = 0 is fitted by least squares on the real parts,
    and the roots r1, r2 of x^2 + c1 x + c0 approximate the pair. The
    iteration stops when both roots settle. Eigenvectors are recovered as

        v1 = A^2 u - r2 A u
        v2 = A u - A^2 u / r1

    Parameters
    ----------
    a: Matrix
        Square matrix.
    y: Matrix, optional
        Starting vector (column). If not given, the first unit vector is used.
    max_iters: int, optional (default=100)
        Maximum number of iterations.

    Returns
    -------
    result: EigenResult
        Eigenpairs for r1 then r2, each present only if its eigenvector does
        not vanish. `iterations` is -1 if the roots did not settle or the
        iterate vanished.
    """
    assert_square(a)
    if y is None:
        y = _unit_seed(a)
    else:
        _check_seed(a, y)

    squared_a = a * a
    complex_a = a.to_complex()
    complex_squared_a = squared_a.to_complex()

    eps = a.eps
    complex_eps = complex_a.eps

    complex_y = y.to_complex()

    with np.errstate(divide="ignore", invalid="ignore"):
        u = complex_y / euclidean_norm(complex_y)

        prev_r1 = prev_r2 = complex(START_ESTIMATE)
        r1 = r2 = 0j
        count = 0
        # Both roots must settle.
        while abs(prev_r1 - r1) > eps or abs(prev_r2 - r2) > eps:
            p1, p2 = _complex_step(complex_a, complex_squared_a, complex_y, u)
            prev_r1, prev_r2 = r1, r2
            r1, r2 = p1, p2
            count += 1
            if count > max_iters:
                break

        au = complex_a * u
        a2u = complex_squared_a * u
        v1 = a2u - r2 * au
        v2 = au - a2u / r1

    iterations = count + 1
    if count >= max_iters or not (np.isfinite(r1) and np.isfinite(r2)):
        iterations = -1

    eigenpairs = []
    if euclidean_norm(v1) ** 2 > complex_eps**2:
        eigenpairs.append(Eigenpair(r1, v1))
    if euclidean_norm(v2) ** 2 > complex_eps**2:
        eigenpairs.append(Eigenpair(r2, v2))

    logger.debug(
        "complex power iteration: r1=%s, r2=%s after %d iterations", r1, r2, iterations
    )
    return EigenResult(tuple(eigenpairs), iterations, COMPLEX)


def _stagnation_probe(a: Matrix, iters: int, step: int) -> tuple[bool, Matrix]:
    y = _unit_seed(a)
    eps = a.eps
    diffs: list[float] = []

    with np.errstate(divide="ignore", invalid="ignore"):
        u = y / euclidean_norm(y)
        lam = u.scalar_product(a * u)
        for _ in range(iters):
            prev_lam = lam
            lam = _power_step(a, u, y)
            diffs.append(abs(prev_lam - lam))
            if diffs[-1] < eps:
                return True, y
            if len(diffs) >= step and (
                diffs[-1] >= diffs[-step] or abs(diffs[-1] - diffs[-step]) <= eps
            ):
                return False, y

    return True, y


def dominant_iteration_converges(
    a: Matrix, iters: int = 10, step: int = 5
) -> tuple[bool, Matrix]:
    """Check whether classic power iteration makes progress on `a`.

    Runs at most `iters` steps and compares the change of the Rayleigh
    quotient with the change `step` iterations earlier. The iteration is
    considered stuck if the change did not shrink.

    Returns
    -------
    converges: bool
    y: Matrix
        Last A u computed.
    """
    assert_square(a)
    return _stagnation_probe(a, iters, step)


def squared_iteration_converges(
    a: Matrix, iters: int = 10, step: int = 5
) -> tuple[bool, Matrix]:
    """Same as `dominant_iteration_converges`, for power iteration on A^2."""
    assert_square(a)
    return _stagnation_probe(a * a, iters, step)


def power_method_eigenvalues(
    a: Matrix,
    max_iters: int = 100,
    probe_iters: int = 10,
    probe_step: int = 5,
    force_method: int = -1,
    y: Matrix | None = None,
) -> EigenResult:
    """Dominant eigenvalues of a real square matrix.

    Unless a method is forced, power iteration on A^2 is first run with a
    loose tolerance. If it converges, it is continued with the full
    tolerance and its eigenpairs are returned when at least one was found.
    Otherwise the complex power iteration is used.

    Parameters
    ----------
    a: Matrix
        Square matrix.
    max_iters: int, optional (default=100)
        Maximum number of iterations of each run.
    probe_iters, probe_step: int, optional (default=10, 5)
        Parameters of the stagnation probes, whose outcome is logged
        at DEBUG level.
    force_method: int, optional (default=-1)
        0, 1 or 2 to run `power_method_dominant`, `power_method_squared`
        or `power_method_complex` directly.
    y: Matrix, optional
        Starting vector (column), not modified. If not given, the first unit
        vector is used by forced methods and by the complex power iteration,
        and the vector of ones by power iteration on A^2.

    Returns
    -------
    result: EigenResult
        `iterations` is the total number of iterations, or -1 if the
        method that produced the result did not converge.
    """
    assert_square(a)

    if force_method in (DOMINANT, SQUARED, COMPLEX):
        seed = _unit_seed(a) if y is None else y.copy()
        seed[0] = 1
        match force_method:
            case 0:
                return power_method_dominant(a, seed, max_iters)
            case 1:
                return power_method_squared(a, seed, max_iters)
            case 2:
                return power_method_complex(a, seed, max_iters)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "stagnation probes: dominant converges=%s, squared converges=%s",
            dominant_iteration_converges(a, probe_iters, probe_step)[0],
            squared_iteration_converges(a, probe_iters, probe_step)[0],
        )

    # Starting from ones keeps both the +l and -l components in the iterate.
    seed = Matrix(a.rows, 1, 1.0) if y is None else y.copy()

    probe = power_method_squared(a, seed, max_iters, PROBE_EPS)
    if probe.converged:
        refined = power_method_squared(a, seed, max_iters)
        if refined.converged and refined.eigenpairs:
            logger.debug("eigenvalues found by power iteration on A^2")
            return replace(
                refined, iterations=probe.iterations + refined.iterations
            )

    logger.debug("falling back to complex power iteration")
    return power_method_complex(a, None if y is None else y.copy(), max_iters)

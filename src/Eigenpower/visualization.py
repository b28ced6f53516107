"""
Functions to visualize matrices and eigenvalue results.
"""

from __future__ import annotations

from collections import abc

import numpy as np
from matplotlib import axes, colors, figure
from matplotlib import pyplot as plt

from .matrix import Matrix
from .power_iteration import Eigenpair, EigenResult

SIZE_SCALING = 2


def _figure_and_axes(ax: axes.Axes | None) -> tuple[figure.Figure, axes.Axes]:
    if ax is None:
        fig, ax = plt.subplots(
            layout="tight", figsize=(8.27 / SIZE_SCALING, 8.27 / SIZE_SCALING)
        )
        return fig, ax
    return ax.get_figure(), ax


def plot_matrix(matrix: Matrix, ax: axes.Axes | None = None) -> figure.Figure:
    """Plot the magnitude of every element of a matrix."""

    fig, ax = _figure_and_axes(ax)

    values = np.abs(matrix.to_numpy())
    norm = colors.Normalize(vmin=0, vmax=values.max() if values.size else 1)
    image = ax.imshow(values, cmap=plt.cm.viridis, norm=norm)
    fig.colorbar(image, ax=ax, orientation="vertical")

    ax.set_xlabel("Column")
    ax.set_ylabel("Row")

    return fig


def plot_eigenvalues(
    result: EigenResult,
    ax: axes.Axes | None = None,
    reference: abc.Iterable[complex] | None = None,
) -> figure.Figure:
    """Plot eigenvalues on the complex plane.

    Parameters
    ----------
    result: EigenResult
        Output of one of the power iteration methods.
    ax: matplotlib Axes, optional
        If not given, a new figure is created.
    reference: iterable of complex, optional
        Eigenvalues computed by other means (e.g. numpy.linalg.eigvals),
        drawn as hollow markers.
    """

    fig, ax = _figure_and_axes(ax)

    if reference is not None:
        ref = np.asarray(list(reference), dtype=np.complex128)
        ax.scatter(
            ref.real, ref.imag, facecolors="none", edgecolors="gray", label="reference"
        )

    values = np.asarray(result.eigenvalues, dtype=np.complex128)
    ax.scatter(values.real, values.imag, c="r", zorder=2, label="power iteration")

    ax.axhline(y=0, ls=":", c="k")
    ax.axvline(x=0, ls=":", c="k")
    ax.set_xlabel("Re")
    ax.set_ylabel("Im")
    ax.set_aspect("equal", adjustable="datalim")
    ax.legend()

    status = "converged" if result.converged else "not converged"
    ax.set_title(f"method {result.method}, {status}")

    return fig


def plot_eigenvector(pair: Eigenpair, ax: axes.Axes | None = None) -> figure.Figure:
    """Plot real and imaginary parts of an eigenvector against the component index."""

    fig, ax = _figure_and_axes(ax)

    vector = pair.vector.to_numpy().ravel()
    index = np.arange(vector.size)

    ax.plot(index, vector.real, ".-", label="Re")
    ax.plot(index, vector.imag, ".-", label="Im")
    ax.axhline(y=0, ls=":", c="gray")
    ax.set_xlabel("Component")
    ax.set_title(f"eigenvalue {pair.value:.4g}")
    ax.legend()

    return fig

import numpy as np
import pytest
from matplotlib import pyplot as plt

from Eigenpower import Matrix, power_method_eigenvalues
from Eigenpower import visualization


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def rotation_result():
    return power_method_eigenvalues(Matrix([[0, 1], [-1, 0]]), force_method=2)


def test_plot_matrix():
    fig = visualization.plot_matrix(Matrix([[1, -2], [3j, 0]]))
    # Matrix axes and colorbar axes.
    assert len(fig.axes) == 2


def test_plot_eigenvalues(rotation_result):
    reference = np.linalg.eigvals(np.array([[0, 1], [-1, 0]]))
    fig = visualization.plot_eigenvalues(rotation_result, reference=reference)
    ax = fig.axes[0]
    assert ax.get_title() == "method 2, converged"
    assert ax.get_xlabel() == "Re"


def test_plot_eigenvalues_on_existing_axes(rotation_result):
    fig, ax = plt.subplots()
    assert visualization.plot_eigenvalues(rotation_result, ax=ax) is fig


def test_plot_eigenvector(rotation_result):
    fig = visualization.plot_eigenvector(rotation_result[0])
    lines = fig.axes[0].get_lines()
    re, im = lines[0].get_ydata(), lines[1].get_ydata()
    vector = rotation_result[0].vector.to_numpy().ravel()
    np.testing.assert_allclose(re, vector.real)
    np.testing.assert_allclose(im, vector.imag)

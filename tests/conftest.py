import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from Eigenpower import config  # noqa: E402


@pytest.fixture(autouse=True)
def reset_numeric_settings():
    config.reset()
    yield
    config.reset()

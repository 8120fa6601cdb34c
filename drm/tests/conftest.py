import itertools

import numpy as np
import pytest
import scipy.sparse as ss

import drm
from drm.core.base import DrmLike
from drm.engine import LocalContext


def pytest_configure(config):
    rng = np.random.default_rng()
    randomly = config.getoption("--randomly", False)
    partitions = config.getoption("--partitions", None)
    if partitions is None:
        partitions = int(rng.integers(1, 6)) if randomly else 3
    runslow = config.getoption("--runslow", False)
    if runslow is None:
        # Add a small amount of randomization to be safer
        runslow = rng.random() < 0.05 if randomly else False
    config.runslow = runslow

    drm.config.set({"engine.default_partitions": partitions})
    print(f"Running tests with partitions={partitions}, runslow={runslow}")


def pytest_runtest_setup(item):
    if "slow" in item.keywords and not item.config.runslow:
        pytest.skip("need --runslow option to run")


@pytest.fixture(autouse=True)
def _reset_name_counters():
    """Reset automatic names for each test for easier comparison of recorded calls."""
    DrmLike._name_counter = itertools.count()


@pytest.fixture(scope="session", autouse=True)
def ic():  # pragma: no cover (debug)
    """Make `ic` available everywhere during testing for easier debugging."""
    try:
        import icecream
    except ImportError:
        return
    icecream.install()
    return icecream.ic


@pytest.fixture
def context():
    return LocalContext()


def sparse_row(values):
    return ss.csr_array(np.array(values, dtype=np.float64)[None, :])


def dense_row(values):
    return np.array(values, dtype=np.float64)


def int_keyed(context, keys, width=3, *, num_slices=2, **kwargs):
    """Matrix whose row ``k`` is ``[k, k+1, ...]`` (``width`` values) for each key in ``keys``."""
    data = [(k, dense_row(np.arange(width) + k)) for k in keys]
    return drm.CheckpointedMatrix(context.parallelize(data, num_slices), key_kind="int", **kwargs)

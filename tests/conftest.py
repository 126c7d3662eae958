"""Shared test configuration for batchpredict."""

from __future__ import annotations

import numpy as np
import pytest

from batchpredict.core.config import DEFAULT_GRAIN_SIZE, DEFAULT_N_JOBS, config_context


@pytest.fixture(autouse=True)
def default_parallel_config():
    """Run every test under the default parallel settings and restore them afterwards."""
    with config_context(n_jobs=DEFAULT_N_JOBS, grain_size=DEFAULT_GRAIN_SIZE):
        yield


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def inputs(rng):
    return rng.normal(size=(37, 4))

"""Pytest configuration and shared fixtures for molheat tests.

This module provides:
- A deterministic numpy RNG fixture
- Boundary data for the sin(pi x) benchmark problem
- Log-level reset so tests touching logging do not leak configuration
"""

import math
import os

import numpy as np
import pytest

from molheat.logging import configure_logging
from molheat.pde import BoundaryFunctions


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture
def sine_functions() -> BoundaryFunctions:
    """u(x, 0) = sin(pi x) with homogeneous Dirichlet data."""
    return BoundaryFunctions(
        initial=lambda x: math.sin(math.pi * x),
        left=lambda t: 0.0,
        right=lambda t: 0.0,
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the default WARNING level on stderr after each test."""
    yield
    configure_logging(level="WARNING")

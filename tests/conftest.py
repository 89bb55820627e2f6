"""
Pytest configuration and fixtures for reproducible testing.

This file provides centralized test configuration including:
- Random seed management for reproducibility
- Injectable random generators for the Gibbs sampler
- Shared example networks
"""
import os
import sys

import pytest
import numpy as np

# Import from src/ without requiring an install
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

from binary_bayesnet.example_networks import alarm_network, reference_network
from binary_bayesnet.network import BayesianNetwork


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running convergence tests")


@pytest.fixture(scope="session", autouse=True)
def set_random_seeds():
    """Set the global NumPy seed once per test session."""
    np.random.seed(42)
    yield


@pytest.fixture(scope="function")
def rng():
    """Fresh seeded Generator for each test.

    Example:
        def test_something(rng):
            sampler = GibbsSampler(network, config, rng=rng)
    """
    return np.random.default_rng(42)


@pytest.fixture
def reference_net():
    return reference_network()


@pytest.fixture
def alarm_net():
    return alarm_network()


@pytest.fixture
def single_net():
    """One root variable A with P(A=true) = 0.3."""
    return BayesianNetwork('single').add_variable('A', [0.3])

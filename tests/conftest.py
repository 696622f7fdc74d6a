"""
Shared fixtures: synthetic return and price series with known parameters.
"""

import numpy as np
import pandas as pd
import pytest


def _simulate_garch(n, mu, omega, alpha, beta, nu=None, seed=42, initial_variance=None):
    rng = np.random.default_rng(seed)
    if nu is None:
        z = rng.standard_normal(n)
    else:
        z = rng.standard_t(nu, size=n) * np.sqrt((nu - 2) / nu)

    returns = np.empty(n)
    sigma2 = omega / (1 - alpha - beta) if initial_variance is None else initial_variance
    for i in range(n):
        eps = np.sqrt(sigma2) * z[i]
        returns[i] = mu + eps
        sigma2 = omega + alpha * eps**2 + beta * sigma2

    index = pd.bdate_range("2010-01-04", periods=n)
    return pd.Series(returns, index=index, name="Returns")


@pytest.fixture(scope="session")
def simulate_garch():
    """Factory for GARCH(1,1) return series."""
    return _simulate_garch


@pytest.fixture
def normal_returns():
    """Synthetic returns from a known normal distribution."""
    np.random.seed(42)
    return np.random.normal(loc=0.0005, scale=0.015, size=2000)


@pytest.fixture
def fat_tail_returns():
    """Synthetic returns with fat tails (Student-t, df=4)."""
    np.random.seed(42)
    return np.random.standard_t(df=4, size=2000) * 0.015


@pytest.fixture(scope="session")
def commodity_prices(simulate_garch):
    """Daily prices driven by GARCH(1,1) Student-t log-returns."""
    returns = simulate_garch(1500, mu=0.0003, omega=2e-6, alpha=0.08, beta=0.90, nu=6, seed=7)
    prices = 60.0 * np.exp(returns.cumsum())
    start = pd.Series([60.0], index=[returns.index[0] - pd.offsets.BDay()])
    return pd.concat([start, prices]).rename("Close")

"""
Unit Tests -- Historical, Normal and Student-t VaR / ES
"""

import numpy as np
import pytest
from scipy.stats import norm, t

from tailvar.errors import InsufficientDataError, ParameterDomainError
from tailvar.parametric import (HistoricalSimulation, StudentTFit, fit_normal,
                                fit_student_t, t_tail_mean)


@pytest.fixture(scope="module")
def large_t_sample():
    """Scaled Student-t returns with known parameters."""
    rng = np.random.default_rng(42)
    return 0.0005 + 0.01 * rng.standard_t(5, size=100_000)


@pytest.fixture(scope="module")
def t_fit(large_t_sample):
    return fit_student_t(large_t_sample)


# ---------------------------------------------------------------------------
# Historical Simulation
# ---------------------------------------------------------------------------
class TestHistoricalSimulation:

    def test_var_matches_percentile(self, normal_returns):
        model = HistoricalSimulation(normal_returns)
        np.testing.assert_allclose(model.var(0.05), -np.percentile(normal_returns, 5))

    def test_es_is_tail_mean(self, normal_returns):
        model = HistoricalSimulation(normal_returns)
        var = model.var(0.05)
        expected = -normal_returns[normal_returns <= -var].mean()
        np.testing.assert_allclose(model.es(0.05), expected)
        assert model.es(0.05) >= var

    def test_var_decreases_with_alpha(self, normal_returns):
        model = HistoricalSimulation(normal_returns)
        assert model.var(0.01) > model.var(0.05) > model.var(0.10)

    def test_alpha_domain(self, normal_returns):
        model = HistoricalSimulation(normal_returns)
        for alpha in (0.0, 1.0, -0.1, 1.5):
            with pytest.raises(ParameterDomainError):
                model.var(alpha)


# ---------------------------------------------------------------------------
# Normal Model
# ---------------------------------------------------------------------------
class TestNormal:

    def test_closed_form(self, normal_returns):
        fit = fit_normal(normal_returns)
        mu, sigma = normal_returns.mean(), normal_returns.std(ddof=1)
        np.testing.assert_allclose(fit.var(0.01), -(mu + sigma * norm.ppf(0.01)))
        np.testing.assert_allclose(fit.es(0.01), -(mu - sigma * norm.pdf(norm.ppf(0.01)) / 0.01))

    def test_es_exceeds_var(self, normal_returns):
        fit = fit_normal(normal_returns)
        assert fit.es(0.01) > fit.var(0.01)

    def test_fit_is_read_only(self, normal_returns):
        fit = fit_normal(normal_returns)
        with pytest.raises(TypeError):
            fit.params["mu"] = 0.0

    def test_too_short(self):
        with pytest.raises(InsufficientDataError):
            fit_normal([0.01])


# ---------------------------------------------------------------------------
# Student-t Model
# ---------------------------------------------------------------------------
class TestStudentT:

    def test_parameter_recovery(self, t_fit):
        assert t_fit.converged
        np.testing.assert_allclose(t_fit["mu"], 0.0005, atol=2e-4)
        np.testing.assert_allclose(t_fit["sigma"], 0.01, rtol=0.03)
        np.testing.assert_allclose(t_fit["nu"], 5.0, atol=0.5)

    def test_var_is_fitted_quantile(self, t_fit):
        expected = -t.ppf(0.01, t_fit["nu"], loc=t_fit["mu"], scale=t_fit["sigma"])
        np.testing.assert_allclose(t_fit.var(0.01), expected)

    def test_es_matches_closed_form(self, t_fit):
        expected = -(t_fit["mu"] + t_fit["sigma"] * t_tail_mean(0.01, t_fit["nu"]))
        np.testing.assert_allclose(t_fit.es(0.01), expected, rtol=1e-5)

    def test_var_decreases_with_alpha(self, t_fit):
        assert t_fit.var(0.001) > t_fit.var(0.01) > t_fit.var(0.05)

    def test_heavier_tail_than_normal(self, fat_tail_returns):
        t_model = fit_student_t(fat_tail_returns)
        normal_model = fit_normal(fat_tail_returns)
        assert t_model.var(0.001) > normal_model.var(0.001)

    def test_known_parameters(self):
        fit = StudentTFit(model="Student-t", params={"mu": 0.0, "sigma": 1.0, "nu": 4.0},
                          log_likelihood=0.0, converged=True)
        np.testing.assert_allclose(fit.var(0.05), -t.ppf(0.05, 4.0))

    def test_too_short(self):
        with pytest.raises(InsufficientDataError):
            fit_student_t(np.zeros(5))

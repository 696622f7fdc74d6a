"""
Unit Tests -- Dynamic (GARCH-Based) VaR / ES and Bootstrap
"""

import numpy as np
import pytest
from scipy.stats import t

from tailvar.dynamic import DynamicVaRCalculator
from tailvar.errors import ParameterDomainError
from tailvar.parametric import t_tail_mean
from tailvar.volatility import GARCHFit, conditional_volatility

PARAMS = {"mu": 0.0003, "omega": 2e-6, "alpha": 0.08, "beta": 0.90}


@pytest.fixture(scope="module")
def returns(simulate_garch):
    return simulate_garch(3000, mu=0.0003, omega=2e-6, alpha=0.08, beta=0.90, nu=6, seed=3)


@pytest.fixture(scope="module")
def normal_calculator(returns):
    fit = GARCHFit(model="GARCH-normal", params=PARAMS, log_likelihood=0.0, converged=True,
                   innovation="normal", n_observations=len(returns))
    return DynamicVaRCalculator(fit, conditional_volatility(fit, returns))


@pytest.fixture(scope="module")
def t_calculator(returns):
    fit = GARCHFit(model="GARCH-t", params={**PARAMS, "nu": 6.0}, log_likelihood=0.0,
                   converged=True, innovation="t", n_observations=len(returns))
    return DynamicVaRCalculator(fit, conditional_volatility(fit, returns))


# ---------------------------------------------------------------------------
# Filter-based VaR / ES
# ---------------------------------------------------------------------------
class TestFilterVaR:

    def test_result_columns(self, t_calculator, returns):
        result_data, next_day_var = t_calculator.filter_var(alpha=0.01)
        assert list(result_data.columns) == ["Returns", "Volatility", "Innovations",
                                             "VaR", "ES", "VaR Violation"]
        assert len(result_data) == len(returns)
        np.testing.assert_allclose(next_day_var, t_calculator.var(0.01))

    def test_student_t_quantile(self, t_calculator):
        x_alpha = t.ppf(0.01, 6.0) * np.sqrt(4.0 / 6.0)
        np.testing.assert_allclose(t_calculator.innovation_quantile(0.01), x_alpha)

        expected = -(PARAMS["mu"] + x_alpha * t_calculator.path.next_volatility)
        np.testing.assert_allclose(t_calculator.var(0.01), expected)

    def test_student_t_es(self, t_calculator):
        tail_mean = t_tail_mean(0.01, 6.0) * np.sqrt(4.0 / 6.0)
        expected = -(PARAMS["mu"] + tail_mean * t_calculator.path.next_volatility)
        np.testing.assert_allclose(t_calculator.es(0.01), expected)

    def test_normal_filter_uses_residual_quantile(self, normal_calculator):
        innovations = normal_calculator.path.innovations.values
        np.testing.assert_allclose(normal_calculator.innovation_quantile(0.05),
                                   np.percentile(innovations, 5))

    def test_es_exceeds_var(self, normal_calculator, t_calculator):
        for calculator in (normal_calculator, t_calculator):
            result_data, _ = calculator.filter_var(alpha=0.01)
            assert (result_data["ES"] >= result_data["VaR"]).all()
            assert calculator.es(0.01) > calculator.var(0.01)

    def test_var_decreases_with_alpha(self, normal_calculator, t_calculator):
        for calculator in (normal_calculator, t_calculator):
            assert calculator.var(0.01) > calculator.var(0.05) > calculator.var(0.10)

    def test_violation_rate_near_alpha(self, t_calculator):
        result_data, _ = t_calculator.filter_var(alpha=0.05)
        np.testing.assert_allclose(result_data["VaR Violation"].mean(), 0.05, atol=0.015)

    def test_model_name(self, t_calculator):
        assert t_calculator.model == "GARCH-t (filter)"


# ---------------------------------------------------------------------------
# Bootstrap VaR / ES
# ---------------------------------------------------------------------------
class TestBootstrap:

    def test_same_seed_same_outcomes(self, normal_calculator):
        first = normal_calculator.bootstrap(n_paths=10_000, seed=100)
        second = normal_calculator.bootstrap(n_paths=10_000, seed=100)
        np.testing.assert_array_equal(first.outcomes, second.outcomes)

    def test_different_seed_different_outcomes(self, normal_calculator):
        first = normal_calculator.bootstrap(n_paths=10_000, seed=100)
        second = normal_calculator.bootstrap(n_paths=10_000, seed=101)
        assert not np.array_equal(first.outcomes, second.outcomes)

    def test_independent_of_worker_count(self, t_calculator):
        sequential = t_calculator.bootstrap(n_paths=20_000, seed=7, shards=4, max_workers=1)
        threaded = t_calculator.bootstrap(n_paths=20_000, seed=7, shards=4, max_workers=4)
        np.testing.assert_array_equal(sequential.outcomes, threaded.outcomes)
        assert sequential.var(0.01) == threaded.var(0.01)

    def test_close_to_filter(self, normal_calculator, t_calculator):
        for calculator in (normal_calculator, t_calculator):
            forecast = calculator.bootstrap(n_paths=200_000, seed=100)
            np.testing.assert_allclose(forecast.var(0.05), calculator.var(0.05), rtol=0.03)

    def test_empirical_var_and_es(self, t_calculator):
        forecast = t_calculator.bootstrap(n_paths=50_000, seed=100)
        var = forecast.var(0.01)
        np.testing.assert_allclose(var, -np.percentile(forecast.outcomes, 1))
        np.testing.assert_allclose(forecast.es(0.01),
                                   -forecast.outcomes[forecast.outcomes <= -var].mean())
        assert forecast.model == "GARCH-t (bootstrap)"
        assert len(forecast.outcomes) == 50_000

    def test_var_decreases_with_alpha(self, normal_calculator, t_calculator):
        for calculator in (normal_calculator, t_calculator):
            forecast = calculator.bootstrap(n_paths=50_000, seed=100)
            assert forecast.var(0.001) >= forecast.var(0.01) >= forecast.var(0.05)

    def test_invalid_paths(self, t_calculator):
        with pytest.raises(ParameterDomainError):
            t_calculator.bootstrap(n_paths=0)
        with pytest.raises(ParameterDomainError):
            t_calculator.bootstrap(n_paths=10, shards=20)

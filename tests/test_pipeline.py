"""
Unit Tests -- End-to-End Risk Pipeline
"""

import numpy as np
import pytest

from tailvar.config import RiskConfig
from tailvar.errors import ThresholdError
from tailvar.pipeline import fit_models, run_risk_report
from tailvar.returns import log_returns

MODELS = ["Historical", "Normal", "Student-t", "GPD", "GEV",
          "GARCH-t (filter)", "GARCH-t (bootstrap)"]


@pytest.fixture(scope="module")
def config():
    return RiskConfig(bootstrap_paths=20_000)


@pytest.fixture(scope="module")
def report(commodity_prices, config):
    return run_risk_report(commodity_prices, config)


class TestRunRiskReport:

    def test_all_models_in_order(self, report):
        assert list(report) == MODELS

    def test_positive_var_and_es_not_below_var(self, report):
        for estimate in report.values():
            assert estimate.var > 0
            assert estimate.es >= estimate.var
            assert estimate.alpha == 0.01

    def test_heavy_tail_models_above_normal(self, report):
        assert report["Student-t"].var > report["Normal"].var * 0.95
        assert report["GPD"].var > report["Normal"].var * 0.95

    def test_mapping_config(self, commodity_prices, report):
        again = run_risk_report(commodity_prices, {"bootstrapPaths": 20_000})
        assert again.to_frame().equals(report.to_frame())

    def test_normal_innovations(self, commodity_prices):
        config = RiskConfig(bootstrap_paths=5_000, innovation_distribution="normal")
        report = run_risk_report(commodity_prices, config)
        assert "GARCH-normal (filter)" in report
        assert "GARCH-normal (bootstrap)" in report


class TestFitModels:

    def test_thread_pool_gives_same_report(self, commodity_prices, report):
        config = RiskConfig(bootstrap_paths=20_000, max_workers=4)
        models = fit_models(log_returns(commodity_prices), config)
        assert list(models) == MODELS
        for name in MODELS:
            np.testing.assert_allclose(models[name].var(0.01), report[name].var)

    def test_fit_failure_tagged(self, commodity_prices):
        config = RiskConfig(threshold=1.0, bootstrap_paths=1_000)
        with pytest.raises(ThresholdError) as info:
            run_risk_report(commodity_prices, config)
        assert info.value.model == "GPD"

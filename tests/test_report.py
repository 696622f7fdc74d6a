"""
Unit Tests -- Risk Report Aggregation
"""

import numpy as np
import pytest

from tailvar.errors import ParameterDomainError, UndefinedMomentError
from tailvar.evt import GPDFit
from tailvar.parametric import HistoricalSimulation, fit_normal
from tailvar.report import RiskReport, build_report


def heavy_tail_fit():
    return GPDFit(model="GPD", params={"sigma": 0.01, "xi": 1.2}, log_likelihood=0.0,
                  converged=True, threshold=0.02, n_exceedances=50, n_observations=1000)


class TestBuildReport:

    def test_entries_match_models(self, normal_returns):
        models = {"Historical": HistoricalSimulation(normal_returns), "Normal": fit_normal(normal_returns)}
        report = build_report(models, alpha=0.01)

        assert isinstance(report, RiskReport)
        assert list(report) == ["Historical", "Normal"]
        assert report["Normal"].var == models["Normal"].var(0.01)
        assert report["Normal"].es == models["Normal"].es(0.01)
        assert report["Historical"].alpha == 0.01

    def test_accepts_pairs(self, normal_returns):
        report = build_report([("Normal", fit_normal(normal_returns))], alpha=0.05)
        assert len(report) == 1
        assert report.alpha == 0.05

    def test_to_frame(self, normal_returns):
        report = build_report({"Normal": fit_normal(normal_returns)})
        frame = report.to_frame()
        assert list(frame.columns) == ["VaR", "ES"]
        assert frame.index.name == "Model"
        np.testing.assert_allclose(frame.loc["Normal", "VaR"], report["Normal"].var)

    def test_failure_tagged_with_model_name(self, normal_returns):
        models = {"Normal": fit_normal(normal_returns), "Heavy tail": heavy_tail_fit()}
        with pytest.raises(UndefinedMomentError) as info:
            build_report(models)
        assert info.value.model == "Heavy tail"
        assert str(info.value).startswith("[Heavy tail]")

    def test_alpha_domain(self, normal_returns):
        with pytest.raises(ParameterDomainError):
            build_report({"Normal": fit_normal(normal_returns)}, alpha=1.0)

    def test_estimates_are_frozen(self, normal_returns):
        report = build_report({"Normal": fit_normal(normal_returns)})
        with pytest.raises(AttributeError):
            report["Normal"].var = 0.0

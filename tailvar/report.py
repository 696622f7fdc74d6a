"""
Risk Report Module
------------------

Collects VaR and ES estimates from any set of fitted models into one
comparison structure for a single exceedance probability.

A model here is anything exposing var(alpha) and es(alpha): the fit objects of
the parametric, EVT and block-maxima modules, the filter-based dynamic
calculator and bootstrap forecasts.

Created
-------
October 2026

Contents
--------
- RiskReport: Read-only mapping from model name to RiskEstimate
- build_report: Evaluate every model at alpha and assemble a RiskReport
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from collections.abc import Mapping

import pandas as pd

from .errors import TailVarError
from .fits import RiskEstimate, check_alpha


#----------------------------------------------------------
# Risk Report
#----------------------------------------------------------
class RiskReport(Mapping):
    """
    Mapping from model name to RiskEstimate at one exceedance probability.

    The insertion order of the models is kept, so tables rendered from the
    report are stable.
    """

    def __init__(self, alpha, estimates):
        self.alpha = check_alpha(alpha, "RiskReport")
        self._estimates = dict(estimates)

    def __getitem__(self, name):
        return self._estimates[name]

    def __iter__(self):
        return iter(self._estimates)

    def __len__(self):
        return len(self._estimates)

    def __repr__(self):
        return f"RiskReport(alpha={self.alpha}, models={list(self._estimates)})"

    def to_frame(self):
        """
        Tabular view of the report.

        Returns
        -------
        pd.DataFrame
            Indexed by model name, with columns 'VaR' and 'ES' (decimal losses).
        """
        return pd.DataFrame(
            {"VaR": [e.var for e in self._estimates.values()],
             "ES": [e.es for e in self._estimates.values()]},
            index=pd.Index(list(self._estimates), name="Model")
        )


#----------------------------------------------------------
# Report Assembly
#----------------------------------------------------------
def build_report(models, alpha=0.01):
    """
    Main
    ----
    Evaluate VaR and ES of every model at alpha and collect them in a RiskReport.

    Parameters
    ----------
    models : Mapping or iterable of (name, model) pairs
        Models exposing var(alpha) and es(alpha).
    alpha : float, optional
        Exceedance probability. Default is 0.01.

    Returns
    -------
    RiskReport

    Raises
    ------
    TailVarError
        The first model-level failure, with its `model` attribute set to the
        offending model name.
    """
    alpha = check_alpha(alpha, "RiskReport")
    items = models.items() if isinstance(models, Mapping) else models
    estimates = {}

    for name, model in items:
        try:
            estimates[name] = RiskEstimate(model=name, alpha=alpha,
                                           var=float(model.var(alpha)), es=float(model.es(alpha)))
        except TailVarError as exc:
            exc.model = name
            raise

    return RiskReport(alpha, estimates)

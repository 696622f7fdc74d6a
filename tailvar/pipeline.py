"""
Risk Pipeline Module
--------------------

Runs the full estimation chain on a price series: log-returns, the static
models (historical, Normal, Student-t), the EVT models (GPD over a threshold,
GEV over block maxima) and the GARCH(1,1) dynamic models, and collects their
VaR and ES in one RiskReport.

Every fit is a pure function of the read-only return series, so independent
fits may run on a thread pool (config.max_workers). The order of the models in
the report does not depend on the order in which fits finish.

Created
-------
October 2026

Contents
--------
- fit_models: Fit every model of the comparison on a return series
- run_risk_report: Prices and configuration to RiskReport
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from concurrent.futures import ThreadPoolExecutor

import pandas as pd

from .block_maxima import fit_gev
from .config import RiskConfig
from .dynamic import DynamicVaRCalculator
from .errors import TailVarError
from .evt import fit_gpd, threshold_from_percentile
from .parametric import HistoricalSimulation, fit_normal, fit_student_t
from .report import build_report
from .returns import log_returns, losses
from .volatility import conditional_volatility, fit_garch


def _dynamic_models(returns, config):
    innovation = "t" if config.innovation_distribution == "student-t" else "normal"
    fit = fit_garch(returns, innovation=innovation)
    calculator = DynamicVaRCalculator(fit, conditional_volatility(fit, returns))
    forecast = calculator.bootstrap(n_paths=config.bootstrap_paths, seed=config.random_seed,
                                    shards=config.bootstrap_shards, max_workers=config.max_workers)
    return [(calculator.model, calculator), (forecast.model, forecast)]


def _run(name, task):
    try:
        return task()
    except TailVarError as exc:
        exc.model = exc.model or name
        raise


#----------------------------------------------------------
# Model Fitting
#----------------------------------------------------------
def fit_models(returns, config=None):
    """
    Main
    ----
    Fit every model of the comparison on a return series.

    Parameters
    ----------
    returns : pd.Series
        Daily log-return series in decimal format.
    config : RiskConfig, optional
        Pipeline options. Default is RiskConfig().

    Returns
    -------
    dict
        Model name -> fitted model exposing var(alpha) and es(alpha), in the
        order Historical, Normal, Student-t, GPD, GEV, GARCH filter, GARCH bootstrap.

    Raises
    ------
    TailVarError
        The first failing fit (in report order), tagged with its model name.
    """
    config = config or RiskConfig()
    returns = pd.Series(returns, dtype=float)
    loss_series = losses(returns)

    if config.threshold is None:
        threshold = threshold_from_percentile(loss_series, config.threshold_percentile)
    else:
        threshold = config.threshold

    tasks = [
        ("Historical", lambda: [("Historical", HistoricalSimulation(returns.values))]),
        ("Normal", lambda: [("Normal", fit_normal(returns))]),
        ("Student-t", lambda: [("Student-t", fit_student_t(returns))]),
        ("GPD", lambda: [("GPD", fit_gpd(loss_series, threshold, config.min_exceedances))]),
        ("GEV", lambda: [("GEV", fit_gev(returns, config.block_length))]),
        ("GARCH", lambda: _dynamic_models(returns, config)),
    ]

    if config.max_workers is None or config.max_workers <= 1:
        results = [_run(name, task) for name, task in tasks]
    else:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            futures = [executor.submit(_run, name, task) for name, task in tasks]
            results = [future.result() for future in futures]

    return {name: model for entries in results for name, model in entries}


#----------------------------------------------------------
# Full Report
#----------------------------------------------------------
def run_risk_report(prices, config=None):
    """
    Main
    ----
    Estimate VaR and ES of every model from a price series.

    Parameters
    ----------
    prices : pd.Series
        Cleaned, date-indexed, strictly positive prices.
    config : RiskConfig or Mapping, optional
        Pipeline options; a mapping is passed to RiskConfig.from_mapping.
        Default is RiskConfig().

    Returns
    -------
    RiskReport
        VaR and ES per model at config.alpha.
    """
    if config is None:
        config = RiskConfig()
    elif not isinstance(config, RiskConfig):
        config = RiskConfig.from_mapping(config)

    returns = log_returns(prices)
    models = fit_models(returns, config)
    return build_report(models, config.alpha)

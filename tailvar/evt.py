"""
Extreme Value Theory (EVT) Module for VaR and ES
------------------------------------------------

This module implements the Peaks Over Threshold (POT) method: threshold
diagnostics on the loss tail, maximum-likelihood fitting of the Generalized
Pareto Distribution (GPD) to threshold exceedances, and the POT formulas for
Value-at-Risk (VaR) and Expected Shortfall (ES).

Threshold selection is a manual decision. The diagnostic functions return the
coordinates of the Pareto quantile plot, the generalized quantile plot, the
Hill plot and the mean-excess function; the caller inspects them and picks u
where the tail-index estimates stabilize and the mean-excess function is linear
with positive slope. No function here chooses u automatically.

Created
-------
October 2026

Contents
--------
- pareto_quantile_plot: Pareto quantile plot coordinates
- generalized_quantile_plot: Generalized quantile plot coordinates (UH statistics)
- hill_plot: Hill tail-index estimates by number of order statistics
- mean_excess: Empirical mean-excess function on a threshold grid
- threshold_from_percentile: Threshold at a caller-chosen loss percentile
- gpd_cdf / gpd_ppf: GPD distribution function and its inverse
- fit_gpd / GPDFit: GPD tail fit with POT VaR and ES

Notes
-----
- Losses are negated daily returns in decimal format (e.g., 0.01 = 1% loss).
- The quantile plots and mean-excess function use strictly positive losses only.
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import warnings
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy.stats import genpareto

from .errors import (ConvergenceError, FitError, InsufficientDataError,
                     ParameterDomainError, ThresholdError, UndefinedMomentError)
from .fits import ModelFit, check_alpha
from .mle import MLEOptimizer


#----------------------------------------------------------
# Sorted Positive Losses (Shared Function)
#----------------------------------------------------------
def _descending_positive_losses(losses):
    values = np.asarray(losses, dtype=float)
    values = values[np.isfinite(values) & (values > 0)]
    if values.size < 2:
        raise InsufficientDataError("At least two positive losses are required.", model="EVT diagnostics")
    return np.sort(values)[::-1]


#----------------------------------------------------------
# Pareto Quantile Plot
#----------------------------------------------------------
def pareto_quantile_plot(losses):
    """
    Main
    ----
    Coordinates of the Pareto quantile plot.

    With X_(1) <= ... <= X_(n) the positive losses, returns the points
    (ln((n+1)/j), ln X_(n-j+1)) for j = 1..n. A linear upper part indicates a
    Pareto-type tail, its slope estimates the extreme value index.

    Parameters
    ----------
    losses : pd.Series or array-like
        Loss series (negated returns). Non-positive losses are ignored.

    Returns
    -------
    pd.DataFrame
        Indexed by j, with columns 'Theoretical' and 'Empirical'.
    """
    descending = _descending_positive_losses(losses)
    n = descending.size
    j = np.arange(1, n + 1)

    return pd.DataFrame({
        "Theoretical": np.log((n + 1) / j),
        "Empirical": np.log(descending)
    }, index=pd.Index(j, name="j"))


#----------------------------------------------------------
# Hill Estimator (Shared by the Generalized Quantile Plot)
#----------------------------------------------------------
def _hill_statistics(descending):
    # H_j = (1/j) sum_{i<=j} ln X_(n-i+1) - ln X_(n-j), j = 1..n-1
    log_x = np.log(descending)
    j = np.arange(1, descending.size)
    return np.cumsum(log_x)[:-1] / j - log_x[1:]


def hill_plot(losses):
    """
    Hill estimates of the extreme value index using the j largest losses.

    Parameters
    ----------
    losses : pd.Series or array-like
        Loss series (negated returns). Non-positive losses are ignored.

    Returns
    -------
    pd.DataFrame
        Indexed by j = 1..n-1, with columns 'Hill' (estimate of xi) and
        'Tail Index' (1 / Hill).
    """
    descending = _descending_positive_losses(losses)
    hill = _hill_statistics(descending)

    with np.errstate(divide="ignore"):
        tail_index = 1.0 / hill

    return pd.DataFrame({
        "Hill": hill,
        "Tail Index": tail_index
    }, index=pd.Index(np.arange(1, descending.size), name="j"))


#----------------------------------------------------------
# Generalized Quantile Plot
#----------------------------------------------------------
def generalized_quantile_plot(losses):
    """
    Main
    ----
    Coordinates of the generalized quantile plot.

    Returns the points (ln((n+1)/(j+1)), ln UH_j) for j = 1..n-1, where
    UH_j = X_(n-j) * H_j and H_j is the Hill statistic on the j largest losses.
    The slope of the ultimately linear part estimates xi for any sign of xi.

    Parameters
    ----------
    losses : pd.Series or array-like
        Loss series (negated returns). Non-positive losses are ignored.

    Returns
    -------
    pd.DataFrame
        Indexed by j, with columns 'Theoretical' and 'Empirical'.
        Empirical is NaN where UH_j is zero (tied order statistics).
    """
    descending = _descending_positive_losses(losses)
    n = descending.size
    j = np.arange(1, n)
    uh = descending[1:] * _hill_statistics(descending)

    with np.errstate(divide="ignore"):
        empirical = np.where(uh > 0, np.log(np.where(uh > 0, uh, 1.0)), np.nan)

    return pd.DataFrame({
        "Theoretical": np.log((n + 1) / (j + 1)),
        "Empirical": empirical
    }, index=pd.Index(j, name="j"))


#----------------------------------------------------------
# Mean-Excess Function
#----------------------------------------------------------
def mean_excess(losses, thresholds=None, upper_quantile=0.99, n_points=100):
    """
    Main
    ----
    Empirical mean-excess function e(u) = E[X - u | X > u].

    Parameters
    ----------
    losses : pd.Series or array-like
        Loss series (negated returns). Non-positive losses are ignored.
    thresholds : array-like, optional
        Candidate thresholds. If None, an evenly spaced grid from the smallest
        positive loss to the upper_quantile of positive losses is used.
    upper_quantile : float, optional
        Upper end of the default grid as a quantile of positive losses. Default is 0.99.
    n_points : int, optional
        Number of grid points of the default grid. Default is 100.

    Returns
    -------
    pd.DataFrame
        Indexed by threshold, with columns:
        - 'Mean Excess': e(u), NaN where no loss exceeds u
        - 'Exceedances': number of losses above u
    """
    descending = _descending_positive_losses(losses)

    if thresholds is None:
        if not 0.0 < upper_quantile < 1.0:
            raise ParameterDomainError("upper_quantile must lie in (0, 1).", model="EVT diagnostics")
        top = np.quantile(descending, upper_quantile)
        thresholds = np.linspace(descending[-1], top, n_points)

    thresholds = np.asarray(thresholds, dtype=float)
    means = []
    counts = []

    for u in thresholds:
        excess = descending[descending > u] - u
        counts.append(excess.size)
        means.append(excess.mean() if excess.size > 0 else np.nan)

    return pd.DataFrame({
        "Mean Excess": means,
        "Exceedances": counts
    }, index=pd.Index(thresholds, name="Threshold"))


#----------------------------------------------------------
# Threshold from a Percentile
#----------------------------------------------------------
def threshold_from_percentile(losses, percentile=90.0, positive_only=True):
    """
    Loss level at a caller-chosen percentile.

    This only translates the caller's percentile choice into a threshold u;
    it does not select the percentile.

    Parameters
    ----------
    losses : pd.Series or array-like
        Loss series (negated returns).
    percentile : float, optional
        Percentile in (0, 100). Default is 90.
    positive_only : bool, optional
        If True, the percentile is taken over strictly positive losses, as in
        the threshold diagnostics. Default is True.

    Returns
    -------
    float
    """
    if not 0.0 < percentile < 100.0:
        raise ParameterDomainError("percentile must lie in (0, 100).", model="GPD")

    values = np.asarray(losses, dtype=float)
    if positive_only:
        values = values[values > 0]
    if values.size == 0:
        raise InsufficientDataError("No losses to take a percentile of.", model="GPD")

    return float(np.percentile(values, percentile))


#----------------------------------------------------------
# GPD Distribution Function and Inverse
#----------------------------------------------------------
def gpd_cdf(x, threshold, sigma, xi):
    """
    G(x) = 1 - (1 + xi (x - u) / sigma)^(-1/xi) for x > u (exponential limit at xi = 0).
    """
    if sigma <= 0:
        raise ParameterDomainError("GPD scale must be positive.", model="GPD")
    return genpareto.cdf(x, xi, loc=threshold, scale=sigma)


def gpd_ppf(p, threshold, sigma, xi):
    """
    Inverse of gpd_cdf: the loss level x > u with G(x) = p.
    """
    if sigma <= 0:
        raise ParameterDomainError("GPD scale must be positive.", model="GPD")
    return genpareto.ppf(p, xi, loc=threshold, scale=sigma)


#----------------------------------------------------------
# GPD Fit
#----------------------------------------------------------
@dataclass(frozen=True)
class GPDFit(ModelFit):
    """
    GPD tail fit with parameters 'sigma' and 'xi' over threshold u.

    Attributes
    ----------
    threshold : float
        Threshold u.
    n_exceedances : int
        Number of losses above u (N_u).
    n_observations : int
        Total number of losses (n).
    """
    threshold: float
    n_exceedances: int
    n_observations: int

    def cdf(self, x):
        return gpd_cdf(x, self.threshold, self["sigma"], self["xi"])

    def ppf(self, p):
        return gpd_ppf(p, self.threshold, self["sigma"], self["xi"])

    def var(self, alpha):
        """
        POT VaR: u + (sigma/xi) * ((n/N_u * alpha)^(-xi) - 1), or
        u - sigma * ln(n/N_u * alpha) when xi = 0.
        """
        alpha = check_alpha(alpha, self.model)
        sigma, xi, u = self["sigma"], self["xi"], self.threshold
        ratio = self.n_observations / self.n_exceedances * alpha

        if abs(xi) < 1e-12:
            return u - sigma * np.log(ratio)
        return u + (sigma / xi) * (ratio ** (-xi) - 1)

    def es(self, alpha):
        """
        POT ES: VaR/(1-xi) + (sigma - xi*u)/(1-xi), defined for xi < 1.
        """
        xi = self["xi"]
        if xi >= 1:
            raise UndefinedMomentError(f"ES is infinite for xi = {xi:.4f} >= 1.", model=self.model)

        var_value = self.var(alpha)
        return var_value / (1 - xi) + (self["sigma"] - xi * self.threshold) / (1 - xi)


def fit_gpd(losses, threshold, min_exceedances=30, optimizer=None):
    """
    Main
    ----
    Fit a Generalized Pareto Distribution to the losses above a threshold.

    Applies the Peaks Over Threshold (POT) method: the exceedances
    Y = X[X > u] - u are fitted by maximum likelihood (scale sigma > 0, shape xi).

    Parameters
    ----------
    losses : pd.Series or array-like
        Loss series (negated returns), all observations.
    threshold : float
        Threshold u chosen by the caller from the diagnostics.
    min_exceedances : int, optional
        Minimum number of exceedances required. Default is 30.
    optimizer : MLEOptimizer, optional
        Optimizer to use. Default is MLEOptimizer().

    Returns
    -------
    GPDFit
        Immutable fit exposing var(alpha) and es(alpha).

    Raises
    ------
    ThresholdError
        If fewer than min_exceedances losses exceed the threshold.
    FitError
        If the likelihood search does not converge.

    Notes
    -----
    - Callers are expected to adjust the threshold and retry on ThresholdError.
    - A warning is issued if xi >= 0.5 (infinite variance of the tail).
    """
    values = np.asarray(losses, dtype=float)
    if np.isnan(values).any():
        warnings.warn("NaNs detected in loss series. Consider handling or dropping missing values.")
        values = values[~np.isnan(values)]

    threshold = float(threshold)
    exceedances = values[values > threshold] - threshold

    if exceedances.size < min_exceedances:
        raise ThresholdError(
            f"Threshold {threshold:.6f} leaves {exceedances.size} exceedances, "
            f"at least {min_exceedances} are required.", model="GPD")

    optimizer = optimizer or MLEOptimizer()

    # Method-of-moments start plus two neutral ones
    mean, var = exceedances.mean(), exceedances.var()
    xi_mom = np.clip(0.5 * (1 - mean**2 / var), -0.4, 0.9)
    sigma_mom = max(0.5 * mean * (1 + mean**2 / var), 1e-8)
    starts = [[sigma_mom, xi_mom], [mean, 0.1], [mean, 0.0]]
    bounds = [(1e-12, None), (-0.95, 3.0)]

    def log_likelihood(params):
        sigma, xi = params
        return genpareto.logpdf(exceedances, xi, scale=sigma).sum()

    try:
        result = optimizer.maximize(log_likelihood, starts, bounds, names=("sigma", "xi"), model="GPD")
    except ConvergenceError as exc:
        raise FitError(f"GPD fit failed: {exc.message}", model="GPD") from exc

    if result.params["xi"] >= 0.5:
        warnings.warn(f"GPD shape xi = {result.params['xi']:.4f} >= 0.5: the tail has infinite variance.")

    return GPDFit(model="GPD", params=result.params, log_likelihood=result.log_likelihood,
                  converged=result.converged, threshold=threshold,
                  n_exceedances=int(exceedances.size), n_observations=int(values.size))

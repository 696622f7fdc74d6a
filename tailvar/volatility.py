"""
GARCH(1,1) Volatility Filter Module
-----------------------------------

Implements the GARCH(1,1) conditional-variance filter, its conditional
log-likelihood under Normal or standardized Student-t innovations, and the
maximum-likelihood estimation of its parameters.

The model is
    r_t = mu + eps_t,  eps_t = sigma_t * z_t,
    sigma_t^2 = omega + alpha * eps_{t-1}^2 + beta * sigma_{t-1}^2,
with z_t i.i.d. with zero mean and unit variance. The filter is started at the
sample variance of the returns (sigma_0^2) and run to t = n, which gives the
one-step-ahead forecast sigma_{n+1}^2.

Created
-------
October 2026

Contents
--------
- garch_filter: Conditional variance path and one-step-ahead forecast
- garch_log_likelihood: Conditional log-likelihood of a parameter vector
- GARCHFit: Fitted parameters (mu, omega, alpha, beta, optionally nu)
- ConditionalVolatilityPath: Volatility and standardized residuals aligned with the returns
- fit_garch: Maximum-likelihood GARCH(1,1) fit with stationarity check
- conditional_volatility: Run a fitted filter over a return series
- arch_reference_fit: The same model estimated with the arch package

Notes
-----
- Returns are scaled by 100 before fitting to improve numerical stability.
  Reported parameters are in decimal units.
- Only fits with alpha + beta < 1 are accepted.
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from dataclasses import dataclass, field

import numpy as np
import pandas as pd
from arch import arch_model
from scipy.signal import lfilter
from scipy.stats import t

from .errors import (ConvergenceError, FitError, InsufficientDataError,
                     NonStationaryFitError, ParameterDomainError)
from .fits import ModelFit
from .mle import MLEOptimizer

SCALE = 100.0
INNOVATIONS = {"normal": "normal", "t": "t", "student-t": "t", "student_t": "t"}


def _innovation_name(innovation):
    try:
        return INNOVATIONS[str(innovation).lower()]
    except KeyError:
        raise ParameterDomainError(
            f"innovation must be one of {sorted(INNOVATIONS)}, got {innovation!r}.", model="GARCH") from None


#----------------------------------------------------------
# GARCH(1,1) Filter
#----------------------------------------------------------
def garch_filter(returns, mu, omega, alpha, beta, initial_variance=None):
    """
    Main
    ----
    Run the GARCH(1,1) variance recursion over a return series.

    Parameters
    ----------
    returns : array-like
        Return series r_0..r_{n-1}.
    mu, omega, alpha, beta : float
        Mean and variance-equation parameters.
    initial_variance : float, optional
        sigma_0^2. Default is the sample variance of the returns.

    Returns
    -------
    sigma2 : np.ndarray
        Conditional variances sigma_0^2..sigma_{n-1}^2, aligned with the returns.
    sigma2_next : float
        One-step-ahead forecast sigma_n^2 (the variance of the next, unseen return).

    Notes
    -----
    - sigma_t^2 - beta * sigma_{t-1}^2 = omega + alpha * eps_{t-1}^2 is a linear
      recursion, evaluated sequentially by scipy.signal.lfilter.
    """
    r = np.asarray(returns, dtype=float)
    eps = r - mu
    sigma2_0 = r.var() if initial_variance is None else float(initial_variance)

    drive = omega + alpha * eps**2
    path, _ = lfilter([1.0], [1.0, -beta], drive, zi=[beta * sigma2_0])

    sigma2 = np.concatenate(([sigma2_0], path[:-1]))
    return sigma2, float(path[-1])


#----------------------------------------------------------
# Conditional Log-Likelihood
#----------------------------------------------------------
def _standardized_t_logpdf(z, nu):
    # Student-t rescaled to unit variance
    scale = np.sqrt(nu / (nu - 2))
    return t.logpdf(z * scale, nu) + np.log(scale)


def garch_log_likelihood(returns, params, innovation="normal"):
    """
    Conditional log-likelihood sum_t [log f(eps_t / sigma_t) - log sigma_t].

    Parameters
    ----------
    returns : array-like
        Return series.
    params : sequence
        (mu, omega, alpha, beta) for Normal innovations, (mu, omega, alpha, beta, nu)
        for Student-t innovations.
    innovation : {"normal", "t"}, optional
        Innovation distribution. Default is "normal".

    Returns
    -------
    float
        Log-likelihood, -inf where a conditional variance is not positive.
    """
    innovation = _innovation_name(innovation)
    mu, omega, alpha, beta = params[:4]
    r = np.asarray(returns, dtype=float)

    sigma2, _ = garch_filter(r, mu, omega, alpha, beta)
    if not np.all(sigma2 > 0):
        return -np.inf

    eps = r - mu
    log_sigma = 0.5 * np.log(sigma2)
    z = eps / np.sqrt(sigma2)

    if innovation == "normal":
        log_f = -0.5 * (np.log(2 * np.pi) + z**2)
    else:
        log_f = _standardized_t_logpdf(z, params[4])

    return float(np.sum(log_f - log_sigma))


#----------------------------------------------------------
# Fitted Model and Volatility Path
#----------------------------------------------------------
@dataclass(frozen=True)
class GARCHFit(ModelFit):
    """
    GARCH(1,1) fit with parameters 'mu', 'omega', 'alpha', 'beta' (and 'nu'
    for Student-t innovations), in decimal units.
    """
    innovation: str
    n_observations: int

    @property
    def persistence(self):
        return self["alpha"] + self["beta"]

    @property
    def unconditional_variance(self):
        return self["omega"] / (1 - self.persistence)


@dataclass(frozen=True)
class ConditionalVolatilityPath:
    """
    Output of a fitted filter, aligned 1:1 with the return series.

    Attributes
    ----------
    returns : pd.Series
        The filtered returns.
    volatility : pd.Series
        Conditional standard deviations sigma_t.
    innovations : pd.Series
        Standardized residuals z_t = (r_t - mu) / sigma_t.
    next_volatility : float
        One-step-ahead forecast sigma_{n+1}.
    """
    returns: pd.Series = field(repr=False)
    volatility: pd.Series = field(repr=False)
    innovations: pd.Series = field(repr=False)
    next_volatility: float

    def to_frame(self):
        return pd.DataFrame({
            "Returns": self.returns,
            "Volatility": self.volatility,
            "Innovations": self.innovations
        })


def conditional_volatility(fit, returns):
    """
    Run a fitted GARCH(1,1) filter over a return series.

    Parameters
    ----------
    fit : GARCHFit
        Fitted parameters.
    returns : pd.Series or array-like
        Daily return series in decimal format, usually the one used in the fit.

    Returns
    -------
    ConditionalVolatilityPath
    """
    returns = pd.Series(returns, dtype=float)
    sigma2, sigma2_next = garch_filter(returns.values, fit["mu"], fit["omega"], fit["alpha"], fit["beta"])

    volatility = pd.Series(np.sqrt(sigma2), index=returns.index, name="Volatility")
    innovations = pd.Series((returns.values - fit["mu"]) / volatility.values,
                            index=returns.index, name="Innovations")

    return ConditionalVolatilityPath(returns=returns.rename("Returns"), volatility=volatility,
                                     innovations=innovations, next_volatility=float(np.sqrt(sigma2_next)))


#----------------------------------------------------------
# Reference Fit with the arch Package
#----------------------------------------------------------
def _arch_fit(scaled, innovation):
    model = arch_model(scaled, mean="Constant", vol="GARCH", p=1, q=1,
                       dist="normal" if innovation == "normal" else "t", rescale=False)
    return model.fit(disp="off", show_warning=False)


def arch_reference_fit(returns, innovation="normal"):
    """
    Estimate the same GARCH(1,1) model with the arch package.

    arch starts its recursion from a backcast rather than the sample variance,
    so its estimates differ slightly from fit_garch. Useful as a cross-check.

    Returns
    -------
    GARCHFit
        Parameters in decimal units, model name 'GARCH-<innovation> (arch)'.
    """
    innovation = _innovation_name(innovation)
    r = np.asarray(returns, dtype=float)
    result = _arch_fit(r * SCALE, innovation)

    params = {
        "mu": result.params["mu"] / SCALE,
        "omega": result.params["omega"] / SCALE**2,
        "alpha": result.params["alpha[1]"],
        "beta": result.params["beta[1]"]
    }
    if innovation == "t":
        params["nu"] = result.params["nu"]

    return GARCHFit(model=f"GARCH-{innovation} (arch)", params=params,
                    log_likelihood=result.loglikelihood + r.size * np.log(SCALE),
                    converged=result.convergence_flag == 0,
                    innovation=innovation, n_observations=int(r.size))


#----------------------------------------------------------
# GARCH(1,1) Estimation
#----------------------------------------------------------
def fit_garch(returns, innovation="normal", optimizer=None, arch_start=True):
    """
    Main
    ----
    Fit a GARCH(1,1) model by maximizing the conditional log-likelihood.

    The search runs over omega > 0, 0 <= alpha <= 1, 0 <= beta <= 1 (and
    2 < nu <= 200) from several starting points, including the arch package
    estimate when arch_start is True. The stationarity condition alpha + beta < 1
    is checked on the result rather than imposed, so an explosive series is
    reported instead of being pinned to the boundary.

    Parameters
    ----------
    returns : pd.Series or array-like
        Daily return series in decimal format (e.g., 0.01 = 1%).
    innovation : {"normal", "t", "student-t"}, optional
        Innovation distribution. Default is "normal".
    optimizer : MLEOptimizer, optional
        Optimizer to use. Default is MLEOptimizer().
    arch_start : bool, optional
        Add the arch package estimate to the starting points. Default is True.

    Returns
    -------
    GARCHFit
        Immutable fit with alpha + beta < 1 and omega > 0.

    Raises
    ------
    InsufficientDataError
        If fewer than 30 returns are supplied.
    NonStationaryFitError
        If the likelihood is maximized at alpha + beta >= 1.
    FitError
        If the likelihood search does not converge.

    Notes
    -----
    - Returns are scaled by 100 before fitting to improve numerical stability.
    """
    innovation = _innovation_name(innovation)
    name = f"GARCH-{innovation}"
    r = np.asarray(returns, dtype=float)

    if r.size < 30:
        raise InsufficientDataError("At least 30 returns are required.", model=name)

    scaled = r * SCALE
    sample_var = scaled.var()
    mu0 = np.median(scaled)

    starts = []
    for a0, b0 in ((0.05, 0.90), (0.10, 0.80), (0.20, 0.70), (0.30, 0.75)):
        start = [mu0, sample_var * max(1 - a0 - b0, 1e-3), a0, b0]
        if innovation == "t":
            start.append(8.0)
        starts.append(start)

    if arch_start:
        reference = _arch_fit(scaled, innovation)
        start = [reference.params["mu"], max(reference.params["omega"], 1e-8),
                 reference.params["alpha[1]"], reference.params["beta[1]"]]
        if innovation == "t":
            start.append(min(max(reference.params["nu"], 2.1), 200.0))
        starts.insert(0, start)

    bounds = [(None, None), (1e-12, None), (0.0, 1.0), (0.0, 1.0)]
    names = ("mu", "omega", "alpha", "beta")
    if innovation == "t":
        bounds.append((2.05, 200.0))
        names += ("nu",)

    optimizer = optimizer or MLEOptimizer()

    try:
        result = optimizer.maximize(lambda p: garch_log_likelihood(scaled, p, innovation),
                                    starts, bounds, names=names, model=name)
    except ConvergenceError as exc:
        best = exc.best
        if best is not None and best.params["alpha"] + best.params["beta"] >= 1:
            raise NonStationaryFitError(
                f"Likelihood search ended at alpha + beta = "
                f"{best.params['alpha'] + best.params['beta']:.4f} >= 1.", model=name) from exc
        raise FitError(f"GARCH fit failed: {exc.message}", model=name) from exc

    params = result.params
    persistence = params["alpha"] + params["beta"]
    if persistence >= 1:
        raise NonStationaryFitError(
            f"Fitted alpha + beta = {persistence:.4f} >= 1; the variance process is not stationary.",
            model=name)

    params["mu"] /= SCALE
    params["omega"] /= SCALE**2

    return GARCHFit(model=name, params=params,
                    log_likelihood=result.log_likelihood + r.size * np.log(SCALE),
                    converged=result.converged, innovation=innovation, n_observations=int(r.size))

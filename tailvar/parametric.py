"""
Parametric and Historical VaR and Expected Shortfall Module
-----------------------------------------------------------

Provides the unconditional (static) risk models of the package: the heavy-tailed
scaled Student-t fit, plus the Normal and historical-simulation baselines it is
compared against.

The Student-t location, scale and degrees of freedom are estimated jointly by
maximum likelihood. Its ES is obtained by numerical integration of the fitted
density below the VaR quantile, so it is deterministic up to quadrature tolerance.

Created
-------
October 2026

Contents
--------
- HistoricalSimulation: Empirical quantile VaR and tail-mean ES
- fit_normal / NormalFit: Normal VaR and ES from the sample moments
- fit_student_t / StudentTFit: Scaled Student-t VaR and ES fitted by MLE
- t_tail_mean: Closed-form tail mean of a standard Student-t variable

Notes
-----
- alpha is the exceedance probability (e.g., 0.01). VaR and ES are returned
  as positive losses in decimal format.
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from dataclasses import dataclass, field

import numpy as np
from scipy.stats import norm, t

from .errors import ConvergenceError, FitError, InsufficientDataError
from .fits import ModelFit, check_alpha
from .mle import MLEOptimizer


#----------------------------------------------------------
# Historical Simulation (Non-Parametric)
#----------------------------------------------------------
@dataclass(frozen=True)
class HistoricalSimulation:
    """
    Empirical VaR and ES of a return series.

    VaR is the negated alpha-percentile of the returns and ES the negated mean
    of the returns at or below that percentile.
    """
    returns: np.ndarray = field(repr=False, compare=False)
    model: str = "Historical"

    def __post_init__(self):
        values = np.asarray(self.returns, dtype=float)
        if values.size < 2:
            raise InsufficientDataError("At least two returns are required.", model=self.model)
        object.__setattr__(self, "returns", values)

    def var(self, alpha):
        alpha = check_alpha(alpha, self.model)
        return -float(np.percentile(self.returns, 100 * alpha))

    def es(self, alpha):
        var_value = self.var(alpha)
        tail_returns = self.returns[self.returns <= -var_value]
        return -float(tail_returns.mean())


#----------------------------------------------------------
# Normal Model
#----------------------------------------------------------
@dataclass(frozen=True)
class NormalFit(ModelFit):
    """Normal fit with parameters 'mu' and 'sigma'."""

    def var(self, alpha):
        alpha = check_alpha(alpha, self.model)
        return -(self["mu"] + self["sigma"] * norm.ppf(alpha))

    def es(self, alpha):
        alpha = check_alpha(alpha, self.model)
        z = norm.ppf(alpha)
        return -(self["mu"] - self["sigma"] * norm.pdf(z) / alpha)


def fit_normal(returns):
    """
    Fit a Normal distribution with the sample mean and standard deviation.

    Parameters
    ----------
    returns : pd.Series or array-like
        Daily return series in decimal format.

    Returns
    -------
    NormalFit
    """
    values = np.asarray(returns, dtype=float)
    if values.size < 2:
        raise InsufficientDataError("At least two returns are required.", model="Normal")

    mu = values.mean()
    sigma = values.std(ddof=1)
    log_likelihood = norm.logpdf(values, loc=mu, scale=sigma).sum()

    return NormalFit(model="Normal", params={"mu": mu, "sigma": sigma},
                     log_likelihood=log_likelihood, converged=True)


#----------------------------------------------------------
# Student-t Tail Mean (Shared Function)
#----------------------------------------------------------
def t_tail_mean(alpha, nu):
    """
    E[T | T <= q_alpha] for a standard Student-t variable T with nu > 1 degrees of freedom.

    Uses the closed form -(nu + q^2) / (nu - 1) * f(q) / alpha, where q is the
    alpha-quantile and f the density.
    """
    q = t.ppf(alpha, nu)
    return -(nu + q**2) / (nu - 1) * t.pdf(q, nu) / alpha


#----------------------------------------------------------
# Scaled Student-t Model
#----------------------------------------------------------
@dataclass(frozen=True)
class StudentTFit(ModelFit):
    """Scaled Student-t fit with parameters 'mu', 'sigma' and 'nu'."""

    def quantile(self, alpha):
        alpha = check_alpha(alpha, self.model)
        return float(t.ppf(alpha, self["nu"], loc=self["mu"], scale=self["sigma"]))

    def var(self, alpha):
        return -self.quantile(alpha)

    def es(self, alpha):
        """
        ES by numerical integration of E[r | r <= F^-1(alpha)] under the fitted density.
        """
        q = self.quantile(alpha)
        tail_mean = t.expect(lambda x: x, args=(self["nu"],), loc=self["mu"], scale=self["sigma"],
                             lb=-np.inf, ub=q, conditional=True)
        return -float(tail_mean)


def fit_student_t(returns, optimizer=None):
    """
    Main
    ----
    Fit a location-scale Student-t distribution to a return series by maximum likelihood.

    Estimates (mu, sigma > 0, nu > 2) with the scaled-t log-density. The search
    starts from the sample median and from the moment-matched scale at several
    degrees of freedom; the best converged candidate is kept.

    Parameters
    ----------
    returns : pd.Series or array-like
        Daily return series in decimal format (e.g., 0.01 = 1%).
    optimizer : MLEOptimizer, optional
        Optimizer to use. Default is MLEOptimizer().

    Returns
    -------
    StudentTFit
        Immutable fit exposing var(alpha) and es(alpha).

    Raises
    ------
    InsufficientDataError
        If fewer than ten returns are supplied.
    FitError
        If the likelihood search does not converge.
    """
    values = np.asarray(returns, dtype=float)
    if values.size < 10:
        raise InsufficientDataError("At least ten returns are required.", model="Student-t")

    optimizer = optimizer or MLEOptimizer()
    mu0 = np.median(values)
    std = values.std(ddof=1)
    starts = [[mu0, std * np.sqrt((nu0 - 2) / nu0), nu0] for nu0 in (4.0, 8.0, 30.0)]
    bounds = [(None, None), (1e-12, None), (2.0 + 1e-6, 500.0)]

    def log_likelihood(params):
        mu, sigma, nu = params
        return t.logpdf(values, nu, loc=mu, scale=sigma).sum()

    try:
        result = optimizer.maximize(log_likelihood, starts, bounds,
                                    names=("mu", "sigma", "nu"), model="Student-t")
    except ConvergenceError as exc:
        raise FitError(f"Student-t fit failed: {exc.message}", model="Student-t") from exc

    return StudentTFit(model="Student-t", params=result.params,
                       log_likelihood=result.log_likelihood, converged=result.converged)

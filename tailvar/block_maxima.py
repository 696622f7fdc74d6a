"""
Block-Maxima VaR and ES Module
------------------------------

Fits a Generalized Extreme Value (GEV) distribution to non-overlapping block
maxima of daily losses (e.g. weekly maxima with blocks of five trading days)
and derives Value-at-Risk (VaR) and Expected Shortfall (ES) from it.

The family is fixed once, at fit time, from the sign of the fitted shape xi:
Frechet (xi > 0, heavy tail), Gumbel (xi = 0) or Weibull (xi < 0, bounded
tail). Each family is its own fit class with its own VaR formula; the shape sign
is not re-inspected at every call.

Created
-------
October 2026

Contents
--------
- block_maxima: Per-block maximum losses over complete blocks
- gev_var: GEV VaR formula for any shape (dispatches on xi)
- GEVFit: Common base of the three families (empirical ES)
- FrechetGEVFit / GumbelGEVFit / WeibullGEVFit: Family-specific VaR
- fit_gev: Maximum-likelihood GEV fit on block maxima

Notes
-----
- VaR is rescaled from block level to per-observation level: with m
  observations per block, P(block maximum <= VaR) = (1 - alpha)^m.
- ES is the empirical mean of the original daily losses at or beyond the
  block-maxima VaR. This is an approximation, not a closed-form GEV tail
  moment, and is kept as the documented behaviour of the method.
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

import numpy as np
import pandas as pd
from scipy.stats import genextreme, gumbel_r

from .errors import ConvergenceError, FitError, InsufficientDataError, ParameterDomainError
from .fits import ModelFit, check_alpha
from .mle import MLEOptimizer


#----------------------------------------------------------
# Block Maxima
#----------------------------------------------------------
def block_maxima(returns, block_length=5):
    """
    Main
    ----
    Maximum daily loss of each complete, non-overlapping block.

    Parameters
    ----------
    returns : pd.Series or array-like
        Daily return series in decimal format.
    block_length : int, optional
        Observations per block. Default is 5 (one trading week).

    Returns
    -------
    pd.Series
        Block maxima of losses (-returns) named 'Block Maxima', one value per
        complete block, indexed by the last observation of each block. The
        incomplete trailing block is dropped.

    Raises
    ------
    ParameterDomainError
        If block_length is not a positive integer.
    InsufficientDataError
        If fewer than two complete blocks are available.
    """
    if int(block_length) != block_length or block_length < 1:
        raise ParameterDomainError("block_length must be a positive integer.", model="GEV")
    block_length = int(block_length)

    returns = pd.Series(returns, dtype=float)
    n_blocks = len(returns) // block_length
    if n_blocks < 2:
        raise InsufficientDataError(
            f"{len(returns)} returns give {n_blocks} complete blocks of {block_length}, "
            "at least two are required.", model="GEV")

    used = returns.iloc[:n_blocks * block_length]
    maxima = (-used.values).reshape(n_blocks, block_length).max(axis=1)
    index = used.index[block_length - 1::block_length]

    return pd.Series(maxima, index=index, name="Block Maxima")


#----------------------------------------------------------
# GEV VaR Formulas
#----------------------------------------------------------
def _block_exceedance(alpha, block_length):
    # -ln H(VaR) = -m ln(1 - alpha)
    return -block_length * np.log1p(-alpha)


def _var_nonzero_shape(alpha, mu, sigma, xi, block_length):
    y = _block_exceedance(alpha, block_length)
    return mu - (sigma / xi) * (1 - y ** (-xi))


def _var_gumbel(alpha, mu, sigma, block_length):
    y = _block_exceedance(alpha, block_length)
    return mu - sigma * np.log(y)


def gev_var(alpha, mu, sigma, xi, block_length=5):
    """
    Per-observation VaR implied by a GEV fit on block maxima.

    For xi != 0: mu - (sigma/xi) * (1 - (-m ln(1-alpha))^(-xi));
    for xi = 0:  mu - sigma * ln(-m ln(1-alpha)), with m = block_length.
    """
    alpha = check_alpha(alpha, "GEV")
    if sigma <= 0:
        raise ParameterDomainError("GEV scale must be positive.", model="GEV")
    if xi == 0:
        return float(_var_gumbel(alpha, mu, sigma, block_length))
    return float(_var_nonzero_shape(alpha, mu, sigma, xi, block_length))


#----------------------------------------------------------
# GEV Fits (one class per family)
#----------------------------------------------------------
@dataclass(frozen=True)
class GEVFit(ModelFit, ABC):
    """
    GEV fit with parameters 'mu', 'sigma' and 'xi' over block maxima.

    Attributes
    ----------
    block_length : int
        Observations per block (m).
    n_blocks : int
        Number of block maxima used in the fit.
    losses : np.ndarray
        The underlying (non-aggregated) daily losses, used for ES.
    """
    block_length: int
    n_blocks: int
    losses: np.ndarray = field(repr=False, compare=False)

    family: ClassVar[str] = ""

    @abstractmethod
    def var(self, alpha):
        """Per-observation VaR of the fitted family."""

    def es(self, alpha):
        """
        Empirical mean of the daily losses at or beyond the block-maxima VaR.

        Raises
        ------
        InsufficientDataError
            If no daily loss reaches the VaR level.
        """
        var_value = self.var(alpha)
        tail = self.losses[self.losses >= var_value]

        if tail.size == 0:
            raise InsufficientDataError(
                f"No daily loss reaches the block-maxima VaR {var_value:.6f}.", model=self.model)

        return float(tail.mean())


@dataclass(frozen=True)
class FrechetGEVFit(GEVFit):
    family: ClassVar[str] = "frechet"

    def var(self, alpha):
        alpha = check_alpha(alpha, self.model)
        return float(_var_nonzero_shape(alpha, self["mu"], self["sigma"], self["xi"], self.block_length))


@dataclass(frozen=True)
class WeibullGEVFit(GEVFit):
    """Bounded-tail family; losses cannot exceed mu - sigma/xi."""
    family: ClassVar[str] = "weibull"

    @property
    def upper_endpoint(self):
        return self["mu"] - self["sigma"] / self["xi"]

    def var(self, alpha):
        alpha = check_alpha(alpha, self.model)
        return float(_var_nonzero_shape(alpha, self["mu"], self["sigma"], self["xi"], self.block_length))


@dataclass(frozen=True)
class GumbelGEVFit(GEVFit):
    family: ClassVar[str] = "gumbel"

    def var(self, alpha):
        alpha = check_alpha(alpha, self.model)
        return float(_var_gumbel(alpha, self["mu"], self["sigma"], self.block_length))


#----------------------------------------------------------
# GEV Estimation
#----------------------------------------------------------
def fit_gev(returns, block_length=5, family=None, gumbel_tolerance=1e-6, optimizer=None):
    """
    Main
    ----
    Fit a GEV distribution to block maxima of losses by maximum likelihood.

    Parameters
    ----------
    returns : pd.Series or array-like
        Daily return series in decimal format.
    block_length : int, optional
        Observations per block. Default is 5 (one trading week).
    family : {None, "gumbel"}, optional
        None fits (mu, sigma, xi) and picks the family from the sign of xi.
        "gumbel" fits (mu, sigma) with xi fixed at 0.
    gumbel_tolerance : float, optional
        |xi| at or below this value is treated as the Gumbel family. Default is 1e-6.
    optimizer : MLEOptimizer, optional
        Optimizer to use. Default is MLEOptimizer().

    Returns
    -------
    FrechetGEVFit, GumbelGEVFit or WeibullGEVFit

    Raises
    ------
    ParameterDomainError
        If family is not None or "gumbel".
    InsufficientDataError
        If fewer than two complete blocks are available.
    FitError
        If the likelihood search does not converge.

    Notes
    -----
    - A warning is issued with fewer than 50 blocks: the shape estimate is unreliable.
    """
    if family not in (None, "gumbel"):
        raise ParameterDomainError("family must be None or 'gumbel'.", model="GEV")

    maxima = block_maxima(returns, block_length).values
    losses = -np.asarray(returns, dtype=float)

    if maxima.size < 50:
        warnings.warn(f"Only {maxima.size} block maxima available; the GEV shape estimate is unreliable.")

    optimizer = optimizer or MLEOptimizer()

    # Gumbel moment estimates as starting point
    sigma0 = max(np.sqrt(6) * maxima.std() / np.pi, 1e-8)
    mu0 = maxima.mean() - 0.5772 * sigma0

    try:
        if family == "gumbel":
            result = optimizer.maximize(
                lambda p: gumbel_r.logpdf(maxima, loc=p[0], scale=p[1]).sum(),
                [[mu0, sigma0]], [(None, None), (1e-12, None)],
                names=("mu", "sigma"), model="GEV")
        else:
            result = optimizer.maximize(
                lambda p: genextreme.logpdf(maxima, -p[2], loc=p[0], scale=p[1]).sum(),
                [[mu0, sigma0, 0.1], [mu0, sigma0, -0.1], [mu0, sigma0, 0.01]],
                [(None, None), (1e-12, None), (-0.95, 3.0)],
                names=("mu", "sigma", "xi"), model="GEV")
    except ConvergenceError as exc:
        raise FitError(f"GEV fit failed: {exc.message}", model="GEV") from exc

    params = result.params
    xi = params.get("xi", 0.0)

    if abs(xi) <= gumbel_tolerance:
        fit_class = GumbelGEVFit
        params["xi"] = 0.0
    elif xi > 0:
        fit_class = FrechetGEVFit
    else:
        fit_class = WeibullGEVFit

    return fit_class(model="GEV", params=params, log_likelihood=result.log_likelihood,
                     converged=result.converged, block_length=int(block_length),
                     n_blocks=int(maxima.size), losses=losses)

"""
Return Series Module
--------------------

Turns a cleaned, date-indexed price path into the daily log-return series used
by every risk model in the package, and into the matching loss series.

Created
-------
October 2026

Contents
--------
- log_returns: Log-returns from a positive price series
- losses: Loss series (negated returns), optionally restricted to positive losses

Notes
-----
- Data acquisition is not part of this package: prices are handed in already
  downloaded. Missing prices are dropped with a warning.
- All returns are daily and in decimal format (e.g., 0.01 = 1%).
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import warnings

import numpy as np
import pandas as pd

from .errors import InsufficientDataError, ParameterDomainError


#----------------------------------------------------------
# Log-Returns
#----------------------------------------------------------
def log_returns(prices):
    """
    Main
    ----
    Compute daily log-returns r_t = ln(P_t) - ln(P_{t-1}).

    Parameters
    ----------
    prices : pd.Series or array-like
        Price observations ordered in time. A pd.Series keeps its index,
        which must be strictly increasing.

    Returns
    -------
    pd.Series
        Log-return series named 'Returns', one observation shorter than the
        cleaned price series.

    Raises
    ------
    InsufficientDataError
        If fewer than two prices remain after dropping missing values.
    ParameterDomainError
        If a price is not strictly positive or the index is not strictly increasing.
    """
    prices = pd.Series(prices, dtype=float)

    if prices.isna().any():
        warnings.warn("NaNs detected in price series. Missing observations are dropped.")
        prices = prices.dropna()

    if len(prices) < 2:
        raise InsufficientDataError("At least two prices are required.", model="ReturnSeries")

    if (prices <= 0).any():
        raise ParameterDomainError("Prices must be strictly positive.", model="ReturnSeries")

    if not prices.index.is_monotonic_increasing or not prices.index.is_unique:
        raise ParameterDomainError("Price index must be strictly increasing.", model="ReturnSeries")

    returns = np.log(prices).diff().iloc[1:]
    returns.name = "Returns"
    return returns


#----------------------------------------------------------
# Losses
#----------------------------------------------------------
def losses(returns, positive_only=False):
    """
    Loss series X = -r.

    Parameters
    ----------
    returns : pd.Series or array-like
        Daily return series.
    positive_only : bool, optional
        If True, keep only strictly positive losses (X > 0), as used by the
        threshold diagnostics. Default is False.

    Returns
    -------
    pd.Series
        Loss series named 'Losses'.
    """
    loss_series = -pd.Series(returns, dtype=float)
    loss_series.name = "Losses"

    if positive_only:
        loss_series = loss_series[loss_series > 0]

    return loss_series

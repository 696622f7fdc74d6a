"""
Hypothesis-Test Diagnostics Module
----------------------------------

Default hypothesis-test oracle used to support model selection: normality and
stationarity of the returns, remaining autocorrelation in squared standardized
residuals, and unconditional coverage of a VaR path.

None of the estimation modules call these tests; they only inform the choice
between models (e.g. heavy tails reject normality, ARCH effects motivate the
GARCH filter).

Created
-------
October 2026

Contents
--------
- jarque_bera_test: Normality test on skewness and kurtosis
- adf_test: Augmented Dickey-Fuller unit-root test
- ljung_box_test: Ljung-Box test on (squared) residuals
- count_violations: Number and rate of VaR violations
- kupiec_test: Likelihood ratio test for unconditional coverage

Notes
-----
- Every test returns a dict with its statistic, p-value and a 'reject_null'
  flag at the given significance level (default 5%).
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import numpy as np
import pandas as pd
from scipy.stats import chi2
from statsmodels.stats.diagnostic import acorr_ljungbox
from statsmodels.stats.stattools import jarque_bera
from statsmodels.tsa.stattools import adfuller

from .errors import InsufficientDataError, ParameterDomainError


#----------------------------------------------------------
# Normality (Jarque-Bera)
#----------------------------------------------------------
def jarque_bera_test(returns, significance=0.05):
    """
    Jarque-Bera normality test.

    Returns
    -------
    dict
        'JB', 'p_value', 'skewness', 'kurtosis' and 'reject_null'.
    """
    values = np.asarray(returns, dtype=float)
    statistic, p_value, skewness, kurtosis = jarque_bera(values)

    return {
        "JB": float(statistic),
        "p_value": float(p_value),
        "skewness": float(skewness),
        "kurtosis": float(kurtosis),
        "reject_null": bool(p_value < significance)
    }


#----------------------------------------------------------
# Stationarity (Augmented Dickey-Fuller)
#----------------------------------------------------------
def adf_test(returns, significance=0.05):
    """
    Augmented Dickey-Fuller test; the null hypothesis is a unit root.

    Returns
    -------
    dict
        'ADF', 'p_value', 'lags' and 'reject_null' (True means stationary).
    """
    values = np.asarray(returns, dtype=float)
    statistic, p_value, lags, *_ = adfuller(values, autolag="AIC")

    return {
        "ADF": float(statistic),
        "p_value": float(p_value),
        "lags": int(lags),
        "reject_null": bool(p_value < significance)
    }


#----------------------------------------------------------
# Autocorrelation (Ljung-Box)
#----------------------------------------------------------
def ljung_box_test(residuals, lags=10, squared=True, significance=0.05):
    """
    Ljung-Box test for autocorrelation up to a lag.

    With squared=True (default) the test is run on squared residuals, which
    detects remaining ARCH effects after a volatility filter.

    Returns
    -------
    dict
        'LB', 'p_value' and 'reject_null' at the given lag.
    """
    values = np.asarray(residuals, dtype=float)
    if squared:
        values = values**2

    table = acorr_ljungbox(values, lags=[lags], return_df=True)
    statistic = table["lb_stat"].iloc[-1]
    p_value = table["lb_pvalue"].iloc[-1]

    return {
        "LB": float(statistic),
        "p_value": float(p_value),
        "reject_null": bool(p_value < significance)
    }


# ----------------------------------------------------------
# Counting VaR Violations
# ----------------------------------------------------------
def count_violations(result_data):
    """
    Count VaR violations in a result DataFrame.

    Parameters
    ----------
    result_data : pd.DataFrame
        DataFrame with a boolean 'VaR Violation' column, e.g. the output of
        DynamicVaRCalculator.filter_var.

    Returns
    -------
    total_violations : int
    violation_rate : float
        Violation rate as a decimal (e.g., 0.02 = 2%).

    Raises
    ------
    ParameterDomainError
        If the 'VaR Violation' column is missing.
    InsufficientDataError
        If the DataFrame is empty.
    """
    if not isinstance(result_data, pd.DataFrame) or "VaR Violation" not in result_data.columns:
        raise ParameterDomainError("Data must contain 'VaR Violation' column.", model="Backtest")
    if result_data.empty:
        raise InsufficientDataError("No observations to count.", model="Backtest")

    violations = result_data["VaR Violation"]
    total_violations = int(violations.sum())
    return total_violations, total_violations / len(violations)


# ----------------------------------------------------------
# Kupiec Unconditional Coverage Test
# ----------------------------------------------------------
def kupiec_test(total_violations, total_days, alpha, significance=0.05):
    """
    Kupiec unconditional coverage test.

    Checks whether the observed number of VaR violations is consistent with
    the exceedance probability alpha, assuming i.i.d. Bernoulli violations.

    Returns
    -------
    dict
        'LR_uc', 'p_value' and 'reject_null'. With zero violations or only
        violations the statistic uses the limit 0 * log(0) = 0.
    """
    if total_days < 1 or not 0 <= total_violations <= total_days:
        raise ParameterDomainError("Need 0 <= total_violations <= total_days and total_days > 0.",
                                   model="Backtest")

    x, n = total_violations, total_days
    observed = x / n

    def bernoulli_loglik(p):
        hits = x * np.log(p) if x > 0 else 0.0
        misses = (n - x) * np.log(1 - p) if n - x > 0 else 0.0
        return hits + misses

    lr_uc = -2 * (bernoulli_loglik(alpha) - bernoulli_loglik(observed))
    p_value = 1 - chi2.cdf(lr_uc, df=1)

    return {
        "LR_uc": float(lr_uc),
        "p_value": float(p_value),
        "reject_null": bool(p_value < significance)
    }

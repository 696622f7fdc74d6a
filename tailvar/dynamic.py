"""
Dynamic (GARCH-Based) VaR and Expected Shortfall Module
-------------------------------------------------------

Combines a fitted GARCH(1,1) filter with innovation quantiles to produce
time-varying Value-at-Risk (VaR) and Expected Shortfall (ES), and one-step-ahead
forecasts of both.

Two independent methods are available:

- Filter-based: VaR_t = -(mu + x_alpha * sigma_t), where x_alpha is the
  empirical alpha-quantile of the standardized residuals (Normal filter) or the
  quantile of the unit-variance Student-t (Student-t filter).
- Bootstrap-based: one-step-ahead outcomes mu + sigma_{n+1} * z*, with z*
  resampled from the standardized residuals (Normal filter) or drawn from the
  fitted unit-variance Student-t (Student-t filter). VaR and ES are the empirical
  quantile and tail mean of the simulated outcomes.

The bootstrap is the only randomized computation in the package. It is seeded
(default seed 100) and split into independent shards, so the result depends only
on the seed and the number of shards, never on the number of worker threads.

Created
-------
October 2026

Contents
--------
- DynamicVaRCalculator: Filter-based VaR/ES path and forecasts, bootstrap entry point
- BootstrapForecast: Simulated one-step-ahead outcomes with VaR and ES

Notes
-----
- VaR and ES are positive losses in decimal format.
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np
from scipy.stats import t

from .errors import ParameterDomainError
from .fits import check_alpha
from .parametric import t_tail_mean


#----------------------------------------------------------
# Bootstrap Forecast
#----------------------------------------------------------
@dataclass(frozen=True)
class BootstrapForecast:
    """
    Simulated one-step-ahead returns.

    Attributes
    ----------
    outcomes : np.ndarray
        Simulated returns mu + sigma_{n+1} * z*.
    seed : int or None
        Seed the draws were spawned from.
    model : str
        Model name used in reports and errors.
    """
    outcomes: np.ndarray = field(repr=False, compare=False)
    seed: object
    model: str

    def var(self, alpha):
        alpha = check_alpha(alpha, self.model)
        return -float(np.percentile(self.outcomes, 100 * alpha))

    def es(self, alpha):
        var_value = self.var(alpha)
        return -float(self.outcomes[self.outcomes <= -var_value].mean())


#----------------------------------------------------------
# Dynamic VaR Calculator
#----------------------------------------------------------
class DynamicVaRCalculator:
    """
    Time-varying VaR and ES from a fitted GARCH(1,1) filter.

    Parameters
    ----------
    fit : GARCHFit
        Fitted filter parameters.
    path : ConditionalVolatilityPath
        Output of conditional_volatility(fit, returns).

    Usage
    -----
        >>> fit = fit_garch(returns, innovation="t")
        >>> calculator = DynamicVaRCalculator(fit, conditional_volatility(fit, returns))
        >>> result_data, next_day_var = calculator.filter_var(alpha=0.01)
        >>> forecast = calculator.bootstrap(n_paths=100_000, seed=100)
    """

    def __init__(self, fit, path):
        self.fit = fit
        self.path = path
        self.model = f"{fit.model} (filter)"

    #------------------------------------------------------
    # Innovation distribution
    #------------------------------------------------------
    def innovation_quantile(self, alpha):
        """alpha-quantile x_alpha of the innovation distribution."""
        alpha = check_alpha(alpha, self.model)

        if self.fit.innovation == "normal":
            return float(np.percentile(self.path.innovations, 100 * alpha))

        nu = self.fit["nu"]
        return float(t.ppf(alpha, nu) * np.sqrt((nu - 2) / nu))

    def innovation_tail_mean(self, alpha):
        """E[z | z <= x_alpha] under the innovation distribution."""
        alpha = check_alpha(alpha, self.model)

        if self.fit.innovation == "normal":
            z = self.path.innovations.values
            return float(z[z <= self.innovation_quantile(alpha)].mean())

        nu = self.fit["nu"]
        return float(t_tail_mean(alpha, nu) * np.sqrt((nu - 2) / nu))

    #------------------------------------------------------
    # Filter-based VaR and ES
    #------------------------------------------------------
    def filter_var(self, alpha=0.01):
        """
        Main
        ----
        In-sample VaR and ES path and one-step-ahead VaR from the volatility filter.

        Parameters
        ----------
        alpha : float, optional
            Exceedance probability (e.g., 0.01). Default is 0.01.

        Returns
        -------
        result_data : pd.DataFrame
            DataFrame with the following columns:
            - 'Returns': original return series
            - 'Volatility': conditional standard deviation sigma_t (decimals)
            - 'Innovations': standardized residuals z_t
            - 'VaR': time-varying VaR (decimal loss)
            - 'ES': time-varying ES (decimal loss)
            - 'VaR Violation': boolean flag for VaR breaches
        next_day_var : float
            One-step-ahead VaR forecast (decimal loss).
        """
        x_alpha = self.innovation_quantile(alpha)
        tail_mean = self.innovation_tail_mean(alpha)
        mu = self.fit["mu"]

        result_data = self.path.to_frame()
        result_data["VaR"] = -(mu + x_alpha * result_data["Volatility"])
        result_data["ES"] = -(mu + tail_mean * result_data["Volatility"])
        result_data["VaR Violation"] = result_data["Returns"] < -result_data["VaR"]

        return result_data, self.var(alpha)

    def var(self, alpha):
        """One-step-ahead filter VaR: -(mu + x_alpha * sigma_{n+1})."""
        return -(self.fit["mu"] + self.innovation_quantile(alpha) * self.path.next_volatility)

    def es(self, alpha):
        """One-step-ahead filter ES: -(mu + E[z | z <= x_alpha] * sigma_{n+1})."""
        return -(self.fit["mu"] + self.innovation_tail_mean(alpha) * self.path.next_volatility)

    #------------------------------------------------------
    # Bootstrap-based VaR and ES
    #------------------------------------------------------
    def _draw(self, seed_sequence, size):
        rng = np.random.default_rng(seed_sequence)

        if self.fit.innovation == "normal":
            z = rng.choice(self.path.innovations.values, size=size, replace=True)
        else:
            nu = self.fit["nu"]
            z = rng.standard_t(nu, size=size) * np.sqrt((nu - 2) / nu)

        return self.fit["mu"] + self.path.next_volatility * z

    def bootstrap(self, n_paths=100_000, seed=100, shards=1, max_workers=None):
        """
        Main
        ----
        Simulate one-step-ahead returns for bootstrap VaR and ES.

        Parameters
        ----------
        n_paths : int, optional
            Number of simulated outcomes. Default is 100,000.
        seed : int or None, optional
            Seed of the draws. None gives non-reproducible results. Default is 100.
        shards : int, optional
            Number of independent random streams spawned from the seed. Default is 1.
        max_workers : int, optional
            Threads used to simulate the shards. None or 1 runs them sequentially.

        Returns
        -------
        BootstrapForecast
            Exposes var(alpha) and es(alpha) of the simulated outcomes.

        Raises
        ------
        ParameterDomainError
            If n_paths or shards is not a positive integer, or shards > n_paths.
        """
        if n_paths < 1 or shards < 1 or shards > n_paths:
            raise ParameterDomainError("n_paths and shards must be positive with shards <= n_paths.",
                                       model=self.model)

        streams = np.random.SeedSequence(seed).spawn(int(shards))
        sizes = [len(chunk) for chunk in np.array_split(np.arange(int(n_paths)), int(shards))]

        if max_workers is None or max_workers <= 1 or shards == 1:
            draws = [self._draw(stream, size) for stream, size in zip(streams, sizes)]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                draws = list(executor.map(self._draw, streams, sizes))

        return BootstrapForecast(outcomes=np.concatenate(draws), seed=seed,
                                 model=f"{self.fit.model} (bootstrap)")

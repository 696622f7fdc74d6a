"""
Maximum-Likelihood Optimizer Module
-----------------------------------

Generic box-constrained maximum-likelihood estimation shared by every parametric
fit in the package (Student-t, GPD, GEV and GARCH).

The optimizer minimizes the negative log-likelihood with scipy's L-BFGS-B and,
when that search stops without converging, continues with a bounded Nelder-Mead
search from where it stopped. Several starting points can be supplied: each is
projected into the feasible box and searched independently, and the best
converged candidate wins. The whole procedure is deterministic for fixed inputs.

Created
-------
October 2026

Contents
--------
- MLEResult: Outcome of one maximization
- MLEOptimizer: Multi-start constrained maximum-likelihood search

Notes
-----
- Global optimality is not guaranteed: only local convergence is checked.
- Log-likelihood values that are not finite (e.g. a parameter outside the
  density support) are replaced by a large penalty.
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
import warnings
from dataclasses import dataclass, field

import numpy as np
from scipy.optimize import minimize

from .errors import ConvergenceError, ParameterDomainError


#----------------------------------------------------------
# Optimization Result
#----------------------------------------------------------
@dataclass(frozen=True)
class MLEResult:
    """
    Outcome of one maximization.

    Attributes
    ----------
    x : np.ndarray
        Parameter vector at the end of the search.
    log_likelihood : float
        Log-likelihood at x.
    converged : bool
        True if the tolerance was met within the iteration budget.
    n_iterations : int
        Iterations used by the final search method.
    method : str
        scipy method that produced x.
    message : str
        Termination message of the final search.
    names : tuple of str
        Parameter names, in the order of x.
    """
    x: np.ndarray = field(compare=False)
    log_likelihood: float
    converged: bool
    n_iterations: int
    method: str
    message: str
    names: tuple = ()

    @property
    def params(self):
        names = self.names or tuple(f"x{i}" for i in range(len(self.x)))
        return dict(zip(names, (float(v) for v in self.x)))


#----------------------------------------------------------
# Optimizer
#----------------------------------------------------------
class MLEOptimizer:
    """
    Multi-start, box-constrained maximum-likelihood search.

    Parameters
    ----------
    max_iter : int, optional
        Iteration budget of each search. Default is 2000.
    tol : float, optional
        Relative function tolerance of the L-BFGS-B search. Default is 1e-10.
    methods : tuple of str, optional
        scipy methods tried in order from each starting point.
        Default is ("L-BFGS-B", "Nelder-Mead").
    penalty : float, optional
        Value returned to the minimizer where the log-likelihood is not finite.

    Usage
    -----
        >>> optimizer = MLEOptimizer()
        >>> result = optimizer.maximize(loglik, starts=[[0.0, 1.0]],
        ...                             bounds=[(None, None), (1e-8, None)],
        ...                             names=("mu", "sigma"))
    """

    def __init__(self, max_iter=2000, tol=1e-10, methods=("L-BFGS-B", "Nelder-Mead"), penalty=1e10):
        if max_iter < 1:
            raise ParameterDomainError("max_iter must be a positive integer.", model="MLEOptimizer")
        self.max_iter = int(max_iter)
        self.tol = tol
        self.methods = tuple(methods)
        self.penalty = penalty

    def maximize(self, log_likelihood, starts, bounds, names=(), model=None) -> MLEResult:
        """
        Main
        ----
        Maximize a log-likelihood over a box.

        Parameters
        ----------
        log_likelihood : callable
            Function of the parameter vector returning the log-likelihood.
        starts : array-like
            One starting point (1-D) or several (2-D, one per row).
        bounds : sequence of (low, high)
            Box constraints per parameter, None for an open side.
        names : tuple of str, optional
            Parameter names used in the result.
        model : str, optional
            Model name attached to any raised error.

        Returns
        -------
        MLEResult
            Best converged candidate.

        Raises
        ------
        ConvergenceError
            If no starting point converges within the budget, or if the final
            point lies outside the feasible box.
        """
        starts = np.atleast_2d(np.asarray(starts, dtype=float))
        bounds = list(bounds)
        if starts.shape[1] != len(bounds):
            raise ParameterDomainError("Starting point and bounds have different lengths.", model=model)

        lower = np.array([-np.inf if low is None else low for low, _ in bounds], dtype=float)
        upper = np.array([np.inf if high is None else high for _, high in bounds], dtype=float)

        def objective(x):
            with np.errstate(all="ignore"):
                value = log_likelihood(x)
            if not np.isfinite(value):
                return self.penalty
            return -float(value)

        converged = []
        failed = []

        for x0 in starts:
            x0 = np.clip(x0, lower, upper)
            result = self._search(objective, x0, bounds, lower, upper, names)
            (converged if result.converged else failed).append(result)

        if converged:
            return max(converged, key=lambda r: r.log_likelihood)

        best = max(failed, key=lambda r: r.log_likelihood) if failed else None
        message = best.message if best is not None else "no starting point supplied"
        raise ConvergenceError(f"Maximum-likelihood search did not converge: {message}",
                               model=model, best=best)

    def _search(self, objective, x0, bounds, lower, upper, names):
        x_start = x0
        outcome = None

        for i, method in enumerate(self.methods):
            if i > 0:
                warnings.warn(f"{self.methods[i - 1]} did not converge ({outcome.message}); "
                              f"continuing with {method}.")

            options = {"maxiter": self.max_iter}
            if method == "L-BFGS-B":
                options["ftol"] = self.tol
            elif method == "Nelder-Mead":
                options.update({"maxiter": self.max_iter * len(x0), "xatol": 1e-9,
                                "fatol": 1e-9, "adaptive": True})

            res = minimize(objective, x_start, method=method, bounds=bounds, options=options)

            inside = bool(np.all(res.x >= lower - 1e-10) and np.all(res.x <= upper + 1e-10))
            success = bool(res.success) and inside and res.fun < self.penalty
            message = str(res.message) if inside else "final point outside the feasible region"

            outcome = MLEResult(
                x=np.asarray(res.x, dtype=float),
                log_likelihood=-float(res.fun),
                converged=success,
                n_iterations=int(getattr(res, "nit", 0)),
                method=method,
                message=message,
                names=tuple(names)
            )

            if success:
                return outcome

            # Continue from where the previous search stopped if it improved
            if inside and res.fun < objective(x_start):
                x_start = np.clip(res.x, lower, upper)

        return outcome

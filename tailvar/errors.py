"""
Error Kinds Module
------------------

Defines the exceptions raised by the estimation and risk modules.

Every error derives from ValueError, so callers that only guard against bad
inputs keep working, and carries the name of the model or component that
raised it. Nothing in the package silently recovers from these errors: a
failed fit aborts that model's contribution to a risk report.

Created
-------
October 2026

Contents
--------
- TailVarError: Base class, carries the offending model name
- InsufficientDataError: Too few observations for a transform or fit
- ConvergenceError: Optimizer did not converge within its budget
- FitError: A model fit failed (wraps the optimizer failure)
- ThresholdError: Threshold leaves too few exceedances
- NonStationaryFitError: GARCH fit violates alpha + beta < 1
- UndefinedMomentError: ES requested where the fitted tail has infinite mean
- ParameterDomainError: An input lies outside its documented domain
"""


class TailVarError(ValueError):
    """
    Base error for the package.

    Parameters
    ----------
    message : str
        Human readable description.
    model : str, optional
        Name of the model or component that raised the error.
    """

    def __init__(self, message, model=None):
        super().__init__(message)
        self.message = message
        self.model = model

    def __str__(self):
        if self.model:
            return f"[{self.model}] {self.message}"
        return self.message


class InsufficientDataError(TailVarError):
    pass


class ConvergenceError(TailVarError):
    """
    Raised when no starting point converges.

    The best candidate found (an MLEResult with converged=False) is kept in
    `best` so callers can inspect where the search ended.
    """

    def __init__(self, message, model=None, best=None):
        super().__init__(message, model=model)
        self.best = best


class FitError(TailVarError):
    pass


class ThresholdError(TailVarError):
    pass


class NonStationaryFitError(TailVarError):
    pass


class UndefinedMomentError(TailVarError):
    pass


class ParameterDomainError(TailVarError):
    pass

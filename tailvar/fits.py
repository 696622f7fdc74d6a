"""
Fitted Model Value Objects
--------------------------

Immutable results shared by all estimation modules. A fit is produced once by
a fitting function and then passed explicitly to the VaR and ES functions; no
module keeps fitted parameters as hidden state.

Created
-------
October 2026

Contents
--------
- ModelFit: Parameters, attained log-likelihood and convergence flag
- RiskEstimate: VaR and ES of one model at one exceedance probability
- check_alpha: Validate an exceedance probability
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .errors import ParameterDomainError


#----------------------------------------------------------
# Exceedance Probability Check (Shared Function)
#----------------------------------------------------------
def check_alpha(alpha, model=None):
    """
    Validate an exceedance probability and return it as float.

    Raises
    ------
    ParameterDomainError
        If alpha is not strictly between 0 and 1.
    """
    alpha = float(alpha)
    if not 0.0 < alpha < 1.0:
        raise ParameterDomainError(f"alpha must lie in (0, 1), got {alpha}.", model=model)
    return alpha


#----------------------------------------------------------
# Model Fit
#----------------------------------------------------------
@dataclass(frozen=True)
class ModelFit:
    """
    Result of one estimation call.

    Attributes
    ----------
    model : str
        Name of the model that produced the fit.
    params : Mapping[str, float]
        Estimated parameters by name (read-only).
    log_likelihood : float
        Attained log-likelihood.
    converged : bool
        Whether the optimizer reported convergence.
    """
    model: str
    params: Mapping[str, float]
    log_likelihood: float
    converged: bool

    def __post_init__(self):
        frozen = {name: float(value) for name, value in dict(self.params).items()}
        object.__setattr__(self, "params", MappingProxyType(frozen))

    def __getitem__(self, name):
        return self.params[name]


#----------------------------------------------------------
# Risk Estimate
#----------------------------------------------------------
@dataclass(frozen=True)
class RiskEstimate:
    """VaR and ES (positive loss numbers) of one model at exceedance probability alpha."""
    model: str
    alpha: float
    var: float
    es: float

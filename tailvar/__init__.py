"""
tailvar: Tail Risk Estimation for Commodity Returns

tailvar estimates one-day Value-at-Risk (VaR) and Expected Shortfall (ES) of a
commodity price series under several competing models, so their tail estimates
can be compared side by side.

Main Features
-------------
Static models cover historical simulation, the Normal distribution and a scaled
Student-t fitted by maximum likelihood. Extreme Value Theory is covered by the
Peaks-Over-Threshold (POT) approach with a Generalized Pareto fit, supported by
threshold diagnostics (Pareto and generalized quantile plots, Hill plot, mean-excess
function), and by the block-maxima approach with a Generalized Extreme Value fit.
Dynamic models filter the returns with GARCH(1,1) under Normal or Student-t
innovations and give filter-based and bootstrap-based VaR and ES forecasts.

All models are collected in a RiskReport by run_risk_report. Hypothesis tests
(Jarque-Bera, ADF, Ljung-Box) and Kupiec's coverage test support model selection.

Conventions
-----------
alpha is the exceedance probability (e.g., 0.01). VaR and ES are positive losses
in decimal format.

Version
-------
0.1
"""
from .errors import (
    TailVarError,
    InsufficientDataError,
    ConvergenceError,
    FitError,
    ThresholdError,
    NonStationaryFitError,
    UndefinedMomentError,
    ParameterDomainError
)

from .fits import (
    ModelFit,
    RiskEstimate
)

from .returns import (
    log_returns,
    losses
)

from .mle import (
    MLEOptimizer,
    MLEResult
)

from .parametric import (
    HistoricalSimulation,
    fit_normal,
    fit_student_t,
    NormalFit,
    StudentTFit
)

from .evt import (
    pareto_quantile_plot,
    generalized_quantile_plot,
    hill_plot,
    mean_excess,
    threshold_from_percentile,
    gpd_cdf,
    gpd_ppf,
    fit_gpd,
    GPDFit
)

from .block_maxima import (
    block_maxima,
    gev_var,
    fit_gev,
    GEVFit,
    FrechetGEVFit,
    GumbelGEVFit,
    WeibullGEVFit
)

from .volatility import (
    garch_filter,
    garch_log_likelihood,
    fit_garch,
    conditional_volatility,
    arch_reference_fit,
    GARCHFit,
    ConditionalVolatilityPath
)

from .dynamic import (
    DynamicVaRCalculator,
    BootstrapForecast
)

from .report import (
    RiskReport,
    build_report
)

from .config import RiskConfig

from .pipeline import (
    fit_models,
    run_risk_report
)

from .diagnostics import (
    jarque_bera_test,
    adf_test,
    ljung_box_test,
    count_violations,
    kupiec_test
)

__version__ = "0.1"

"""
Configuration Module
--------------------

Options recognized by the risk pipeline, validated once at construction.

Created
-------
October 2026

Contents
--------
- RiskConfig: Frozen set of pipeline options
"""

#----------------------------------------------------------
# Packages
#----------------------------------------------------------
from dataclasses import dataclass, fields
from typing import Optional, Tuple

from .errors import ParameterDomainError

# camelCase keys accepted by RiskConfig.from_mapping
_ALIASES = {
    "blockLength": "block_length",
    "garchOrder": "garch_order",
    "innovationDistribution": "innovation_distribution",
    "bootstrapPaths": "bootstrap_paths",
    "randomSeed": "random_seed",
    "thresholdPercentile": "threshold_percentile",
    "minExceedances": "min_exceedances",
    "bootstrapShards": "bootstrap_shards",
    "maxWorkers": "max_workers",
}


@dataclass(frozen=True)
class RiskConfig:
    """
    Pipeline options.

    Attributes
    ----------
    alpha : float
        Target exceedance probability, 0 < alpha < 1. Default is 0.01.
    threshold : float, optional
        POT threshold u (decimal loss). If None, threshold_percentile is used.
    threshold_percentile : float
        Percentile of positive losses giving u when threshold is None. Default is 90.
    min_exceedances : int
        Minimum number of exceedances for a GPD fit. Default is 30.
    block_length : int
        Observations per block for the GEV fit. Default is 5 (one trading week).
    garch_order : tuple
        Fixed at (1, 1).
    innovation_distribution : {"normal", "student-t"}
        GARCH innovation distribution. Default is "student-t".
    bootstrap_paths : int
        Simulated outcomes for bootstrap VaR. Default is 100,000.
    random_seed : int, optional
        Seed of the bootstrap. Default is 100.
    bootstrap_shards : int
        Independent random streams of the bootstrap. Default is 1.
    max_workers : int, optional
        Threads for independent fits and bootstrap shards. None runs sequentially.
    """
    alpha: float = 0.01
    threshold: Optional[float] = None
    threshold_percentile: float = 90.0
    min_exceedances: int = 30
    block_length: int = 5
    garch_order: Tuple[int, int] = (1, 1)
    innovation_distribution: str = "student-t"
    bootstrap_paths: int = 100_000
    random_seed: Optional[int] = 100
    bootstrap_shards: int = 1
    max_workers: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "garch_order", tuple(self.garch_order))

        if not 0.0 < self.alpha < 1.0:
            self._reject(f"alpha must lie in (0, 1), got {self.alpha}.")
        if self.threshold is None and not 0.0 < self.threshold_percentile < 100.0:
            self._reject("threshold_percentile must lie in (0, 100).")
        if self.min_exceedances < 1:
            self._reject("min_exceedances must be positive.")
        if int(self.block_length) != self.block_length or self.block_length < 1:
            self._reject("block_length must be a positive integer.")
        if self.garch_order != (1, 1):
            self._reject(f"Only GARCH(1,1) is supported, got {self.garch_order}.")
        if self.innovation_distribution not in ("normal", "student-t"):
            self._reject("innovation_distribution must be 'normal' or 'student-t'.")
        if self.bootstrap_paths < 1 or self.bootstrap_shards < 1:
            self._reject("bootstrap_paths and bootstrap_shards must be positive.")

    @staticmethod
    def _reject(message):
        raise ParameterDomainError(message, model="RiskConfig")

    @classmethod
    def from_mapping(cls, options):
        """
        Build a RiskConfig from a mapping with snake_case or camelCase keys.

        Raises
        ------
        ParameterDomainError
            If an unknown option is given or a value is out of its domain.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}

        for key, value in dict(options).items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise ParameterDomainError(f"Unknown option {key!r}.", model="RiskConfig")
            kwargs[name] = value

        return cls(**kwargs)

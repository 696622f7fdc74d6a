"""
Unit Tests -- Pipeline Configuration
"""

import pytest

from tailvar.config import RiskConfig
from tailvar.errors import ParameterDomainError


class TestRiskConfig:

    def test_defaults(self):
        config = RiskConfig()
        assert config.alpha == 0.01
        assert config.block_length == 5
        assert config.garch_order == (1, 1)
        assert config.innovation_distribution == "student-t"
        assert config.bootstrap_paths == 100_000
        assert config.random_seed == 100

    def test_from_mapping_camel_case(self):
        config = RiskConfig.from_mapping({"alpha": 0.05, "blockLength": 21, "garchOrder": [1, 1],
                                          "innovationDistribution": "normal", "bootstrapPaths": 5000,
                                          "randomSeed": 1})
        assert config.alpha == 0.05
        assert config.block_length == 21
        assert config.garch_order == (1, 1)
        assert config.innovation_distribution == "normal"
        assert config.bootstrap_paths == 5000
        assert config.random_seed == 1

    def test_from_mapping_snake_case(self):
        config = RiskConfig.from_mapping({"threshold": 0.03, "min_exceedances": 20})
        assert config.threshold == 0.03
        assert config.min_exceedances == 20

    def test_unknown_option(self):
        with pytest.raises(ParameterDomainError):
            RiskConfig.from_mapping({"confidence": 0.99})

    @pytest.mark.parametrize("options", [
        {"alpha": 0.0},
        {"alpha": 1.2},
        {"block_length": 0},
        {"garch_order": (2, 1)},
        {"innovation_distribution": "skew-t"},
        {"bootstrap_paths": 0},
        {"threshold_percentile": 100.0},
    ])
    def test_invalid_values(self, options):
        with pytest.raises(ParameterDomainError):
            RiskConfig(**options)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            RiskConfig().alpha = 0.05

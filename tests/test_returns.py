"""
Unit Tests -- Return Series
"""

import numpy as np
import pandas as pd
import pytest

from tailvar.errors import InsufficientDataError, ParameterDomainError
from tailvar.returns import log_returns, losses


@pytest.fixture
def prices():
    index = pd.date_range("2024-01-01", periods=4, freq="D")
    return pd.Series([100.0, 110.0, 99.0, 99.0], index=index)


class TestLogReturns:

    def test_values(self, prices):
        returns = log_returns(prices)
        expected = np.log([1.1, 0.9, 1.0])
        np.testing.assert_allclose(returns.values, expected)

    def test_one_shorter_and_keeps_index(self, prices):
        returns = log_returns(prices)
        assert len(returns) == len(prices) - 1
        assert returns.index[0] == prices.index[1]
        assert returns.name == "Returns"

    def test_nan_dropped_with_warning(self, prices):
        prices.iloc[1] = np.nan
        with pytest.warns(UserWarning):
            returns = log_returns(prices)
        assert len(returns) == 2
        np.testing.assert_allclose(returns.iloc[0], np.log(0.99))

    def test_non_positive_price_rejected(self, prices):
        prices.iloc[2] = 0.0
        with pytest.raises(ParameterDomainError):
            log_returns(prices)

    def test_single_price_rejected(self):
        with pytest.raises(InsufficientDataError):
            log_returns([100.0])

    def test_unordered_index_rejected(self, prices):
        with pytest.raises(ParameterDomainError):
            log_returns(prices.iloc[::-1])


class TestLosses:

    def test_negated_returns(self):
        result = losses([0.01, -0.02, 0.0])
        np.testing.assert_allclose(result.values, [-0.01, 0.02, 0.0])
        assert result.name == "Losses"

    def test_positive_only(self):
        result = losses([0.01, -0.02, 0.0, -0.03], positive_only=True)
        np.testing.assert_allclose(result.values, [0.02, 0.03])

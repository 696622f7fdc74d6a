#================================================================
# VaR and ES Risk Report for a Commodity Price Series
# ================================================================
import sys

import pandas as pd

import tailvar as tv
from tailvar.diagnostics import (
    adf_test,
    count_violations,
    jarque_bera_test,
    kupiec_test,
    ljung_box_test
)


if __name__ == "__main__":
    # 1) USER INPUT
    PRICES_CSV = sys.argv[1] if len(sys.argv) > 1 else "brent.csv"
    PRICE_COL  = "Close"
    OPTIONS    = {
        "alpha": 0.01,
        "thresholdPercentile": 90.0,
        "blockLength": 5,
        "innovationDistribution": "student-t",
        "bootstrapPaths": 100_000,
        "randomSeed": 100
    }

    # 2) DATA PREP
    raw     = pd.read_csv(PRICES_CSV, index_col=0, parse_dates=True)
    prices  = raw[PRICE_COL].sort_index()
    config  = tv.RiskConfig.from_mapping(OPTIONS)
    returns = tv.log_returns(prices)
    losses  = tv.losses(returns)

    # 3) MODEL SELECTION DIAGNOSTICS
    print("\n=== Return Diagnostics ===")
    print(f"Jarque-Bera : {jarque_bera_test(returns)}")
    print(f"ADF         : {adf_test(returns)}")
    print(f"Ljung-Box   : {ljung_box_test(returns, lags=10, squared=True)}")

    print("\n=== Threshold Diagnostics (tail) ===")
    print(tv.mean_excess(losses, n_points=10))
    print(tv.hill_plot(losses).iloc[[24, 49, 99]])

    # 4) VAR + ES REPORT
    report = tv.run_risk_report(prices, config)
    print(f"\n=== One-Day VaR and ES at alpha = {report.alpha} ===")
    print(report.to_frame().round(5))

    # 5) BACKTESTING (GARCH FILTER)
    fit        = tv.fit_garch(returns, innovation="t")
    calculator = tv.DynamicVaRCalculator(fit, tv.conditional_volatility(fit, returns))
    result_data, next_day_var = calculator.filter_var(alpha=config.alpha)

    violations, rate = count_violations(result_data)
    print("\n=== GARCH-t Filter Backtest ===")
    print(f"Violations  : {violations} ({rate:.2%})")
    print(f"Kupiec      : {kupiec_test(violations, len(result_data), config.alpha)}")
    print(f"Next-day VaR: {next_day_var:.5f}")

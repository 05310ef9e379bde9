import math
from datetime import date, timedelta

import pytest

from goldsim.simulator import ClosedTrade, EquityPoint, ExitReason, PerformanceMetrics, Side, compute_metrics
from goldsim.simulator.metrics import (
    avg_profit_per_trade,
    max_consecutive_losses,
    max_drawdown,
    profit_factor,
    sharpe_ratio,
    success_rate,
)


def _trade(pnl):
    return ClosedTrade(
        side=Side.LONG,
        entry_date=date(2024, 6, 3),
        exit_date=date(2024, 6, 4),
        entry_price=2000.0,
        exit_price=2000.0 + pnl / 5.0,
        extreme_price=2010.0,
        base_amount=100.0,
        leveraged_amount=10000.0,
        pnl=pnl,
        fees=0.1,
        holding_days=1,
        capital_at_entry=10000.0,
        capital_after_close=10000.0 + pnl,
        exit_reason=ExitReason.STOP_LOSS,
    )


def _curve(values):
    start = date(2024, 6, 3)
    return [EquityPoint(date=start + timedelta(days=i), equity=value) for i, value in enumerate(values)]


def test_max_consecutive_losses_pattern():
    trades = [_trade(50), _trade(-20), _trade(-30), _trade(10), _trade(-5)]
    assert max_consecutive_losses(trades) == 2


def test_success_rate():
    assert success_rate([]) == 0
    assert success_rate([_trade(10), _trade(20), _trade(5), _trade(-15)]) == 0.75


def test_breakeven_trade_is_neither_win_nor_loss():
    trades = [_trade(-10), _trade(0), _trade(-10)]
    assert success_rate(trades) == 0
    assert max_consecutive_losses(trades) == 1


def test_max_drawdown_is_fraction_of_peak():
    assert max_drawdown(_curve([100, 120, 90, 130, 117])) == pytest.approx(0.25)
    assert max_drawdown(_curve([100, 110, 120])) == 0.0
    assert max_drawdown([]) == 0.0


def test_max_drawdown_counts_loss_against_starting_capital():
    assert max_drawdown(_curve([900, 950]), starting_capital=1000) == pytest.approx(0.1)
    assert max_drawdown(_curve([-1000]), starting_capital=1000) == pytest.approx(2.0)
    assert max_drawdown(_curve([-1000])) == 0.0


def test_avg_profit_per_trade_handles_zero_trades():
    assert avg_profit_per_trade(0.0, 0) == 0.0
    assert avg_profit_per_trade(90.0, 3) == pytest.approx(30.0)


def test_sharpe_ratio_annualised_population_std():
    curve = _curve([100, 110, 121, 121])
    returns = [0.1, 0.1, 0.0]
    mean = sum(returns) / 3
    std = math.sqrt(sum((r - mean) ** 2 for r in returns) / 3)

    assert sharpe_ratio(curve) == pytest.approx(mean / std * math.sqrt(252))


def test_sharpe_ratio_degenerate_curves():
    assert sharpe_ratio([]) == 0.0
    assert sharpe_ratio(_curve([100])) == 0.0
    assert sharpe_ratio(_curve([100, 100, 100])) == 0.0


def test_profit_factor_zero_denominator():
    assert profit_factor(50.0, 0.0, 1.0) == 0.0
    assert profit_factor(50.0, 25.0, 0.5) == pytest.approx(2.0)


def test_compute_metrics_empty_inputs():
    metrics = compute_metrics([], [])
    assert metrics == PerformanceMetrics()


def test_compute_metrics_summary():
    trades = [_trade(100), _trade(-50), _trade(-50), _trade(200)]
    metrics = compute_metrics(trades, _curve([10000, 10100, 10000, 9950, 10200]))

    assert metrics.success_rate == 0.5
    assert metrics.max_consecutive_losses == 2
    assert metrics.avg_profit_per_trade == pytest.approx(50.0)
    assert metrics.average_win == pytest.approx(150.0)
    assert metrics.average_loss == pytest.approx(50.0)
    assert metrics.profit_factor == pytest.approx(3.0)
    assert metrics.max_drawdown == pytest.approx(150.0 / 10100.0)
    assert metrics.daily_return_volatility > 0

"""Summary statistics derived from a trade ledger and equity curve.

Every function degrades to 0 on empty input or a zero denominator so the
values can be rendered directly.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from goldsim.simulator.models import ClosedTrade, EquityPoint, PerformanceMetrics

TRADING_DAYS_PER_YEAR = 252


def success_rate(trades: Sequence[ClosedTrade]) -> float:
    if not trades:
        return 0.0
    return sum(1 for trade in trades if trade.pnl > 0) / len(trades)


def max_drawdown(equity_curve: Sequence[EquityPoint], starting_capital: Optional[float] = None) -> float:
    """Largest peak-to-trough decline as a fraction of the peak.

    The peak starts at ``starting_capital`` when given, so a loss on the first
    marked day still counts. Equity that goes negative yields a value above 1.
    """
    if not equity_curve:
        return 0.0
    peak = equity_curve[0].equity if starting_capital is None else starting_capital
    worst = 0.0
    for point in equity_curve:
        if point.equity > peak:
            peak = point.equity
        drawdown = (peak - point.equity) / peak if peak > 0 else 0.0
        worst = max(worst, drawdown)
    return worst


def max_consecutive_losses(trades: Sequence[ClosedTrade]) -> int:
    longest = 0
    current = 0
    for trade in trades:
        if trade.pnl < 0:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def avg_profit_per_trade(total_pnl: float, trade_count: int) -> float:
    return total_pnl / max(trade_count, 1)


def daily_returns(equity_curve: Sequence[EquityPoint]) -> list[float]:
    returns: list[float] = []
    for previous, current in zip(equity_curve, equity_curve[1:]):
        if previous.equity > 0:
            returns.append((current.equity - previous.equity) / previous.equity)
    return returns


def _mean_std(values: Sequence[float]) -> tuple[float, float]:
    if not values:
        return 0.0, 0.0
    mean = sum(values) / len(values)
    variance = sum((value - mean) ** 2 for value in values) / len(values)
    return mean, math.sqrt(variance)


def sharpe_ratio(equity_curve: Sequence[EquityPoint]) -> float:
    returns = daily_returns(equity_curve)
    if len(returns) < 2:
        return 0.0
    mean, std = _mean_std(returns)
    if std <= 0:
        return 0.0
    return mean / std * math.sqrt(TRADING_DAYS_PER_YEAR)


def daily_return_volatility(equity_curve: Sequence[EquityPoint]) -> float:
    """Annualised standard deviation of daily returns, in percent."""
    _, std = _mean_std(daily_returns(equity_curve))
    return std * math.sqrt(TRADING_DAYS_PER_YEAR) * 100.0


def average_win(trades: Sequence[ClosedTrade]) -> float:
    wins = [trade.pnl for trade in trades if trade.pnl > 0]
    return sum(wins) / len(wins) if wins else 0.0


def average_loss(trades: Sequence[ClosedTrade]) -> float:
    losses = [trade.pnl for trade in trades if trade.pnl < 0]
    return abs(sum(losses) / len(losses)) if losses else 0.0


def profit_factor(avg_win: float, avg_loss: float, win_rate: float) -> float:
    denominator = avg_loss * (1.0 - win_rate)
    if denominator <= 0:
        return 0.0
    return avg_win * win_rate / denominator


def compute_metrics(
    trades: Sequence[ClosedTrade],
    equity_curve: Sequence[EquityPoint],
    starting_capital: Optional[float] = None,
) -> PerformanceMetrics:
    rate = success_rate(trades)
    avg_win = average_win(trades)
    avg_loss = average_loss(trades)
    total_pnl = sum(trade.pnl for trade in trades)
    return PerformanceMetrics(
        success_rate=rate,
        max_drawdown=max_drawdown(equity_curve, starting_capital),
        max_consecutive_losses=max_consecutive_losses(trades),
        avg_profit_per_trade=avg_profit_per_trade(total_pnl, len(trades)),
        average_win=avg_win,
        average_loss=avg_loss,
        profit_factor=profit_factor(avg_win, avg_loss, rate),
        sharpe_ratio=sharpe_ratio(equity_curve),
        daily_return_volatility=daily_return_volatility(equity_curve),
    )

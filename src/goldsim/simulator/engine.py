"""Backtest engine: replays simulation parameters over a daily price series."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from goldsim.data.models import PricePoint
from goldsim.simulator.metrics import compute_metrics
from goldsim.simulator.models import (
    ClosedTrade,
    EquityFeePolicy,
    EquityPoint,
    ExitReason,
    Position,
    SimulationParams,
    SimulationResult,
)
from goldsim.simulator.rules import entry_signal, evaluate_exit, realized_pnl, size_position
from goldsim.simulator.validation import ensure_valid

logger = logging.getLogger(__name__)


class BacktestEngine:
    """Single-pass simulator over one price series.

    Each call to :meth:`run` keeps its state in local accumulators, so one
    engine can be reused for any number of independent runs.
    """

    def __init__(self, params: SimulationParams) -> None:
        ensure_valid(params)
        self.params = params

    def run(self, series: Iterable[PricePoint]) -> SimulationResult:
        params = self.params
        points = list(series)

        cash = params.starting_capital
        total_pnl = 0.0
        total_fees = 0.0
        skipped_trades = 0
        open_positions: list[Position] = []
        trades: list[ClosedTrade] = []
        equity_curve: list[EquityPoint] = []
        last_fee_date: Optional[date] = None
        position_limit = params.position_limit()

        for index in range(1, len(points)):
            point = points[index]
            previous = points[index - 1]

            if cash <= 0 and not open_positions:
                logger.info("Capital exhausted on %s, stopping simulation", point.date)
                break

            if point.date != last_fee_date:
                last_fee_date = point.date
                charged, cash = self._accrue_fees(open_positions, cash, point.date)
                total_fees += charged

            if len(open_positions) < position_limit:
                side = entry_signal(
                    point.open,
                    previous.open,
                    params.min_price_movement_percent,
                    params.entry_mode,
                )
                if side is not None:
                    if cash < params.min_trading_capital:
                        skipped_trades += 1
                        logger.debug("Skipped %s entry on %s: capital %.2f below floor", side.value, point.date, cash)
                    else:
                        sized = size_position(
                            cash,
                            params.position_size_percent,
                            params.leverage,
                            params.min_position_amount,
                        )
                        if not sized.allow:
                            skipped_trades += 1
                            logger.debug("Skipped %s entry on %s: %s", side.value, point.date, sized.reason)
                        else:
                            open_positions.append(
                                Position(
                                    side=side,
                                    entry_date=point.date,
                                    entry_price=point.open,
                                    extreme_price=point.open,
                                    base_amount=sized.base_amount,
                                    leveraged_amount=sized.leveraged_amount,
                                    capital_at_entry=cash,
                                )
                            )
                            cash -= sized.base_amount
                            logger.debug(
                                "Opened %s on %s at %.2f (base %.2f, exposure %.2f)",
                                side.value,
                                point.date,
                                point.open,
                                sized.base_amount,
                                sized.leveraged_amount,
                            )

            for position in list(open_positions):
                decision = evaluate_exit(position, point, params)
                if decision is None:
                    continue
                trade, cash = self._close(position, point.date, decision.price, decision.reason, cash)
                open_positions.remove(position)
                trades.append(trade)
                total_pnl += trade.pnl

            equity = self._mark_to_market(open_positions, cash, point.close)
            if equity_curve and equity_curve[-1].date == point.date:
                equity_curve[-1] = EquityPoint(date=point.date, equity=equity)
            else:
                equity_curve.append(EquityPoint(date=point.date, equity=equity))

        if open_positions:
            last = points[-1]
            for position in list(open_positions):
                trade, cash = self._close(position, last.date, last.close, ExitReason.END_OF_DATA, cash)
                trades.append(trade)
                total_pnl += trade.pnl
            open_positions.clear()

        metrics = compute_metrics(trades, equity_curve, params.starting_capital)
        logger.info(
            "Simulation finished: %d trades, %d skipped, final capital %.2f, pnl %.2f, fees %.2f",
            len(trades),
            skipped_trades,
            cash,
            total_pnl,
            total_fees,
        )
        return SimulationResult(
            params=params,
            starting_capital=params.starting_capital,
            final_capital=cash,
            total_pnl=total_pnl,
            total_fees=total_fees,
            total_trades=len(trades),
            skipped_trades=skipped_trades,
            equity_curve=equity_curve,
            trades=trades,
            metrics=metrics,
        )

    def _accrue_fees(self, positions: list[Position], cash: float, day: date) -> tuple[float, float]:
        charged = 0.0
        for position in positions:
            fee = self.params.daily_fee_percent / 100.0 * position.base_amount
            if fee <= 0:
                continue
            paid = fee if cash >= fee else max(cash, 0.0)
            if paid > 0:
                cash -= paid
                charged += paid
                position.accumulated_fees += paid
                position.last_fee_date = day
            if paid < fee:
                logger.debug("Capital exhausted while charging fees on %s", day)
                break
        return charged, cash

    def _close(
        self,
        position: Position,
        exit_date: date,
        exit_price: float,
        reason: ExitReason,
        cash: float,
    ) -> tuple[ClosedTrade, float]:
        pnl = realized_pnl(position.side, position.entry_price, exit_price, position.leveraged_amount)
        # fees were already taken from cash day by day
        cash += position.base_amount + pnl
        logger.debug(
            "Closed %s on %s at %.2f (%s), pnl %.2f",
            position.side.value,
            exit_date,
            exit_price,
            reason.value,
            pnl,
        )
        trade = ClosedTrade(
            side=position.side,
            entry_date=position.entry_date,
            exit_date=exit_date,
            entry_price=position.entry_price,
            exit_price=exit_price,
            extreme_price=position.extreme_price,
            base_amount=position.base_amount,
            leveraged_amount=position.leveraged_amount,
            pnl=pnl,
            fees=position.accumulated_fees,
            holding_days=(exit_date - position.entry_date).days,
            capital_at_entry=position.capital_at_entry,
            capital_after_close=cash,
            exit_reason=reason,
        )
        return trade, cash

    def _mark_to_market(self, positions: list[Position], cash: float, price: float) -> float:
        equity = cash
        for position in positions:
            equity += position.base_amount + position.unrealized_pnl(price)
            if self.params.equity_fee_policy == EquityFeePolicy.SUBTRACT:
                equity -= position.accumulated_fees
        return equity


def simulate(params: SimulationParams, series: Iterable[PricePoint]) -> SimulationResult:
    return BacktestEngine(params).run(series)

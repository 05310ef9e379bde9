"""JSON-safe result records for renderers, CLIs and batch harnesses."""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from goldsim.simulator.models import ClosedTrade, SimulationParams, SimulationResult
from goldsim.simulator.sweep import SweepSummary


def format_currency(value: float, symbol: str = "$") -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_percent(fraction: float) -> str:
    return f"{fraction * 100:.2f}%"


def serialize_params(params: SimulationParams) -> dict[str, Any]:
    payload = asdict(params)
    for key, value in payload.items():
        if isinstance(value, Enum):
            payload[key] = value.value
    return payload


def serialize_trade(trade: ClosedTrade) -> dict[str, Any]:
    return {
        "type": trade.side.value,
        "entry": trade.entry_date.isoformat(),
        "exit": trade.exit_date.isoformat(),
        "entry_price": trade.entry_price,
        "exit_price": trade.exit_price,
        "extreme_price": trade.extreme_price,
        "base_amount": trade.base_amount,
        "leveraged_amount": trade.leveraged_amount,
        "pnl": trade.pnl,
        "fees": trade.fees,
        "price_change_percent": trade.price_change_percent,
        "holding_period": trade.holding_days,
        "capital_at_entry": trade.capital_at_entry,
        "capital_after_close": trade.capital_after_close,
        "exit_reason": trade.exit_reason.value,
    }


def serialize_result(result: SimulationResult) -> dict[str, Any]:
    metrics = result.metrics
    return {
        "params": serialize_params(result.params),
        "starting_capital": result.starting_capital,
        "final_capital": result.final_capital,
        "total_profit_loss": result.total_pnl,
        "total_trades": result.total_trades,
        "skipped_trades": result.skipped_trades,
        "total_fees": result.total_fees,
        "success_rate": metrics.success_rate,
        "max_drawdown": metrics.max_drawdown,
        "max_consecutive_losses": metrics.max_consecutive_losses,
        "avg_profit_per_trade": metrics.avg_profit_per_trade,
        "performance_metrics": asdict(metrics),
        "equity_curve": [
            {"date": point.date.isoformat(), "equity": point.equity} for point in result.equity_curve
        ],
        "trade_history": [serialize_trade(trade) for trade in result.trades],
    }


def serialize_sweep(summary: SweepSummary) -> dict[str, Any]:
    def run_row(run) -> dict[str, Any]:
        result = run.result
        return {
            "overrides": run.overrides,
            "final_capital": result.final_capital,
            "total_profit_loss": result.total_pnl,
            "total_fees": result.total_fees,
            "total_trades": result.total_trades,
            "skipped_trades": result.skipped_trades,
            "success_rate": result.metrics.success_rate,
            "max_drawdown": result.metrics.max_drawdown,
            "sharpe_ratio": result.metrics.sharpe_ratio,
        }

    return {
        "rank_by": summary.rank_by,
        "profitable_runs": summary.profitable_runs,
        "average_final_capital": summary.average_final_capital,
        "best": run_row(summary.best) if summary.best else None,
        "runs": [run_row(run) for run in summary.runs],
        "rejected": [{"overrides": item.overrides, "errors": item.errors} for item in summary.rejected],
    }


def write_report(path: str | Path, payload: dict[str, Any], metadata: Optional[dict[str, Any]] = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = dict(metadata or {})
    document.update(payload)
    path.write_text(json.dumps(document, indent=2, default=str), encoding="utf-8")
    return path

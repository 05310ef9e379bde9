"""Parameter sweeps: many independent runs over one read-only series."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Sequence

from goldsim.data.models import PricePoint
from goldsim.simulator.engine import BacktestEngine
from goldsim.simulator.models import (
    EntryMode,
    EquityFeePolicy,
    ExitMode,
    PositionModel,
    SimulationParams,
    SimulationResult,
)
from goldsim.simulator.validation import validate_params

logger = logging.getLogger(__name__)

RANK_KEYS = {
    "final_capital": lambda result: result.final_capital,
    "total_pnl": lambda result: result.total_pnl,
    "success_rate": lambda result: result.metrics.success_rate,
    "sharpe_ratio": lambda result: result.metrics.sharpe_ratio,
    "max_drawdown": lambda result: -result.metrics.max_drawdown,
}

POLICY_FIELDS = {
    "entry_mode": EntryMode,
    "exit_mode": ExitMode,
    "position_model": PositionModel,
    "equity_fee_policy": EquityFeePolicy,
}


@dataclass(frozen=True)
class SweepRun:
    overrides: dict[str, Any]
    result: SimulationResult


@dataclass(frozen=True)
class RejectedRun:
    overrides: dict[str, Any]
    errors: list[str]


@dataclass(frozen=True)
class SweepSummary:
    runs: list[SweepRun]
    rejected: list[RejectedRun]
    rank_by: str
    best: SweepRun | None
    profitable_runs: int
    average_final_capital: float


def expand_grid(grid: Mapping[str, Sequence[Any]]) -> list[dict[str, Any]]:
    if not grid:
        return [{}]
    keys = list(grid)
    return [dict(zip(keys, values)) for values in itertools.product(*(grid[key] for key in keys))]


def coerce_overrides(overrides: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Turn policy flag values written as strings (YAML, CLI) into their enums."""
    coerced = dict(overrides)
    errors: list[str] = []
    for key, enum_cls in POLICY_FIELDS.items():
        if key not in coerced or isinstance(coerced[key], enum_cls):
            continue
        try:
            coerced[key] = enum_cls(coerced[key])
        except ValueError:
            errors.append(f"Invalid {key}: {coerced[key]}")
    return coerced, errors


def run_sweep(
    base: SimulationParams,
    grid: Mapping[str, Sequence[Any]],
    series: Iterable[PricePoint],
) -> tuple[list[SweepRun], list[RejectedRun]]:
    points = list(series)
    runs: list[SweepRun] = []
    rejected: list[RejectedRun] = []
    for overrides in expand_grid(grid):
        coerced, errors = coerce_overrides(overrides)
        if errors:
            logger.debug("Rejected sweep combination %s: %s", overrides, errors)
            rejected.append(RejectedRun(overrides, errors))
            continue
        try:
            params = replace(base, **coerced)
        except TypeError as exc:
            raise ValueError(f"Unknown sweep parameter in {sorted(overrides)}") from exc
        validation = validate_params(params)
        if not validation.valid:
            logger.debug("Rejected sweep combination %s: %s", overrides, validation.errors)
            rejected.append(RejectedRun(overrides, validation.errors))
            continue
        runs.append(SweepRun(overrides, BacktestEngine(params).run(points)))
    logger.info("Sweep finished: %d runs, %d rejected", len(runs), len(rejected))
    return runs, rejected


def summarize_sweep(
    runs: Sequence[SweepRun],
    rejected: Sequence[RejectedRun] = (),
    rank_by: str = "final_capital",
) -> SweepSummary:
    if rank_by not in RANK_KEYS:
        raise ValueError(f"Unknown rank key: {rank_by}")
    key = RANK_KEYS[rank_by]
    ranked = sorted(runs, key=lambda run: key(run.result), reverse=True)
    total = len(ranked)
    return SweepSummary(
        runs=ranked,
        rejected=list(rejected),
        rank_by=rank_by,
        best=ranked[0] if ranked else None,
        profitable_runs=sum(1 for run in ranked if run.result.final_capital > run.result.starting_capital),
        average_final_capital=sum(run.result.final_capital for run in ranked) / total if total else 0.0,
    )

"""Backtest engine and metrics."""

from goldsim.simulator.engine import BacktestEngine, simulate
from goldsim.simulator.metrics import compute_metrics
from goldsim.simulator.models import (
    ClosedTrade,
    EntryMode,
    EquityFeePolicy,
    EquityPoint,
    ExitMode,
    ExitReason,
    PerformanceMetrics,
    Position,
    PositionModel,
    Side,
    SimulationParams,
    SimulationResult,
)
from goldsim.simulator.sweep import SweepSummary, run_sweep, summarize_sweep
from goldsim.simulator.validation import InvalidParametersError, ValidationResult, validate_params

__all__ = [
    "BacktestEngine",
    "ClosedTrade",
    "EntryMode",
    "EquityFeePolicy",
    "EquityPoint",
    "ExitMode",
    "ExitReason",
    "InvalidParametersError",
    "PerformanceMetrics",
    "Position",
    "PositionModel",
    "Side",
    "SimulationParams",
    "SimulationResult",
    "SweepSummary",
    "ValidationResult",
    "compute_metrics",
    "run_sweep",
    "simulate",
    "summarize_sweep",
    "validate_params",
]

"""Configuration models for reproducible backtest runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from goldsim.simulator.models import SimulationParams


@dataclass(frozen=True)
class DataConfig:
    source: str = "sample"
    path: Optional[str] = None


@dataclass(frozen=True)
class ReportConfig:
    output_path: str = "reports/backtest.json"


@dataclass(frozen=True)
class MonitoringConfig:
    audit_log_path: str = "runtime/audit.log"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5


@dataclass(frozen=True)
class SweepConfig:
    grid: dict[str, list[Any]] = field(default_factory=dict)
    rank_by: str = "final_capital"
    output_path: str = "reports/sweep.json"


@dataclass(frozen=True)
class BacktestConfig:
    name: str
    version: str
    run_id_prefix: str
    simulation: SimulationParams
    data: DataConfig = DataConfig()
    report: ReportConfig = ReportConfig()
    monitoring: MonitoringConfig = MonitoringConfig()
    logging: LoggingConfig = LoggingConfig()
    sweep: SweepConfig = SweepConfig()

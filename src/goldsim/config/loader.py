"""Load and freeze configuration files."""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from goldsim.config.models import (
    BacktestConfig,
    DataConfig,
    LoggingConfig,
    MonitoringConfig,
    ReportConfig,
    SweepConfig,
)
from goldsim.simulator.models import EntryMode, EquityFeePolicy, ExitMode, PositionModel, SimulationParams

DATA_SOURCES = {"sample", "csv", "bars_json"}
SWEEP_ENUMS = {
    "entry_mode": EntryMode,
    "exit_mode": ExitMode,
    "position_model": PositionModel,
    "equity_fee_policy": EquityFeePolicy,
}


def load_config(path: str | Path) -> BacktestConfig:
    path = Path(path)
    data = _load_yaml(path)

    name = str(_require(data, "name"))
    version = str(_require(data, "version"))
    run_id_prefix = str(data.get("run_id_prefix", name))

    simulation = parse_simulation(_require(data, "simulation"))
    data_config = _parse_data(data.get("data", {}), base_dir=path.parent)

    return BacktestConfig(
        name=name,
        version=version,
        run_id_prefix=run_id_prefix,
        simulation=simulation,
        data=data_config,
        report=_parse_report(data.get("report", {})),
        monitoring=_parse_monitoring(data.get("monitoring", {})),
        logging=_parse_logging(data.get("logging", {})),
        sweep=_parse_sweep(data.get("sweep", {})),
    )


def compute_config_hash(path: str | Path) -> str:
    path = Path(path)
    content = path.read_bytes()
    return hashlib.sha256(content).hexdigest()


def freeze_config(path: str | Path, lock_path: Optional[str | Path] = None) -> Path:
    path = Path(path)
    config_hash = compute_config_hash(path)
    if lock_path is None:
        lock_path = path.with_suffix(path.suffix + ".lock.json")
    lock_path = Path(lock_path)

    payload = {
        "config_path": str(path),
        "config_hash": config_hash,
        "frozen_at_utc": datetime.now(timezone.utc).isoformat(),
    }
    lock_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return lock_path


def verify_config_lock(path: str | Path, lock_path: Optional[str | Path] = None) -> bool:
    path = Path(path)
    if lock_path is None:
        lock_path = path.with_suffix(path.suffix + ".lock.json")
    lock_path = Path(lock_path)
    if not lock_path.exists():
        return False
    payload = json.loads(lock_path.read_text(encoding="utf-8"))
    expected = payload.get("config_hash")
    return expected == compute_config_hash(path)


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required config key: {key}")
    return data[key]


def _parse_enum(enum_cls, value: Any, key: str):
    try:
        return enum_cls(value)
    except Exception as exc:
        raise ValueError(f"Invalid {key}: {value}") from exc


def _parse_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Invalid {key}: {value!r} (expected true or false)")
    return value


def parse_simulation(data: dict[str, Any]) -> SimulationParams:
    if not isinstance(data, dict):
        raise ValueError("simulation must be a mapping")

    def optional_float(value: Any) -> Optional[float]:
        if value is None:
            return None
        return float(value)

    return SimulationParams(
        starting_capital=float(_require(data, "starting_capital")),
        position_size_percent=float(_require(data, "position_size_percent")),
        leverage=float(_require(data, "leverage")),
        stop_loss_amount=float(_require(data, "stop_loss_amount")),
        min_price_movement_percent=float(_require(data, "min_price_movement_percent")),
        daily_fee_percent=float(_require(data, "daily_fee_percent")),
        use_trailing_stop=_parse_bool(data.get("use_trailing_stop", True), "use_trailing_stop"),
        take_profit_amount=optional_float(data.get("take_profit_amount")),
        entry_mode=_parse_enum(EntryMode, data.get("entry_mode", "long_only"), "entry_mode"),
        exit_mode=_parse_enum(ExitMode, data.get("exit_mode", "trailing_stop"), "exit_mode"),
        position_model=_parse_enum(PositionModel, data.get("position_model", "single"), "position_model"),
        max_concurrent_positions=int(data.get("max_concurrent_positions", 5)),
        equity_fee_policy=_parse_enum(
            EquityFeePolicy, data.get("equity_fee_policy", "exclude"), "equity_fee_policy"
        ),
        min_trading_capital=float(data.get("min_trading_capital", 100.0)),
        min_position_amount=float(data.get("min_position_amount", 1.0)),
    )


def _parse_data(data: dict[str, Any], base_dir: Path) -> DataConfig:
    source = str(data.get("source", "sample"))
    if source not in DATA_SOURCES:
        raise ValueError(f"Invalid data.source: {source}")
    path = data.get("path")
    if source != "sample":
        if path is None:
            raise ValueError(f"data.path is required for source {source}")
        resolved = Path(path)
        if not resolved.is_absolute():
            resolved = base_dir / resolved
        path = str(resolved)
    return DataConfig(source=source, path=path)


def _parse_report(data: dict[str, Any]) -> ReportConfig:
    return ReportConfig(output_path=str(data.get("output_path", "reports/backtest.json")))


def _parse_monitoring(data: dict[str, Any]) -> MonitoringConfig:
    return MonitoringConfig(
        audit_log_path=str(data.get("audit_log_path", "runtime/audit.log")),
    )


def _parse_logging(data: dict[str, Any]) -> LoggingConfig:
    file = data.get("file")
    return LoggingConfig(
        level=str(data.get("level", "INFO")).upper(),
        file=str(file) if file else None,
        max_bytes=int(data.get("max_bytes", 10 * 1024 * 1024)),
        backup_count=int(data.get("backup_count", 5)),
    )


def _parse_sweep(data: dict[str, Any]) -> SweepConfig:
    grid = data.get("grid", {}) or {}
    if not isinstance(grid, dict):
        raise ValueError("sweep.grid must be a mapping")
    parsed: dict[str, list[Any]] = {}
    for key, values in grid.items():
        if not isinstance(values, list) or not values:
            raise ValueError(f"sweep.grid.{key} must be a non-empty list")
        key = str(key)
        if key in SWEEP_ENUMS:
            values = [_parse_enum(SWEEP_ENUMS[key], value, f"sweep.grid.{key}") for value in values]
        elif key == "use_trailing_stop":
            values = [_parse_bool(value, f"sweep.grid.{key}") for value in values]
        parsed[key] = list(values)
    return SweepConfig(
        grid=parsed,
        rank_by=str(data.get("rank_by", "final_capital")),
        output_path=str(data.get("output_path", "reports/sweep.json")),
    )


def serialize_config(config: BacktestConfig) -> dict[str, Any]:
    payload = asdict(config)
    for key, value in payload["simulation"].items():
        if isinstance(value, Enum):
            payload["simulation"][key] = value.value
    return payload

"""Config loading and freezing."""

from goldsim.config.loader import (
    compute_config_hash,
    freeze_config,
    load_config,
    parse_simulation,
    serialize_config,
    verify_config_lock,
)
from goldsim.config.models import (
    BacktestConfig,
    DataConfig,
    LoggingConfig,
    MonitoringConfig,
    ReportConfig,
    SweepConfig,
)

__all__ = [
    "BacktestConfig",
    "DataConfig",
    "LoggingConfig",
    "MonitoringConfig",
    "ReportConfig",
    "SweepConfig",
    "compute_config_hash",
    "freeze_config",
    "load_config",
    "parse_simulation",
    "serialize_config",
    "verify_config_lock",
]

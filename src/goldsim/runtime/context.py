"""Identity of a single backtest or sweep run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from goldsim.config.loader import compute_config_hash

RUN_ID_STAMP = "%Y%m%dT%H%M%SZ"


def make_run_id(prefix: str, started_at: datetime, config_hash: str) -> str:
    return f"{prefix}-{started_at.strftime(RUN_ID_STAMP)}-{config_hash[:8]}"


@dataclass(frozen=True)
class RunContext:
    run_id: str
    config_path: Path
    config_hash: str
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def metadata(self) -> dict[str, Any]:
        """Header fields written at the top of every report."""
        return {
            "run_id": self.run_id,
            "config_path": str(self.config_path),
            "config_hash": self.config_hash,
            "generated_at_utc": self.started_at.isoformat(),
        }


def create_run_context(
    config_path: str | Path,
    run_id_prefix: str,
    run_id: Optional[str] = None,
) -> RunContext:
    path = Path(config_path)
    config_hash = compute_config_hash(path)
    started_at = datetime.now(timezone.utc)
    return RunContext(
        run_id=run_id or make_run_id(run_id_prefix, started_at, config_hash),
        config_path=path,
        config_hash=config_hash,
        started_at=started_at,
    )

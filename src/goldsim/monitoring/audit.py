"""JSON-lines journal of backtest and sweep run events."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from goldsim.runtime.context import RunContext


class AuditLog:
    """Appends one JSON record per event, stamped with the run id and config hash."""

    def __init__(self, path: str | Path, run_id: Optional[str] = None, config_hash: Optional[str] = None) -> None:
        self.path = Path(path)
        self.run_id = run_id
        self.config_hash = config_hash
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @classmethod
    def for_run(cls, path: str | Path, context: "RunContext") -> "AuditLog":
        return cls(path, run_id=context.run_id, config_hash=context.config_hash)

    def log(self, event: str, payload: dict[str, Any]) -> dict[str, Any]:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "config_hash": self.config_hash,
            "event": event,
            "payload": payload,
        }
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, default=str) + "\n")
        return record

    def read(self, event: Optional[str] = None) -> list[dict[str, Any]]:
        """Records in write order, optionally only those for one event name."""
        if not self.path.exists():
            return []
        records = []
        with self.path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                record = json.loads(line)
                if event is None or record.get("event") == event:
                    records.append(record)
        return records

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from goldsim.config import load_config
from goldsim.data import load_series
from goldsim.monitoring import AuditLog, setup_logging
from goldsim.report import format_currency, format_percent, serialize_result, write_report
from goldsim.runtime import create_run_context
from goldsim.simulator import simulate

logger = logging.getLogger("goldsim.scripts.run_backtest")


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay simulation parameters over a price series.")
    parser.add_argument("--config", required=True)
    parser.add_argument("--output", help="Override report.output_path from the config")
    args = parser.parse_args()

    config_path = Path(args.config)
    try:
        config = load_config(config_path)
    except ValueError as exc:
        raise SystemExit(f"Invalid config {config_path}: {exc}") from exc

    setup_logging(config.logging)
    context = create_run_context(config_path, config.run_id_prefix)
    audit = AuditLog.for_run(config.monitoring.audit_log_path, context)

    try:
        series = load_series(config.data.source, config.data.path)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Could not load price series: {exc}") from exc
    audit.log("run_start", {"config": str(config_path), "series": series.name, "points": len(series)})

    try:
        result = simulate(config.simulation, series)
    except ValueError as exc:
        audit.log("run_rejected", {"error": str(exc)})
        raise SystemExit(str(exc)) from exc

    output_path = Path(args.output or config.report.output_path)
    write_report(output_path, serialize_result(result), metadata=context.metadata())
    audit.log(
        "run_complete",
        {
            "final_capital": result.final_capital,
            "total_trades": result.total_trades,
            "skipped_trades": result.skipped_trades,
            "report": str(output_path),
        },
    )

    logger.info(
        "Final capital %s | trades %d | success %s | max drawdown %s",
        format_currency(result.final_capital),
        result.total_trades,
        format_percent(result.success_rate),
        format_percent(result.max_drawdown),
    )
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()

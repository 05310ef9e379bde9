from __future__ import annotations

import argparse
import logging
from pathlib import Path

from goldsim.config import load_config
from goldsim.data import load_series
from goldsim.monitoring import AuditLog, setup_logging
from goldsim.report import format_currency, serialize_sweep, write_report
from goldsim.runtime import create_run_context
from goldsim.simulator import run_sweep, summarize_sweep

logger = logging.getLogger("goldsim.scripts.run_sweep")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the configured parameter grid and rank the results.")
    parser.add_argument("--config", required=True)
    parser.add_argument("--output", help="Override sweep.output_path from the config")
    args = parser.parse_args()

    config_path = Path(args.config)
    try:
        config = load_config(config_path)
    except ValueError as exc:
        raise SystemExit(f"Invalid config {config_path}: {exc}") from exc
    if not config.sweep.grid:
        raise SystemExit(f"No sweep.grid defined in {config_path}")

    setup_logging(config.logging)
    context = create_run_context(config_path, config.run_id_prefix)
    audit = AuditLog.for_run(config.monitoring.audit_log_path, context)

    series = load_series(config.data.source, config.data.path)
    audit.log("sweep_start", {"grid": config.sweep.grid, "points": len(series)})
    try:
        runs, rejected = run_sweep(config.simulation, config.sweep.grid, series)
        summary = summarize_sweep(runs, rejected, rank_by=config.sweep.rank_by)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    output_path = Path(args.output or config.sweep.output_path)
    write_report(output_path, serialize_sweep(summary), metadata=context.metadata())
    audit.log("sweep_complete", {"runs": len(summary.runs), "rejected": len(summary.rejected)})

    if summary.best is not None:
        logger.info(
            "Best %s: %s -> %s",
            summary.rank_by,
            summary.best.overrides,
            format_currency(summary.best.result.final_capital),
        )
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()

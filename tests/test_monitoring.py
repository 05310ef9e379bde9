import logging
from datetime import datetime, timezone
from pathlib import Path

from goldsim.config import LoggingConfig
from goldsim.monitoring import AuditLog, setup_logging
from goldsim.runtime import create_run_context, make_run_id

CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


def test_audit_log_appends_json_lines(tmp_path):
    audit = AuditLog(tmp_path / "runtime" / "audit.log", run_id="gold-1", config_hash="abc")

    audit.log("run_start", {"config": "default.yaml"})
    audit.log("run_complete", {"final_capital": 10250.0})

    records = audit.read()
    assert [record["event"] for record in records] == ["run_start", "run_complete"]
    assert records[1]["payload"]["final_capital"] == 10250.0
    assert records[0]["run_id"] == "gold-1"
    assert [record["payload"] for record in audit.read("run_complete")] == [{"final_capital": 10250.0}]
    assert audit.read("run_rejected") == []


def test_run_context_metadata():
    context = create_run_context(CONFIG_PATH, "gold")

    assert context.run_id.startswith("gold-")
    assert context.run_id.endswith(context.config_hash[:8])
    assert context.metadata()["config_hash"] == context.config_hash


def test_audit_log_is_stamped_with_run_context(tmp_path):
    context = create_run_context(CONFIG_PATH, "gold", run_id="gold-fixed")
    audit = AuditLog.for_run(tmp_path / "audit.log", context)

    record = audit.log("sweep_start", {"points": 160})

    assert record["run_id"] == "gold-fixed"
    assert audit.read()[0]["config_hash"] == context.config_hash


def test_make_run_id_format():
    started = datetime(2024, 6, 3, 9, 30, tzinfo=timezone.utc)

    assert make_run_id("gold", started, "abcdef0123456789") == "gold-20240603T093000Z-abcdef01"


def test_setup_logging_writes_to_file(tmp_path):
    logger = logging.getLogger("goldsim")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    saved_propagate = logger.propagate
    logger.handlers = []
    try:
        log_file = tmp_path / "logs" / "goldsim.log"
        setup_logging(LoggingConfig(level="debug", file=str(log_file)))
        logging.getLogger("goldsim.simulator.engine").debug("hello from the engine")
        for handler in logger.handlers:
            handler.flush()

        assert logger.level == logging.DEBUG
        assert "hello from the engine" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers = saved_handlers
        logger.setLevel(saved_level)
        logger.propagate = saved_propagate

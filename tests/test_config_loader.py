from pathlib import Path

import pytest

yaml = pytest.importorskip("yaml")

from goldsim.config import freeze_config, load_config, serialize_config, verify_config_lock
from goldsim.data import load_sample_series
from goldsim.simulator import EntryMode, ExitMode, PositionModel, run_sweep

CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


def _write_config(tmp_path, simulation_extra="", data_block=""):
    path = tmp_path / "config.yaml"
    path.write_text(
        "name: test\n"
        "version: 1\n"
        "simulation:\n"
        "  starting_capital: 10000\n"
        "  position_size_percent: 1\n"
        "  leverage: 100\n"
        "  stop_loss_amount: 200\n"
        "  min_price_movement_percent: 0.3\n"
        "  daily_fee_percent: 0.1\n" + simulation_extra + data_block,
        encoding="utf-8",
    )
    return path


def test_load_default_config():
    config = load_config(CONFIG_PATH)

    assert config.simulation.starting_capital == 10000
    assert config.simulation.leverage == 100
    assert config.simulation.exit_mode == ExitMode.TRAILING_STOP
    assert config.simulation.position_model == PositionModel.SINGLE
    assert config.data.source == "sample"
    assert "leverage" in config.sweep.grid


def test_minimal_config_uses_defaults(tmp_path):
    config = load_config(_write_config(tmp_path))

    assert config.run_id_prefix == "test"
    assert config.simulation.entry_mode == EntryMode.LONG_ONLY
    assert config.simulation.min_trading_capital == 100.0
    assert config.report.output_path == "reports/backtest.json"
    assert config.logging.level == "INFO"


def test_policy_enums_are_parsed(tmp_path):
    extra = (
        "  entry_mode: long_short\n"
        "  exit_mode: take_profit_and_trailing\n"
        "  take_profit_amount: 500\n"
        "  position_model: concurrent\n"
        "  max_concurrent_positions: 3\n"
    )
    config = load_config(_write_config(tmp_path, simulation_extra=extra))

    assert config.simulation.entry_mode == EntryMode.LONG_SHORT
    assert config.simulation.exit_mode == ExitMode.TAKE_PROFIT_AND_TRAILING
    assert config.simulation.take_profit_amount == 500.0
    assert config.simulation.position_limit() == 3
    assert serialize_config(config)["simulation"]["exit_mode"] == "take_profit_and_trailing"


def test_invalid_enum_raises(tmp_path):
    with pytest.raises(ValueError, match="exit_mode"):
        load_config(_write_config(tmp_path, simulation_extra="  exit_mode: hope\n"))


def test_missing_key_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("name: test\nversion: 1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="simulation"):
        load_config(path)


def test_non_mapping_config_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_relative_data_path_resolves_against_config(tmp_path):
    data_block = "data:\n  source: csv\n  path: prices/gold.csv\n"
    config = load_config(_write_config(tmp_path, data_block=data_block))

    assert Path(config.data.path) == tmp_path / "prices" / "gold.csv"


def test_freeze_and_verify(tmp_path):
    target = tmp_path / "default.yaml"
    target.write_text(CONFIG_PATH.read_text(encoding="utf-8"), encoding="utf-8")

    lock_path = freeze_config(target)
    assert verify_config_lock(target, lock_path)

    target.write_text(target.read_text(encoding="utf-8") + "\n# edited\n", encoding="utf-8")
    assert verify_config_lock(target, lock_path) is False


def test_sweep_grid_over_policy_flags_runs(tmp_path):
    sweep_block = (
        "sweep:\n"
        "  grid:\n"
        "    exit_mode: [trailing_stop, fixed_stop]\n"
        "    use_trailing_stop: [true, false]\n"
    )
    config = load_config(_write_config(tmp_path, data_block=sweep_block))

    assert config.sweep.grid["exit_mode"] == [ExitMode.TRAILING_STOP, ExitMode.FIXED_STOP]

    runs, rejected = run_sweep(config.simulation, config.sweep.grid, load_sample_series())

    assert rejected == []
    assert len(runs) == 4
    assert {run.result.params.effective_exit_mode() for run in runs} == {
        ExitMode.TRAILING_STOP,
        ExitMode.FIXED_STOP,
    }


def test_invalid_sweep_enum_raises(tmp_path):
    sweep_block = "sweep:\n  grid:\n    exit_mode: [trailing_stop, hope]\n"

    with pytest.raises(ValueError, match="sweep.grid.exit_mode"):
        load_config(_write_config(tmp_path, data_block=sweep_block))


def test_use_trailing_stop_must_be_boolean(tmp_path):
    with pytest.raises(ValueError, match="use_trailing_stop"):
        load_config(_write_config(tmp_path, simulation_extra='  use_trailing_stop: "false"\n'))

    config = load_config(_write_config(tmp_path, simulation_extra="  use_trailing_stop: false\n"))
    assert config.simulation.use_trailing_stop is False

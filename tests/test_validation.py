from dataclasses import replace

import pytest

from goldsim.simulator import ExitMode, PositionModel, SimulationParams, validate_params
from goldsim.simulator.validation import InvalidParametersError, ensure_valid


def _params(**overrides):
    params = SimulationParams(
        starting_capital=10000,
        position_size_percent=1,
        leverage=100,
        stop_loss_amount=200,
        min_price_movement_percent=0.3,
        daily_fee_percent=0.1,
    )
    return replace(params, **overrides)


def test_default_params_are_valid():
    result = validate_params(_params())
    assert result.valid is True
    assert result.errors == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"starting_capital": 0},
        {"position_size_percent": 0},
        {"position_size_percent": 100.5},
        {"leverage": 0},
        {"leverage": 250},
        {"stop_loss_amount": 0},
        {"min_price_movement_percent": -0.1},
        {"daily_fee_percent": -1},
        {"starting_capital": float("nan")},
        {"exit_mode": ExitMode.TAKE_PROFIT_AND_TRAILING},
        {"position_model": PositionModel.CONCURRENT, "max_concurrent_positions": 0},
    ],
)
def test_invalid_params_are_rejected(overrides):
    result = validate_params(_params(**overrides))
    assert result.valid is False
    assert result.errors


def test_boundaries_are_inclusive():
    assert validate_params(_params(leverage=200, position_size_percent=100)).valid is True
    assert validate_params(_params(min_price_movement_percent=0, daily_fee_percent=0)).valid is True


def test_take_profit_required_only_for_take_profit_mode():
    assert validate_params(_params(take_profit_amount=None)).valid is True
    params = _params(exit_mode=ExitMode.TAKE_PROFIT_AND_TRAILING, take_profit_amount=400)
    assert validate_params(params).valid is True


def test_ensure_valid_collects_every_error():
    with pytest.raises(InvalidParametersError) as excinfo:
        ensure_valid(_params(leverage=0, stop_loss_amount=-5))
    assert len(excinfo.value.errors) == 2
    assert isinstance(excinfo.value, ValueError)

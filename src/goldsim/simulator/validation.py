"""Parameter validation run before any simulation work."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from goldsim.simulator.models import PositionModel, SimulationParams

MAX_LEVERAGE = 200.0
MAX_POSITION_SIZE_PERCENT = 100.0


class InvalidParametersError(ValueError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid parameters: " + "; ".join(self.errors))


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_params(params: SimulationParams) -> ValidationResult:
    errors: list[str] = []

    numeric = {
        "starting_capital": params.starting_capital,
        "position_size_percent": params.position_size_percent,
        "leverage": params.leverage,
        "stop_loss_amount": params.stop_loss_amount,
        "min_price_movement_percent": params.min_price_movement_percent,
        "daily_fee_percent": params.daily_fee_percent,
        "min_trading_capital": params.min_trading_capital,
        "min_position_amount": params.min_position_amount,
    }
    for key, value in numeric.items():
        if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
            errors.append(f"{key} must be a finite number")
    if errors:
        return ValidationResult(False, errors)

    if params.starting_capital <= 0:
        errors.append("starting_capital must be positive")
    if not 0 < params.position_size_percent <= MAX_POSITION_SIZE_PERCENT:
        errors.append(f"position_size_percent must be in (0, {MAX_POSITION_SIZE_PERCENT:g}]")
    if not 0 < params.leverage <= MAX_LEVERAGE:
        errors.append(f"leverage must be in (0, {MAX_LEVERAGE:g}]")
    if params.stop_loss_amount <= 0:
        errors.append("stop_loss_amount must be positive")
    if params.min_price_movement_percent < 0:
        errors.append("min_price_movement_percent must not be negative")
    if params.daily_fee_percent < 0:
        errors.append("daily_fee_percent must not be negative")
    if params.min_trading_capital < 0:
        errors.append("min_trading_capital must not be negative")
    if params.min_position_amount < 0:
        errors.append("min_position_amount must not be negative")

    if params.exit_mode.uses_take_profit:
        take_profit = params.take_profit_amount
        if take_profit is None or not math.isfinite(take_profit) or take_profit <= 0:
            errors.append("take_profit_amount must be positive for take_profit_and_trailing exits")
    if params.position_model == PositionModel.CONCURRENT and params.max_concurrent_positions < 1:
        errors.append("max_concurrent_positions must be at least 1")

    return ValidationResult(not errors, errors)


def ensure_valid(params: SimulationParams) -> None:
    result = validate_params(params)
    if not result.valid:
        raise InvalidParametersError(result.errors)

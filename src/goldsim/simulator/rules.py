"""Entry, sizing and exit rules shared by every engine configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from goldsim.data.models import PricePoint
from goldsim.simulator.models import EntryMode, ExitMode, ExitReason, Position, Side, SimulationParams


@dataclass(frozen=True)
class SizeResult:
    allow: bool
    base_amount: float
    leveraged_amount: float
    reason: str


@dataclass(frozen=True)
class ExitDecision:
    price: float
    reason: ExitReason


def price_movement_percent(current_open: float, previous_open: float) -> float:
    if previous_open <= 0:
        return 0.0
    return (current_open - previous_open) / previous_open * 100.0


def should_open(current_open: float, previous_open: float, threshold_percent: float) -> bool:
    if previous_open <= 0:
        return False
    return price_movement_percent(current_open, previous_open) >= threshold_percent


def entry_signal(
    current_open: float,
    previous_open: float,
    threshold_percent: float,
    mode: EntryMode,
) -> Optional[Side]:
    if should_open(current_open, previous_open, threshold_percent):
        return Side.LONG
    if mode == EntryMode.LONG_SHORT and previous_open > 0:
        if price_movement_percent(current_open, previous_open) <= -threshold_percent:
            return Side.SHORT
    return None


def size_position(
    capital: float,
    position_size_percent: float,
    leverage: float,
    min_amount: float = 1.0,
) -> SizeResult:
    base_amount = min(position_size_percent / 100.0 * capital, capital)
    if base_amount < min_amount:
        return SizeResult(False, 0.0, 0.0, "Position below minimum amount")
    return SizeResult(True, base_amount, base_amount * leverage, "Sized")


def realized_pnl(side: Side, entry_price: float, exit_price: float, leveraged_amount: float) -> float:
    return leveraged_amount * (exit_price - entry_price) / entry_price * side.direction


def stop_exit(position: Position, point: PricePoint, stop_amount: float, trailing: bool) -> Optional[float]:
    """Return the synthetic fill price when the dollar stop is reached on this point."""
    exposure = position.leveraged_amount
    reference = position.extreme_price if trailing else position.entry_price
    if exposure <= 0 or reference <= 0:
        return None
    if position.side == Side.LONG:
        adverse = exposure * (reference - point.low) / reference
        if adverse >= stop_amount:
            return reference * (1.0 - stop_amount / exposure)
    else:
        adverse = exposure * (point.high - reference) / reference
        if adverse >= stop_amount:
            return reference * (1.0 + stop_amount / exposure)
    return None


def take_profit_exit(position: Position, point: PricePoint, target_amount: float) -> Optional[float]:
    exposure = position.leveraged_amount
    entry = position.entry_price
    if exposure <= 0:
        return None
    if position.side == Side.LONG:
        favourable = exposure * (point.high - entry) / entry
        if favourable >= target_amount:
            return entry * (1.0 + target_amount / exposure)
    else:
        favourable = exposure * (entry - point.low) / entry
        if favourable >= target_amount:
            return entry * (1.0 - target_amount / exposure)
    return None


def evaluate_exit(position: Position, point: PricePoint, params: SimulationParams) -> Optional[ExitDecision]:
    """Update the position's extreme with the point and decide whether it closes.

    When a stop and a take-profit both trigger on the same day the stop wins.
    """
    position.update_extreme(point.high, point.low)
    mode = params.effective_exit_mode()

    price = stop_exit(position, point, params.stop_loss_amount, trailing=mode != ExitMode.FIXED_STOP)
    if price is not None:
        return ExitDecision(price, ExitReason.STOP_LOSS)

    if mode.uses_take_profit and params.take_profit_amount is not None:
        price = take_profit_exit(position, point, params.take_profit_amount)
        if price is not None:
            return ExitDecision(price, ExitReason.TAKE_PROFIT)
    return None

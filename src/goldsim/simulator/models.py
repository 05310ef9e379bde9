"""Simulation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class EntryMode(str, Enum):
    LONG_ONLY = "long_only"
    LONG_SHORT = "long_short"


class ExitMode(str, Enum):
    TRAILING_STOP = "trailing_stop"
    FIXED_STOP = "fixed_stop"
    TAKE_PROFIT_AND_TRAILING = "take_profit_and_trailing"

    @property
    def uses_take_profit(self) -> bool:
        return self == ExitMode.TAKE_PROFIT_AND_TRAILING


class PositionModel(str, Enum):
    SINGLE = "single"
    CONCURRENT = "concurrent"


class EquityFeePolicy(str, Enum):
    EXCLUDE = "exclude"
    SUBTRACT = "subtract"


class Side(str, Enum):
    LONG = "long"
    SHORT = "short"

    @property
    def direction(self) -> int:
        return 1 if self == Side.LONG else -1


class ExitReason(str, Enum):
    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"
    END_OF_DATA = "end_of_data"


@dataclass(frozen=True)
class SimulationParams:
    starting_capital: float
    position_size_percent: float
    leverage: float
    stop_loss_amount: float
    min_price_movement_percent: float
    daily_fee_percent: float
    use_trailing_stop: bool = True
    take_profit_amount: Optional[float] = None
    entry_mode: EntryMode = EntryMode.LONG_ONLY
    exit_mode: ExitMode = ExitMode.TRAILING_STOP
    position_model: PositionModel = PositionModel.SINGLE
    max_concurrent_positions: int = 5
    equity_fee_policy: EquityFeePolicy = EquityFeePolicy.EXCLUDE
    min_trading_capital: float = 100.0
    min_position_amount: float = 1.0

    def effective_exit_mode(self) -> ExitMode:
        # use_trailing_stop=False downgrades the plain trailing stop to a fixed stop
        if self.exit_mode == ExitMode.TRAILING_STOP and not self.use_trailing_stop:
            return ExitMode.FIXED_STOP
        return self.exit_mode

    def position_limit(self) -> int:
        if self.position_model == PositionModel.SINGLE:
            return 1
        return self.max_concurrent_positions


@dataclass
class Position:
    side: Side
    entry_date: date
    entry_price: float
    extreme_price: float
    base_amount: float
    leveraged_amount: float
    capital_at_entry: float
    accumulated_fees: float = 0.0
    last_fee_date: Optional[date] = None

    def unrealized_pnl(self, price: float) -> float:
        return self.leveraged_amount * (price - self.entry_price) / self.entry_price * self.side.direction

    def update_extreme(self, high: float, low: float) -> None:
        if self.side == Side.LONG:
            self.extreme_price = max(self.extreme_price, high)
        else:
            self.extreme_price = min(self.extreme_price, low)


@dataclass(frozen=True)
class ClosedTrade:
    side: Side
    entry_date: date
    exit_date: date
    entry_price: float
    exit_price: float
    extreme_price: float
    base_amount: float
    leveraged_amount: float
    pnl: float
    fees: float
    holding_days: int
    capital_at_entry: float
    capital_after_close: float
    exit_reason: ExitReason

    @property
    def price_change_percent(self) -> float:
        return (self.exit_price - self.entry_price) / self.entry_price * 100.0


@dataclass(frozen=True)
class EquityPoint:
    date: date
    equity: float


@dataclass(frozen=True)
class PerformanceMetrics:
    success_rate: float = 0.0
    max_drawdown: float = 0.0
    max_consecutive_losses: int = 0
    avg_profit_per_trade: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0
    profit_factor: float = 0.0
    sharpe_ratio: float = 0.0
    daily_return_volatility: float = 0.0


@dataclass(frozen=True)
class SimulationResult:
    params: SimulationParams
    starting_capital: float
    final_capital: float
    total_pnl: float
    total_fees: float
    total_trades: int
    skipped_trades: int
    equity_curve: list[EquityPoint] = field(default_factory=list)
    trades: list[ClosedTrade] = field(default_factory=list)
    metrics: PerformanceMetrics = PerformanceMetrics()

    @property
    def success_rate(self) -> float:
        return self.metrics.success_rate

    @property
    def max_drawdown(self) -> float:
        return self.metrics.max_drawdown

    @property
    def max_consecutive_losses(self) -> int:
        return self.metrics.max_consecutive_losses

    @property
    def avg_profit_per_trade(self) -> float:
        return self.metrics.avg_profit_per_trade

from dataclasses import replace

from goldsim.data import load_sample_series
from goldsim.report import format_currency, format_percent
from goldsim.simulator import ExitMode, PositionModel, SimulationParams, simulate


series = load_sample_series()

params = SimulationParams(
    starting_capital=10000,
    position_size_percent=1,
    leverage=100,
    stop_loss_amount=200,
    min_price_movement_percent=0.3,
    daily_fee_percent=0.1,
)

variants = {
    "trailing": params,
    "fixed": replace(params, exit_mode=ExitMode.FIXED_STOP),
    "take_profit": replace(params, exit_mode=ExitMode.TAKE_PROFIT_AND_TRAILING, take_profit_amount=400),
    "concurrent": replace(params, position_model=PositionModel.CONCURRENT, max_concurrent_positions=3),
}

for label, variant in variants.items():
    result = simulate(variant, series)
    print(
        f"{label:12s} final {format_currency(result.final_capital):>12s}"
        f"  trades {result.total_trades:3d}"
        f"  success {format_percent(result.success_rate):>7s}"
        f"  drawdown {format_percent(result.max_drawdown):>7s}"
        f"  sharpe {result.metrics.sharpe_ratio:6.2f}"
    )

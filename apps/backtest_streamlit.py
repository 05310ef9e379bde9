from __future__ import annotations

import csv
import io

import streamlit as st

from goldsim.data import PriceSeries, load_sample_series, parse_csv_rows
from goldsim.monitoring import setup_logging
from goldsim.report import format_currency, format_percent, serialize_trade
from goldsim.simulator import (
    EntryMode,
    EquityFeePolicy,
    ExitMode,
    PositionModel,
    SimulationParams,
    SimulationResult,
    simulate,
    validate_params,
)


def _load_series(uploaded) -> PriceSeries:
    if uploaded is None:
        return load_sample_series()
    text = uploaded.getvalue().decode("utf-8")
    return parse_csv_rows(csv.DictReader(io.StringIO(text)), name=uploaded.name)


def _params_form() -> SimulationParams:
    sidebar = st.sidebar
    sidebar.header("Parameters")
    exit_mode = ExitMode(sidebar.selectbox("Exit mode", [mode.value for mode in ExitMode]))
    position_model = PositionModel(sidebar.selectbox("Position model", [model.value for model in PositionModel]))
    return SimulationParams(
        starting_capital=sidebar.number_input("Starting capital ($)", value=10000.0, step=500.0),
        position_size_percent=sidebar.number_input("Position size (%)", value=1.0, step=0.5),
        leverage=sidebar.number_input("Leverage", value=100.0, step=10.0),
        stop_loss_amount=sidebar.number_input("Stop loss ($)", value=200.0, step=25.0),
        min_price_movement_percent=sidebar.number_input("Min price movement (%)", value=0.3, step=0.05),
        daily_fee_percent=sidebar.number_input("Daily fee (% of base)", value=0.1, step=0.05),
        use_trailing_stop=sidebar.checkbox("Trailing stop", value=True),
        take_profit_amount=(
            sidebar.number_input("Take profit ($)", value=500.0, step=50.0) if exit_mode.uses_take_profit else None
        ),
        entry_mode=EntryMode(sidebar.selectbox("Entry mode", [mode.value for mode in EntryMode])),
        exit_mode=exit_mode,
        position_model=position_model,
        max_concurrent_positions=(
            int(sidebar.number_input("Max concurrent positions", value=5, step=1))
            if position_model == PositionModel.CONCURRENT
            else 5
        ),
        equity_fee_policy=EquityFeePolicy(
            sidebar.selectbox("Fees in equity curve", [policy.value for policy in EquityFeePolicy])
        ),
    )


def _render_summary(result: SimulationResult) -> None:
    col_a, col_b, col_c, col_d = st.columns(4)
    col_a.metric("Final Capital", format_currency(result.final_capital))
    col_b.metric("Total P&L", format_currency(result.total_pnl))
    col_c.metric("Total Fees", format_currency(result.total_fees))
    col_d.metric("Trades", f"{result.total_trades} ({result.skipped_trades} skipped)")

    col_e, col_f, col_g, col_h = st.columns(4)
    col_e.metric("Success Rate", format_percent(result.success_rate))
    col_f.metric("Max Drawdown", format_percent(result.max_drawdown))
    col_g.metric("Max Consecutive Losses", str(result.max_consecutive_losses))
    col_h.metric("Avg Profit / Trade", format_currency(result.avg_profit_per_trade))

    with st.expander("Extended metrics"):
        metrics = result.metrics
        st.json(
            {
                "sharpe_ratio": round(metrics.sharpe_ratio, 4),
                "profit_factor": round(metrics.profit_factor, 4),
                "average_win": round(metrics.average_win, 2),
                "average_loss": round(metrics.average_loss, 2),
                "daily_return_volatility_pct": round(metrics.daily_return_volatility, 2),
            }
        )


def _render_trades(result: SimulationResult, series: PriceSeries) -> None:
    st.subheader("Trades")
    if not result.trades:
        st.info("No trades were opened")
        return
    st.dataframe([serialize_trade(trade) for trade in result.trades], use_container_width=True)

    active_index = st.selectbox(
        "Highlight trade",
        list(range(len(result.trades))),
        format_func=lambda index: (
            f"#{index + 1} {result.trades[index].entry_date} -> {result.trades[index].exit_date}"
        ),
    )
    trade = result.trades[active_index]
    window = series.between(trade.entry_date, trade.exit_date)
    st.line_chart(
        {"date": [point.date.isoformat() for point in window], "close": window.closes()},
        x="date",
        y="close",
    )
    st.caption(
        f"Entry {format_currency(trade.entry_price)} on {trade.entry_date}, "
        f"exit {format_currency(trade.exit_price)} on {trade.exit_date} ({trade.exit_reason.value}), "
        f"P&L {format_currency(trade.pnl)}, fees {format_currency(trade.fees)}"
    )


def main() -> None:
    setup_logging()
    st.set_page_config(page_title="Gold Backtest", layout="wide")
    st.title("Gold Price Simulation")

    uploaded = st.sidebar.file_uploader("Price CSV (date,open,high,low,close)", type=["csv"])
    try:
        series = _load_series(uploaded)
    except ValueError as exc:
        st.error(str(exc))
        return
    st.caption(f"{len(series)} price points loaded ({series.start_date} to {series.end_date})")

    params = _params_form()
    if st.sidebar.button("Run simulation"):
        validation = validate_params(params)
        if not validation.valid:
            for error in validation.errors:
                st.error(error)
            return
        st.session_state["result"] = simulate(params, series)

    st.subheader("Price")
    st.line_chart(
        {"date": [point.date.isoformat() for point in series], "close": series.closes()},
        x="date",
        y="close",
    )

    result = st.session_state.get("result")
    if result is None:
        st.info("Set parameters and run the simulation")
        return

    _render_summary(result)
    st.subheader("Equity Curve")
    st.line_chart(
        {
            "date": [point.date.isoformat() for point in result.equity_curve],
            "equity": [point.equity for point in result.equity_curve],
        },
        x="date",
        y="equity",
    )
    _render_trades(result, series)


if __name__ == "__main__":
    main()

from __future__ import annotations

from typing import Sequence

import pandas as pd
import streamlit as st

from alphadash.backtest.metrics import compute_strategy_metrics, drawdown_series
from alphadash.backtest.model import StrategyRow
from alphadash.backtest.simulator import simulate, strategy_frame
from alphadash.core.exceptions import AlphaDashError
from dashboard.components.charts import render_line_chart
from dashboard.components.error_banner import render_error
from dashboard.components.kpi import render_kpi
from dashboard.state.session import get_dataset, get_session_state, get_settings


def _equity_frame(frame: pd.DataFrame) -> pd.DataFrame:
    curves = frame[["cumulative_strategy_equity", "cumulative_benchmark_equity"]].rename(
        columns={
            "cumulative_strategy_equity": "Strategy",
            "cumulative_benchmark_equity": "Buy & Hold",
        }
    )
    return (
        curves.reset_index()
        .melt(id_vars="date", var_name="series", value_name="equity")
    )


def _drawdown_frame(rows: Sequence[StrategyRow]) -> pd.DataFrame:
    dd = drawdown_series(rows)
    return pd.DataFrame({"date": dd.index, "drawdown_pct": dd.to_numpy() * 100.0})


def render() -> None:
    st.title("Strategy Backtest")
    try:
        dataset = get_dataset()
    except AlphaDashError as err:
        render_error(err)
        return

    defaults = get_settings().strategy
    state = get_session_state()
    state.apply_defaults(defaults)

    st.subheader("⚙️ Strategy Parameters")
    cols = st.columns(3)
    state.buy_threshold = cols[0].slider(
        "Buy Threshold",
        min_value=0.0,
        max_value=0.05,
        step=0.001,
        value=min(max(float(state.buy_threshold), 0.0), 0.05),
        format="%.3f",
    )
    state.sell_threshold = cols[1].slider(
        "Sell Threshold",
        min_value=-0.05,
        max_value=0.0,
        step=0.001,
        value=min(max(float(state.sell_threshold), -0.05), 0.0),
        format="%.3f",
    )
    state.transaction_cost_pct = cols[2].slider(
        "Transaction Cost (%)",
        min_value=0.0,
        max_value=0.5,
        step=0.01,
        value=min(max(float(state.transaction_cost_pct), 0.0), 0.5),
        format="%.2f",
    )

    rows = simulate(
        dataset.observations,
        dataset.model_info.oos_cutoff_date,
        state.buy_threshold,
        state.sell_threshold,
        state.transaction_cost_pct / 100.0,
    )
    metrics = compute_strategy_metrics(rows, periods_per_year=defaults.periods_per_year)

    kpis = st.columns(4)
    with kpis[0]:
        render_kpi("Strategy Return", f"{metrics.total_return_pct:.2f}%", "Out-of-sample")
    with kpis[1]:
        render_kpi(
            "Benchmark Return",
            f"{metrics.benchmark_return_pct:.2f}%",
            "Buy & Hold",
            delta_color="off",
        )
    with kpis[2]:
        render_kpi(
            "Excess Return",
            f"{metrics.excess_return_pct:.2f}%",
            f"{metrics.excess_return_pct:+.2f}%",
        )
    with kpis[3]:
        render_kpi("Sharpe Ratio", f"{metrics.sharpe_ratio:.2f}", "Risk-adjusted", delta_color="off")

    frame = strategy_frame(rows)
    render_line_chart(
        "Cumulative Returns: Strategy vs Buy & Hold",
        _equity_frame(frame) if not frame.empty else pd.DataFrame(),
        x="date",
        y="equity",
        color="series",
        y_title="Cumulative Return",
    )

    extra = st.columns(3)
    extra[0].metric("Volatility", f"{metrics.volatility_pct:.2f}%")
    extra[1].metric("Max Drawdown", f"{metrics.max_drawdown_pct:.2f}%")
    extra[2].metric("Win Rate", f"{metrics.win_rate_pct:.1f}%")

    render_line_chart(
        "Drawdown from Peak",
        _drawdown_frame(rows),
        x="date",
        y="drawdown_pct",
        y_title="Drawdown (%)",
    )

    if not frame.empty:
        st.download_button(
            label="Download strategy rows (CSV)",
            data=frame.to_csv().encode("utf-8"),
            file_name="strategy_rows.csv",
            mime="text/csv",
        )

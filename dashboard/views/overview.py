from __future__ import annotations

from typing import List, Sequence

import pandas as pd
import streamlit as st

from alphadash.analytics.features import latest_signal, signal_markers, split_train_oos
from alphadash.backtest.metrics import compute_signal_metrics
from alphadash.backtest.model import Observation
from alphadash.core.exceptions import AlphaDashError
from dashboard.components.charts import render_line_chart
from dashboard.components.error_banner import render_error
from dashboard.components.kpi import render_kpi
from dashboard.state.session import get_dataset


def _price_frame(rows: Sequence[Observation], segment: str) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": pd.to_datetime([r.date for r in rows]),
            "price": [r.price for r in rows],
            "segment": segment,
        }
    )


def _marker_frame(buys: List[Observation], sells: List[Observation]) -> pd.DataFrame:
    frames = [_price_frame(buys, "OOS"), _price_frame(sells, "OOS")]
    frames[0]["marker"] = "BUY"
    frames[1]["marker"] = "SELL"
    return pd.concat(frames, ignore_index=True)


def render() -> None:
    st.title("Model Overview")
    try:
        dataset = get_dataset()
    except AlphaDashError as err:
        render_error(err)
        return
    if not dataset.observations:
        st.warning("The dataset has no rows.")
        return

    info = dataset.model_info
    rows = dataset.observations
    metrics = compute_signal_metrics(rows, info.oos_cutoff_date, info.r2_oos, info.rmse_oos)
    latest = rows[-1]
    signal = latest_signal(rows)

    cols = st.columns(4)
    with cols[0]:
        render_kpi(
            "Current Price",
            f"${latest.price:,.2f}",
            help=f"As of {latest.date:%Y-%m-%d}",
        )
    with cols[1]:
        render_kpi(
            "Signal",
            "BUY 📈" if signal == "BUY" else "SELL 📉",
            f"Alpha: {latest.predicted_forward_return:.4f}",
        )
    with cols[2]:
        render_kpi(
            "Hit Rate (OOS)",
            f"{metrics.hit_rate * 100:.1f}%",
            help=f"Direction accuracy over {metrics.n_oos} OOS periods",
        )
    with cols[3]:
        render_kpi(
            "R² (OOS)",
            f"{metrics.r2_oos:.4f}",
            f"RMSE: {metrics.rmse_oos:.4f}",
            delta_color="off",
        )
    st.caption(f"Information coefficient (OOS): {metrics.information_coefficient:.4f}")

    train, oos = split_train_oos(rows, info.oos_cutoff_date)
    buys, sells = signal_markers(rows, info.oos_cutoff_date)
    prices = pd.concat(
        [_price_frame(train, "Train"), _price_frame(oos, "OOS")], ignore_index=True
    )
    render_line_chart(
        "Price with ML Signals",
        prices,
        x="date",
        y="price",
        color="segment",
        y_title="Price ($)",
        rule_at=pd.Timestamp(info.oos_cutoff_date),
        markers=_marker_frame(buys, sells),
    )

    alpha = pd.DataFrame(
        {
            "date": pd.to_datetime([r.date for r in rows]),
            "alpha": [r.predicted_forward_return for r in rows],
        }
    )
    render_line_chart("Predicted Alpha Signal", alpha, x="date", y="alpha", y_title="Alpha")

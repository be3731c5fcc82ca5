# alphadash/backtest/simulator.py
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Sequence, Union

import numpy as np
import pandas as pd
from loguru import logger

from alphadash.backtest.model import Observation, StrategyRow

DateLike = Union[date, datetime, pd.Timestamp, str]


def as_date(value: DateLike) -> date:
    return pd.Timestamp(value).date()


def select_oos(observations: Iterable[Observation], cutoff: DateLike) -> List[Observation]:
    """Rows dated on or after `cutoff`, in their original order."""
    start = as_date(cutoff)
    return [row for row in observations if as_date(row.date) >= start]


def signal_for(prediction: float, buy_threshold: float, sell_threshold: float) -> int:
    """
    Map a prediction to a position with strict inequalities.

    The buy comparison runs first, so contradictory thresholds resolve long.
    """
    if prediction > buy_threshold:
        return 1
    if prediction < sell_threshold:
        return -1
    return 0


def simulate(
    observations: Sequence[Observation],
    oos_cutoff: DateLike,
    buy_threshold: float,
    sell_threshold: float,
    transaction_cost: float,
) -> List[StrategyRow]:
    """
    Run the threshold strategy over the out-of-sample slice.

    Args:
        observations (Sequence[Observation]): Rows sorted ascending by date.
        oos_cutoff (DateLike): First out-of-sample date (inclusive).
        buy_threshold (float): Go long when the prediction is above this.
        sell_threshold (float): Go short when the prediction is below this.
        transaction_cost (float): Fractional cost per unit of position change.

    Returns:
        List[StrategyRow]: One row per OOS observation; empty when none qualify.
    """
    oos = select_oos(observations, oos_cutoff)
    rows: List[StrategyRow] = []
    prev_signal = 0
    prev_price: float | None = None
    cum_strategy = 1.0
    cum_benchmark = 1.0

    for obs in oos:
        signal = signal_for(obs.predicted_forward_return, buy_threshold, sell_threshold)
        position_change = abs(signal - prev_signal)

        if prev_price is None:
            period_return = 0.0
            strategy_return = 0.0
        else:
            # a zero previous price yields inf or NaN, which then propagates
            with np.errstate(divide="ignore", invalid="ignore"):
                period_return = float(np.float64(obs.price - prev_price) / prev_price)
            # position entered at the previous row earns this period's move
            strategy_return = prev_signal * period_return
        strategy_return -= position_change * transaction_cost

        cum_strategy *= 1.0 + strategy_return
        cum_benchmark *= 1.0 + period_return

        rows.append(
            StrategyRow(
                observation=obs,
                signal=signal,
                position_change=position_change,
                period_return=period_return,
                strategy_return=strategy_return,
                cumulative_strategy_equity=cum_strategy,
                cumulative_benchmark_equity=cum_benchmark,
            )
        )
        prev_signal = signal
        prev_price = obs.price

    logger.debug(
        "[simulator] n={} buy={} sell={} cost={} equity={:.4f} benchmark={:.4f}",
        len(rows),
        buy_threshold,
        sell_threshold,
        transaction_cost,
        cum_strategy,
        cum_benchmark,
    )
    return rows


def strategy_frame(rows: Sequence[StrategyRow]) -> pd.DataFrame:
    """Date-indexed frame of strategy rows for charting and CSV export."""
    columns = [
        "price",
        "actual_forward_return",
        "predicted_forward_return",
        "signal",
        "position_change",
        "period_return",
        "strategy_return",
        "cumulative_strategy_equity",
        "cumulative_benchmark_equity",
    ]
    if not rows:
        return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name="date"))
    frame = pd.DataFrame([row.as_dict() for row in rows])
    frame["date"] = pd.to_datetime(frame["date"])
    return frame.set_index("date")[columns]

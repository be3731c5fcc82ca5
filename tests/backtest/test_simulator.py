from __future__ import annotations

import math
from datetime import date

import numpy as np
import pandas as pd
import pytest

from alphadash.backtest.simulator import (
    select_oos,
    signal_for,
    simulate,
    strategy_frame,
)

CUTOFF = date(2024, 1, 5)


def test_round_trip_example(make_obs):
    obs = make_obs([100.0, 110.0, 99.0], [0.04, -0.04, 0.0])

    rows = simulate(obs, CUTOFF, 0.03, -0.03, 0.01)

    assert [r.signal for r in rows] == [1, -1, 0]
    assert [r.position_change for r in rows] == [1, 2, 1]
    assert [r.period_return for r in rows] == pytest.approx([0.0, 0.10, -0.1])
    assert [r.strategy_return for r in rows] == pytest.approx([-0.01, 0.08, 0.09])
    assert rows[-1].cumulative_strategy_equity == pytest.approx(0.99 * 1.08 * 1.09)
    assert rows[-1].cumulative_benchmark_equity == pytest.approx(0.99)


def test_threshold_boundaries_are_flat():
    assert signal_for(0.03, 0.03, -0.03) == 0
    assert signal_for(-0.03, 0.03, -0.03) == 0
    assert signal_for(0.0300001, 0.03, -0.03) == 1
    assert signal_for(-0.0300001, 0.03, -0.03) == -1


def test_contradictory_thresholds_resolve_long():
    # both pred > buy and pred < sell hold for 0.0
    assert signal_for(0.0, -0.01, 0.01) == 1


def test_nan_prediction_is_flat():
    assert signal_for(float("nan"), 0.03, -0.03) == 0


def test_rows_before_cutoff_are_excluded_and_first_oos_period_has_no_return(make_obs):
    obs = make_obs([50.0, 100.0, 120.0], [0.05, 0.05, 0.05])

    rows = simulate(obs, obs[1].date, 0.03, -0.03, 0.0)

    assert [r.date for r in rows] == [obs[1].date, obs[2].date]
    assert rows[0].period_return == 0.0
    assert rows[0].strategy_return == 0.0
    assert rows[1].period_return == pytest.approx(0.2)
    assert rows[1].strategy_return == pytest.approx(0.2)


def test_initial_position_pays_entry_cost(make_obs):
    obs = make_obs([100.0], [-0.05])

    (row,) = simulate(obs, CUTOFF, 0.03, -0.03, 0.002)

    assert row.signal == -1
    assert row.position_change == 1
    assert row.strategy_return == pytest.approx(-0.002)
    assert row.cumulative_strategy_equity == pytest.approx(0.998)
    assert row.cumulative_benchmark_equity == 1.0


def test_empty_oos_slice_returns_empty_list(make_obs):
    obs = make_obs([100.0, 101.0], [0.05, 0.05])

    assert simulate(obs, "2030-01-01", 0.03, -0.03, 0.001) == []
    assert simulate([], CUTOFF, 0.03, -0.03, 0.001) == []


def test_zero_cost_return_is_signal_times_price_move(make_obs):
    rng = np.random.default_rng(7)
    prices = list(100.0 * np.cumprod(1 + rng.normal(0, 0.03, 60)))
    preds = list(rng.normal(0, 0.04, 60))
    obs = make_obs(prices, preds)

    rows = simulate(obs, CUTOFF, 0.01, -0.01, 0.0)

    prev = 0
    for row in rows:
        assert row.strategy_return == prev * row.period_return
        prev = row.signal


def test_equity_stays_positive_with_bounded_returns(make_obs):
    rng = np.random.default_rng(11)
    prices = list(100.0 * np.cumprod(1 + rng.uniform(-0.3, 0.3, 120)))
    preds = list(rng.normal(0, 0.05, 120))

    rows = simulate(make_obs(prices, preds), CUTOFF, 0.02, -0.02, 0.001)

    assert all(r.cumulative_strategy_equity > 0 for r in rows)
    assert all(r.cumulative_benchmark_equity > 0 for r in rows)


def test_zero_previous_price_propagates_instead_of_raising(make_obs):
    rows = simulate(make_obs([0.0, 100.0, 101.0], [0.05] * 3), CUTOFF, 0.03, -0.03, 0.0)

    assert len(rows) == 3
    assert rows[1].period_return == math.inf
    assert rows[1].strategy_return == math.inf
    assert math.isinf(rows[-1].cumulative_benchmark_equity)
    assert math.isinf(rows[-1].cumulative_strategy_equity)


def test_flat_zero_prices_give_nan_returns(make_obs):
    rows = simulate(make_obs([0.0, 0.0], [0.0, 0.0]), CUTOFF, 0.03, -0.03, 0.0)

    assert math.isnan(rows[1].period_return)
    assert math.isnan(rows[1].cumulative_benchmark_equity)


def test_input_order_is_not_resorted(make_obs):
    obs = make_obs([100.0, 110.0, 120.0], [0.0, 0.0, 0.0])
    shuffled = [obs[2], obs[0], obs[1]]

    rows = simulate(shuffled, CUTOFF, 0.03, -0.03, 0.0)

    assert [r.date for r in rows] == [obs[2].date, obs[0].date, obs[1].date]


def test_select_oos_accepts_strings_and_timestamps(make_obs):
    obs = make_obs([1.0, 2.0, 3.0], [0.0, 0.0, 0.0])

    assert select_oos(obs, obs[1].date.isoformat()) == obs[1:]
    assert select_oos(obs, pd.Timestamp(obs[2].date)) == obs[2:]


def test_strategy_frame_is_date_indexed(make_obs):
    rows = simulate(make_obs([100.0, 110.0], [0.05, 0.05]), CUTOFF, 0.03, -0.03, 0.0)

    frame = strategy_frame(rows)

    assert isinstance(frame.index, pd.DatetimeIndex)
    assert list(frame["signal"]) == [1, 1]
    assert frame["cumulative_benchmark_equity"].iloc[-1] == pytest.approx(1.1)
    assert strategy_frame([]).empty

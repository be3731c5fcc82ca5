# alphadash/backtest/metrics.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd
from loguru import logger

from alphadash.backtest.model import Observation, StrategyRow
from alphadash.backtest.simulator import DateLike, select_oos

WEEKS_PER_YEAR = 52


# -------- Data classes --------
@dataclass(frozen=True)
class SignalMetrics:
    hit_rate: float
    correlation: float
    information_coefficient: float
    r2_oos: float
    rmse_oos: float
    n_oos: int


@dataclass(frozen=True)
class StrategyMetrics:
    total_return_pct: float
    benchmark_return_pct: float
    excess_return_pct: float
    sharpe_ratio: float
    volatility_pct: float
    max_drawdown_pct: float
    win_rate_pct: float


_EMPTY_STRATEGY = StrategyMetrics(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


# -------- Internals --------
def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Sum-based Pearson correlation.

    Returns 0.0 when either series is constant (zero denominator), including
    the empty case. NaN inputs propagate.
    """
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    n = float(len(xs))
    sum_x = float(xs.sum())
    sum_y = float(ys.sum())
    sum_xy = float((xs * ys).sum())
    sum_x2 = float((xs * xs).sum())
    sum_y2 = float((ys * ys).sum())

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    # rounding can leave a constant series slightly below zero
    if spread <= 0:
        return 0.0
    return numerator / math.sqrt(spread)


def _hit_rate(rows: Sequence[Observation]) -> float:
    if not rows:
        return 0.0
    actual = np.sign([r.actual_forward_return for r in rows])
    predicted = np.sign([r.predicted_forward_return for r in rows])
    return float(np.count_nonzero(actual == predicted)) / len(rows)


def _max_drawdown(equity: np.ndarray) -> float:
    # NaN rows are skipped: peaks carry over them and the minimum ignores them
    peaks = np.fmax.accumulate(equity)
    with np.errstate(divide="ignore", invalid="ignore"):
        drawdowns = (equity - peaks) / peaks
    if np.isnan(drawdowns).all():
        return 0.0
    return min(0.0, float(np.nanmin(drawdowns)))


# -------- Public API --------
def compute_signal_metrics(
    observations: Sequence[Observation],
    oos_cutoff: DateLike,
    r2_oos: float,
    rmse_oos: float,
) -> SignalMetrics:
    """
    Directional and correlation quality of predictions over the OOS slice.

    A zero actual or predicted return only counts as a hit against another
    exact zero (three-way sign).
    """
    oos = select_oos(observations, oos_cutoff)
    hit_rate = _hit_rate(oos)
    correlation = pearson_correlation(
        [r.actual_forward_return for r in oos],
        [r.predicted_forward_return for r in oos],
    )
    logger.debug(
        "[metrics] signal n={} hit_rate={:.4f} ic={:.4f}",
        len(oos),
        hit_rate,
        correlation,
    )
    return SignalMetrics(
        hit_rate=hit_rate,
        correlation=correlation,
        information_coefficient=correlation,
        r2_oos=float(r2_oos),
        rmse_oos=float(rmse_oos),
        n_oos=len(oos),
    )


def compute_strategy_metrics(
    rows: Sequence[StrategyRow],
    *,
    periods_per_year: int = WEEKS_PER_YEAR,
) -> StrategyMetrics:
    """
    Performance summary of a simulated strategy.

    Variance is the population variance of per-period strategy returns.
    The Sharpe ratio is 0.0 when that variance is exactly zero.
    `max_drawdown_pct` is reported as a negative percentage (0 when the
    equity never falls below its running peak).
    """
    if not rows:
        return _EMPTY_STRATEGY

    last = rows[-1]
    total_return = (last.cumulative_strategy_equity - 1.0) * 100.0
    benchmark_return = (last.cumulative_benchmark_equity - 1.0) * 100.0
    excess_return = total_return - benchmark_return

    returns = np.array([r.strategy_return for r in rows], dtype=float)
    mean = float(returns.mean())
    std = math.sqrt(float(returns.var(ddof=0)))
    annualizer = math.sqrt(periods_per_year)
    volatility = std * annualizer * 100.0
    sharpe = 0.0 if std == 0 else (mean / std) * annualizer

    equity = np.array([r.cumulative_strategy_equity for r in rows], dtype=float)
    max_drawdown = _max_drawdown(equity) * 100.0

    wins = int(np.count_nonzero(returns > 0))
    win_rate = wins / len(returns) * 100.0

    logger.debug(
        "[metrics] strategy n={} tot={:.2f}% bench={:.2f}% vol={:.2f}% sharpe={:.3f} maxDD={:.2f}% win={:.1f}%",
        len(rows),
        total_return,
        benchmark_return,
        volatility,
        sharpe,
        max_drawdown,
        win_rate,
    )

    return StrategyMetrics(
        total_return_pct=total_return,
        benchmark_return_pct=benchmark_return,
        excess_return_pct=excess_return,
        sharpe_ratio=sharpe,
        volatility_pct=volatility,
        max_drawdown_pct=max_drawdown,
        win_rate_pct=win_rate,
    )


def drawdown_series(rows: Sequence[StrategyRow]) -> pd.Series:
    if not rows:
        return pd.Series(dtype=float)
    equity = pd.Series(
        [r.cumulative_strategy_equity for r in rows],
        index=pd.to_datetime([r.date for r in rows]),
        dtype=float,
    )
    return equity / equity.cummax() - 1.0

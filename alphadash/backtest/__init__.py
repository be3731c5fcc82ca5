"""Strategy simulation and performance metrics for model predictions.
Pure functions over immutable observation rows; safe to call on every parameter change.
"""
from __future__ import annotations

from alphadash.backtest.metrics import (
    SignalMetrics,
    StrategyMetrics,
    compute_signal_metrics,
    compute_strategy_metrics,
)
from alphadash.backtest.model import Observation, StrategyRow
from alphadash.backtest.simulator import simulate, strategy_frame

__all__ = [
    "Observation",
    "StrategyRow",
    "SignalMetrics",
    "StrategyMetrics",
    "simulate",
    "strategy_frame",
    "compute_signal_metrics",
    "compute_strategy_metrics",
]

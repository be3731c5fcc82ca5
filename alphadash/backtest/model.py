from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping


@dataclass(frozen=True)
class Observation:
    """
    One dated row of the model output table.

    Attributes:
        date (date): The period date; unique and ascending within a dataset.
        actual_forward_return (float): Realized forward return (`alpha_fwd_1`).
        predicted_forward_return (float): Model prediction (`pred_alpha_fwd_1`).
        price (float): Instrument price level at `date`.
        features (Mapping[str, float]): Any other numeric columns of the row.
    """

    date: date
    actual_forward_return: float
    predicted_forward_return: float
    price: float
    features: Mapping[str, float] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class StrategyRow:
    """
    An out-of-sample observation after the threshold strategy was applied.

    Attributes:
        observation (Observation): The source row.
        signal (int): Position decided at this row (-1, 0 or +1).
        position_change (int): |signal - previous signal|, in {0, 1, 2}.
        period_return (float): Price change since the previous OOS row.
        strategy_return (float): Previous signal times period return, net of costs.
        cumulative_strategy_equity (float): Running product of (1 + strategy_return).
        cumulative_benchmark_equity (float): Running product of (1 + period_return).
    """

    observation: Observation
    signal: int
    position_change: int
    period_return: float
    strategy_return: float
    cumulative_strategy_equity: float
    cumulative_benchmark_equity: float

    @property
    def date(self) -> date:
        return self.observation.date

    @property
    def price(self) -> float:
        return self.observation.price

    @property
    def actual_forward_return(self) -> float:
        return self.observation.actual_forward_return

    @property
    def predicted_forward_return(self) -> float:
        return self.observation.predicted_forward_return

    def as_dict(self) -> dict:
        return {
            "date": self.date,
            "price": self.price,
            "actual_forward_return": self.actual_forward_return,
            "predicted_forward_return": self.predicted_forward_return,
            "signal": self.signal,
            "position_change": self.position_change,
            "period_return": self.period_return,
            "strategy_return": self.strategy_return,
            "cumulative_strategy_equity": self.cumulative_strategy_equity,
            "cumulative_benchmark_equity": self.cumulative_benchmark_equity,
        }

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from alphadash.api.deps import get_provider, get_strategy_settings, load_dataset
from alphadash.backtest.metrics import compute_signal_metrics, compute_strategy_metrics
from alphadash.backtest.simulator import simulate
from alphadash.data.provider import DatasetProvider
from alphadash.settings import StrategySettings

router = APIRouter(prefix="/api", tags=["strategy"])


class StrategyRequest(BaseModel):
    """Strategy parameters; omitted fields fall back to configured defaults."""

    buy_threshold: Optional[float] = None
    sell_threshold: Optional[float] = None
    transaction_cost: Optional[float] = Field(default=None, ge=0.0)
    include_rows: bool = True


@router.get("/model")
def get_model_info(provider: DatasetProvider = Depends(get_provider)) -> Dict[str, Any]:
    dataset = load_dataset(provider)
    return dataset.model_info.model_dump(mode="json")


@router.get("/metrics/signal")
def get_signal_metrics(
    provider: DatasetProvider = Depends(get_provider),
) -> Dict[str, Any]:
    dataset = load_dataset(provider)
    info = dataset.model_info
    metrics = compute_signal_metrics(
        dataset.observations, info.oos_cutoff_date, info.r2_oos, info.rmse_oos
    )
    return asdict(metrics)


@router.post("/strategy")
def run_strategy(
    body: StrategyRequest,
    provider: DatasetProvider = Depends(get_provider),
    defaults: StrategySettings = Depends(get_strategy_settings),
) -> Dict[str, Any]:
    dataset = load_dataset(provider)
    buy = defaults.buy_threshold if body.buy_threshold is None else body.buy_threshold
    sell = (
        defaults.sell_threshold if body.sell_threshold is None else body.sell_threshold
    )
    cost = (
        defaults.transaction_cost
        if body.transaction_cost is None
        else body.transaction_cost
    )
    rows = simulate(
        dataset.observations, dataset.model_info.oos_cutoff_date, buy, sell, cost
    )
    metrics = compute_strategy_metrics(
        rows, periods_per_year=defaults.periods_per_year
    )
    return {
        "params": {
            "buy_threshold": buy,
            "sell_threshold": sell,
            "transaction_cost": cost,
            "periods_per_year": defaults.periods_per_year,
        },
        "metrics": asdict(metrics),
        "rows": [row.as_dict() for row in rows] if body.include_rows else [],
    }

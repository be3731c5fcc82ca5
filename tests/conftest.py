from __future__ import annotations

import json
import os
from datetime import date, timedelta
from pathlib import Path
from typing import List

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("ENV", "test")

from alphadash.backtest.model import Observation  # noqa: E402
from alphadash.data.provider import DatasetProvider  # noqa: E402
from alphadash.data.sources import LocalFileSource  # noqa: E402
from alphadash.logging_utils import setup_test_logging  # noqa: E402
from alphadash.main import create_app  # noqa: E402

OOS_CUTOFF = "2024-01-19"

CSV_TEXT = """Date,alpha_fwd_1,pred_alpha_fwd_1,SBUX,SPY,mom_4w,vol_8w
2024-01-05,0.010,0.020,95.0,470.0,0.5,0.2
2024-01-12,-0.020,-0.010,97.0,472.0,0.7,0.1
2024-01-19,0.030,0.040,100.0,475.0,0.9,0.3
2024-01-26,-0.050,-0.040,110.0,480.0,0.4,0.2
2024-02-02,0.010,0.000,99.0,478.0,0.2,0.6
2024-02-09,0.020,0.035,104.0,483.0,0.1,0.4
"""

MODEL_JSON = {
    "walk_forward": {"r2_oos": 0.0123, "rmse_oos": 0.0456, "n_oos": 4},
    "model_type": "ridge",
    "model_params": {"type": "ridge", "alpha": 1.0, "fit_intercept": True},
    "n_rows": 6,
    "train_window": 104,
    "horizon": 1,
    "features_used": ["mom_4w", "vol_8w", "SPY"],
    "target_col": "alpha_fwd_1",
    "predicted_col": "pred_alpha_fwd_1",
    "oos_cutoff_date": OOS_CUTOFF,
}


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    setup_test_logging(Path("alpha-dash-logs/"))
    yield


def make_observations(
    prices: List[float],
    predictions: List[float],
    actuals: List[float] | None = None,
    start: date = date(2024, 1, 5),
) -> List[Observation]:
    actuals = actuals if actuals is not None else [0.0] * len(prices)
    return [
        Observation(
            date=start + timedelta(weeks=i),
            actual_forward_return=a,
            predicted_forward_return=p,
            price=px,
        )
        for i, (px, p, a) in enumerate(zip(prices, predictions, actuals))
    ]


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    (tmp_path / "dashboard_output.csv").write_text(CSV_TEXT, encoding="utf-8")
    (tmp_path / "model.json").write_text(json.dumps(MODEL_JSON), encoding="utf-8")
    return tmp_path


@pytest.fixture
def provider(data_dir: Path) -> DatasetProvider:
    return DatasetProvider(LocalFileSource(data_dir), price_column="SBUX")


@pytest.fixture
def client(provider: DatasetProvider) -> TestClient:
    return TestClient(create_app(provider=provider))


@pytest.fixture
def make_obs():
    return make_observations

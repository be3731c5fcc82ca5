from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from alphadash.backtest.metrics import pearson_correlation
from alphadash.backtest.model import Observation
from alphadash.backtest.simulator import DateLike, as_date


def split_train_oos(
    observations: Sequence[Observation], cutoff: DateLike
) -> Tuple[List[Observation], List[Observation]]:
    """Partition rows into the training period and the out-of-sample period."""
    start = as_date(cutoff)
    train = [r for r in observations if as_date(r.date) < start]
    oos = [r for r in observations if as_date(r.date) >= start]
    return train, oos


def latest_signal(observations: Sequence[Observation]) -> Optional[str]:
    if not observations:
        return None
    return "BUY" if observations[-1].predicted_forward_return > 0 else "SELL"


def signal_markers(
    observations: Sequence[Observation], cutoff: DateLike
) -> Tuple[List[Observation], List[Observation]]:
    """OOS rows with a positive prediction (buys) and a negative one (sells)."""
    _, oos = split_train_oos(observations, cutoff)
    buys = [r for r in oos if r.predicted_forward_return > 0]
    sells = [r for r in oos if r.predicted_forward_return < 0]
    return buys, sells


def feature_correlation_matrix(
    frame: pd.DataFrame, features: Sequence[str]
) -> pd.DataFrame:
    """
    Pairwise Pearson correlations between the selected columns.

    Columns that are missing or not numeric are left out of the matrix.
    """
    usable: List[str] = []
    for name in dict.fromkeys(features):
        if name in frame.columns and pd.api.types.is_numeric_dtype(frame[name]):
            usable.append(name)
        else:
            logger.warning("[analytics] skipping non-numeric feature {}", name)

    values = {name: frame[name].to_numpy(dtype=float) for name in usable}
    matrix = [
        [pearson_correlation(values[a], values[b]) for b in usable] for a in usable
    ]
    return pd.DataFrame(matrix, index=usable, columns=usable, dtype=float)


def normalize_0_100(values: Sequence[float]) -> np.ndarray:
    """Min-max scale to 0..100; a constant series maps to zeros."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return arr
    lo = np.nanmin(arr)
    hi = np.nanmax(arr)
    if hi == lo:
        return np.zeros_like(arr)
    return (arr - lo) / (hi - lo) * 100.0

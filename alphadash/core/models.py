from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class WalkForward(BaseModel):
    """
    Out-of-sample accuracy figures computed when the model was trained.

    Attributes:
        r2_oos (float): Out-of-sample R².
        rmse_oos (float): Out-of-sample root mean squared error.
        n_oos (Optional[int]): Number of OOS rows the figures were computed on.
    """

    r2_oos: float = 0.0
    rmse_oos: float = 0.0
    n_oos: Optional[int] = None

    model_config = {"extra": "ignore"}


class ModelInfo(BaseModel):
    """
    Metadata record describing the model behind `pred_alpha_fwd_1`.

    Accepts the accuracy figures either nested under `walk_forward` or as
    top-level `r2_oos` / `rmse_oos` keys.
    """

    oos_cutoff_date: date
    walk_forward: WalkForward = Field(default_factory=WalkForward)
    model_type: str = ""
    model_params: Dict[str, Any] = Field(default_factory=dict)
    n_rows: Optional[int] = None
    train_window: Optional[int] = None
    horizon: Optional[int] = None
    features_used: List[str] = Field(default_factory=list)
    target_col: str = "alpha_fwd_1"
    predicted_col: str = "pred_alpha_fwd_1"

    model_config = {
        "extra": "ignore",
        "frozen": True,
        "protected_namespaces": (),
    }

    @model_validator(mode="before")
    @classmethod
    def _lift_accuracy(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "walk_forward" in data:
            return data
        flat = {k: data[k] for k in ("r2_oos", "rmse_oos", "n_oos") if k in data}
        if not flat:
            return data
        return {**data, "walk_forward": flat}

    @property
    def r2_oos(self) -> float:
        return self.walk_forward.r2_oos

    @property
    def rmse_oos(self) -> float:
        return self.walk_forward.rmse_oos

from __future__ import annotations

import json
from dataclasses import dataclass
from io import StringIO
from typing import List, Optional

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from alphadash.backtest.model import Observation
from alphadash.core.exceptions import ConfigError, DataValidationError
from alphadash.core.models import ModelInfo
from alphadash.data.sources import BlobSource, DataSource, HttpSource, LocalFileSource
from alphadash.settings import DataSourceSettings, Settings

DATE_COLUMN = "Date"


@dataclass(frozen=True)
class Dataset:
    """A fully resolved dataset: the sorted table, its rows, and model metadata."""

    frame: pd.DataFrame
    observations: List[Observation]
    model_info: ModelInfo
    price_column: str


def observations_from_frame(
    frame: pd.DataFrame,
    *,
    price_column: str,
    target_col: str = "alpha_fwd_1",
    predicted_col: str = "pred_alpha_fwd_1",
) -> List[Observation]:
    """
    Convert a sorted, type-coerced table into Observation records.

    Numeric columns other than the date, target, prediction and price
    columns are carried in `Observation.features`.
    """
    core = {DATE_COLUMN, target_col, predicted_col, price_column}
    feature_cols = [
        c
        for c in frame.columns
        if c not in core and pd.api.types.is_numeric_dtype(frame[c])
    ]
    rows: List[Observation] = []
    for rec in frame.to_dict("records"):
        rows.append(
            Observation(
                date=pd.Timestamp(rec[DATE_COLUMN]).date(),
                actual_forward_return=float(rec[target_col]),
                predicted_forward_return=float(rec[predicted_col]),
                price=float(rec[price_column]),
                features={c: float(rec[c]) for c in feature_cols},
            )
        )
    return rows


class DatasetProvider:
    """
    Loads the observation table and model metadata from a DataSource.

    Constructed explicitly and handed to the API and dashboard; it holds no
    cached data itself.
    """

    def __init__(
        self,
        source: DataSource,
        *,
        csv_name: str = "dashboard_output.csv",
        json_name: str = "model.json",
        price_column: str = "SBUX",
    ) -> None:
        self.source = source
        self.csv_name = csv_name
        self.json_name = json_name
        self.price_column = price_column

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DatasetProvider":
        data = (settings or Settings()).data
        return cls(
            build_source(data),
            csv_name=data.csv_file,
            json_name=data.json_file,
            price_column=data.price_column,
        )

    def read_file(self, name: str) -> str:
        return self.source.read_text(name)

    def load_frame(
        self,
        *,
        target_col: str = "alpha_fwd_1",
        predicted_col: str = "pred_alpha_fwd_1",
    ) -> pd.DataFrame:
        text = self.source.read_text(self.csv_name)
        try:
            frame = pd.read_csv(StringIO(text), skip_blank_lines=True)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise DataValidationError(f"{self.csv_name}: unreadable CSV: {exc}") from exc

        required = [DATE_COLUMN, target_col, predicted_col, self.price_column]
        missing = [c for c in required if c not in frame.columns]
        if missing:
            raise DataValidationError(
                f"{self.csv_name}: missing required columns: {', '.join(missing)}"
            )

        frame[DATE_COLUMN] = pd.to_datetime(frame[DATE_COLUMN], errors="coerce")
        bad_dates = int(frame[DATE_COLUMN].isna().sum())
        if bad_dates:
            logger.warning(
                "[provider] dropping {} rows with unparseable dates from {}",
                bad_dates,
                self.csv_name,
            )
            frame = frame.dropna(subset=[DATE_COLUMN])
        for col in (target_col, predicted_col, self.price_column):
            frame[col] = pd.to_numeric(frame[col], errors="coerce")

        frame = frame.sort_values(DATE_COLUMN, kind="mergesort")
        dupes = int(frame[DATE_COLUMN].duplicated(keep="last").sum())
        if dupes:
            logger.warning(
                "[provider] {} duplicate dates in {}; keeping last occurrence",
                dupes,
                self.csv_name,
            )
            frame = frame.drop_duplicates(subset=[DATE_COLUMN], keep="last")
        frame = frame.reset_index(drop=True)

        logger.info(
            "[provider] loaded {} rows from {} via {}",
            len(frame),
            self.csv_name,
            self.source,
        )
        return frame

    def load_model_info(self) -> ModelInfo:
        text = self.source.read_text(self.json_name)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataValidationError(f"{self.json_name}: invalid JSON: {exc}") from exc
        try:
            return ModelInfo.model_validate(payload)
        except ValidationError as exc:
            raise DataValidationError(f"{self.json_name}: {exc}") from exc

    def load(self) -> Dataset:
        model_info = self.load_model_info()
        frame = self.load_frame(
            target_col=model_info.target_col, predicted_col=model_info.predicted_col
        )
        observations = observations_from_frame(
            frame,
            price_column=self.price_column,
            target_col=model_info.target_col,
            predicted_col=model_info.predicted_col,
        )
        return Dataset(
            frame=frame,
            observations=observations,
            model_info=model_info,
            price_column=self.price_column,
        )


def build_source(settings: DataSourceSettings) -> DataSource:
    if settings.source == "local":
        return LocalFileSource(settings.data_dir)
    if settings.source == "blob":
        return BlobSource.from_settings(
            container_name=settings.blob_container,
            connection_string=settings.blob_connection_string,
            account=settings.blob_account,
            account_key=settings.blob_key,
        )
    if settings.source == "http":
        return HttpSource(settings.base_url or "")
    raise ConfigError(f"unknown DATA_SOURCE {settings.source!r}")


__all__ = ["Dataset", "DatasetProvider", "build_source", "observations_from_frame"]

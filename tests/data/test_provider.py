from __future__ import annotations

import json
from datetime import date

import pytest

from alphadash.core.exceptions import (
    ConfigError,
    DataValidationError,
    DatasetNotFoundError,
)
from alphadash.data.provider import DatasetProvider, build_source
from alphadash.data.sources import HttpSource, LocalFileSource
from alphadash.settings import DataSourceSettings


def test_load_returns_sorted_observations_and_model_info(provider):
    dataset = provider.load()

    assert len(dataset.observations) == 6
    dates = [o.date for o in dataset.observations]
    assert dates == sorted(dates)
    assert dataset.model_info.oos_cutoff_date == date(2024, 1, 19)
    assert dataset.model_info.rmse_oos == pytest.approx(0.0456)
    first = dataset.observations[0]
    assert first.price == 95.0
    assert first.predicted_forward_return == pytest.approx(0.02)
    assert set(first.features) == {"SPY", "mom_4w", "vol_8w"}


def test_unsorted_and_duplicate_dates_are_normalized(tmp_path):
    (tmp_path / "model.json").write_text(
        json.dumps({"oos_cutoff_date": "2024-01-01", "r2_oos": 0.1, "rmse_oos": 0.2})
    )
    (tmp_path / "dashboard_output.csv").write_text(
        "Date,alpha_fwd_1,pred_alpha_fwd_1,SBUX\n"
        "2024-01-12,0.1,0.1,11\n"
        "2024-01-05,0.2,0.2,10\n"
        "2024-01-12,0.3,0.3,12\n"
        "not-a-date,0.4,0.4,13\n"
    )
    provider = DatasetProvider(LocalFileSource(tmp_path))

    dataset = provider.load()

    assert [o.date for o in dataset.observations] == [date(2024, 1, 5), date(2024, 1, 12)]
    assert dataset.observations[-1].price == 12.0
    # flat accuracy keys are accepted as well as the nested walk_forward block
    assert dataset.model_info.r2_oos == pytest.approx(0.1)


def test_missing_columns_raise_validation_error(tmp_path, data_dir):
    (data_dir / "dashboard_output.csv").write_text("Date,alpha_fwd_1\n2024-01-05,0.1\n")
    provider = DatasetProvider(LocalFileSource(data_dir))

    with pytest.raises(DataValidationError, match="pred_alpha_fwd_1"):
        provider.load()


def test_invalid_model_json(data_dir):
    (data_dir / "model.json").write_text("{not json")
    with pytest.raises(DataValidationError):
        DatasetProvider(LocalFileSource(data_dir)).load_model_info()

    (data_dir / "model.json").write_text(json.dumps({"r2_oos": 0.1}))
    with pytest.raises(DataValidationError):
        DatasetProvider(LocalFileSource(data_dir)).load_model_info()


def test_local_source_not_found_and_escape(data_dir):
    source = LocalFileSource(data_dir)

    with pytest.raises(DatasetNotFoundError):
        source.read_text("nope.csv")
    with pytest.raises(DatasetNotFoundError):
        source.read_text("../outside.csv")
    assert source.read_text("model.json").startswith("{")


def test_build_source_from_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_SOURCE", "local")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    assert isinstance(build_source(DataSourceSettings()), LocalFileSource)

    monkeypatch.setenv("DATA_SOURCE", "http")
    monkeypatch.setenv("DATA_BASE_URL", "https://example.test/data/")
    source = build_source(DataSourceSettings())
    assert isinstance(source, HttpSource)
    assert source.base_url == "https://example.test/data"

    monkeypatch.setenv("DATA_SOURCE", "blob")
    for key in (
        "AZURE_STORAGE_CONNECTION_STRING",
        "AZURE_STORAGE_ACCOUNT",
        "AZURE_STORAGE_ACCOUNT_KEY",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("AZURE_STORAGE_CONTAINER_NAME", "models")
    with pytest.raises(ConfigError):
        build_source(DataSourceSettings())

from __future__ import annotations

from fastapi import HTTPException, Request
from loguru import logger

from alphadash.core.exceptions import (
    DataValidationError,
    DatasetNotFoundError,
    ProviderError,
)
from alphadash.data.provider import Dataset, DatasetProvider
from alphadash.settings import StrategySettings


def get_provider(request: Request) -> DatasetProvider:
    return request.app.state.provider


def get_strategy_settings(request: Request) -> StrategySettings:
    return request.app.state.strategy_settings


def load_dataset(provider: DatasetProvider) -> Dataset:
    """Load the dataset, translating provider failures into HTTP errors."""
    try:
        return provider.load()
    except DatasetNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except DataValidationError as exc:
        logger.warning("[api] dataset validation failed: {}", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ProviderError as exc:
        logger.error("[api] dataset provider failed: {}", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

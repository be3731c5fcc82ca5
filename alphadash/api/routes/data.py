from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from loguru import logger

from alphadash.api.deps import get_provider
from alphadash.core.exceptions import DatasetNotFoundError, ProviderError
from alphadash.data.provider import DatasetProvider

router = APIRouter(prefix="/api", tags=["data"])


@router.get("/data")
def get_data_file(
    file: Optional[str] = Query(default=None),
    provider: DatasetProvider = Depends(get_provider),
) -> Response:
    """
    Serve a raw dataset file from the configured source.

    Returns:
        Response: The file body as JSON or CSV text.
    """
    if not file:
        return JSONResponse({"error": "File parameter required"}, status_code=400)

    try:
        content = provider.read_file(file)
    except DatasetNotFoundError:
        return JSONResponse({"error": "File not found"}, status_code=404)
    except ProviderError as exc:
        logger.error("[api] error fetching {}: {}", file, exc)
        return JSONResponse(
            {"error": "Failed to fetch data", "details": str(exc)}, status_code=502
        )

    media_type = "application/json" if file.endswith(".json") else "text/csv"
    headers = {}
    if getattr(provider.source, "cacheable", False):
        headers["Cache-Control"] = "public, max-age=3600"
    return Response(content=content, media_type=media_type, headers=headers)

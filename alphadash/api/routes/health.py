from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from alphadash import APP_VERSION

router = APIRouter(tags=["health"])


@router.get("/live")
def health_live() -> Dict[str, Any]:
    """
    A lightweight liveness probe.

    Returns:
        Dict[str, Any]: A dictionary with the service status and version.
    """
    return {"ok": True, "service": "alpha-dash", "version": APP_VERSION}


@router.get("/ready")
def health_ready() -> Dict[str, str]:
    """
    A lightweight readiness probe.

    Returns:
        Dict[str, str]: A dictionary with the readiness status and timestamp.
    """
    return {"status": "ok", "utc": datetime.now(timezone.utc).isoformat()}

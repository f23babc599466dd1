from __future__ import annotations

from fastapi import APIRouter, HTTPException

from articles_api.config import get_settings
from articles_api.observability.metrics import get_metrics


METRICS_PATH = "/metrics"

router = APIRouter(tags=["diagnostics"])


@router.get(METRICS_PATH)
async def metrics() -> dict:
    settings = get_settings()
    if not settings.enable_metrics_endpoint:
        raise HTTPException(status_code=404, detail="Not found")
    return get_metrics().snapshot()

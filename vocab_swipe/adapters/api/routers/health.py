# vocab_swipe/adapters/api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
import structlog

from vocab_swipe.adapters.api.dependencies import get_source_store
from vocab_swipe.core.use_cases.source_store import WordSourceStore
from vocab_swipe.shared.config import settings

logger = structlog.get_logger()

router = APIRouter(prefix="/api/health", tags=["System"])


@router.get("", status_code=status.HTTP_200_OK)
async def liveness_probe():
    """Answers as long as the process serves requests."""
    return {
        "status": "ok",
        "message": "Vocab Swipe Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/ready")
async def readiness_probe(store: WordSourceStore = Depends(get_source_store)):
    """
    Probes the source backing (sources folder or remote server).
    503 Service Unavailable while it cannot be reached.
    """
    try:
        storage_up = await store.health_check()
    except Exception as e:
        logger.error("health_check_failed", component="storage", error=str(e))
        storage_up = False

    body = {"storage": "up" if storage_up else "down", "backend": settings.STORAGE_BACKEND.value}
    if not storage_up:
        logger.warning("readiness_probe_failed", **body)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body

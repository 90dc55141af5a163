# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-15
# Description: health.py
# -----------------------------------------------------------------------------
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from api.schemas.health import HealthResponse, DeepHealthResponse
from api.dependencies import get_health_service
from services.DocHealthService import DocHealthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


@router.get("/deep", response_model=DeepHealthResponse)
async def deep_health_check(
    svc: DocHealthService = Depends(get_health_service),
    run_chat: bool = Query(False, description="Also send a tiny chat completion"),
) -> DeepHealthResponse:
    logger.info("GET /health/deep called (run_chat=%s)", run_chat)
    result = await svc.deep_health(run_chat=run_chat)
    logger.info("GET /health/deep completed status=%s", result.status)
    return result

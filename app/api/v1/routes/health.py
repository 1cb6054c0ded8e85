"""
Health check endpoints
Provides health and readiness status for the application

- /health (liveness): App is running (doesn't check dependencies)
- /health/ready (readiness): Both durable maps can be read

Reference:
- https://kubernetes.io/docs/tasks/configure-pod-container/configure-liveness-readiness-startup-probes/
- https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import open_maps

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


class HealthResponse(BaseModel):
    """
    Response model for health check endpoints
    Reference: https://fastapi.tiangolo.com/tutorial/response-model/
    """
    status: str
    message: str
    stores: Optional[int] = None
    items: Optional[int] = None


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check (liveness)",
    description="Returns the liveness status of the application. Does not check dependencies.",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        message="Service is running"
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check",
    description="Returns the readiness status, reading the row count of both durable maps.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Service is not ready (database unavailable)"}
    }
)
async def readiness_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """
    Readiness probe endpoint

    **Returns:**
        HealthResponse: Status plus the number of stored stores and items

    **Raises:**
        HTTPException: 503 if the durable maps cannot be read
    """
    stores, items = open_maps(db)
    try:
        store_count = await stores.count()
        item_count = await items.count()
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not ready - database unavailable"
        ) from e
    return HealthResponse(
        status="ready",
        message="Service is ready to serve traffic",
        stores=store_count,
        items=item_count,
    )

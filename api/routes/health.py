"""
Health check endpoints.

Provides endpoints for monitoring and load balancer health checks.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_post_repository
from core.logging import get_logger
from core.storage import BasePostRepository, StorageError


logger = get_logger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Basic health check.

    Returns 200 if the service is running.
    Used by load balancers and orchestration systems.
    """
    return {
        "status": "healthy",
        "service": "blog-posts",
    }


@router.get("/ready")
async def readiness_check(
    repository: BasePostRepository = Depends(get_post_repository),
) -> JSONResponse:
    """
    Readiness check.

    Returns 200 if the store answers a count query, 503 otherwise.
    """
    try:
        await repository.count()
    except StorageError as exc:
        logger.warning("Readiness check failed", error=str(exc))
        return JSONResponse(
            status_code=503,
            content={
                "status": "unavailable",
                "checks": {"database": "error"},
            },
        )

    return JSONResponse(
        status_code=200,
        content={
            "status": "ready",
            "checks": {"database": "ok"},
        },
    )

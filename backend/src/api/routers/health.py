"""Health check endpoints."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_auth_client
from core.auth_client import SupabaseAuthClient


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    auth: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> HealthResponse:
    """Check application, database and auth store health."""
    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        db_status = "unhealthy"
        await db.rollback()

    auth_status = "healthy" if await auth_client.health() else "unhealthy"
    if auth_status == "unhealthy":
        logger.warning("Auth store health check failed")

    return HealthResponse(
        status="healthy" if db_status == auth_status == "healthy" else "degraded",
        database=db_status,
        auth=auth_status,
    )

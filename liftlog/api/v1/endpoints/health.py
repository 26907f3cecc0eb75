"""Health check endpoints for load balancers and monitoring."""

import logging
import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.config import get_settings
from liftlog.db.session import get_db
from liftlog.models.workout import Workout

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health():
    """Liveness. Includes the build version when LIFTLOG_VERSION is set."""
    settings = get_settings()
    payload: dict = {"status": "ok", "app": settings.app_name, "environment": settings.environment}
    version = os.environ.get("LIFTLOG_VERSION")
    if version:
        payload["version"] = version
    return payload


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Readiness: app + DB connectivity + schema present."""
    try:
        await db.execute(text("SELECT 1"))
        workouts = (await db.execute(select(func.count()).select_from(Workout))).scalar_one()
        return {"status": "ok", "database": "connected", "workouts": workouts}
    except SQLAlchemyError as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": str(e)},
        )

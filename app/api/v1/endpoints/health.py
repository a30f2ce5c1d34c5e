"""Liveness and readiness probes."""

import logging
import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.session import get_db
from app.models.progress import ProgressRecord

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health():
    """Liveness. Includes built_at when BACKEND_BUILT_AT is set."""
    payload: dict = {"status": "ok", "service": get_settings().app_name}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Readiness: the database answers and the progress schema is migrated."""
    try:
        await db.execute(select(ProgressRecord.id).limit(1))
    except sa_exc.DBAPIError as e:
        logger.warning("Readiness check failed: %s", e.orig or e)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": str(e.orig or e)},
        )
    return {"status": "ok", "database": "connected"}

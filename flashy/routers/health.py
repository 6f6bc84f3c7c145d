import logging

import aiosqlite
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from flashy.db.sqlite import db_time, open_db
from flashy.models.health import HealthStatus

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthStatus, response_model_exclude_none=True)
async def health():
    # Opens its own connection so a broken store still produces an answer
    try:
        async with open_db() as db:
            now = await db_time(db)
        return HealthStatus(ok=True, db_time=now)
    except (aiosqlite.Error, RuntimeError, OSError) as e:
        logger.error("Health check failed: %s", e)
        status = HealthStatus(ok=False, error=str(e))
        return JSONResponse(status.model_dump(exclude_none=True), status_code=500)

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from achievement_api.database import get_db
from achievement_api.log import get_logger
from achievement_api.schema.stats_schema import DatabaseHealthOut, HealthOut

log = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=HealthOut, status_code=status.HTTP_200_OK)
async def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc)}


@router.get("/db", response_model=DatabaseHealthOut, status_code=status.HTTP_200_OK)
async def health_db(db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        log.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "ERROR", "database": "disconnected", "error": str(e)},
        )
    return {"status": "OK", "database": "connected"}

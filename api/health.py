from fastapi import APIRouter
from pathlib import Path
import logging

from config import settings
from database import Database
from schemas.responses import HealthResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Report database reachability and whether the uploads directory exists"""
    db_status = await Database.health_check()
    uploads_ok = Path(settings.UPLOADS_DIR).is_dir()
    if not db_status:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if db_status else "unhealthy",
        database="ok" if db_status else "error",
        uploads="ok" if uploads_ok else "missing",
    )

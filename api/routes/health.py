"""Health check and utility routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine
import logging

from adapters.sql_adapter import check_connection
from api.dependencies import get_engine
from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("nutrilog.api.health")


@router.get("/ping")
def ping():
    return {"status": "ok", "message": "pong"}


@router.get("/health")
def health_check(engine: Engine = Depends(get_engine)):
    """Service status including database reachability"""
    database_ok = check_connection(engine)
    if not database_ok:
        logger.warning("Health check: database unreachable")
    return {
        "status": "ok" if database_ok else "degraded",
        "service": settings.app_name,
        "version": settings.app_version,
        "database": "connected" if database_ok else "unreachable",
    }

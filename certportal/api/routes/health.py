"""
Health check endpoints for deployment monitoring.
"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from certportal.core.config import API_VERSION
from certportal.core.auth_dependency import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def _database_status(db: Session) -> str:
    try:
        db.execute(text("SELECT 1"))
        return "connected"
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {e}")
        return "error"


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint for deployment monitoring.

    Returns "healthy" when the database is reachable, "degraded" otherwise.
    """
    db_status = _database_status(db)
    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "database": db_status,
        "version": API_VERSION,
    }


@router.get("/system/health")
def system_health(db: Session = Depends(get_db)):
    return {
        "status": "ok",
        "database": _database_status(db),
        "api_version": API_VERSION,
        "service": "Certificate Portal API"
    }

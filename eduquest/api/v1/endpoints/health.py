"""
Health check endpoints
"""

import psutil
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eduquest.core.config import settings
from eduquest.core.database import get_db

router = APIRouter()


@router.get("/health")
def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.APP_VERSION,
    }


@router.get("/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """Health check including database and host resources"""
    health_status = {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.APP_VERSION,
        "checks": {},
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "healthy"
    except SQLAlchemyError as e:
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "degraded"

    memory = psutil.virtual_memory()
    health_status["checks"]["resources"] = {
        "cpu_percent": psutil.cpu_percent(interval=None),
        "memory_percent": memory.percent,
        "memory_available_mb": memory.available / (1024 * 1024),
    }

    return health_status

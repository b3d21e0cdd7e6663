"""
Health check da API
"""
import logging
import os
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core import storage
from app.core.dependencies import get_db
from app.core.config import settings
from app.models import car_model

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health Check"],
)


def _uploads_status() -> dict:
    root = storage.cars_root()
    exists = os.path.isdir(root)
    writable = exists and os.access(root, os.W_OK)
    return {
        "status": "healthy" if writable else "unhealthy",
        "root": root,
        "exists": exists,
        "writable": writable,
        "max_file_size_mb": settings.MAX_FILE_SIZE_MB,
    }


def _active_listings(db: Session) -> int:
    return db.query(car_model.Car).filter(car_model.Car.is_active == True).count()


@router.get(
    "/",
    status_code=status.HTTP_200_OK,
    summary="Health Check",
    description="Banco de dados, pasta de imagens dos anúncios e anúncios ativos"
)
def health_check(db: Session = Depends(get_db)):
    """
    Sem banco ou sem pasta gravável de imagens a API fica "degraded":
    leituras funcionam, uploads falham.
    """
    try:
        active = _active_listings(db)
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Erro ao consultar o banco de dados: {e}")
        active = None
        db_status = "unhealthy"

    uploads = _uploads_status()
    healthy = db_status == "healthy" and uploads["status"] == "healthy"

    return {
        "status": "healthy" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
        "database": {"status": db_status},
        "listings": {"active": active},
        "uploads": uploads,
        "rate_limiting": {"enabled": settings.RATE_LIMIT_ENABLED},
    }


@router.get("/ready", summary="Readiness Check")
def readiness_check(db: Session = Depends(get_db)):
    # pronto = banco responde e a pasta de imagens existe
    try:
        _active_listings(db)
    except SQLAlchemyError as e:
        logger.error(f"API não está pronta: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database"},
        )
    if not os.path.isdir(storage.cars_root()):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "uploads"},
        )
    return {"status": "ready", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/live", summary="Liveness Check")
def liveness_check():
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.settings import settings
from infra.db.session import SessionLocal

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health():
    database = "ok"
    try:
        with SessionLocal() as s:
            s.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", exc)
        database = "error"
    return {
        "status": "ok",
        "database": database,
        "ai_gateway_configured": bool(settings.AI_GATEWAY_API_KEY),
    }

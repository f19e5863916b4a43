from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

from app.db.session import get_db

import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/")
def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint that verifies API and database status.

    Args:
        db: Database session dependency

    Returns:
        dict: Health status of the API and database
    """
    health_status = {
        "status": "healthy",
        "api": "online",
        "database": "online",
    }

    # Check database connection
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["database"] = "offline"
        health_status["status"] = "unhealthy"

    return health_status

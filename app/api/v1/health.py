"""Health check endpoint with database connectivity check."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.common import Envelope
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=Envelope[HealthResponse], response_model_exclude_none=True)
def get_health(db: Session = Depends(get_db)) -> Envelope[HealthResponse]:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return Envelope(
        message="Server is running successfully",
        data=HealthResponse(
            status="ok",
            environment=settings.APP_ENV,
            database=db_status,
            timestamp=datetime.now(UTC).isoformat(),
        ),
    )

"""Health check endpoint with database connectivity."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.envelope import Envelope
from app.schemas.health import HealthData

router = APIRouter()


@router.get("", response_model=Envelope, response_model_exclude_none=True)
def get_health(db: Annotated[Session, Depends(get_db)]) -> Envelope:
    """Report environment and whether the credential store database answers. No token required."""
    connected = check_db_connected(db)
    data = HealthData(
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
    )
    return Envelope(
        success=connected,
        message="ok" if connected else "database unreachable",
        data=data.model_dump(),
    )

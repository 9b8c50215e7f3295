"""Health check endpoint with key-value database connectivity."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eletror.core.config import settings
from eletror.core.database import check_db_connected, get_db
from eletror.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health and whether the backing database answers.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        latency_simulated=settings.STORAGE_SIMULATE_LATENCY,
    )

"""Liveness endpoint reporting environment and database reachability."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from userhub.core.config import settings
from userhub.core.database import check_db_connected, get_db
from userhub.schemas.health import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Always 200 while the process is up; `database` says whether SELECT 1 worked."""
    connected = check_db_connected(db)
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        timestamp=datetime.now(UTC),
    )

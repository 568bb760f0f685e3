from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from member_map.core.config import settings
from member_map.db import database
from member_map.db.database import get_db
from member_map.schemas.health import HealthCheckResponse
from member_map.services.geocoder_service import geocoder_service

router = APIRouter()


@router.get("/health")
async def health_check(db: Session = Depends(get_db)) -> HealthCheckResponse:
    """
    Health check endpoint that verifies:
    - Database connectivity
    - Nominatim reverse geocoding availability

    Returns 200 if all services are healthy, 503 if any service is down.
    """
    database_health = database.health_check(db)
    geocoder_health = await geocoder_service.health_check()

    overall_healthy = database_health.healthy and geocoder_health.healthy

    response = HealthCheckResponse(
        service="member-map-backend",
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        healthy=overall_healthy,
        database=database_health,
        geocoder_service=geocoder_health,
    )

    if overall_healthy:
        return response
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=response.model_dump()
    )

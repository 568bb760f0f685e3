"""
Member Map API Endpoint

Provides member locations and points of interest for the shared map,
and lets members add and remove their own locations.
"""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from member_map.core.config import settings
from member_map.db.database import get_db
from member_map.models.user import User
from member_map.schemas.geo import LocationCreate
from member_map.schemas.location import (
    CoordinatesResponse,
    MemberLocationsResponse,
    PointsOfInterestResponse,
)
from member_map.services.auth_service import auth_service
from member_map.services.geocoder_service import geocoder_service
from member_map.services.location_service import location_service
from member_map.services.location_sync_service import location_sync_service


def ensure_map_enabled() -> None:
    """Answer 404 for every map route while the map is switched off."""
    if not settings.MAP_ENABLED:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")


router = APIRouter(dependencies=[Depends(ensure_map_enabled)])


def _schedule_sync(background_tasks: BackgroundTasks, user: User) -> None:
    if location_sync_service.enabled:
        background_tasks.add_task(
            location_sync_service.sync_location, str(user.username), user.geoinformation or ""
        )


@router.get("/locations", response_model=MemberLocationsResponse)
async def get_locations(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
) -> Any:
    """
    Get the locations of all members that published at least one.
    """
    return {"locations": location_service.get_member_locations(db)}


@router.get("/locations/me", response_model=CoordinatesResponse)
async def get_my_locations(
    current_user: User = Depends(auth_service.get_current_user),
) -> Any:
    """
    Get the locations of the authenticated member.
    """
    return {"coordinates": location_service.get_user_coordinates(current_user)}


@router.post("/locations", response_model=CoordinatesResponse)
async def add_location(
    location_in: LocationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
) -> Any:
    """
    Add a location for the authenticated member.

    The coordinates are reverse geocoded to store a place name like
    "10178 Berlin" with the location; a failed lookup stores none.

    Raises:
        HTTPException: 422 if the coordinates are out of range
    """
    location_service.ensure_valid_coordinates(location_in.lat, location_in.lng)

    name = await geocoder_service.lookup_location_name(location_in.lat, location_in.lng)
    coordinates = location_service.add_location(
        db,
        current_user,
        location_in.lat,
        location_in.lng,
        zoom=location_in.zoom,
        name=name,
    )
    _schedule_sync(background_tasks, current_user)
    return {"coordinates": coordinates}


@router.delete("/locations/{index}", response_model=CoordinatesResponse)
async def delete_location(
    index: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
) -> Any:
    """
    Delete the location at a 0-based index of the member's list.

    Raises:
        HTTPException: 422 if the index does not refer to a location
    """
    coordinates = location_service.delete_location(db, current_user, index)
    _schedule_sync(background_tasks, current_user)
    return {"coordinates": coordinates}


@router.get("/pois", response_model=PointsOfInterestResponse)
async def get_pois(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
) -> Any:
    """
    Get all points of interest from the configured topic category.
    """
    return {"pois": location_service.get_pois(db)}

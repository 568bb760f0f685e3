from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from member_map.db.database import get_db
from member_map.models.user import User
from member_map.schemas.user import GeoinformationUpdate, UserResponse
from member_map.services.auth_service import auth_service
from member_map.services.location_sync_service import location_sync_service
from member_map.services.user_service import user_service

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def read_current_user(
    current_user: User = Depends(auth_service.get_current_user),
) -> Any:
    """
    Get current user.
    """
    return current_user


@router.put("/me/geoinformation", response_model=UserResponse)
async def update_geoinformation(
    update_in: GeoinformationUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
) -> Any:
    """
    Replace the raw location string of the current user, as edited on the
    profile page. The text is stored as entered; fragments that do not
    parse are simply not shown on the map.
    """
    user = user_service.set_geoinformation(db, current_user, update_in.geoinformation.strip())
    if location_sync_service.enabled:
        background_tasks.add_task(
            location_sync_service.sync_location, str(user.username), user.geoinformation
        )
    return user

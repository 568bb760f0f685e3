import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from member_map.db.database import get_db
from member_map.schemas.token import Token
from member_map.schemas.user import UserCreate
from member_map.services.auth_service import auth_service
from member_map.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _token_for(user_id: int) -> dict:
    return {"access_token": auth_service.generate_access_token(user_id), "token_type": "bearer"}


@router.post("/register", response_model=Token)
async def register_user(
    user_in: UserCreate, db: Session = Depends(get_db)
) -> Any:
    """
    Register a new member and log them in.
    """
    hashed_password = auth_service.get_password_hash(user_in.password)

    # create_user validates username and password
    user = user_service.create_user(db, user_in, hashed_password)
    logger.info("Registered member %s", user.username)

    return _token_for(int(user.id))


@router.post("/login", response_model=Token)
async def login_for_access_token(
    db: Session = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    user = auth_service.authenticate_user(
        db, form_data.username, form_data.password
    )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _token_for(int(user.id))

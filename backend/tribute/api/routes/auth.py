"""
Authentication routes for register, login, logout and session lookup.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from tribute.db.session import get_db
from tribute.models.session import UserSession
from tribute.models.user import User
from tribute.schemas.common import MessageResponse
from tribute.schemas.user import AuthResponse, CurrentUserResponse, UserCreate, UserLogin
from tribute.core.exceptions import UnauthorizedError
from tribute.core.utils import format_message
from tribute.services import session_service, user_service
from tribute.api.dependencies import (
    clear_session_cookie, get_current_session, get_current_user_optional, set_session_cookie
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    response: Response,
    db: Session = Depends(get_db)
):
    """Register a new user and log them in."""
    user = user_service.register_user(user_data, db)
    session = session_service.create_session(user, db)
    set_session_cookie(response, session)

    return {"user": user_service.to_safe_user(user), "message": "Registration successful"}


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db)
):
    """Login and open a session."""
    user = user_service.authenticate_user(credentials.username, credentials.password, db)
    session = session_service.create_session(user, db)
    set_session_cookie(response, session)

    return {"user": user_service.to_safe_user(user), "message": "Login successful"}


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    session: Optional[UserSession] = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Destroy the current session. Calling it without a session is not an error."""
    if session is not None:
        user_id = session.user_id
        try:
            session_service.destroy_session(session.sid, db)
        except SQLAlchemyError:
            logger.exception("Failed to destroy session")
            db.rollback()
            failed = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=format_message("Logout failed")
            )
            clear_session_cookie(failed)
            return failed
        logger.info(f"User id={user_id} logged out")

    clear_session_cookie(response)
    return format_message("Logged out successfully")


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    session: Optional[UserSession] = Depends(get_current_session),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db)
):
    """Return the logged-in user, refreshing the session's cached snapshot."""
    if current_user is None:
        raise UnauthorizedError("Not authenticated")

    session_service.refresh_session_user(session, current_user, db)
    return {"user": user_service.to_safe_user(current_user)}

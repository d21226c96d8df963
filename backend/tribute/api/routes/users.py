"""
User profile routes.
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tribute.db.session import get_db
from tribute.schemas.user import SafeUser, UserAccessUpdate, UserProfileUpdate
from tribute.models.session import UserSession
from tribute.models.user import User
from tribute.services import session_service, user_service
from tribute.api.dependencies import get_current_session, get_current_user, require_admin

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/me", response_model=SafeUser)
async def update_my_profile(
    profile: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    session: Optional[UserSession] = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Update the current user's display fields."""
    user = user_service.update_profile(current_user, profile, db)
    if session is not None:
        session_service.refresh_session_user(session, user, db)
    return user_service.to_safe_user(user)


@router.get("/{user_id}", response_model=SafeUser)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db)
):
    """Get a user's public profile."""
    return user_service.get_safe_user(user_id, db)


@router.patch("/{user_id}", response_model=SafeUser)
async def update_user_access(
    user_id: int,
    access: UserAccessUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Change a user's role or ban state (admin only). Banning ends their sessions."""
    user = user_service.update_user_access(user_id, access, db)
    if not user.is_active:
        session_service.destroy_user_sessions(user.id, db)
    return user_service.to_safe_user(user)

"""
Authentication and authorization dependencies.

Identity comes from the session cookie, but the user row (and so the role)
is re-read from the database on every request; the snapshot cached in the
session payload is never trusted for authorization.
"""
from typing import Optional
from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session
from tribute.core.config import settings
from tribute.core.exceptions import ForbiddenError, UnauthorizedError
from tribute.core.security import sign_session_id, unsign_session_id
from tribute.db.session import get_db
from tribute.models.session import UserSession
from tribute.models.user import User, UserRole
from tribute.services import session_service, user_service


def set_session_cookie(response: Response, session: UserSession):
    """Attach the signed session id to the response."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sign_session_id(session.sid),
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite=settings.SESSION_COOKIE_SAMESITE,
        path="/",
    )


def clear_session_cookie(response: Response):
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")


def get_current_session(
    request: Request,
    db: Session = Depends(get_db)
) -> Optional[UserSession]:
    """Load the session referenced by the cookie, if any."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    sid = unsign_session_id(token)
    if not sid:
        return None

    return session_service.get_session(sid, db)


def get_current_user_optional(
    session: Optional[UserSession] = Depends(get_current_session),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Current user or None. Deleted and disabled accounts count as anonymous."""
    if session is None:
        return None

    user = user_service.get_user(session.user_id, db)
    if not user or not user.is_active:
        return None
    return user


def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    """Require an authenticated user."""
    if user is None:
        raise UnauthorizedError("Authentication required")
    return user


def require_role(role: UserRole):
    """
    Build a dependency that requires ``role`` or higher.
    Admin satisfies every role check.
    """
    def _require_role(user: Optional[User] = Depends(get_current_user_optional)) -> User:
        if user is None:
            raise UnauthorizedError("Authentication required")
        if not user.has_role(role):
            raise ForbiddenError(f"{role.value.capitalize()} access required")
        return user

    return _require_role


require_admin = require_role(UserRole.ADMIN)

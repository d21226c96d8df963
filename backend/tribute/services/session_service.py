"""
Session service: server-side session rows behind the session cookie.
"""
import logging
import secrets
from datetime import timedelta
from typing import Optional
from sqlalchemy.orm import Session
from tribute.core.config import settings
from tribute.core.utils import utcnow
from tribute.models.session import UserSession
from tribute.models.user import User
from tribute.services.user_service import to_safe_user

logger = logging.getLogger(__name__)


def _snapshot(user: User) -> dict:
    """Session payload for a user: id plus a cached SafeUser copy."""
    return {
        "userId": user.id,
        "user": to_safe_user(user).model_dump(mode="json", by_alias=True),
    }


def purge_expired_sessions(db: Session) -> int:
    """Delete expired session rows. Returns the number removed."""
    removed = db.query(UserSession).filter(
        UserSession.expire <= utcnow()
    ).delete(synchronize_session=False)
    return removed


def create_session(user: User, db: Session) -> UserSession:
    """Open a new session for ``user``."""
    purge_expired_sessions(db)

    session = UserSession(
        sid=secrets.token_urlsafe(32),
        user_id=user.id,
        expire=utcnow() + timedelta(days=settings.SESSION_TTL_DAYS),
    )
    session.payload = _snapshot(user)
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_session(sid: str, db: Session) -> Optional[UserSession]:
    """Get a live session by id. Expired rows are removed on read."""
    session = db.query(UserSession).filter(UserSession.sid == sid).first()
    if not session:
        return None

    if session.expire <= utcnow():
        db.delete(session)
        db.commit()
        return None

    return session


def refresh_session_user(session: UserSession, user: User, db: Session) -> UserSession:
    """Rewrite the cached user snapshot of a session."""
    session.payload = _snapshot(user)
    db.commit()
    return session


def destroy_session(sid: str, db: Session) -> bool:
    """Delete a session. Returns False when there was nothing to delete."""
    removed = db.query(UserSession).filter(
        UserSession.sid == sid
    ).delete(synchronize_session=False)
    db.commit()
    return removed > 0


def destroy_user_sessions(user_id: int, db: Session) -> int:
    """Delete every session belonging to ``user_id``."""
    removed = db.query(UserSession).filter(
        UserSession.user_id == user_id
    ).delete(synchronize_session=False)
    db.commit()

    if removed:
        logger.info(f"Destroyed {removed} session(s) for user id={user_id}")
    return removed

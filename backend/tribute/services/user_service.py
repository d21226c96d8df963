"""
User service: registration, credential checks and profile changes.
"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from tribute.core.exceptions import (
    ConflictError, ForbiddenError, InvalidCredentialsError, InvalidInputError, NotFoundError
)
from tribute.core.security import get_password_hash, verify_password
from tribute.core.utils import utcnow
from tribute.models.user import User, UserRole
from tribute.schemas.user import SafeUser, UserAccessUpdate, UserCreate, UserProfileUpdate

logger = logging.getLogger(__name__)


def to_safe_user(user: User) -> SafeUser:
    """Project a user row without its password hash."""
    return SafeUser.model_validate(user)


def get_user(user_id: int, db: Session) -> Optional[User]:
    """Get user by id."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(username: str, db: Session) -> Optional[User]:
    """Exact, case-sensitive username lookup."""
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(email: str, db: Session) -> Optional[User]:
    """Exact, case-sensitive email lookup."""
    return db.query(User).filter(User.email == email).first()


def get_safe_user(user_id: int, db: Session) -> SafeUser:
    """Get the public projection of a user or raise NotFoundError."""
    user = get_user(user_id, db)
    if not user:
        raise NotFoundError("User not found")
    return to_safe_user(user)


def register_user(user_data: UserCreate, db: Session) -> User:
    """Create a member account. Username and email must both be unused."""
    # usernames are matched exactly at login, so they are stored as sent
    username = user_data.username
    if username != username.strip():
        raise InvalidInputError("Username must not start or end with whitespace")
    if len(username) < 3:
        raise InvalidInputError("Username must be at least 3 characters")

    if get_user_by_username(username, db):
        raise ConflictError("Username already exists")

    if get_user_by_email(user_data.email, db):
        raise ConflictError("Email already exists")

    new_user = User(
        username=username,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        first_name=user_data.first_name or None,
        last_name=user_data.last_name or None,
        display_name=user_data.display_name or None,
        bio=user_data.bio or None,
        role=UserRole.MEMBER,
        is_active=True,
        post_count=0,
        thread_count=0,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent registration won the unique index
        db.rollback()
        raise ConflictError("Username or email already exists")
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.username} (id={new_user.id})")
    return new_user


def authenticate_user(username: str, password: str, db: Session) -> User:
    """
    Check credentials and record the login time.
    Unknown user and wrong password raise the same error.
    """
    user = get_user_by_username(username, db)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for username '{username}'")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning(f"Login refused for disabled account {user.username}")
        raise ForbiddenError("Account is disabled")

    user.last_login_at = utcnow()
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.username} logged in")
    return user


def update_profile(user: User, profile: UserProfileUpdate, db: Session) -> User:
    """Update the caller's own display fields. Only fields present in the request change."""
    changes = profile.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(user, field, value or None)
    db.commit()
    db.refresh(user)
    return user


def update_user_access(user_id: int, access: UserAccessUpdate, db: Session) -> User:
    """Admin change of role and/or active flag."""
    user = get_user(user_id, db)
    if not user:
        raise NotFoundError("User not found")

    changes = access.model_dump(exclude_unset=True)
    if changes.get("role") is None:
        changes.pop("role", None)
    if changes.get("is_active") is None:
        changes.pop("is_active", None)
    if not changes:
        raise InvalidInputError("Nothing to update")

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    logger.info(f"Access for user {user.username} changed: {changes}")
    return user

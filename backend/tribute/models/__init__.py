"""Models package - Import all models for SQLAlchemy registration."""
from tribute.models.user import User, UserRole
from tribute.models.forum import ForumCategory, ForumThread, ForumPost
from tribute.models.session import UserSession

__all__ = [
    "User",
    "UserRole",
    "ForumCategory",
    "ForumThread",
    "ForumPost",
    "UserSession",
]

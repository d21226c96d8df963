"""
User model for authentication and forum membership.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from tribute.db.base import BaseModel
import enum


class UserRole(str, enum.Enum):
    """User role enumeration. Admin supersedes moderator, moderator supersedes member."""
    MEMBER = "member"
    MODERATOR = "moderator"
    ADMIN = "admin"


ROLE_RANK = {
    UserRole.MEMBER: 0,
    UserRole.MODERATOR: 1,
    UserRole.ADMIN: 2,
}


class User(BaseModel):
    """Forum user. Username and email are unique by exact match."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    display_name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    role = Column(SQLEnum(UserRole), default=UserRole.MEMBER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)  # False = banned

    # Denormalized counters
    post_count = Column(Integer, default=0, nullable=False)
    thread_count = Column(Integer, default=0, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    # Relationships (no cascade, content outlives a deactivated author)
    threads = relationship("ForumThread", back_populates="author", foreign_keys="ForumThread.user_id")
    posts = relationship("ForumPost", back_populates="author", foreign_keys="ForumPost.user_id")

    def has_role(self, role: UserRole) -> bool:
        """True when this user's role is at least ``role``."""
        return ROLE_RANK[UserRole(self.role)] >= ROLE_RANK[UserRole(role)]

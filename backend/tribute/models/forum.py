"""
Forum models: categories, threads and posts.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from tribute.db.base import BaseModel
from tribute.core.utils import utcnow


class ForumCategory(BaseModel):
    """Top-level grouping of threads. Disabled via is_active, never hard-deleted."""
    __tablename__ = "forum_categories"

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Denormalized counters
    thread_count = Column(Integer, default=0, nullable=False)
    post_count = Column(Integer, default=0, nullable=False)
    last_post_id = Column(Integer, nullable=True)

    # Relationships
    threads = relationship("ForumThread", back_populates="category")


class ForumThread(BaseModel):
    """Discussion thread. ``content`` is the body of the opening post."""
    __tablename__ = "forum_threads"

    category_id = Column(Integer, ForeignKey("forum_categories.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    is_locked = Column(Boolean, default=False, nullable=False)
    is_sticky = Column(Boolean, default=False, nullable=False, index=True)

    # Denormalized counters and last reply pointer
    post_count = Column(Integer, default=0, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)
    last_post_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    last_post_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    last_post_id = Column(Integer, nullable=True)

    # Relationships
    category = relationship("ForumCategory", back_populates="threads")
    author = relationship("User", foreign_keys=[user_id], back_populates="threads")
    posts = relationship("ForumPost", back_populates="thread")


class ForumPost(BaseModel):
    """Reply within a thread. Soft-deleted via is_deleted."""
    __tablename__ = "forum_posts"

    thread_id = Column(Integer, ForeignKey("forum_threads.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    edit_count = Column(Integer, default=0, nullable=False)
    edited_at = Column(DateTime, nullable=True)
    edited_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    # Relationships
    thread = relationship("ForumThread", back_populates="posts")
    author = relationship("User", foreign_keys=[user_id], back_populates="posts")
